"""Keccak-256 Merkle tree over a whitelist of eligible addresses.

Leaves are ``keccak(address)`` over the address text as written in the input
file. A parent is ``keccak(left_hex + right_hex)`` over the concatenated hex
digests of its children. When a level has an odd number of nodes the last one
is carried up to the next level unchanged. A proof lists the sibling hashes
from the leaf towards the root.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from eth_utils import keccak


@dataclass
class MerkleNode:
    hash: str
    left: Optional["MerkleNode"] = None
    right: Optional["MerkleNode"] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "left": self.left.as_dict() if self.left is not None else None,
            "right": self.right.as_dict() if self.right is not None else None,
        }


def hash_leaf(address: str) -> str:
    return keccak(text=address).hex()


def hash_pair(left: str, right: str) -> str:
    return keccak(text=left + right).hex()


def read_addresses(path: Path) -> List[str]:
    """Return the non-blank lines of ``path`` in file order."""

    lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def build_merkle_tree(addresses: Iterable[str]) -> MerkleNode:
    """Build the tree for ``addresses`` and return its root.

    Raises
    ------
    ValueError
        If ``addresses`` is empty.
    """

    level = [MerkleNode(hash_leaf(address)) for address in addresses]
    if not level:
        raise ValueError("Cannot build a Merkle tree without any addresses.")

    while len(level) > 1:
        next_level: List[MerkleNode] = []
        for index in range(0, len(level), 2):
            if index + 1 < len(level):
                left, right = level[index], level[index + 1]
                next_level.append(MerkleNode(hash_pair(left.hash, right.hash), left, right))
            else:
                next_level.append(level[index])
        level = next_level
    return level[0]


def _collect_proof(node: MerkleNode, target: str, proof: List[str]) -> bool:
    if node.hash == target:
        return True
    if node.left is not None and _collect_proof(node.left, target, proof):
        if node.right is not None:
            proof.append(node.right.hash)
        return True
    if node.right is not None and _collect_proof(node.right, target, proof):
        if node.left is not None:
            proof.append(node.left.hash)
        return True
    return False


def merkle_proof(root: MerkleNode, address: str) -> List[str]:
    """Sibling hashes proving ``address`` is in the tree; empty when it is not."""

    proof: List[str] = []
    if not _collect_proof(root, hash_leaf(address), proof):
        return []
    return proof


__all__ = [
    "MerkleNode",
    "build_merkle_tree",
    "hash_leaf",
    "hash_pair",
    "merkle_proof",
    "read_addresses",
]
