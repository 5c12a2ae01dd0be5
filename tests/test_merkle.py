from __future__ import annotations

from pathlib import Path

import pytest
from eth_utils import keccak

from rocket_deploy.merkle import build_merkle_tree, hash_leaf, hash_pair, merkle_proof, read_addresses

from tests.fakes import ACCOUNTS

A, B, C = ACCOUNTS


def test_leaf_and_pair_hashes_use_hex_text() -> None:
    assert hash_leaf(A) == keccak(text=A).hex()
    assert hash_pair("ab", "cd") == keccak(text="abcd").hex()
    assert not hash_leaf(A).startswith("0x")
    assert len(hash_leaf(A)) == 64


def test_empty_whitelist_is_rejected() -> None:
    with pytest.raises(ValueError, match="without any addresses"):
        build_merkle_tree([])


def test_single_leaf_is_the_root() -> None:
    root = build_merkle_tree([A])

    assert root.hash == hash_leaf(A)
    assert root.left is None and root.right is None
    assert merkle_proof(root, A) == []


def test_odd_level_carries_the_last_node_up() -> None:
    ha, hb, hc = hash_leaf(A), hash_leaf(B), hash_leaf(C)
    hab = hash_pair(ha, hb)

    root = build_merkle_tree([A, B, C])

    assert root.hash == hash_pair(hab, hc)
    assert root.left.hash == hab
    assert root.right.hash == hc
    assert root.right.left is None


def test_proofs_list_siblings_from_leaf_to_root() -> None:
    ha, hb, hc = hash_leaf(A), hash_leaf(B), hash_leaf(C)
    root = build_merkle_tree([A, B, C])

    assert merkle_proof(root, A) == [hb, hc]
    assert merkle_proof(root, B) == [ha, hc]
    assert merkle_proof(root, C) == [hash_pair(ha, hb)]


def test_proof_for_unknown_address_is_empty() -> None:
    root = build_merkle_tree([A, B])

    assert merkle_proof(root, C) == []


def test_addresses_are_hashed_as_written() -> None:
    root = build_merkle_tree([A.upper()])

    assert merkle_proof(build_merkle_tree([A.upper(), B]), A) == []
    assert root.hash != hash_leaf(A)


def test_read_addresses_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "eligible_addresses.txt"
    path.write_text(f"{A}\n\n  {B}  \n", encoding="utf-8")

    assert read_addresses(path) == [A, B]


def test_as_dict_mirrors_the_tree() -> None:
    root = build_merkle_tree([A, B])

    tree = root.as_dict()
    assert tree["hash"] == root.hash
    assert tree["left"] == {"hash": hash_leaf(A), "left": None, "right": None}
    assert tree["right"]["hash"] == hash_leaf(B)
