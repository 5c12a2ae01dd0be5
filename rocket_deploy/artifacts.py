"""On-disk build artifacts: one JSON document per compiled contract."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import FactoryResolutionError

_LOGGER = logging.getLogger(__name__)

ARTIFACT_FORMAT = "rocket-artifact-1"


@dataclass(frozen=True)
class ContractArtifact:
    """ABI and creation bytecode for a single contract."""

    contract_name: str
    source_name: str
    abi: List[Dict[str, Any]] = field(default_factory=list)
    bytecode: str = "0x"

    @property
    def deployable(self) -> bool:
        # interfaces and abstract contracts compile to empty bytecode
        return self.bytecode not in ("", "0x")

    def as_dict(self) -> Dict[str, Any]:
        return {
            "_format": ARTIFACT_FORMAT,
            "contractName": self.contract_name,
            "sourceName": self.source_name,
            "abi": self.abi,
            "bytecode": self.bytecode,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ContractArtifact":
        bytecode = payload.get("bytecode") or "0x"
        if isinstance(bytecode, dict):  # solc standard-json shape: {"object": "..."}
            bytecode = bytecode.get("object") or "0x"
        if not bytecode.startswith("0x"):
            bytecode = "0x" + bytecode
        return cls(
            contract_name=payload["contractName"],
            source_name=payload.get("sourceName", ""),
            abi=list(payload.get("abi") or []),
            bytecode=bytecode,
        )


class ArtifactStore:
    """Reads and writes artifacts below ``root`` as ``<source>/<Name>.json``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, source_name: str, contract_name: str) -> Path:
        return self.root / source_name / f"{contract_name}.json"

    def write(self, artifact: ContractArtifact) -> Path:
        path = self.path_for(artifact.source_name, artifact.contract_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(artifact.as_dict(), indent=2) + "\n", encoding="utf-8")
        _LOGGER.debug("Wrote artifact %s", path)
        return path

    def _candidates(self, contract_name: str) -> List[Path]:
        if not self.root.is_dir():
            return []
        return sorted(
            path
            for path in self.root.rglob(f"{contract_name}.json")
            if not path.name.endswith(".dbg.json")
        )

    def names(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted({path.stem for path in self.root.rglob("*.json") if not path.name.endswith(".dbg.json")})

    def load(self, contract_name: str) -> ContractArtifact:
        """Return the artifact for ``contract_name``.

        Raises
        ------
        FactoryResolutionError
            If no artifact (or more than one) matches, the file cannot be parsed,
            or the contract has no creation bytecode.
        """

        candidates = self._candidates(contract_name)
        if not candidates:
            raise FactoryResolutionError(
                f"Artifact for contract {contract_name!r} not found in {self.root}. "
                "Check the name or compile the contracts first."
            )
        if len(candidates) > 1:
            listed = ", ".join(str(path.relative_to(self.root)) for path in candidates)
            raise FactoryResolutionError(
                f"Contract name {contract_name!r} is ambiguous; matching artifacts: {listed}"
            )

        path = candidates[0]
        try:
            artifact = ContractArtifact.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, KeyError, AttributeError) as exc:
            raise FactoryResolutionError(f"Artifact {path} is malformed: {exc}") from exc

        if not artifact.deployable:
            raise FactoryResolutionError(
                f"Contract {contract_name!r} has no bytecode; it is abstract or an interface."
            )
        return artifact


__all__ = ["ARTIFACT_FORMAT", "ArtifactStore", "ContractArtifact"]
