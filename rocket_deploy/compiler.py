"""Compile ``contracts/**/*.sol`` with the configured solc into artifacts."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import solcx
from solcx.exceptions import SolcError, SolcInstallationError

from .artifacts import ArtifactStore, ContractArtifact
from .config import Settings
from .errors import CompilationError

_LOGGER = logging.getLogger(__name__)


def gather_sources(sources_dir: Path) -> Dict[str, Dict[str, str]]:
    """Map each source name (``contracts/Rocket.sol``) to its content."""

    sources_dir = Path(sources_dir)
    if not sources_dir.is_dir():
        return {}
    base = sources_dir.parent
    sources: Dict[str, Dict[str, str]] = {}
    for path in sorted(sources_dir.rglob("*.sol")):
        source_name = path.relative_to(base).as_posix()
        sources[source_name] = {"content": path.read_text(encoding="utf-8")}
    return sources


def ensure_solc(version: str) -> None:
    installed = {str(item) for item in solcx.get_installed_solc_versions()}
    if version in installed:
        return
    _LOGGER.info("Installing solc %s", version)
    try:
        solcx.install_solc(version)
    except (SolcInstallationError, OSError, ValueError) as exc:
        raise CompilationError(f"Unable to install solc {version}: {exc}") from exc


def _standard_input(sources: Dict[str, Dict[str, str]]) -> Dict[str, Any]:
    return {
        "language": "Solidity",
        "sources": sources,
        "settings": {
            "outputSelection": {"*": {"*": ["abi", "evm.bytecode.object"]}},
        },
    }


def compile_contracts(settings: Settings) -> List[ContractArtifact]:
    """Compile every source and write one artifact per contract.

    Raises
    ------
    CompilationError
        If there are no sources, solc cannot be installed, or compilation fails.
    """

    sources = gather_sources(settings.sources_dir)
    if not sources:
        raise CompilationError(f"No Solidity sources found in {settings.sources_dir}")

    ensure_solc(settings.solidity_version)
    _LOGGER.info("Compiling %d source(s) with solc %s", len(sources), settings.solidity_version)
    try:
        output = solcx.compile_standard(_standard_input(sources), solc_version=settings.solidity_version)
    except SolcError as exc:
        raise CompilationError(f"solc {settings.solidity_version} failed: {exc}") from exc

    for diagnostic in output.get("errors", []):
        _LOGGER.warning("%s", diagnostic.get("formattedMessage") or diagnostic.get("message"))

    store = ArtifactStore(settings.artifacts_dir)
    artifacts: List[ContractArtifact] = []
    for source_name, contracts in sorted(output.get("contracts", {}).items()):
        for contract_name, data in sorted(contracts.items()):
            bytecode = data.get("evm", {}).get("bytecode", {}).get("object", "")
            artifact = ContractArtifact(
                contract_name=contract_name,
                source_name=source_name,
                abi=data.get("abi", []),
                bytecode="0x" + bytecode,
            )
            store.write(artifact)
            artifacts.append(artifact)
    return artifacts


__all__ = ["compile_contracts", "ensure_solc", "gather_sources"]
