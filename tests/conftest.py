"""Shared fixtures; nothing here talks to a real node."""
from __future__ import annotations

from pathlib import Path

import pytest

from rocket_deploy.artifacts import ArtifactStore, ContractArtifact
from rocket_deploy.config import NetworkConfig, Settings

ROCKET_ABI = [
    {"inputs": [], "stateMutability": "nonpayable", "type": "constructor"},
    {"inputs": [], "name": "launch", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {
        "inputs": [],
        "name": "status",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
]


@pytest.fixture()
def rocket_artifact() -> ContractArtifact:
    return ContractArtifact(
        contract_name="Rocket",
        source_name="contracts/Rocket.sol",
        abi=ROCKET_ABI,
        bytecode="0x6080604052348015600f57600080fd5b50",
    )


@pytest.fixture()
def artifact_store(tmp_path: Path, rocket_artifact: ContractArtifact) -> ArtifactStore:
    store = ArtifactStore(tmp_path / "artifacts")
    store.write(rocket_artifact)
    return store


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        networks={
            "localhost": NetworkConfig(name="localhost", url="http://127.0.0.1:8545", chain_id=31337),
        },
        default_network="localhost",
        artifacts_dir=tmp_path / "artifacts",
        sources_dir=tmp_path / "contracts",
        deployments_dir=tmp_path / "ignition" / "deployments",
    )
