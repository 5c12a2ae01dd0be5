"""Deployment helpers for the Rocket contract project."""
from __future__ import annotations

from .artifacts import ArtifactStore, ContractArtifact
from .config import NetworkConfig, Settings, load_settings
from .deployer import (
    DeployedContract,
    DeploymentOrchestrator,
    DeploymentRequest,
    DeploymentState,
    ExitOutcome,
    deploy_contract,
    run_deployment,
)
from .errors import (
    CompilationError,
    ConfigurationError,
    DeploymentError,
    DeploymentSubmissionError,
    FactoryResolutionError,
    ModuleExecutionError,
)

__all__ = [
    "ArtifactStore",
    "CompilationError",
    "ConfigurationError",
    "ContractArtifact",
    "DeployedContract",
    "DeploymentError",
    "DeploymentOrchestrator",
    "DeploymentRequest",
    "DeploymentState",
    "DeploymentSubmissionError",
    "ExitOutcome",
    "FactoryResolutionError",
    "ModuleExecutionError",
    "NetworkConfig",
    "Settings",
    "deploy_contract",
    "load_settings",
    "run_deployment",
]
