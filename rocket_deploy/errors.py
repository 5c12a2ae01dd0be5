"""Exception hierarchy shared by the deployment helpers."""
from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when the settings cannot be resolved from the environment."""


class CompilationError(RuntimeError):
    """Raised when Solidity sources cannot be compiled into artifacts."""


class DeploymentError(RuntimeError):
    """Base class for failures that abort a deployment run."""


class FactoryResolutionError(DeploymentError):
    """The named contract artifact is unavailable (not compiled, misspelled, ambiguous)."""


class DeploymentSubmissionError(DeploymentError):
    """The transport rejected the deployment or never confirmed it."""


class ModuleExecutionError(DeploymentError):
    """A call step of a deployment module failed after its contract was deployed."""


__all__ = [
    "CompilationError",
    "ConfigurationError",
    "DeploymentError",
    "DeploymentSubmissionError",
    "FactoryResolutionError",
    "ModuleExecutionError",
]
