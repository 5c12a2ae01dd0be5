"""Resolve a contract factory, deploy it and report the resulting address."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, List, Protocol, TextIO, Tuple

from eth_utils import is_hex_address

from .errors import DeploymentError, DeploymentSubmissionError, FactoryResolutionError

_LOGGER = logging.getLogger(__name__)

DEFAULT_CONTRACT = "Rocket"
SUCCESS_TEMPLATE = "Success! Contract was deployed to: {address}"


@dataclass(frozen=True)
class DeploymentRequest:
    contract_name: str = DEFAULT_CONTRACT
    constructor_args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class DeployedContract:
    """Handle for a contract whose creation transaction has been confirmed."""

    name: str
    address: str
    transaction_hash: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.address, str) or not is_hex_address(self.address):
            raise ValueError(f"Deployment of {self.name} returned a malformed address: {self.address!r}")


class ExitOutcome(IntEnum):
    SUCCESS = 0
    FAILURE = 1


class DeploymentState(str, Enum):
    RESOLVING = "resolving"
    DEPLOYING = "deploying"
    DONE = "done"
    FAILED = "failed"


class ContractFactory(Protocol):
    def deploy(self, *args: Any) -> DeployedContract:
        ...


class FactoryProvider(Protocol):
    def get_factory(self, name: str) -> ContractFactory:
        ...


class DeploymentOrchestrator:
    """Runs the resolve → deploy sequence once and records the states it passed through.

    Every failure is terminal. Exceptions from the provider are wrapped into
    :class:`FactoryResolutionError` or :class:`DeploymentSubmissionError`
    depending on the step that raised them; the typed errors pass through
    unchanged.
    """

    def __init__(self, provider: FactoryProvider) -> None:
        self.provider = provider
        self.state = DeploymentState.RESOLVING
        self.history: List[DeploymentState] = [self.state]

    def _enter(self, state: DeploymentState) -> None:
        _LOGGER.debug("Deployment state %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def run(self, request: DeploymentRequest) -> DeployedContract:
        if self.state is not DeploymentState.RESOLVING:
            raise RuntimeError("An orchestrator performs exactly one deployment attempt.")

        try:
            factory = self.provider.get_factory(request.contract_name)
        except FactoryResolutionError:
            self._enter(DeploymentState.FAILED)
            raise
        except Exception as exc:
            self._enter(DeploymentState.FAILED)
            raise FactoryResolutionError(
                f"Could not resolve a factory for {request.contract_name!r}: {exc}"
            ) from exc

        self._enter(DeploymentState.DEPLOYING)
        _LOGGER.info("Deploying %s", request.contract_name)
        try:
            contract = factory.deploy(*request.constructor_args)
        except DeploymentSubmissionError:
            self._enter(DeploymentState.FAILED)
            raise
        except Exception as exc:
            self._enter(DeploymentState.FAILED)
            raise DeploymentSubmissionError(f"Deployment of {request.contract_name} failed: {exc}") from exc

        self._enter(DeploymentState.DONE)
        return contract


def deploy_contract(provider: FactoryProvider, request: DeploymentRequest) -> DeployedContract:
    return DeploymentOrchestrator(provider).run(request)


def run_deployment(
    provider: FactoryProvider,
    request: DeploymentRequest | None = None,
    *,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> ExitOutcome:
    """Deploy ``request`` (``Rocket`` by default) and report the outcome as one line.

    The success line goes to ``out`` (stdout), the failure line to ``err``
    (stderr). The return value is the process exit status.
    """

    request = request or DeploymentRequest()
    out = out or sys.stdout
    err = err or sys.stderr

    try:
        contract = deploy_contract(provider, request)
    except DeploymentError as exc:
        _LOGGER.debug("Deployment of %s failed", request.contract_name, exc_info=True)
        print(f"{type(exc).__name__}: {exc}", file=err)
        return ExitOutcome.FAILURE

    print(SUCCESS_TEMPLATE.format(address=contract.address), file=out)
    return ExitOutcome.SUCCESS


__all__ = [
    "DEFAULT_CONTRACT",
    "ContractFactory",
    "DeployedContract",
    "DeploymentOrchestrator",
    "DeploymentRequest",
    "DeploymentState",
    "ExitOutcome",
    "FactoryProvider",
    "deploy_contract",
    "run_deployment",
]
