"""web3.py implementation of the factory and signer providers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Type

import requests
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception
from web3.middleware import ExtraDataToPOAMiddleware

from .artifacts import ArtifactStore, ContractArtifact
from .config import NetworkConfig, Settings
from .deployer import DeployedContract
from .errors import DeploymentError, DeploymentSubmissionError, ModuleExecutionError

_LOGGER = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (Web3Exception, ValueError, requests.RequestException)


@dataclass(frozen=True)
class NodeAccount:
    """An account unlocked on the node itself; transactions are signed remotely."""

    address: str


def connect_web3(network: NetworkConfig) -> Web3:
    """Return a ``Web3`` client for ``network``. No request is sent until first use."""

    w3 = Web3(Web3.HTTPProvider(network.url))
    if network.poa:
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    return w3


class Web3ContractFactory:
    def __init__(self, provider: "Web3ContractProvider", artifact: ContractArtifact) -> None:
        self.provider = provider
        self.artifact = artifact

    @property
    def contract_name(self) -> str:
        return self.artifact.contract_name

    def deploy(self, *args: Any) -> DeployedContract:
        return self.provider.deploy_artifact(self.artifact, args)


class Web3ContractProvider:
    """Resolves factories from an :class:`ArtifactStore` and submits through ``w3``.

    Configured private keys sign locally and the raw transaction is sent; when a
    network has no keys the node's own accounts are used instead. The first
    signer deploys.
    """

    def __init__(
        self,
        w3: Any,
        network: NetworkConfig,
        artifacts: ArtifactStore,
        signers: Sequence[Any] | None = None,
    ) -> None:
        self.w3 = w3
        self.network = network
        self.artifacts = artifacts
        self._signers: List[Any] | None = list(signers) if signers is not None else None
        self._chain_checked = False

    @classmethod
    def connect(cls, settings: Settings, network_name: str | None = None) -> "Web3ContractProvider":
        network = settings.network(network_name)
        return cls(connect_web3(network), network, ArtifactStore(settings.artifacts_dir))

    @property
    def chain_id(self) -> int:
        return int(self.w3.eth.chain_id)

    def get_signers(self) -> List[Any]:
        if self._signers is None:
            if self.network.accounts:
                self._signers = list(self.network.load_signers())
            else:
                self._signers = [NodeAccount(address) for address in self.w3.eth.accounts]
        return list(self._signers)

    def get_factory(self, name: str) -> Web3ContractFactory:
        return Web3ContractFactory(self, self.artifacts.load(name))

    def _verify_chain(self) -> None:
        if self._chain_checked or self.network.chain_id is None:
            return
        actual = self.chain_id
        if actual != self.network.chain_id:
            raise DeploymentSubmissionError(
                f"Network {self.network.name!r} expects chain id {self.network.chain_id}, "
                f"but {self.network.url} reports {actual}"
            )
        self._chain_checked = True

    def _submit(self, call: Any, description: str, error_cls: Type[DeploymentError]) -> Tuple[str, Any]:
        timeout = self.network.confirmation_timeout
        try:
            self._verify_chain()
            signers = self.get_signers()
            if not signers:
                raise error_cls(f"No signer is available on network {self.network.name!r}")
            signer = signers[0]

            if isinstance(signer, NodeAccount):
                tx_hash = call.transact({"from": signer.address})
            else:
                nonce = self.w3.eth.get_transaction_count(signer.address, "pending")
                tx = call.build_transaction({"from": signer.address, "nonce": nonce})
                signed = signer.sign_transaction(tx)
                tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)

            tx_hex = Web3.to_hex(tx_hash)
            _LOGGER.info("%s submitted from %s in %s", description, signer.address, tx_hex)
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        except TimeExhausted as exc:
            raise error_cls(f"{description} was not confirmed within {timeout:g}s") from exc
        except _TRANSPORT_ERRORS as exc:
            raise error_cls(f"{description} was rejected: {exc}") from exc

        if receipt["status"] == 0:
            raise error_cls(f"{description} reverted in transaction {tx_hex}")
        return tx_hex, receipt

    def deploy_artifact(self, artifact: ContractArtifact, args: Sequence[Any] = ()) -> DeployedContract:
        contract = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        try:
            constructor = contract.constructor(*args)
        except _TRANSPORT_ERRORS as exc:
            raise DeploymentSubmissionError(
                f"Constructor arguments for {artifact.contract_name} do not match its ABI: {exc}"
            ) from exc

        tx_hex, receipt = self._submit(
            constructor, f"Deployment of {artifact.contract_name}", DeploymentSubmissionError
        )
        address = receipt["contractAddress"]
        if not address:
            raise DeploymentSubmissionError(f"Receipt for {tx_hex} carries no contract address")
        _LOGGER.info("%s confirmed at %s", artifact.contract_name, address)
        return DeployedContract(name=artifact.contract_name, address=address, transaction_hash=tx_hex)

    def transact(self, deployed: DeployedContract, method: str, *args: Any) -> str:
        """Send a state-changing call to ``deployed`` and wait for it to confirm."""

        artifact = self.artifacts.load(deployed.name)
        contract = self.w3.eth.contract(address=Web3.to_checksum_address(deployed.address), abi=artifact.abi)
        try:
            call = getattr(contract.functions, method)(*args)
        except AttributeError as exc:
            raise ModuleExecutionError(f"{deployed.name} has no function {method!r}") from exc
        except _TRANSPORT_ERRORS as exc:
            raise ModuleExecutionError(f"Arguments for {deployed.name}.{method} do not match its ABI: {exc}") from exc

        tx_hex, _receipt = self._submit(call, f"Call {deployed.name}.{method}", ModuleExecutionError)
        return tx_hex


__all__ = [
    "NodeAccount",
    "Web3ContractFactory",
    "Web3ContractProvider",
    "connect_web3",
]
