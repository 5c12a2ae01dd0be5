"""Test doubles standing in for the web3-backed providers."""
from __future__ import annotations

import itertools
from types import SimpleNamespace
from typing import Any, Iterable, Iterator, List, Tuple

from rocket_deploy.deployer import DeployedContract
from rocket_deploy.errors import FactoryResolutionError

ROCKET_ADDRESS = "0xABCDabcdABCDabcdABCDabcdABCDabcdABCD1234"
ACCOUNTS = (
    "0x1111111111111111111111111111111111111111",
    "0x2222222222222222222222222222222222222222",
    "0x3333333333333333333333333333333333333333",
)


def make_address(index: int) -> str:
    return "0x" + f"{index:040x}"


class FakeFactory:
    def __init__(self, name: str, addresses: Iterator[str], error: Exception | None = None) -> None:
        self.name = name
        self.addresses = addresses
        self.error = error
        self.calls: List[Tuple[Any, ...]] = []

    def deploy(self, *args: Any) -> DeployedContract:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        address = next(self.addresses)
        return DeployedContract(name=self.name, address=address, transaction_hash="0x" + "ab" * 32)


class FakeProvider:
    """Catalog-backed provider; every deployment gets a fresh address."""

    def __init__(
        self,
        catalog: Iterable[str] = ("Rocket",),
        *,
        addresses: Iterable[str] | None = None,
        deploy_error: Exception | None = None,
        transact_error: Exception | None = None,
        signers: Iterable[str] = ACCOUNTS,
        chain_id: int = 31337,
    ) -> None:
        self.catalog = set(catalog)
        self.addresses = iter(addresses) if addresses is not None else (make_address(i) for i in itertools.count(1))
        self.deploy_error = deploy_error
        self.transact_error = transact_error
        self.signers = [SimpleNamespace(address=address) for address in signers]
        self.chain_id = chain_id
        self.requested: List[str] = []
        self.factories: List[FakeFactory] = []
        self.transactions: List[Tuple[str, str, Tuple[Any, ...]]] = []

    def get_factory(self, name: str) -> FakeFactory:
        self.requested.append(name)
        if name not in self.catalog:
            raise FactoryResolutionError(f"Artifact for contract {name!r} not found")
        factory = FakeFactory(name, self.addresses, self.deploy_error)
        self.factories.append(factory)
        return factory

    def get_signers(self) -> List[SimpleNamespace]:
        return list(self.signers)

    def transact(self, deployed: DeployedContract, method: str, *args: Any) -> str:
        if self.transact_error is not None:
            raise self.transact_error
        self.transactions.append((deployed.address, method, args))
        return "0x" + "cd" * 32
