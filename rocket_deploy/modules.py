"""Declarative deployment modules and a sequential executor for them.

A module is a static, ordered description of deployment steps::

    APOLLO = build_module("Apollo", _define_apollo)

where the definition function receives a :class:`ModuleBuilder`, declares
contract deployments and calls, and returns the futures it wants to expose.
:func:`execute_module` walks the futures in declaration order. When a
:class:`DeploymentJournal` is supplied, completed futures are recorded under
``<deployments_dir>/chain-<id>/`` and reused by later runs.
"""
from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Tuple, Union

from .deployer import DeployedContract, DeploymentRequest, deploy_contract
from .errors import ConfigurationError, DeploymentError, ModuleExecutionError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractFuture:
    id: str
    contract_name: str
    args: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class CallFuture:
    id: str
    contract: ContractFuture
    method: str
    args: Tuple[Any, ...] = ()


Future = Union[ContractFuture, CallFuture]


@dataclass(frozen=True)
class DeploymentModule:
    name: str
    futures: Tuple[Future, ...]
    results: Mapping[str, ContractFuture] = field(default_factory=dict)


class ModuleBuilder:
    def __init__(self, module_name: str) -> None:
        self.module_name = module_name
        self._futures: List[Future] = []
        self._ids: set[str] = set()

    def _register(self, future: Future) -> None:
        if future.id in self._ids:
            raise ValueError(f"Duplicate future id {future.id!r}; pass an explicit id to disambiguate")
        self._ids.add(future.id)
        self._futures.append(future)

    def contract(self, contract_name: str, *args: Any, id: Optional[str] = None) -> ContractFuture:
        future = ContractFuture(
            id=f"{self.module_name}#{id or contract_name}",
            contract_name=contract_name,
            args=tuple(args),
        )
        self._register(future)
        return future

    def call(self, contract: ContractFuture, method: str, *args: Any, id: Optional[str] = None) -> CallFuture:
        if contract not in self._futures:
            raise ValueError(f"{contract.id} was not declared in module {self.module_name}")
        future = CallFuture(
            id=f"{contract.id}.{id or method}",
            contract=contract,
            method=method,
            args=tuple(args),
        )
        self._register(future)
        return future

    @property
    def futures(self) -> Tuple[Future, ...]:
        return tuple(self._futures)


def build_module(
    name: str, define: Callable[[ModuleBuilder], Optional[Mapping[str, ContractFuture]]]
) -> DeploymentModule:
    if not name or not name.isidentifier():
        raise ValueError(f"Module name must be an identifier, got {name!r}")
    builder = ModuleBuilder(name)
    results = dict(define(builder) or {})
    return DeploymentModule(name=name, futures=builder.futures, results=results)


class DeploymentJournal:
    """Completed futures for one chain, as JSON lines plus an address summary."""

    JOURNAL_FILE = "journal.jsonl"
    ADDRESSES_FILE = "deployed_addresses.json"

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    @classmethod
    def for_chain(cls, deployments_dir: Path, chain_id: int) -> "DeploymentJournal":
        return cls(Path(deployments_dir) / f"chain-{chain_id}")

    @property
    def journal_path(self) -> Path:
        return self.directory / self.JOURNAL_FILE

    @property
    def addresses_path(self) -> Path:
        return self.directory / self.ADDRESSES_FILE

    def _parse_line(self, line: str, number: int) -> Dict[str, Any]:
        location = f"{self.journal_path}:{number}"
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Journal entry {location} is not valid JSON: {exc}") from exc
        if not isinstance(record, dict) or not isinstance(record.get("futureId"), str):
            raise ConfigurationError(f"Journal entry {location} has no futureId; fix or --reset the journal")
        if record.get("type") == "contract" and not isinstance(record.get("address"), str):
            raise ConfigurationError(f"Journal entry {location} records a contract without an address")
        return record

    def entries(self) -> Dict[str, Dict[str, Any]]:
        if not self.journal_path.exists():
            return {}
        entries: Dict[str, Dict[str, Any]] = {}
        lines = self.journal_path.read_text(encoding="utf-8").splitlines()
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            record = self._parse_line(line, number)
            entries[record["futureId"]] = record
        return entries

    def get(self, future_id: str) -> Optional[Dict[str, Any]]:
        return self.entries().get(future_id)

    def _append(self, record: Dict[str, Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with self.journal_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    def record_contract(self, future: ContractFuture, contract: DeployedContract) -> None:
        self._append(
            {
                "futureId": future.id,
                "type": "contract",
                "contractName": contract.name,
                "address": contract.address,
                "transactionHash": contract.transaction_hash,
            }
        )
        addresses = self.deployed_addresses()
        addresses[future.id] = contract.address
        self.addresses_path.write_text(json.dumps(addresses, indent=2) + "\n", encoding="utf-8")

    def record_call(self, future: CallFuture, transaction_hash: Optional[str]) -> None:
        self._append({"futureId": future.id, "type": "call", "transactionHash": transaction_hash})

    def deployed_addresses(self) -> Dict[str, str]:
        if not self.addresses_path.exists():
            return {}
        try:
            addresses = json.loads(self.addresses_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{self.addresses_path} is not valid JSON: {exc}") from exc
        if not isinstance(addresses, dict):
            raise ConfigurationError(f"{self.addresses_path} must map future ids to addresses")
        return addresses

    def reset(self) -> None:
        if self.directory.exists():
            shutil.rmtree(self.directory)


class ModuleProvider(Protocol):
    def get_factory(self, name: str) -> Any:
        ...

    def transact(self, deployed: DeployedContract, method: str, *args: Any) -> Optional[str]:
        ...


@dataclass
class ModuleResult:
    module: DeploymentModule
    contracts: Dict[str, DeployedContract] = field(default_factory=dict)
    calls: Dict[str, Optional[str]] = field(default_factory=dict)
    reused: List[str] = field(default_factory=list)

    @property
    def results(self) -> Dict[str, DeployedContract]:
        return {name: self.contracts[future.id] for name, future in self.module.results.items()}


def execute_module(
    module: DeploymentModule,
    provider: ModuleProvider,
    journal: Optional[DeploymentJournal] = None,
) -> ModuleResult:
    """Run every future of ``module`` in order; the first failure aborts the run."""

    completed = journal.entries() if journal is not None else {}
    result = ModuleResult(module=module)

    for future in module.futures:
        record = completed.get(future.id)

        if isinstance(future, ContractFuture):
            if record is not None:
                try:
                    contract = DeployedContract(
                        name=future.contract_name,
                        address=record["address"],
                        transaction_hash=record.get("transactionHash"),
                    )
                except ValueError as exc:
                    raise ConfigurationError(f"Journal {journal.journal_path} for {future.id}: {exc}") from exc
                result.reused.append(future.id)
                _LOGGER.info("%s already deployed at %s", future.id, contract.address)
            else:
                contract = deploy_contract(provider, DeploymentRequest(future.contract_name, future.args))
                if journal is not None:
                    journal.record_contract(future, contract)
            result.contracts[future.id] = contract
            continue

        if record is not None:
            result.calls[future.id] = record.get("transactionHash")
            result.reused.append(future.id)
            _LOGGER.info("%s already executed", future.id)
            continue

        target = result.contracts[future.contract.id]
        try:
            tx_hash = provider.transact(target, future.method, *future.args)
        except DeploymentError:
            raise
        except Exception as exc:
            raise ModuleExecutionError(f"{future.id} failed: {exc}") from exc
        if journal is not None:
            journal.record_call(future, tx_hash)
        result.calls[future.id] = tx_hash

    return result


def _define_apollo(m: ModuleBuilder) -> Dict[str, ContractFuture]:
    apollo = m.contract("Rocket")
    m.call(apollo, "launch")
    return {"apollo": apollo}


APOLLO = build_module("Apollo", _define_apollo)

MODULES: Dict[str, DeploymentModule] = {APOLLO.name: APOLLO}


def get_module(name: str) -> DeploymentModule:
    try:
        return MODULES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown deployment module {name!r} (available: {', '.join(sorted(MODULES))})") from None


__all__ = [
    "APOLLO",
    "CallFuture",
    "ContractFuture",
    "DeploymentJournal",
    "DeploymentModule",
    "MODULES",
    "ModuleBuilder",
    "ModuleResult",
    "build_module",
    "execute_module",
    "get_module",
]
