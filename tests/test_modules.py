from __future__ import annotations

import json
from pathlib import Path

import pytest

from rocket_deploy.errors import ConfigurationError, FactoryResolutionError, ModuleExecutionError
from rocket_deploy.modules import (
    APOLLO,
    CallFuture,
    ContractFuture,
    DeploymentJournal,
    build_module,
    execute_module,
    get_module,
)

from tests.fakes import ROCKET_ADDRESS, FakeProvider


def test_apollo_deploys_rocket_then_launches() -> None:
    assert APOLLO.name == "Apollo"
    contract, call = APOLLO.futures
    assert contract == ContractFuture(id="Apollo#Rocket", contract_name="Rocket")
    assert isinstance(call, CallFuture)
    assert call.id == "Apollo#Rocket.launch"
    assert call.contract is contract
    assert call.args == ()
    assert APOLLO.results == {"apollo": contract}
    assert get_module("Apollo") is APOLLO


def test_execute_runs_futures_in_order() -> None:
    provider = FakeProvider(addresses=[ROCKET_ADDRESS])

    result = execute_module(APOLLO, provider)

    assert provider.requested == ["Rocket"]
    assert provider.transactions == [(ROCKET_ADDRESS, "launch", ())]
    assert result.results["apollo"].address == ROCKET_ADDRESS
    assert result.calls == {"Apollo#Rocket.launch": "0x" + "cd" * 32}
    assert result.reused == []


def test_journal_records_and_reuses_completed_futures(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 31337)
    first = FakeProvider(addresses=[ROCKET_ADDRESS])
    execute_module(APOLLO, first, journal)

    assert journal.directory == tmp_path / "chain-31337"
    assert json.loads(journal.addresses_path.read_text()) == {"Apollo#Rocket": ROCKET_ADDRESS}
    assert [entry["type"] for entry in journal.entries().values()] == ["contract", "call"]

    second = FakeProvider()
    result = execute_module(APOLLO, second, journal)

    assert second.requested == []
    assert second.transactions == []
    assert result.results["apollo"].address == ROCKET_ADDRESS
    assert result.reused == ["Apollo#Rocket", "Apollo#Rocket.launch"]


def test_reset_forgets_previous_deployments(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 80001)
    execute_module(APOLLO, FakeProvider(), journal)
    journal.reset()

    assert journal.entries() == {}
    assert journal.deployed_addresses() == {}


def test_failed_launch_keeps_the_deployment_in_the_journal(tmp_path: Path) -> None:
    journal = DeploymentJournal(tmp_path / "chain-31337")
    provider = FakeProvider(addresses=[ROCKET_ADDRESS], transact_error=OSError("connection reset"))

    with pytest.raises(ModuleExecutionError, match="Apollo#Rocket.launch"):
        execute_module(APOLLO, provider, journal)

    assert list(journal.entries()) == ["Apollo#Rocket"]

    retry = FakeProvider()
    execute_module(APOLLO, retry, journal)
    assert retry.requested == []
    assert retry.transactions == [(ROCKET_ADDRESS, "launch", ())]


def test_missing_artifact_stops_before_any_call() -> None:
    provider = FakeProvider(catalog=())
    with pytest.raises(FactoryResolutionError):
        execute_module(APOLLO, provider)
    assert provider.transactions == []


def test_builder_rejects_duplicate_ids_and_foreign_futures() -> None:
    def duplicated(m):
        m.contract("Rocket")
        m.contract("Rocket")

    with pytest.raises(ValueError, match="Duplicate"):
        build_module("Twins", duplicated)

    def aliased(m):
        first = m.contract("Rocket")
        second = m.contract("Rocket", id="Backup")
        m.call(second, "launch")
        return {"primary": first, "backup": second}

    module = build_module("Gemini", aliased)
    assert [future.id for future in module.futures] == ["Gemini#Rocket", "Gemini#Backup", "Gemini#Backup.launch"]

    foreign = ContractFuture(id="Other#Rocket", contract_name="Rocket")
    with pytest.raises(ValueError, match="not declared"):
        build_module("Mercury", lambda m: m.call(foreign, "launch") and None)


def test_module_names_must_be_identifiers() -> None:
    with pytest.raises(ValueError):
        build_module("", lambda m: None)


def test_unknown_module() -> None:
    with pytest.raises(ConfigurationError, match="Artemis"):
        get_module("Artemis")


def test_truncated_journal_entry_names_the_journal(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 31337)
    journal.directory.mkdir(parents=True)
    journal.journal_path.write_text('{"type": "contract"}\n', encoding="utf-8")

    with pytest.raises(ConfigurationError, match=r"journal\.jsonl:1 has no futureId"):
        execute_module(APOLLO, FakeProvider(), journal)


def test_malformed_journal_line_names_the_journal(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 31337)
    execute_module(APOLLO, FakeProvider(addresses=[ROCKET_ADDRESS]), journal)
    with journal.journal_path.open("a", encoding="utf-8") as handle:
        handle.write('{"futureId": "Apollo#Ro\n')

    with pytest.raises(ConfigurationError, match=r"journal\.jsonl:3 is not valid JSON"):
        journal.entries()


def test_journal_contract_without_address(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 31337)
    journal.directory.mkdir(parents=True)
    journal.journal_path.write_text('{"futureId": "Apollo#Rocket", "type": "contract"}\n', encoding="utf-8")

    with pytest.raises(ConfigurationError, match="without an address"):
        journal.entries()


def test_journal_with_invalid_address_is_a_configuration_error(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 31337)
    journal.directory.mkdir(parents=True)
    journal.journal_path.write_text(
        '{"futureId": "Apollo#Rocket", "type": "contract", "address": "0xnot-an-address"}\n', encoding="utf-8"
    )
    provider = FakeProvider()

    with pytest.raises(ConfigurationError, match="journal.jsonl for Apollo#Rocket"):
        execute_module(APOLLO, provider, journal)
    assert provider.requested == []


def test_corrupted_address_summary(tmp_path: Path) -> None:
    journal = DeploymentJournal.for_chain(tmp_path, 31337)
    journal.directory.mkdir(parents=True)
    journal.addresses_path.write_text("{", encoding="utf-8")

    with pytest.raises(ConfigurationError, match=r"deployed_addresses\.json is not valid JSON"):
        journal.deployed_addresses()
