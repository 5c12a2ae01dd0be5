from __future__ import annotations

import io
from types import SimpleNamespace

import pytest

from rocket_deploy.accounts import list_accounts, print_accounts

from tests.fakes import ACCOUNTS, FakeProvider


def test_three_accounts_print_three_lines_in_order() -> None:
    stream = io.StringIO()

    count = print_accounts(FakeProvider(signers=ACCOUNTS), stream)

    assert count == 3
    assert stream.getvalue().splitlines() == list(ACCOUNTS)


def test_list_accounts_does_not_filter_or_transform() -> None:
    addresses = ["0xBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBbBb", "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"]
    provider = SimpleNamespace(get_signers=lambda: [SimpleNamespace(address=a) for a in addresses])

    assert list_accounts(provider) == addresses


def test_no_signers_prints_nothing(capsys: pytest.CaptureFixture[str]) -> None:
    assert print_accounts(FakeProvider(signers=())) == 0
    assert capsys.readouterr().out == ""
