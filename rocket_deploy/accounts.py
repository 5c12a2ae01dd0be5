"""Signer enumeration for the accounts command."""
from __future__ import annotations

import sys
from typing import Any, List, Protocol, Sequence, TextIO


class SignerProvider(Protocol):
    def get_signers(self) -> Sequence[Any]:
        ...


def list_accounts(provider: SignerProvider) -> List[str]:
    """Return the signer addresses in the order the provider supplies them."""

    return [signer.address for signer in provider.get_signers()]


def print_accounts(provider: SignerProvider, stream: TextIO | None = None) -> int:
    stream = stream or sys.stdout
    addresses = list_accounts(provider)
    for address in addresses:
        print(address, file=stream)
    return len(addresses)


__all__ = ["SignerProvider", "list_accounts", "print_accounts"]
