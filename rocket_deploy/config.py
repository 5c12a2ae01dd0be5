"""Settings for the deployment toolchain, read once per process."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, TYPE_CHECKING

from dotenv import find_dotenv, load_dotenv
from eth_account import Account

from .errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover - typing only
    from eth_account.signers.local import LocalAccount
else:
    LocalAccount = Any  # type: ignore[assignment]

DEFAULT_SOLIDITY_VERSION = "0.8.24"
DEFAULT_NETWORK = "localhost"
DEFAULT_CONFIRMATION_TIMEOUT = 120.0

MUMBAI_RPC_URL = "https://rpc-mumbai.maticvigil.com/"
LOCALHOST_RPC_URL = "http://127.0.0.1:8545"


@dataclass(frozen=True)
class NetworkConfig:
    """A named RPC endpoint and the keys allowed to sign on it."""

    name: str
    url: str
    accounts: Tuple[str, ...] = ()
    chain_id: int | None = None
    poa: bool = False
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT

    def __repr__(self) -> str:
        # keys stay out of tracebacks and log lines
        return (
            f"NetworkConfig(name={self.name!r}, url={self.url!r}, "
            f"accounts=<{len(self.accounts)} keys>, chain_id={self.chain_id!r})"
        )

    def load_signers(self) -> List[LocalAccount]:
        signers: List[LocalAccount] = []
        for index, key in enumerate(self.accounts):
            try:
                signers.append(Account.from_key(key))
            except Exception as exc:  # eth-keys raises its own ValidationError for bad lengths
                raise ConfigurationError(
                    f"Private key #{index} for network {self.name!r} is not a valid secp256k1 key"
                ) from exc
        return signers


@dataclass(frozen=True)
class Settings:
    solidity_version: str = DEFAULT_SOLIDITY_VERSION
    networks: Mapping[str, NetworkConfig] = field(default_factory=dict)
    default_network: str = DEFAULT_NETWORK
    artifacts_dir: Path = Path("artifacts")
    sources_dir: Path = Path("contracts")
    deployments_dir: Path = Path("ignition/deployments")

    def network(self, name: str | None = None) -> NetworkConfig:
        """Return the network called ``name`` (the default network when omitted)."""

        resolved = name or self.default_network
        try:
            return self.networks[resolved]
        except KeyError:
            known = ", ".join(sorted(self.networks)) or "none"
            raise ConfigurationError(f"Unknown network {resolved!r} (configured: {known})") from None


def _split_keys(raw: str | None) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_CONFIRMATION_TIMEOUT
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"CONFIRMATION_TIMEOUT must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError("CONFIRMATION_TIMEOUT must be positive.")
    return value


def _get_env() -> Mapping[str, str]:
    """Expose ``os.environ`` after loading the working directory's ``.env``."""

    load_dotenv(find_dotenv(usecwd=True))
    return os.environ


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build the process settings from ``env``.

    Parameters
    ----------
    env:
        Optional mapping used to resolve environment variables. When omitted
        ``os.environ`` (after loading ``.env`` from the working directory) is used.

    Raises
    ------
    ConfigurationError
        If a value cannot be parsed or the default network is not configured.
    """

    if env is None:
        env = _get_env()

    timeout = _parse_timeout(env.get("CONFIRMATION_TIMEOUT"))
    networks: Dict[str, NetworkConfig] = {
        "mumbai": NetworkConfig(
            name="mumbai",
            url=env.get("MUMBAI_RPC_URL") or MUMBAI_RPC_URL,
            accounts=_split_keys(env.get("MUMBAI_PRIVATE_KEYS") or env.get("PRIVATE_KEY")),
            chain_id=80001,
            poa=True,
            confirmation_timeout=timeout,
        ),
        "localhost": NetworkConfig(
            name="localhost",
            url=env.get("LOCALHOST_RPC_URL") or LOCALHOST_RPC_URL,
            accounts=_split_keys(env.get("LOCALHOST_PRIVATE_KEYS")),
            chain_id=31337,
            confirmation_timeout=timeout,
        ),
    }

    default_network = env.get("DEFAULT_NETWORK") or DEFAULT_NETWORK
    if default_network not in networks:
        raise ConfigurationError(f"DEFAULT_NETWORK {default_network!r} is not a configured network.")

    return Settings(
        solidity_version=env.get("SOLIDITY_VERSION") or DEFAULT_SOLIDITY_VERSION,
        networks=networks,
        default_network=default_network,
        artifacts_dir=Path(env.get("ARTIFACTS_DIR") or "artifacts"),
        sources_dir=Path(env.get("CONTRACTS_DIR") or "contracts"),
        deployments_dir=Path(env.get("DEPLOYMENTS_DIR") or "ignition/deployments"),
    )


__all__ = [
    "DEFAULT_NETWORK",
    "DEFAULT_SOLIDITY_VERSION",
    "NetworkConfig",
    "Settings",
    "load_settings",
]
