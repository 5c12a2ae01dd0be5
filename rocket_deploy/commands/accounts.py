"""Print the address of every signer configured for a network, one per line."""
from __future__ import annotations

import argparse
import sys
from typing import Sequence

import requests
from web3.exceptions import Web3Exception

from rocket_deploy.accounts import print_accounts
from rocket_deploy.cli import add_common_arguments, configure_logging
from rocket_deploy.config import load_settings
from rocket_deploy.errors import ConfigurationError
from rocket_deploy.provider import Web3ContractProvider


def main(argv: Sequence[str] | None = None) -> int:
    parser = add_common_arguments(argparse.ArgumentParser(description=__doc__))
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        provider = Web3ContractProvider.connect(load_settings(), args.network)
        print_accounts(provider)
    except ConfigurationError as exc:
        print(f"ConfigurationError: {exc}", file=sys.stderr)
        return 1
    except (Web3Exception, ValueError, requests.RequestException) as exc:
        print(f"Failed to list accounts: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
