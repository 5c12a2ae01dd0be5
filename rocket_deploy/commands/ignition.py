"""Execute a declarative deployment module (Apollo by default)."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import requests
from web3.exceptions import Web3Exception

from rocket_deploy.cli import add_common_arguments, configure_logging
from rocket_deploy.config import load_settings
from rocket_deploy.errors import ConfigurationError, DeploymentError
from rocket_deploy.modules import MODULES, DeploymentJournal, ModuleResult, execute_module, get_module
from rocket_deploy.provider import Web3ContractProvider


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "module",
        nargs="?",
        default="Apollo",
        help=f"Module to execute ({', '.join(sorted(MODULES))}).",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard the journal for this chain and deploy every future again.",
    )
    return add_common_arguments(parser)


def _format_result(result: ModuleResult) -> str:
    lines = ["Deployed Addresses", ""]
    for future_id, contract in result.contracts.items():
        lines.append(f"{future_id} - {contract.address}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = load_settings()
        module = get_module(args.module)
        provider = Web3ContractProvider.connect(settings, args.network)
        journal = DeploymentJournal.for_chain(settings.deployments_dir, provider.chain_id)
        if args.reset:
            logging.info("Resetting journal at %s", journal.directory)
            journal.reset()
        result = execute_module(module, provider, journal)
    except ConfigurationError as exc:
        print(f"ConfigurationError: {exc}", file=sys.stderr)
        return 1
    except DeploymentError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    except (Web3Exception, ValueError, requests.RequestException) as exc:
        print(f"Failed to reach network: {exc}", file=sys.stderr)
        return 1

    print(_format_result(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
