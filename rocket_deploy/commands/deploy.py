"""Deploy a compiled contract (Rocket by default) and print its address."""
from __future__ import annotations

import argparse
import sys
from typing import Sequence

from rocket_deploy.cli import add_common_arguments, configure_logging
from rocket_deploy.config import load_settings
from rocket_deploy.deployer import DEFAULT_CONTRACT, DeploymentRequest, ExitOutcome, run_deployment
from rocket_deploy.errors import ConfigurationError
from rocket_deploy.provider import Web3ContractProvider


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--contract",
        default=DEFAULT_CONTRACT,
        help=f"Name of the compiled contract to deploy (default: {DEFAULT_CONTRACT}).",
    )
    return add_common_arguments(parser)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = load_settings()
        provider = Web3ContractProvider.connect(settings, args.network)
    except ConfigurationError as exc:
        print(f"ConfigurationError: {exc}", file=sys.stderr)
        return int(ExitOutcome.FAILURE)

    return int(run_deployment(provider, DeploymentRequest(args.contract)))


if __name__ == "__main__":
    raise SystemExit(main())
