"""Compile the Solidity sources into deployable artifacts."""
from __future__ import annotations

import argparse
import os
import sys
from typing import Sequence

from rocket_deploy.cli import configure_logging
from rocket_deploy.compiler import compile_contracts
from rocket_deploy.config import load_settings
from rocket_deploy.errors import CompilationError, ConfigurationError


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging verbosity (DEBUG, INFO, WARNING)",
    )
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = load_settings()
        artifacts = compile_contracts(settings)
    except (CompilationError, ConfigurationError) as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    print(f"Compiled {len(artifacts)} contract(s) with solc {settings.solidity_version} into {settings.artifacts_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
