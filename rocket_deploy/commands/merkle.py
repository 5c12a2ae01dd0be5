"""Build the whitelist Merkle tree and a proof for one address."""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Sequence

from rocket_deploy.cli import configure_logging
from rocket_deploy.merkle import build_merkle_tree, merkle_proof, read_addresses

DEFAULT_ADDRESSES_FILE = Path("eligible_addresses.txt")
DEFAULT_TARGET = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--addresses",
        type=Path,
        default=DEFAULT_ADDRESSES_FILE,
        help="File with one eligible address per line (default: eligible_addresses.txt).",
    )
    parser.add_argument(
        "--target",
        default=DEFAULT_TARGET,
        help="Address to generate a proof for.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="Logging verbosity (DEBUG, INFO, WARNING)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        root = build_merkle_tree(read_addresses(args.addresses))
    except OSError as exc:
        print(f"Failed to read {args.addresses}: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"{args.addresses}: {exc}", file=sys.stderr)
        return 1

    print(f"Merkle Tree: {json.dumps(root.as_dict(), indent=2)}")
    print(f"Merkle Root: {root.hash}")
    print(f"Merkle Proof for {args.target}: {json.dumps(merkle_proof(root, args.target))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
