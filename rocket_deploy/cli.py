"""Argument and logging helpers shared by the command line entry points."""
from __future__ import annotations

import argparse
import logging
import os


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def add_common_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument(
        "--network",
        default=None,
        help="Configured network to use (defaults to DEFAULT_NETWORK, then localhost).",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="Logging verbosity (DEBUG, INFO, WARNING)",
    )
    return parser
