"""
flexpages CLI entry point.

Subcommands:
    build      Fetch pages, synthesize renderers and write the page manifest
    fragments  Regenerate the aggregated component fragment file
    develop    Build in development mode and watch fragment files
    init       Write the default renderer skeleton
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from flexpages import __version__

from .commands import cmd_build, cmd_develop, cmd_fragments, cmd_init


def _configure_logging(args: argparse.Namespace) -> None:
    """Configure the flexpages logger from the CLI flag or FLEXPAGES_LOG_LEVEL."""
    log_level = (
        getattr(args, "log_level", None) or os.getenv("FLEXPAGES_LOG_LEVEL", "info")
    ).lower()
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warn": logging.WARNING,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }
    logger = logging.getLogger("flexpages")
    logger.setLevel(level_map.get(log_level, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flexpages",
        description="Generate per-page renderers that import only the components each page uses",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--root", default=None, help="Project root (defaults to the current directory)")
    parser.add_argument("--config", default=None, help="Path to a flexpages.toml or .flexpagesrc file")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Logging level (or set FLEXPAGES_LOG_LEVEL)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print tracebacks with errors (or set FLEXPAGES_VERBOSE=1)",
    )

    subparsers = parser.add_subparsers(dest="command")

    build = subparsers.add_parser("build", help="Fetch pages and register synthesized renderers")
    build.add_argument(
        "--mode",
        choices=["development", "production"],
        default=None,
        help="Build mode (defaults to FLEXPAGES_ENV, NODE_ENV, then production)",
    )
    build.set_defaults(func=cmd_build)

    fragments = subparsers.add_parser("fragments", help="Regenerate the aggregated fragment file")
    fragments.set_defaults(func=cmd_fragments)

    develop = subparsers.add_parser("develop", help="Build in development mode and watch for changes")
    develop.set_defaults(func=cmd_develop)

    init = subparsers.add_parser("init", help="Write the default renderer skeleton")
    init.add_argument("--force", action="store_true", help="Overwrite an existing skeleton")
    init.set_defaults(func=cmd_init)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        sys.exit(2)
    _configure_logging(args)
    args.func(args)


__all__ = ["main", "build_parser", "cmd_build", "cmd_develop", "cmd_fragments", "cmd_init"]
