"""Top-level error handling for the flexpages CLI."""

from __future__ import annotations

import os
import sys
import traceback

from flexpages.errors import FlexPagesError


def cli_verbose_enabled(flag: bool = False) -> bool:
    return flag or os.getenv("FLEXPAGES_VERBOSE", "").lower() in {"1", "true", "yes"}


def format_cli_error(exc: BaseException, *, verbose: bool = False) -> str:
    if isinstance(exc, FlexPagesError):
        message = f"Error: {exc.format()}"
    else:
        message = f"Error: {exc.__class__.__name__}: {exc}"
    if verbose:
        trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        message = f"{message}\n{trace.rstrip()}"
    return message


def handle_cli_exception(exc: BaseException, *, verbose: bool = False, exit_code: int = 1) -> None:
    """Print ``exc`` for the user and exit. Does not return."""
    print(format_cli_error(exc, verbose=cli_verbose_enabled(verbose)), file=sys.stderr)
    sys.exit(exit_code)
