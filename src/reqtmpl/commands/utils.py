"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
import sys
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from reqtmpl.exceptions import TemplateError

console = Console()

DEBUG_ENV_VAR = "REQTMPL_DEBUG"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the reqtmpl CLI.

    Log levels:
    - Normal: Only warnings/errors shown (e.g. suppressed function failures)
    - Verbose (-v): INFO level - shows keychain misses
    - Debug (REQTMPL_DEBUG=1): DEBUG level - shows every function call
    """
    if os.environ.get(DEBUG_ENV_VAR):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=bool(os.environ.get(DEBUG_ENV_VAR)),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("reqtmpl")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Handle and exit on template and configuration errors."""
    if isinstance(error, (TemplateError, ValueError, FileNotFoundError)):
        exit_with_error(str(error))
    else:
        typer.secho(f"Unexpected error: {error}", err=True, fg=typer.colors.RED)
        sys.exit(1)
