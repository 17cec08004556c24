"""
CLI Error Handling
==================

Provides consistent error reporting and exit codes for the command-line tool.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from disasm_util.errors import ListingError, ObjdumpError


class ExitCode(IntEnum):
    """Exit codes for the CLI."""
    SUCCESS = 0
    PARSE_ERROR = 1      # Listing could not be parsed
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error
    TOOL_ERROR = 4       # objdump missing or failed


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised while running the CLI and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, ListingError):
        # Already formatted as "location: error: ..." with context
        click.echo(str(error), err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    elif isinstance(error, ObjdumpError):
        click.echo(f"objdump error: {error}", err=True)
        sys.exit(ExitCode.TOOL_ERROR)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(
            f"Error: input is not valid UTF-8 text "
            f"(byte 0x{error.object[error.start]:02x} at offset {error.start})",
            err=True,
        )
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
