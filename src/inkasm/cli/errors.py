"""
Unified CLI Error Handling
==========================

Shared exit codes and exception reporting for inkasm and inkdis.

Exit codes:
    0  script compiled, or stream decoded with valid jumps
    1  script or bytecode error (syntax, unresolved label, bad stream)
    2  bad command line, unknown policy value, unreadable file
    3  anything else
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes shared by inkasm and inkdis."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Script did not compile, or stream did not decode
    INVALID_ARGS = 2     # Bad option, policy value or input path
    INTERNAL_ERROR = 3   # Bug in the toolchain


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception escaping a CLI command and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Prefix for non-compiler errors ("Compilation", "Disassembly")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from inkasm.errors import BytecodeFormatError, CompilerError, InkError

    if isinstance(error, CompilerError):
        # Already "file:line:col: error: ..." with source and hint
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, BytecodeFormatError):
        # Offset-prefixed, e.g. "offset 12: unknown token tag"
        prefix = f"{error_type} error at " if error_type else "Error at "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, InkError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, UnicodeDecodeError):
        # Scripts are read as UTF-8
        click.echo(f"Error: input is not valid UTF-8 ({error.reason} at byte {error.start})", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (click.BadParameter, ValueError)):
        # Policy names from options or INKASM_* variables
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        # Output paths; inputs are already checked by click.Path
        click.echo(f"Error: cannot access {error.filename}: {error.strerror}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
