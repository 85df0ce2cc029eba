"""
inkdis - Bytecode Disassembler Command-Line Interface
=====================================================

Lists the tokens of a compiled stream and optionally checks that every
choice jumps to the start of a token.

Usage Examples
--------------
List a compiled stream:
    $ inkdis story.inkb

Limit number of tokens:
    $ inkdis story.inkb --count 20

Check jumps (non-zero exit status on a bad jump):
    $ inkdis story.inkb --check

Output to file:
    $ inkdis story.inkb -o story.txt
"""

import sys
from pathlib import Path
from typing import Optional

import click

from inkasm import __version__
from inkasm.disassembler import BytecodeDisassembler
from inkasm.cli.errors import ExitCode, handle_cli_exception


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-c", "--count",
    type=int,
    default=None,
    help="Maximum number of tokens to list (default: all)",
)
@click.option(
    "--check",
    is_flag=True,
    help="Verify that every choice jumps to the start of a token",
)
@click.version_option(version=__version__, prog_name="inkdis")
def main(
    input_file: Path,
    output: Optional[Path],
    count: Optional[int],
    check: bool,
) -> None:
    """
    Disassemble a compiled story stream.

    INPUT_FILE is a bytecode file produced by inkasm.

    \b
    Examples:
        inkdis story.inkb              # List all tokens
        inkdis story.inkb --check      # Also validate jumps
    """
    try:
        data = input_file.read_bytes()
        disasm = BytecodeDisassembler()

        listing = disasm.disassemble_to_text(data, count)

        if output:
            output.write_text(listing + "\n", encoding="utf-8")
        elif listing:
            click.echo(listing)

        if check:
            bad = disasm.validate_jumps(data)
            for choice in bad:
                click.echo(
                    f"Bad jump: [{choice.prompt}] at {choice.field_offset:05d} "
                    f"-> {choice.target:05d} is not a token start",
                    err=True,
                )
            if bad:
                sys.exit(ExitCode.BUILD_ERROR)
            click.echo("All jumps valid")

    except Exception as e:
        handle_cli_exception(e, error_type="Disassembly")


if __name__ == "__main__":
    main()
