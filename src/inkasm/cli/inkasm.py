"""
inkasm - Script Compiler Command-Line Interface
================================================

This module implements the command-line interface for the script
compiler.

Usage Examples
--------------
Basic compilation:
    $ inkasm story.ink

With output file:
    $ inkasm story.ink -o story.inkb

Generate all output files:
    $ inkasm story.ink -o story.inkb -l story.lst -s story.sym

Several scripts at once (errors are reported together):
    $ inkasm intro.ink chapter1.ink chapter2.ink

Reject unknown lines and duplicate labels:
    $ inkasm --strict story.ink
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from inkasm import __version__
from inkasm.compiler import Compiler
from inkasm.config import (
    DUPLICATE_LABEL_POLICIES,
    UNCLASSIFIED_POLICIES,
    CompilerConfig,
)
from inkasm.errors import CompilerError, ErrorCollector
from inkasm.cli.errors import ExitCode, handle_cli_exception


OUTPUT_SUFFIX = ".inkb"


def build_config(
    strict: bool,
    unclassified: Optional[str],
    duplicate_labels: Optional[str],
) -> CompilerConfig:
    """
    Combine environment settings and command-line options.

    Precedence (highest first): explicit policy option, --strict,
    environment variables, defaults.
    """
    config = CompilerConfig.strict() if strict else CompilerConfig.from_env()
    overrides = {}
    if unclassified:
        overrides["unclassified"] = unclassified
    if duplicate_labels:
        overrides["duplicate_labels"] = duplicate_labels
    return replace(config, **overrides)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Output bytecode file (default: input{OUTPUT_SUFFIX}); single input only",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file; single input only",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate label table file; single input only",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat unknown lines and duplicate labels as errors",
)
@click.option(
    "--unclassified",
    type=click.Choice(UNCLASSIFIED_POLICIES, case_sensitive=False),
    default=None,
    help="What to do with unknown lines: stop compiling there (truncate) "
         "or fail (error). Default: truncate, or $INKASM_UNCLASSIFIED.",
)
@click.option(
    "--duplicate-labels",
    type=click.Choice(DUPLICATE_LABEL_POLICIES, case_sensitive=False),
    default=None,
    help="What to do with a redefined label: keep the later one (overwrite) "
         "or fail (error). Default: overwrite, or $INKASM_DUPLICATE_LABELS.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="inkasm")
def main(
    input_files: tuple[Path, ...],
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    strict: bool,
    unclassified: Optional[str],
    duplicate_labels: Optional[str],
    verbose: bool,
) -> None:
    """
    Compile branching-dialogue scripts into bytecode streams.

    INPUT_FILES are the scripts (.ink) to compile. Each one is written
    next to its source with the .inkb suffix unless -o is given.

    \b
    Examples:
        inkasm story.ink                 # Outputs story.inkb
        inkasm story.ink -o out.inkb     # Specify output file
        inkasm story.ink -s story.sym    # Also write the label table
        inkasm --strict story.ink        # Fail on unknown lines
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    single_only = [name for name, value in
                   (("-o/--output", output), ("-l/--listing", listing), ("-s/--symbols", symbols))
                   if value is not None]
    if len(input_files) > 1 and single_only:
        click.echo(f"Error: {', '.join(single_only)} require a single input file", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    try:
        config = build_config(strict, unclassified, duplicate_labels)
        if verbose:
            click.echo(
                f"Policies: unclassified={config.unclassified}, "
                f"duplicate-labels={config.duplicate_labels}"
            )

        errors = ErrorCollector()

        for input_file in input_files:
            compiler = Compiler(config, verbose=verbose)
            try:
                compiler.compile_file(input_file)
            except CompilerError as e:
                errors.add(e)
                continue

            truncated = compiler.get_truncation()
            if truncated is not None:
                errors.add_warning(
                    f"{truncated.location}: stopped at unrecognized line {truncated.text!r}"
                )

            output_file = output if output is not None else input_file.with_suffix(OUTPUT_SUFFIX)
            compiler.write_output(output_file)

            if listing:
                compiler.write_listing(listing)
            if symbols:
                compiler.write_symbols(symbols)

            if verbose:
                click.echo(
                    f"Wrote {len(compiler.get_bytes())} bytes to {output_file} "
                    f"({len(compiler.get_symbols())} labels)"
                )

        if errors.has_errors():
            click.echo(errors.report(), err=True)
            sys.exit(ExitCode.BUILD_ERROR)

        for warning in errors.warnings:
            click.echo(f"Warning: {warning}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Compilation")


if __name__ == "__main__":
    main()
