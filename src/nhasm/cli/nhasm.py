"""
nhasm - NHA Assembler Command-Line Interface
============================================

This module implements the command-line interface for the NHA assembler.

Usage Examples
--------------
Basic assembly (writes hello.bin next to the source):
    $ nhasm hello.nha

With output file:
    $ nhasm hello.nha -o build/hello.bin

Verbose mode (logs every encoded line):
    $ nhasm -v hello.nha
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from nhasm import __version__
from nhasm.assembler import Assembler
from nhasm.cli.errors import ExitCode, handle_cli_exception
from nhasm.config import AssemblerConfig
from nhasm.errors import SourceFileError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


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
    help="Output listing file (default: input with .bin suffix)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="nhasm")
def main(
    input_file: Path,
    output: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble NHA source code into a binary listing.

    INPUT_FILE is the assembly source file (.nha) to assemble.

    Each instruction becomes one line of sixteen 0/1 characters. Assembly
    stops at the first invalid instruction; lines assembled before it are
    kept in the output file.

    \b
    Examples:
        nhasm add.nha              # Outputs add.bin
        nhasm add.nha -o out.bin   # Specify output file
    """
    setup_logging(verbose)
    config = AssemblerConfig.from_env()
    logger.debug(f"Configuration: {config}")

    try:
        if not config.is_source_file(input_file):
            raise SourceFileError(str(input_file), config.source_suffix)

        output_file = output if output is not None else config.output_path_for(input_file)

        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm = Assembler(config)
        result = asm.assemble_file(input_file, output_file)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")

    if verbose:
        click.echo(f"Wrote {len(result.lines)} instruction(s) to {output_file}")

    if not result.ok:
        click.echo("Assembly error: invalid instruction encountered", err=True)
        sys.exit(ExitCode.BUILD_ERROR)


if __name__ == "__main__":
    main()
