"""
nhasm-selftest - Built-in Regression Cases
==========================================

Runs the fixed self-test cases through the assembler and reports each one
as passed or failed, with a line-by-line diff for failures.

    $ nhasm-selftest
    Test AInst21 passed.
    Test CInst passed.
    Test Add passed.
"""

import sys

import click

from nhasm import __version__
from nhasm.cli.errors import ExitCode, handle_cli_exception
from nhasm.selftest import run_self_tests


@click.command()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Also print the produced listing of each case",
)
@click.version_option(version=__version__, prog_name="nhasm-selftest")
def main(verbose: bool) -> None:
    """
    Run the NHA assembler self-tests.

    Exits with status 1 if any case fails.
    """
    try:
        results = run_self_tests()
    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Self-test")

    failures = 0
    for result in results:
        if result.passed:
            click.echo(f"Test {result.name} passed.")
        else:
            failures += 1
            click.echo(f"Test {result.name} failed.")
            for line in result.diff:
                click.echo(line, err=True)

        if verbose:
            click.echo(result.actual)

    if failures:
        sys.exit(ExitCode.BUILD_ERROR)


if __name__ == "__main__":
    main()
