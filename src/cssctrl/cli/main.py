"""cssctrl CLI entry point: Click group with subcommands."""

import logging

import click

from cssctrl import __version__


@click.group()
@click.version_option(version=__version__, prog_name="cssctrl")
@click.option("--verbose", "-v", is_flag=True, help="Log compiler steps to stderr")
def cli(verbose: bool) -> None:
    """cssctrl - compile abbreviation-based style DSL files to CSS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from cssctrl.cli.compile import compile_command  # noqa: E402
from cssctrl.cli.check import check  # noqa: E402
from cssctrl.cli.inspect import inspect  # noqa: E402

cli.add_command(compile_command)
cli.add_command(check)
cli.add_command(inspect)
