"""twmerge CLI entry point: Click group with subcommands."""

import logging

import click

from twmerge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="twmerge")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """twmerge - drop utility classes that later classes override."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Import and register subcommands
from twmerge.cli.merge import merge  # noqa: E402
from twmerge.cli.rules import rules  # noqa: E402

cli.add_command(merge)
cli.add_command(rules)
