"""CLI command: twmerge merge -- merge a class list against CSS files."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from twmerge.config import MergerConfig
from twmerge.errors import PropertyDataError, RuleExtractionError
from twmerge.merger import Merger


@click.command()
@click.option(
    "--css",
    "css_files",
    multiple=True,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Stylesheet defining the classes; may be repeated.",
)
@click.option("--keep-sort/--no-keep-sort", default=True, help="Keep the input order.")
@click.option("--inline", is_flag=True, help="Treat the CSS files as style attribute bodies.")
@click.option(
    "--properties",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Alternative CSS property table (JSON).",
)
@click.argument("classes", nargs=-1)
def merge(
    css_files: tuple[str, ...],
    keep_sort: bool,
    inline: bool,
    properties: str | None,
    classes: tuple[str, ...],
) -> None:
    """Print CLASSES without the classes later ones override.

    CLASSES may be given as separate arguments or as one quoted string.
    """
    config = MergerConfig(keep_sort=keep_sort, use_cache=False, properties_path=properties)
    try:
        merger = Merger.from_config(config)
        for css_file in css_files:
            with Path(css_file).open(encoding="utf-8") as fh:
                merger.add_rules(fh, inline=inline)
    except (RuleExtractionError, PropertyDataError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(merger.merge(" ".join(classes)))
