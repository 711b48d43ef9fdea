"""CLI command: twmerge rules -- list the rules extracted from a stylesheet."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from twmerge.errors import RuleExtractionError
from twmerge.merger import walk
from twmerge.rules import extract_rules
from twmerge.selector.model import ClassSelector


@click.command()
@click.argument("cssfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--class", "class_name", default=None, help="Only show rules using this class.")
@click.option("--inline", is_flag=True, help="Treat the file as a style attribute body.")
def rules(cssfile: str, class_name: str | None, inline: bool) -> None:
    """Parse CSSFILE and print each extracted rule on one line.

    Rules inside @media or @supports are prefixed with their condition.
    """
    try:
        source = Path(cssfile).read_text(encoding="utf-8")
        extracted = extract_rules(source, inline=inline)
    except RuleExtractionError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    shown = 0
    for rule in extracted:
        if class_name is not None and not any(
            isinstance(s, ClassSelector) and s.name == class_name for s in walk(rule.selector)
        ):
            continue
        prefix = f"{rule.at_rule_condition} " if rule.at_rule_condition else ""
        click.echo(prefix + rule.to_css())
        shown += 1

    click.echo()
    click.echo(f"Summary: {shown} rule(s)")
