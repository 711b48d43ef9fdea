"""Extract selector/declaration rules from CSS source."""

from __future__ import annotations

import logging
import re
from typing import TextIO

from lark.exceptions import UnexpectedInput

from twmerge.errors import RuleExtractionError, SelectorSyntaxError
from twmerge.rules.model import CssDeclaration, CssRule
from twmerge.rules.scanner import CssScanner, GrammarEvent, GrammarType
from twmerge.selector.model import CompoundSelector, Selector
from twmerge.selector.parser import parse_group_with_pseudo_elements

__all__ = ["SUPPORTED_AT_RULES", "RuleExtractor", "extract_rules", "coarse_unescape"]

logger = logging.getLogger(__name__)

SUPPORTED_AT_RULES = frozenset({"@media", "@supports"})

_BACKSLASH_RE = re.compile(r"\\(.?)", re.DOTALL)


def coarse_unescape(value: str) -> str:
    """Drop every unescaped backslash, keeping the character after it."""
    return _BACKSLASH_RE.sub(r"\1", value)


class RuleExtractor:
    """Build :class:`CssRule` objects from a stream of grammar events.

    Rulesets whose selector does not parse are skipped. At-rules other than
    ``@media`` and ``@supports`` are skipped together with everything they
    contain.
    """

    def __init__(self, inline: bool = False):
        self.inline = inline
        self.rules: list[CssRule] = []
        self._conditions: list[str] = []
        self._skip_depth = 0
        self._in_ruleset = False
        self._selectors: list[Selector] | None = None
        self._declarations: list[CssDeclaration] = []

    def feed(self, event: GrammarEvent) -> None:
        kind = event.type
        if kind is GrammarType.BEGIN_AT_RULE:
            if self._skip_depth or event.data not in SUPPORTED_AT_RULES:
                if not self._skip_depth:
                    logger.debug("skipping at-rule %s", event.data)
                self._skip_depth += 1
            else:
                self._conditions.append(event.text)
        elif kind is GrammarType.END_AT_RULE:
            if self._skip_depth:
                self._skip_depth -= 1
            elif self._conditions:
                self._conditions.pop()
        elif self._skip_depth:
            return
        elif kind is GrammarType.BEGIN_RULESET:
            self._begin_ruleset(event.text)
        elif kind is GrammarType.END_RULESET:
            self._end_ruleset()
        elif kind in (GrammarType.DECLARATION, GrammarType.CUSTOM_PROPERTY):
            if self._in_ruleset and self._selectors is None:
                return
            if self._in_ruleset or self.inline:
                self._declarations.append(
                    CssDeclaration(event.data, coarse_unescape(event.text))
                )

    def finish(self) -> list[CssRule]:
        if self.inline and self._declarations and not self._in_ruleset:
            self.rules.append(CssRule(CompoundSelector(), tuple(self._declarations)))
            self._declarations = []
        return self.rules

    def _begin_ruleset(self, text: str) -> None:
        self._in_ruleset = True
        self._declarations = []
        try:
            self._selectors = list(parse_group_with_pseudo_elements(text))
        except SelectorSyntaxError as exc:
            logger.debug("skipping ruleset %r: %s", text, exc)
            self._selectors = None

    def _end_ruleset(self) -> None:
        if self._selectors:
            condition = "".join(self._conditions)
            declarations = tuple(self._declarations)
            for selector in self._selectors:
                self.rules.append(CssRule(selector, declarations, condition))
        self._in_ruleset = False
        self._selectors = None
        self._declarations = []


def extract_rules(source: str | TextIO, inline: bool = False) -> list[CssRule]:
    """Extract every rule from ``source`` in document order.

    ``source`` is CSS text or a readable text stream. In inline mode the
    source is a single declaration list (the body of a ``style``
    attribute) and yields at most one rule with the universal selector.

    Raises :class:`RuleExtractionError` when the tokenizer fails; the rules
    collected up to that point are attached to the error.
    """
    text = source if isinstance(source, str) else source.read()
    extractor = RuleExtractor(inline=inline)
    try:
        for event in CssScanner(text, inline=inline):
            extractor.feed(event)
    except UnexpectedInput as exc:
        raise RuleExtractionError(
            f"encountered error parsing CSS: {exc}",
            line=getattr(exc, "line", None),
            column=getattr(exc, "column", None),
            rules=extractor.rules,
            cause=exc,
        ) from exc
    return extractor.finish()
