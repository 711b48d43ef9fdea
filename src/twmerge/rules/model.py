"""Rules extracted from a stylesheet."""

from __future__ import annotations

import re
from dataclasses import dataclass

from twmerge.selector.model import CompoundSelector, Selector

__all__ = ["CssDeclaration", "CssRule"]

_IMPORTANT_RE = re.compile(r"!important")


@dataclass(frozen=True)
class CssDeclaration:
    property: str
    value: str

    @property
    def important(self) -> bool:
        return _IMPORTANT_RE.search(self.value) is not None

    @property
    def custom(self) -> bool:
        """True for custom property (``--name``) declarations."""
        return self.property.startswith("--")


@dataclass(frozen=True)
class CssRule:
    """A selector, its declarations in source order and its at-rule context.

    ``at_rule_condition`` is the concatenated prelude of the enclosing
    ``@media``/``@supports`` blocks, e.g. ``(min-width:640px)``.
    """

    selector: Selector
    declarations: tuple[CssDeclaration, ...] = ()
    at_rule_condition: str = ""

    @property
    def condition(self) -> str:
        """At-rule condition followed by the sorted pseudo-class string."""
        if isinstance(self.selector, CompoundSelector):
            return self.at_rule_condition + self.selector.pseudo_elements_string()
        return self.at_rule_condition

    def to_css(self) -> str:
        body = " ".join(f"{d.property}: {d.value};" for d in self.declarations)
        return f"{self.selector} {{ {body} }}" if body else f"{self.selector} {{}}"
