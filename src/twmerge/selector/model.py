"""Selector AST: one frozen dataclass per selector variant.

Every node knows its specificity and renders itself back to CSS through
``str()`` (see :mod:`twmerge.selector.serialize`). Structural equality is
plain dataclass equality.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = [
    "Specificity",
    "Selector",
    "TagSelector",
    "ClassSelector",
    "IdSelector",
    "AttrSelector",
    "CompoundSelector",
    "CombinedSelector",
    "SelectorGroup",
    "PseudoClass",
    "RelativePseudoClass",
    "IsPseudoClass",
    "WherePseudoClass",
    "ContainsPseudoClass",
    "RegexpPseudoClass",
    "NthPseudoClass",
    "OnlyChildPseudoClass",
    "LangPseudoClass",
    "SimplePseudoClass",
    "SIMPLE_PSEUDO_CLASSES",
    "PSEUDO_ELEMENTS",
    "LEGACY_PSEUDO_ELEMENTS",
    "is_condition_pseudo",
]

# Zero-argument pseudo-classes understood by the parser.
SIMPLE_PSEUDO_CLASSES = frozenset(
    {
        "active",
        "any-link",
        "autofill",
        "checked",
        "default",
        "defined",
        "disabled",
        "empty",
        "enabled",
        "focus",
        "focus-visible",
        "focus-within",
        "fullscreen",
        "hover",
        "in-range",
        "indeterminate",
        "input",
        "invalid",
        "link",
        "modal",
        "open",
        "optional",
        "out-of-range",
        "paused",
        "placeholder-shown",
        "playing",
        "popover",
        "popover-open",
        "read-only",
        "read-write",
        "required",
        "root",
        "target",
        "user-invalid",
        "user-valid",
        "valid",
        "visited",
    }
)

PSEUDO_ELEMENTS = frozenset(
    {
        "after",
        "backdrop",
        "before",
        "cue",
        "file-selector-button",
        "first-letter",
        "first-line",
        "grammar-error",
        "marker",
        "placeholder",
        "selection",
        "spelling-error",
        "target-text",
    }
)

# Pseudo-elements that may also be written with a single colon.
LEGACY_PSEUDO_ELEMENTS = frozenset({"after", "before", "first-letter", "first-line"})


@dataclass(frozen=True, order=True)
class Specificity:
    """CSS specificity, ordered by ids, then classes, then tags."""

    ids: int = 0
    classes: int = 0
    tags: int = 0

    def add(self, other: Specificity) -> Specificity:
        return Specificity(
            self.ids + other.ids,
            self.classes + other.classes,
            self.tags + other.tags,
        )

    __add__ = add


_ZERO = Specificity()
_TAG = Specificity(0, 0, 1)
_CLASS = Specificity(0, 1, 0)
_ID = Specificity(1, 0, 0)


class Selector:
    """Base class for every selector node."""

    def specificity(self) -> Specificity:
        raise NotImplementedError

    def __str__(self) -> str:
        from twmerge.selector.serialize import to_css

        return to_css(self)


@dataclass(frozen=True)
class TagSelector(Selector):
    tag: str

    def specificity(self) -> Specificity:
        return _TAG


@dataclass(frozen=True)
class ClassSelector(Selector):
    name: str

    def specificity(self) -> Specificity:
        return _CLASS


@dataclass(frozen=True)
class IdSelector(Selector):
    id: str

    def specificity(self) -> Specificity:
        return _ID


@dataclass(frozen=True)
class AttrSelector(Selector):
    """``[key]``, ``[key op value]`` or ``[key #= regex]``.

    ``operation`` is the empty string for a bare presence test.
    """

    key: str
    operation: str = ""
    value: str = ""
    pattern: re.Pattern[str] | None = None
    insensitive: bool = False

    def specificity(self) -> Specificity:
        return _CLASS


@dataclass(frozen=True)
class SelectorGroup(Selector):
    """Comma-separated list of selectors."""

    selectors: tuple[Selector, ...] = ()

    def __iter__(self):
        return iter(self.selectors)

    def __len__(self) -> int:
        return len(self.selectors)

    def __getitem__(self, index: int) -> Selector:
        return self.selectors[index]

    def specificity(self) -> Specificity:
        return max((s.specificity() for s in self.selectors), default=_ZERO)


class PseudoClass(Selector):
    """Base class for pseudo-class selectors."""

    def specificity(self) -> Specificity:
        return _CLASS


@dataclass(frozen=True)
class RelativePseudoClass(PseudoClass):
    """``:not()``, ``:has()`` and ``:haschild()``."""

    name: str
    match: SelectorGroup

    def specificity(self) -> Specificity:
        return self.match.specificity()


@dataclass(frozen=True)
class IsPseudoClass(PseudoClass):
    match: SelectorGroup

    def specificity(self) -> Specificity:
        return self.match.specificity()


@dataclass(frozen=True)
class WherePseudoClass(PseudoClass):
    match: SelectorGroup

    def specificity(self) -> Specificity:
        return _ZERO


@dataclass(frozen=True)
class ContainsPseudoClass(PseudoClass):
    value: str
    own: bool = False


@dataclass(frozen=True)
class RegexpPseudoClass(PseudoClass):
    pattern: re.Pattern[str]
    own: bool = False


@dataclass(frozen=True)
class NthPseudoClass(PseudoClass):
    """``:nth-child(an+b)`` and friends; ``:first-child`` is ``a=0, b=1``."""

    a: int
    b: int
    last: bool = False
    of_type: bool = False


@dataclass(frozen=True)
class OnlyChildPseudoClass(PseudoClass):
    of_type: bool = False


@dataclass(frozen=True)
class LangPseudoClass(PseudoClass):
    lang: str


@dataclass(frozen=True)
class SimplePseudoClass(PseudoClass):
    """A pseudo-class without arguments, e.g. ``:hover`` or ``:root``."""

    name: str


def is_condition_pseudo(selector: Selector) -> bool:
    """True for pseudo-classes that qualify an element's state.

    ``:is()`` and ``:where()`` only group other selectors and are not
    conditions themselves.
    """
    return isinstance(selector, PseudoClass) and not isinstance(
        selector, (IsPseudoClass, WherePseudoClass)
    )


@dataclass(frozen=True)
class CompoundSelector(Selector):
    """Simple selectors on one element, with an optional pseudo-element.

    An empty compound is the universal selector ``*``.
    """

    selectors: tuple[Selector, ...] = ()
    pseudo_element: str = ""

    def specificity(self) -> Specificity:
        total = sum((s.specificity() for s in self.selectors), _ZERO)
        if self.pseudo_element:
            total += _TAG
        return total

    def pseudo_classes(self) -> list[Selector]:
        return [s for s in self.selectors if is_condition_pseudo(s)]

    def pseudo_elements_string(self) -> str:
        """Render the pseudo-classes and pseudo-element as a condition key.

        Pseudo-classes are sorted so ``:hover:focus`` and ``:focus:hover``
        give the same string.
        """
        parts = sorted(str(s) for s in self.pseudo_classes())
        if self.pseudo_element:
            from twmerge.selector.serialize import render_pseudo_element

            parts.append(render_pseudo_element(self.pseudo_element))
        return "".join(parts)


@dataclass(frozen=True)
class CombinedSelector(Selector):
    """Two selectors joined by a combinator (``" "``, ``">"``, ``"+"``, ``"~"``)."""

    first: Selector
    combinator: str
    second: Selector

    def specificity(self) -> Specificity:
        return self.first.specificity() + self.second.specificity()
