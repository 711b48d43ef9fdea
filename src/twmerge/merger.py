"""Conflict resolution between utility classes.

A :class:`Merger` learns what each class does from CSS source and then
reduces class lists to the classes that still have a visible effect: for
every longhand property under every condition only the last class that
sets it survives.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TextIO

from twmerge.cache import Cache, SimpleCache
from twmerge.config import MergerConfig
from twmerge.props.registry import PropertyRegistry, load_properties
from twmerge.rules.extract import extract_rules
from twmerge.rules.model import CssRule
from twmerge.selector.model import (
    ClassSelector,
    CombinedSelector,
    CompoundSelector,
    IsPseudoClass,
    Selector,
    SelectorGroup,
    WherePseudoClass,
    is_condition_pseudo,
)
from twmerge.selector.serialize import unescape

__all__ = ["Merger", "walk"]

logger = logging.getLogger(__name__)

_VAR_RE = re.compile(r"var\((--[\w-]+)")


def walk(selector: Selector) -> Iterator[Selector]:
    """Yield the simple selectors inside ``selector``.

    Descends into combined and compound selectors and into the arguments of
    ``:is()`` and ``:where()``, but not ``:not()`` or ``:has()``.
    """
    if isinstance(selector, CombinedSelector):
        yield from walk(selector.first)
        yield from walk(selector.second)
    elif isinstance(selector, (CompoundSelector, SelectorGroup)):
        for child in selector.selectors:
            yield from walk(child)
    elif isinstance(selector, (IsPseudoClass, WherePseudoClass)):
        for child in selector.match:
            yield from walk(child)
    else:
        yield selector


def _is_plain_class(selector: Selector) -> bool:
    """True for ``.x`` and ``.x`` followed only by pseudo-classes/element."""
    if isinstance(selector, ClassSelector):
        return True
    if isinstance(selector, CompoundSelector) and selector.selectors:
        first, *rest = selector.selectors
        return isinstance(first, ClassSelector) and all(is_condition_pseudo(s) for s in rest)
    return False


def _condition_suffix(rule: CssRule, class_name: str) -> str:
    if _is_plain_class(rule.selector):
        return rule.condition
    structure = unescape(str(rule.selector)).replace(class_name, "", 1)
    return rule.at_rule_condition + structure


class Merger:
    """Merge utility class lists using rules learned from CSS.

    ``cache`` memoizes merge results per input string and is cleared
    whenever rules are added. With ``keep_sort`` the result keeps the
    input order; otherwise it is sorted.
    """

    def __init__(
        self,
        cache: Cache | None = None,
        keep_sort: bool = False,
        registry: PropertyRegistry | None = None,
    ):
        self.keep_sort = keep_sort
        self._cache = cache
        self._registry = registry if registry is not None else load_properties()
        self._rules: dict[str, CssRule] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: MergerConfig) -> Merger:
        return cls(
            cache=SimpleCache() if config.use_cache else None,
            keep_sort=config.keep_sort,
            registry=load_properties(config.properties_path),
        )

    @property
    def cache(self) -> Cache | None:
        return self._cache

    @property
    def registry(self) -> PropertyRegistry:
        return self._registry

    @property
    def rules(self) -> Mapping[str, CssRule]:
        """Read-only view of the class name to rule index."""
        return MappingProxyType(self._rules)

    def add_rules(self, source: str | TextIO, inline: bool = False) -> None:
        """Index every class defined in ``source``.

        A class defined again replaces its earlier rule. Raises
        :class:`~twmerge.errors.RuleExtractionError` if the CSS cannot be
        tokenized, in which case the index is left unchanged.
        """
        with self._lock:
            if self._cache is not None:
                self._cache.clear()
            rules = extract_rules(source, inline=inline)
            index = dict(self._rules)
            indexed = 0
            for rule in rules:
                for selector in walk(rule.selector):
                    if isinstance(selector, ClassSelector):
                        index[selector.name] = rule
                        indexed += 1
            self._rules = index
            # Results cached by merges that ran during extraction are stale.
            if self._cache is not None:
                self._cache.clear()
            logger.debug("extracted %d rules, indexed %d class selectors", len(rules), indexed)

    def merge(self, class_list: str) -> str:
        """Drop the classes in ``class_list`` that later classes override.

        Unknown classes are kept. Never raises.
        """
        cache = self._cache
        if cache is not None:
            cached = cache.get(class_list)
            if cached is not None:
                return cached

        classes = class_list.split()
        if len(classes) < 2:
            return class_list

        result = " ".join(self._resolve(classes))
        if cache is not None:
            cache.set(class_list, result)
        return result

    def _resolve(self, classes: list[str]) -> list[str]:
        rules = self._rules
        kept: set[str] = set()
        owners: dict[str, str] = {}
        important_owners: dict[str, str] = {}
        var_refs: dict[str, set[str]] = {}
        custom_owners: dict[tuple[str, str], str] = {}
        custom_refs: dict[tuple[str, str], set[str]] = {}

        for name in classes:
            rule = rules.get(name)
            if rule is None:
                kept.add(name)
                continue
            suffix = _condition_suffix(rule, name)
            for decl in rule.declarations:
                refs = set(_VAR_RE.findall(decl.value))
                if decl.custom:
                    custom_owners[(decl.property, suffix)] = name
                    custom_refs[(decl.property, suffix)] = refs
                    if decl.important:
                        important_owners[decl.property + suffix] = name
                    continue
                for longhand in self._registry.longhands(decl.property):
                    key = longhand + suffix
                    owners[key] = name
                    var_refs[key] = refs
                    if decl.important:
                        important_owners[key] = name

        kept.update(owners.values())
        kept.update(important_owners.values())

        live: set[str] = set()
        pending = [ref for refs in var_refs.values() for ref in refs]
        while pending:
            var = pending.pop()
            if var in live:
                continue
            live.add(var)
            for (prop, _), refs in custom_refs.items():
                if prop == var:
                    pending.extend(refs)
        kept.update(owner for (prop, _), owner in custom_owners.items() if prop in live)

        if self.keep_sort:
            return [name for name in dict.fromkeys(classes) if name in kept]
        return sorted(kept)
