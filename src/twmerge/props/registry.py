"""CSS property table: which longhands each property sets.

The data file follows the layout of MDN's ``css/properties.json``. Only
``computed``, ``status`` and ``alsoAppliesTo`` are read. ``computed`` is a
list of longhand names for shorthands and a descriptive string for
everything else.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Any

from twmerge.errors import PropertyDataError

__all__ = [
    "DEFAULT_PROPERTIES_PATH",
    "Status",
    "Property",
    "PropertyRegistry",
    "load_properties",
]

DEFAULT_PROPERTIES_PATH = Path(__file__).parent / "properties.json"


class Status(enum.Enum):
    STANDARD = "standard"
    NONSTANDARD = "nonstandard"
    EXPERIMENTAL = "experimental"
    OBSOLETE = "obsolete"

    @classmethod
    def parse(cls, value: Any) -> Status:
        try:
            return cls(value)
        except ValueError:
            return cls.NONSTANDARD


@dataclass(frozen=True)
class Property:
    name: str
    computed: tuple[str, ...]
    status: Status = Status.STANDARD
    also_applies_to: tuple[str, ...] = ()

    @property
    def shorthand(self) -> bool:
        return self.computed != (self.name,)

    @classmethod
    def from_entry(cls, name: str, entry: Mapping[str, Any]) -> Property:
        computed = entry.get("computed")
        if isinstance(computed, list) and computed and all(isinstance(c, str) for c in computed):
            longhands = tuple(computed)
        else:
            longhands = (name,)
        applies = entry.get("alsoAppliesTo")
        if not isinstance(applies, list):
            applies = []
        return cls(
            name=name,
            computed=longhands,
            status=Status.parse(entry.get("status")),
            also_applies_to=tuple(a for a in applies if isinstance(a, str)),
        )


class PropertyRegistry(Mapping[str, Property]):
    """Read-only mapping of property name to :class:`Property`."""

    def __init__(self, properties: Iterable[Property] = ()):
        self._properties = {p.name: p for p in properties}
        self._longhands = {name: self._expand(name, frozenset()) for name in self._properties}

    @classmethod
    def from_dict(cls, data: Any) -> PropertyRegistry:
        if not isinstance(data, dict):
            raise PropertyDataError("property data must be a JSON object")
        properties = []
        for name, entry in data.items():
            if not isinstance(entry, dict):
                raise PropertyDataError(f"property {name!r} must map to an object")
            properties.append(Property.from_entry(name, entry))
        return cls(properties)

    def __getitem__(self, name: str) -> Property:
        return self._properties[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def longhands(self, name: str) -> tuple[str, ...]:
        """Every longhand ``name`` sets; unknown names map to themselves."""
        return self._longhands.get(name, (name,))

    def _expand(self, name: str, seen: frozenset[str]) -> tuple[str, ...]:
        prop = self._properties.get(name)
        if prop is None or name in seen or not prop.shorthand:
            return (name,)
        result: list[str] = []
        for child in prop.computed:
            expanded = (child,) if child == name else self._expand(child, seen | {name})
            for longhand in expanded:
                if longhand not in result:
                    result.append(longhand)
        return tuple(result)


def _load(path: Path) -> PropertyRegistry:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PropertyDataError(f"cannot load property data from {path}: {exc}", cause=exc) from exc
    return PropertyRegistry.from_dict(data)


@cache
def _default_registry() -> PropertyRegistry:
    return _load(DEFAULT_PROPERTIES_PATH)


def load_properties(path: str | Path | None = None) -> PropertyRegistry:
    """Load the property table; the bundled table is read once per process."""
    if path is None:
        return _default_registry()
    return _load(Path(path))
