"""twmerge: resolve conflicting utility CSS classes using the CSS that defines them."""
from __future__ import annotations

from twmerge.cache import Cache, SimpleCache
from twmerge.config import MergerConfig
from twmerge.errors import (
    PropertyDataError,
    RuleExtractionError,
    SelectorSyntaxError,
    TwMergeError,
)
from twmerge.merger import Merger

__version__ = "0.1.0"

__all__ = [
    "Cache",
    "Merger",
    "MergerConfig",
    "PropertyDataError",
    "RuleExtractionError",
    "SelectorSyntaxError",
    "SimpleCache",
    "TwMergeError",
    "__version__",
]
