"""Error types raised by twmerge."""

from __future__ import annotations

from typing import Any

__all__ = [
    "TwMergeError",
    "SelectorSyntaxError",
    "RuleExtractionError",
    "PropertyDataError",
]


class TwMergeError(Exception):
    """Base error for all twmerge failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class SelectorSyntaxError(TwMergeError):
    """Raised when selector text cannot be parsed.

    ``text`` is the complete selector source and ``offset`` the UTF-8 byte
    position at which parsing stopped.
    """

    def __init__(self, message: str, text: str = "", offset: int = 0):
        self.text = text
        self.offset = offset
        super().__init__(message)


class RuleExtractionError(TwMergeError):
    """Raised when the CSS tokenizer hits input it cannot tokenize.

    The rules collected before the failure are kept on ``rules``.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        *,
        rules: list[Any] | None = None,
        cause: Exception | None = None,
    ):
        self.line = line
        self.column = column
        self.rules = list(rules or [])
        super().__init__(message, cause=cause)


class PropertyDataError(TwMergeError):
    """Raised when the CSS property table is missing or malformed."""
