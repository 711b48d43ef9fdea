"""Recursive-descent parser for CSS selectors.

Grammar::

    group     := selector ("," selector)*
    selector  := compound (combinator compound)*
    compound  := (type | "*")? (id | class | attribute | pseudo)*

Whitespace between two compounds is the descendant combinator.
"""

from __future__ import annotations

import re

from twmerge.errors import SelectorSyntaxError
from twmerge.selector.model import (
    LEGACY_PSEUDO_ELEMENTS,
    PSEUDO_ELEMENTS,
    SIMPLE_PSEUDO_CLASSES,
    AttrSelector,
    ClassSelector,
    CombinedSelector,
    CompoundSelector,
    ContainsPseudoClass,
    IdSelector,
    IsPseudoClass,
    LangPseudoClass,
    NthPseudoClass,
    OnlyChildPseudoClass,
    RegexpPseudoClass,
    RelativePseudoClass,
    Selector,
    SelectorGroup,
    SimplePseudoClass,
    TagSelector,
    WherePseudoClass,
)

__all__ = [
    "SelectorParser",
    "parse",
    "parse_with_pseudo_element",
    "parse_group",
    "parse_group_with_pseudo_elements",
]

_WHITESPACE = frozenset(" \t\r\n\f")
_NEWLINES = frozenset("\r\n\f")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DIGITS = frozenset("0123456789")
_ATTR_OPERATIONS = frozenset({"=", "!=", "~=", "|=", "^=", "$=", "*=", "#="})
_COMBINATORS = frozenset("+>~")

# (last, of_type) for each structural pseudo-class
_NTH_FUNCTIONS = {
    "nth-child": (False, False),
    "nth-last-child": (True, False),
    "nth-of-type": (False, True),
    "nth-last-of-type": (True, True),
}
_NTH_SHORTHANDS = {
    "first-child": (False, False),
    "last-child": (True, False),
    "first-of-type": (False, True),
    "last-of-type": (True, True),
}


def _name_start(c: str) -> bool:
    return c == "_" or ("a" <= c <= "z") or ("A" <= c <= "Z") or ord(c) > 127


def _name_char(c: str) -> bool:
    return _name_start(c) or c == "-" or c in _DIGITS


class SelectorParser:
    """Parse selector text one construct at a time.

    ``accept_pseudo_elements`` allows a single trailing pseudo-element on a
    compound selector.
    """

    def __init__(self, text: str, accept_pseudo_elements: bool = False):
        self._text = text
        self._pos = 0
        self._accept_pseudo_elements = accept_pseudo_elements

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> Selector:
        selector = self._parse_selector()
        self._expect_end()
        return selector

    def parse_group(self) -> SelectorGroup:
        group = self._parse_selector_group()
        self._expect_end()
        return group

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        index = self._pos + offset
        if index < len(self._text):
            return self._text[index]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _error(self, message: str) -> SelectorSyntaxError:
        offset = len(self._text[: self._pos].encode("utf-8"))
        return SelectorSyntaxError(message, text=self._text, offset=offset)

    def _expect_end(self) -> None:
        if not self._at_end():
            left = len(self._text[self._pos :].encode("utf-8"))
            raise self._error(f"parsing {self._text!r}: {left} bytes left over")

    def _skip_whitespace(self) -> bool:
        """Skip whitespace and comments; return True if anything was skipped."""
        start = self._pos
        while not self._at_end():
            if self._peek() in _WHITESPACE:
                self._pos += 1
            elif self._text.startswith("/*", self._pos):
                end = self._text.find("*/", self._pos + 2)
                if end == -1:
                    break
                self._pos = end + 2
            else:
                break
        return self._pos > start

    def _consume_parenthesis(self) -> None:
        if self._peek() != "(":
            raise self._error("expected '(' but didn't find it")
        self._pos += 1
        self._skip_whitespace()

    def _consume_closing_parenthesis(self) -> None:
        start = self._pos
        self._skip_whitespace()
        if self._peek() != ")":
            self._pos = start
            raise self._error("expected ')' but didn't find it")
        self._pos += 1

    # ------------------------------------------------------------------
    # Lexical pieces
    # ------------------------------------------------------------------

    def _parse_escape(self) -> str:
        if self._peek() != "\\" or self._pos + 1 >= len(self._text):
            raise self._error("invalid escape sequence")
        start = self._pos + 1
        c = self._text[start]
        if c in _NEWLINES:
            raise self._error("escaped line ending outside string")
        if c not in _HEX_DIGITS:
            self._pos += 2
            return c

        end = start
        while end < start + 6 and end < len(self._text) and self._text[end] in _HEX_DIGITS:
            end += 1
        code = int(self._text[start:end], 16)
        if self._text.startswith("\r\n", end):
            end += 2
        elif end < len(self._text) and self._text[end] in _WHITESPACE:
            end += 1
        self._pos = end
        if code == 0 or 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
            return "\ufffd"
        return chr(code)

    def _parse_name(self) -> str:
        parts: list[str] = []
        while not self._at_end():
            c = self._peek()
            if _name_char(c):
                start = self._pos
                while not self._at_end() and _name_char(self._peek()):
                    self._pos += 1
                parts.append(self._text[start : self._pos])
            elif c == "\\":
                parts.append(self._parse_escape())
            else:
                break
        if not parts:
            raise self._error("expected name, found EOF instead")
        return "".join(parts)

    def _parse_identifier(self) -> str:
        start = self._pos
        while self._peek() == "-":
            self._pos += 1
        prefix = self._text[start : self._pos]
        if self._at_end():
            raise self._error("expected identifier, found EOF instead")
        c = self._peek()
        if not (_name_start(c) or c == "\\"):
            raise self._error(f"expected identifier, found {c!r} instead")
        return prefix + self._parse_name()

    def _parse_string(self) -> str:
        if self._pos + 2 > len(self._text):
            raise self._error("expected string, found EOF instead")
        quote = self._peek()
        self._pos += 1
        parts: list[str] = []
        while not self._at_end():
            c = self._peek()
            if c == "\\":
                following = self._peek(1)
                if following == "\r" and self._peek(2) == "\n":
                    self._pos += 3
                    continue
                if following in _NEWLINES and following:
                    self._pos += 2
                    continue
                parts.append(self._parse_escape())
            elif c == quote:
                break
            elif c in _NEWLINES:
                raise self._error("unexpected end of line in string")
            else:
                start = self._pos
                while not self._at_end():
                    c = self._peek()
                    if c == quote or c == "\\" or c in _NEWLINES:
                        break
                    self._pos += 1
                parts.append(self._text[start : self._pos])
        if self._at_end():
            raise self._error("EOF in string")
        self._pos += 1
        return "".join(parts)

    def _parse_regex(self) -> re.Pattern[str]:
        if self._pos + 2 > len(self._text):
            raise self._error("expected regular expression, found EOF instead")
        start = self._pos
        depth = 0
        while not self._at_end():
            c = self._peek()
            if c in "([":
                depth += 1
            elif c in ")]":
                depth -= 1
                if depth < 0:
                    break
            self._pos += 1
        if self._at_end():
            raise self._error("EOF in regular expression")
        try:
            return re.compile(self._text[start : self._pos])
        except re.error as exc:
            raise self._error(f"invalid regular expression: {exc}") from exc

    def _parse_integer(self) -> int:
        start = self._pos
        while self._peek() in _DIGITS:
            self._pos += 1
        if self._pos == start:
            raise self._error("expected integer, but didn't find it")
        return int(self._text[start : self._pos])

    def _parse_string_or_identifier(self) -> str:
        if self._peek() in ("'", '"'):
            return self._parse_string()
        return self._parse_identifier()

    # ------------------------------------------------------------------
    # Simple selectors
    # ------------------------------------------------------------------

    def _parse_type_selector(self) -> TagSelector:
        return TagSelector(self._parse_identifier().lower())

    def _parse_id_selector(self) -> IdSelector:
        self._pos += 1
        return IdSelector(self._parse_name())

    def _parse_class_selector(self) -> ClassSelector:
        self._pos += 1
        return ClassSelector(self._parse_identifier())

    def _parse_attribute_selector(self) -> AttrSelector:
        self._pos += 1
        self._skip_whitespace()
        key = self._parse_identifier().lower()
        self._skip_whitespace()
        if self._at_end():
            raise self._error("unexpected EOF in attribute selector")
        if self._peek() == "]":
            self._pos += 1
            return AttrSelector(key)

        if self._pos + 2 >= len(self._text):
            raise self._error("unexpected EOF in attribute selector")
        op = self._text[self._pos : self._pos + 2]
        if op[0] == "=":
            op = "="
        elif op[1] != "=":
            raise self._error(f"expected equality operator, found {op!r} instead")
        if op not in _ATTR_OPERATIONS:
            raise self._error(f"attribute operator {op!r} is not supported")
        self._pos += len(op)
        self._skip_whitespace()
        if self._at_end():
            raise self._error("unexpected EOF in attribute selector")

        value = ""
        pattern = None
        if op == "#=":
            pattern = self._parse_regex()
        else:
            value = self._parse_string_or_identifier()

        self._skip_whitespace()
        if self._at_end():
            raise self._error("unexpected EOF in attribute selector")
        insensitive = False
        if self._peek() in ("i", "I"):
            insensitive = True
            self._pos += 1
            self._skip_whitespace()
        if self._at_end():
            raise self._error("unexpected EOF in attribute selector")
        if self._peek() != "]":
            raise self._error(f"expected ']', found {self._peek()!r} instead")
        self._pos += 1
        return AttrSelector(key, op, value, pattern, insensitive)

    def _parse_nth(self) -> tuple[int, int]:
        """Parse ``an+b``, ``odd``, ``even`` or a plain integer."""
        eof = "unexpected EOF while attempting to parse expression of form an+b"
        invalid = "unexpected character while attempting to parse expression of form an+b"

        c = self._peek()
        if c in ("o", "O", "e", "E"):
            word = self._parse_name().lower()
            if word == "odd":
                return 2, 1
            if word == "even":
                return 2, 0
            raise self._error(f"expected 'odd' or 'even', got {word!r}")

        sign = 1
        if c in ("-", "+"):
            sign = -1 if c == "-" else 1
            self._pos += 1
            c = self._peek()
        if self._at_end():
            raise self._error(eof)
        if c in _DIGITS:
            a = sign * self._parse_integer()
            if self._at_end():
                raise self._error(eof)
            if self._peek() not in ("n", "N"):
                return 0, a
        elif c not in ("n", "N"):
            raise self._error(invalid)
        else:
            a = sign
        self._pos += 1

        self._skip_whitespace()
        if self._at_end():
            raise self._error(eof)
        c = self._peek()
        if c in ("+", "-"):
            self._pos += 1
            self._skip_whitespace()
            b = self._parse_integer()
            return a, -b if c == "-" else b
        return a, 0

    def _parse_nested_group(self, relative: bool = False) -> SelectorGroup:
        self._consume_parenthesis()
        group = self._parse_selector_group(relative=relative)
        self._consume_closing_parenthesis()
        return group

    def _parse_pseudo_selector(self) -> tuple[Selector | None, str]:
        """Parse ``:name`` or ``::name``.

        Returns ``(selector, "")`` for a pseudo-class and ``(None, name)``
        for a pseudo-element.
        """
        self._pos += 1
        if self._at_end():
            raise self._error("expected pseudo-class, found EOF instead")
        must_be_element = self._peek() == ":"
        if must_be_element:
            self._pos += 1
        name = self._parse_identifier().lower()

        if must_be_element:
            if name in PSEUDO_ELEMENTS or name.startswith("-"):
                return None, name
            raise self._error(f"unknown pseudo-element ::{name}")
        if name in LEGACY_PSEUDO_ELEMENTS:
            return None, name

        if name in ("not", "has", "haschild"):
            match = self._parse_nested_group(relative=name != "not")
            return RelativePseudoClass(name, match), ""
        if name == "is":
            return IsPseudoClass(self._parse_nested_group()), ""
        if name == "where":
            return WherePseudoClass(self._parse_nested_group()), ""
        if name in ("contains", "containsown"):
            self._consume_parenthesis()
            if self._at_end():
                raise self._error("unmatched '('")
            value = self._parse_string_or_identifier().lower()
            self._skip_whitespace()
            if self._at_end():
                raise self._error("unexpected EOF in pseudo selector")
            self._consume_closing_parenthesis()
            return ContainsPseudoClass(value, own=name == "containsown"), ""
        if name in ("matches", "matchesown"):
            self._consume_parenthesis()
            pattern = self._parse_regex()
            self._consume_closing_parenthesis()
            return RegexpPseudoClass(pattern, own=name == "matchesown"), ""
        if name in _NTH_FUNCTIONS:
            last, of_type = _NTH_FUNCTIONS[name]
            self._consume_parenthesis()
            a, b = self._parse_nth()
            self._consume_closing_parenthesis()
            return NthPseudoClass(a, b, last=last, of_type=of_type), ""
        if name in _NTH_SHORTHANDS:
            last, of_type = _NTH_SHORTHANDS[name]
            return NthPseudoClass(0, 1, last=last, of_type=of_type), ""
        if name in ("only-child", "only-of-type"):
            return OnlyChildPseudoClass(of_type=name == "only-of-type"), ""
        if name == "lang":
            self._consume_parenthesis()
            if self._at_end():
                raise self._error("unmatched '('")
            lang = self._parse_identifier().lower()
            self._skip_whitespace()
            if self._at_end():
                raise self._error("unexpected EOF in pseudo selector")
            self._consume_closing_parenthesis()
            return LangPseudoClass(lang), ""
        if name in SIMPLE_PSEUDO_CLASSES or name.startswith("-"):
            return SimplePseudoClass(name), ""
        raise self._error(f"unknown pseudo-class :{name}")

    # ------------------------------------------------------------------
    # Sequences, combinators and groups
    # ------------------------------------------------------------------

    def _parse_simple_selector_sequence(self) -> Selector:
        if self._at_end():
            raise self._error("expected selector, found EOF instead")

        selectors: list[Selector] = []
        c = self._peek()
        if c == "*":
            self._pos += 1
            if self._text.startswith("|*", self._pos):
                self._pos += 2
        elif c not in ("#", ".", "[", ":"):
            selectors.append(self._parse_type_selector())

        pseudo_element = ""
        while not self._at_end():
            c = self._peek()
            found = ""
            if c == "#":
                selector = self._parse_id_selector()
            elif c == ".":
                selector = self._parse_class_selector()
            elif c == "[":
                selector = self._parse_attribute_selector()
            elif c == ":":
                selector, found = self._parse_pseudo_selector()
            else:
                break

            if selector is None:
                if pseudo_element:
                    raise self._error(
                        "only one pseudo-element is accepted per selector, "
                        f"got {pseudo_element} and {found}"
                    )
                if not self._accept_pseudo_elements:
                    raise self._error(
                        f"pseudo-element {found} found, but pseudo-elements "
                        "support is disabled"
                    )
                pseudo_element = found
            else:
                if pseudo_element:
                    raise self._error(
                        f"pseudo-element {pseudo_element} must be at the end of selector"
                    )
                selectors.append(selector)

        if len(selectors) == 1 and not pseudo_element:
            return selectors[0]
        return CompoundSelector(tuple(selectors), pseudo_element)

    def _parse_selector(self, relative: bool = False) -> Selector:
        self._skip_whitespace()
        if relative and self._peek() in _COMBINATORS and not self._at_end():
            # ``:has(> img)`` is relative to the subject element.
            result: Selector = CompoundSelector()
        else:
            result = self._parse_simple_selector_sequence()

        while True:
            combinator = " " if self._skip_whitespace() else ""
            if self._at_end():
                return result
            c = self._peek()
            if c in _COMBINATORS:
                combinator = c
                self._pos += 1
                self._skip_whitespace()
            elif c in (",", ")"):
                return result
            if not combinator:
                return result
            second = self._parse_simple_selector_sequence()
            result = CombinedSelector(result, combinator, second)

    def _parse_selector_group(self, relative: bool = False) -> SelectorGroup:
        selectors = [self._parse_selector(relative)]
        while self._peek() == ",":
            self._pos += 1
            selectors.append(self._parse_selector(relative))
        return SelectorGroup(tuple(selectors))


def parse(text: str) -> Selector:
    """Parse a single selector; pseudo-elements are rejected."""
    return SelectorParser(text).parse()


def parse_with_pseudo_element(text: str) -> Selector:
    """Parse a single selector that may end with a pseudo-element."""
    return SelectorParser(text, accept_pseudo_elements=True).parse()


def parse_group(text: str) -> SelectorGroup:
    """Parse a comma-separated selector group; pseudo-elements are rejected."""
    return SelectorParser(text).parse_group()


def parse_group_with_pseudo_elements(text: str) -> SelectorGroup:
    return SelectorParser(text, accept_pseudo_elements=True).parse_group()
