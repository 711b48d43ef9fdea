"""Render selector trees back to CSS text.

``to_css`` is a left inverse of the parser: parsing its output yields a
selector equal to the one rendered.
"""

from __future__ import annotations

import re

from twmerge.selector.model import (
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
    "SPECIAL_CHARACTERS",
    "escape_name",
    "escape_identifier",
    "quote_string",
    "render_pseudo_element",
    "to_css",
    "unescape",
]

SPECIAL_CHARACTERS = ",!\"#$%&'()*+ -./:;<=>?@[\\]^`{|}~"

# Built once at import and never mutated.
_ESCAPE_TABLE: dict[int, str] = {ord(c): "\\" + c for c in SPECIAL_CHARACTERS}
_ESCAPE_TABLE.update({cp: f"\\{cp:x} " for cp in range(0x20)})
_ESCAPE_TABLE[0x7F] = "\\7f "

_STRING_TABLE: dict[int, str] = {ord('"'): '\\"', ord("\\"): "\\\\"}
_STRING_TABLE.update({cp: f"\\{cp:x} " for cp in range(0x20)})
_STRING_TABLE[0x7F] = "\\7f "

_PLAIN_NAME_RE = re.compile(r"-?[a-z_][a-z0-9_-]*")
_ESCAPE_RE = re.compile(r"\\(?:([0-9a-fA-F]{1,6})(?:\r\n|[ \t\r\n\f])?|(.)|$)", re.DOTALL)


def escape_name(name: str) -> str:
    """Backslash-escape every special character in ``name``."""
    return name.translate(_ESCAPE_TABLE)


def escape_identifier(ident: str) -> str:
    """Escape ``ident`` so it can start a selector token.

    A leading digit cannot appear literally in an identifier, so it gets a
    hex escape.
    """
    if ident[:1].isdigit() and ident[:1].isascii():
        return f"\\{ord(ident[0]):x} " + escape_name(ident[1:])
    return escape_name(ident)


def quote_string(value: str) -> str:
    return '"' + value.translate(_STRING_TABLE) + '"'


def _pseudo_name(name: str) -> str:
    if _PLAIN_NAME_RE.fullmatch(name):
        return name
    return escape_identifier(name)


def render_pseudo_element(name: str) -> str:
    return "::" + _pseudo_name(name)


def _render_group(group: SelectorGroup) -> str:
    return ", ".join(to_css(s) for s in group.selectors)


def _render_nth(selector: NthPseudoClass) -> str:
    if selector.a == 0 and selector.b == 1:
        prefix = ":last-" if selector.last else ":first-"
        return prefix + ("of-type" if selector.of_type else "child")
    name = "nth-last-" if selector.last else "nth-"
    name += "of-type" if selector.of_type else "child"
    return f":{name}({selector.a}n{selector.b:+d})"


def _render_attr(selector: AttrSelector) -> str:
    key = escape_identifier(selector.key)
    if not selector.operation:
        body = key
    elif selector.operation == "#=":
        pattern = selector.pattern.pattern if selector.pattern is not None else ""
        body = f"{key}#={pattern}"
    else:
        body = f"{key}{selector.operation}{quote_string(selector.value)}"
    if selector.insensitive:
        body += " i"
    return f"[{body}]"


def to_css(selector: Selector) -> str:
    """Render ``selector`` as canonical CSS text."""
    if isinstance(selector, TagSelector):
        return escape_identifier(selector.tag)
    if isinstance(selector, ClassSelector):
        return "." + escape_identifier(selector.name)
    if isinstance(selector, IdSelector):
        return "#" + escape_name(selector.id)
    if isinstance(selector, AttrSelector):
        return _render_attr(selector)
    if isinstance(selector, CompoundSelector):
        text = "".join(to_css(s) for s in selector.selectors)
        if selector.pseudo_element:
            return text + render_pseudo_element(selector.pseudo_element)
        return text or "*"
    if isinstance(selector, CombinedSelector):
        first, second = to_css(selector.first), to_css(selector.second)
        if selector.combinator == " ":
            return f"{first} {second}"
        return f"{first} {selector.combinator} {second}"
    if isinstance(selector, SelectorGroup):
        return _render_group(selector)
    if isinstance(selector, RelativePseudoClass):
        return f":{selector.name}({_render_group(selector.match)})"
    if isinstance(selector, IsPseudoClass):
        return f":is({_render_group(selector.match)})"
    if isinstance(selector, WherePseudoClass):
        return f":where({_render_group(selector.match)})"
    if isinstance(selector, ContainsPseudoClass):
        name = "containsown" if selector.own else "contains"
        return f":{name}({quote_string(selector.value)})"
    if isinstance(selector, RegexpPseudoClass):
        name = "matchesown" if selector.own else "matches"
        return f":{name}({selector.pattern.pattern})"
    if isinstance(selector, NthPseudoClass):
        return _render_nth(selector)
    if isinstance(selector, OnlyChildPseudoClass):
        return ":only-of-type" if selector.of_type else ":only-child"
    if isinstance(selector, LangPseudoClass):
        return f":lang({_pseudo_name(selector.lang)})"
    if isinstance(selector, SimplePseudoClass):
        return ":" + _pseudo_name(selector.name)
    raise TypeError(f"cannot render {type(selector).__name__}")


def _decode_escape(match: re.Match[str]) -> str:
    hex_digits, literal = match.group(1), match.group(2)
    if hex_digits is not None:
        code = int(hex_digits, 16)
        if code == 0 or 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
            return "\ufffd"
        return chr(code)
    if literal is not None:
        return literal
    return ""


def unescape(text: str) -> str:
    """Decode every CSS escape sequence in ``text``."""
    if "\\" not in text:
        return text
    return _ESCAPE_RE.sub(_decode_escape, text)
