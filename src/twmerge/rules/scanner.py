"""Turn a CSS token stream into a flat sequence of grammar events.

Tokens come from the lark lexer defined in ``css.lark``; the scanner only
tracks block structure (rule lists, declaration lists and skipped nested
blocks) and normalizes the whitespace inside preludes and values.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from functools import cache
from pathlib import Path
from typing import Iterable, Iterator

from lark import Lark, Token

__all__ = [
    "GRAMMAR_PATH",
    "GrammarType",
    "GrammarEvent",
    "CssScanner",
    "tokenize",
    "normalize_tokens",
]

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "css.lark"

# At-rules whose block holds declarations instead of rules.
_DECLARATION_AT_RULES = frozenset(
    {
        "@font-face",
        "@page",
        "@property",
        "@counter-style",
        "@font-palette-values",
        "@viewport",
    }
)

_OPENERS = frozenset({"LPAR", "LSQB"})
_CLOSERS = frozenset({"RPAR", "RSQB"})
# Whitespace is dropped after these tokens in compact mode...
_NO_SPACE_AFTER = frozenset({"COMMA", "COLON", "LPAR"})
# ...and before these.
_NO_SPACE_BEFORE = frozenset({"COMMA", "COLON", "RPAR"})


class GrammarType(enum.Enum):
    BEGIN_AT_RULE = "begin_at_rule"
    END_AT_RULE = "end_at_rule"
    AT_RULE = "at_rule"
    BEGIN_RULESET = "begin_ruleset"
    END_RULESET = "end_ruleset"
    DECLARATION = "declaration"
    CUSTOM_PROPERTY = "custom_property"


@dataclass(frozen=True)
class GrammarEvent:
    """One structural event.

    ``data`` is the at-rule keyword (``@media``) or the property name;
    ``values`` are the normalized prelude or value tokens.
    """

    type: GrammarType
    data: str = ""
    values: tuple[Token, ...] = ()

    @property
    def text(self) -> str:
        return "".join(self.values)


@cache
def _css_lexer() -> Lark:
    return Lark(GRAMMAR_PATH.read_text(encoding="utf-8"), parser="lalr", lexer="basic")


def tokenize(source: str) -> Iterator[Token]:
    """Lex ``source`` lazily; comments are dropped, whitespace is kept.

    Raises lark's ``UnexpectedCharacters`` on input no terminal matches.
    """
    return _css_lexer().lex(source)


def normalize_tokens(tokens: Iterable[Token], compact: bool = True) -> tuple[Token, ...]:
    """Trim and collapse whitespace runs to a single space.

    In compact mode whitespace next to ``,`` and ``:``, after ``(`` and
    before ``)`` is dropped as well.
    """
    out: list[Token] = []
    for tok in tokens:
        if tok.type == "WS":
            if not out or out[-1].type == "WS":
                continue
            if compact and out[-1].type in _NO_SPACE_AFTER:
                continue
            out.append(Token("WS", " "))
            continue
        if compact and tok.type in _NO_SPACE_BEFORE and out and out[-1].type == "WS":
            out.pop()
        out.append(tok)
    if out and out[-1].type == "WS":
        out.pop()
    return tuple(out)


@dataclass
class _Block:
    kind: str  # "rules", "declarations" or "skip"
    end: GrammarType | None = None


class CssScanner:
    """Single forward pass over a stylesheet emitting :class:`GrammarEvent`.

    With ``inline=True`` the whole source is one declaration list, as in a
    ``style`` attribute.
    """

    def __init__(self, source: str, inline: bool = False):
        self._source = source
        self._inline = inline

    def __iter__(self) -> Iterator[GrammarEvent]:
        return self.events()

    def events(self) -> Iterator[GrammarEvent]:
        stack = [_Block("declarations" if self._inline else "rules")]
        buffer: list[Token] = []
        depth = 0

        for tok in tokenize(self._source):
            kind = tok.type
            if kind == "LBRACE" and depth == 0:
                yield from self._open_block(stack, buffer)
                buffer.clear()
            elif kind == "RBRACE" and depth == 0:
                yield from self._close_block(stack, buffer)
                buffer.clear()
            elif kind == "SEMICOLON" and depth == 0:
                yield from self._end_statement(stack[-1], buffer)
                buffer.clear()
            else:
                if kind in _OPENERS:
                    depth += 1
                elif kind in _CLOSERS and depth > 0:
                    depth -= 1
                if stack[-1].kind != "skip":
                    buffer.append(tok)

        yield from self._end_statement(stack[-1], buffer)
        while len(stack) > 1:
            block = stack.pop()
            if block.end is not None:
                yield GrammarEvent(block.end)

    def _open_block(self, stack: list[_Block], prelude: list[Token]) -> Iterator[GrammarEvent]:
        current = stack[-1]
        if current.kind != "rules":
            # Nested rules inside a declaration list are not supported.
            stack.append(_Block("skip"))
            return
        tokens = normalize_tokens(prelude, compact=False)
        if tokens and tokens[0].type == "AT_KEYWORD":
            name = tokens[0].lower()
            condition = normalize_tokens(tokens[1:])
            yield GrammarEvent(GrammarType.BEGIN_AT_RULE, name, condition)
            kind = "declarations" if name in _DECLARATION_AT_RULES else "rules"
            stack.append(_Block(kind, GrammarType.END_AT_RULE))
        else:
            yield GrammarEvent(GrammarType.BEGIN_RULESET, "", tokens)
            stack.append(_Block("declarations", GrammarType.END_RULESET))

    def _close_block(self, stack: list[_Block], buffer: list[Token]) -> Iterator[GrammarEvent]:
        yield from self._end_statement(stack[-1], buffer)
        if len(stack) == 1:
            logger.debug("ignoring unmatched '}'")
            return
        block = stack.pop()
        if block.end is not None:
            yield GrammarEvent(block.end)

    def _end_statement(self, block: _Block, buffer: list[Token]) -> Iterator[GrammarEvent]:
        if block.kind == "declarations":
            event = self._declaration(buffer)
            if event is not None:
                yield event
        elif block.kind == "rules":
            tokens = normalize_tokens(buffer)
            if tokens and tokens[0].type == "AT_KEYWORD":
                yield GrammarEvent(
                    GrammarType.AT_RULE, tokens[0].lower(), normalize_tokens(tokens[1:])
                )
            elif tokens:
                logger.debug("ignoring stray tokens %r", "".join(tokens))

    def _declaration(self, buffer: list[Token]) -> GrammarEvent | None:
        tokens = list(buffer)
        while tokens and tokens[0].type == "WS":
            tokens.pop(0)
        if not tokens:
            return None
        name = tokens[0]
        rest = tokens[1:]
        while rest and rest[0].type == "WS":
            rest.pop(0)
        if name.type != "WORD" or not rest or rest[0].type != "COLON":
            logger.debug("ignoring malformed declaration %r", "".join(buffer))
            return None
        values = rest[1:]
        if name.startswith("--"):
            return GrammarEvent(
                GrammarType.CUSTOM_PROPERTY, str(name), normalize_tokens(values, compact=False)
            )
        return GrammarEvent(GrammarType.DECLARATION, name.lower(), normalize_tokens(values))
