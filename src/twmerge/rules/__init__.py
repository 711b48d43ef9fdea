"""Stylesheet tokenizing and rule extraction."""

from twmerge.rules.extract import RuleExtractor, coarse_unescape, extract_rules
from twmerge.rules.model import CssDeclaration, CssRule
from twmerge.rules.scanner import CssScanner, GrammarEvent, GrammarType

__all__ = [
    "CssDeclaration",
    "CssRule",
    "CssScanner",
    "GrammarEvent",
    "GrammarType",
    "RuleExtractor",
    "coarse_unescape",
    "extract_rules",
]
