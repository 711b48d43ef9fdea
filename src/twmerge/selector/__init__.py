"""CSS selector model, parser and serializer."""

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
    PseudoClass,
    RegexpPseudoClass,
    RelativePseudoClass,
    Selector,
    SelectorGroup,
    SimplePseudoClass,
    Specificity,
    TagSelector,
    WherePseudoClass,
    is_condition_pseudo,
)
from twmerge.selector.parser import (
    parse,
    parse_group,
    parse_group_with_pseudo_elements,
    parse_with_pseudo_element,
)
from twmerge.selector.serialize import to_css, unescape

__all__ = [
    "AttrSelector",
    "ClassSelector",
    "CombinedSelector",
    "CompoundSelector",
    "ContainsPseudoClass",
    "IdSelector",
    "IsPseudoClass",
    "LangPseudoClass",
    "NthPseudoClass",
    "OnlyChildPseudoClass",
    "PseudoClass",
    "RegexpPseudoClass",
    "RelativePseudoClass",
    "Selector",
    "SelectorGroup",
    "SimplePseudoClass",
    "Specificity",
    "TagSelector",
    "WherePseudoClass",
    "is_condition_pseudo",
    "parse",
    "parse_group",
    "parse_group_with_pseudo_elements",
    "parse_with_pseudo_element",
    "to_css",
    "unescape",
]
