"""Tests for rule extraction from stylesheets."""

import io
import logging

import pytest

from twmerge.errors import RuleExtractionError
from twmerge.rules import CssDeclaration, CssRule, coarse_unescape, extract_rules
from twmerge.selector import (
    ClassSelector,
    CombinedSelector,
    CompoundSelector,
    IdSelector,
    SimplePseudoClass,
)


# ---------------------------------------------------------------------------
# Selectors and declarations
# ---------------------------------------------------------------------------


class TestSelectors:
    def test_descendant_selector(self):
        rules = extract_rules(".class1 .class2 { color: red; }")
        assert rules == [
            CssRule(
                CombinedSelector(ClassSelector("class1"), " ", ClassSelector("class2")),
                (CssDeclaration("color", "red"),),
            )
        ]

    def test_id_rule_is_extracted(self):
        rules = extract_rules("#test { color: red; }")
        assert rules[0].selector == IdSelector("test")

    def test_pseudo_class_variant(self):
        rules = extract_rules(r".read-only\:p-2:read-only { padding: .5rem; }")
        assert rules[0].selector == CompoundSelector(
            (ClassSelector("read-only:p-2"), SimplePseudoClass("read-only"))
        )
        assert rules[0].declarations == (CssDeclaration("padding", ".5rem"),)

    def test_pseudo_element(self):
        rules = extract_rules(r".before\:block::before { display: block; }")
        assert rules[0].selector == CompoundSelector((ClassSelector("before:block"),), "before")
        assert rules[0].condition == "::before"

    def test_group_yields_one_rule_per_selector(self):
        rules = extract_rules(".a, .b { color: red; }")
        assert [r.selector for r in rules] == [ClassSelector("a"), ClassSelector("b")]
        assert rules[0].declarations == rules[1].declarations

    def test_rules_keep_document_order(self):
        rules = extract_rules(".b { color: red } .a { color: blue }")
        assert [r.selector for r in rules] == [ClassSelector("b"), ClassSelector("a")]

    def test_empty_ruleset(self):
        assert extract_rules(".a {}") == [CssRule(ClassSelector("a"))]


class TestDeclarations:
    def test_value_is_compacted(self):
        rules = extract_rules(
            ".ring { box-shadow: var(--tw-ring-offset-shadow), var(--tw-ring-shadow), "
            "var(--tw-shadow, 0 0 #0000); }"
        )
        assert rules[0].declarations == (
            CssDeclaration(
                "box-shadow",
                "var(--tw-ring-offset-shadow),var(--tw-ring-shadow),var(--tw-shadow,0 0 #0000)",
            ),
        )

    def test_custom_property(self):
        decl = extract_rules(".a { --tw-ring-color: rgb(59 130 246 / 0.5); }")[0].declarations[0]
        assert decl.custom
        assert decl.value == "rgb(59 130 246 / 0.5)"

    def test_important(self):
        decl = extract_rules(".a { color: red !important; }")[0].declarations[0]
        assert decl.important
        assert not CssDeclaration("color", "red").important

    def test_backslashes_removed_from_values(self):
        decl = extract_rules(r".a { content: '\2014'; }")[0].declarations[0]
        assert decl.value == "'2014'"

    def test_coarse_unescape(self):
        assert coarse_unescape(r"a\:b") == "a:b"
        assert coarse_unescape("a\\\\b") == "a\\b"
        assert coarse_unescape("plain") == "plain"


# ---------------------------------------------------------------------------
# At-rules
# ---------------------------------------------------------------------------


class TestAtRules:
    def test_media_condition(self):
        source = r"""
        @media (min-width: 640px) {
            .sm\:grid-cols-2 { grid-template-columns: repeat(2, minmax(0, 1fr)); }
        }
        """
        rules = extract_rules(source)
        assert rules == [
            CssRule(
                ClassSelector("sm:grid-cols-2"),
                (CssDeclaration("grid-template-columns", "repeat(2,minmax(0,1fr))"),),
                "(min-width:640px)",
            )
        ]

    def test_supports_condition(self):
        rules = extract_rules("@supports (display: grid) { .a { display: grid } }")
        assert rules[0].at_rule_condition == "(display:grid)"

    def test_nested_conditions_are_concatenated(self):
        source = "@media (min-width: 640px) { @supports (display: grid) { .a { display: grid } } }"
        assert extract_rules(source)[0].at_rule_condition == "(min-width:640px)(display:grid)"

    def test_condition_ends_with_block(self):
        rules = extract_rules("@media print { .a { color: red } } .b { color: blue }")
        assert [r.at_rule_condition for r in rules] == ["print", ""]

    def test_condition_includes_pseudo_classes(self):
        rules = extract_rules(r"@media print { .print\:hover\:x:hover { color: red } }")
        assert rules[0].condition == "print:hover"

    @pytest.mark.parametrize(
        "source",
        [
            "@keyframes spin { to { transform: rotate(360deg) } }",
            "@font-face { font-family: X; src: url(x.woff2); }",
            "@layer base { .x { color: red } }",
            "@media print { @page { margin: 0 } }",
        ],
    )
    def test_unsupported_at_rules_are_skipped(self, source):
        rules = extract_rules(source + " .a { color: red }")
        assert [r.selector for r in rules] == [ClassSelector("a")]

    def test_statement_at_rules_are_ignored(self):
        rules = extract_rules("@import url(x.css); .a { color: red }")
        assert len(rules) == 1


# ---------------------------------------------------------------------------
# Errors and modes
# ---------------------------------------------------------------------------


class TestBadInput:
    def test_bad_selector_skips_ruleset(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="twmerge.rules.extract"):
            rules = extract_rules(".a:unknown-thing { color: red } .b { color: blue }")
        assert rules == [CssRule(ClassSelector("b"), (CssDeclaration("color", "blue"),))]
        assert "skipping ruleset" in caplog.text

    def test_unterminated_string_raises_with_partial_rules(self):
        with pytest.raises(RuleExtractionError) as exc_info:
            extract_rules('.a { color: red }\n.b { content: "oops }')
        err = exc_info.value
        assert "encountered error parsing CSS" in str(err)
        assert err.line == 2
        assert [r.selector for r in err.rules] == [ClassSelector("a")]
        assert err.cause is not None

    def test_empty_source(self):
        assert extract_rules("") == []


class TestModes:
    def test_inline(self):
        rules = extract_rules("color: red; margin: 0 auto", inline=True)
        assert rules == [
            CssRule(
                CompoundSelector(),
                (CssDeclaration("color", "red"), CssDeclaration("margin", "0 auto")),
            )
        ]

    def test_inline_empty(self):
        assert extract_rules("  ", inline=True) == []

    def test_file_object(self):
        rules = extract_rules(io.StringIO(".a { color: red }"))
        assert rules[0].selector == ClassSelector("a")
