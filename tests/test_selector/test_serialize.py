"""Tests for rendering selectors back to CSS."""

import pytest

from twmerge.selector import (
    AttrSelector,
    ClassSelector,
    CombinedSelector,
    CompoundSelector,
    ContainsPseudoClass,
    IdSelector,
    NthPseudoClass,
    SimplePseudoClass,
    TagSelector,
    parse,
    parse_group_with_pseudo_elements,
    parse_with_pseudo_element,
    to_css,
    unescape,
)
from twmerge.selector.serialize import escape_identifier, escape_name


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


class TestEscaping:
    def test_special_characters_get_backslash(self):
        assert escape_name("sm:p-2") == "sm\\:p\\-2"

    def test_every_special_character(self):
        specials = ",!\"#$%&'()*+ -./:;<=>?@[\\]^`{|}~"
        assert escape_name(specials) == "".join("\\" + c for c in specials)

    def test_plain_characters_untouched(self):
        assert escape_name("abc_XYZ09é") == "abc_XYZ09é"

    def test_control_characters_get_hex_escape(self):
        assert escape_name("a\tb") == "a\\9 b"

    def test_leading_digit_gets_hex_escape(self):
        assert escape_identifier("2xl") == "\\32 xl"

    def test_unescape_literal(self):
        assert unescape("sm\\:p\\-2") == "sm:p-2"

    def test_unescape_hex(self):
        assert unescape("\\32 xl\\000041") == "2xlA"

    def test_unescape_plain_text(self):
        assert unescape("abc") == "abc"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRendering:
    def test_class(self):
        assert to_css(ClassSelector("w-1/2")) == ".w\\-1\\/2"

    def test_str_delegates_to_to_css(self):
        assert str(ClassSelector("hover:x")) == ".hover\\:x"

    def test_id(self):
        assert to_css(IdSelector("1a")) == "#1a"

    def test_tag(self):
        assert to_css(TagSelector("div")) == "div"

    def test_attributes(self):
        assert to_css(AttrSelector("hidden")) == "[hidden]"
        assert to_css(AttrSelector("type", "=", "button")) == '[type="button"]'
        assert to_css(AttrSelector("type", "^=", "a", insensitive=True)) == '[type^="a" i]'

    def test_attribute_value_quotes_are_escaped(self):
        assert to_css(AttrSelector("title", "=", 'a"b\\')) == '[title="a\\"b\\\\"]'

    def test_universal(self):
        assert to_css(CompoundSelector()) == "*"

    def test_pseudo_element(self):
        assert to_css(CompoundSelector((), "before")) == "::before"
        assert to_css(CompoundSelector((ClassSelector("a"),), "after")) == ".a::after"

    def test_compound(self):
        sel = CompoundSelector((TagSelector("a"), ClassSelector("b"), SimplePseudoClass("hover")))
        assert to_css(sel) == "a.b:hover"

    def test_combinators(self):
        a, b = ClassSelector("a"), ClassSelector("b")
        assert to_css(CombinedSelector(a, " ", b)) == ".a .b"
        assert to_css(CombinedSelector(a, ">", b)) == ".a > .b"
        assert to_css(CombinedSelector(a, "~", b)) == ".a ~ .b"

    @pytest.mark.parametrize(
        "selector, expected",
        [
            (NthPseudoClass(0, 1), ":first-child"),
            (NthPseudoClass(0, 1, last=True), ":last-child"),
            (NthPseudoClass(0, 1, of_type=True), ":first-of-type"),
            (NthPseudoClass(2, 1), ":nth-child(2n+1)"),
            (NthPseudoClass(2, -1, last=True), ":nth-last-child(2n-1)"),
            (NthPseudoClass(0, 3, of_type=True), ":nth-of-type(0n+3)"),
            (NthPseudoClass(-1, 3, last=True, of_type=True), ":nth-last-of-type(-1n+3)"),
        ],
    )
    def test_nth(self, selector, expected):
        assert to_css(selector) == expected

    def test_contains(self):
        assert to_css(ContainsPseudoClass('a"b')) == ':contains("a\\"b")'
        assert to_css(ContainsPseudoClass("x", own=True)) == ':containsown("x")'

    def test_group(self):
        group = parse_group_with_pseudo_elements(".a,.b::before")
        assert to_css(group) == ".a, .b::before"

    def test_unknown_type(self):
        with pytest.raises(TypeError):
            to_css(object())


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            r".sm\:p-2",
            r".\31 0",
            r".\[\&\>\*\]\:underline > *",
            r".a\9 b",
            r"#\31 23",
            "div.a#b[type='x' i]:hover",
            ".a > .b ~ .c + .d .e",
            ":not(.a, [b])",
            ":has(> img, + p)",
            ":is(.dark *)",
            ":where([dir=rtl], [dir=rtl] *)",
            ":nth-child(2n-1)",
            ":nth-last-of-type(-n+3)",
            ":nth-of-type(5)",
            ":first-child:only-of-type",
            ':contains("x y")',
            ":matches(^a+$)",
            ":lang(en-us)",
            ":-webkit-autofill",
            r'[data-x="a\\b\"c"]',
            "[href#=(^https?:)]",
            ".space-x-2 > :not([hidden]) ~ :not([hidden])",
        ],
    )
    def test_parse_render_parse(self, text):
        selector = parse(text)
        assert parse(to_css(selector)) == selector

    @pytest.mark.parametrize(
        "text",
        [
            ".a::before",
            "::-moz-placeholder",
            ".x:hover::marker",
            ".a *::selection",
        ],
    )
    def test_pseudo_elements(self, text):
        selector = parse_with_pseudo_element(text)
        assert parse_with_pseudo_element(to_css(selector)) == selector
