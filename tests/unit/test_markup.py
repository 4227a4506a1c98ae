"""Tests for depth-aware splitting and markup parsing."""

import pytest

from viand.core.ir import HANDLER_SENTINEL, TextMode
from viand.core.markup import (
    classify_text,
    find_split_colon,
    find_top_level,
    parse_attributes,
    parse_event_binding,
    parse_markup,
    split_inline,
    split_top_level,
    unquote,
)


class TestTopLevelSplitting:
    """Tests for separators outside brackets and quotes."""

    def test_split_colon_skips_parens_and_quotes(self):
        """Test the split point is the colon outside every paren and quote."""
        text = 'div(onclick: "a:b(c:d)"): "literal: text"'

        assert find_split_colon(text) == 24
        assert split_inline(text) == ('div(onclick: "a:b(c:d)")', '"literal: text"')

    def test_split_colon_absent(self):
        assert find_split_colon('p("a: b")') == -1

    def test_split_colon_after_unbalanced_closer(self):
        assert find_split_colon("a): b") == 2

    def test_escaped_quote(self):
        assert find_split_colon('"a\\":b": c') == 7

    def test_split_top_level_commas(self):
        parts = split_top_level("a, f(b, c), 'd,e', [1, 2]")
        assert parts == ["a", " f(b, c)", " 'd,e'", " [1, 2]"]

    def test_split_top_level_empty(self):
        assert split_top_level("") == [""]

    def test_find_last_arrow(self):
        assert find_top_level("a -> b(c -> d)", "->", last=True) == 2
        assert find_top_level("a -> b -> c", "->", last=True) == 7

    def test_split_inline_block_header(self):
        assert split_inline("div.card:") == ("div.card", None)
        assert split_inline("span") == ("span", None)


class TestAttributes:
    """Tests for attribute list parsing."""

    def test_nested_call_is_one_attribute(self):
        markup = parse_markup("input(value: format(x, 2)):")

        assert markup.tag == "input"
        assert markup.attributes == {"value": "format(x, 2)"}
        assert markup.opens_block

    def test_prefixed_keys(self):
        attributes = parse_attributes("bind:value: $name, class:active: $on, style:color: $c")
        assert attributes == {
            "bind:value": "$name",
            "class:active": "$on",
            "style:color": "$c",
        }

    def test_bare_attribute_is_boolean(self):
        assert parse_attributes("disabled, type: 'button'") == {
            "disabled": "true",
            "type": "'button'",
        }

    def test_quoted_url_value(self):
        markup = parse_markup('a(href: "https://viand.dev"): "Docs"')

        assert markup.attributes == {"href": '"https://viand.dev"'}
        assert markup.inline == '"Docs"'


class TestEventBinding:
    """Tests for the text after ->."""

    @pytest.mark.parametrize(
        "side,key,handler",
        [
            ("click()", "onclick", "click()"),
            ("save", "onclick", "save()"),
            ("input(setName)", "oninput", "setName"),
            ("keydown.enter(submit)", "onkeydown|enter", "submit"),
            ("$count++", "onclick", "$count++"),
        ],
    )
    def test_binding_forms(self, side, key, handler):
        assert parse_event_binding(side) == (key, HANDLER_SENTINEL + handler)


class TestParseMarkup:
    """Tests for full markup declarations."""

    def test_everything_on_one_line(self):
        markup = parse_markup('button.primary#save(disabled) -> submit(): "Save"')

        assert markup.tag == "button"
        assert markup.ref == "save"
        assert markup.inline == '"Save"'
        assert not markup.opens_block
        assert list(markup.attributes) == ["disabled", "class", "onclick"]
        assert markup.attributes["class"] == "primary"
        assert markup.attributes["onclick"] == HANDLER_SENTINEL + "submit()"

    def test_tagless_defaults_to_div(self):
        markup = parse_markup(".card.active:")

        assert markup.tag == "div"
        assert markup.attributes == {"class": "card active"}
        assert markup.opens_block

    def test_ref_on_tag(self):
        markup = parse_markup("canvas#chart")

        assert markup.tag == "canvas"
        assert markup.ref == "chart"
        assert not markup.opens_block

    def test_component_reference(self):
        markup = parse_markup("Card(title: $t)")

        assert markup.tag == "Card"
        assert markup.attributes == {"title": "$t"}

    @pytest.mark.parametrize(
        "text,name",
        [("slot header", "header"), ("slot", "children"), ('slot: "Nothing here"', "children")],
    )
    def test_slot(self, text, name):
        assert parse_markup(text).slot == name


class TestTextModes:
    """Tests for classify_text()."""

    def test_literal(self):
        assert classify_text('"Hello"') == ("Hello", TextMode.LITERAL)

    def test_interpolated(self):
        assert classify_text("'Hi $name'") == ("Hi $name", TextMode.INTERPOLATED)

    def test_expression(self):
        assert classify_text("$count * 2") == ("$count * 2", TextMode.EXPRESSION)

    def test_concatenation_is_expression(self):
        assert classify_text('"a" + "b"') == ('"a" + "b"', TextMode.EXPRESSION)

    def test_prose(self):
        assert classify_text("total is $sum", prose=True) == (
            "total is $sum",
            TextMode.INTERPOLATED,
        )
        assert classify_text("plain words", prose=True) == ("plain words", TextMode.LITERAL)

    def test_unquote(self):
        assert unquote(' "a" ') == "a"
        assert unquote("'b'") == "b"
        assert unquote("\"c'") == "\"c'"
