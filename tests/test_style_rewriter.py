"""Tests for rewriting class-based styles into inline style attributes."""

import unittest

from richmark.style_rewriter import (
    extract_class_styles,
    parse_css_rules,
    parse_declarations,
    rewrite_classes_to_inline_styles,
)


class TestRewriteClasses(unittest.TestCase):

    def test_exact_class_match_only(self):
        """Superstrings and multi-class values of a mapped name are left alone."""
        html = '<p class="s1">a</p><p class="s10">b</p><p class="s1 s2">c</p><p class="xs1">d</p>'
        result = rewrite_classes_to_inline_styles(html, {"s1": "color: red"})
        self.assertEqual(
            result,
            '<p class="s1" style="color: red">a</p><p class="s10">b</p>'
            '<p class="s1 s2">c</p><p class="xs1">d</p>',
        )

    def test_substring_of_mapped_name_is_left_alone(self):
        html = '<span class="s">x</span>'
        self.assertEqual(rewrite_classes_to_inline_styles(html, {"s1": "color: red"}), html)

    def test_self_closing_tags(self):
        self.assertEqual(
            rewrite_classes_to_inline_styles('<br class="x"/>', {"x": "a: b"}),
            '<br class="x" style="a: b"/>',
        )
        self.assertEqual(
            rewrite_classes_to_inline_styles('<br class="x" />', {"x": "a: b"}),
            '<br class="x" style="a: b" />',
        )

    def test_other_attributes_are_kept(self):
        html = '<a href="u" class="s1" title="t">x</a>'
        self.assertEqual(
            rewrite_classes_to_inline_styles(html, {"s1": "color: blue"}),
            '<a href="u" class="s1" title="t" style="color: blue">x</a>',
        )

    def test_angle_bracket_inside_attribute_value(self):
        """A ``>`` inside a quoted value does not end the tag."""
        self.assertEqual(
            rewrite_classes_to_inline_styles('<p class="s1" title="a>b">x</p>', {"s1": "color: red"}),
            '<p class="s1" title="a>b" style="color: red">x</p>',
        )
        self.assertEqual(
            rewrite_classes_to_inline_styles("<p data-x='1>0' class=\"s1\">x</p>", {"s1": "color: red"}),
            "<p data-x='1>0' class=\"s1\" style=\"color: red\">x</p>",
        )

    def test_class_text_inside_another_attribute_is_not_a_match(self):
        html = "<p title=' class=\"s1\"'>x</p>"
        self.assertEqual(rewrite_classes_to_inline_styles(html, {"s1": "color: red"}), html)

    def test_duplicate_mappings_give_duplicate_attributes(self):
        result = rewrite_classes_to_inline_styles(
            '<span class="a">x</span>', [("a", "color: red"), ("a", "font-weight: bold")]
        )
        self.assertEqual(
            result, '<span class="a" style="color: red" style="font-weight: bold">x</span>'
        )

    def test_class_names_are_not_patterns(self):
        html = '<span class="aXb">x</span>'
        self.assertEqual(rewrite_classes_to_inline_styles(html, {"a.b": "color: red"}), html)

    def test_quotes_in_declarations_are_escaped(self):
        result = rewrite_classes_to_inline_styles(
            '<span class="f">x</span>', {"f": 'font-family: "Times New Roman"'}
        )
        self.assertEqual(
            result, '<span class="f" style="font-family: &quot;Times New Roman&quot;">x</span>'
        )

    def test_empty_map(self):
        html = '<p class="s1">a</p>'
        self.assertEqual(rewrite_classes_to_inline_styles(html, {}), html)


def test_parse_css_rules():
    css = (
        "p.p1 {margin: 0; text-align: center}\n"
        ".s1, span.s2 {color: red;}\n"
        "div {x: y}\n"
        "/* .c {a: b} */"
    )
    assert parse_css_rules(css) == {
        "p1": "margin: 0; text-align: center",
        "s1": "color: red",
        "s2": "color: red",
    }


def test_later_rules_extend_earlier_ones():
    assert parse_css_rules(".a {color: red} .a {font-weight: bold}") == {
        "a": "color: red; font-weight: bold"
    }


def test_extract_class_styles_from_style_blocks():
    html = (
        '<html><head><style type="text/css">p.p1 {margin: 0}</style>'
        "<style>span.s1 {color: red}</style></head><body></body></html>"
    )
    assert extract_class_styles(html) == {"p1": "margin: 0", "s1": "color: red"}


def test_extract_class_styles_without_markup():
    assert extract_class_styles("") == {}
    assert extract_class_styles("<p>no styles</p>") == {}


def test_parse_declarations():
    assert parse_declarations("Color: red; font-size:12px;;bogus") == {
        "color": "red",
        "font-size": "12px",
    }
