"""Unit tests for font configuration module."""

import unittest
from richmark.font_config import (
    FontConfig,
    get_font_config,
    css_font_family,
    family_from_css,
    FONT_CONFIGS,
)


class TestFontConfig(unittest.TestCase):
    """Test font configuration functionality."""

    def test_exact_lookup(self):
        config = get_font_config("Georgia")
        self.assertIsNotNone(config)
        self.assertEqual(config.name, "Georgia")
        self.assertEqual(config.generic_family, "serif")

    def test_case_insensitive_lookup(self):
        """Names are normalized to their catalog spelling."""
        config = get_font_config("times new roman")
        self.assertIsNotNone(config)
        self.assertEqual(config.name, "Times New Roman")

    def test_unknown_font(self):
        """Test that unknown font returns None."""
        self.assertIsNone(get_font_config("Unknown Font"))

    def test_catalog_keys_match_names(self):
        for name, config in FONT_CONFIGS.items():
            self.assertEqual(name, config.name)

    def test_css_family_stack(self):
        self.assertEqual(css_font_family("Helvetica"), "Helvetica, Arial, sans-serif")
        self.assertEqual(css_font_family("Times New Roman"), "'Times New Roman', Times, serif")
        self.assertEqual(css_font_family("Verdana"), "Verdana, sans-serif")

    def test_css_family_for_unknown_font(self):
        self.assertEqual(css_font_family("Comic Relief"), "'Comic Relief'")
        self.assertEqual(css_font_family("Papyrus"), "Papyrus")

    def test_family_from_css_takes_first_family(self):
        self.assertEqual(family_from_css("'courier new', monospace"), "Courier New")
        self.assertEqual(family_from_css('"Menlo", Monaco, monospace'), "Menlo")
        self.assertEqual(family_from_css("Papyrus, fantasy"), "Papyrus")

    def test_family_from_empty_css(self):
        self.assertIsNone(family_from_css(""))
        self.assertIsNone(family_from_css(" , "))

    def test_custom_config(self):
        config = FontConfig("Inter", "sans-serif", ("Helvetica Neue",))
        self.assertEqual(config.css_font_family, "Inter, 'Helvetica Neue', sans-serif")
        self.assertTrue(config.supports_bold)


if __name__ == '__main__':
    unittest.main()
