"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

import pytest

from richmark.settings_persistence import SettingsPersistence, get_persistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        """Set up test fixtures."""
        # Create a temporary directory for test settings
        self.temp_dir = tempfile.mkdtemp()

        # Create a new SettingsPersistence instance with custom path
        self.persistence = SettingsPersistence()
        self.persistence._config_dir = Path(self.temp_dir) / "config"
        self.persistence._settings_file = self.persistence._config_dir / "test_settings.json"
        self.persistence._settings_cache = None

    def tearDown(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_save_and_load_settings(self):
        """Test saving and loading settings."""
        settings = {
            "font_family": "Georgia",
            "font_size": 18,
            "alignment": "center",
        }
        self.assertTrue(self.persistence.save_settings(settings))

        # Fresh cache so the file is read back
        self.persistence.clear_cache()
        self.assertEqual(self.persistence.load_settings(), settings)

    def test_load_missing_file(self):
        """No settings file means no settings."""
        self.assertEqual(self.persistence.load_settings(), {})

    def test_loaded_settings_are_copies(self):
        self.persistence.save_settings({"font_size": 12})
        loaded = self.persistence.load_settings()
        loaded["font_size"] = 40
        self.assertEqual(self.persistence.load_settings(), {"font_size": 12})

    def test_corrupt_file(self):
        """A file that is not JSON is ignored."""
        self.persistence._config_dir.mkdir(parents=True)
        self.persistence._settings_file.write_text("{not json", encoding="utf-8")
        with self.assertLogs("richmark.settings_persistence", level="WARNING"):
            self.assertEqual(self.persistence.load_settings(), {})

    def test_non_dict_file(self):
        self.persistence._config_dir.mkdir(parents=True)
        self.persistence._settings_file.write_text(json.dumps([1, 2]), encoding="utf-8")
        with self.assertLogs("richmark.settings_persistence", level="WARNING"):
            self.assertEqual(self.persistence.load_settings(), {})

    def test_atomic_save_leaves_no_temp_file(self):
        self.persistence.save_settings({"text_color": "#222"})
        files = sorted(p.name for p in self.persistence._config_dir.iterdir())
        self.assertEqual(files, ["test_settings.json"])

    def test_update_setting(self):
        self.assertTrue(self.persistence.update_setting("font_family", "Courier"))
        self.assertTrue(self.persistence.update_setting("font_size", 14))
        self.persistence.clear_cache()
        self.assertEqual(
            self.persistence.load_settings(),
            {"font_family": "Courier", "font_size": 14},
        )

    def test_update_setting_refuses_invalid_values(self):
        with self.assertLogs("richmark.settings_persistence", level="WARNING"):
            self.assertFalse(self.persistence.update_setting("font_size", 500))
        self.assertFalse(self.persistence._settings_file.exists())

    def test_validated_settings_drops_invalid_entries(self):
        self.persistence.save_settings({
            "font_family": "Nope",
            "font_size": 20,
            "alignment": "sideways",
            "text_color": "red",
        })
        with self.assertLogs("richmark.settings_persistence", level="WARNING"):
            valid = self.persistence.validated_settings()
        self.assertEqual(valid, {"font_size": 20, "text_color": "red"})

    def test_validated_settings_of_explicit_dict(self):
        self.persistence.save_settings({"font_size": 20})
        self.assertEqual(self.persistence.validated_settings({}), {})
        self.assertEqual(
            self.persistence.validated_settings({"alignment": "right", "other": 1}),
            {"alignment": "right"},
        )


@pytest.mark.parametrize("key,value,expected", [
    ("font_family", "Helvetica", True),
    ("font_family", "times new roman", True),
    ("font_family", "Comic Sans", False),
    ("font_family", 12, False),
    ("font_size", 6, True),
    ("font_size", 96, True),
    ("font_size", 12.5, True),
    ("font_size", 5, False),
    ("font_size", 97, False),
    ("font_size", True, False),
    ("font_size", "12", False),
    ("text_color", "#fff", True),
    ("text_color", "  ", False),
    ("alignment", "justified", True),
    ("alignment", "middle", False),
    ("alignment", None, True),
    ("unknown_key", "anything", True),
])
def test_validate_setting(key, value, expected):
    assert SettingsPersistence().validate_setting(key, value) is expected


def test_get_persistence_is_a_singleton():
    assert get_persistence() is get_persistence()
