"""Settings persistence for editor defaults.

This module stores the defaults new editing sessions start from (font,
size, text color, alignment). Settings are stored in an OS-appropriate
location and survive application restarts.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .font_config import get_font_config
from .model import Alignment

logger = logging.getLogger(__name__)

KNOWN_SETTINGS = ('font_family', 'font_size', 'text_color', 'alignment')


class SettingsPersistence:
    """Manages persistent storage of editor defaults.

    Settings are stored as one JSON object in the user's config directory.
    """

    def __init__(self):
        """Initialize settings persistence."""
        # Get platform-appropriate config directory
        self._config_dir = Path(platformdirs.user_config_dir("richmark", "richmark"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Any]] = None

    def _ensure_config_dir(self) -> None:
        """Ensure the config directory exists."""
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def load_settings(self) -> Dict[str, Any]:
        """Load the stored settings.

        Returns:
            Dictionary of settings. Empty dict if the file doesn't exist or
            can't be read.
        """
        if self._settings_cache is not None:
            return self._settings_cache.copy()

        if not self._settings_file.exists():
            self._settings_cache = {}
            return {}

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._settings_cache = {}
            return {}

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return data.copy()

    def save_settings(self, settings: Dict[str, Any]) -> bool:
        """Save settings to disk atomically.

        Args:
            settings: Dictionary of settings to save.

        Returns:
            True if save was successful, False otherwise.
        """
        self._ensure_config_dir()

        # Write to a temp file, then rename over the real one
        temp_file = self._settings_file.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

        self._settings_cache = dict(settings)
        return True

    def update_setting(self, key: str, value: Any) -> bool:
        """Validate and store a single setting."""
        if not self.validate_setting(key, value):
            logger.warning(f"Refusing invalid setting {key}={value!r}")
            return False
        settings = self.load_settings()
        settings[key] = value
        return self.save_settings(settings)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a setting value.

        Args:
            key: Setting key name.
            value: Setting value to validate.

        Returns:
            True if setting is valid, False otherwise.
        """
        if value is None:
            return True  # None is valid (means "not set")

        if key == 'font_family':
            return isinstance(value, str) and get_font_config(value) is not None

        if key == 'font_size':
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            return EditorConstants.MIN_FONT_SIZE <= value <= EditorConstants.MAX_FONT_SIZE

        if key == 'text_color':
            return isinstance(value, str) and bool(value.strip())

        if key == 'alignment':
            return isinstance(value, str) and value in {a.value for a in Alignment}

        # Unknown settings are considered valid (forward compatibility)
        return True

    def validated_settings(self, settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Return the known settings that pass validation, dropping the rest."""
        if settings is None:
            settings = self.load_settings()
        result = {}
        for key in KNOWN_SETTINGS:
            value = settings.get(key)
            if value is None:
                continue
            if self.validate_setting(key, value):
                result[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r}")
        return result

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance.

    Returns:
        The singleton SettingsPersistence instance.
    """
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
