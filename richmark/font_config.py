"""Font catalog for the richmark editor.

This module defines the fonts ``apply_font`` accepts, together with the CSS
font stacks used when a document is written out as HTML.
"""

from dataclasses import dataclass
from typing import Dict, Optional


GENERIC_SERIF = "serif"
GENERIC_SANS_SERIF = "sans-serif"
GENERIC_MONOSPACE = "monospace"


@dataclass(frozen=True)
class FontConfig:
    """Configuration for a font family.

    Attributes:
        name: Display name of the font, as stored in run attributes
        generic_family: CSS generic family used as the last fallback
        fallbacks: Other concrete families tried before the generic one
        supports_bold: Whether a bold face exists
        supports_italic: Whether an italic face exists
    """
    name: str
    generic_family: str
    fallbacks: tuple[str, ...] = ()
    supports_bold: bool = True
    supports_italic: bool = True

    @property
    def css_font_family(self) -> str:
        """CSS ``font-family`` value, quoting names that contain spaces."""
        families = [self.name, *self.fallbacks]
        return ", ".join([_quote_family(f) for f in families] + [self.generic_family])


def _quote_family(family: str) -> str:
    if " " in family:
        return f"'{family}'"
    return family


# Pre-defined font configurations
FONT_CONFIGS: Dict[str, FontConfig] = {
    "Helvetica": FontConfig("Helvetica", GENERIC_SANS_SERIF, ("Arial",)),
    "Arial": FontConfig("Arial", GENERIC_SANS_SERIF, ("Helvetica",)),
    "Verdana": FontConfig("Verdana", GENERIC_SANS_SERIF),
    "Georgia": FontConfig("Georgia", GENERIC_SERIF),
    "Times New Roman": FontConfig("Times New Roman", GENERIC_SERIF, ("Times",)),
    "Courier": FontConfig("Courier", GENERIC_MONOSPACE, ("Courier New",)),
    "Courier New": FontConfig("Courier New", GENERIC_MONOSPACE, ("Courier",)),
    "Menlo": FontConfig("Menlo", GENERIC_MONOSPACE, ("Monaco",)),
    "Zapfino": FontConfig("Zapfino", "cursive", supports_bold=False),
}


def get_font_config(font_name: str) -> Optional[FontConfig]:
    """Get font configuration by name.

    The exact name is tried first, then a case-insensitive match.

    Args:
        font_name: Name of the font

    Returns:
        FontConfig if found, None otherwise
    """
    config = FONT_CONFIGS.get(font_name)
    if config is not None:
        return config
    wanted = font_name.strip().lower()
    for name, candidate in FONT_CONFIGS.items():
        if name.lower() == wanted:
            return candidate
    return None


def css_font_family(font_name: str) -> str:
    """CSS ``font-family`` value for ``font_name``, known to the catalog or not."""
    config = get_font_config(font_name)
    if config is not None:
        return config.css_font_family
    return _quote_family(font_name)


def family_from_css(value: str) -> Optional[str]:
    """Pick the font name to store from a CSS ``font-family`` list.

    The first family in the list wins; names known to the catalog are
    normalized to their catalog spelling.
    """
    for raw in value.split(","):
        family = raw.strip().strip("'\"").strip()
        if not family:
            continue
        config = get_font_config(family)
        return config.name if config is not None else family
    return None
