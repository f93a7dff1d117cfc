"""Constants and configuration for the richmark editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Default typing attributes
    DEFAULT_FONT_FAMILY = "Helvetica"
    DEFAULT_FONT_SIZE = 16.0

    # List markers
    BULLET_MARKER = "• "  # Bullet glyph followed by one space
    ORDERED_MARKER_FORMAT = "{}. "  # Number, period, one space

    # Line breaks
    PARAGRAPH_SEPARATOR = "\n"
    LINE_SEPARATOR = "\u2028"  # Soft break inside a paragraph

    # Markup export
    GENERATOR_NAME = "richmark"
    EXPORT_DOCTYPE = (
        '<!DOCTYPE html PUBLIC "-//W3C//DTD HTML 4.01//EN" '
        '"http://www.w3.org/TR/html4/strict.dtd">'
    )
    PARAGRAPH_CLASS_PREFIX = "p"
    SPAN_CLASS_PREFIX = "s"

    # Settings limits
    MIN_FONT_SIZE = 6
    MAX_FONT_SIZE = 96
