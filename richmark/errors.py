"""Error kinds raised inside the editing core.

All of them are local and non-fatal: the editor catches them at its public
methods, logs them and returns an empty result with the document unchanged.
"""


class RichTextError(Exception):
    """Base class for richmark errors."""


class MarkupParseError(RichTextError):
    """Markup given to ``set_markup`` is absent or cannot be parsed."""


class StructuralMismatch(RichTextError):
    """Expected boundary markers (``<html>``, ``</html>``) are missing."""


class AttributeUnavailable(RichTextError):
    """There is no current font or attribute to operate on."""


class UnresolvedFont(RichTextError):
    """The named font is not in the font catalog."""

    def __init__(self, name: str):
        super().__init__(f"Unknown font: {name!r}")
        self.name = name
