"""Formatting commands applied to a document and its selection."""

import logging
from dataclasses import replace
from typing import Any, Optional

from .errors import AttributeUnavailable, UnresolvedFont
from .font_config import get_font_config
from .lists import rebuild_lines
from .model import ATTRIBUTE_KEYS, Alignment, Document, ListKind, TextAttributes, TextRange

logger = logging.getLogger(__name__)

TRAITS = ("bold", "italic", "underline")


class FormattingExecutor:
    """Applies formatting to a document and keeps the typing attributes.

    The typing attributes are the attributes newly typed text receives. They
    belong to one editing session; every editor has its own executor.

    Every operation returns True when it changed the document or the typing
    attributes.
    """

    def __init__(self, typing_attributes: Optional[TextAttributes] = None):
        self.typing_attributes = typing_attributes if typing_attributes is not None else TextAttributes()

    def toggle_trait(self, document: Document, selection: TextRange, trait: str) -> bool:
        """Flip ``trait`` on every run inside the selection.

        Each run flips from its own state, so a half-bold selection stays
        mixed. Under an empty selection the typing attributes flip instead.

        Raises:
            AttributeUnavailable: If the selection is empty and there is no
                typing font to carry the trait
        """
        if trait not in TRAITS:
            raise KeyError(trait)
        if selection.is_empty:
            if not self.typing_attributes.font_family:
                raise AttributeUnavailable(f"no typing font to toggle {trait} on")
            current = getattr(self.typing_attributes, trait)
            self.typing_attributes = replace(self.typing_attributes, **{trait: not current})
            return True
        document.update_attributes(
            selection, lambda attrs: replace(attrs, **{trait: not getattr(attrs, trait)})
        )
        return True

    def toggle_underline(self, document: Document, selection: TextRange) -> bool:
        return self.toggle_trait(document, selection, "underline")

    def apply_attribute(self, document: Document, selection: TextRange, key: str, value: Any) -> bool:
        """Set ``key`` across the whole selection, or on the typing attributes."""
        if key not in ATTRIBUTE_KEYS:
            raise KeyError(key)
        if selection.is_empty:
            self.typing_attributes = replace(self.typing_attributes, **{key: value})
            return True
        document.set_attribute(selection, key, value)
        return True

    def _apply_with_typing(self, document: Document, selection: TextRange, key: str, value: Any) -> bool:
        changed = self.apply_attribute(document, selection, key, value)
        self.typing_attributes = replace(self.typing_attributes, **{key: value})
        return changed

    def apply_text_color(self, document: Document, selection: TextRange, color: str) -> bool:
        if not color:
            logger.debug("Ignoring empty text color")
            return False
        return self._apply_with_typing(document, selection, "color", color)

    def apply_font(self, document: Document, selection: TextRange, name: str) -> bool:
        """Change the font family; size and traits are kept.

        Raises:
            UnresolvedFont: If ``name`` is not in the font catalog
        """
        config = get_font_config(name)
        if config is None:
            raise UnresolvedFont(name)
        return self._apply_with_typing(document, selection, "font_family", config.name)

    def apply_font_size(self, document: Document, selection: TextRange, size: float) -> bool:
        if size is None or size <= 0:
            logger.debug(f"Ignoring font size {size}")
            return False
        return self._apply_with_typing(document, selection, "font_size", float(size))

    def apply_link(self, document: Document, selection: TextRange, uri: str) -> bool:
        if not uri:
            logger.debug("Ignoring empty link")
            return False
        return self._apply_with_typing(document, selection, "link", uri)

    def remove_link(self, document: Document, selection: TextRange) -> bool:
        return self._apply_with_typing(document, selection, "link", None)

    def apply_text_alignment(self, document: Document, selection: TextRange, alignment: Alignment) -> bool:
        """Set the alignment of every paragraph the selection touches.

        Only the alignment field of each run's paragraph style changes. The
        paragraph terminators are included so empty paragraphs align too.
        """
        paragraphs = document.paragraph_range_for(selection)
        if paragraphs.end < len(document):
            paragraphs = TextRange(paragraphs.location, paragraphs.length + 1)
        document.update_attributes(paragraphs, lambda attrs: attrs.with_alignment(alignment))
        self.typing_attributes = self.typing_attributes.with_alignment(alignment)
        return True

    def apply_list_style(self, document: Document, selection: TextRange, kind: ListKind) -> TextRange:
        """Turn the paragraphs under the selection into one uniform list.

        Existing markers are stripped and every line gets a new one; ordered
        lines are numbered from 1. The rebuilt block is written in one
        replacement carrying the typing attributes only, so character styling
        inside the block is not preserved.

        Returns:
            The range of the rebuilt block
        """
        block = document.paragraph_range_for(selection)
        lines = document.text(block).split("\n")
        rebuilt = "\n".join(rebuild_lines(lines, kind))
        document.replace(block, rebuilt, self.typing_attributes)
        return TextRange(block.location, len(rebuilt))

    def update_typing_attributes_from(self, document: Document, caret: int) -> bool:
        """Take the typing attributes from the character left of ``caret``.

        At the start of the document the first character is used. An empty
        document leaves the typing attributes alone.
        """
        if not len(document):
            return False
        attrs = document.attributes_at(caret - 1 if caret > 0 else 0)
        if attrs is None or attrs == self.typing_attributes:
            return False
        self.typing_attributes = attrs
        return True
