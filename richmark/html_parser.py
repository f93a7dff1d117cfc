"""HTML parsing into styled documents.

Handles the markup richmark writes itself (class-styled exports and
inline-styled fragments) as well as common hand-written HTML: ``<b>``,
``<i>``, ``<u>``, ``<a href>``, ``<font>``, inline ``style`` attributes,
paragraphs, line breaks and ``<ul>``/``<ol>`` lists.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Optional

from lxml import etree
import lxml.html

from .errors import MarkupParseError
from .font_config import family_from_css
from .lists import format_marker
from .model import Alignment, Document, ListKind, TextAttributes
from .style_rewriter import parse_css_rules, parse_declarations

logger = logging.getLogger(__name__)

# Maximum markup size to parse (10MB)
MAX_MARKUP_SIZE = 10 * 1024 * 1024

BLOCK_TAGS = frozenset({
    "p", "div", "li", "blockquote", "pre", "center", "section", "article",
    "header", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol",
    "table", "tr", "dl", "dt", "dd", "address", "hr",
})
SKIPPED_TAGS = frozenset({"head", "script", "style", "title", "meta", "link", "noscript"})

_WHITESPACE_RE = re.compile(r"[ \t\r\n\f]+")
_SIZE_RE = re.compile(r"^([\d.]+)\s*(px|pt|em|rem)?$")

_ALIGNMENTS = {
    "left": Alignment.LEFT,
    "center": Alignment.CENTER,
    "right": Alignment.RIGHT,
    "justify": Alignment.JUSTIFIED,
}

# Legacy <font size="1".."7"> in pixels
_FONT_SIZE_STEPS = {1: 10.0, 2: 13.0, 3: 16.0, 4: 18.0, 5: 24.0, 6: 32.0, 7: 48.0}


def _parse_size(value: str) -> Optional[float]:
    m = _SIZE_RE.match(value.strip().lower())
    if not m:
        return None
    size = float(m.group(1))
    unit = m.group(2) or "px"
    if unit == "pt":
        return round(size * 4 / 3, 2)
    if unit in ("em", "rem"):
        return round(size * 16, 2)
    return size


def apply_declarations(attrs: TextAttributes, declarations: dict[str, str]) -> TextAttributes:
    """Fold CSS declarations into ``attrs``."""
    changes = {}
    if "font-family" in declarations:
        family = family_from_css(declarations["font-family"])
        if family:
            changes["font_family"] = family
    if "font-size" in declarations:
        size = _parse_size(declarations["font-size"])
        if size:
            changes["font_size"] = size
    if "font-weight" in declarations:
        weight = declarations["font-weight"].lower()
        if weight.isdigit():
            changes["bold"] = int(weight) >= 600
        else:
            changes["bold"] = weight in ("bold", "bolder")
    if "font-style" in declarations:
        changes["italic"] = declarations["font-style"].lower() in ("italic", "oblique")
    if "color" in declarations and declarations["color"]:
        changes["color"] = declarations["color"]
    decoration = declarations.get("text-decoration") or declarations.get("text-decoration-line")
    if decoration is not None:
        changes["underline"] = "underline" in decoration.lower()
    if "text-align" in declarations:
        alignment = _ALIGNMENTS.get(declarations["text-align"].lower())
        if alignment is not None:
            attrs = attrs.with_alignment(alignment)
    return replace(attrs, **changes) if changes else attrs


class _DocumentBuilder:
    """Walks an lxml tree and collects paragraphs of styled pieces."""

    def __init__(self, class_map: dict[str, str]):
        self._class_map = class_map
        self.paragraphs: list[list[tuple[str, TextAttributes]]] = []
        self._current: Optional[list[tuple[str, TextAttributes]]] = None
        self._at_line_start = True
        self._marker_only: set[int] = set()
        self._lists: list[list] = []  # [kind, next index] per open list

    # --- Paragraph bookkeeping ---
    def _open_paragraph(self) -> list[tuple[str, TextAttributes]]:
        if self._current is None:
            self._current = []
            self.paragraphs.append(self._current)
            self._at_line_start = True
        return self._current

    def _close_paragraph(self):
        self._current = None
        self._at_line_start = True

    def _holds_only_marker(self) -> bool:
        current = self._current
        return current is not None and len(current) == 1 and id(current) in self._marker_only

    def _add_text(self, text: Optional[str], attrs: TextAttributes):
        if not text:
            return
        text = _WHITESPACE_RE.sub(" ", text)
        if self._at_line_start:
            text = text.lstrip(" ")
            if not text:
                return
        self._open_paragraph().append((text, attrs))
        self._at_line_start = False

    # --- Styling ---
    def _element_attributes(self, el, attrs: TextAttributes) -> TextAttributes:
        tag = el.tag
        if tag in ("b", "strong"):
            attrs = replace(attrs, bold=True)
        elif tag in ("i", "em", "cite", "var"):
            attrs = replace(attrs, italic=True)
        elif tag in ("u", "ins"):
            attrs = replace(attrs, underline=True)
        elif tag == "a" and el.get("href"):
            attrs = replace(attrs, link=el.get("href"))
        elif tag == "center":
            attrs = attrs.with_alignment(Alignment.CENTER)
        elif tag == "font":
            attrs = self._font_attributes(el, attrs)
        elif tag in ("h1", "h2", "h3", "h4", "h5", "h6", "th"):
            attrs = replace(attrs, bold=True)

        align = el.get("align")
        if align and align.lower() in _ALIGNMENTS:
            attrs = attrs.with_alignment(_ALIGNMENTS[align.lower()])
        for class_name in (el.get("class") or "").split():
            declarations = self._class_map.get(class_name)
            if declarations:
                attrs = apply_declarations(attrs, parse_declarations(declarations))
        style = el.get("style")
        if style:
            attrs = apply_declarations(attrs, parse_declarations(style))
        return attrs

    @staticmethod
    def _font_attributes(el, attrs: TextAttributes) -> TextAttributes:
        face = el.get("face")
        if face:
            family = family_from_css(face)
            if family:
                attrs = replace(attrs, font_family=family)
        color = el.get("color")
        if color:
            attrs = replace(attrs, color=color)
        size = el.get("size")
        if size and size.strip().isdigit():
            step = _FONT_SIZE_STEPS.get(int(size.strip()))
            if step:
                attrs = replace(attrs, font_size=step)
        return attrs

    # --- Walking ---
    def walk(self, el, attrs: TextAttributes):
        if not isinstance(el.tag, str):
            # Comments and processing instructions: only their tail is text
            self._add_text(el.tail, attrs)
            return
        tag = el.tag.lower()
        if tag in SKIPPED_TAGS:
            return
        if tag == "br":
            self._open_paragraph()
            self._close_paragraph()
            return

        el_attrs = self._element_attributes(el, attrs)
        is_block = tag in BLOCK_TAGS
        if is_block and (tag in ("ul", "ol", "li") or not self._holds_only_marker()):
            # <li><p>text</p></li>: the block continues the item after its marker
            self._close_paragraph()
        paragraphs_before = len(self.paragraphs)

        if tag in ("ul", "ol"):
            kind = ListKind.UNORDERED if tag == "ul" else ListKind.ORDERED
            start = el.get("start", "1")
            self._lists.append([kind, int(start) if start.strip().isdigit() else 1])
        elif tag == "li":
            self._open_list_item(el_attrs)

        if tag == "pre":
            if el.text:
                self._open_paragraph().append((el.text, el_attrs))
                self._at_line_start = False
        else:
            self._add_text(el.text, el_attrs)
        for child in el:
            self.walk(child, el_attrs)
            if isinstance(child.tag, str):
                self._add_text(child.tail, el_attrs)

        if tag in ("ul", "ol"):
            self._lists.pop()
        if is_block:
            if tag in ("p", "div", "li", "pre", "h1", "h2", "h3", "h4", "h5", "h6") \
                    and len(self.paragraphs) == paragraphs_before:
                # An empty block still stands for an empty paragraph
                self._open_paragraph()
            self._close_paragraph()

    def _open_list_item(self, attrs: TextAttributes):
        if self._lists:
            entry = self._lists[-1]
            kind, index = entry
            entry[1] += 1
        else:
            kind, index = ListKind.UNORDERED, 1
        paragraph = self._open_paragraph()
        paragraph.append((format_marker(kind, index), attrs))
        self._marker_only.add(id(paragraph))
        self._at_line_start = True

    def pieces(self) -> list[tuple[str, TextAttributes]]:
        result: list[tuple[str, TextAttributes]] = []
        for i, paragraph in enumerate(self.paragraphs):
            if paragraph and not (len(paragraph) == 1 and id(paragraph) in self._marker_only):
                # Trailing collapsed whitespace at the paragraph end is dropped
                text, attrs = paragraph[-1]
                paragraph[-1] = (text.rstrip(" "), attrs)
            if i > 0:
                # The terminator takes the attributes of the paragraph it ends, minus the link
                prev = self.paragraphs[i - 1]
                sep_attrs = prev[-1][1] if prev else (paragraph[0][1] if paragraph else None)
                if sep_attrs is not None and sep_attrs.link:
                    sep_attrs = replace(sep_attrs, link=None)
                result.append(("\n", sep_attrs))
            result.extend(paragraph)
        return result


def _empty_separator_attributes(pieces, base: TextAttributes):
    return [(text, attrs if attrs is not None else base) for text, attrs in pieces]


def parse_html(markup: Optional[str], base_attributes: Optional[TextAttributes] = None) -> Document:
    """Parse ``markup`` into a Document.

    Args:
        markup: HTML document or fragment
        base_attributes: Attributes for text that carries no styling of its own

    Returns:
        The parsed Document

    Raises:
        MarkupParseError: If the markup is absent, too large or unparseable
    """
    if markup is None or not markup.strip():
        raise MarkupParseError("no markup given")
    if len(markup) > MAX_MARKUP_SIZE:
        raise MarkupParseError(f"markup exceeds {MAX_MARKUP_SIZE} characters")
    try:
        root = lxml.html.document_fromstring(markup)
    except (etree.LxmlError, ValueError) as e:
        raise MarkupParseError(f"could not parse markup: {e}") from e

    class_map: dict[str, str] = {}
    for style in root.iter("style"):
        class_map.update(parse_css_rules(style.text or ""))

    base = base_attributes if base_attributes is not None else TextAttributes()
    builder = _DocumentBuilder(class_map)
    body = root.find("body")
    if body is None:
        body = root
    builder.walk(body, base)
    return Document.from_runs(_empty_separator_attributes(builder.pieces(), base))
