"""Editing session: a document, its selection and the formatting state."""

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Union

from .cleanup import body_only_markup, compact_xhtml, strip_style_blocks
from .commands import CommandRegistry
from .constants import EditorConstants
from .errors import MarkupParseError, RichTextError
from .executor import FormattingExecutor
from .font_config import get_font_config
from .html_parser import parse_html
from .html_serializer import export_document, serialize_html
from .keyboard import KeyEvent, parse_key
from .list_automaton import EditDecision, EditIntent, EditVerdict, decide
from .model import Alignment, Document, ListKind, TextAttributes, TextRange
from .settings_persistence import get_persistence
from .style_rewriter import ClassMap, extract_class_styles
from .style_rewriter import rewrite_classes_to_inline_styles as _rewrite_classes
from .view import EditorView, HeadlessView

logger = logging.getLogger(__name__)


def default_typing_attributes(settings: Optional[Dict[str, Any]] = None) -> TextAttributes:
    """Typing attributes a new session starts with.

    Invalid settings are ignored and fall back to the built-in defaults.
    """
    valid = get_persistence().validated_settings(settings)
    changes: Dict[str, Any] = {}
    if 'font_family' in valid:
        changes['font_family'] = get_font_config(valid['font_family']).name
    if 'font_size' in valid:
        changes['font_size'] = float(valid['font_size'])
    if 'text_color' in valid:
        changes['color'] = valid['text_color']
    attrs = replace(
        TextAttributes(
            font_family=EditorConstants.DEFAULT_FONT_FAMILY,
            font_size=EditorConstants.DEFAULT_FONT_SIZE,
        ),
        **changes,
    )
    if 'alignment' in valid:
        attrs = attrs.with_alignment(Alignment(valid['alignment']))
    return attrs


class RichTextEditor:
    """One editing session.

    Owns the document, the selection and (through the executor) the typing
    attributes. The host view is only asked to redraw and to scroll; its
    scroll offset is put back after every formatting call and every edit.
    """

    def __init__(self, view: Optional[EditorView] = None, settings: Optional[Dict[str, Any]] = None):
        self.view = view if view is not None else HeadlessView()
        self.document = Document()
        self.selection = TextRange(0, 0)
        self.executor = FormattingExecutor(default_typing_attributes(settings))
        self.commands = CommandRegistry()

    @property
    def typing_attributes(self) -> TextAttributes:
        return self.executor.typing_attributes

    # --- Selection and text input ---
    def set_selection(self, selection: Union[TextRange, int], length: int = 0) -> None:
        if not isinstance(selection, TextRange):
            selection = TextRange(selection, length)
        if selection.location < 0 or selection.length < 0 or selection.end > len(self.document):
            raise ValueError(f"selection {selection} outside document of length {len(self.document)}")
        self.selection = selection
        if selection.is_empty:
            self.executor.update_typing_attributes_from(self.document, selection.location)

    def set_plain_text(self, text: str) -> None:
        self.document = Document.from_plain_text(text, self.executor.typing_attributes)
        self.selection = TextRange(len(self.document), 0)
        self.view.render()

    def insert_text(self, text: str) -> None:
        """Replace the selection with ``text`` in the typing attributes."""
        self.document.replace(self.selection, text, self.executor.typing_attributes)
        self.selection = TextRange(self.selection.location + len(text), 0)
        self.view.render()

    def delete_backward(self) -> bool:
        sel = self.selection
        if sel.is_empty:
            if sel.location == 0:
                return False
            sel = TextRange(sel.location - 1, 1)
        self.document.delete(sel)
        self.set_selection(TextRange(sel.location, 0))
        self.view.render()
        return True

    def handle_edit(self, intent: EditIntent) -> EditDecision:
        """Pre-edit hook: decide and apply an edit proposed by the host.

        Returns:
            The decision that was applied
        """
        scroll = self.view.scroll_offset
        decision = decide(self.document.text(), intent)
        if decision.verdict is EditVerdict.REJECT:
            return decision
        self.document.replace(decision.range, decision.text, self.executor.typing_attributes)
        self.selection = TextRange(decision.caret, 0)
        self.view.render()
        self.view.scroll_offset = scroll
        self.view.scroll_to_caret()
        return decision

    def handle_key(self, key: Union[KeyEvent, str]) -> bool:
        event = key if isinstance(key, KeyEvent) else parse_key(key)
        return self.commands.execute(self, event)

    def perform_action(self, name: str) -> bool:
        """Run a toolbar action by name (``bold``, ``list.number``, ...)."""
        handled = self.commands.execute_action(self, name)
        if not handled and self.commands.get_action(name) is None:
            logger.debug(f"Unknown action {name!r}")
        return handled

    # --- Markup ---
    def set_markup(self, html: Optional[str]) -> bool:
        """Replace the document with parsed ``html``.

        On failure the previous document is kept and False is returned.
        """
        try:
            document = parse_html(html, self.executor.typing_attributes)
        except MarkupParseError as e:
            logger.warning(f"Discarding markup: {e}")
            return False
        self.document = document
        self.set_selection(TextRange(0, 0))
        self.view.render()
        return True

    def get_markup(self) -> str:
        return export_document(self.document)

    def get_body_only_markup(self, html: Optional[str] = None) -> str:
        if html is None:
            html = self.get_markup()
        return body_only_markup(html)

    def get_compact_xhtml(self, html: Optional[str] = None) -> str:
        if html is None:
            html = self.get_body_only_markup()
        return compact_xhtml(html)

    def get_inline_styled_markup_only(self, html: Optional[str] = None) -> str:
        if html is None:
            html = self.get_compact_xhtml()
        return strip_style_blocks(html)

    def rewrite_classes_to_inline_styles(self, html: str, class_map: ClassMap) -> str:
        return _rewrite_classes(html, class_map)

    def generate_fully_inline_styled_markup(self) -> str:
        """Export, then move every class style inline and drop the style sheet."""
        exported = self.get_markup()
        xhtml = compact_xhtml(body_only_markup(exported))
        if not xhtml:
            return ""
        rewritten = _rewrite_classes(xhtml, extract_class_styles(exported))
        return strip_style_blocks(rewritten)

    def generate_fully_inline_styled_markup_with_lists(self) -> str:
        return serialize_html(self.document)

    def get_formatted_plain_text(self) -> str:
        """Document text with link targets spelled out after their text."""
        parts = []
        text = ""
        link = None
        for rng, attrs in self.document.iter_runs():
            if attrs.link != link:
                parts.append(_with_link(text, link))
                text, link = "", attrs.link
            text += self.document.text(rng)
        parts.append(_with_link(text, link))
        joined = "".join(parts).replace(EditorConstants.LINE_SEPARATOR, "\n")
        return "\n".join(line.rstrip() for line in joined.split("\n"))

    # --- Formatting ---
    def _format(self, operation: Callable[..., bool], *args) -> bool:
        selection = self.selection
        scroll = self.view.scroll_offset
        try:
            changed = operation(self.document, selection, *args)
        except RichTextError as e:
            logger.debug(f"{operation.__name__} did nothing: {e}")
            return False
        if changed:
            self.view.render()
        self.selection = selection
        self.view.scroll_offset = scroll
        return changed

    def toggle_bold(self) -> bool:
        return self._format(self.executor.toggle_trait, "bold")

    def toggle_italic(self) -> bool:
        return self._format(self.executor.toggle_trait, "italic")

    def toggle_underline(self) -> bool:
        return self._format(self.executor.toggle_underline)

    def apply_text_color(self, color: str) -> bool:
        return self._format(self.executor.apply_text_color, color)

    def apply_font(self, name: str) -> bool:
        return self._format(self.executor.apply_font, name)

    def apply_font_size(self, size: float) -> bool:
        return self._format(self.executor.apply_font_size, size)

    def apply_link(self, uri: str) -> bool:
        return self._format(self.executor.apply_link, uri)

    def remove_link(self) -> bool:
        return self._format(self.executor.remove_link)

    def apply_text_alignment(self, alignment: Union[Alignment, str]) -> bool:
        return self._format(self.executor.apply_text_alignment, Alignment(alignment))

    def apply_list_style(self, kind: Union[ListKind, str]) -> bool:
        """Rebuild the paragraphs under the selection as a list.

        The selection ends up spanning the rebuilt block.
        """
        scroll = self.view.scroll_offset
        self.selection = self.executor.apply_list_style(self.document, self.selection, ListKind(kind))
        self.view.render()
        self.view.scroll_offset = scroll
        return True


def _with_link(text: str, link: Optional[str]) -> str:
    if link and text and text != link:
        return f"{text} <{link}>"
    return text
