"""Writing documents out as HTML.

Two flavours are produced:

* ``serialize_html``: an inline-styled fragment in which list paragraphs are
  grouped into ``<ul>``/``<ol>`` blocks and every run carries its own
  ``style`` attribute.
* ``export_document``: a complete HTML document whose styles live in an
  embedded ``<style>`` block and are referenced through ``class`` attributes.
  This is what ``RichTextEditor.get_markup`` returns and what the cleanup
  pipeline consumes.
"""

import html
import re
from typing import Optional

from .constants import EditorConstants
from .font_config import css_font_family
from .lists import marker_length
from .model import Alignment, Document, ListKind, Paragraph, TextAttributes, TextRange

_BREAK_RE = re.compile("[\n\u2028]")

_CSS_ALIGNMENT = {
    Alignment.CENTER: "center",
    Alignment.RIGHT: "right",
    Alignment.JUSTIFIED: "justify",
}


def _format_size(size: float) -> str:
    return f"{size:g}px"


def character_declarations(attrs: TextAttributes) -> list[str]:
    """CSS declarations for the character-level attributes of a run."""
    decls = []
    if attrs.font_family:
        decls.append(f"font-family: {css_font_family(attrs.font_family)}")
    if attrs.font_size:
        decls.append(f"font-size: {_format_size(attrs.font_size)}")
    if attrs.bold:
        decls.append("font-weight: bold")
    if attrs.italic:
        decls.append("font-style: italic")
    if attrs.color:
        decls.append(f"color: {attrs.color}")
    return decls


def alignment_declaration(alignment: Alignment) -> Optional[str]:
    """``text-align`` declaration, or None for left/natural alignment."""
    value = _CSS_ALIGNMENT.get(alignment)
    if value is None:
        return None
    return f"text-align: {value}"


def build_style(attrs: TextAttributes) -> str:
    """Assemble the inline style of a run.

    Order: font-family, font-size, font-weight, font-style, color,
    text-align, text-decoration. Returns "" when nothing applies.
    """
    decls = character_declarations(attrs)
    align = alignment_declaration(attrs.alignment)
    if align:
        decls.append(align)
    if attrs.underline:
        decls.append("text-decoration: underline")
    return " ".join(f"{d};" for d in decls)


def _escape_text(text: str) -> str:
    parts = _BREAK_RE.split(text)
    return "<br>".join(html.escape(p, quote=False) for p in parts)


def _style_attr(style: str) -> str:
    if not style:
        return ""
    return f' style="{html.escape(style)}"'


def _render_run(text: str, attrs: TextAttributes) -> str:
    style = _style_attr(build_style(attrs))
    body = _escape_text(text)
    if attrs.link:
        return f'<a href="{html.escape(attrs.link)}"{style}>{body}</a>'
    return f"<span{style}>{body}</span>"


def _render_paragraph_content(document: Document, content: TextRange) -> str:
    out = []
    for run_range, attrs in document.iter_runs(content):
        text = document.text(run_range)
        if not text.strip():
            # Whitespace-only runs would only produce empty tags
            continue
        out.append(_render_run(text, attrs))
    return "".join(out)


def serialize_html(document: Document, rng: Optional[TextRange] = None) -> str:
    """Serialize ``document`` (or the part inside ``rng``) to inline-styled HTML."""
    if not len(document):
        return ""
    if rng is None:
        rng = TextRange(0, len(document))
    blocks: list[str] = []
    items: list[str] = []
    batch_kind: Optional[ListKind] = None
    batch_start = 1

    def flush():
        nonlocal batch_kind
        if batch_kind is not None:
            tag = "ul" if batch_kind is ListKind.UNORDERED else "ol"
            # Ordered lists keep their first number across a round trip
            start = f' start="{batch_start}"' if tag == "ol" and batch_start != 1 else ""
            blocks.append(f"<{tag}{start}>\n" + "\n".join(items) + f"\n</{tag}>")
            items.clear()
            batch_kind = None

    for paragraph in document.paragraphs(rng):
        content = _clip(paragraph, rng)
        if content is None:
            continue
        context = paragraph.list_context
        if context is None:
            flush()
            blocks.append(f"<p>{_render_paragraph_content(document, content)}</p>")
            continue
        if context.kind is not batch_kind:
            flush()
            batch_kind = context.kind
            batch_start = context.index
        skip = paragraph.range.location + marker_length(paragraph.text)
        if content.location < skip:
            content = TextRange.between(min(skip, content.end), content.end)
        items.append(f"<li>{_render_paragraph_content(document, content)}</li>")
    flush()
    return "\n".join(blocks)


def _clip(paragraph: Paragraph, rng: TextRange) -> Optional[TextRange]:
    clipped = paragraph.range.intersection(rng)
    if clipped is None:
        return None
    if clipped.is_empty and not paragraph.range.is_empty:
        return None
    return clipped


class _ClassRegistry:
    """Hands out one class name per distinct declaration string."""

    def __init__(self, tag: str, prefix: str):
        self._tag = tag
        self._prefix = prefix
        self._names: dict[str, str] = {}

    def name_for(self, declarations: str) -> str:
        name = self._names.get(declarations)
        if name is None:
            name = f"{self._prefix}{len(self._names) + 1}"
            self._names[declarations] = name
        return name

    def rules(self) -> list[str]:
        return [f"{self._tag}.{name} {{{decls}}}" for decls, name in self._names.items()]


def export_document(document: Document) -> str:
    """Write ``document`` as a complete, class-styled HTML document."""
    paragraph_classes = _ClassRegistry("p", EditorConstants.PARAGRAPH_CLASS_PREFIX)
    span_classes = _ClassRegistry("span", EditorConstants.SPAN_CLASS_PREFIX)
    body: list[str] = []
    for paragraph in document.paragraphs():
        para_decls = ["margin: 0.0px 0.0px 0.0px 0.0px"]
        align = alignment_declaration(paragraph.alignment)
        if align:
            para_decls.append(align)
        p_class = paragraph_classes.name_for("; ".join(para_decls))
        spans = []
        for run_range, attrs in document.iter_runs(paragraph.range):
            decls = character_declarations(attrs)
            if attrs.underline:
                decls.append("text-decoration: underline")
            if decls:
                span = f'<span class="{span_classes.name_for("; ".join(decls))}">'
            else:
                # Unstyled runs get no class and no empty rule
                span = "<span>"
            span += _escape_text(document.text(run_range)) + "</span>"
            if attrs.link:
                span = f'<a href="{html.escape(attrs.link)}">{span}</a>'
            spans.append(span)
        content = "".join(spans) or "<br>"
        body.append(f'<p class="{p_class}">{content}</p>')

    lines = [
        EditorConstants.EXPORT_DOCTYPE,
        "<html>",
        "<head>",
        '<meta http-equiv="Content-Type" content="text/html; charset=UTF-8">',
        '<meta http-equiv="Content-Style-Type" content="text/css">',
        f'<meta name="Generator" content="{EditorConstants.GENERATOR_NAME}">',
        '<style type="text/css">',
        *paragraph_classes.rules(),
        *span_classes.rules(),
        "</style>",
        "</head>",
        "<body>",
        *body,
        "</body>",
        "</html>",
    ]
    return "\n".join(lines) + "\n"
