"""Markup cleanup pipeline.

Three string transforms that are meant to be chained in this order::

    body = body_only_markup(markup)
    xhtml = compact_xhtml(body)
    inline = strip_style_blocks(xhtml)

Each one answers "" instead of raising when its input does not have the
expected structure.
"""

from __future__ import annotations

import logging
import re

from lxml import etree
import lxml.html
from lxml.html import defs

from .errors import StructuralMismatch

logger = logging.getLogger(__name__)

_HTML_START_RE = re.compile(r"<html(?:\s[^>]*)?>", re.IGNORECASE)
_HTML_END_RE = re.compile(r"</html\s*>", re.IGNORECASE)


def _parse_document(markup: str) -> lxml.html.HtmlElement:
    """Parse ``markup`` that must be wrapped in ``<html>…</html>``."""
    if not markup or not _HTML_START_RE.search(markup) or not _HTML_END_RE.search(markup):
        raise StructuralMismatch("markup has no <html>…</html> pair")
    try:
        return lxml.html.document_fromstring(markup)
    except (etree.LxmlError, ValueError) as e:
        raise StructuralMismatch(f"markup could not be parsed: {e}") from e


def _as_xhtml(root: lxml.html.HtmlElement) -> str:
    # Non-void elements keep an explicit end tag even when empty.
    for el in root.iter():
        if not isinstance(el.tag, str):
            continue
        if el.tag not in defs.empty_tags and el.text is None and len(el) == 0:
            el.text = ""
    return etree.tostring(root, method="xml", encoding="unicode")


def body_only_markup(markup: str) -> str:
    """Return the ``<html>`` element alone, without DOCTYPE or root attributes."""
    try:
        root = _parse_document(markup)
    except StructuralMismatch as e:
        logger.debug(f"Body extraction failed: {e}")
        return ""
    root.attrib.clear()
    return lxml.html.tostring(root, encoding="unicode")


def compact_xhtml(markup: str) -> str:
    """Drop ``<meta>`` elements and serialize as XHTML (``<br/>``, ``<hr/>``)."""
    try:
        root = _parse_document(markup)
    except StructuralMismatch as e:
        logger.debug(f"XHTML conversion failed: {e}")
        return ""
    for meta in list(root.iter("meta")):
        meta.drop_tree()
    return _as_xhtml(root)


def strip_style_blocks(markup: str) -> str:
    """Remove every embedded ``<style>…</style>`` block."""
    try:
        root = _parse_document(markup)
    except StructuralMismatch as e:
        logger.debug(f"Style stripping failed: {e}")
        return ""
    for style in list(root.iter("style")):
        style.drop_tree()
    return _as_xhtml(root)
