"""List marker handling for bulleted and numbered paragraphs.

A list paragraph is an ordinary paragraph whose text starts with a marker:
the bullet glyph followed by exactly one space, or a number followed by a
period and exactly one space.
"""

import re
from typing import Optional

from .constants import EditorConstants
from .model import ListContext, ListKind

BULLET = EditorConstants.BULLET_MARKER

_ORDERED_RE = re.compile(r"^(\d+)\. ")


def marker_length(paragraph: str) -> int:
    """Return the length of the list marker at the start of ``paragraph``.

    Returns 0 if the paragraph is not a list item.
    """
    if paragraph.startswith(BULLET):
        return len(BULLET)
    m = _ORDERED_RE.match(paragraph)
    if m:
        return m.end()
    return 0


def parse_list_context(paragraph: str) -> Optional[ListContext]:
    if paragraph.startswith(BULLET):
        return ListContext(ListKind.UNORDERED, 0)
    m = _ORDERED_RE.match(paragraph)
    if m:
        return ListContext(ListKind.ORDERED, int(m.group(1)))
    return None


def format_marker(kind: ListKind, index: int = 1) -> str:
    if kind is ListKind.UNORDERED:
        return BULLET
    return EditorConstants.ORDERED_MARKER_FORMAT.format(index)


def strip_marker(line: str) -> str:
    return line[marker_length(line):]


def rebuild_lines(lines: list[str], kind: ListKind) -> list[str]:
    """Strip any existing marker from each line and re-prefix uniformly.

    Ordered lines are numbered from 1 without gaps.
    """
    return [format_marker(kind, i) + strip_marker(line) for i, line in enumerate(lines, start=1)]
