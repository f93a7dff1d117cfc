"""List continuation for the Enter key.

When a newline is typed inside a list paragraph the editor does not insert it
blindly. ``decide`` looks at the paragraph containing the caret, before the
edit is committed, and answers with the edit that should happen instead:

* a marker-only paragraph (``"• "`` or ``"3. "``) is emptied, which ends the
  list;
* a list paragraph with content continues the list with a fresh marker;
* anything else lets the newline through unchanged.

Ordered continuation only looks at the current paragraph, so typing Enter in
the middle of a numbered list gives the new item ``n + 1`` without
renumbering the items below it. ``apply_list_style`` renumbers a block.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import EditorConstants
from .lists import format_marker, marker_length, parse_list_context
from .model import ListKind, TextRange


class ListState(Enum):
    NOT_IN_LIST = "not_in_list"
    UNORDERED_ITEM = "unordered_item"
    ORDERED_ITEM = "ordered_item"


class ListAction(Enum):
    EXIT = "exit"
    CONTINUE_UNORDERED = "continue_unordered"
    CONTINUE_ORDERED = "continue_ordered"
    PASSTHROUGH = "passthrough"


class EditVerdict(Enum):
    """Answer to a pending edit."""
    ACCEPT = "accept"  # apply the edit as proposed
    REPLACE = "replace"  # apply the decision's range/text instead
    REJECT = "reject"  # drop the edit


@dataclass(frozen=True)
class EditIntent:
    """A proposed edit: replace ``range`` with ``text``."""
    range: TextRange
    text: str


@dataclass(frozen=True)
class EditDecision:
    verdict: EditVerdict
    action: ListAction
    range: TextRange
    text: str
    caret: int


@dataclass(frozen=True)
class ItemShape:
    """What a paragraph looks like to the automaton."""
    state: ListState
    number: Optional[int] = None
    marker_only: bool = False


def classify_paragraph(paragraph: str) -> ItemShape:
    """Classify a paragraph (without its terminator)."""
    context = parse_list_context(paragraph)
    if context is None:
        return ItemShape(ListState.NOT_IN_LIST)
    marker_only = marker_length(paragraph) == len(paragraph)
    if context.kind is ListKind.UNORDERED:
        return ItemShape(ListState.UNORDERED_ITEM, None, marker_only)
    return ItemShape(ListState.ORDERED_ITEM, context.index, marker_only)


def _accept(intent: EditIntent) -> EditDecision:
    return EditDecision(
        EditVerdict.ACCEPT,
        ListAction.PASSTHROUGH,
        intent.range,
        intent.text,
        intent.range.location + len(intent.text),
    )


def _paragraph_around(text: str, offset: int) -> TextRange:
    sep = EditorConstants.PARAGRAPH_SEPARATOR
    start = text.rfind(sep, 0, offset) + 1
    end = text.find(sep, offset)
    if end < 0:
        end = len(text)
    return TextRange(start, end - start)


def decide(text: str, intent: EditIntent) -> EditDecision:
    """Decide what a proposed edit to ``text`` should turn into.

    Only a single newline typed at an empty selection is considered; every
    other edit is accepted as proposed.

    Args:
        text: Document text before the edit
        intent: The proposed edit

    Returns:
        The edit to apply, with the caret position that follows it
    """
    if intent.text != EditorConstants.PARAGRAPH_SEPARATOR or not intent.range.is_empty:
        return _accept(intent)
    caret = intent.range.location
    if caret < 0 or caret > len(text):
        raise ValueError(f"caret {caret} outside text of length {len(text)}")

    paragraph = _paragraph_around(text, caret)
    shape = classify_paragraph(text[paragraph.location:paragraph.end])
    if shape.state is ListState.NOT_IN_LIST:
        return _accept(intent)

    if shape.marker_only:
        # EXIT: the marker line and its terminator become one "\n". The marker
        # is gone and the caret sits on a plain empty line, which the newline
        # keeps separate from whatever follows.
        length = paragraph.length
        if paragraph.end < len(text):
            length += 1
        return EditDecision(
            EditVerdict.REPLACE,
            ListAction.EXIT,
            TextRange(paragraph.location, length),
            EditorConstants.PARAGRAPH_SEPARATOR,
            paragraph.location,
        )

    if shape.state is ListState.UNORDERED_ITEM:
        marker = format_marker(ListKind.UNORDERED)
        action = ListAction.CONTINUE_UNORDERED
    else:
        marker = format_marker(ListKind.ORDERED, shape.number + 1)
        action = ListAction.CONTINUE_ORDERED
    inserted = EditorConstants.PARAGRAPH_SEPARATOR + marker
    return EditDecision(
        EditVerdict.REPLACE,
        action,
        TextRange(caret, 0),
        inserted,
        caret + len(inserted),
    )
