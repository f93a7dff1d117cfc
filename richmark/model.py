"""Styled-text document model: attributes, runs, ranges and paragraphs."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Optional

from .constants import EditorConstants


class Alignment(Enum):
    NATURAL = "natural"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFIED = "justified"


class ListKind(Enum):
    UNORDERED = "unordered"
    ORDERED = "ordered"


@dataclass(frozen=True)
class ParagraphStyle:
    alignment: Alignment = Alignment.NATURAL
    first_line_indent: float = 0.0
    line_spacing: float = 0.0


@dataclass(frozen=True)
class TextAttributes:
    """Closed set of character attributes carried by a run.

    A field that is not set is ``None`` (or ``False`` for the flags); there
    is no such thing as a missing key.
    """
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: Optional[str] = None
    link: Optional[str] = None
    paragraph_style: ParagraphStyle = field(default_factory=ParagraphStyle)

    @property
    def alignment(self) -> Alignment:
        return self.paragraph_style.alignment

    def with_alignment(self, alignment: Alignment) -> "TextAttributes":
        return replace(self, paragraph_style=replace(self.paragraph_style, alignment=alignment))


ATTRIBUTE_KEYS = frozenset(f.name for f in fields(TextAttributes))


@dataclass(frozen=True)
class TextRange:
    """An offset range ``[location, location + length)`` into the text."""
    location: int = 0
    length: int = 0

    @property
    def end(self) -> int:
        return self.location + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    @classmethod
    def between(cls, start: int, end: int) -> "TextRange":
        if end < start:
            start, end = end, start
        return cls(start, end - start)

    def contains(self, offset: int) -> bool:
        return self.location <= offset < self.end

    def intersection(self, other: "TextRange") -> Optional["TextRange"]:
        start = max(self.location, other.location)
        end = min(self.end, other.end)
        if end < start:
            return None
        return TextRange(start, end - start)


# A selection is just a range; the caret is an empty one.
Selection = TextRange


@dataclass(frozen=True)
class Run:
    start: int
    length: int
    attributes: TextAttributes

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def range(self) -> TextRange:
        return TextRange(self.start, self.length)


@dataclass(frozen=True)
class ListContext:
    kind: ListKind
    index: int = 0


@dataclass(frozen=True)
class Paragraph:
    range: TextRange
    text: str
    alignment: Alignment = Alignment.NATURAL
    list_context: Optional[ListContext] = None


class Document:
    """Styled text: a text buffer plus runs that partition it.

    Runs never overlap, never leave gaps, are never empty, and two adjacent
    runs never carry equal attributes. Every mutating method either applies
    completely or raises before touching anything.
    """

    def __init__(self, text: str = "", attributes: Optional[TextAttributes] = None):
        self._text = text
        attrs = attributes if attributes is not None else TextAttributes()
        self._runs: list[Run] = [Run(0, len(text), attrs)] if text else []

    # --- Construction ---
    @classmethod
    def from_plain_text(cls, text: str, attributes: Optional[TextAttributes] = None) -> "Document":
        return cls(text, attributes)

    @classmethod
    def from_runs(cls, pieces: Iterable[tuple[str, TextAttributes]]) -> "Document":
        """Build a document from ``(text, attributes)`` pieces in order."""
        doc = cls()
        chunks: list[str] = []
        runs: list[Run] = []
        offset = 0
        for text, attrs in pieces:
            if not text:
                continue
            chunks.append(text)
            runs.append(Run(offset, len(text), attrs))
            offset += len(text)
        doc._text = "".join(chunks)
        doc._runs = cls._normalized(runs)
        return doc

    def copy(self) -> "Document":
        doc = Document()
        doc._text = self._text
        doc._runs = list(self._runs)
        return doc

    # --- Queries ---
    def __len__(self) -> int:
        return len(self._text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._text == other._text and self._runs == other._runs

    @property
    def length(self) -> int:
        return len(self._text)

    @property
    def runs(self) -> tuple[Run, ...]:
        return tuple(self._runs)

    def text(self, rng: Optional[TextRange] = None) -> str:
        if rng is None:
            return self._text
        self._check_range(rng)
        return self._text[rng.location:rng.end]

    def attributes_at(self, offset: int) -> Optional[TextAttributes]:
        """Attributes in effect at ``offset``.

        At the very end of the document the last run answers; an empty
        document has no attributes at all.
        """
        if offset < 0 or offset > len(self._text):
            raise IndexError(f"offset {offset} outside document of length {len(self._text)}")
        if not self._runs:
            return None
        if offset == len(self._text):
            return self._runs[-1].attributes
        return self._runs[self._run_index_at(offset)].attributes

    def attribute_at(self, offset: int, key: str) -> Any:
        if key not in ATTRIBUTE_KEYS:
            raise KeyError(key)
        attrs = self.attributes_at(offset)
        if attrs is None:
            return None
        return getattr(attrs, key)

    def iter_runs(self, rng: Optional[TextRange] = None) -> Iterator[tuple[TextRange, TextAttributes]]:
        """Yield ``(range, attributes)`` for each run, clipped to ``rng``."""
        if rng is None:
            rng = TextRange(0, len(self._text))
        self._check_range(rng)
        for run in self._runs:
            if run.end <= rng.location:
                continue
            if run.start >= rng.end:
                break
            start = max(run.start, rng.location)
            end = min(run.end, rng.end)
            if end > start:
                yield TextRange(start, end - start), run.attributes

    # --- Paragraphs ---
    def paragraph_ranges(self) -> list[TextRange]:
        ranges = []
        start = 0
        for part in self._text.split(EditorConstants.PARAGRAPH_SEPARATOR):
            ranges.append(TextRange(start, len(part)))
            start += len(part) + 1
        return ranges

    def paragraph_at(self, offset: int) -> TextRange:
        """Range of the paragraph containing ``offset`` (terminator excluded)."""
        if offset < 0 or offset > len(self._text):
            raise IndexError(f"offset {offset} outside document of length {len(self._text)}")
        sep = EditorConstants.PARAGRAPH_SEPARATOR
        start = self._text.rfind(sep, 0, offset) + 1
        end = self._text.find(sep, offset)
        if end < 0:
            end = len(self._text)
        return TextRange(start, end - start)

    def paragraph_range_for(self, rng: TextRange) -> TextRange:
        """Smallest run of whole paragraphs covering ``rng``."""
        self._check_range(rng)
        first = self.paragraph_at(rng.location)
        last_offset = rng.end
        # A selection that ends right after a terminator does not reach into
        # the following paragraph.
        if rng.length > 0 and self._text[rng.end - 1] == EditorConstants.PARAGRAPH_SEPARATOR:
            last_offset = rng.end - 1
        last = self.paragraph_at(max(last_offset, first.location))
        return TextRange.between(first.location, last.end)

    def paragraphs(self, rng: Optional[TextRange] = None) -> list[Paragraph]:
        from .lists import parse_list_context

        result = []
        for para_range in self.paragraph_ranges():
            if rng is not None and (para_range.end < rng.location or para_range.location > rng.end):
                continue
            # For an empty paragraph this is the run of its terminator.
            attrs = self.attributes_at(para_range.location)
            alignment = attrs.alignment if attrs is not None else Alignment.NATURAL
            text = self._text[para_range.location:para_range.end]
            result.append(Paragraph(para_range, text, alignment, parse_list_context(text)))
        return result

    # --- Mutation ---
    def set_attribute(self, rng: TextRange, key: str, value: Any) -> None:
        if key not in ATTRIBUTE_KEYS:
            raise KeyError(key)
        self.update_attributes(rng, lambda attrs: replace(attrs, **{key: value}))

    def set_attributes(self, rng: TextRange, attributes: TextAttributes) -> None:
        self.update_attributes(rng, lambda _attrs: attributes)

    def update_attributes(self, rng: TextRange, transform: Callable[[TextAttributes], TextAttributes]) -> None:
        """Replace the attributes of every run inside ``rng`` by ``transform(attrs)``."""
        self._check_range(rng)
        if rng.is_empty:
            return
        new_runs: list[Run] = []
        for run in self._runs:
            if run.end <= rng.location or run.start >= rng.end:
                new_runs.append(run)
                continue
            # Split at the range edges
            inner_start = max(run.start, rng.location)
            inner_end = min(run.end, rng.end)
            if run.start < inner_start:
                new_runs.append(Run(run.start, inner_start - run.start, run.attributes))
            new_runs.append(Run(inner_start, inner_end - inner_start, transform(run.attributes)))
            if inner_end < run.end:
                new_runs.append(Run(inner_end, run.end - inner_end, run.attributes))
        self._runs = self._normalized(new_runs)

    def replace(self, rng: TextRange, text: str, attributes: TextAttributes) -> None:
        """Replace ``rng`` with ``text`` styled uniformly with ``attributes``."""
        self._check_range(rng)
        before: list[Run] = []
        after: list[Run] = []
        for run in self._runs:
            if run.start < rng.location:
                before.append(Run(run.start, min(run.end, rng.location) - run.start, run.attributes))
            if run.end > rng.end:
                tail_start = max(run.start, rng.end)
                after.append(Run(tail_start, run.end - tail_start, run.attributes))
        self._text = self._text[:rng.location] + text + self._text[rng.end:]
        self._runs = self._normalized(before + [Run(rng.location, len(text), attributes)] + after)

    def insert(self, offset: int, text: str, attributes: TextAttributes) -> None:
        self.replace(TextRange(offset, 0), text, attributes)

    def delete(self, rng: TextRange) -> None:
        self.replace(rng, "", TextAttributes())

    # --- Internal helpers ---
    def _check_range(self, rng: TextRange) -> None:
        if rng.location < 0 or rng.length < 0 or rng.end > len(self._text):
            raise ValueError(f"range {rng} outside document of length {len(self._text)}")

    def _run_index_at(self, offset: int) -> int:
        lo, hi = 0, len(self._runs) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if self._runs[mid].end <= offset:
                lo = mid + 1
            else:
                hi = mid
        return lo

    @staticmethod
    def _normalized(runs: list[Run]) -> list[Run]:
        """Drop empty runs, merge equal neighbours and recompute offsets."""
        merged: list[Run] = []
        offset = 0
        for run in runs:
            if run.length <= 0:
                continue
            if merged and merged[-1].attributes == run.attributes:
                last = merged[-1]
                merged[-1] = Run(last.start, last.length + run.length, last.attributes)
            else:
                merged.append(Run(offset, run.length, run.attributes))
            offset += run.length
        return merged
