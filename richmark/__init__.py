"""richmark - A rich-text editing core with HTML import and export."""

from .model import Alignment, Document, ListKind, TextAttributes, TextRange
from .editor import RichTextEditor
from .view import EditorView, HeadlessView

__all__ = [
    'Alignment',
    'Document',
    'ListKind',
    'TextAttributes',
    'TextRange',
    'RichTextEditor',
    'EditorView',
    'HeadlessView',
]
