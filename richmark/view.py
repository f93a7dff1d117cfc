"""Host view contract.

The editing core never draws anything itself. A host view shows the
document, owns the scroll position and is told when to redraw.
"""

from abc import ABC, abstractmethod


class EditorView(ABC):
    scroll_offset: float = 0.0

    @abstractmethod
    def render(self):
        """Redraw the document after a mutation."""

    @abstractmethod
    def scroll_to_caret(self):
        """Scroll so that the caret is visible.

        Called after an edit has been committed and the previous scroll
        offset restored.
        """


class HeadlessView(EditorView):
    """View that displays nothing; used when no host is attached."""

    def __init__(self):
        self.scroll_offset = 0.0
        self.render_count = 0

    def render(self):
        self.render_count += 1

    def scroll_to_caret(self):
        pass
