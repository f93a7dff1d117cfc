"""Command pattern implementation for editor actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING

from .keyboard import KeyType
from .list_automaton import EditIntent
from .model import Alignment, ListKind, TextRange

if TYPE_CHECKING:
    from .editor import RichTextEditor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'RichTextEditor', key_event: Optional['KeyEvent'] = None) -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command, None for
                toolbar actions

        Returns:
            True if the command modified the document or the typing attributes
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for caret movement commands."""

    def execute(self, editor: 'RichTextEditor', key_event: Optional['KeyEvent'] = None) -> bool:
        """Movement commands don't modify the document."""
        editor.set_selection(TextRange(self._target(editor), 0))
        return False

    @abstractmethod
    def _target(self, editor: 'RichTextEditor') -> int:
        """Caret offset after the movement."""
        pass


class LeftCharCommand(MovementCommand):
    def _target(self, editor):
        sel = editor.selection
        if not sel.is_empty:
            return sel.location
        return max(0, sel.location - 1)


class RightCharCommand(MovementCommand):
    def _target(self, editor):
        sel = editor.selection
        if not sel.is_empty:
            return sel.end
        return min(len(editor.document), sel.location + 1)


class EditCommand(EditorCommand):
    """Base class for commands that change the text."""

    def execute(self, editor: 'RichTextEditor', key_event: Optional['KeyEvent'] = None) -> bool:
        return self._edit(editor, key_event)

    @abstractmethod
    def _edit(self, editor: 'RichTextEditor', key_event: Optional['KeyEvent']) -> bool:
        """Perform the edit."""
        pass


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key_event):
        return editor.delete_backward()


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key_event):
        editor.handle_edit(EditIntent(editor.selection, '\n'))
        return True


class InsertTextCommand(EditCommand):
    def _edit(self, editor, key_event):
        char = key_event.value
        # Filter out control characters
        if not char or (ord(char[0]) < 32 and char != '\t'):
            return False
        editor.handle_edit(EditIntent(editor.selection, char))
        return True


class FormatCommand(EditorCommand):
    """Base class for formatting commands.

    Formatting keeps the selection and scroll offset; the editor takes care
    of that.
    """

    def execute(self, editor: 'RichTextEditor', key_event: Optional['KeyEvent'] = None) -> bool:
        return self._format(editor)

    @abstractmethod
    def _format(self, editor: 'RichTextEditor') -> bool:
        pass


class ToggleBoldCommand(FormatCommand):
    def _format(self, editor):
        return editor.toggle_bold()


class ToggleItalicCommand(FormatCommand):
    def _format(self, editor):
        return editor.toggle_italic()


class ToggleUnderlineCommand(FormatCommand):
    def _format(self, editor):
        return editor.toggle_underline()


class ListStyleCommand(FormatCommand):
    def __init__(self, kind: ListKind):
        self.kind = kind

    def _format(self, editor):
        return editor.apply_list_style(self.kind)


class AlignmentCommand(FormatCommand):
    def __init__(self, alignment: Alignment):
        self.alignment = alignment

    def _format(self, editor):
        return editor.apply_text_alignment(self.alignment)


class RemoveLinkCommand(FormatCommand):
    def _format(self, editor):
        return editor.remove_link()


class CommandRegistry:
    """Registry for mapping key combinations and toolbar actions to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._actions: Dict[str, EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Movement commands
        self.register((KeyType.SPECIAL, 'left'), LeftCharCommand())
        self.register((KeyType.SPECIAL, 'right'), RightCharCommand())

        # Editing commands
        self.register((KeyType.SPECIAL, 'backspace'), BackspaceCommand())
        self.register((KeyType.SPECIAL, 'enter'), InsertNewlineCommand())

        # Style toggles
        self.register((KeyType.CTRL, 'b'), ToggleBoldCommand())
        self.register((KeyType.CTRL, 'i'), ToggleItalicCommand())
        self.register((KeyType.CTRL, 'u'), ToggleUnderlineCommand())

        # Toolbar actions
        self.register_action('bold', ToggleBoldCommand())
        self.register_action('italic', ToggleItalicCommand())
        self.register_action('underline', ToggleUnderlineCommand())
        self.register_action('list.bullet', ListStyleCommand(ListKind.UNORDERED))
        self.register_action('list.number', ListStyleCommand(ListKind.ORDERED))
        self.register_action('align.left', AlignmentCommand(Alignment.LEFT))
        self.register_action('align.center', AlignmentCommand(Alignment.CENTER))
        self.register_action('align.right', AlignmentCommand(Alignment.RIGHT))
        self.register_action('align.justified', AlignmentCommand(Alignment.JUSTIFIED))
        self.register_action('link.remove', RemoveLinkCommand())

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def register_action(self, name: str, command: EditorCommand):
        """Register a command for a toolbar action name."""
        self._actions[name] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def get_action(self, name: str) -> Optional[EditorCommand]:
        return self._actions.get(name)

    @property
    def action_names(self) -> list[str]:
        return sorted(self._actions)

    def execute(self, editor: 'RichTextEditor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(editor, key_event)

        # Handle regular text input
        if key_event.key_type == KeyType.REGULAR:
            return InsertTextCommand().execute(editor, key_event)

        return False

    def execute_action(self, editor: 'RichTextEditor', name: str) -> bool:
        """Execute the toolbar action ``name``; unknown names do nothing."""
        command = self.get_action(name)
        if command is None:
            return False
        return command.execute(editor)
