"""Tests for key and toolbar command dispatch."""

import unittest
from unittest.mock import Mock

from richmark.commands import (
    AlignmentCommand,
    CommandRegistry,
    EditorCommand,
    InsertTextCommand,
    ListStyleCommand,
)
from richmark.editor import RichTextEditor
from richmark.keyboard import KeyEvent, KeyType, parse_key
from richmark.list_automaton import EditIntent
from richmark.model import Alignment, ListKind, TextRange


class TestRegistryDispatch(unittest.TestCase):
    """Key events reach the right editor method."""

    def setUp(self):
        self.registry = CommandRegistry()
        self.editor = Mock()
        self.editor.selection = TextRange(3, 0)

    def test_ctrl_b_toggles_bold(self):
        self.editor.toggle_bold.return_value = True
        self.assertTrue(self.registry.execute(self.editor, parse_key('<Ctrl-b>')))
        self.editor.toggle_bold.assert_called_once_with()

    def test_ctrl_i_and_u(self):
        self.registry.execute(self.editor, parse_key('\x09'))
        self.editor.toggle_italic.assert_not_called()
        self.registry.execute(self.editor, parse_key('<Ctrl-i>'))
        self.editor.toggle_italic.assert_called_once_with()
        self.registry.execute(self.editor, parse_key('\x15'))
        self.editor.toggle_underline.assert_called_once_with()

    def test_enter_goes_through_the_edit_hook(self):
        self.assertTrue(self.registry.execute(self.editor, parse_key('<Enter>')))
        self.editor.handle_edit.assert_called_once_with(EditIntent(TextRange(3, 0), '\n'))

    def test_regular_key_inserts_text(self):
        self.assertTrue(self.registry.execute(self.editor, parse_key('x')))
        self.editor.handle_edit.assert_called_once_with(EditIntent(TextRange(3, 0), 'x'))

    def test_tab_is_inserted(self):
        self.registry.execute(self.editor, parse_key('<TAB>'))
        self.editor.handle_edit.assert_called_once_with(EditIntent(TextRange(3, 0), '\t'))

    def test_control_characters_are_filtered(self):
        event = KeyEvent(key_type=KeyType.REGULAR, value='\x00', raw='\x00')
        self.assertFalse(InsertTextCommand().execute(self.editor, event))
        self.editor.handle_edit.assert_not_called()

    def test_unbound_keys_do_nothing(self):
        for token in ('<F5>', '<Ctrl-q>', '<Esc+x>', '<Shift-left>'):
            self.assertFalse(self.registry.execute(self.editor, parse_key(token)))
        self.editor.handle_edit.assert_not_called()

    def test_custom_binding(self):
        command = Mock(spec=EditorCommand)
        command.execute.return_value = True
        self.registry.register((KeyType.CTRL, 'q'), command)
        event = parse_key('<Ctrl-q>')
        self.assertTrue(self.registry.execute(self.editor, event))
        command.execute.assert_called_once_with(self.editor, event)


class TestActions(unittest.TestCase):
    """Toolbar actions by name."""

    def setUp(self):
        self.registry = CommandRegistry()
        self.editor = Mock()

    def test_action_names(self):
        self.assertEqual(self.registry.action_names, [
            'align.center', 'align.justified', 'align.left', 'align.right',
            'bold', 'italic', 'link.remove', 'list.bullet', 'list.number',
            'underline',
        ])

    def test_list_actions(self):
        self.registry.execute_action(self.editor, 'list.bullet')
        self.editor.apply_list_style.assert_called_once_with(ListKind.UNORDERED)
        self.assertIsInstance(self.registry.get_action('list.number'), ListStyleCommand)

    def test_alignment_actions(self):
        for name, alignment in [('align.left', Alignment.LEFT), ('align.right', Alignment.RIGHT)]:
            self.registry.execute_action(self.editor, name)
            self.editor.apply_text_alignment.assert_called_with(alignment)
        self.assertIsInstance(self.registry.get_action('align.center'), AlignmentCommand)

    def test_remove_link(self):
        self.registry.execute_action(self.editor, 'link.remove')
        self.editor.remove_link.assert_called_once_with()

    def test_unknown_action(self):
        self.assertFalse(self.registry.execute_action(self.editor, 'nope'))
        self.assertIsNone(self.registry.get_action('nope'))


class TestMovement(unittest.TestCase):
    """Left and right with a real editing session."""

    def setUp(self):
        self.editor = RichTextEditor(settings={})
        self.editor.set_plain_text("abc")

    def test_left_and_right(self):
        self.assertFalse(self.editor.handle_key('<LEFT>'))
        self.assertEqual(self.editor.selection, TextRange(2, 0))
        self.editor.handle_key('<RIGHT>')
        self.editor.handle_key('<RIGHT>')
        self.assertEqual(self.editor.selection, TextRange(3, 0))

    def test_left_stops_at_start(self):
        self.editor.set_selection(0)
        self.editor.handle_key('<LEFT>')
        self.assertEqual(self.editor.selection, TextRange(0, 0))

    def test_movement_collapses_selection(self):
        self.editor.set_selection(TextRange(1, 1))
        self.editor.handle_key('<LEFT>')
        self.assertEqual(self.editor.selection, TextRange(1, 0))
        self.editor.set_selection(TextRange(1, 1))
        self.editor.handle_key('<RIGHT>')
        self.assertEqual(self.editor.selection, TextRange(2, 0))
