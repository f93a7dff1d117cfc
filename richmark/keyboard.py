"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    SHIFT_SPECIAL = "shift_special"  # Shift + arrow keys, etc.


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw token handed to parse_key
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False
    is_sequence: bool = False
    code: Optional[int] = None


SPECIAL_KEYS = frozenset({
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
    'page_up', 'page_down', 'insert',
})


def parse_key(key) -> KeyEvent:
    """Parse a key token into a KeyEvent.

    Accepts curtsies-style names (``'<Ctrl-b>'``, ``'<Enter>'``,
    ``'<Shift-left>'``), single control bytes (``'\\x02'`` for Ctrl-B) and
    plain characters.

    Args:
        key: Key token; anything whose ``str()`` is the token

    Returns:
        Parsed KeyEvent
    """
    key_str = str(key)

    if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
        name = key_str[1:-1]
        # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
        lower = name.lower().replace('+', '-')
        parts = lower.split('-') if '-' in lower else [lower]
        base = parts[-1]
        mods = set(parts[:-1])
        if 'meta' in mods or 'esc' in mods:
            mods.add('alt')
        if base in ('pageup', 'page_up'):
            base = 'page_up'
        elif base in ('pagedown', 'page_down'):
            base = 'page_down'
        elif base == 'return':
            base = 'enter'

        # Map named whitespace tokens to regular characters
        if base in ('space', 'spacebar', 'spc') and not mods:
            return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
        if base == 'tab' and not mods:
            return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw='\t')
        if 'ctrl' in mods and len(base) == 1:
            # Ctrl-J / Ctrl-M are Enter
            if base in ('j', 'm'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
            return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
        if 'alt' in mods and (base in SPECIAL_KEYS or len(base) == 1):
            return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str, is_alt=True)
        if 'shift' in mods and base in SPECIAL_KEYS:
            return KeyEvent(key_type=KeyType.SHIFT_SPECIAL, value=base, raw=key_str, is_shift=True, is_sequence=True)
        if base in SPECIAL_KEYS:
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)
        if base in ('esc', 'escape'):
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
        # Unknown tokens are treated as special keys nobody handles
        return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)

    if len(key_str) == 1:
        o = ord(key_str)
        if o in (8, 127):
            return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str, code=o)
        if o in (10, 13):
            return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, code=o)
        if o == 9:
            return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
        if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z (exclude ESC=27)
            ch = chr(ord('a') + o - 1)
            return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True, code=o)
        if o == 27:
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

    return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)
