"""prompt_toolkit key presses -> symbolic ``KeyEvent``s."""

from typing import Optional

from prompt_toolkit.keys import Keys

from interface.keybindings import KeyEvent

# Named keys prompt_toolkit reports as Keys members.
NAMED_KEYS = {
    Keys.Enter: KeyEvent("Return"),
    Keys.Escape: KeyEvent("Escape"),
    Keys.Tab: KeyEvent("Tab"),
    Keys.Backspace: KeyEvent("BackSpace"),
    Keys.Up: KeyEvent("Up"),
    Keys.Down: KeyEvent("Down"),
    Keys.Left: KeyEvent("Left"),
    Keys.Right: KeyEvent("Right"),
    Keys.ControlLeft: KeyEvent("Left", ctrl=True),
    Keys.ControlRight: KeyEvent("Right", ctrl=True),
    # Terminals cannot report shift+Return; ctrl+j stands in for it.
    Keys.ControlJ: KeyEvent("Return", shift=True),
}

# Printable characters with a symbolic name of their own.
CHAR_NAMES = {
    ":": KeyEvent("colon", shift=True),
    " ": KeyEvent("space"),
}


def translate_key(key: str, data: str = "") -> Optional[KeyEvent]:
    """Map one prompt_toolkit key press to a KeyEvent; None for keys we do not model."""
    named = NAMED_KEYS.get(key)
    if named is not None:
        return named
    char = data if key == Keys.Any else key
    if len(char) != 1:
        return None
    if char in CHAR_NAMES:
        return CHAR_NAMES[char]
    if not char.isprintable():
        return None
    return KeyEvent(char, shift=char.isupper())
