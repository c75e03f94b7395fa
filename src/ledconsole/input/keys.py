"""Translation of blessed keystrokes into session keys."""

from __future__ import annotations

from blessed.keyboard import Keystroke

from ledconsole.domain.models import Key, KeyName

SEQUENCE_KEYS: dict[str, KeyName] = {
    "KEY_ENTER": KeyName.ENTER,
    "KEY_BACKSPACE": KeyName.BACKSPACE,
    "KEY_DELETE": KeyName.BACKSPACE,
    "KEY_UP": KeyName.UP,
    "KEY_DOWN": KeyName.DOWN,
    "KEY_PGUP": KeyName.PAGE_UP,
    "KEY_PGDOWN": KeyName.PAGE_DOWN,
}

CONTROL_CHARS: dict[str, KeyName] = {
    "\r": KeyName.ENTER,
    "\n": KeyName.ENTER,
    "\x08": KeyName.BACKSPACE,
    "\x7f": KeyName.BACKSPACE,
    "\x04": KeyName.INTERRUPT,  # Ctrl+D; Ctrl+C stays a SIGINT under cbreak
}


def decode_key(keystroke: Keystroke) -> Key:
    """Map a keystroke to a Key.

    Raises:
        InputDecodeError: For keys the line editor does not handle.
    """
    if keystroke.is_sequence:
        name = SEQUENCE_KEYS.get(keystroke.name or "")
        if name is None:
            raise InputDecodeError(f"Unsupported key {keystroke.name}")
        return Key(name=name)

    text = str(keystroke)
    if text in CONTROL_CHARS:
        return Key(name=CONTROL_CHARS[text])
    if len(text) != 1 or not text.isprintable():
        raise InputDecodeError(f"Unsupported input {text!r}")
    return Key(name=KeyName.CHARACTER, char=text)


class InputDecodeError(ValueError):
    """Raised when a key event cannot be decoded."""
