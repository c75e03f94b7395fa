"""Input sources for the interactive session.

Public API:
    InputSource -- Abstract base class
    KeyReader -- Keyboard input from a blessed terminal
    LineReader -- Whole lines from a text stream (headless mode)
    decode_key -- Map a blessed keystroke to a Key
"""

from ledconsole.input.base import InputSource
from ledconsole.input.keys import InputDecodeError, decode_key
from ledconsole.input.readers import KeyReader, LineReader

__all__ = ["InputDecodeError", "InputSource", "KeyReader", "LineReader", "decode_key"]
