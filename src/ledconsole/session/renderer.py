"""Terminal renderer for the interactive session.

Draws the visible output window in the top rows of the screen and the
input line in the bottom row, using blessed for cursor addressing and
colors. Rows are only rewritten when they differ from the previous
frame, so drawing an unchanged frame again leaves the screen untouched.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TextIO

from blessed import Terminal

from ledconsole.domain.models import DisplayLine, StyleTag

logger = logging.getLogger(__name__)

# blessed compound formatter per style; None means the terminal default
STYLE_FORMATTERS: dict[StyleTag, str | None] = {
    StyleTag.NORMAL: None,
    StyleTag.NORMAL_EMPHASIS: "bold",
    StyleTag.COMMAND: "bold_green",
    StyleTag.CONNECTION_EVENT: "bold_blue",
    StyleTag.SYSTEM_MESSAGE: "cyan",
    StyleTag.SYSTEM_MESSAGE_EMPHASIS: "bold_cyan",
}


class Renderer:
    """Renders frames onto a blessed terminal.

    The prompt occupies the last terminal row; everything above it is the
    output viewport.
    """

    def __init__(self, term: Terminal, stream: TextIO | None = None) -> None:
        self._term = term
        self._stream = stream if stream is not None else term.stream
        self._stack = contextlib.ExitStack()
        self._last_rows: list[DisplayLine] | None = None
        self._last_prompt: tuple[int, str] | None = None

    def viewport_size(self) -> tuple[int, int]:
        """Width and height available for output rows."""
        return max(1, self._term.width), max(1, self._term.height - 1)

    def open(self) -> None:
        """Switch to the alternate screen."""
        self._stack.enter_context(self._term.fullscreen())
        self.invalidate()
        logger.debug("Renderer opened (%dx%d)", self._term.width, self._term.height)

    def close(self) -> None:
        """Restore the normal screen."""
        self._stack.close()
        self._stream.flush()
        logger.debug("Renderer closed")

    def invalidate(self) -> None:
        """Forget the previous frame so the next one is drawn in full."""
        self._last_rows = None
        self._last_prompt = None

    def draw_frame(self, window: list[DisplayLine], edit_text: str) -> None:
        """Draw the output window and the input line, then place the cursor."""
        term = self._term
        out: list[str] = []
        if self._last_rows is None:
            out.append(term.home + term.clear)

        for row, line in enumerate(window):
            if self._last_rows is not None and row < len(self._last_rows) and self._last_rows[row] == line:
                continue
            out.append(term.move_xy(0, row) + term.clear_eol + self._styled(line))

        prompt_row = len(window)
        shown, cursor_col = self._fit_prompt(edit_text)
        if self._last_prompt != (prompt_row, shown):
            out.append(term.move_xy(0, prompt_row) + term.clear_eol + shown)
        out.append(term.move_xy(cursor_col, prompt_row))

        self._stream.write("".join(out))
        self._stream.flush()
        self._last_rows = list(window)
        self._last_prompt = (prompt_row, shown)

    def _styled(self, line: DisplayLine) -> str:
        name = STYLE_FORMATTERS[line.style]
        if name is None or not line.text:
            return line.text
        return getattr(self._term, name)(line.text)

    def _fit_prompt(self, text: str) -> tuple[str, int]:
        """Show the tail of an input line wider than the terminal."""
        width = max(1, self._term.width)
        if len(text) < width:
            return text, len(text)
        tail = text[-(width - 1):] if width > 1 else ""
        return tail, len(tail)
