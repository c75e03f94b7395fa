"""Scrollback buffer for session output.

Stores every appended line in its unwrapped form and keeps a wrapped
copy at the current viewport width. The wrapped copy is rebuilt from
the retained text whenever the width changes, so historical output is
always laid out for the terminal as it is now.
"""

from __future__ import annotations

import logging

from ledconsole.domain.models import DisplayLine, StyleTag

logger = logging.getLogger(__name__)

DEFAULT_OVERLAP_ROWS = 2


def wrap_line(line: DisplayLine, width: int) -> list[DisplayLine]:
    """Split a line into fixed-width chunks, left to right.

    An empty line still occupies one row.
    """
    text = line.text
    if not text:
        return [line]
    return [
        DisplayLine(text=text[i : i + width], style=line.style)
        for i in range(0, len(text), width)
    ]


class ScrollBuffer:
    """Append-only output lines with a paginated visible window.

    ``first_index`` is the wrapped line shown in the top row. It stays
    within ``[0, max_first_index]`` for every sequence of operations.
    """

    def __init__(
        self,
        width: int = 80,
        height: int = 23,
        overlap_rows: int = DEFAULT_OVERLAP_ROWS,
    ) -> None:
        self._width = max(1, width)
        self._height = max(1, height)
        self._overlap_rows = overlap_rows
        self._entries: list[DisplayLine] = []
        self._lines: list[DisplayLine] = []
        self._first_index = 0
        self._follow = True

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def first_index(self) -> int:
        return self._first_index

    @property
    def lines(self) -> list[DisplayLine]:
        """Wrapped lines at the current width (a copy)."""
        return list(self._lines)

    @property
    def max_first_index(self) -> int:
        return max(0, len(self._lines) - self._height)

    @property
    def is_following(self) -> bool:
        """Whether new output scrolls the window to the bottom."""
        return self._follow

    def __len__(self) -> int:
        return len(self._lines)

    def append(self, text: str, style: StyleTag = StyleTag.NORMAL) -> None:
        """Append text, one logical line per line break.

        Unless the user has paged up, the window moves so the newest line
        is the bottom visible row.
        """
        text = text.replace("\0", "").replace("\r\n", "\n")
        for raw in text.split("\n"):
            entry = DisplayLine(text=raw, style=style)
            self._entries.append(entry)
            self._lines.extend(wrap_line(entry, self._width))
        if self._follow:
            self._first_index = self.max_first_index

    def page_up(self) -> None:
        self._first_index = max(0, self._first_index - self._page_step())
        self._follow = self._first_index >= self.max_first_index

    def page_down(self) -> None:
        self._first_index = min(self.max_first_index, self._first_index + self._page_step())
        self._follow = self._first_index >= self.max_first_index

    def visible_window(self) -> list[DisplayLine]:
        """Exactly ``height`` lines, blank-padded past the end of output."""
        window = self._lines[self._first_index : self._first_index + self._height]
        window.extend(DisplayLine() for _ in range(self._height - len(window)))
        return window

    def resize(self, width: int, height: int) -> None:
        """Adopt new viewport dimensions, re-wrapping if the width changed."""
        width = max(1, width)
        height = max(1, height)
        if width != self._width:
            self._width = width
            self._lines = [
                chunk for entry in self._entries for chunk in wrap_line(entry, width)
            ]
            logger.debug("Re-wrapped %d lines at width %d", len(self._lines), width)
        self._height = height
        if self._follow:
            self._first_index = self.max_first_index
        else:
            self._first_index = min(self._first_index, self.max_first_index)

    def _page_step(self) -> int:
        return max(1, self._height - self._overlap_rows)
