"""Single-line editor with command history.

History is one list of submitted lines (oldest first) plus the index of
the entry currently being edited. While browsing, edits made to a
recalled entry are written back to it when moving away, and the line
that was being typed before browsing started is kept aside as the
draft and restored when browsing moves past the newest entry.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 500


class LineEditor:
    """The in-progress input line and its history.

    The cursor always sits at the end of the line; there is no mid-line
    cursor movement.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._history_limit = history_limit
        self._text = ""
        self._history: list[str] = []
        self._index: int | None = None
        self._draft = ""

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return len(self._text)

    @property
    def is_browsing(self) -> bool:
        """Whether the line currently shows a recalled history entry."""
        return self._index is not None

    @property
    def history(self) -> list[str]:
        """Submitted lines, oldest first (a copy)."""
        return list(self._history)

    def insert_char(self, char: str) -> None:
        self._text += char

    def backspace(self) -> None:
        self._text = self._text[:-1]

    def history_older(self) -> None:
        """Recall the previous entry. No-op at the oldest entry."""
        if self._index is None:
            if not self._history:
                return
            self._draft = self._text
            self._index = len(self._history) - 1
        elif self._index == 0:
            return
        else:
            self._history[self._index] = self._text
            self._index -= 1
        self._text = self._history[self._index]

    def history_newer(self) -> None:
        """Recall the next entry, or return to the draft past the newest.

        No-op when not browsing.
        """
        if self._index is None:
            return
        self._history[self._index] = self._text
        self._index += 1
        if self._index == len(self._history):
            self._index = None
            self._text = self._draft
            self._draft = ""
        else:
            self._text = self._history[self._index]

    def submit(self) -> str:
        """Finish the line and return it; the editor is left empty.

        A submitted recalled entry moves to the newest position instead of
        being duplicated. Empty lines are returned but not recorded.
        """
        line = self._text
        if self._index is not None:
            del self._history[self._index]
        if line:
            self._history.append(line)
            overflow = len(self._history) - self._history_limit
            if overflow > 0:
                del self._history[:overflow]
        self._index = None
        self._draft = ""
        self._text = ""
        logger.debug("Submitted line (%d chars), history size %d", len(line), len(self._history))
        return line
