"""Wire framing shared by the transport and the session."""

from __future__ import annotations

DELIMITER = ";;;"
COMMAND_PREFIX = "CMD :"


def encode_command(text: str) -> bytes:
    """Frame a console command for the server."""
    return f"{COMMAND_PREFIX}{text}".encode()


class MessageSplitter:
    """Splits a stream of received text into messages.

    Text after the last delimiter is held back as ``pending`` until more
    text arrives, so a message split across reads is put back together.
    """

    def __init__(self) -> None:
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, text: str) -> list[str]:
        """Add received text and return the non-empty messages it completes."""
        *complete, self._pending = (self._pending + text).split(DELIMITER)
        return [message for message in complete if message]

    def flush(self) -> list[str]:
        """Return the held-back text as a message, if there is any."""
        pending, self._pending = self._pending, ""
        return [pending] if pending else []
