"""Abstract base class for inbound message formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ledconsole.domain.models import Category


class MessageFormatter(ABC):
    """Converts one raw inbound message into display text."""

    @abstractmethod
    def format(self, raw: str) -> tuple[str, Category]:
        """Return the display text and category for ``raw``.

        Raises:
            MalformedPayloadError: If the message claims a known type but
                its payload cannot be decoded.
        """
        ...


class MalformedPayloadError(ValueError):
    """Raised when a message payload cannot be decoded."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw
