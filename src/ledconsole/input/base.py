"""Abstract base class for session input sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from ledconsole.domain.models import SessionEvent

EventSink = Callable[[SessionEvent], None]


class InputSource(ABC):
    """Produces session events outside the session's own loop.

    ``start`` hands over a thread-safe sink; events are pushed into it
    until ``stop`` is called.
    """

    @abstractmethod
    def start(self, post: EventSink) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...
