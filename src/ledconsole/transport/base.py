"""Abstract base class for the server transport.

The session engine only sees this interface, so the wire connection can
be replaced (or mocked in tests) without touching the session code.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from ledconsole.domain.models import ConnectionState, ServerAddress

logger = logging.getLogger(__name__)

ReceiveCallback = Callable[[str], None]
ConnectStateCallback = Callable[[ConnectionState, ServerAddress, int], None]


class Transport(ABC):
    """Abstract interface for talking to the remote server.

    Callbacks may be invoked from any thread or task; receivers must not
    assume they run on the caller's stack. Each call to ``connect`` starts a
    new attempt with a larger ``attempt`` number, and every state callback
    carries the number of the attempt it belongs to.

    Example usage::

        transport.set_callbacks(on_receive=print, on_connect_state_change=print)
        async with transport:
            await transport.connect(ServerAddress(host="localhost", port=6))
            await transport.send(b"CMD :help")
    """

    def __init__(self) -> None:
        self._on_receive: ReceiveCallback | None = None
        self._on_connect_state_change: ConnectStateCallback | None = None
        self._attempt = 0

    def set_callbacks(
        self,
        on_receive: ReceiveCallback | None = None,
        on_connect_state_change: ConnectStateCallback | None = None,
    ) -> None:
        self._on_receive = on_receive
        self._on_connect_state_change = on_connect_state_change

    @property
    def attempt(self) -> int:
        """Number of the most recent connect attempt (0 before the first)."""
        return self._attempt

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def connect(self, address: ServerAddress) -> None:
        """Begin connecting to ``address``.

        Returns once the attempt is under way. Success or failure is
        reported through the connection-state callback (``CONNECTED`` or
        ``DISCONNECTED``), never raised.
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection, if any.

        Safe to call multiple times. An explicit disconnect does not
        invoke the connection-state callback.
        """
        ...

    @abstractmethod
    async def send(self, data: bytes) -> None:
        """Write one message to the server.

        Raises:
            TransportError: If not connected or the write fails.
        """
        ...

    def _emit_receive(self, text: str) -> None:
        if self._on_receive is not None:
            self._on_receive(text)

    def _next_attempt(self) -> int:
        self._attempt += 1
        return self._attempt

    def _emit_state(self, state: ConnectionState, address: ServerAddress, attempt: int) -> None:
        logger.info("Connection %s: %s (attempt %d)", state.value, address, attempt)
        if self._on_connect_state_change is not None:
            self._on_connect_state_change(state, address, attempt)

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- disconnects from the server."""
        await self.disconnect()


class TransportError(Exception):
    """Raised when a message cannot be sent."""

    def __init__(self, message: str, address: ServerAddress | None = None) -> None:
        super().__init__(message)
        self.address = address
