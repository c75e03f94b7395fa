"""asyncio TCP transport for an AnimatedLEDStrip server.

Commands go out as ``CMD :<text>``. Inbound data is split into messages
on the ``;;;`` delimiter. Text after the last delimiter is held until the
next read completes it, or shown as is once the line has been quiet for
``flush_delay`` seconds.
"""

from __future__ import annotations

import asyncio
import codecs
import logging

from ledconsole.domain.models import ConnectionState, ServerAddress
from ledconsole.transport.base import Transport, TransportError
from ledconsole.transport.protocol import MessageSplitter

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE = 4096
DEFAULT_FLUSH_DELAY = 0.1


class TcpTransport(Transport):
    """Connects to the server over TCP using asyncio streams.

    The connection runs in a background task which reports the outcome of
    the connect attempt, reads until the peer closes, and then reports
    the disconnect.
    """

    def __init__(
        self,
        connect_timeout: float = 5.0,
        read_size: int = DEFAULT_READ_SIZE,
        flush_delay: float = DEFAULT_FLUSH_DELAY,
    ) -> None:
        super().__init__()
        self._connect_timeout = connect_timeout
        self._read_size = read_size
        self._flush_delay = flush_delay
        self._address: ServerAddress | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._task: asyncio.Task[None] | None = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def address(self) -> ServerAddress | None:
        return self._address

    async def connect(self, address: ServerAddress) -> None:
        """Drop any current connection and start connecting to ``address``."""
        await self.disconnect()
        self._address = address
        attempt = self._next_attempt()
        self._task = asyncio.create_task(
            self._run(address, attempt), name=f"transport-{address}-{attempt}"
        )
        logger.debug("Connecting to %s (attempt %d)", address, attempt)

    async def disconnect(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._connected = False
        await self._close_writer()

    async def send(self, data: bytes) -> None:
        if not self._connected or self._writer is None:
            raise TransportError("Not connected to a server", address=self._address)
        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as e:
            raise TransportError(
                f"Failed to send to {self._address}: {e}", address=self._address
            ) from e
        logger.debug("Sent %d bytes to %s", len(data), self._address)

    async def _run(self, address: ServerAddress, attempt: int) -> None:
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(address.host, address.port),
                timeout=self._connect_timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.warning("Could not connect to %s: %s", address, e)
            self._emit_state(ConnectionState.DISCONNECTED, address, attempt)
            return

        self._writer = writer
        self._connected = True
        self._emit_state(ConnectionState.CONNECTED, address, attempt)

        try:
            await self._read_loop(reader)
        except OSError as e:
            logger.warning("Connection to %s lost: %s", address, e)

        self._connected = False
        await self._close_writer()
        self._emit_state(ConnectionState.DISCONNECTED, address, attempt)

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        splitter = MessageSplitter()
        while True:
            timeout = self._flush_delay if splitter.pending else None
            try:
                data = await asyncio.wait_for(reader.read(self._read_size), timeout)
            except asyncio.TimeoutError:
                self._emit_messages(splitter.flush())
                continue
            if not data:
                self._emit_messages(splitter.feed(decoder.decode(b"", final=True)))
                self._emit_messages(splitter.flush())
                return
            self._emit_messages(splitter.feed(decoder.decode(data)))

    def _emit_messages(self, messages: list[str]) -> None:
        for message in messages:
            self._emit_receive(message)

    async def _close_writer(self) -> None:
        writer, self._writer = self._writer, None
        if writer is None:
            return
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug("Error while closing connection: %s", e)
