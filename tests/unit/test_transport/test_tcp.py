"""Tests for the asyncio TCP transport against a local server."""

from __future__ import annotations

import asyncio

import pytest

from ledconsole.domain.models import ConnectionState, ServerAddress
from ledconsole.transport.base import TransportError
from ledconsole.transport.tcp import TcpTransport


class StripServer:
    """Minimal local server that records what it receives."""

    def __init__(self) -> None:
        self.received = bytearray()
        self.clients: list[asyncio.StreamWriter] = []
        self.client_connected = asyncio.Event()
        self._server: asyncio.Server | None = None

    async def start(self) -> ServerAddress:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        port = self._server.sockets[0].getsockname()[1]
        return ServerAddress(host="127.0.0.1", port=port)

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.clients.append(writer)
        self.client_connected.set()
        while data := await reader.read(1024):
            self.received.extend(data)

    async def send(self, data: bytes) -> None:
        writer = self.clients[-1]
        writer.write(data)
        await writer.drain()

    async def drop_clients(self) -> None:
        for writer in self.clients:
            writer.close()

    async def close(self) -> None:
        await self.drop_clients()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()


class Recorder:
    """Collects transport callbacks."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.states: list[tuple[ConnectionState, ServerAddress]] = []
        self.attempts: list[int] = []
        self._changed = asyncio.Event()

    def on_receive(self, text: str) -> None:
        self.messages.append(text)
        self._changed.set()

    def on_state(self, state: ConnectionState, address: ServerAddress, attempt: int) -> None:
        self.states.append((state, address))
        self.attempts.append(attempt)
        self._changed.set()

    async def wait_for(self, predicate, timeout: float = 5.0) -> None:
        async def poll() -> None:
            while not predicate():
                self._changed.clear()
                await self._changed.wait()

        await asyncio.wait_for(poll(), timeout=timeout)


def make_transport(recorder: Recorder, **kwargs) -> TcpTransport:
    transport = TcpTransport(**kwargs)
    transport.set_callbacks(
        on_receive=recorder.on_receive,
        on_connect_state_change=recorder.on_state,
    )
    return transport


class TestTcpConnect:
    @pytest.mark.asyncio
    async def test_connect_reports_connected(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder)
        try:
            await transport.connect(address)
            await recorder.wait_for(lambda: recorder.states)
            assert recorder.states == [(ConnectionState.CONNECTED, address)]
            assert transport.is_connected
            assert transport.address == address
        finally:
            await transport.disconnect()
            await server.close()

    @pytest.mark.asyncio
    async def test_refused_connection_reports_disconnected(self) -> None:
        server = StripServer()
        address = await server.start()
        await server.close()

        recorder = Recorder()
        transport = make_transport(recorder)
        await transport.connect(address)
        await recorder.wait_for(lambda: recorder.states)

        assert recorder.states == [(ConnectionState.DISCONNECTED, address)]
        assert not transport.is_connected

    @pytest.mark.asyncio
    async def test_explicit_disconnect_emits_no_callback(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder)
        try:
            await transport.connect(address)
            await recorder.wait_for(lambda: recorder.states)
            await transport.disconnect()
            await asyncio.sleep(0.05)

            assert recorder.states == [(ConnectionState.CONNECTED, address)]
            assert not transport.is_connected
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_disconnect_twice_is_safe(self) -> None:
        transport = TcpTransport()
        await transport.disconnect()
        await transport.disconnect()
        assert not transport.is_connected

    @pytest.mark.asyncio
    async def test_peer_close_reports_disconnected(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder)
        try:
            await transport.connect(address)
            await recorder.wait_for(lambda: recorder.states)
            await server.client_connected.wait()
            await server.drop_clients()

            await recorder.wait_for(lambda: len(recorder.states) == 2)
            assert recorder.states[-1] == (ConnectionState.DISCONNECTED, address)
            assert not transport.is_connected
        finally:
            await transport.disconnect()
            await server.close()


class TestTcpMessages:
    @pytest.mark.asyncio
    async def test_inbound_data_is_split_on_delimiter(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder)
        try:
            await transport.connect(address)
            await server.client_connected.wait()
            await server.send(b"first;;;second;;;;;;third")

            await recorder.wait_for(lambda: len(recorder.messages) == 3)
            assert recorder.messages == ["first", "second", "third"]
        finally:
            await transport.disconnect()
            await server.close()

    @pytest.mark.asyncio
    async def test_send_writes_bytes_unchanged(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder)
        try:
            await transport.connect(address)
            await recorder.wait_for(lambda: recorder.states)
            await transport.send(b"CMD :run Meteor")

            for _ in range(100):
                if server.received:
                    break
                await asyncio.sleep(0.01)
            assert bytes(server.received) == b"CMD :run Meteor"
        finally:
            await transport.disconnect()
            await server.close()

    @pytest.mark.asyncio
    async def test_send_while_disconnected_raises(self) -> None:
        transport = TcpTransport()
        with pytest.raises(TransportError, match="Not connected"):
            await transport.send(b"CMD :help")

    @pytest.mark.asyncio
    async def test_context_manager_disconnects(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        try:
            async with make_transport(recorder) as transport:
                await transport.connect(address)
                await recorder.wait_for(lambda: recorder.states)
                assert transport.is_connected
            assert not transport.is_connected
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_message_split_across_reads_is_reassembled(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder, flush_delay=1.0)
        try:
            await transport.connect(address)
            await server.client_connected.wait()
            await server.send(b'END :{"id":')
            await asyncio.sleep(0.05)
            await server.send(b' "17"};;;next;;;')

            await recorder.wait_for(lambda: len(recorder.messages) == 2)
            assert recorder.messages == ['END :{"id": "17"}', "next"]
        finally:
            await transport.disconnect()
            await server.close()

    @pytest.mark.asyncio
    async def test_unterminated_message_is_shown_after_quiet_period(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder, flush_delay=0.05)
        try:
            await transport.connect(address)
            await server.client_connected.wait()
            await server.send(b"no delimiter here")

            await recorder.wait_for(lambda: recorder.messages)
            assert recorder.messages == ["no delimiter here"]
        finally:
            await transport.disconnect()
            await server.close()

    @pytest.mark.asyncio
    async def test_pending_text_is_delivered_when_peer_closes(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder, flush_delay=10.0)
        try:
            await transport.connect(address)
            await server.client_connected.wait()
            await server.send(b"first;;;last words")
            await server.drop_clients()

            await recorder.wait_for(lambda: len(recorder.states) == 2)
            assert recorder.messages == ["first", "last words"]
        finally:
            await transport.disconnect()
            await server.close()


class TestTcpAttempts:
    @pytest.mark.asyncio
    async def test_each_connect_is_a_new_attempt(self) -> None:
        server = StripServer()
        address = await server.start()
        recorder = Recorder()
        transport = make_transport(recorder)
        try:
            assert transport.attempt == 0
            await transport.connect(address)
            await recorder.wait_for(lambda: recorder.states)
            await transport.connect(address)
            await recorder.wait_for(lambda: len(recorder.states) == 2)

            assert transport.attempt == 2
            assert recorder.attempts == [1, 2]
            assert [state for state, _ in recorder.states] == [
                ConnectionState.CONNECTED,
                ConnectionState.CONNECTED,
            ]
        finally:
            await transport.disconnect()
            await server.close()

    @pytest.mark.asyncio
    async def test_failed_attempt_is_tagged(self) -> None:
        server = StripServer()
        address = await server.start()
        await server.close()

        recorder = Recorder()
        transport = make_transport(recorder)
        await transport.connect(address)
        await recorder.wait_for(lambda: recorder.states)

        assert recorder.attempts == [transport.attempt] == [1]
