"""The session controller that drives the interactive console.

Owns the scrollback, the line editor and the renderer. Keystrokes, line
submissions, terminal resizes, inbound messages and connection-state
changes all arrive as events on one asyncio queue and are applied by a
single consumer in arrival order, each followed immediately by a
redraw. Producers on other threads or tasks only ever call ``post``.
"""

from __future__ import annotations

import asyncio
import logging

from ledconsole.commands.parser import (
    CommandError,
    ConnectCommand,
    DisconnectCommand,
    ExitCommand,
    HelpCommand,
)
from ledconsole.commands.router import CommandRouter, HandledLocally
from ledconsole.config.settings import ConsoleConfig
from ledconsole.domain.models import (
    Category,
    ConnectionState,
    ConnectStateEvent,
    Key,
    KeyEvent,
    KeyName,
    ReceiveEvent,
    ResizeEvent,
    ServerAddress,
    SessionEvent,
    SessionState,
    StopEvent,
    StyleTag,
    SubmitEvent,
)
from ledconsole.formatting.base import MalformedPayloadError, MessageFormatter
from ledconsole.input.base import InputSource
from ledconsole.session.editor import LineEditor
from ledconsole.session.renderer import Renderer
from ledconsole.session.scroll import ScrollBuffer
from ledconsole.transport.base import Transport, TransportError
from ledconsole.transport.protocol import encode_command

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the AnimatedLEDStrip Server console"

# Viewport used when nothing is rendered
HEADLESS_SIZE = (80, 23)


class SessionController:
    """Runs one interactive console session.

    State machine: IDLE -> CONNECTING -> CONNECTED -> DISCONNECTED, with
    an explicit connect looping back to CONNECTING and EXITING reachable
    from every state. Lines that are not local commands are only sent
    while CONNECTED.
    """

    def __init__(
        self,
        transport: Transport,
        formatter: MessageFormatter,
        router: CommandRouter | None = None,
        renderer: Renderer | None = None,
        input_source: InputSource | None = None,
        config: ConsoleConfig | None = None,
    ) -> None:
        self._config = config or ConsoleConfig()
        self._transport = transport
        self._formatter = formatter
        self._router = router or CommandRouter()
        self._renderer = None if self._config.quiet else renderer
        self._input = input_source

        width, height = self._renderer.viewport_size() if self._renderer else HEADLESS_SIZE
        self._scroll = ScrollBuffer(width, height, overlap_rows=self._config.overlap_rows)
        self._editor = LineEditor(history_limit=self._config.history_limit)

        self._state = SessionState.IDLE
        self._address: ServerAddress | None = None
        self._attempt: int | None = None
        self._show_animation_info = not self._config.suppress_animation_info
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[SessionEvent] | None = None

        self._transport.set_callbacks(
            on_receive=self._on_receive,
            on_connect_state_change=self._on_connect_state_change,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def address(self) -> ServerAddress | None:
        return self._address

    @property
    def scroll(self) -> ScrollBuffer:
        return self._scroll

    @property
    def editor(self) -> LineEditor:
        return self._editor

    @property
    def show_animation_info(self) -> bool:
        return self._show_animation_info

    @property
    def is_running(self) -> bool:
        return self._loop is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, address: ServerAddress | None = None) -> None:
        """Run the session to completion, blocking until it exits."""
        asyncio.run(self.run(address))

    async def run(self, address: ServerAddress | None = None) -> None:
        """Run the session until an exit command or a StopEvent."""
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        if self._renderer is not None:
            self._renderer.open()
        logger.info("Session started")

        try:
            self._print(WELCOME_MESSAGE, StyleTag.SYSTEM_MESSAGE_EMPHASIS)
            self._print(self._router.parser.help_paragraph, StyleTag.SYSTEM_MESSAGE)
            if self._input is not None:
                self._input.start(self.post)
            if address is not None:
                self._address = address
                if self._config.auto_connect:
                    await self._connect(address)
            self._render()

            while self._state is not SessionState.EXITING:
                event = await self._queue.get()
                await self.handle_event(event)
        finally:
            if self._input is not None:
                self._input.stop()
            if self._state is not SessionState.EXITING:
                await self._transport.disconnect()
            if self._renderer is not None:
                self._renderer.close()
            self._loop = None
            self._queue = None
            logger.info("Session ended")

    def post(self, event: SessionEvent) -> None:
        """Queue an event for the session loop. Safe from any thread."""
        loop, queue = self._loop, self._queue
        if loop is None or queue is None:
            logger.debug("Session not running, dropped %s", event.event_type)
            return
        loop.call_soon_threadsafe(queue.put_nowait, event)

    def stop(self) -> None:
        """Ask the session to exit. Safe from any thread."""
        self.post(StopEvent())

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    async def handle_event(self, event: SessionEvent) -> None:
        """Apply one event to the session state and redraw."""
        if isinstance(event, KeyEvent):
            await self._handle_key(event.key)
        elif isinstance(event, SubmitEvent):
            await self._submit(event.line)
        elif isinstance(event, ReceiveEvent):
            self._handle_receive(event.text)
        elif isinstance(event, ConnectStateEvent):
            self._handle_connect_state(event.state, event.address, event.attempt)
        elif isinstance(event, ResizeEvent):
            self._handle_resize(event.width, event.height)
        elif isinstance(event, StopEvent):
            await self._exit()
        else:
            logger.warning("Unknown event type: %s", type(event))

        if self._state is not SessionState.EXITING:
            self._render()

    async def _handle_key(self, key: Key) -> None:
        if key.name is KeyName.CHARACTER:
            self._editor.insert_char(key.char)
        elif key.name is KeyName.BACKSPACE:
            self._editor.backspace()
        elif key.name is KeyName.UP:
            self._editor.history_older()
        elif key.name is KeyName.DOWN:
            self._editor.history_newer()
        elif key.name is KeyName.PAGE_UP:
            self._scroll.page_up()
        elif key.name is KeyName.PAGE_DOWN:
            self._scroll.page_down()
        elif key.name is KeyName.ENTER:
            await self._submit(self._editor.submit())
        elif key.name is KeyName.INTERRUPT:
            await self._exit()

    def _handle_receive(self, raw: str) -> None:
        if self._state is not SessionState.CONNECTED:
            logger.debug("Dropped message received while %s", self._state.value)
            return
        try:
            text, category = self._formatter.format(raw)
        except MalformedPayloadError as e:
            logger.warning("%s, showing raw text", e)
            text, category = raw, Category.MESSAGE
        if category is Category.ANIMATION_INFO and not self._show_animation_info:
            logger.debug("Suppressed animation info message")
            return
        self._print(text, StyleTag.NORMAL)

    def _handle_connect_state(
        self, state: ConnectionState, address: ServerAddress, attempt: int
    ) -> None:
        if attempt != self._attempt or address != self._address:
            logger.debug("Ignoring %s from stale attempt %d (%s)", state.value, attempt, address)
            return
        if state is ConnectionState.CONNECTED and self._state is SessionState.CONNECTING:
            self._state = SessionState.CONNECTED
            self._print(f"Connected to {address}", StyleTag.CONNECTION_EVENT)
        elif state is ConnectionState.DISCONNECTED and self._state is SessionState.CONNECTING:
            self._state = SessionState.DISCONNECTED
            self._print(f"Could not connect to {address}", StyleTag.CONNECTION_EVENT)
        elif state is ConnectionState.DISCONNECTED and self._state is SessionState.CONNECTED:
            self._state = SessionState.DISCONNECTED
            self._print(f"Disconnected from {address}", StyleTag.CONNECTION_EVENT)
        else:
            logger.debug("Ignoring %s while %s", state.value, self._state.value)

    def _handle_resize(self, width: int, height: int) -> None:
        self._scroll.resize(width, max(1, height - 1))
        if self._renderer is not None:
            self._renderer.invalidate()
        logger.debug("Resized to %dx%d", width, height)

    # ------------------------------------------------------------------
    # Submitted lines
    # ------------------------------------------------------------------

    async def _submit(self, line: str) -> None:
        if not line.strip():
            return
        self._print(line, StyleTag.COMMAND)
        try:
            route = self._router.dispatch(line)
        except CommandError as e:
            self._print(str(e), StyleTag.SYSTEM_MESSAGE)
            return

        if isinstance(route, HandledLocally):
            await self._run_local(route.command)
        else:
            await self._forward(route.text)

    async def _run_local(
        self, command: ExitCommand | ConnectCommand | DisconnectCommand | HelpCommand
    ) -> None:
        if isinstance(command, ExitCommand):
            await self._exit()
        elif isinstance(command, ConnectCommand):
            address = self._resolve_address(command)
            if address is None:
                self._print("No server address given", StyleTag.SYSTEM_MESSAGE)
                return
            await self._connect(address)
        elif isinstance(command, DisconnectCommand):
            await self._disconnect()
        elif isinstance(command, HelpCommand):
            self._print("Terminal Help", StyleTag.SYSTEM_MESSAGE_EMPHASIS)
            self._print(self._router.parser.help_text(), StyleTag.SYSTEM_MESSAGE)
            if self._state is SessionState.CONNECTED:
                self._print("\nServer Help", StyleTag.NORMAL_EMPHASIS)
                await self._send("help")

    async def _forward(self, text: str) -> None:
        if self._state is not SessionState.CONNECTED:
            self._print(
                f"No such command: {text} (not connected to a server)",
                StyleTag.SYSTEM_MESSAGE,
            )
            return
        self._show_animation_info = True
        await self._send(text)

    async def _send(self, text: str) -> None:
        try:
            await self._transport.send(encode_command(text))
        except TransportError as e:
            logger.warning("Send failed: %s", e)
            self._print(f"Could not send command: {e}", StyleTag.SYSTEM_MESSAGE)

    def _resolve_address(self, command: ConnectCommand) -> ServerAddress | None:
        current = self._address
        host = command.host or (current.host if current else None)
        port = command.port or (current.port if current else None)
        if host is None or port is None:
            return None
        return ServerAddress(host=host, port=port)

    # ------------------------------------------------------------------
    # Connection transitions
    # ------------------------------------------------------------------

    async def _connect(self, address: ServerAddress) -> None:
        if self._state is SessionState.CONNECTING:
            self._print(f"Already connecting to {self._address}", StyleTag.SYSTEM_MESSAGE)
            return
        if self._state is SessionState.CONNECTED:
            await self._disconnect()
        self._address = address
        self._state = SessionState.CONNECTING
        self._print(f"Connecting to {address}", StyleTag.CONNECTION_EVENT)
        await self._transport.connect(address)
        self._attempt = self._transport.attempt

    async def _disconnect(self) -> None:
        self._attempt = None
        if self._state is SessionState.CONNECTED:
            await self._transport.disconnect()
            self._state = SessionState.DISCONNECTED
            self._print(f"Disconnected from {self._address}", StyleTag.CONNECTION_EVENT)
        elif self._state is SessionState.CONNECTING:
            await self._transport.disconnect()
            self._state = SessionState.DISCONNECTED
            self._print(f"Stopped connecting to {self._address}", StyleTag.CONNECTION_EVENT)
        else:
            self._print("Not connected to a server", StyleTag.SYSTEM_MESSAGE)

    async def _exit(self) -> None:
        await self._transport.disconnect()
        self._state = SessionState.EXITING
        logger.info("Exit requested")

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _print(self, text: str, style: StyleTag) -> None:
        self._scroll.append(text, style)

    def _render(self) -> None:
        if self._renderer is None:
            return
        self._renderer.draw_frame(self._scroll.visible_window(), self._editor.text)

    # ------------------------------------------------------------------
    # Transport callbacks (any thread)
    # ------------------------------------------------------------------

    def _on_receive(self, text: str) -> None:
        self.post(ReceiveEvent(text=text))

    def _on_connect_state_change(
        self, state: ConnectionState, address: ServerAddress, attempt: int
    ) -> None:
        self.post(ConnectStateEvent(state=state, address=address, attempt=attempt))
