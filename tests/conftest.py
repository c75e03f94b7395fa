"""Shared test fixtures for the ledconsole test suite.

Provides common fixtures used across unit tests: a fake blessed
terminal, a mock transport, scripted input sources, and a headless
session controller.
"""

from __future__ import annotations

import contextlib
import io
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from blessed.keyboard import Keystroke

from ledconsole.commands.router import CommandRouter
from ledconsole.config.settings import ConsoleConfig
from ledconsole.domain.models import Key, KeyEvent, KeyName, ServerAddress
from ledconsole.formatting.strip import StripMessageFormatter
from ledconsole.input.base import EventSink, InputSource
from ledconsole.session.controller import SessionController


# ---------------------------------------------------------------------------
# Terminal Fixtures
# ---------------------------------------------------------------------------


class FakeTerminal:
    """Stands in for blessed.Terminal with readable escape markers."""

    def __init__(self, width: int = 40, height: int = 10) -> None:
        self.width = width
        self.height = height
        self.stream = io.StringIO()
        self.home = "<home>"
        self.clear = "<clear>"
        self.clear_eol = "<eol>"
        self.in_fullscreen = False
        self.in_cbreak = False
        self.pending_keys: list[Keystroke] = []

    def move_xy(self, x: int, y: int) -> str:
        return f"<{x},{y}>"

    def __getattr__(self, name: str):
        # Compound style formatters such as bold_green
        return lambda text: f"<{name}>{text}</{name}>"

    @contextlib.contextmanager
    def fullscreen(self):
        self.in_fullscreen = True
        try:
            yield
        finally:
            self.in_fullscreen = False

    @contextlib.contextmanager
    def cbreak(self):
        self.in_cbreak = True
        try:
            yield
        finally:
            self.in_cbreak = False

    def inkey(self, timeout: float | None = None) -> Keystroke:
        if self.pending_keys:
            return self.pending_keys.pop(0)
        time.sleep(timeout or 0)
        return Keystroke("")

    def output(self) -> str:
        return self.stream.getvalue()

    def reset_output(self) -> None:
        self.stream.seek(0)
        self.stream.truncate()


@pytest.fixture
def fake_terminal() -> FakeTerminal:
    """A 40x10 fake terminal."""
    return FakeTerminal()


# ---------------------------------------------------------------------------
# Input Fixtures
# ---------------------------------------------------------------------------


class ScriptedInput(InputSource):
    """Posts a fixed list of events as soon as the session starts."""

    def __init__(self, events: list) -> None:
        self.events = events
        self.started = False
        self.stopped = False

    def start(self, post: EventSink) -> None:
        self.started = True
        for event in self.events:
            post(event)

    def stop(self) -> None:
        self.stopped = True


def typed(text: str, enter: bool = True) -> list[KeyEvent]:
    """Key events for typing ``text`` (and pressing Enter)."""
    events = [KeyEvent(key=Key(name=KeyName.CHARACTER, char=c)) for c in text]
    if enter:
        events.append(KeyEvent(key=Key(name=KeyName.ENTER)))
    return events


# ---------------------------------------------------------------------------
# Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def server_address() -> ServerAddress:
    return ServerAddress(host="localhost", port=6)


@pytest.fixture
def mock_transport() -> MagicMock:
    """A mock Transport; connect/disconnect/send are AsyncMocks."""
    mock = MagicMock()
    mock.connect = AsyncMock()
    mock.disconnect = AsyncMock()
    mock.send = AsyncMock()
    mock.is_connected = False
    mock.attempt = 0
    return mock


@pytest.fixture
def quiet_config() -> ConsoleConfig:
    return ConsoleConfig(quiet=True)


@pytest.fixture
def controller(mock_transport: MagicMock, quiet_config: ConsoleConfig) -> SessionController:
    """A headless SessionController backed by the mock transport."""
    return SessionController(
        transport=mock_transport,
        formatter=StripMessageFormatter(),
        router=CommandRouter(),
        config=quiet_config,
    )


# ---------------------------------------------------------------------------
# Helper Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_terminal() -> type[FakeTerminal]:
    return FakeTerminal


@pytest.fixture
def scripted_input() -> type[ScriptedInput]:
    return ScriptedInput


@pytest.fixture(name="typed")
def typed_fixture():
    return typed
