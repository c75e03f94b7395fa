"""Core domain models for the ledconsole system.

These models represent the data flowing through the interactive
session: rendered output lines, connection and session states, decoded
key presses, and the events both the keyboard loop and the transport
push into the session controller.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class StyleTag(str, enum.Enum):
    """How a line of output is styled when drawn."""

    NORMAL = "normal"
    NORMAL_EMPHASIS = "normal_emphasis"
    COMMAND = "command"  # Echo of a submitted line
    CONNECTION_EVENT = "connection_event"
    SYSTEM_MESSAGE = "system_message"
    SYSTEM_MESSAGE_EMPHASIS = "system_message_emphasis"


class ConnectionState(str, enum.Enum):
    """Connection state as reported by the transport."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SessionState(str, enum.Enum):
    """Lifecycle state of the interactive session."""

    IDLE = "idle"  # No connection attempted yet
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    EXITING = "exiting"  # Terminal


class Category(str, enum.Enum):
    """Kind of inbound message, as decided by the formatter."""

    ANIMATION_DATA = "animation_data"
    ANIMATION_INFO = "animation_info"  # Suppressible
    END_ANIMATION = "end_animation"
    STRIP_INFO = "strip_info"
    SECTION = "section"
    MESSAGE = "message"


class KeyName(str, enum.Enum):
    CHARACTER = "character"
    ENTER = "enter"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    INTERRUPT = "interrupt"


# ---------------------------------------------------------------------------
# Output / connection models
# ---------------------------------------------------------------------------


class DisplayLine(BaseModel):
    """One row of rendered output, already wrapped to the viewport width."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="")
    style: StyleTag = Field(default=StyleTag.NORMAL)


class ServerAddress(BaseModel):
    """Host and port of a remote server."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)

    @classmethod
    def parse(cls, value: str, default_port: int) -> ServerAddress:
        """Parse ``host`` or ``host:port``.

        Raises:
            ValueError: If the port part is not a valid integer.
        """
        host, sep, port = value.rpartition(":")
        if not sep:
            return cls(host=value, port=default_port)
        if not port.isdecimal():
            raise ValueError(f"Port {port} is not a valid integer")
        return cls(host=host, port=int(port))

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class Key(BaseModel):
    """A decoded key press."""

    model_config = ConfigDict(frozen=True)

    name: KeyName
    char: str = Field(default="", description="The typed character for CHARACTER keys")


# ---------------------------------------------------------------------------
# Session events (discriminated union)
# ---------------------------------------------------------------------------


class KeyEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["key"] = "key"
    key: Key


class ResizeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["resize"] = "resize"
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class SubmitEvent(BaseModel):
    """A whole line submitted at once (headless input)."""

    model_config = ConfigDict(frozen=True)

    event_type: Literal["submit"] = "submit"
    line: str


class ReceiveEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["receive"] = "receive"
    text: str


class ConnectStateEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["connect_state"] = "connect_state"
    state: ConnectionState
    address: ServerAddress
    attempt: int = Field(default=0, ge=0, description="Transport connect attempt the change belongs to")


class StopEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_type: Literal["stop"] = "stop"


SessionEvent = Annotated[
    Union[KeyEvent, ResizeEvent, SubmitEvent, ReceiveEvent, ConnectStateEvent, StopEvent],
    Field(discriminator="event_type"),
]
