"""Domain models for ledconsole.

This package contains the core data structures, enumerations, and value
objects used throughout the system. All models use Pydantic v2 for
validation.
"""

from ledconsole.domain.models import (
    Category,
    ConnectionState,
    ConnectStateEvent,
    DisplayLine,
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

__all__ = [
    "Category",
    "ConnectionState",
    "ConnectStateEvent",
    "DisplayLine",
    "Key",
    "KeyEvent",
    "KeyName",
    "ReceiveEvent",
    "ResizeEvent",
    "ServerAddress",
    "SessionEvent",
    "SessionState",
    "StopEvent",
    "StyleTag",
    "SubmitEvent",
]
