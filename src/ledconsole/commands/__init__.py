"""Local command handling for ledconsole.

Public API:
    CommandParser -- Recognizes the console's built-in commands
    CommandRouter -- Decides whether a line is local or forwarded
    CommandError -- Raised for a local command with invalid arguments
"""

from ledconsole.commands.parser import (
    CommandError,
    CommandParser,
    ConnectCommand,
    DisconnectCommand,
    ExitCommand,
    HelpCommand,
    LocalCommand,
)
from ledconsole.commands.router import CommandRouter, ForwardToRemote, HandledLocally

__all__ = [
    "CommandError",
    "CommandParser",
    "CommandRouter",
    "ConnectCommand",
    "DisconnectCommand",
    "ExitCommand",
    "ForwardToRemote",
    "HandledLocally",
    "HelpCommand",
    "LocalCommand",
]
