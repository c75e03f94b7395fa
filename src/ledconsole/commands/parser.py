"""Grammar for the console's built-in commands.

Recognizes ``exit``, ``connect [IP [PORT]]``, ``disconnect`` and
``help``. Anything else is not a local command and is left for the
router to forward.
"""

from __future__ import annotations

import logging
import shlex
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

HELP_PARAGRAPH = """\
Type commands and press enter to send them to the server.
Type "help" to view available commands.

Use up and down arrows to view command history.
Use page up and page down to view output history.
"""


# ---------------------------------------------------------------------------
# Local commands (discriminated union)
# ---------------------------------------------------------------------------


class ExitCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    command_type: Literal["exit"] = "exit"


class ConnectCommand(BaseModel):
    """Connect, optionally to a different host and port."""

    model_config = ConfigDict(frozen=True)

    command_type: Literal["connect"] = "connect"
    host: str | None = Field(default=None)
    port: int | None = Field(default=None)


class DisconnectCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    command_type: Literal["disconnect"] = "disconnect"


class HelpCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    command_type: Literal["help"] = "help"


LocalCommand = Annotated[
    Union[ExitCommand, ConnectCommand, DisconnectCommand, HelpCommand],
    Field(discriminator="command_type"),
]


class CommandSpec(BaseModel):
    """Help metadata for one built-in command."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    arg_help: str = ""


BUILTIN_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(name="connect", description="Connect to a server", arg_help="[IP [PORT]]"),
    CommandSpec(name="disconnect", description="Disconnect from a server"),
    CommandSpec(name="exit", description="Exit the terminal"),
    CommandSpec(name="help", description="Show this help message"),
)


class CommandParser:
    """Parses typed lines into local commands."""

    def __init__(self, help_paragraph: str = HELP_PARAGRAPH) -> None:
        self._help_paragraph = help_paragraph

    @property
    def help_paragraph(self) -> str:
        return self._help_paragraph

    def parse_local(self, line: str) -> ExitCommand | ConnectCommand | DisconnectCommand | HelpCommand | None:
        """Return the local command for ``line``, or None if it is not one.

        Raises:
            CommandError: If a local command has invalid arguments.
        """
        try:
            tokens = shlex.split(line)
        except ValueError:
            # Unbalanced quotes; let the server judge it
            return None
        if not tokens:
            return None

        name, args = tokens[0].lower(), tokens[1:]
        if name == "exit" and not args:
            return ExitCommand()
        if name == "disconnect" and not args:
            return DisconnectCommand()
        if name == "help" and not args:
            return HelpCommand()
        if name == "connect" and len(args) <= 2:
            return self._parse_connect(args)
        return None

    def help_text(self) -> str:
        """Built-in help paragraph followed by the command list."""
        lines = [self._help_paragraph.rstrip("\n"), "", "Commands:"]
        width = max(len(self._usage(spec)) for spec in BUILTIN_COMMANDS)
        for spec in BUILTIN_COMMANDS:
            lines.append(f"  {self._usage(spec).ljust(width)}  {spec.description}")
        return "\n".join(lines)

    @staticmethod
    def _usage(spec: CommandSpec) -> str:
        return f"{spec.name} {spec.arg_help}".rstrip()

    @staticmethod
    def _parse_connect(args: list[str]) -> ConnectCommand:
        host = args[0] if args else None
        port = None
        if len(args) > 1:
            port = int(args[1]) if args[1].isdecimal() else None
            if port is None or not 1 <= port <= 65535:
                raise CommandError(f"Port {args[1]} is not a valid integer", command="connect")
        return ConnectCommand(host=host, port=port)


class CommandError(ValueError):
    """Raised when a local command is given invalid arguments."""

    def __init__(self, message: str, command: str = "") -> None:
        super().__init__(message)
        self.command = command
