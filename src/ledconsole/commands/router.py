"""Decides where a submitted line goes."""

from __future__ import annotations

import logging
from typing import Union

from pydantic import BaseModel, ConfigDict

from ledconsole.commands.parser import (
    CommandParser,
    ConnectCommand,
    DisconnectCommand,
    ExitCommand,
    HelpCommand,
)

logger = logging.getLogger(__name__)


class HandledLocally(BaseModel):
    model_config = ConfigDict(frozen=True)

    command: ExitCommand | ConnectCommand | DisconnectCommand | HelpCommand


class ForwardToRemote(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


Dispatch = Union[HandledLocally, ForwardToRemote]


class CommandRouter:
    """Routes lines to the local command set or to the server."""

    def __init__(self, parser: CommandParser | None = None) -> None:
        self._parser = parser or CommandParser()

    @property
    def parser(self) -> CommandParser:
        return self._parser

    def dispatch(self, line: str) -> Dispatch:
        """Classify ``line``.

        Raises:
            CommandError: If ``line`` is a local command with bad arguments.
        """
        command = self._parser.parse_local(line)
        if command is not None:
            logger.debug("Local command: %s", command.command_type)
            return HandledLocally(command=command)
        return ForwardToRemote(text=line)
