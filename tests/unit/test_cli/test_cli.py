"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from ledconsole.cli import build_session, main, parse_args
from ledconsole.config.settings import Settings
from ledconsole.domain.models import ServerAddress
from ledconsole.input.readers import KeyReader, LineReader
from ledconsole.session.controller import SessionController


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args([])
        assert args.address is None
        assert args.config is None
        assert not args.verbose and not args.quiet and not args.no_connect

    def test_all_options(self) -> None:
        args = parse_args(["-c", "my.yaml", "-v", "-q", "--no-connect", "10.0.0.5:1118"])
        assert args.config == Path("my.yaml")
        assert args.verbose and args.quiet and args.no_connect
        assert args.address == "10.0.0.5:1118"


class TestBuildSession:
    def test_quiet_session_reads_lines(self) -> None:
        settings = Settings()
        settings.console.quiet = True
        session = build_session(settings)
        assert isinstance(session, SessionController)
        assert isinstance(session._input, LineReader)

    def test_interactive_session_uses_terminal(self, fake_terminal) -> None:
        session = build_session(Settings(), term=fake_terminal)
        assert isinstance(session._input, KeyReader)
        assert session.scroll.width == 40
        assert session.scroll.height == 9


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("ledconsole.utils.logging.setup_logging") as setup:
        yield setup


class TestMain:
    def test_starts_session_with_address(self, tmp_path: Path) -> None:
        with patch("ledconsole.cli.build_session") as build:
            main(["-c", str(tmp_path / "missing.yaml"), "-q", "strip.local:1118"])

        settings = build.call_args.args[0]
        assert settings.console.quiet is True
        build.return_value.start.assert_called_once_with(
            ServerAddress(host="strip.local", port=1118)
        )

    def test_address_defaults_to_config(self, tmp_path: Path) -> None:
        with patch("ledconsole.cli.build_session") as build:
            main(["-c", str(tmp_path / "missing.yaml"), "-q", "--no-connect"])

        assert build.call_args.args[0].console.auto_connect is False
        build.return_value.start.assert_called_once_with(
            ServerAddress(host="localhost", port=6)
        )

    def test_bad_port_exits(self, tmp_path: Path, capsys) -> None:
        with patch("ledconsole.cli.build_session") as build:
            with pytest.raises(SystemExit) as exc_info:
                main(["-c", str(tmp_path / "missing.yaml"), "-q", "strip.local:abc"])

        assert exc_info.value.code == 2
        assert "Port abc is not a valid integer" in capsys.readouterr().err
        build.assert_not_called()

    def test_keyboard_interrupt_is_caught(self, tmp_path: Path) -> None:
        with patch("ledconsole.cli.build_session") as build:
            build.return_value.start.side_effect = KeyboardInterrupt
            main(["-c", str(tmp_path / "missing.yaml"), "-q"])

        build.return_value.start.assert_called_once()
