"""Threads that feed keyboard or line input into the session.

Both readers block on their input outside the session's event loop and
push events through the sink handed to ``start``.
"""

from __future__ import annotations

import logging
import threading
from typing import TextIO

from blessed import Terminal

from ledconsole.domain.models import KeyEvent, ResizeEvent, StopEvent, SubmitEvent
from ledconsole.input.base import EventSink, InputSource
from ledconsole.input.keys import InputDecodeError, decode_key

logger = logging.getLogger(__name__)


class KeyReader(InputSource):
    """Reads keystrokes from a blessed terminal in cbreak mode.

    Terminal size is checked after every poll; a change is posted as a
    ResizeEvent.
    """

    def __init__(self, term: Terminal, poll_interval: float = 0.1) -> None:
        self._term = term
        self._poll_interval = poll_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, post: EventSink) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._read_loop, args=(post,), daemon=True, name="key-reader"
        )
        self._thread.start()
        logger.info("Key reader started")

    def stop(self) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._poll_interval * 10)
        logger.info("Key reader stopped")

    def _read_loop(self, post: EventSink) -> None:
        term = self._term
        size = (term.width, term.height)
        with term.cbreak():
            while not self._stop.is_set():
                keystroke = term.inkey(timeout=self._poll_interval)
                if self._stop.is_set():
                    break

                current = (term.width, term.height)
                if current != size:
                    size = current
                    post(ResizeEvent(width=max(1, current[0]), height=max(1, current[1])))

                if not keystroke:
                    continue
                try:
                    key = decode_key(keystroke)
                except InputDecodeError as e:
                    logger.debug("Dropped key: %s", e)
                    continue
                post(KeyEvent(key=key))


class LineReader(InputSource):
    """Reads whole lines from a text stream, for headless operation.

    End of input ends the session.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self, post: EventSink) -> None:
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._read_loop, args=(post,), daemon=True, name="line-reader"
        )
        self._thread.start()
        logger.info("Line reader started")

    def stop(self) -> None:
        # A blocked readline cannot be interrupted; the daemon thread is abandoned
        self._stop.set()
        self._thread = None

    def _read_loop(self, post: EventSink) -> None:
        for line in self._stream:
            if self._stop.is_set():
                return
            post(SubmitEvent(line=line.rstrip("\r\n")))
        if not self._stop.is_set():
            logger.info("End of input")
            post(StopEvent())
