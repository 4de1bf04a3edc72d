"""Terminal output abstraction.

Provides a ``Terminal`` protocol covering the output side of a terminal and
a concrete ``ProcessTerminal`` that writes to a text stream (``sys.stdout``
by default).
"""

from __future__ import annotations

import os
import sys
from typing import Protocol, TextIO

from tessera.term.ansi import HIDE_CURSOR, SHOW_CURSOR

ENV_WRITE_LOG = "TESSERA_WRITE_LOG"


class Terminal(Protocol):
    """Interface for terminal output."""

    def write(self, data: str) -> None: ...

    def flush(self) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...


class ProcessTerminal:
    """Terminal backed by a text stream of the current process.

    Every write is flushed immediately so a frame reaches the terminal in
    one piece.  When ``TESSERA_WRITE_LOG`` names a file, every write is
    also appended there verbatim.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._write_log_path: str = os.environ.get(ENV_WRITE_LOG, "")

    def write(self, data: str) -> None:
        """Write *data* to the stream and optionally to the write log."""
        self._stream.write(data)
        self._stream.flush()

        if self._write_log_path:
            with open(self._write_log_path, "a", encoding="utf-8") as f:
                f.write(data)

    def flush(self) -> None:
        self._stream.flush()

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)
