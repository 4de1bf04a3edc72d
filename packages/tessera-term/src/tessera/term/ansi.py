"""ANSI control sequences emitted by the renderers."""

from __future__ import annotations

ESC = "\x1b"
CSI = "\x1b["

BEGIN_SYNCHRONIZED_UPDATE = "\x1b[?2026h"
END_SYNCHRONIZED_UPDATE = "\x1b[?2026l"

MOVE_CURSOR_TO_FIRST_COLUMN = "\x1b[1G"
CLEAR_LINE_AFTER_CURSOR = "\x1b[K"
CLEAR_ALL_AFTER_CURSOR = "\x1b[J"

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"

_CURSOR_UP_FMT = "\x1b[{}A"


def cursor_up(lines: int) -> str:
    """Move the cursor up *lines* rows (nothing for ``lines <= 0``)."""
    if lines <= 0:
        return ""
    return _CURSOR_UP_FMT.format(lines)
