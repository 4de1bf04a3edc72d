"""Turning a node tree into terminal output.

:class:`AnsiRendering` produces the bytes written to a real terminal.  Each
frame rewinds the cursor to the top of the previous frame's dynamic region,
writes any new static content (which then scrolls into history and is never
rewound), writes the dynamic region, and clears whatever the previous frame
left below it.  The whole frame is bracketed as a synchronized update.

:class:`DebugRendering` produces a plain-text snapshot of the tree, the
static content, and the painted output, for tests and diagnostics.
"""

from __future__ import annotations

import logging
import time
import traceback
from typing import Callable, Protocol

from tessera.term.ansi import (
    BEGIN_SYNCHRONIZED_UPDATE,
    CLEAR_ALL_AFTER_CURSOR,
    CLEAR_LINE_AFTER_CURSOR,
    END_SYNCHRONIZED_UPDATE,
    MOVE_CURSOR_TO_FIRST_COLUMN,
    cursor_up,
)
from tessera.term.color import AnsiLevel
from tessera.term.errors import RenderFailedError
from tessera.term.nodes import Node, StaticSurfaces
from tessera.term.surface import Surface

__all__ = [
    "AnsiRendering",
    "DebugRendering",
    "Rendering",
    "format_duration",
]

logger = logging.getLogger(__name__)

_TIME_MARKER = "~" * 50


class Rendering(Protocol):
    """Renders a node tree to a string for display."""

    def render(self, node: Node) -> str:
        """Measure, place, and paint *node*, returning the output text."""
        ...


# ---------------------------------------------------------------------------
# AnsiRendering
# ---------------------------------------------------------------------------


class AnsiRendering:
    """Frame-diffing renderer producing ANSI output.

    Holds the previous frame's dynamic height plus buffers reused on every
    call.  Not thread-safe; use one instance per render loop.
    """

    def __init__(self, ansi_level: AnsiLevel = AnsiLevel.TRUECOLOR) -> None:
        self.ansi_level = ansi_level
        self._previous_height = 0
        self._out: list[str] = []
        self._statics = StaticSurfaces()
        self._surface = Surface()

    @property
    def previous_height(self) -> int:
        """Line count of the dynamic region written by the last frame."""
        return self._previous_height

    def render(self, node: Node) -> str:
        node.measure_and_place()

        out = self._out
        out.clear()
        out.append(BEGIN_SYNCHRONIZED_UPDATE)

        # The cursor sits on the last line of the previous dynamic region.
        if self._previous_height > 1:
            out.append(cursor_up(self._previous_height - 1))
        out.append(MOVE_CURSOR_TO_FIRST_COLUMN)

        statics = self._statics
        wrote_lines = False
        try:
            node.paint_statics(statics)
            static_count = len(statics)
            for static_surface in statics:
                if static_surface.width > 0 and static_surface.height > 0:
                    wrote_lines = self._append_surface(out, static_surface, wrote_lines)
            wrote_statics = wrote_lines

            height = 0
            if node.width > 0 and node.height > 0:
                surface = node.paint_into(self._surface)
                self._append_surface(out, surface, wrote_lines)
                height = surface.height
            elif wrote_statics:
                # Leave the cursor below the static lines so the next frame
                # does not write over them.
                out.append("\r\n")

            out.append(CLEAR_ALL_AFTER_CURSOR)
            out.append(END_SYNCHRONIZED_UPDATE)
            # Statics count as emitted only once the whole frame is built.
            statics.commit()
        finally:
            statics.clear()

        logger.debug(
            "Rendered frame: %d static surfaces, dynamic %dx%d (previous height %d)",
            static_count,
            node.width,
            height,
            self._previous_height,
        )
        self._previous_height = height
        output = "".join(out)
        out.clear()
        return output

    def _append_surface(self, out: list[str], surface: Surface, separate: bool) -> bool:
        for row in range(surface.height):
            if separate:
                out.append("\r\n")
            surface.append_row_to(out, row, self.ansi_level)
            out.append(CLEAR_LINE_AFTER_CURSOR)
            separate = True
        return separate


# ---------------------------------------------------------------------------
# DebugRendering
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format an elapsed time compactly: ``250us``, ``100ms``, ``1.5s``, ``2m 5s``."""
    if seconds <= 0:
        return "0s"
    if seconds < 1e-3:
        return f"{_trim(seconds * 1e6)}us"
    if seconds < 1:
        return f"{_trim(seconds * 1e3)}ms"
    if seconds < 60:
        return f"{_trim(seconds)}s"

    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(int(minutes), 60)
    parts: list[str] = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs >= 0.0005:
        parts.append(f"{_trim(secs)}s")
    return " ".join(parts)


def _trim(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


class DebugRendering:
    """Plain-text snapshot renderer.

    Failures while painting statics or output are written into the
    snapshot in place of the failed section; once the snapshot is complete
    a :class:`RenderFailedError` carrying it is raised.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        ansi_level: AnsiLevel = AnsiLevel.TRUECOLOR,
    ) -> None:
        self._clock = clock
        self.ansi_level = ansi_level
        self._last_render: float | None = None

    def render(self, node: Node) -> str:
        node.measure_and_place()

        failure: Exception | None = None
        out: list[str] = []

        now = self._clock()
        if self._last_render is not None:
            out.append(f"{_TIME_MARKER} +{format_duration(now - self._last_render)}\n")
        self._last_render = now

        out.append("NODES:\n")
        out.append(f"{node}\n")
        out.append("\n")

        statics = StaticSurfaces()
        try:
            node.paint_statics(statics)
            if statics:
                out.append("STATIC:\n")
                for static_surface in statics:
                    out.append(f"{static_surface.render(self.ansi_level)}\n")
                out.append("\n")
        except Exception as exc:
            failure = exc
            out.append(traceback.format_exc())

        out.append("OUTPUT:\n")
        try:
            out.append(f"{node.paint().render(self.ansi_level)}\n")
        except Exception as exc:
            if failure is None:
                failure = exc
            out.append(traceback.format_exc())

        output = "".join(out)
        if failure is not None:
            logger.debug("Debug render failed: %r", failure)
            raise RenderFailedError(output) from failure
        statics.commit()
        return output
