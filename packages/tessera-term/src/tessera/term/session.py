"""Render loop driver.

A :class:`Session` owns the root of a node tree, applies the mutations the
composition layer sends it, and writes a frame to its :class:`Terminal`
whenever a render is requested.  Requests made while a render is already
scheduled coalesce into one frame.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from tessera.term.color import AnsiLevel
from tessera.term.config import RenderConfig
from tessera.term.nodes import Mutation, Node, NodeApplier
from tessera.term.rendering import AnsiRendering, Rendering
from tessera.term.terminal import Terminal

__all__ = ["Session", "render_once"]

logger = logging.getLogger(__name__)


class Session:
    """Drives rendering of one node tree to one terminal."""

    def __init__(
        self,
        terminal: Terminal,
        config: RenderConfig | None = None,
        rendering: Rendering | None = None,
    ) -> None:
        self.terminal = terminal
        self.config = config if config is not None else RenderConfig()
        self.rendering: Rendering = (
            rendering if rendering is not None else AnsiRendering(self.config.ansi_level)
        )
        self.root = Node.root()
        self.applier = NodeApplier(self.root)

        self._render_requested = False
        self._stopped = True
        self._frame_count = 0

    @property
    def frame_count(self) -> int:
        """Number of frames written so far."""
        return self._frame_count

    @property
    def running(self) -> bool:
        return not self._stopped

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Hide the cursor and render the first frame."""
        self._stopped = False
        self.terminal.hide_cursor()
        self.render()

    def stop(self) -> None:
        """Render a final frame, then leave the cursor below the output."""
        if self._stopped:
            return
        try:
            self.render()
        finally:
            self._stopped = True
            self.terminal.write("\r\n")
            self.terminal.show_cursor()
            self.terminal.flush()

    def __enter__(self) -> Session:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Tree updates
    # ------------------------------------------------------------------

    def apply(self, mutations: Iterable[Mutation]) -> None:
        """Apply *mutations* to the tree and request a render."""
        self.applier.apply(mutations)
        self.request_render()

    def set_content(self, *nodes: Node) -> None:
        """Replace the root's children with *nodes* and request a render."""
        self.applier.clear()
        for index, node in enumerate(nodes):
            self.root.insert_child(index, node)
        self.request_render()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def request_render(self) -> None:
        """Schedule a render on the next event-loop tick.

        Multiple calls coalesce into a single frame.  Without a running
        loop the frame is rendered immediately.
        """
        if self._stopped or self._render_requested:
            return
        self._render_requested = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._do_render_tick()
            return
        loop.call_soon(self._do_render_tick)

    def _do_render_tick(self) -> None:
        self._render_requested = False
        if self._stopped:
            return
        self.render()

    def render(self) -> None:
        """Render the tree now and write the frame to the terminal."""
        try:
            output = self.rendering.render(self.root)
        except Exception:
            logger.exception("Frame %d failed to render", self._frame_count)
            raise
        self.terminal.write(output)
        self._frame_count += 1


def render_once(*nodes: Node, ansi_level: AnsiLevel = AnsiLevel.TRUECOLOR) -> str:
    """Render *nodes* under a fresh root exactly once and return the output."""
    root = Node.root()
    for index, node in enumerate(nodes):
        root.insert_child(index, node)
    return AnsiRendering(ansi_level).render(root)
