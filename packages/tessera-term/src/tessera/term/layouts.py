"""Concrete nodes: text, rows, columns, boxes, canvases, and static content.

These build on the same measure/place/paint protocol as :meth:`Node.root`
and are what a composition layer typically inserts into the tree.
"""

from __future__ import annotations

import json
from typing import Callable, Generic, Iterable, TypeVar

from tessera.term.color import Color, TextStyle
from tessera.term.draw import DrawScope
from tessera.term.measure import DrawPolicy, MeasureResult, layout
from tessera.term.nodes import (
    Node,
    StaticSurfaces,
    describe,
    paint_children_statics,
    stack_measure_policy,
)
from tessera.term.richtext import AnnotatedString, text_width
from tessera.term.surface import Surface

__all__ = [
    "StaticNode",
    "TextNode",
    "box",
    "canvas",
    "column",
    "row",
    "static",
    "text",
]

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


class TextNode(Node):
    """A block of text, one row per line, sized to its widest line."""

    def __init__(
        self,
        value: str | AnnotatedString,
        foreground: Color | None = None,
        background: Color | None = None,
        text_style: TextStyle | None = None,
    ) -> None:
        super().__init__(
            measure_policy=self._measure,
            draw_policy=self._draw,
            debug_policy=self._debug,
            name="Text",
        )
        self.foreground = foreground
        self.background = background
        self.text_style = text_style
        self.set_value(value)

    @property
    def value(self) -> str | AnnotatedString:
        return self._value

    def set_value(self, value: str | AnnotatedString) -> None:
        self._value = value
        if isinstance(value, AnnotatedString):
            self._lines: list[str | AnnotatedString] = list(value.split_lines())
        else:
            self._lines = list(value.split("\n"))
        self._width = max(text_width(str(line)) for line in self._lines)

    def _measure(self, children: list[Node]) -> MeasureResult:
        return layout(self._width, len(self._lines))

    def _draw(self, scope: DrawScope) -> None:
        for row_index, line in enumerate(self._lines):
            scope.draw_text(
                row_index,
                0,
                line,
                foreground=self.foreground,
                background=self.background,
                text_style=self.text_style,
            )

    def _debug(self, node: Node) -> str:
        quoted = json.dumps(str(self._value), ensure_ascii=False)
        return describe(self, f"Text({quoted})")


def text(
    value: str | AnnotatedString,
    foreground: Color | None = None,
    background: Color | None = None,
    text_style: TextStyle | None = None,
) -> TextNode:
    return TextNode(value, foreground, background, text_style)


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


def _column_measure(children: list[Node]) -> MeasureResult:
    width = 0
    height = 0
    placeables = []
    for child in children:
        placeable = child.measure()
        width = max(width, placeable.width)
        height += placeable.height
        placeables.append(placeable)

    def place_children() -> None:
        y = 0
        for placeable in placeables:
            placeable.place(0, y)
            y += placeable.height

    return layout(width, height, place_children)


def _row_measure(children: list[Node]) -> MeasureResult:
    width = 0
    height = 0
    placeables = []
    for child in children:
        placeable = child.measure()
        width += placeable.width
        height = max(height, placeable.height)
        placeables.append(placeable)

    def place_children() -> None:
        x = 0
        for placeable in placeables:
            placeable.place(x, 0)
            x += placeable.width

    return layout(width, height, place_children)


def _container(name: str, measure_policy, children: Iterable[Node]) -> Node:
    node = Node(
        measure_policy=measure_policy,
        static_paint_policy=paint_children_statics,
        debug_policy=lambda n: describe(n, f"{name}()"),
        name=name,
    )
    node.children.extend(children)
    return node


def column(*children: Node) -> Node:
    """Stack *children* top to bottom."""
    return _container("Column", _column_measure, children)


def row(*children: Node) -> Node:
    """Lay *children* out left to right."""
    return _container("Row", _row_measure, children)


def box(*children: Node) -> Node:
    """Overlay *children* at the origin; later children paint on top."""
    return _container("Box", stack_measure_policy, children)


def canvas(width: int, height: int, draw: DrawPolicy | None = None) -> Node:
    """A fixed-size node painted by *draw*."""
    return Node(
        measure_policy=lambda children: layout(width, height),
        draw_policy=draw,
        debug_policy=lambda n: describe(n, "Canvas()"),
        name="Canvas",
    )


# ---------------------------------------------------------------------------
# Static content
# ---------------------------------------------------------------------------


class StaticNode(Node, Generic[T]):
    """Append-only output that is written above the dynamic region.

    Each item becomes a child built by *content*.  A child is emitted as a
    static surface once, on the first frame after it was added that
    renders successfully, and is then dropped from ``children``.  The node
    itself occupies no space in the dynamic region.
    """

    def __init__(self, content: Callable[[T], Node]) -> None:
        super().__init__(
            measure_policy=self._measure,
            static_paint_policy=self._paint_statics,
            debug_policy=self._debug,
            name="Static",
        )
        self._content = content

    def add(self, item: T) -> Node:
        """Append a child for *item* and return it."""
        child = self._content(item)
        self.children.append(child)
        return child

    def pending(self) -> list[Node]:
        """Children that have not been emitted yet."""
        return list(self.children)

    def _measure(self, children: list[Node]) -> MeasureResult:
        pending = list(children)
        for child in pending:
            child.measure()

        def place_children() -> None:
            for child in pending:
                child.place(0, 0)

        return layout(0, 0, place_children)

    def _paint_statics(self, node: Node, statics: list[Surface]) -> None:
        painted = list(self.children)
        for child in painted:
            if not child.is_placed:
                child.measure_and_place()
            statics.append(child.paint())
            child.paint_statics(statics)

        if not painted:
            return
        if isinstance(statics, StaticSurfaces):
            statics.on_commit(lambda: self._drop(painted))
        else:
            # A plain list has no frame to wait for.
            self._drop(painted)

    def _drop(self, emitted: list[Node]) -> None:
        ids = {id(child) for child in emitted}
        self.children[:] = [child for child in self.children if id(child) not in ids]

    def _debug(self, node: Node) -> str:
        lines = ["Static()"]
        for child in self.children:
            for line in str(child).split("\n"):
                lines.append(f"  {line}")
        return "\n".join(lines)


def static(items: Iterable[T], content: Callable[[T], Node]) -> StaticNode[T]:
    """Create a :class:`StaticNode` holding *items*."""
    node: StaticNode[T] = StaticNode(content)
    for item in items:
        node.add(item)
    return node
