"""Rasterizer for rectangles, circles, and text onto a :class:`Surface`.

A :class:`DrawScope` is a view of a surface sized to one node.  Coordinates
are local to the node (the surface translation supplies the node's origin).
Rectangles and circles are clipped to the scope; shapes that cannot be seen
are skipped silently.  Text is not clipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from tessera.term.color import Color, TextStyle
from tessera.term.geometry import IntOffset, IntSize
from tessera.term.richtext import AnnotatedString, code_point_width
from tessera.term.surface import Surface

__all__ = [
    "DrawScope",
    "DrawStyle",
    "FILL",
    "Fill",
    "Stroke",
]


@dataclass(frozen=True)
class Fill:
    """Paint the whole shape."""


@dataclass(frozen=True)
class Stroke:
    """Paint only the outline, *width* cells thick (at least 1)."""

    width: int = 1


DrawStyle = Union[Fill, Stroke]

FILL = Fill()

Glyph = Union[str, int, None]


def _to_code_point(char: Glyph) -> int | None:
    if char is None or isinstance(char, int):
        return char
    if len(char) != 1:
        raise ValueError(f"Expected a single character, got {char!r}")
    return ord(char)


class DrawScope:
    """Drawing operations over a ``width x height`` region of *surface*."""

    def __init__(self, surface: Surface, width: int, height: int) -> None:
        self.surface = surface
        self.width = width
        self.height = height

    @property
    def size(self) -> IntSize:
        return IntSize(self.width, self.height)

    # ------------------------------------------------------------------
    # Rectangles
    # ------------------------------------------------------------------

    def draw_rect(
        self,
        char: Glyph = None,
        foreground: Color | None = None,
        background: Color | None = None,
        text_style: TextStyle | None = None,
        top_left: IntOffset = IntOffset.ZERO,
        size: IntSize | None = None,
        draw_style: DrawStyle = FILL,
    ) -> None:
        """Draw a rectangle at *top_left*.

        *size* defaults to the rest of the scope below and right of
        *top_left*.
        """
        code_point = _to_code_point(char)
        if size is None:
            size = IntSize(self.width - top_left.x, self.height - top_left.y)

        if (
            code_point is None
            and foreground is None
            and background is None
            and text_style is None
        ) or (
            size.width <= 0
            or size.height <= 0
            or top_left.x >= self.width
            or top_left.y >= self.height
            or top_left.x + size.width <= 0
            or top_left.y + size.height <= 0
        ):
            return

        x, y = top_left.x, top_left.y
        w, h = size.width, size.height
        attrs = (code_point, foreground, background, text_style)

        if isinstance(draw_style, Fill):
            self._fill_rect(x, y, w, h, *attrs)
            return

        stroke = max(1, draw_style.width)
        if stroke * 2 >= w or stroke * 2 >= h:
            # Bands would cover the whole rectangle.
            self._fill_rect(x, y, w, h, *attrs)
            return

        self._fill_rect(x, y, stroke, h, *attrs)
        self._fill_rect(x + stroke, y, w - stroke * 2, stroke, *attrs)
        self._fill_rect(x + w - stroke, y, stroke, h, *attrs)
        self._fill_rect(x + stroke, y + h - stroke, w - stroke * 2, stroke, *attrs)

    def _fill_rect(
        self,
        x: int,
        y: int,
        w: int,
        h: int,
        code_point: int | None,
        foreground: Color | None,
        background: Color | None,
        text_style: TextStyle | None,
    ) -> None:
        surface = self.surface
        x_start = max(0, x)
        x_end = min(self.width, x + w)
        for row in range(max(0, y), min(self.height, y + h)):
            for column in range(x_start, x_end):
                surface.get(row, column).update(code_point, foreground, background, text_style)

    # ------------------------------------------------------------------
    # Circles
    # ------------------------------------------------------------------

    def draw_circle(
        self,
        char: Glyph = None,
        foreground: Color | None = None,
        background: Color | None = None,
        text_style: TextStyle | None = None,
        radius: int | None = None,
        center: IntOffset | None = None,
        draw_style: DrawStyle = FILL,
    ) -> None:
        """Draw a circle with the midpoint algorithm.

        *center* defaults to the center of the scope and *radius* to half
        its smaller dimension.
        """
        code_point = _to_code_point(char)
        if radius is None:
            radius = self.size.min_dimension // 2
        if center is None:
            center = self.size.center

        if (
            code_point is None
            and foreground is None
            and background is None
            and text_style is None
        ) or (
            radius <= 0
            or center.x + radius < 0
            or center.y + radius < 0
            or center.x - radius >= self.width
            or center.y - radius >= self.height
        ):
            return

        attrs = (code_point, foreground, background, text_style)

        if isinstance(draw_style, Fill):
            self._fill_circle(center, radius, *attrs)
            return

        clipped_stroke = max(1, draw_style.width)
        outer_radius = clipped_stroke // 2 + radius
        if clipped_stroke // 2 >= radius:
            self._fill_circle(center, outer_radius, *attrs)
            return

        run = clipped_stroke - 1
        for x, y in _midpoint_circle(outer_radius):
            self._stroke_circle_part(center, x, y, run, *attrs)

    def _fill_circle(
        self,
        center: IntOffset,
        radius: int,
        code_point: int | None,
        foreground: Color | None,
        background: Color | None,
        text_style: TextStyle | None,
    ) -> None:
        for x, y in _midpoint_circle(radius):
            self._hline(center.y + y, center.y - y, center.x - x, center.x + x,
                        code_point, foreground, background, text_style)
            self._hline(center.y + x, center.y - x, center.x - y, center.x + y,
                        code_point, foreground, background, text_style)

    def _hline(
        self,
        row1: int,
        row2: int,
        start: int,
        end: int,
        code_point: int | None,
        foreground: Color | None,
        background: Color | None,
        text_style: TextStyle | None,
    ) -> None:
        """Fill columns ``start..end`` (inclusive) on rows *row1* and *row2*."""
        row1_visible = 0 <= row1 < self.height
        row2_visible = 0 <= row2 < self.height
        if not (row1_visible or row2_visible):
            return
        surface = self.surface
        for column in range(max(0, start), min(self.width - 1, end) + 1):
            if row1_visible:
                surface.get(row1, column).update(code_point, foreground, background, text_style)
            if row2_visible:
                surface.get(row2, column).update(code_point, foreground, background, text_style)

    def _stroke_circle_part(
        self,
        center: IntOffset,
        x: int,
        y: int,
        run: int,
        code_point: int | None,
        foreground: Color | None,
        background: Color | None,
        text_style: TextStyle | None,
    ) -> None:
        surface = self.surface
        width, height = self.width, self.height
        attrs = (code_point, foreground, background, text_style)

        # Vertical runs at columns cx +- x, growing inward from rows cy +- y.
        x1 = center.x + x
        x2 = center.x - x
        x1_visible = 0 <= x1 < width
        x2_visible = 0 <= x2 < width
        if x1_visible or x2_visible:
            spans = (
                (max(0, center.y + y - run), min(height - 1, center.y + y)),
                (max(0, center.y - y), min(height - 1, center.y - y + run)),
            )
            for low, high in spans:
                for row in range(high, low - 1, -1):
                    if x1_visible:
                        surface.get(row, x1).update(*attrs)
                    if x2_visible:
                        surface.get(row, x2).update(*attrs)

        # Horizontal runs at rows cy +- x, growing inward from columns cx +- y.
        y1 = center.y + x
        y2 = center.y - x
        y1_visible = 0 <= y1 < height
        y2_visible = 0 <= y2 < height
        if y1_visible or y2_visible:
            spans = (
                (max(0, center.x + y - run), min(width - 1, center.x + y)),
                (max(0, center.x - y), min(width - 1, center.x - y + run)),
            )
            for low, high in spans:
                for column in range(high, low - 1, -1):
                    if y1_visible:
                        surface.get(y1, column).update(*attrs)
                    if y2_visible:
                        surface.get(y2, column).update(*attrs)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def draw_text(
        self,
        row: int,
        column: int,
        text: str | AnnotatedString,
        foreground: Color | None = None,
        background: Color | None = None,
        text_style: TextStyle | None = None,
    ) -> None:
        """Write *text* starting at (*row*, *column*).

        Wide code points take two cells.  Span styles of an
        :class:`AnnotatedString` are layered over the base attributes.
        """
        if isinstance(text, AnnotatedString):
            plain = text.text
            annotated: AnnotatedString | None = text if text.spans else None
        else:
            plain = text
            annotated = None

        surface = self.surface
        for index, ch in enumerate(plain):
            code_point = ord(ch)
            cell = surface.get(row, column)
            cell.update(code_point, foreground, background, text_style)
            if annotated is not None:
                for span in annotated.span_styles(index, index + 1):
                    cell.update(None, span.color, span.background, span.text_style)

            if code_point_width(code_point) == 2:
                trailing = surface.get(row, column + 1)
                trailing.clear()
                trailing.continuation = True
                column += 2
            else:
                column += 1


def _midpoint_circle(radius: int):
    """Yield the octant points ``(x, y)`` of a circle of *radius*.

    The final point may lie one step past the diagonal; drawing it keeps
    the eight-way reflection closed.
    """
    x = 0
    y = radius
    d = 3 - 2 * radius
    yield x, y
    while y >= x:
        x += 1
        if d > 0:
            y -= 1
            d += 4 * (x - y) + 10
        else:
            d += 4 * x + 6
        yield x, y
