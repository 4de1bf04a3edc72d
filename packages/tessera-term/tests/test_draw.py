"""Tests for DrawScope -- rectangles, circles, and text."""

from __future__ import annotations

import pytest

from tessera.term.color import Color, TextStyle
from tessera.term.draw import DrawScope, Stroke
from tessera.term.geometry import IntOffset, IntSize
from tessera.term.richtext import AnnotatedString, SpanRange, SpanStyle, text_width
from tessera.term.surface import Surface


def scope_of(width: int, height: int) -> DrawScope:
    return DrawScope(Surface(width, height), width, height)


def lines(scope: DrawScope) -> list[str]:
    return scope.surface.render().split("\n")


class TestDrawRect:
    def test_fill_defaults_to_whole_scope(self) -> None:
        scope = scope_of(3, 2)
        scope.draw_rect("#")
        assert lines(scope) == ["###", "###"]

    def test_fill_region(self) -> None:
        scope = scope_of(4, 3)
        scope.draw_rect("#", top_left=IntOffset(1, 1), size=IntSize(2, 1))
        assert lines(scope) == ["    ", " ## ", "    "]

    def test_stroke(self) -> None:
        scope = scope_of(5, 3)
        scope.draw_rect("#", draw_style=Stroke())
        assert lines(scope) == ["#####", "#   #", "#####"]

    def test_wide_stroke(self) -> None:
        scope = scope_of(6, 5)
        scope.draw_rect("#", draw_style=Stroke(2))
        assert lines(scope) == ["######", "######", "##  ##", "######", "######"]

    def test_stroke_covering_rect_becomes_fill(self) -> None:
        scope = scope_of(4, 4)
        scope.draw_rect("#", draw_style=Stroke(2))
        assert lines(scope) == ["####"] * 4

    def test_nothing_specified_draws_nothing(self) -> None:
        scope = scope_of(2, 1)
        scope.draw_rect()
        assert scope.surface.get(0, 0).code_point is None

    def test_clipped_to_scope(self) -> None:
        scope = scope_of(3, 3)
        scope.draw_rect("#", top_left=IntOffset(-1, -1), size=IntSize(3, 3))
        assert lines(scope) == ["## ", "## ", "   "]

    def test_outside_scope_is_skipped(self) -> None:
        scope = scope_of(3, 3)
        scope.draw_rect("#", top_left=IntOffset(3, 0), size=IntSize(2, 2))
        scope.draw_rect("#", top_left=IntOffset(-2, 0), size=IntSize(2, 2))
        assert lines(scope) == ["   "] * 3

    def test_background_only_keeps_glyphs(self) -> None:
        scope = scope_of(2, 1)
        scope.draw_rect("x")
        scope.draw_rect(background=Color.BLUE)
        cell = scope.surface.get(0, 1)
        assert cell.code_point == ord("x")
        assert cell.background == Color.BLUE

    def test_code_point_glyph(self) -> None:
        scope = scope_of(1, 1)
        scope.draw_rect(0x2588)
        assert lines(scope) == ["█"]

    def test_multi_character_glyph_rejected(self) -> None:
        with pytest.raises(ValueError):
            scope_of(1, 1).draw_rect("ab")


class TestDrawCircle:
    def test_fill(self) -> None:
        scope = scope_of(5, 5)
        scope.draw_circle("#")
        assert lines(scope) == [" ### ", "#####", "#####", "#####", " ### "]

    def test_stroke(self) -> None:
        scope = scope_of(5, 5)
        scope.draw_circle("#", draw_style=Stroke())
        assert lines(scope) == [" ### ", "#   #", "#   #", "#   #", " ### "]

    def test_explicit_center_and_radius(self) -> None:
        scope = scope_of(5, 5)
        scope.draw_circle("#", radius=2, center=IntOffset(2, 2))
        assert lines(scope) == [" ### ", "#####", "#####", "#####", " ### "]

    def test_zero_radius_draws_nothing(self) -> None:
        scope = scope_of(3, 3)
        scope.draw_circle("#", radius=0)
        assert lines(scope) == ["   "] * 3

    def test_outside_scope_is_skipped(self) -> None:
        scope = scope_of(3, 3)
        scope.draw_circle("#", radius=1, center=IntOffset(10, 1))
        assert lines(scope) == ["   "] * 3

    def test_partially_visible_is_clipped(self) -> None:
        scope = scope_of(5, 5)
        scope.draw_circle("#", radius=2, center=IntOffset(0, 2))
        assert lines(scope) == ["##   ", "###  ", "###  ", "###  ", "##   "]


class TestDrawText:
    def test_plain(self) -> None:
        scope = scope_of(4, 1)
        scope.draw_text(0, 1, "ab", foreground=Color.RED)
        assert lines(scope) == [" \x1b[38;2;255;0;0mab\x1b[39m "]
        assert scope.surface.get(0, 1).foreground == Color.RED

    def test_wide_glyph_marks_continuation(self) -> None:
        scope = scope_of(3, 1)
        scope.draw_text(0, 0, "中a")
        surface = scope.surface
        assert surface.get(0, 0).code_point == ord("中")
        assert surface.get(0, 1).continuation
        assert surface.get(0, 2).code_point == ord("a")
        assert lines(scope) == ["中a"]

    def test_span_overlays_base_style(self) -> None:
        italic = SpanStyle(color=Color.BLUE, text_style=TextStyle.ITALIC)
        value = AnnotatedString("abc", (SpanRange(italic, 1, 2),))
        scope = scope_of(3, 1)
        scope.draw_text(0, 0, value, foreground=Color.RED)
        surface = scope.surface
        assert surface.get(0, 0).foreground == Color.RED
        assert surface.get(0, 1).foreground == Color.BLUE
        assert surface.get(0, 1).text_style == TextStyle.ITALIC
        assert surface.get(0, 2).foreground == Color.RED

    def test_text_is_not_clipped(self) -> None:
        with pytest.raises(IndexError):
            scope_of(2, 1).draw_text(0, 0, "abc")


def painted(scope: DrawScope) -> set[tuple[int, int]]:
    surface = scope.surface
    return {
        (row, column)
        for row in range(surface.height)
        for column in range(surface.width)
        if surface.get(row, column).code_point is not None
    }


class TestCircleProperties:
    @pytest.mark.parametrize("radius", range(1, 13))
    def test_fill_is_symmetric(self, radius: int) -> None:
        size = radius * 2 + 1
        scope = scope_of(size, size)
        scope.draw_circle("#", radius=radius)
        grid = lines(scope)

        assert grid == grid[::-1]
        assert grid == [line[::-1] for line in grid]
        transposed = ["".join(line[column] for line in grid) for column in range(size)]
        assert grid == transposed
        anti = ["".join(line[size - 1 - column] for line in grid[::-1]) for column in range(size)]
        assert grid == anti

    @pytest.mark.parametrize("radius", range(1, 13))
    def test_fill_spans_diameter(self, radius: int) -> None:
        size = radius * 2 + 1
        scope = scope_of(size, size)
        scope.draw_circle("#", radius=radius)
        grid = lines(scope)
        assert grid[radius] == "#" * size
        assert grid[0].strip() != ""

    @pytest.mark.parametrize(
        "radius, stroke",
        [(1, 2), (1, 3), (2, 4), (2, 5), (3, 7)],
    )
    def test_thick_stroke_covering_radius_becomes_fill(self, radius: int, stroke: int) -> None:
        outer = stroke // 2 + radius
        stroked = scope_of(15, 15)
        stroked.draw_circle("#", radius=radius, center=IntOffset(7, 7), draw_style=Stroke(stroke))
        filled = scope_of(15, 15)
        filled.draw_circle("#", radius=outer, center=IntOffset(7, 7))
        assert lines(stroked) == lines(filled)

    @pytest.mark.parametrize(
        "radius, stroke",
        [(3, 2), (4, 2), (4, 3), (6, 4), (6, 5)],
    )
    def test_thick_stroke_is_a_ring(self, radius: int, stroke: int) -> None:
        outer = stroke // 2 + radius
        center = IntOffset(9, 9)

        ring = scope_of(19, 19)
        ring.draw_circle("#", radius=radius, center=center, draw_style=Stroke(stroke))
        disc = scope_of(19, 19)
        disc.draw_circle("#", radius=outer, center=center)
        thin = scope_of(19, 19)
        thin.draw_circle("#", radius=outer, center=center, draw_style=Stroke())

        assert painted(ring) <= painted(disc)
        assert painted(thin) <= painted(ring)
        assert (center.y, center.x) not in painted(ring)
        grid = lines(ring)
        assert grid == grid[::-1]
        assert grid == [line[::-1] for line in grid]


class TestWideGlyphShapes:
    def test_rect_of_wide_glyphs_keeps_row_width(self) -> None:
        scope = scope_of(3, 1)
        scope.draw_rect("中")
        assert lines(scope) == ["   "]

    def test_text_over_continuation_keeps_row_width(self) -> None:
        scope = scope_of(3, 1)
        scope.draw_text(0, 0, "中")
        scope.draw_text(0, 1, "b")
        assert lines(scope) == [" b "]
        assert text_width(lines(scope)[0]) == 3

    def test_wide_glyph_before_empty_cell(self) -> None:
        scope = scope_of(3, 1)
        scope.draw_rect("中", size=IntSize(1, 1))
        assert lines(scope) == ["中 "]
        assert text_width(lines(scope)[0]) == 3
