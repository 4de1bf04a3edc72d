"""Styled text grid with per-cell compositing.

A :class:`Surface` is a ``width x height`` grid of :class:`Cell` objects.
Each cell attribute is either set or unspecified (``None``), and updates only
overwrite the attributes they specify, so draw passes layer on top of each
other: a background fill, then a border, then text.

Surfaces are meant to be reused across frames.  ``reset`` and ``resize``
keep the backing cells and clear them in place; whatever was drawn before
either call is gone afterwards.
"""

from __future__ import annotations

from tessera.term.color import (
    BLANK_STYLE,
    AnsiLevel,
    Color,
    StyleKey,
    TextStyle,
    effective_style,
    sgr_reset,
    sgr_transition,
)
from tessera.term.richtext import code_point_width


class Cell:
    """One terminal character slot."""

    __slots__ = ("code_point", "foreground", "background", "text_style", "continuation")

    def __init__(self) -> None:
        self.code_point: int | None = None
        self.foreground: Color | None = None
        self.background: Color | None = None
        self.text_style: TextStyle | None = None
        # Trailing half of a two-column glyph drawn in the cell to the left.
        self.continuation: bool = False

    def update(
        self,
        code_point: int | None = None,
        foreground: Color | None = None,
        background: Color | None = None,
        text_style: TextStyle | None = None,
    ) -> None:
        """Overwrite the attributes that are not ``None``."""
        if code_point is not None:
            self.code_point = code_point
            self.continuation = False
        if foreground is not None:
            self.foreground = foreground
        if background is not None:
            self.background = background
        if text_style is not None:
            self.text_style = text_style

    def clear(self) -> None:
        self.code_point = None
        self.foreground = None
        self.background = None
        self.text_style = None
        self.continuation = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return (
            self.code_point == other.code_point
            and self.foreground == other.foreground
            and self.background == other.background
            and self.text_style == other.text_style
            and self.continuation == other.continuation
        )

    def __repr__(self) -> str:
        return (
            f"Cell(code_point={self.code_point!r}, foreground={self.foreground!r}, "
            f"background={self.background!r}, text_style={self.text_style!r}, "
            f"continuation={self.continuation!r})"
        )


def _is_free(cell: Cell) -> bool:
    # Can be covered by the right half of a wide glyph.
    return cell.continuation or cell.code_point is None


class Surface:
    """A mutable ``width x height`` grid of cells, addressed as ``[row, column]``."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = 0
        self.height = 0
        self.translation_x = 0
        self.translation_y = 0
        self._cells: list[Cell] = []
        self.resize(width, height)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def resize(self, width: int, height: int) -> None:
        """Change the dimensions.  Every visible cell ends up unspecified."""
        if width < 0 or height < 0:
            raise ValueError(f"Invalid surface size: {width} x {height}")
        needed = width * height
        cells = self._cells
        if len(cells) < needed:
            cells.extend(Cell() for _ in range(needed - len(cells)))
        self.width = width
        self.height = height
        self.reset()

    def reset(self) -> None:
        """Clear every cell and the translation without reallocating."""
        cells = self._cells
        for i in range(self.width * self.height):
            cells[i].clear()
        self.translation_x = 0
        self.translation_y = 0

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def get(self, row: int, column: int) -> Cell:
        """Return the cell at (*row*, *column*) relative to the translation."""
        y = row + self.translation_y
        x = column + self.translation_x
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(
                f"Cell ({y}, {x}) outside surface of size {self.width} x {self.height}"
            )
        return self._cells[y * self.width + x]

    def __getitem__(self, position: tuple[int, int]) -> Cell:
        row, column = position
        return self.get(row, column)

    def update_cell(
        self,
        row: int,
        column: int,
        code_point: int | None = None,
        foreground: Color | None = None,
        background: Color | None = None,
        text_style: TextStyle | None = None,
    ) -> None:
        self.get(row, column).update(code_point, foreground, background, text_style)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def append_row_to(
        self,
        out: list[str],
        row: int,
        ansi_level: AnsiLevel = AnsiLevel.TRUECOLOR,
    ) -> None:
        """Append *row* to *out* as text with SGR sequences.

        Runs of cells with the same style share one escape sequence.  The
        row always spans exactly ``width`` columns: a two-column glyph
        consumes the cell to its right, and is written as a space when it
        sits in the last column or that cell holds a glyph of its own.
        """
        if not 0 <= row < self.height:
            raise IndexError(f"Row {row} outside surface of height {self.height}")

        cells = self._cells
        i = row * self.width
        end = i + self.width
        current: StyleKey = BLANK_STYLE
        while i < end:
            cell = cells[i]
            style = effective_style(cell.foreground, cell.background, cell.text_style, ansi_level)
            if style != current:
                transition = sgr_transition(current, style, ansi_level)
                if transition:
                    out.append(transition)
                current = style

            code_point = cell.code_point
            if code_point is None or cell.continuation:
                out.append(" ")
                i += 1
            elif code_point_width(code_point) == 2:
                if i + 1 < end and _is_free(cells[i + 1]):
                    out.append(chr(code_point))
                    i += 2
                else:
                    out.append(" ")
                    i += 1
            else:
                out.append(chr(code_point))
                i += 1

        out.append(sgr_reset(current))

    def render(self, ansi_level: AnsiLevel = AnsiLevel.TRUECOLOR) -> str:
        """Serialize every row, joined with ``"\\n"``."""
        out: list[str] = []
        for row in range(self.height):
            if row > 0:
                out.append("\n")
            self.append_row_to(out, row, ansi_level)
        return "".join(out)

    def __repr__(self) -> str:
        return f"Surface(width={self.width}, height={self.height})"
