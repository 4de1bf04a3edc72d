"""Rich text and per-code-point cell widths."""

from __future__ import annotations

from dataclasses import dataclass, field

import wcwidth as _wcwidth

from tessera.term.color import Color, TextStyle


def code_point_width(code_point: int) -> int:
    """Return how many cells *code_point* occupies: 1 or 2.

    East Asian wide and fullwidth characters (and most emoji) take two
    cells.  Zero-width and control characters still occupy one cell, since
    a cell holds exactly one code point.
    """
    if code_point < 0x1100:
        return 1
    return 2 if _wcwidth.wcwidth(chr(code_point)) == 2 else 1


def text_width(text: str) -> int:
    """Return the number of cells *text* occupies on a single line."""
    if text.isascii():
        return len(text)
    return sum(code_point_width(ord(ch)) for ch in text)


@dataclass(frozen=True)
class SpanStyle:
    """Style overlay for a range of an :class:`AnnotatedString`.

    ``None`` attributes leave the underlying cell untouched.
    """

    color: Color | None = None
    background: Color | None = None
    text_style: TextStyle | None = None


@dataclass(frozen=True)
class SpanRange:
    """A :class:`SpanStyle` applied to ``text[start:end]``."""

    style: SpanStyle
    start: int
    end: int


@dataclass(frozen=True)
class AnnotatedString:
    """A string with style spans layered on top of the base style."""

    text: str
    spans: tuple[SpanRange, ...] = field(default=())

    def __post_init__(self) -> None:
        for span in self.spans:
            if not 0 <= span.start <= span.end <= len(self.text):
                raise ValueError(
                    f"Span [{span.start}, {span.end}) outside text of length {len(self.text)}"
                )

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def with_span(self, style: SpanStyle, start: int, end: int) -> AnnotatedString:
        """Return a copy with one more span."""
        return AnnotatedString(self.text, self.spans + (SpanRange(style, start, end),))

    def span_styles(self, start: int, end: int) -> list[SpanStyle]:
        """Return the styles of every span intersecting ``[start, end)``, in order."""
        return [
            span.style
            for span in self.spans
            if span.start < end and start < span.end
        ]

    def split_lines(self) -> list[AnnotatedString]:
        """Split on ``"\\n"``, keeping each span's part within each line."""
        lines: list[AnnotatedString] = []
        offset = 0
        for line in self.text.split("\n"):
            line_end = offset + len(line)
            spans = tuple(
                SpanRange(span.style, max(span.start, offset) - offset, min(span.end, line_end) - offset)
                for span in self.spans
                if span.start < line_end and offset < span.end
            )
            lines.append(AnnotatedString(line, spans))
            offset = line_end + 1
        return lines
