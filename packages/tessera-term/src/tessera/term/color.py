"""Colors, text styles, and SGR (Select Graphic Rendition) encoding.

Cells carry RGB colors and a ``TextStyle`` bit set; the ``AnsiLevel`` chosen
at configuration time decides how those are spelled on the wire: 24-bit
truecolor, the xterm 256-color palette, the 16 basic colors, or no color at
all.  Text styles are emitted at every level.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import ClassVar

# (foreground, background, text style) -- ``None`` means "not set"
StyleKey = tuple["Color | None", "Color | None", "TextStyle | None"]

_SGR_RESET = "\x1b[0m"


class AnsiLevel(enum.Enum):
    """How much color the target terminal understands."""

    NONE = "none"
    ANSI16 = "ansi16"
    ANSI256 = "ansi256"
    TRUECOLOR = "truecolor"

    @classmethod
    def parse(cls, value: str) -> AnsiLevel:
        """Parse a level name case-insensitively (``"truecolor"``, ``"ANSI16"``...)."""
        normalized = value.strip().lower()
        for level in cls:
            if level.value == normalized:
                return level
        raise ValueError(f"Unknown ANSI level: {value!r}")


class TextStyle(enum.IntFlag):
    """Text attributes of a cell.

    ``TextStyle.NONE`` is a real value (it clears attributes when applied);
    an *unspecified* style is ``None``.
    """

    NONE = 0
    BOLD = 1
    DIM = 2
    ITALIC = 4
    UNDERLINE = 8
    INVERT = 16
    STRIKETHROUGH = 32


_STYLE_CODES: tuple[tuple[TextStyle, str], ...] = (
    (TextStyle.BOLD, "1"),
    (TextStyle.DIM, "2"),
    (TextStyle.ITALIC, "3"),
    (TextStyle.UNDERLINE, "4"),
    (TextStyle.INVERT, "7"),
    (TextStyle.STRIKETHROUGH, "9"),
)


@dataclass(frozen=True)
class Color:
    """An opaque 24-bit RGB color."""

    red: int
    green: int
    blue: int

    BLACK: ClassVar[Color]
    RED: ClassVar[Color]
    GREEN: ClassVar[Color]
    YELLOW: ClassVar[Color]
    BLUE: ClassVar[Color]
    MAGENTA: ClassVar[Color]
    CYAN: ClassVar[Color]
    WHITE: ClassVar[Color]

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """Parse ``"#rrggbb"`` (the ``#`` is optional)."""
        digits = value.lstrip("#")
        if len(digits) != 6:
            raise ValueError(f"Expected 6 hex digits: {value!r}")
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    def __str__(self) -> str:
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


Color.BLACK = Color(0, 0, 0)
Color.RED = Color(255, 0, 0)
Color.GREEN = Color(0, 255, 0)
Color.YELLOW = Color(255, 255, 0)
Color.BLUE = Color(0, 0, 255)
Color.MAGENTA = Color(255, 0, 255)
Color.CYAN = Color(0, 255, 255)
Color.WHITE = Color(255, 255, 255)


# ---------------------------------------------------------------------------
# Palette reduction
# ---------------------------------------------------------------------------


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def ansi256_index(color: Color) -> int:
    """Map *color* onto the xterm 256-color palette.

    Grays use the 24-step ramp (232-255) or the cube's black/white ends;
    everything else uses the 6x6x6 cube (16-231).
    """
    r, g, b = color.red, color.green, color.blue
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        return _round_half_up((r - 8) / 247 * 24) + 232
    return (
        16
        + 36 * _round_half_up(r / 255 * 5)
        + 6 * _round_half_up(g / 255 * 5)
        + _round_half_up(b / 255 * 5)
    )


def ansi16_code(color: Color) -> int:
    """Map *color* onto a 16-color foreground code (30-37 or 90-97).

    Add 10 for the matching background code.
    """
    r, g, b = color.red, color.green, color.blue
    brightness = _round_half_up(max(r, g, b) / 255 * 100 / 50)
    if brightness == 0:
        return 30
    code = 30 + (
        (_round_half_up(b / 255) << 2)
        | (_round_half_up(g / 255) << 1)
        | _round_half_up(r / 255)
    )
    if brightness == 2:
        code += 60
    return code


def _color_params(color: Color, level: AnsiLevel, background: bool) -> list[str]:
    if level is AnsiLevel.TRUECOLOR:
        lead = "48" if background else "38"
        return [lead, "2", str(color.red), str(color.green), str(color.blue)]
    if level is AnsiLevel.ANSI256:
        lead = "48" if background else "38"
        return [lead, "5", str(ansi256_index(color))]
    if level is AnsiLevel.ANSI16:
        code = ansi16_code(color)
        return [str(code + 10 if background else code)]
    return []


# ---------------------------------------------------------------------------
# SGR transitions
# ---------------------------------------------------------------------------

BLANK_STYLE: StyleKey = (None, None, None)


def effective_style(
    foreground: Color | None,
    background: Color | None,
    text_style: TextStyle | None,
    level: AnsiLevel,
) -> StyleKey:
    """Normalize cell attributes to what *level* can actually display."""
    if level is AnsiLevel.NONE:
        foreground = None
        background = None
    if not text_style:
        text_style = None
    return (foreground, background, text_style)


def sgr_transition(previous: StyleKey, current: StyleKey, level: AnsiLevel) -> str:
    """Return the shortest SGR sequence turning *previous* into *current*.

    Both keys must already be normalized with :func:`effective_style`.
    Returns ``""`` when nothing needs to change.
    """
    if previous == current:
        return ""

    prev_fg, prev_bg, prev_style = previous
    fg, bg, style = current
    prev_flags = prev_style or TextStyle.NONE
    flags = style or TextStyle.NONE

    params: list[str] = []
    if prev_flags & ~flags:
        # No portable way to drop a single attribute (22 clears bold *and*
        # dim), so start over from a clean slate.
        params.append("0")
        prev_fg = prev_bg = None
        prev_flags = TextStyle.NONE

    for flag, code in _STYLE_CODES:
        if flag in flags and flag not in prev_flags:
            params.append(code)

    if fg != prev_fg:
        if fg is None:
            params.append("39")
        else:
            params.extend(_color_params(fg, level, background=False))
    if bg != prev_bg:
        if bg is None:
            params.append("49")
        else:
            params.extend(_color_params(bg, level, background=True))

    if not params:
        return ""
    return f"\x1b[{';'.join(params)}m"


def sgr_reset(current: StyleKey) -> str:
    """Return ``ESC[0m`` if *current* has any attribute set, else ``""``."""
    if current == BLANK_STYLE:
        return ""
    return _SGR_RESET
