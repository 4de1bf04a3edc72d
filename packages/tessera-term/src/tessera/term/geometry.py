"""Integer offsets and sizes in terminal cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class IntOffset:
    """A position in cells, relative to some local origin."""

    x: int
    y: int

    ZERO: ClassVar[IntOffset]

    def __add__(self, other: IntOffset) -> IntOffset:
        return IntOffset(self.x + other.x, self.y + other.y)

    def __sub__(self, other: IntOffset) -> IntOffset:
        return IntOffset(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


IntOffset.ZERO = IntOffset(0, 0)


@dataclass(frozen=True)
class IntSize:
    """A width and height in cells."""

    width: int
    height: int

    ZERO: ClassVar[IntSize]

    @property
    def min_dimension(self) -> int:
        """The lesser of ``width`` and ``height``."""
        return min(self.width, self.height)

    @property
    def max_dimension(self) -> int:
        """The greater of ``width`` and ``height``."""
        return max(self.width, self.height)

    @property
    def center(self) -> IntOffset:
        """The geometric center, rounded towards negative infinity."""
        return IntOffset(self.width // 2, self.height // 2)

    def __str__(self) -> str:
        return f"{self.width} x {self.height}"


IntSize.ZERO = IntSize(0, 0)
