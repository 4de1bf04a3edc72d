"""The measure/place protocol shared by every node.

A measure policy receives a node's children, measures the ones it needs
(each at most once), and returns a :class:`MeasureResult` built with
:func:`layout`.  The result carries the node's size and a deferred
placement callback that positions the children once the parent itself has
been placed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from tessera.term.errors import NotMeasuredError

if TYPE_CHECKING:
    from tessera.term.draw import DrawScope
    from tessera.term.nodes import Node
    from tessera.term.surface import Surface

__all__ = [
    "DebugPolicy",
    "DrawPolicy",
    "MeasurePolicy",
    "MeasureResult",
    "NOT_MEASURED",
    "StaticPaintPolicy",
    "layout",
]


class MeasureResult:
    """Size of a measured node plus the callback that places its children."""

    __slots__ = ("width", "height", "_place_children")

    def __init__(
        self,
        width: int,
        height: int,
        place_children: Callable[[], None] | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self._place_children = place_children

    def place_children(self) -> None:
        if self._place_children is not None:
            self._place_children()

    def __repr__(self) -> str:
        return f"MeasureResult(width={self.width}, height={self.height})"


class _NotMeasured(MeasureResult):
    __slots__ = ()

    def __init__(self) -> None:
        super().__init__(0, 0)

    def place_children(self) -> None:
        raise NotMeasuredError("Not measured")

    def __repr__(self) -> str:
        return "NOT_MEASURED"


NOT_MEASURED: MeasureResult = _NotMeasured()


def layout(
    width: int,
    height: int,
    place_children: Callable[[], None] | None = None,
) -> MeasureResult:
    """Build the result of a measure policy."""
    if width < 0 or height < 0:
        raise ValueError(f"Invalid layout size: {width} x {height}")
    return MeasureResult(width, height, place_children)


# Policies are plain callables stored on each node.
MeasurePolicy = Callable[["list[Node]"], MeasureResult]
DrawPolicy = Callable[["DrawScope"], None]
StaticPaintPolicy = Callable[["Node", "list[Surface]"], None]
DebugPolicy = Callable[["Node"], str]
