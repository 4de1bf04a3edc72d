"""Retained node tree: measure, place, paint, and static collection.

Every :class:`Node` holds four policies:

* a measure policy, which sizes the node from its children and returns the
  callback that places them;
* an optional draw policy, which paints the node's own cells;
* an optional static paint policy, which contributes surfaces to the
  append-only static (scroll-back) output;
* a debug policy, which describes the node as text.

The pipeline for one frame is ``measure`` (sizes flow bottom-up),
``place`` (positions flow top-down, the root at ``(0, 0)``), then ``paint``
into a surface.  Doing the steps out of order raises instead of producing
garbage.

The tree is owned by an external collaborator which edits it through
:meth:`Node.insert_child`, :meth:`Node.remove_children`,
:meth:`Node.move_children`, or a :class:`NodeApplier`.  The tree must not
change while a frame is being rendered.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Callable, Iterable, Union

from tessera.term.draw import DrawScope
from tessera.term.errors import MeasureContractError, NotMeasuredError, NotPlacedError
from tessera.term.measure import (
    NOT_MEASURED,
    DebugPolicy,
    DrawPolicy,
    MeasurePolicy,
    MeasureResult,
    StaticPaintPolicy,
    layout,
)
from tessera.term.surface import Surface

__all__ = [
    "Insert",
    "Move",
    "Mutation",
    "Node",
    "NodeApplier",
    "Remove",
    "StaticSurfaces",
    "describe",
    "stack_measure_policy",
    "paint_children_statics",
]

logger = logging.getLogger(__name__)

# Identity of the measure pass in progress on this thread/context, if any.
_measure_pass: ContextVar[object | None] = ContextVar("tessera_measure_pass", default=None)


def _default_debug(node: Node) -> str:
    return describe(node, f"{node.name}()")


class Node:
    """A retained tree element."""

    def __init__(
        self,
        measure_policy: MeasurePolicy,
        draw_policy: DrawPolicy | None = None,
        static_paint_policy: StaticPaintPolicy | None = None,
        debug_policy: DebugPolicy | None = None,
        name: str = "Node",
    ) -> None:
        self.name = name
        self.measure_policy = measure_policy
        self.draw_policy = draw_policy
        self.static_paint_policy = static_paint_policy
        self.debug_policy: DebugPolicy = debug_policy or _default_debug
        self.children: list[Node] = []

        self._result: MeasureResult = NOT_MEASURED
        self._pass: object | None = None
        self._placed = False
        self._x = 0
        self._y = 0

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def is_measured(self) -> bool:
        return self._result is not NOT_MEASURED

    @property
    def is_placed(self) -> bool:
        return self._placed

    @property
    def width(self) -> int:
        if self._result is NOT_MEASURED:
            raise NotMeasuredError(f"{self._label()} has not been measured")
        return self._result.width

    @property
    def height(self) -> int:
        if self._result is NOT_MEASURED:
            raise NotMeasuredError(f"{self._label()} has not been measured")
        return self._result.height

    @property
    def x(self) -> int:
        if not self._placed:
            raise NotPlacedError(f"{self._label()} has not been placed")
        return self._x

    @property
    def y(self) -> int:
        if not self._placed:
            raise NotPlacedError(f"{self._label()} has not been placed")
        return self._y

    def _label(self) -> str:
        return f"{self.name}()"

    # ------------------------------------------------------------------
    # Measure / place
    # ------------------------------------------------------------------

    def measure(self) -> Node:
        """Measure this node with its measure policy and return it for placement.

        The outermost call starts a measure pass; a node may be measured
        only once per pass.
        """
        current = _measure_pass.get()
        if current is None:
            current = object()
            token = _measure_pass.set(current)
            try:
                return self._measure_in_pass(current)
            finally:
                _measure_pass.reset(token)
        return self._measure_in_pass(current)

    def _measure_in_pass(self, current: object) -> Node:
        if self._pass is current:
            raise MeasureContractError(f"{self._label()} was measured twice in one pass")
        self._pass = current
        self._placed = False
        self._result = NOT_MEASURED
        self._result = self.measure_policy(self.children)
        return self

    def place(self, x: int, y: int) -> None:
        """Position this node relative to its parent and place its children."""
        result = self._result
        if result is NOT_MEASURED:
            raise NotMeasuredError("Not measured")
        self._x = x
        self._y = y
        self._placed = True
        result.place_children()

    def measure_and_place(self) -> None:
        """Measure this node as a root and place it at the origin."""
        self.measure().place(0, 0)

    # ------------------------------------------------------------------
    # Paint
    # ------------------------------------------------------------------

    def draw_to(self, surface: Surface) -> None:
        """Draw this node and its subtree onto *surface*.

        Children are drawn in list order, so later siblings paint over
        earlier ones.  Children the measure policy did not measure in this
        pass, and children with an empty size, are skipped.
        """
        if not self._placed:
            raise NotPlacedError(f"{self._label()} must be placed before it is drawn")

        x, y = self._x, self._y
        surface.translation_x += x
        surface.translation_y += y

        draw_policy = self.draw_policy
        if draw_policy is not None:
            draw_policy(DrawScope(surface, self._result.width, self._result.height))

        current = self._pass
        for child in self.children:
            if child._pass is not current:
                continue
            result = child._result
            if result.width == 0 or result.height == 0:
                continue
            child.draw_to(surface)

        surface.translation_x -= x
        surface.translation_y -= y

    def paint_into(self, surface: Surface) -> Surface:
        """Clear *surface*, size it to this node, and draw into it."""
        surface.resize(self.width, self.height)
        self.draw_to(surface)
        return surface

    def paint(self) -> Surface:
        """Draw this node into a new surface of its measured size."""
        return self.paint_into(Surface())

    def paint_statics(self, statics: list[Surface]) -> None:
        """Append this subtree's static surfaces to *statics*."""
        policy = self.static_paint_policy
        if policy is not None:
            policy(self, statics)

    # ------------------------------------------------------------------
    # Tree mutation
    # ------------------------------------------------------------------

    def insert_child(self, index: int, node: Node) -> None:
        if not 0 <= index <= len(self.children):
            raise IndexError(f"Insert index {index} out of range for {len(self.children)} children")
        self.children.insert(index, node)

    def remove_children(self, index: int, count: int = 1) -> None:
        size = len(self.children)
        if index < 0 or count < 0 or index + count > size:
            raise IndexError(f"Cannot remove {count} children at {index} of {size}")
        del self.children[index : index + count]

    def move_children(self, from_index: int, to_index: int, count: int = 1) -> None:
        """Move *count* children starting at *from_index* to *to_index*.

        *to_index* is a position in the list before the move.
        """
        size = len(self.children)
        if (
            from_index < 0
            or count < 0
            or from_index + count > size
            or not 0 <= to_index <= size
        ):
            raise IndexError(
                f"Cannot move {count} children from {from_index} to {to_index} of {size}"
            )
        destination = to_index if from_index > to_index else to_index - count
        moved = self.children[from_index : from_index + count]
        del self.children[from_index : from_index + count]
        self.children[destination:destination] = moved

    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self.debug_policy(self)

    def __repr__(self) -> str:
        return f"<{self._label()} children={len(self.children)}>"

    @classmethod
    def root(cls) -> Node:
        """Create a root node that stacks every child at the origin."""
        return cls(
            measure_policy=stack_measure_policy,
            draw_policy=None,
            static_paint_policy=paint_children_statics,
            debug_policy=lambda node: "\n".join(str(child) for child in node.children),
            name="Root",
        )


def stack_measure_policy(children: list[Node]) -> MeasureResult:
    width = 0
    height = 0
    placeables: list[Node] = []
    for child in children:
        placeable = child.measure()
        width = max(width, placeable.width)
        height = max(height, placeable.height)
        placeables.append(placeable)

    def place_children() -> None:
        for placeable in placeables:
            placeable.place(0, 0)

    return layout(width, height, place_children)


class StaticSurfaces(list[Surface]):
    """The static surfaces collected for one frame.

    A node that tracks what it has already emitted registers the update
    with :meth:`on_commit` instead of applying it while painting.  The
    renderer calls :meth:`commit` once the whole frame has been assembled,
    so a frame that fails part-way emits nothing and its static content is
    offered again on the next frame.
    """

    def __init__(self) -> None:
        super().__init__()
        self._on_commit: list[Callable[[], None]] = []

    def on_commit(self, callback: Callable[[], None]) -> None:
        self._on_commit.append(callback)

    def commit(self) -> None:
        """Run the registered callbacks, in registration order."""
        callbacks = self._on_commit
        self._on_commit = []
        for callback in callbacks:
            callback()

    def clear(self) -> None:
        """Drop the collected surfaces and any uncommitted callbacks."""
        super().clear()
        self._on_commit.clear()


def paint_children_statics(node: Node, statics: list[Surface]) -> None:
    """Static paint policy of containers: each child's statics, in order."""
    for child in node.children:
        child.paint_statics(statics)


def describe(node: Node, name: str) -> str:
    """Standard debug text: a header with geometry, then indented children.

    ``Name x=0 y=0 w=5 h=1 DrawBehind`` -- geometry is omitted when the
    node has not been measured and placed.
    """
    header = name
    if node.is_placed:
        header += f" x={node.x} y={node.y} w={node.width} h={node.height}"
    elif node.is_measured:
        header += f" w={node.width} h={node.height}"
    if node.draw_policy is not None:
        header += " DrawBehind"

    lines = [header]
    for child in node.children:
        for line in str(child).split("\n"):
            lines.append(f"  {line}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Mutation records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Insert:
    parent: Node
    index: int
    node: Node


@dataclass(frozen=True, eq=False)
class Remove:
    parent: Node
    index: int
    count: int = 1


@dataclass(frozen=True, eq=False)
class Move:
    parent: Node
    from_index: int
    to_index: int
    count: int = 1


Mutation = Union[Insert, Remove, Move]


class NodeApplier:
    """Applies tree mutations issued by the composition layer."""

    def __init__(self, root: Node) -> None:
        self.root = root

    def apply(self, mutations: Iterable[Mutation]) -> int:
        """Apply *mutations* in order and return how many were applied."""
        applied = 0
        for mutation in mutations:
            if isinstance(mutation, Insert):
                mutation.parent.insert_child(mutation.index, mutation.node)
            elif isinstance(mutation, Remove):
                mutation.parent.remove_children(mutation.index, mutation.count)
            elif isinstance(mutation, Move):
                mutation.parent.move_children(mutation.from_index, mutation.to_index, mutation.count)
            else:
                raise TypeError(f"Unknown mutation: {mutation!r}")
            applied += 1
        logger.debug("Applied %d tree mutations", applied)
        return applied

    def insert(self, index: int, node: Node, parent: Node | None = None) -> None:
        self.apply([Insert(parent or self.root, index, node)])

    def remove(self, index: int, count: int = 1, parent: Node | None = None) -> None:
        self.apply([Remove(parent or self.root, index, count)])

    def move(self, from_index: int, to_index: int, count: int = 1, parent: Node | None = None) -> None:
        self.apply([Move(parent or self.root, from_index, to_index, count)])

    def clear(self) -> None:
        self.root.children.clear()
