"""Tests for the node tree -- measure/place ordering, mutation, and debug text."""

from __future__ import annotations

import pytest

from tessera.term.errors import MeasureContractError, NotMeasuredError, NotPlacedError
from tessera.term.layouts import column, text
from tessera.term.measure import NOT_MEASURED, layout
from tessera.term.nodes import Insert, Move, Node, NodeApplier, Remove, describe
from tessera.term.surface import Surface


def leaf(name: str) -> Node:
    return Node(measure_policy=lambda children: layout(1, 1), name=name)


def names(node: Node) -> list[str]:
    return [child.name for child in node.children]


def parent_of(*child_names: str) -> Node:
    parent = Node.root()
    for index, name in enumerate(child_names):
        parent.insert_child(index, leaf(name))
    return parent


# ---------------------------------------------------------------------------
# Measure / place
# ---------------------------------------------------------------------------


class TestMeasurePlace:
    def test_size_before_measure_raises(self) -> None:
        node = text("hi")
        with pytest.raises(NotMeasuredError):
            node.width
        with pytest.raises(NotMeasuredError):
            node.height

    def test_place_before_measure_raises(self) -> None:
        with pytest.raises(NotMeasuredError, match="Not measured"):
            text("hi").place(0, 0)

    def test_position_before_place_raises(self) -> None:
        node = text("hi")
        node.measure()
        with pytest.raises(NotPlacedError):
            node.x

    def test_draw_before_place_raises(self) -> None:
        node = text("hi")
        node.measure()
        with pytest.raises(NotPlacedError):
            node.draw_to(Surface(2, 1))

    def test_not_measured_sentinel_refuses_placement(self) -> None:
        with pytest.raises(NotMeasuredError):
            NOT_MEASURED.place_children()

    def test_layout_rejects_negative_size(self) -> None:
        with pytest.raises(ValueError):
            layout(-1, 0)

    def test_measure_and_place_sets_geometry(self) -> None:
        first = text("abc")
        second = text("de")
        tree = column(first, second)
        tree.measure_and_place()

        assert (tree.width, tree.height) == (3, 2)
        assert (first.x, first.y) == (0, 0)
        assert (second.x, second.y) == (0, 1)

    def test_measure_twice_in_one_pass_raises(self) -> None:
        child = leaf("child")

        def measure_twice(children: list[Node]):
            child.measure()
            child.measure()
            return layout(1, 1)

        parent = Node(measure_policy=measure_twice)
        parent.insert_child(0, child)
        with pytest.raises(MeasureContractError):
            parent.measure()

    def test_separate_passes_may_measure_again(self) -> None:
        node = text("hi")
        node.measure()
        node.measure()
        assert node.width == 2

    def test_remeasure_clears_placement(self) -> None:
        node = text("hi")
        node.measure_and_place()
        node.measure()
        assert node.is_measured
        assert not node.is_placed


# ---------------------------------------------------------------------------
# Paint
# ---------------------------------------------------------------------------


class TestPaint:
    def test_children_not_measured_this_pass_are_skipped(self) -> None:
        parent = Node(measure_policy=lambda children: layout(3, 1))
        parent.insert_child(0, text("abc"))
        parent.measure_and_place()
        assert parent.paint().render() == "   "

    def test_children_from_an_earlier_pass_are_skipped(self) -> None:
        child = text("abc")
        child.measure_and_place()

        parent = Node(measure_policy=lambda children: layout(3, 1))
        parent.insert_child(0, child)
        parent.measure_and_place()
        assert parent.paint().render() == "   "

    def test_later_siblings_paint_over_earlier(self) -> None:
        root = Node.root()
        root.insert_child(0, text("abc"))
        root.insert_child(1, text("X"))
        root.measure_and_place()
        assert root.paint().render() == "Xbc"

    def test_paint_into_reuses_surface(self) -> None:
        surface = Surface(10, 10)
        node = text("hi")
        node.measure_and_place()
        assert node.paint_into(surface) is surface
        assert (surface.width, surface.height) == (2, 1)
        assert surface.render() == "hi"

    def test_translation_restored_after_draw(self) -> None:
        tree = column(text("a"), text("b"))
        tree.measure_and_place()
        surface = tree.paint()
        assert (surface.translation_x, surface.translation_y) == (0, 0)
        assert surface.render() == "a\nb"


# ---------------------------------------------------------------------------
# Tree mutation
# ---------------------------------------------------------------------------


class TestMutation:
    def test_insert(self) -> None:
        parent = parent_of("a", "c")
        parent.insert_child(1, leaf("b"))
        assert names(parent) == ["a", "b", "c"]

    def test_insert_out_of_range(self) -> None:
        with pytest.raises(IndexError):
            parent_of("a").insert_child(2, leaf("b"))

    def test_remove_range(self) -> None:
        parent = parent_of("a", "b", "c", "d")
        parent.remove_children(1, 2)
        assert names(parent) == ["a", "d"]

    def test_remove_out_of_range(self) -> None:
        with pytest.raises(IndexError):
            parent_of("a", "b").remove_children(1, 2)

    def test_move_forward(self) -> None:
        parent = parent_of("a", "b", "c")
        parent.move_children(0, 3)
        assert names(parent) == ["b", "c", "a"]

    def test_move_backward(self) -> None:
        parent = parent_of("a", "b", "c")
        parent.move_children(2, 0)
        assert names(parent) == ["c", "a", "b"]

    def test_move_block_forward(self) -> None:
        parent = parent_of("a", "b", "c", "d")
        parent.move_children(0, 4, 2)
        assert names(parent) == ["c", "d", "a", "b"]

    def test_move_to_own_position_is_noop(self) -> None:
        parent = parent_of("a", "b", "c", "d")
        parent.move_children(0, 2, 2)
        assert names(parent) == ["a", "b", "c", "d"]

    def test_move_out_of_range(self) -> None:
        with pytest.raises(IndexError):
            parent_of("a", "b").move_children(1, 0, 2)


class TestNodeApplier:
    def test_apply_in_order(self) -> None:
        root = Node.root()
        applier = NodeApplier(root)
        a, b, c = leaf("a"), leaf("b"), leaf("c")

        applied = applier.apply(
            [
                Insert(root, 0, a),
                Insert(root, 1, b),
                Insert(root, 2, c),
                Move(root, 2, 0),
                Remove(root, 1),
            ]
        )
        assert applied == 5
        assert root.children == [c, b]

    def test_helpers_default_to_root(self) -> None:
        root = Node.root()
        applier = NodeApplier(root)
        applier.insert(0, leaf("a"))
        applier.insert(1, leaf("b"))
        applier.move(0, 2)
        assert names(root) == ["b", "a"]
        applier.remove(0)
        assert names(root) == ["a"]
        applier.clear()
        assert root.children == []

    def test_helpers_accept_parent(self) -> None:
        root = Node.root()
        inner = Node.root()
        applier = NodeApplier(root)
        applier.insert(0, inner)
        applier.insert(0, leaf("x"), parent=inner)
        assert names(inner) == ["x"]

    def test_unknown_mutation_raises(self) -> None:
        with pytest.raises(TypeError):
            NodeApplier(Node.root()).apply(["insert"])  # type: ignore[list-item]


# ---------------------------------------------------------------------------
# Debug text
# ---------------------------------------------------------------------------


class TestDescribe:
    def test_unmeasured(self) -> None:
        assert str(text("hi")) == 'Text("hi") DrawBehind'

    def test_measured_only(self) -> None:
        node = text("hi")
        node.measure()
        assert str(node) == 'Text("hi") w=2 h=1 DrawBehind'

    def test_placed_with_children(self) -> None:
        tree = column(text("a"), text("bc"))
        tree.measure_and_place()
        assert str(tree) == (
            "Column() x=0 y=0 w=2 h=2\n"
            '  Text("a") x=0 y=0 w=1 h=1 DrawBehind\n'
            '  Text("bc") x=0 y=1 w=2 h=1 DrawBehind'
        )

    def test_default_debug_uses_name(self) -> None:
        assert str(leaf("Spacer")) == "Spacer()"

    def test_describe_custom_name(self) -> None:
        assert describe(leaf("x"), "Custom") == "Custom"

    def test_root_lists_children(self) -> None:
        root = parent_of("a", "b")
        assert str(root) == "a()\nb()"
