"""tessera-term: retained-tree terminal rendering with frame diffing."""

# ANSI sequences
from tessera.term.ansi import (
    BEGIN_SYNCHRONIZED_UPDATE,
    CLEAR_ALL_AFTER_CURSOR,
    CLEAR_LINE_AFTER_CURSOR,
    END_SYNCHRONIZED_UPDATE,
    MOVE_CURSOR_TO_FIRST_COLUMN,
    cursor_up,
)

# Colors and text styles
from tessera.term.color import AnsiLevel, Color, TextStyle

# Configuration and logging
from tessera.term.config import RenderConfig, detect_ansi_level
from tessera.term.log import configure_logging, shutdown_logging

# Drawing
from tessera.term.draw import FILL, DrawScope, DrawStyle, Fill, Stroke

# Errors
from tessera.term.errors import (
    MeasureContractError,
    NotMeasuredError,
    NotPlacedError,
    RenderFailedError,
    TesseraError,
)

# Geometry
from tessera.term.geometry import IntOffset, IntSize

# Layout protocol
from tessera.term.measure import (
    NOT_MEASURED,
    DebugPolicy,
    DrawPolicy,
    MeasurePolicy,
    MeasureResult,
    StaticPaintPolicy,
    layout,
)

# Concrete nodes
from tessera.term.layouts import (
    StaticNode,
    TextNode,
    box,
    canvas,
    column,
    row,
    static,
    text,
)

# Node tree
from tessera.term.nodes import (
    Insert,
    Move,
    Mutation,
    Node,
    NodeApplier,
    Remove,
    StaticSurfaces,
    describe,
    paint_children_statics,
    stack_measure_policy,
)

# Renderers
from tessera.term.rendering import AnsiRendering, DebugRendering, Rendering, format_duration

# Session
from tessera.term.session import Session, render_once

# Surface
from tessera.term.surface import Cell, Surface

# Terminal
from tessera.term.terminal import ProcessTerminal, Terminal

# Rich text
from tessera.term.richtext import AnnotatedString, SpanRange, SpanStyle, code_point_width, text_width

__all__ = [
    # ANSI
    "BEGIN_SYNCHRONIZED_UPDATE",
    "CLEAR_ALL_AFTER_CURSOR",
    "CLEAR_LINE_AFTER_CURSOR",
    "END_SYNCHRONIZED_UPDATE",
    "MOVE_CURSOR_TO_FIRST_COLUMN",
    "cursor_up",
    # Color
    "AnsiLevel",
    "Color",
    "TextStyle",
    # Config / logging
    "RenderConfig",
    "configure_logging",
    "detect_ansi_level",
    "shutdown_logging",
    # Drawing
    "DrawScope",
    "DrawStyle",
    "FILL",
    "Fill",
    "Stroke",
    # Errors
    "MeasureContractError",
    "NotMeasuredError",
    "NotPlacedError",
    "RenderFailedError",
    "TesseraError",
    # Geometry
    "IntOffset",
    "IntSize",
    # Layout protocol
    "DebugPolicy",
    "DrawPolicy",
    "MeasurePolicy",
    "MeasureResult",
    "NOT_MEASURED",
    "StaticPaintPolicy",
    "layout",
    # Concrete nodes
    "StaticNode",
    "TextNode",
    "box",
    "canvas",
    "column",
    "row",
    "static",
    "text",
    # Node tree
    "Insert",
    "Move",
    "Mutation",
    "Node",
    "NodeApplier",
    "Remove",
    "StaticSurfaces",
    "describe",
    "paint_children_statics",
    "stack_measure_policy",
    # Renderers
    "AnsiRendering",
    "DebugRendering",
    "Rendering",
    "format_duration",
    # Session
    "Session",
    "render_once",
    # Surface
    "Cell",
    "Surface",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    # Rich text
    "AnnotatedString",
    "SpanRange",
    "SpanStyle",
    "code_point_width",
    "text_width",
]
