"""Exceptions raised by the layout and rendering pipeline."""

from __future__ import annotations


class TesseraError(Exception):
    """Base class for tessera-term errors."""


class NotMeasuredError(TesseraError, RuntimeError):
    """A node was placed, or its size read, before it was measured."""


class NotPlacedError(TesseraError, RuntimeError):
    """A node was drawn, or its position read, before it was placed."""


class MeasureContractError(TesseraError, RuntimeError):
    """A measure policy measured the same child twice in one pass."""


class RenderFailedError(TesseraError, RuntimeError):
    """A debug render failed; ``output`` holds the best-effort snapshot."""

    def __init__(self, output: str) -> None:
        super().__init__(f"Failed\n\n{output}")
        self.output = output
