"""Exceptions raised by graphgg."""

from __future__ import annotations


class GraphggError(RuntimeError):
    """Base exception for graphgg errors."""


class GraphError(GraphggError):
    """Raised when a graph cannot be built or a verb cannot be applied."""


class LayoutError(GraphggError):
    """Raised when a layout is unknown or cannot be computed."""


class PlotError(GraphggError):
    """Raised when a plot cannot be built or saved."""


__all__ = ["GraphggError", "GraphError", "LayoutError", "PlotError"]
