"""
Error types raised by the canvas graph package.

Only configuration problems are surfaced as exceptions. Bad graph data
(dangling links, empty graphs) is recovered from locally and never raised.
"""

from __future__ import annotations


class CanvasGraphError(Exception):
    """Base class for every error raised by canvas_graph."""


class ConfigurationError(CanvasGraphError, ValueError):
    """Invalid settings rejected at the boundary, before any layout runs."""
