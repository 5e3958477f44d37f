# canvas_graph/layout/__init__.py

"""
Layout subpackage for canvas graphs.

Provides:
  - layered (Sugiyama) layout of the visible subgraph
"""

from __future__ import annotations

from .layered import (
    compute_layout,
    node_size,
)

__all__ = [
    "compute_layout",
    "node_size",
]
