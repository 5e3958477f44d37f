"""
Canvas graph package.

Collapsible node/link graph view: graph store, collapse/expand visibility,
layered layout, hit testing, and a hookable 2D renderer.
"""

# ---------------------------------------------------------------------------
# Widget
# ---------------------------------------------------------------------------
from .widget import CanvasGraph

# ---------------------------------------------------------------------------
# Graph data and construction
# ---------------------------------------------------------------------------
from .graph_data import (
    DisplayState,
    GraphData,
    Link,
    Node,
)
from .builder import (
    BuiltLink,
    BuiltNode,
    GraphBuilder,
)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from .presets import (
    CanvasGraphConfig,
    DEFAULT_COLLAPSE_DEPTH,
    DEFAULT_CONFIG,
    GraphStyle,
    LayoutSettings,
    load_config,
)
from .exceptions import CanvasGraphError, ConfigurationError

# ---------------------------------------------------------------------------
# Visibility, layout, hit testing
# ---------------------------------------------------------------------------
from .visibility import VisibilityEngine, VisibleSubgraph
from .layout.layered import compute_layout, node_size
from .graph_state import GraphLayout, PositionedNode, RoutedLink
from .hit_test import find_nearest_link_at, find_node_at

# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
from .render2d import GraphRenderer
from .surface import DrawingSurface, MatplotlibSurface
from .events import (
    ClearOverride,
    EventChannel,
    LinkPostDraw,
    LinkPreDraw,
    NodePostDraw,
    NodePreDraw,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
__all__ = [
    # Widget
    "CanvasGraph",

    # Data
    "DisplayState",
    "GraphData",
    "Link",
    "Node",
    "BuiltLink",
    "BuiltNode",
    "GraphBuilder",

    # Config
    "CanvasGraphConfig",
    "DEFAULT_COLLAPSE_DEPTH",
    "DEFAULT_CONFIG",
    "GraphStyle",
    "LayoutSettings",
    "load_config",
    "CanvasGraphError",
    "ConfigurationError",

    # Core
    "VisibilityEngine",
    "VisibleSubgraph",
    "compute_layout",
    "node_size",
    "GraphLayout",
    "PositionedNode",
    "RoutedLink",
    "find_nearest_link_at",
    "find_node_at",

    # Rendering
    "GraphRenderer",
    "DrawingSurface",
    "MatplotlibSurface",
    "ClearOverride",
    "EventChannel",
    "LinkPostDraw",
    "LinkPreDraw",
    "NodePostDraw",
    "NodePreDraw",
]
