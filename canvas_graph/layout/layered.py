"""
Layered (Sugiyama) layout adapter.

Placement itself is delegated to grandalf's SugiyamaLayout. This module only:
  - sizes every visible node box from its label
  - feeds each visible node and link to grandalf exactly once
  - lays out each connected component and packs components side by side
  - maps grandalf's rank-down coordinates onto the requested flow direction
  - converts the result back into PositionedNode / RoutedLink objects that
    keep a reference to the originating Node / Link

Exports:
    - compute_layout
    - node_size
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from grandalf.graphs import Edge, Graph, Vertex
from grandalf.layouts import SugiyamaLayout

from ..graph_data import Link, Node
from ..graph_state import GraphLayout, Point, PositionedNode, RoutedLink
from ..presets import LayoutSettings
from ..visibility import VisibleSubgraph

logger = logging.getLogger(__name__)


# ============================================================================ #
# grandalf views
# ============================================================================ #

class _VertexView:
    """Box size read by grandalf; xy (box centre) is written back by it."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        self.xy: Point = (0.0, 0.0)


class _EdgeView:
    """Receives the routed polyline from SugiyamaLayout.draw_edges."""

    def __init__(self) -> None:
        self.points: List[Point] = []

    def setpath(self, pts) -> None:
        self.points = [(float(x), float(y)) for x, y in pts]


def _keep_centres(e, pts) -> None:
    # Leave endpoints on the box centres; links are drawn centre to centre.
    return None


# ============================================================================ #
# Helpers
# ============================================================================ #

def node_size(node: Node, settings: LayoutSettings) -> Tuple[float, float]:
    """Box size (width, height) for a node, derived from its label length."""
    width = settings.node_base_width + settings.node_char_width * len(node.display_text or "")
    return float(width), float(settings.node_height)


def _to_screen(gxy: Point, settings: LayoutSettings) -> Point:
    """Map grandalf coordinates (ranks grow along +y) to the flow direction."""
    gx, gy = gxy
    if settings.is_horizontal:
        x, y = gy, gx
    else:
        x, y = gx, gy
    if settings.is_reversed:
        if settings.is_horizontal:
            x = -x
        else:
            y = -y
    return float(x), float(y)


def _layout_component(
    core,
    settings: LayoutSettings,
) -> None:
    """Run grandalf on one connected component, writing into the views."""
    vertices = list(core.sV)
    if len(vertices) == 1:
        vertices[0].view.xy = (0.0, 0.0)
        return

    sug = SugiyamaLayout(core)
    sug.xspace = settings.node_sep
    sug.yspace = settings.rank_sep
    sug.route_edge = _keep_centres
    sug.init_all()
    sug.draw()


# ============================================================================ #
# Public entry point
# ============================================================================ #

def compute_layout(
    visible: VisibleSubgraph,
    settings: Optional[LayoutSettings] = None,
) -> GraphLayout:
    """
    Lay out the visible subgraph.

    Returns an empty GraphLayout (and skips grandalf entirely) when there
    are no visible nodes. Links whose endpoints are not among the
    positioned nodes are dropped.
    """
    settings = (settings or LayoutSettings()).validate()

    if visible.is_empty:
        return GraphLayout()

    # ------------------------------------------------------------------
    # 1. Build the grandalf graph
    # ------------------------------------------------------------------
    sizes: Dict[str, Tuple[float, float]] = {}
    vertices: Dict[str, Vertex] = {}
    for node in visible.nodes:
        w, h = node_size(node, settings)
        sizes[node.id] = (w, h)
        v = Vertex(node.id)
        # grandalf's h runs along the rank axis
        v.view = _VertexView(h, w) if settings.is_horizontal else _VertexView(w, h)
        vertices[node.id] = v

    edges: Dict[int, Edge] = {}
    for idx, link in enumerate(visible.links):
        src = vertices.get(link.from_node_id)
        dst = vertices.get(link.to_node_id)
        if src is None or dst is None or src is dst:
            continue
        e = Edge(src, dst)
        e.view = _EdgeView()
        edges[idx] = e

    g = Graph(list(vertices.values()), list(edges.values()))

    # ------------------------------------------------------------------
    # 2. Lay out each component, then pack them along the cross axis
    # ------------------------------------------------------------------
    centres: Dict[str, Point] = {}
    cursor = 0.0
    for core in g.C:
        _layout_component(core, settings)

        comp_ids = [v.data for v in core.sV]
        local = {nid: _to_screen(vertices[nid].view.xy, settings) for nid in comp_ids}

        lefts = [local[nid][0] - sizes[nid][0] / 2.0 for nid in comp_ids]
        tops = [local[nid][1] - sizes[nid][1] / 2.0 for nid in comp_ids]
        rights = [local[nid][0] + sizes[nid][0] / 2.0 for nid in comp_ids]
        bottoms = [local[nid][1] + sizes[nid][1] / 2.0 for nid in comp_ids]

        if settings.is_horizontal:
            dx = -min(lefts)
            dy = cursor - min(tops)
            cursor += max(bottoms) - min(tops) + settings.node_sep
        else:
            dx = cursor - min(lefts)
            dy = -min(tops)
            cursor += max(rights) - min(lefts) + settings.node_sep

        for nid in comp_ids:
            cx, cy = local[nid]
            centres[nid] = (cx + dx, cy + dy)

        for e in core.sE:
            e.view.points = [
                (px + dx, py + dy)
                for px, py in (_to_screen(p, settings) for p in e.view.points)
            ]

    # ------------------------------------------------------------------
    # 3. Convert back, preserving visible order
    # ------------------------------------------------------------------
    positioned: List[PositionedNode] = []
    by_id: Dict[str, PositionedNode] = {}
    for node in visible.nodes:
        w, h = sizes[node.id]
        cx, cy = centres[node.id]
        pn = PositionedNode(node=node, x=cx - w / 2.0, y=cy - h / 2.0, width=w, height=h)
        positioned.append(pn)
        by_id[node.id] = pn

    routed: List[RoutedLink] = []
    dropped = 0
    for idx, link in enumerate(visible.links):
        start = by_id.get(link.from_node_id)
        end = by_id.get(link.to_node_id)
        if start is None or end is None:
            dropped += 1
            continue
        routed.append(
            RoutedLink(
                link=link,
                start=start,
                end=end,
                points=_link_points(edges.get(idx), start, end),
            )
        )

    if dropped:
        logger.debug("[layout] dropped %d link(s) with unpositioned endpoints", dropped)

    width = max(pn.right for pn in positioned)
    height = max(pn.bottom for pn in positioned)
    logger.debug(
        "[layout] %d node(s), %d link(s), extent %.1f x %.1f (%s)",
        len(positioned),
        len(routed),
        width,
        height,
        settings.rank_dir,
    )

    return GraphLayout(
        nodes=tuple(positioned),
        links=tuple(routed),
        width=float(width),
        height=float(height),
        _by_id=by_id,
    )


def _link_points(
    e: Optional[Edge],
    start: PositionedNode,
    end: PositionedNode,
) -> Tuple[Point, ...]:
    """Polyline from the source centre to the target centre."""
    if e is None or len(e.view.points) < 2:
        return (start.center, end.center)

    pts = list(e.view.points)
    # Feedback edges can come back reversed; always run source -> target.
    if _dist2(pts[0], end.center) < _dist2(pts[0], start.center):
        pts.reverse()
    return tuple(pts)


def _dist2(a: Point, b: Point) -> float:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2
