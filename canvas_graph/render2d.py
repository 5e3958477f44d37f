# render2d.py

"""
Frame renderer for the canvas graph widget.

Draw order per frame is fixed:
    clear -> every link in layout order -> every node in layout order

Each link and node draw is wrapped by a pre hook and a post hook. Once a
pre hook is subscribed it owns the drawing: ``skip_default_draw`` starts out
True and the default drawing only runs if a hook sets it back to False. The
post hook fires either way. Clearing is owned by the clear_override channel whenever
it has subscribers, otherwise the surface's own clear() runs.

The hover overlay (link label bubble) is drawn on a separate surface so it
can be cleared without repainting the graph.
"""

from __future__ import annotations

import logging
from typing import Optional

from .events import (
    ClearOverride,
    EventChannel,
    LinkPostDraw,
    LinkPreDraw,
    NodePostDraw,
    NodePreDraw,
)
from .graph_state import GraphLayout, PositionedNode, RoutedLink
from .presets import GraphStyle
from .surface import DrawingSurface

logger = logging.getLogger(__name__)


class GraphRenderer:
    def __init__(self, style: Optional[GraphStyle] = None) -> None:
        self.style = style or GraphStyle()

        self.link_pre_draw: EventChannel[LinkPreDraw] = EventChannel("link_pre_draw")
        self.link_post_draw: EventChannel[LinkPostDraw] = EventChannel("link_post_draw")
        self.node_pre_draw: EventChannel[NodePreDraw] = EventChannel("node_pre_draw")
        self.node_post_draw: EventChannel[NodePostDraw] = EventChannel("node_post_draw")
        self.clear_override: EventChannel[ClearOverride] = EventChannel("clear_override")

    @property
    def channels(self):
        return (
            self.link_pre_draw,
            self.link_post_draw,
            self.node_pre_draw,
            self.node_post_draw,
            self.clear_override,
        )

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def draw(self, surface: DrawingSurface, layout: GraphLayout) -> None:
        self.clear(surface)
        for rl in layout.links:
            self.draw_link(surface, rl)
        for pn in layout.nodes:
            self.draw_node(surface, pn)
        logger.debug("[render] drew %d link(s), %d node(s)", len(layout.links), len(layout.nodes))

    def clear(self, surface: DrawingSurface) -> None:
        if self.clear_override.has_subscribers():
            self.clear_override.emit(ClearOverride(surface=surface))
        else:
            surface.clear()

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def draw_link(self, surface: DrawingSurface, rl: RoutedLink) -> None:
        skip = False
        if self.link_pre_draw.has_subscribers():
            p = LinkPreDraw(link=rl.link, geometry=rl, surface=surface, skip_default_draw=True)
            self.link_pre_draw.emit(p)
            skip = p.skip_default_draw

        if not skip:
            self.draw_default_link(surface, rl)

        if self.link_post_draw.has_subscribers():
            self.link_post_draw.emit(LinkPostDraw(link=rl.link, geometry=rl, surface=surface))

    def draw_default_link(self, surface: DrawingSurface, rl: RoutedLink) -> None:
        (x0, y0), (x1, y1) = rl.start_center, rl.end_center
        surface.line(
            x0,
            y0,
            x1,
            y1,
            color=rl.link.line_color or self.style.link_color,
            width=self.style.link_width,
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def draw_node(self, surface: DrawingSurface, pn: PositionedNode) -> None:
        skip = False
        if self.node_pre_draw.has_subscribers():
            p = NodePreDraw(node=pn.node, geometry=pn, surface=surface, skip_default_draw=True)
            self.node_pre_draw.emit(p)
            skip = p.skip_default_draw

        if not skip:
            self.draw_default_node(surface, pn)

        if self.node_post_draw.has_subscribers():
            self.node_post_draw.emit(NodePostDraw(node=pn.node, geometry=pn, surface=surface))

    def draw_default_node(self, surface: DrawingSurface, pn: PositionedNode) -> None:
        st = self.style
        node = pn.node

        surface.rounded_rect(
            pn.x,
            pn.y,
            pn.width,
            pn.height,
            st.node_corner_radius,
            fill=node.back_color or st.node_fill_color,
            edge_color=node.line_color or st.node_edge_color,
            line_width=st.node_line_width,
            shadow_color=st.node_shadow_color,
        )

        if node.is_collapsed:
            self.draw_collapsed_indicator(surface, pn)

        if node.display_text:
            cx, cy = pn.center
            surface.text(
                cx,
                cy,
                node.display_text,
                color=node.text_color or st.node_text_color,
                font_size=st.node_font_size,
                ha="center",
                va="center",
            )

    def draw_collapsed_indicator(self, surface: DrawingSurface, pn: PositionedNode) -> None:
        st = self.style
        surface.ellipse(
            pn.right + st.indicator_offset,
            pn.y + pn.height / 2.0,
            st.indicator_rx,
            st.indicator_ry,
            edge_color=pn.node.line_color or st.node_edge_color,
            line_width=st.node_line_width,
        )

    # ------------------------------------------------------------------
    # Hover overlay
    # ------------------------------------------------------------------

    def draw_link_label(self, overlay: DrawingSurface, rl: RoutedLink, x: float, y: float) -> bool:
        """
        Floating label bubble for a link, anchored at the pointer.

        Returns False (and draws nothing) when the link has no label.
        """
        text = rl.link.display_text
        if not text:
            return False

        st = self.style
        text_w, _ = overlay.measure_text(text, st.label_font_size)
        overlay.rounded_rect(
            x - st.label_padding,
            y - st.label_offset,
            text_w + 2.0 * st.label_padding,
            st.label_height,
            st.label_corner_radius,
            fill=rl.link.bg_color or st.label_bg_color,
        )
        overlay.text(
            x,
            y - st.label_offset,
            text,
            color=rl.link.text_color or st.label_text_color,
            font_size=st.label_font_size,
            ha="left",
            va="top",
        )
        return True
