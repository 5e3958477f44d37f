"""
CanvasGraph - the embeddable graph widget.

Wires the pieces together for a host application:
    GraphData -> VisibilityEngine -> compute_layout -> GraphRenderer
    and hit testing of pointer input against the same layout

The host drives it explicitly:
    - initialize(graph, settings, surface) on mount
    - set_graph_data(graph) whenever the data is replaced (full reset)
    - pointer_move / pointer_click / pointer_double_click with coordinates
      already in the surface's local space
    - dispose() on teardown

connect(figure) does the pointer wiring for a matplotlib figure.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from .events import EventChannel
from .graph_data import GraphData, IdFactory, Link, Node, new_id
from .graph_state import EMPTY_LAYOUT, GraphLayout, PositionedNode, RoutedLink
from .hit_test import find_nearest_link_at, find_node_at
from .layout.layered import compute_layout
from .presets import CanvasGraphConfig, LayoutSettings
from .render2d import GraphRenderer
from .surface import DrawingSurface, MatplotlibSurface
from .visibility import VisibilityEngine, VisibleSubgraph

logger = logging.getLogger(__name__)


class CanvasGraph:
    """
    Interactive collapsible graph view.

    Output events carry the domain entity (Node or Link). Draw hooks and
    the clear override live on the renderer and are re-exported here.
    """

    def __init__(
        self,
        config: Optional[CanvasGraphConfig] = None,
        *,
        graph_id: Optional[str] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self.config = (config or CanvasGraphConfig()).validate()
        self.graph_id = graph_id if graph_id is not None else (id_factory or new_id)()

        self.graph: GraphData = GraphData(graph_id=self.graph_id)
        self.settings: LayoutSettings = self.config.settings
        self.engine: Optional[VisibilityEngine] = None
        self.renderer = GraphRenderer(self.config.style)

        self.surface: Optional[DrawingSurface] = None
        self.overlay: Optional[DrawingSurface] = None
        self._owns_surface = False

        self._layout: GraphLayout = EMPTY_LAYOUT
        self._last_hovered: Optional[Node] = None
        self._last_hovered_link: Optional[Link] = None
        self._mpl_figure = None
        self._mpl_cids: List[int] = []

        self.node_click: EventChannel[Node] = EventChannel("node_click")
        self.node_double_click: EventChannel[Node] = EventChannel("node_double_click")
        self.node_hover: EventChannel[Node] = EventChannel("node_hover")
        self.link_click: EventChannel[Link] = EventChannel("link_click")
        self.link_double_click: EventChannel[Link] = EventChannel("link_double_click")
        self.link_hover: EventChannel[Link] = EventChannel("link_hover")

        self.link_pre_draw = self.renderer.link_pre_draw
        self.link_post_draw = self.renderer.link_post_draw
        self.node_pre_draw = self.renderer.node_pre_draw
        self.node_post_draw = self.renderer.node_post_draw
        self.clear_override = self.renderer.clear_override

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def initialize(
        self,
        graph: Optional[GraphData] = None,
        settings: Optional[LayoutSettings] = None,
        surface: Optional[DrawingSurface] = None,
        overlay: Optional[DrawingSurface] = None,
    ) -> GraphLayout:
        """
        Mount the widget. Settings are validated before anything else runs;
        a surface is created from the settings when none is given.
        """
        if settings is not None:
            self.settings = settings.validate()

        self._release_surface()
        if surface is None:
            surface = MatplotlibSurface.create(
                self.settings.width,
                self.settings.height,
                background_color=self.config.style.background_color,
            )
            self._owns_surface = True
        self.surface = surface
        if overlay is None and isinstance(surface, MatplotlibSurface):
            overlay = surface.overlay()
        self.overlay = overlay

        return self.set_graph_data(graph if graph is not None else self.graph)

    def set_graph_data(self, graph: GraphData) -> GraphLayout:
        """Replace the graph. Collapse state and layout are rebuilt from scratch."""
        self.graph = graph
        self.engine = VisibilityEngine(graph, self.config.initial_collapse_depth)
        self._last_hovered = None
        self._last_hovered_link = None
        logger.info("[canvas_graph] %s: loaded %r", self.graph_id, graph)
        return self.process_nodes()

    def dispose(self) -> None:
        self.disconnect()
        for channel in self.channels:
            channel.clear()
        self._release_surface()
        self.engine = None
        self._layout = EMPTY_LAYOUT
        self._last_hovered = None
        self._last_hovered_link = None

    def _release_surface(self) -> None:
        """Drop the surfaces, closing the figure if this widget created it."""
        if self._owns_surface and isinstance(self.surface, MatplotlibSurface):
            self.disconnect()
            self.surface.close()
        self._owns_surface = False
        self.surface = None
        self.overlay = None

    @property
    def channels(self):
        return (
            self.node_click,
            self.node_double_click,
            self.node_hover,
            self.link_click,
            self.link_double_click,
            self.link_hover,
        ) + self.renderer.channels

    # ------------------------------------------------------------------ #
    # Layout / drawing
    # ------------------------------------------------------------------ #

    @property
    def layout(self) -> GraphLayout:
        return self._layout

    def visible(self) -> VisibleSubgraph:
        if self.engine is None:
            return VisibleSubgraph()
        return self.engine.compute_visible()

    def process_nodes(self) -> GraphLayout:
        """Lay out the visible subgraph, swap it in, repaint."""
        self._layout = compute_layout(self.visible(), self.settings)
        self.draw()
        return self._layout

    def draw(self) -> None:
        if self.surface is None:
            return
        self.renderer.draw(self.surface, self._layout)
        self.surface.present()

    def redraw_request(self, surface: DrawingSurface) -> None:
        """Host asks for a repaint of one of our surfaces."""
        if surface is self.surface:
            self.draw()
        else:
            surface.present()

    def toggle(self, node: Union[Node, str], expand_all_descendants: bool = False) -> bool:
        """Toggle a node; relayout when the visible set changed, else repaint."""
        if self.engine is None:
            return False
        changed = self.engine.toggle_collapse(node, expand_all_descendants)
        if changed:
            self.process_nodes()
        else:
            self.draw()
        return changed

    # ------------------------------------------------------------------ #
    # Hit testing
    # ------------------------------------------------------------------ #

    def node_at(self, x: float, y: float) -> Optional[PositionedNode]:
        return find_node_at(self._layout, x, y)

    def link_at(self, x: float, y: float) -> Optional[RoutedLink]:
        return find_nearest_link_at(self._layout, x, y, self.config.link_hit_tolerance)

    # ------------------------------------------------------------------ #
    # Pointer input
    # ------------------------------------------------------------------ #

    def pointer_move(self, x: float, y: float) -> None:
        hit = self.node_at(x, y)
        if hit is not None:
            self._last_hovered_link = None
            if self._last_hovered is not hit.node:
                self._last_hovered = hit.node
                self.node_hover.emit(hit.node)
                self._clear_overlay()
            return

        self._last_hovered = None
        rl = self.link_at(x, y)
        link = rl.link if rl is not None else None
        if link is not None and link is not self._last_hovered_link:
            self.link_hover.emit(link)
        self._last_hovered_link = link

        if self.overlay is None:
            return
        self.overlay.clear()
        if rl is not None:
            self.renderer.draw_link_label(self.overlay, rl, x, y)
        self.overlay.present()

    def pointer_click(self, x: float, y: float, ctrl: bool = False, shift: bool = False) -> None:
        if shift:
            self.pointer_double_click(x, y, ctrl=ctrl)
            return

        hit = self.node_at(x, y)
        if hit is not None:
            self.node_click.emit(hit.node)
            return

        rl = self.link_at(x, y)
        if rl is not None:
            self.link_click.emit(rl.link)

    def pointer_double_click(self, x: float, y: float, ctrl: bool = False) -> None:
        hit = self.node_at(x, y)
        if hit is not None:
            node = hit.node
            self.toggle(node, expand_all_descendants=ctrl)
            self.node_double_click.emit(node)
            return

        rl = self.link_at(x, y)
        if rl is not None:
            self.link_double_click.emit(rl.link)

    def _clear_overlay(self) -> None:
        if self.overlay is not None:
            self.overlay.clear()
            self.overlay.present()

    # ------------------------------------------------------------------ #
    # matplotlib wiring
    # ------------------------------------------------------------------ #

    def connect(self, figure=None) -> None:
        """Route a matplotlib figure's pointer events to this widget."""
        if figure is None:
            if not isinstance(self.surface, MatplotlibSurface):
                raise TypeError("connect() needs a figure unless the surface is a MatplotlibSurface")
            figure = self.surface.figure

        self.disconnect()
        canvas = figure.canvas
        self._mpl_figure = figure
        self._mpl_cids = [
            canvas.mpl_connect("motion_notify_event", self._on_mpl_motion),
            canvas.mpl_connect("button_press_event", self._on_mpl_press),
        ]

    def disconnect(self) -> None:
        if self._mpl_figure is not None:
            for cid in self._mpl_cids:
                self._mpl_figure.canvas.mpl_disconnect(cid)
        self._mpl_figure = None
        self._mpl_cids = []

    def _owns_axes(self, ax) -> bool:
        return any(
            isinstance(s, MatplotlibSurface) and s.ax is ax
            for s in (self.surface, self.overlay)
        )

    def _on_mpl_motion(self, event) -> None:
        if event.xdata is None or not self._owns_axes(event.inaxes):
            return
        self.pointer_move(float(event.xdata), float(event.ydata))

    def _on_mpl_press(self, event) -> None:
        if event.xdata is None or not self._owns_axes(event.inaxes):
            return
        ctrl, shift = _modifiers(event.key)
        if getattr(event, "dblclick", False):
            # the preceding single press already ran the shift path
            if not shift:
                self.pointer_double_click(float(event.xdata), float(event.ydata), ctrl=ctrl)
        else:
            self.pointer_click(float(event.xdata), float(event.ydata), ctrl=ctrl, shift=shift)


def _modifiers(key: Optional[str]):
    """(ctrl, shift) from a matplotlib key string such as 'ctrl+shift'."""
    if not key:
        return False, False
    parts = set(key.lower().split("+"))
    return bool(parts & {"control", "ctrl"}), "shift" in parts
