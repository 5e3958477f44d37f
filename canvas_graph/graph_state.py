"""
Positioned geometry produced by the layout adapter.

A GraphLayout is built once per visible subgraph and never mutated. The
widget swaps the whole object when the visible subgraph changes, so the
renderer and the hit tester always read one consistent snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .graph_data import Link, Node

Point = Tuple[float, float]


@dataclass(frozen=True)
class PositionedNode:
    """A visible node with its box; x, y is the top-left corner."""

    node: Node
    x: float
    y: float
    width: float
    height: float

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return self.x + self.width / 2.0, self.y + self.height / 2.0

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.right and self.y <= py < self.bottom


@dataclass(frozen=True)
class RoutedLink:
    """A visible link with its routed polyline."""

    link: Link
    start: PositionedNode
    end: PositionedNode
    points: Tuple[Point, ...] = ()

    @property
    def start_center(self) -> Point:
        return self.start.center

    @property
    def end_center(self) -> Point:
        return self.end.center


@dataclass(frozen=True)
class GraphLayout:
    nodes: Tuple[PositionedNode, ...] = ()
    links: Tuple[RoutedLink, ...] = ()
    width: float = 0.0
    height: float = 0.0
    _by_id: Dict[str, PositionedNode] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self):
        if not self._by_id and self.nodes:
            object.__setattr__(self, "_by_id", {pn.id: pn for pn in self.nodes})

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def positioned(self, node_id: str) -> Optional[PositionedNode]:
        return self._by_id.get(node_id)


EMPTY_LAYOUT = GraphLayout()
