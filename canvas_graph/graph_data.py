"""
Graph store: plain node / link data and structural accessors.

GraphData holds the full graph exactly as the caller built it. It does not
know about collapse state beyond each node's own display_state flag, and it
does not reject dangling links: those are dropped later, where the graph is
consumed (visibility and layout), so that user supplied data never faults
the widget.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

import networkx as nx


IdFactory = Callable[[], str]


def new_id() -> str:
    return str(uuid.uuid4())


class DisplayState(str, Enum):
    EXPANDED = "expanded"
    COLLAPSED = "collapsed"


class Node:
    """
    A graph node.

    ``properties`` is an opaque caller payload; nothing in this package
    reads it, it is only handed back through events and draw hooks.
    """

    def __init__(
        self,
        display_text: str = "",
        back_color: Optional[Any] = None,
        line_color: Optional[Any] = None,
        text_color: Optional[Any] = None,
        properties: Optional[Dict[str, Any]] = None,
        *,
        node_id: Optional[str] = None,
    ) -> None:
        self._id = str(node_id) if node_id is not None else new_id()
        self.display_text = display_text or ""
        self.back_color = back_color
        self.line_color = line_color
        self.text_color = text_color
        self.properties = properties
        self.display_state = DisplayState.EXPANDED

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_collapsed(self) -> bool:
        return self.display_state == DisplayState.COLLAPSED

    def __repr__(self) -> str:
        return f"Node(id={self._id!r}, text={self.display_text!r}, state={self.display_state.value})"


class Link:
    """A directed link between two node ids."""

    def __init__(
        self,
        display_text: str = "",
        line_color: Optional[Any] = None,
        bg_color: Optional[Any] = None,
        text_color: Optional[Any] = None,
        properties: Optional[Dict[str, Any]] = None,
        *,
        from_node_id: Optional[str] = None,
        to_node_id: Optional[str] = None,
    ) -> None:
        self.display_text = display_text or ""
        self.line_color = line_color
        self.bg_color = bg_color
        self.text_color = text_color
        self.properties = properties
        self.from_node_id = from_node_id
        self.to_node_id = to_node_id

    def __repr__(self) -> str:
        return f"Link({self.from_node_id!r} -> {self.to_node_id!r}, text={self.display_text!r})"


class GraphData:
    """
    Ordered nodes and links, plus an optional designated root.

    The traversal root is ``root_id`` when set, otherwise the first node.
    ``graph_id`` is fixed at construction, either supplied or drawn once
    from ``id_factory``.
    """

    def __init__(
        self,
        nodes: Optional[List[Node]] = None,
        links: Optional[List[Link]] = None,
        *,
        root_id: Optional[str] = None,
        graph_id: Optional[str] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self.graph_id = graph_id if graph_id is not None else (id_factory or new_id)()
        self.root_id = root_id
        self.nodes: List[Node] = []
        self.links: List[Link] = []
        self._index: Dict[str, Node] = {}

        for n in nodes or []:
            self.add_node(n)
        for link in links or []:
            self.add_link(link)

    # ------------------------------------------------------------------ #
    # Mutation
    # ------------------------------------------------------------------ #

    def add_node(self, node: Node) -> Node:
        if node.id in self._index:
            raise ValueError(f"Duplicate node id: {node.id}")
        self.nodes.append(node)
        self._index[node.id] = node
        return node

    def add_link(self, link: Link) -> Link:
        if link.from_node_id is None or link.to_node_id is None:
            raise ValueError("A link needs both from_node_id and to_node_id")
        self.links.append(link)
        return link

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def root(self) -> Optional[Node]:
        if self.root_id is not None:
            return self._index.get(self.root_id)
        return self.nodes[0] if self.nodes else None

    def node_by_id(self, node_id: str) -> Optional[Node]:
        return self._index.get(node_id)

    def has_node(self, node_id: Optional[str]) -> bool:
        return node_id in self._index

    def links_from(self, node_id: str) -> List[Link]:
        return [link for link in self.links if link.from_node_id == node_id]

    def links_to(self, node_id: str) -> List[Link]:
        return [link for link in self.links if link.to_node_id == node_id]

    def is_valid_link(self, link: Link) -> bool:
        return self.has_node(link.from_node_id) and self.has_node(link.to_node_id)

    def dangling_links(self) -> List[Link]:
        """Links whose endpoints are not both present in the node list."""
        return [link for link in self.links if not self.is_valid_link(link)]

    def to_networkx(self) -> nx.DiGraph:
        """
        Directed networkx view, preserving insertion order of nodes and of
        each node's successors. Dangling links are left out.
        """
        G = nx.DiGraph()
        for n in self.nodes:
            G.add_node(n.id)
        for link in self.links:
            if self.is_valid_link(link):
                G.add_edge(link.from_node_id, link.to_node_id)
        return G

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __repr__(self) -> str:
        return f"GraphData(id={self.graph_id!r}, nodes={len(self.nodes)}, links={len(self.links)})"
