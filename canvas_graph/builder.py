"""
Incremental construction helpers for GraphData.

    builder = GraphBuilder()
    root = builder.add_node(Node("Root"))
    child = root.add_link_to(Link("owns"), Node("Child")).end_node
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .graph_data import GraphData, IdFactory, Link, Node


@dataclass
class BuiltLink:
    link: Link
    start_node: "BuiltNode"
    end_node: "BuiltNode"


class BuiltNode:
    """A node already placed in a builder's graph."""

    def __init__(self, builder: "GraphBuilder", node: Node) -> None:
        self.builder = builder
        self.node = node

    @property
    def id(self) -> str:
        return self.node.id

    def add_link_to(self, link: Link, node: Node) -> BuiltLink:
        """Add ``node`` to the graph and link this node to it."""
        end = self.builder.add_node(node)
        return self.link_to(link, end)

    def link_to(self, link: Link, end: "BuiltNode") -> BuiltLink:
        """Link this node to a node that is already in the graph."""
        link.from_node_id = self.node.id
        link.to_node_id = end.node.id
        self.builder.graph_data.add_link(link)
        return BuiltLink(link=link, start_node=self, end_node=end)


class GraphBuilder:
    def __init__(
        self,
        graph_data: Optional[GraphData] = None,
        *,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self.graph_data = graph_data if graph_data is not None else GraphData(id_factory=id_factory)

    def add_node(self, node: Node) -> BuiltNode:
        self.graph_data.add_node(node)
        return BuiltNode(self, node)
