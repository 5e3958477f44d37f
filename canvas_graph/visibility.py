"""
Collapse / expand bookkeeping and the visible-subgraph projection.

The graph is treated as a rooted tree for collapse purposes. The tree is the
breadth-first spanning tree from the root, so when a node is reachable by
several paths only the first BFS-discovered one decides whether it is
hidden. Other links (cross links, back edges) never hide anything; they
show whenever both endpoints show.

Nodes that cannot be reached from the root have no depth. They are always
visible, initialisation leaves their state alone, and they cannot be
toggled.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

import networkx as nx

from .graph_data import DisplayState, GraphData, Link, Node
from .presets import DEFAULT_COLLAPSE_DEPTH, validate_collapse_depth

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleSubgraph:
    """Filtered projection of a GraphData, in the store's order."""

    nodes: Tuple[Node, ...] = ()
    links: Tuple[Link, ...] = ()

    @property
    def node_ids(self) -> FrozenSet[str]:
        return frozenset(n.id for n in self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


class VisibilityEngine:
    """
    Owns per-node collapse state for one GraphData and answers what is
    currently visible.
    """

    def __init__(
        self,
        graph: GraphData,
        initial_collapse_depth: int = DEFAULT_COLLAPSE_DEPTH,
    ) -> None:
        self.graph = graph
        self.root_id: Optional[str] = None
        self._parent: Dict[str, Optional[str]] = {}
        self._depth: Dict[str, int] = {}
        self._children: Dict[str, List[str]] = {}
        self.initialize(graph, initial_collapse_depth)

    # ------------------------------------------------------------------ #
    # Initialisation
    # ------------------------------------------------------------------ #

    def initialize(self, graph: GraphData, initial_collapse_depth: int) -> None:
        """
        Rebuild the spanning tree and reset collapse state: every reachable
        node at depth >= initial_collapse_depth is collapsed, the rest
        expanded.
        """
        depth_limit = validate_collapse_depth(initial_collapse_depth)

        self.graph = graph
        self._parent = {}
        self._depth = {}
        self._children = {n.id: [] for n in graph.nodes}

        dangling = graph.dangling_links()
        if dangling:
            logger.warning(
                "[visibility] %d link(s) reference missing nodes and are ignored",
                len(dangling),
            )

        root = graph.root
        self.root_id = root.id if root is not None else None
        if root is None:
            if graph.root_id is not None:
                logger.warning(
                    "[visibility] root %r is not in the graph; every node stays visible",
                    graph.root_id,
                )
            return

        G = graph.to_networkx()
        self._parent[root.id] = None
        self._depth[root.id] = 0
        for u, v in nx.bfs_edges(G, root.id):
            self._parent[v] = u
            self._depth[v] = self._depth[u] + 1
            self._children[u].append(v)

        for node_id, depth in self._depth.items():
            node = graph.node_by_id(node_id)
            node.display_state = (
                DisplayState.COLLAPSED if depth >= depth_limit else DisplayState.EXPANDED
            )

        logger.debug(
            "[visibility] initialised %d node(s), %d reachable from %s, depth limit %d",
            len(graph.nodes),
            len(self._depth),
            root.id,
            depth_limit,
        )

    # ------------------------------------------------------------------ #
    # Tree accessors
    # ------------------------------------------------------------------ #

    def is_reachable(self, node_id: str) -> bool:
        return node_id in self._depth

    def depth_of(self, node_id: str) -> Optional[int]:
        return self._depth.get(node_id)

    def parent_of(self, node_id: str) -> Optional[str]:
        return self._parent.get(node_id)

    def children_of(self, node_id: str) -> List[str]:
        return list(self._children.get(node_id, ()))

    def descendants_of(self, node_id: str) -> List[str]:
        """Spanning-tree descendants in breadth-first order."""
        out: List[str] = []
        queue = deque(self._children.get(node_id, ()))
        while queue:
            nid = queue.popleft()
            out.append(nid)
            queue.extend(self._children.get(nid, ()))
        return out

    # ------------------------------------------------------------------ #
    # Visibility
    # ------------------------------------------------------------------ #

    def _visible_ids(self) -> FrozenSet[str]:
        visible = set()

        if self.root_id is not None:
            queue = deque([self.root_id])
            while queue:
                nid = queue.popleft()
                visible.add(nid)
                if self.graph.node_by_id(nid).is_collapsed:
                    continue
                queue.extend(self._children.get(nid, ()))

        for n in self.graph.nodes:
            if n.id not in self._depth:
                visible.add(n.id)

        return frozenset(visible)

    def compute_visible(self) -> VisibleSubgraph:
        visible = self._visible_ids()
        nodes = tuple(n for n in self.graph.nodes if n.id in visible)
        links = tuple(
            link
            for link in self.graph.links
            if link.from_node_id in visible and link.to_node_id in visible
        )
        return VisibleSubgraph(nodes=nodes, links=links)

    def is_visible(self, node_id: str) -> bool:
        return node_id in self._visible_ids()

    # ------------------------------------------------------------------ #
    # Toggle
    # ------------------------------------------------------------------ #

    def toggle_collapse(
        self,
        node: Union[Node, str],
        expand_all_descendants: bool = False,
    ) -> bool:
        """
        Flip a node between collapsed and expanded.

        Expanding with ``expand_all_descendants`` also expands the node's
        whole subtree. Collapsing with the flag only collapses the node.

        Returns True when the visible node set changed, meaning the caller
        has to lay out again. False means at most the node's own collapsed
        indicator changed.
        """
        node_id = node.id if isinstance(node, Node) else node
        target = self.graph.node_by_id(node_id)
        if target is None:
            raise KeyError(f"Unknown node id: {node_id}")

        if not self.is_reachable(node_id):
            logger.debug("[visibility] %s is not reachable from the root; not toggled", node_id)
            return False

        before = self._visible_ids()

        if target.is_collapsed:
            target.display_state = DisplayState.EXPANDED
            if expand_all_descendants:
                for nid in self.descendants_of(node_id):
                    self.graph.node_by_id(nid).display_state = DisplayState.EXPANDED
        else:
            target.display_state = DisplayState.COLLAPSED

        changed = self._visible_ids() != before
        logger.debug(
            "[visibility] toggled %s -> %s (visible set changed: %s)",
            node_id,
            target.display_state.value,
            changed,
        )
        return changed
