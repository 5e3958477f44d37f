"""
Collapse / expand and visible-subgraph tests.
"""

import logging

import pytest

from canvas_graph import ConfigurationError, DisplayState, GraphData, Link, Node, VisibilityEngine
from canvas_graph.presets import DEFAULT_COLLAPSE_DEPTH

from conftest import make_chain, make_tree


def visible_ids(engine):
    return [n.id for n in engine.compute_visible().nodes]


class TestInitialize:

    def test_default_depth_is_fully_expanded(self, tree):
        engine = VisibilityEngine(tree)
        assert visible_ids(engine) == [n.id for n in tree.nodes]
        assert len(engine.compute_visible().links) == len(tree.links)
        assert all(n.display_state == DisplayState.EXPANDED for n in tree.nodes)

    def test_depths_follow_bfs(self, tree):
        engine = VisibilityEngine(tree, DEFAULT_COLLAPSE_DEPTH)
        assert engine.depth_of("R") == 0
        assert engine.depth_of("B") == 1
        assert engine.depth_of("A2x") == 3
        assert engine.children_of("A") == ["A1", "A2"]
        assert engine.descendants_of("A") == ["A1", "A2", "A2x"]

    def test_depth_zero_shows_only_the_root(self, tree):
        engine = VisibilityEngine(tree, 0)
        visible = engine.compute_visible()
        assert [n.id for n in visible.nodes] == ["R"]
        assert visible.links == ()
        assert tree.root.is_collapsed

    def test_chain_scenario(self, chain):
        engine = VisibilityEngine(chain, 2)
        assert visible_ids(engine) == ["R", "A", "B"]
        assert [(link.from_node_id, link.to_node_id) for link in engine.compute_visible().links] == [
            ("R", "A"),
            ("A", "B"),
        ]

        assert engine.toggle_collapse(chain.node_by_id("B"), expand_all_descendants=True) is True
        assert visible_ids(engine) == ["R", "A", "B", "C"]

    @pytest.mark.parametrize("d1,d2", [(0, 1), (1, 2), (2, 3), (0, 4), (3, 99)])
    def test_visibility_is_monotonic_in_depth(self, d1, d2):
        small = set(visible_ids(VisibilityEngine(make_tree(), d1)))
        large = set(visible_ids(VisibilityEngine(make_tree(), d2)))
        assert small <= large

    @pytest.mark.parametrize("depth", [-1, 1.5, "2", True, None])
    def test_invalid_depth_rejected(self, tree, depth):
        with pytest.raises(ConfigurationError):
            VisibilityEngine(tree, depth)

    def test_empty_graph(self):
        engine = VisibilityEngine(GraphData(), 3)
        assert engine.root_id is None
        assert engine.compute_visible().is_empty


class TestToggle:

    def test_double_toggle_restores_visible_set(self, tree):
        engine = VisibilityEngine(tree, 2)
        before = visible_ids(engine)
        for node_id in ("R", "A", "A2", "B1"):
            engine.toggle_collapse(node_id)
            engine.toggle_collapse(node_id)
            assert visible_ids(engine) == before

    def test_collapse_hides_subtree_but_keeps_node(self, tree):
        engine = VisibilityEngine(tree)
        assert engine.toggle_collapse("A") is True
        assert visible_ids(engine) == ["R", "A", "B", "B1"]
        assert tree.node_by_id("A").is_collapsed

    def test_leaf_toggle_reports_no_change(self, tree):
        engine = VisibilityEngine(tree)
        assert engine.toggle_collapse("B1") is False
        assert tree.node_by_id("B1").is_collapsed
        assert engine.toggle_collapse("B1") is False
        assert not tree.node_by_id("B1").is_collapsed

    def test_expand_without_flag_keeps_descendant_state(self, tree):
        engine = VisibilityEngine(tree, 1)
        assert engine.toggle_collapse("A") is True
        assert visible_ids(engine) == ["R", "A", "B", "A1", "A2"]
        assert tree.node_by_id("A2").is_collapsed

    def test_expand_all_descendants(self, tree):
        engine = VisibilityEngine(tree, 1)
        assert engine.toggle_collapse("A", expand_all_descendants=True) is True
        assert set(visible_ids(engine)) == {"R", "A", "B", "A1", "A2", "A2x"}
        assert not tree.node_by_id("A2").is_collapsed
        # B's subtree is untouched
        assert tree.node_by_id("B").is_collapsed

    def test_collapse_with_flag_only_collapses_the_node(self, tree):
        engine = VisibilityEngine(tree)
        engine.toggle_collapse("A", expand_all_descendants=True)
        assert tree.node_by_id("A").is_collapsed
        assert not tree.node_by_id("A2").is_collapsed
        assert "A2" not in visible_ids(engine)

    def test_toggle_hidden_node_reports_no_change(self, tree):
        engine = VisibilityEngine(tree, 1)
        assert engine.toggle_collapse("A2") is False

    def test_unknown_node_raises(self, tree):
        engine = VisibilityEngine(tree)
        with pytest.raises(KeyError):
            engine.toggle_collapse("nope")


class TestNonTreeStructure:

    def test_cross_link_does_not_hide_or_reveal(self):
        g = make_chain("R", "A", "B")
        g.add_node(Node("X", node_id="X"))
        g.add_link(Link("rx", from_node_id="R", to_node_id="X"))
        g.add_link(Link("cross", from_node_id="X", to_node_id="B"))

        engine = VisibilityEngine(g)
        # B was discovered through A first, so A owns it
        assert engine.parent_of("B") == "A"

        engine.toggle_collapse("X")
        assert "B" in visible_ids(engine)

        engine.toggle_collapse("X")
        engine.toggle_collapse("A")
        assert "B" not in visible_ids(engine)
        links = [(link.from_node_id, link.to_node_id) for link in engine.compute_visible().links]
        assert ("X", "B") not in links

    def test_cycle_back_to_root(self):
        g = make_chain("R", "A", "B")
        g.add_link(Link("back", from_node_id="B", to_node_id="R"))
        engine = VisibilityEngine(g, 1)
        assert visible_ids(engine) == ["R", "A"]
        assert engine.toggle_collapse("A") is True
        assert visible_ids(engine) == ["R", "A", "B"]
        assert len(engine.compute_visible().links) == 3

    def test_unreachable_nodes_always_visible(self):
        g = make_chain("R", "A")
        g.add_node(Node("island", node_id="I"))
        g.add_node(Node("island child", node_id="J"))
        g.add_link(Link(from_node_id="I", to_node_id="J"))

        engine = VisibilityEngine(g, 0)
        assert visible_ids(engine) == ["R", "I", "J"]
        assert not engine.is_reachable("I")
        assert engine.depth_of("I") is None
        assert engine.toggle_collapse("I") is False
        assert not g.node_by_id("I").is_collapsed

    def test_dangling_link_is_ignored(self):
        g = make_chain("R", "A")
        g.add_link(Link("ghost", from_node_id="A", to_node_id="missing"))
        engine = VisibilityEngine(g)
        visible = engine.compute_visible()
        assert [n.id for n in visible.nodes] == ["R", "A"]
        assert len(visible.links) == 1

    def test_missing_designated_root_is_logged(self, caplog):
        g = GraphData(root_id="nowhere")
        g.add_node(Node("a", node_id="a"))
        with caplog.at_level(logging.WARNING, logger="canvas_graph.visibility"):
            engine = VisibilityEngine(g, 0)
        assert engine.root_id is None
        assert visible_ids(engine) == ["a"]
        assert "nowhere" in caplog.text
