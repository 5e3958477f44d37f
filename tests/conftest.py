import matplotlib

matplotlib.use("Agg")

import pytest

from canvas_graph import GraphBuilder, GraphData, Link, Node
from canvas_graph.surface import DrawingSurface


class RecordingSurface(DrawingSurface):
    """Surface that just remembers what it was asked to draw."""

    def __init__(self, width=800.0, height=600.0):
        self.width = width
        self.height = height
        self.calls = []
        self.presented = 0

    def names(self):
        return [c[0] for c in self.calls]

    def of(self, name):
        return [c for c in self.calls if c[0] == name]

    def clear(self):
        self.calls.append(("clear",))

    def line(self, x0, y0, x1, y1, color, width):
        self.calls.append(("line", (x0, y0, x1, y1), color, width))

    def rounded_rect(self, x, y, w, h, radius, fill, edge_color=None, line_width=0.0, shadow_color=None):
        self.calls.append(("rounded_rect", (x, y, w, h), fill, edge_color))

    def ellipse(self, cx, cy, rx, ry, edge_color, line_width):
        self.calls.append(("ellipse", (cx, cy, rx, ry)))

    def text(self, x, y, s, color, font_size, ha="center", va="center"):
        self.calls.append(("text", (x, y), s, color))

    def measure_text(self, s, font_size):
        return 7.0 * len(s), float(font_size)

    def present(self):
        self.presented += 1


def make_chain(*labels, **kwargs):
    """Linear graph labels[0] -> labels[1] -> ...; node ids are the labels."""
    g = GraphData(graph_id="chain", **kwargs)
    for label in labels:
        g.add_node(Node(label, node_id=label))
    for a, b in zip(labels, labels[1:]):
        g.add_link(Link(f"{a}-{b}", from_node_id=a, to_node_id=b))
    return g


def make_tree():
    """
    R
    ├── A
    │   ├── A1
    │   └── A2
    │       └── A2x
    └── B
        └── B1
    """
    builder = GraphBuilder(GraphData(graph_id="tree"))
    r = builder.add_node(Node("R", node_id="R"))
    a = r.add_link_to(Link("ra"), Node("A", node_id="A")).end_node
    b = r.add_link_to(Link(""), Node("B", node_id="B")).end_node
    a.add_link_to(Link("a1"), Node("A1", node_id="A1"))
    a2 = a.add_link_to(Link("a2"), Node("A2", node_id="A2")).end_node
    a2.add_link_to(Link("a2x"), Node("A2x", node_id="A2x"))
    b.add_link_to(Link("b1"), Node("B1", node_id="B1"))
    return builder.graph_data


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def overlay():
    return RecordingSurface()


@pytest.fixture
def chain():
    return make_chain("R", "A", "B", "C")


@pytest.fixture
def tree():
    return make_tree()
