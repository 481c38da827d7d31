"""Tests for the layout registry and Layout objects."""

import math

import pandas as pd
import pytest

from graphgg.datasets import create_notable, create_tree
from graphgg.errors import LayoutError
from graphgg.graph import tbl_graph
from graphgg.layouts import Layout, create_layout, list_layouts, register_layout
from graphgg.layouts.algorithms import LAYOUTS, resolve_layout_name


class TestRegistry:
    def test_builtin_layouts_are_listed(self):
        names = list_layouts()
        for name in ("auto", "stress", "kk", "fr", "spring", "circle", "star", "linear", "tree", "manual"):
            assert name in names

    def test_aliases_resolve(self):
        assert resolve_layout_name("auto") == "stress"
        assert resolve_layout_name(" Spring ") == "fr"
        assert resolve_layout_name("hierarchy") == "tree"

    def test_unknown_layout(self, small_graph):
        with pytest.raises(LayoutError, match="Unknown layout 'blob'"):
            create_layout(small_graph, "blob")

    def test_invalid_parameter(self, small_graph):
        with pytest.raises(LayoutError, match="Invalid parameters"):
            create_layout(small_graph, "circle", radius=2)

    def test_register_custom_layout(self, small_graph):
        @register_layout("diagonal")
        def layout_diagonal(G, nodes):
            return {node: (float(i), float(i)) for i, node in enumerate(G.nodes)}

        try:
            layout = create_layout(small_graph, "diagonal")
            assert layout.data["x"].tolist() == layout.data["y"].tolist()
        finally:
            del LAYOUTS["diagonal"]


class TestLayoutData:
    def test_node_columns_follow_coordinates(self, small_graph):
        layout = create_layout(small_graph, "circle")
        assert isinstance(layout, Layout)
        assert list(layout.data.columns) == ["x", "y", "name", "group", "score"]
        assert len(layout) == 5

    def test_edges_carry_endpoint_data(self, small_graph):
        layout = create_layout(small_graph, "circle")
        edges = layout.edges()
        assert list(edges.columns[:6]) == ["from", "to", "x", "y", "xend", "yend"]
        assert "node1.group" in edges.columns
        assert "node2.score" in edges.columns

        first = edges.iloc[0]
        a = layout.data.set_index("name").loc["a"]
        b = layout.data.set_index("name").loc["b"]
        assert (first["x"], first["y"]) == (a["x"], a["y"])
        assert (first["xend"], first["yend"]) == (b["x"], b["y"])
        assert first["node2.group"] == "x"

    def test_existing_xy_columns_are_replaced(self, small_graph):
        graph = small_graph.mutate(x=0.0, y=0.0)
        layout = create_layout(graph, "linear")
        assert layout.data["x"].tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert list(layout.data.columns).count("x") == 1

    def test_bounds(self, small_graph):
        layout = create_layout(small_graph, "linear")
        assert layout.bounds() == (0.0, 4.0, 0.0, 0.0)

    def test_empty_graph(self):
        graph = tbl_graph(nodes=pd.DataFrame({"name": []}))
        layout = create_layout(graph, "fr")
        assert len(layout) == 0
        assert layout.bounds() == (0.0, 0.0, 0.0, 0.0)


class TestLayouts:
    def test_auto_layout(self):
        layout = create_layout(create_notable("house"))
        assert layout.name == "stress"
        assert layout.data[["x", "y"]].notna().all().all()

    def test_fr_is_reproducible_with_seed(self, small_graph):
        first = create_layout(small_graph, "fr", seed=3).data
        second = create_layout(small_graph, "fr", seed=3).data
        assert first[["x", "y"]].equals(second[["x", "y"]])

    def test_circle_puts_nodes_on_unit_circle(self, small_graph):
        layout = create_layout(small_graph, "circle")
        assert layout.circular
        for x, y in zip(layout.data["x"], layout.data["y"]):
            assert math.hypot(x, y) == pytest.approx(1.0)

    def test_star_centre(self, small_graph):
        layout = create_layout(small_graph, "star", center="c")
        centre = layout.data.set_index("name").loc["c"]
        assert (centre["x"], centre["y"]) == (0.0, 0.0)
        assert layout.circular

    def test_star_unknown_centre(self, small_graph):
        with pytest.raises(LayoutError, match="not a node"):
            create_layout(small_graph, "star", center="zzz")

    def test_shell_must_place_every_node(self, small_graph):
        with pytest.raises(LayoutError, match="3 node\\(s\\) without a position: c, d, e"):
            create_layout(small_graph, "shell", shells=[["a"], ["b"]])

    def test_linear_sort_by(self, small_graph):
        graph = small_graph.mutate(rank=lambda df: -df["score"])
        layout = create_layout(graph, "linear", sort_by="rank")
        positions = dict(zip(layout.data["name"], layout.data["x"]))
        assert positions["e"] == 0.0
        assert positions["a"] == 4.0

    def test_linear_circular(self, small_graph):
        layout = create_layout(small_graph, "linear", circular=True)
        assert layout.circular
        first = layout.data.iloc[0]
        assert first["x"] == pytest.approx(0.0)
        assert first["y"] == pytest.approx(1.0)

    def test_linear_missing_sort_column(self, small_graph):
        with pytest.raises(LayoutError, match="missing column"):
            create_layout(small_graph, "linear", sort_by="rank")

    def test_tree_root_on_top(self):
        graph = create_tree(7)
        layout = create_layout(graph, "tree")
        ys = dict(zip(layout.data["name"], layout.data["y"]))
        assert ys[0] > ys[1] == ys[2] > ys[3]
        assert len(set(ys.values())) == 3

    def test_tree_with_explicit_root(self):
        layout = create_layout(create_notable("house"), "tree", root=4)
        ys = dict(zip(layout.data["name"], layout.data["y"]))
        assert ys[4] == max(ys.values())

    def test_tree_unknown_root(self):
        with pytest.raises(LayoutError, match="not a node"):
            create_layout(create_tree(3), "tree", root=99)

    def test_bipartite(self):
        layout = create_layout(create_notable("davis"), "bipartite", type="bipartite")
        assert set(layout.data["y"]) == {0.0, 1.0}
        top = layout.data[layout.data["y"] == 1.0]
        assert (top["bipartite"] == 1).all()

    def test_bipartite_needs_type_column(self, small_graph):
        with pytest.raises(LayoutError, match="boolean node column"):
            create_layout(small_graph, "bipartite")

    def test_manual(self, small_graph):
        graph = small_graph.mutate(px=[0, 1, 2, 3, 4], py=[4, 3, 2, 1, 0])
        layout = create_layout(graph, "manual", x="px", y="py")
        assert layout.data["x"].tolist() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert layout.data["y"].tolist() == [4.0, 3.0, 2.0, 1.0, 0.0]

    def test_manual_needs_columns(self, small_graph):
        with pytest.raises(LayoutError, match="px"):
            create_layout(small_graph, "manual", x="px")

    def test_grid(self, small_graph):
        layout = create_layout(small_graph, "grid", width=2)
        assert layout.data["x"].tolist() == [0.0, 1.0, 0.0, 1.0, 0.0]
        assert layout.data["y"].tolist() == [0.0, 0.0, -1.0, -1.0, -2.0]

    @pytest.mark.parametrize("name", ["shell", "spectral", "random", "kk"])
    def test_other_layouts_place_every_node(self, name):
        layout = create_layout(create_notable("petersen"), name)
        assert len(layout) == 10
        assert layout.data[["x", "y"]].notna().all().all()
