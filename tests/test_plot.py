"""Tests for the plot object, geoms, scales and facets."""

import json

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import pytest
from pydantic import ValidationError

from graphgg.datasets import create_notable
from graphgg.errors import PlotError
from graphgg.graph import from_edgelist
from graphgg.layouts import create_layout
from graphgg.plot import (
    aes,
    facet_edges,
    facet_graph,
    facet_nodes,
    factor,
    geom_edge_arc,
    geom_edge_fan,
    geom_edge_link,
    geom_edge_loop,
    geom_node_label,
    geom_node_point,
    geom_node_text,
    ggraph,
    labs,
    theme_graph,
)
from graphgg.plot.geom_edges import curved
from graphgg.plot.scales import ColourScale, map_cycle, map_numeric, rescale


def _line_traces(fig):
    return [t for t in fig.data if t.mode == "lines"]


def _marker_traces(fig):
    return [t for t in fig.data if t.mode == "markers" and t.marker.opacity != 0]


class TestAes:
    def test_aliases(self):
        assert aes(color="group") == {"colour": "group"}
        assert aes(edge_width="weight", edge_alpha="w") == {"width": "weight", "alpha": "w"}

    def test_aes_values_must_be_columns(self):
        with pytest.raises(PlotError, match="column name"):
            aes(size=3)

    def test_factor_is_a_column_name(self):
        mapping = aes(colour=factor("score"))
        assert mapping["colour"] == "score"
        assert repr(mapping["colour"]) == "factor('score')"

    def test_unknown_aesthetic_for_geom(self):
        with pytest.raises(PlotError, match="does not understand"):
            geom_node_point(aes(label="name"))

    def test_required_aesthetic(self):
        with pytest.raises(PlotError, match="requires"):
            geom_node_text()


class TestScales:
    def test_rescale(self):
        assert rescale([1, 2, 3], (0.0, 10.0)) == [0.0, 5.0, 10.0]

    def test_rescale_constant_and_missing(self):
        assert rescale([2, 2], (0.0, 10.0)) == [5.0, 5.0]
        assert rescale([1, None, 3], (0.0, 10.0)) == [0.0, 0.0, 10.0]

    def test_map_numeric_discrete_levels(self):
        series = pd.Series(["b", "a", "c", "a"])
        assert map_numeric(series, "g", (0.0, 2.0)) == [1.0, 0.0, 2.0, 0.0]

    def test_map_cycle(self):
        series = pd.Series(["x", "y", "z"])
        assert map_cycle(series, ["p", "q"]) == ["p", "q", "p"]

    def test_colour_scale_discrete(self):
        theme = theme_graph()
        series = pd.Series(["y", "x", None])
        scale = ColourScale.train(series, "group", theme)
        assert scale.discrete
        assert scale.levels == ["x", "y"]
        colours = scale.colours(series)
        assert colours[0] == theme.palette[1]
        assert colours[1] == theme.palette[0]
        assert colours[2] == theme.na_colour

    def test_colour_scale_continuous(self):
        scale = ColourScale.train(pd.Series([0.0, 5.0, 10.0]), "score", theme_graph())
        assert not scale.discrete
        assert (scale.vmin, scale.vmax) == (0.0, 10.0)
        assert len(set(scale.colours(pd.Series([0.0, 10.0])))) == 2


class TestComposition:
    def test_adding_returns_new_plot(self, small_graph):
        base = ggraph(small_graph, layout="circle")
        plot = base + geom_edge_link()
        assert base.geoms == []
        assert len(plot.geoms) == 1

    def test_layout_is_shared_between_copies(self, small_graph):
        base = ggraph(small_graph, layout="fr", seed=1)
        plot = base + geom_edge_link() + geom_node_point()
        assert plot.layout is base.layout

    def test_add_list_of_components(self, small_graph):
        plot = ggraph(small_graph) + [geom_edge_link(), geom_node_point(), labs(title="T")]
        assert len(plot.geoms) == 2
        assert plot.labels.title == "T"

    def test_labels_merge(self, small_graph):
        plot = ggraph(small_graph) + labs(title="T") + labs(subtitle="S")
        assert (plot.labels.title, plot.labels.subtitle) == ("T", "S")

    def test_unknown_component(self, small_graph):
        with pytest.raises(TypeError):
            ggraph(small_graph) + 3

    def test_plot_from_layout(self, small_graph):
        layout = create_layout(small_graph, "circle")
        plot = ggraph(layout)
        assert plot.layout is layout
        assert plot.layout_name == "circle"


class TestBuild:
    def test_edges_then_nodes(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point() + geom_edge_link()).build()
        assert isinstance(fig, go.Figure)
        assert fig.data[0].mode == "lines"
        assert fig.data[-1].mode == "markers"
        assert len(fig.data[-1].x) == 5

    def test_edge_lines_are_separated(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_edge_link()).build()
        lines = _line_traces(fig)
        assert len(lines) == 1
        assert len(lines[0].x) == 15
        assert list(lines[0].x).count(None) == 5

    def test_missing_column(self, small_graph):
        plot = ggraph(small_graph, layout="circle") + geom_node_point(aes(colour="nope"))
        with pytest.raises(PlotError, match="Column 'nope' mapped to 'colour'"):
            plot.build()

    def test_discrete_colour_legend(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point(aes(colour="group"))).build()
        points = _marker_traces(fig)
        assert [t.name for t in points] == ["x", "y"]
        assert all(t.showlegend for t in points)
        assert fig.layout.showlegend
        assert fig.layout.legend.title.text == "group"

    def test_continuous_colour_bar(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point(aes(colour="score"))).build()
        points = _marker_traces(fig)
        assert len(points) == 1
        assert points[0].marker.showscale
        assert list(points[0].marker.color) == [1.0, 2.0, 3.0, 4.0, 5.0]

    def test_fill_sets_marker_and_colour_sets_outline(self, small_graph):
        plot = ggraph(small_graph, layout="circle") + geom_node_point(aes(fill="group", colour="score"))
        fig = plot.build()
        points = _marker_traces(fig)
        assert [t.name for t in points] == ["x", "y"]
        assert fig.layout.legend.title.text == "group"
        outlines = [c for t in points for c in t.marker.line.color]
        assert len(set(outlines)) == 5

    def test_constant_fill_and_outline(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point(fill="red", colour="black")).build()
        point = _marker_traces(fig)[0]
        assert set(point.marker.color) == {"red"}
        assert set(point.marker.line.color) == {"black"}

    def test_factor_makes_colour_discrete(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point(aes(colour=factor("score")))).build()
        assert len(_marker_traces(fig)) == 5

    def test_size_mapping_uses_size_range(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point(aes(size="score"))).build()
        sizes = list(_marker_traces(fig)[0].marker.size)
        assert min(sizes) == 6.0
        assert max(sizes) == 24.0

    def test_node_filter_aesthetic(self, small_graph):
        graph = small_graph.mutate(show=[True, False, True, False, True])
        fig = (ggraph(graph, layout="circle") + geom_node_point(aes(filter="show"))).build()
        assert len(_marker_traces(fig)[0].x) == 3

    def test_edge_colour_by_column(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_edge_link(aes(colour="kind"))).build()
        assert sorted(t.name for t in _line_traces(fig)) == ["far", "near"]

    def test_edge_colour_by_endpoint(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_edge_link(aes(colour="node1.group"))).build()
        assert sorted(t.name for t in _line_traces(fig)) == ["x", "y"]

    def test_edge_width_mapping(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_edge_link(aes(width="weight"))).build()
        widths = sorted(t.line.width for t in _line_traces(fig))
        assert widths[0] == 0.5
        assert widths[-1] == 4.0

    def test_arrows(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_edge_link(arrow=True)).build()
        arrows = [a for a in fig.layout.annotations if a.showarrow]
        assert len(arrows) == 5

    def test_text_and_label(self, small_graph):
        plot = (
            ggraph(small_graph, layout="circle")
            + geom_node_text(aes(label="name"))
            + geom_node_label(aes(label="group"), fill="yellow")
        )
        fig = plot.build()
        text = [t for t in fig.data if t.mode == "text"]
        assert list(text[0].text) == ["a", "b", "c", "d", "e"]
        labels = [a for a in fig.layout.annotations if a.bgcolor == "yellow"]
        assert [a.text for a in labels] == ["x", "x", "y", "y", "y"]

    def test_edge_labels(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_edge_link(aes(label="kind"))).build()
        text = [t for t in fig.data if t.mode == "text"]
        assert list(text[0].text) == ["near", "far", "near", "far", "near"]

    def test_title_and_theme(self, small_graph):
        plot = ggraph(small_graph) + labs(title="Net", subtitle="small") + theme_graph(dark_mode=True)
        fig = (plot + geom_node_point()).build()
        assert "Net" in fig.layout.title.text
        assert "small" in fig.layout.title.text
        assert fig.layout.paper_bgcolor == "#0f172a"

    def test_equal_axis_scaling(self, small_graph):
        fig = (ggraph(small_graph, layout="circle") + geom_node_point()).build()
        assert fig.layout.yaxis.scaleanchor == "x"
        assert fig.layout.xaxis.visible is False

    def test_axis_range_covers_arcs(self):
        graph = from_edgelist([(i, i + 1) for i in range(9)] + [(0, 9)])
        fig = (ggraph(graph, layout="linear") + geom_edge_arc() + geom_node_point()).build()
        low, high = fig.layout.yaxis.range
        for trace in _line_traces(fig):
            ys = [y for y in trace.y if y is not None]
            assert low <= min(ys)
            assert max(ys) <= high
        assert high - low > 4.0

    def test_axis_range_covers_loops(self, multi_graph):
        fig = (ggraph(multi_graph, layout="circle") + geom_edge_loop(loop_size=0.5) + geom_node_point()).build()
        (x_low, x_high), (y_low, y_high) = fig.layout.xaxis.range, fig.layout.yaxis.range
        loop = _line_traces(fig)[0]
        assert all(x_low <= x <= x_high for x in loop.x if x is not None)
        assert all(y_low <= y <= y_high for y in loop.y if y is not None)


class TestEdgeGeoms:
    def test_curved_bends_left(self):
        xs, ys = curved(0.0, 0.0, 1.0, 0.0, 1.0, n=3)
        assert xs[1] == pytest.approx(0.5)
        assert ys[1] == pytest.approx(0.5)

    def test_curved_without_offset_is_straight(self):
        assert curved(0.0, 0.0, 1.0, 1.0, 0.0) == ([0.0, 1.0], [0.0, 1.0])

    def test_link_skips_loops(self, multi_graph):
        layout = create_layout(multi_graph, "circle")
        resolved = geom_edge_link().resolve(layout, theme_graph())
        assert resolved.frame["keep"].tolist() == [True, True, True, False, True]

    def test_loop_draws_only_loops(self, multi_graph):
        fig = (ggraph(multi_graph, layout="circle") + geom_edge_loop()).build()
        lines = _line_traces(fig)
        assert len(lines) == 1
        assert len(lines[0].x) == 41

    def test_fan_spreads_parallel_edges(self, multi_graph):
        layout = create_layout(multi_graph, "circle")
        frame = geom_edge_fan().resolve(layout, theme_graph()).frame
        first, middle, reverse = frame["path_x"][0], frame["path_x"][1], frame["path_x"][2]
        assert len(middle) == 2
        assert len(first) == len(reverse) == 40
        mids = [(frame["mid_x"][i], frame["mid_y"][i]) for i in (0, 2)]
        assert mids[0] != pytest.approx(mids[1])

    def test_arc_diagram(self, small_graph):
        layout = create_layout(small_graph, "linear")
        frame = geom_edge_arc().resolve(layout, theme_graph()).frame
        assert all(len(path) == 40 for path in frame["path_y"])
        assert all(abs(y) > 0 for y in frame["mid_y"])

    def test_arcs_bend_inwards_on_circles(self, small_graph):
        layout = create_layout(small_graph, "circle")
        frame = geom_edge_arc().resolve(layout, theme_graph()).frame
        for x, y in zip(frame["mid_x"], frame["mid_y"]):
            assert np.hypot(x, y) < 1.0


class TestFacets:
    def test_facet_nodes_panels(self, small_graph):
        layout = create_layout(small_graph, "circle")
        panels = facet_nodes("group").panels(layout)
        assert [p.title for p in panels] == ["group = x", "group = y"]
        assert panels[0].nodes.tolist() == [True, True, False, False, False]
        assert int(panels[0].edges.sum()) == 1
        assert int(panels[1].edges.sum()) == 2

    def test_facet_edges_panels(self, small_graph):
        layout = create_layout(small_graph, "circle")
        panels = facet_edges("kind").panels(layout)
        assert [p.title for p in panels] == ["kind = far", "kind = near"]
        assert all(p.nodes.all() for p in panels)
        assert [int(p.edges.sum()) for p in panels] == [2, 3]

    def test_facet_grid(self, small_graph):
        layout = create_layout(small_graph, "circle")
        panels = facet_graph(row="kind", col="group").panels(layout)
        assert [(p.row, p.col) for p in panels] == [(1, 1), (1, 2), (2, 1), (2, 2)]
        far_y = panels[1]
        assert far_y.title == "kind = far, group = y"
        assert int(far_y.edges.sum()) == 1

    def test_facet_ncol(self, small_graph):
        layout = create_layout(small_graph, "circle")
        panels = facet_nodes("name", ncol=2).panels(layout)
        assert [(p.row, p.col) for p in panels][-1] == (3, 1)

    def test_missing_values_are_not_a_panel(self, small_graph):
        graph = small_graph.mutate(team=["red", None, "red", None, "blue"])
        panels = facet_nodes("team").panels(create_layout(graph, "circle"))
        assert [p.title for p in panels] == ["team = blue", "team = red"]

    def test_facet_graph_needs_a_variable(self):
        with pytest.raises(PlotError, match="row or a col"):
            facet_graph()

    def test_facet_graph_type(self):
        with pytest.raises(PlotError, match="'node' or 'edge'"):
            facet_graph(row="kind", row_type="face")

    def test_facet_missing_column(self, small_graph):
        plot = ggraph(small_graph, layout="circle") + geom_node_point() + facet_nodes("nope")
        with pytest.raises(PlotError, match="no such node column"):
            plot.build()

    def test_facetted_figure(self, small_graph):
        plot = (
            ggraph(small_graph, layout="circle")
            + geom_edge_link()
            + geom_node_point(aes(colour="group"))
            + facet_edges("kind")
        )
        fig = plot.build()
        titles = [a.text for a in fig.layout.annotations]
        assert titles == ["kind = far", "kind = near"]
        assert fig.layout.xaxis2 is not None
        assert fig.layout.yaxis2.scaleanchor == "x2"
        # each legend entry appears once across panels
        shown = [t.name for t in fig.data if t.showlegend]
        assert sorted(shown) == ["x", "y"]

    def test_empty_facet(self, small_graph):
        graph = small_graph.mutate(team=None)
        plot = ggraph(graph, layout="circle") + geom_node_point() + facet_nodes("team")
        with pytest.raises(PlotError, match="no panels"):
            plot.build()


class TestSave:
    def test_save_html(self, small_graph, tmp_path):
        path = (ggraph(small_graph) + geom_node_point()).save(tmp_path / "out" / "plot.html")
        assert path.exists()
        assert "plotly" in path.read_text(encoding="utf-8").lower()

    def test_save_json(self, small_graph, tmp_path):
        path = (ggraph(small_graph) + geom_node_point()).save(tmp_path / "plot.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert "data" in data

    def test_unsupported_format(self, small_graph, tmp_path):
        with pytest.raises(PlotError, match="Unsupported output format"):
            (ggraph(small_graph) + geom_node_point()).save(tmp_path / "plot.png")


class TestTheme:
    def test_dark_mode(self):
        assert theme_graph(dark_mode=True).background == "#0f172a"
        assert theme_graph().background == "white"

    def test_overrides(self):
        theme = theme_graph(width=400, colorscale="Viridis")
        assert (theme.width, theme.colorscale) == (400, "Viridis")

    def test_theme_is_frozen(self):
        theme = theme_graph()
        with pytest.raises(ValidationError):
            theme.width = 10

    def test_notable_graph_plot(self):
        fig = (ggraph(create_notable("zachary"), layout="fr") + geom_edge_link() + geom_node_point()).build()
        assert len(_marker_traces(fig)[0].x) == 34
