"""Grammar-of-graphics network visualization.

A graph is handled as a node table and an edge table, laid out with
networkx layouts, and drawn with plotly through composable layers:

    from graphgg import aes, create_notable, geom_edge_link, geom_node_point, ggraph
    from graphgg.graph import group_louvain

    graph = create_notable("zachary").mutate(group=group_louvain(seed=1))
    plot = ggraph(graph, layout="fr") + geom_edge_link() + geom_node_point(aes(colour="group"))
    plot.save("karate.html")

Command-line interface:
    python -m graphgg plot --notable zachary --communities
    python -m graphgg convert --input edges.csv --nodes nodes.csv
    python -m graphgg visualize --input outputs/graphml
"""

from __future__ import annotations

from typing import Any

from .errors import GraphError, GraphggError, LayoutError, PlotError
from .graph import TblGraph, from_edgelist, from_networkx, tbl_graph
from .plot import (
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

__all__ = [
    # Tidy graph
    "TblGraph",
    "tbl_graph",
    "from_networkx",
    "from_edgelist",
    # Layouts
    "create_layout",
    "list_layouts",
    # Grammar of graphics
    "ggraph",
    "aes",
    "factor",
    "geom_node_point",
    "geom_node_text",
    "geom_node_label",
    "geom_edge_link",
    "geom_edge_arc",
    "geom_edge_fan",
    "geom_edge_loop",
    "facet_nodes",
    "facet_edges",
    "facet_graph",
    "labs",
    "theme_graph",
    # Data
    "create_notable",
    "read_graph",
    "write_graph",
    # Quick plots
    "visualize_graph",
    # Errors
    "GraphggError",
    "GraphError",
    "LayoutError",
    "PlotError",
]


def create_layout(*args: Any, **kwargs: Any) -> Any:
    """Compute node positions with a named layout."""
    from .layouts import create_layout as _impl
    return _impl(*args, **kwargs)


def list_layouts(*args: Any, **kwargs: Any) -> Any:
    """List available layout names."""
    from .layouts import list_layouts as _impl
    return _impl(*args, **kwargs)


def create_notable(*args: Any, **kwargs: Any) -> Any:
    """Create a well-known graph by name."""
    from .datasets import create_notable as _impl
    return _impl(*args, **kwargs)


def read_graph(*args: Any, **kwargs: Any) -> Any:
    """Read a graph file."""
    from .converters import read_graph as _impl
    return _impl(*args, **kwargs)


def write_graph(*args: Any, **kwargs: Any) -> Any:
    """Write a graph file."""
    from .converters import write_graph as _impl
    return _impl(*args, **kwargs)


def visualize_graph(*args: Any, **kwargs: Any) -> Any:
    """Create a one-call interactive network plot."""
    from .visualization import visualize_graph as _impl
    return _impl(*args, **kwargs)
