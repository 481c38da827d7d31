"""Layout objects: node coordinates joined with node and edge data."""

from __future__ import annotations

import inspect
import logging
from typing import Any

import networkx as nx
import pandas as pd

from ..errors import LayoutError
from ..graph.tbl_graph import TblGraph, as_tbl_graph
from .algorithms import CIRCULAR_LAYOUTS, LAYOUTS, resolve_layout_name

logger = logging.getLogger(__name__)


class Layout:
    """Node positions for a graph.

    ``data`` is the node table with ``x`` and ``y`` prepended; ``edges()``
    adds endpoint coordinates and ``node1.``/``node2.`` prefixed node columns
    to the edge table.
    """

    def __init__(self, graph: TblGraph, data: pd.DataFrame, name: str, circular: bool = False):
        self.graph = graph
        self.data = data
        self.name = name
        self.circular = circular

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"<Layout '{self.name}': {len(self.data)} nodes{' (circular)' if self.circular else ''}>"

    def nodes(self) -> pd.DataFrame:
        return self.data.copy()

    def edges(self) -> pd.DataFrame:
        edges = self.graph.edges
        node1 = self.data.add_prefix("node1.")
        node2 = self.data.add_prefix("node2.")
        merged = edges.merge(node1, how="left", left_on="from", right_on="node1.name")
        merged = merged.merge(node2, how="left", left_on="to", right_on="node2.name")
        merged = merged.drop(columns=[c for c in ("x", "y", "xend", "yend") if c in merged.columns])
        merged.insert(2, "x", merged["node1.x"])
        merged.insert(3, "y", merged["node1.y"])
        merged.insert(4, "xend", merged["node2.x"])
        merged.insert(5, "yend", merged["node2.y"])
        return merged

    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(xmin, xmax, ymin, ymax)``; zeros for an empty layout."""
        if self.data.empty:
            return 0.0, 0.0, 0.0, 0.0
        return (
            float(self.data["x"].min()),
            float(self.data["x"].max()),
            float(self.data["y"].min()),
            float(self.data["y"].max()),
        )


def create_layout(graph: TblGraph | nx.Graph, layout: str = "auto", **params: Any) -> Layout:
    """Compute node positions with a named layout.

    Args:
        graph: Graph to lay out
        layout: Layout name (see ``list_layouts()``)
        **params: Layout-specific parameters

    Returns:
        Layout with one row per node

    Raises:
        LayoutError: If the layout is unknown, parameters are invalid, the
            layout cannot be computed for this graph or it leaves nodes
            without a position
    """
    tg = as_tbl_graph(graph)
    name = resolve_layout_name(layout)
    func = LAYOUTS[name]
    G = tg.graph
    nodes = tg.nodes

    try:
        inspect.signature(func).bind(G, nodes, **params)
    except TypeError as e:
        raise LayoutError(f"Invalid parameters for layout '{name}': {e}") from e

    logger.debug("Computing '%s' layout for %d nodes", name, len(G))
    try:
        positions = func(G, nodes, **params)
    except nx.NetworkXException as e:
        raise LayoutError(f"Layout '{name}' failed: {e}") from e

    unplaced = [node for node in G.nodes if node not in positions]
    if unplaced:
        sample = ", ".join(map(str, unplaced[:5]))
        raise LayoutError(f"Layout '{name}' left {len(unplaced)} node(s) without a position: {sample}")

    data = nodes.drop(columns=[c for c in ("x", "y") if c in nodes.columns])
    data.insert(0, "x", [float(positions[node][0]) for node in data["name"]])
    data.insert(1, "y", [float(positions[node][1]) for node in data["name"]])
    circular = name in CIRCULAR_LAYOUTS or bool(params.get("circular", False))
    return Layout(tg, data, name, circular=circular)


__all__ = ["Layout", "create_layout"]
