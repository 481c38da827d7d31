"""Facets: split a network plot into panels by a grouping variable.

The layout is computed once for the whole graph, so a node keeps the same
position in every panel it appears in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from ..errors import PlotError
from ..layouts import Layout
from .scales import discrete_levels


@dataclass
class Panel:
    """Rows of the node and edge tables shown in one subplot."""

    title: str | None
    row: int
    col: int
    nodes: np.ndarray
    edges: np.ndarray


def _grid(count: int, ncol: int | None) -> tuple[int, int]:
    if count == 0:
        return 1, 1
    ncol = ncol or math.ceil(math.sqrt(count))
    ncol = min(ncol, count)
    return math.ceil(count / ncol), ncol


def _column(data: pd.DataFrame, column: str, table: str) -> pd.Series:
    if column not in data.columns:
        raise PlotError(f"Cannot facet by '{column}': no such {table} column")
    return data[column]


def _endpoints_in(edges: pd.DataFrame, node_names: set[Any]) -> np.ndarray:
    return np.array(
        [a in node_names and b in node_names for a, b in zip(edges["from"], edges["to"])],
        dtype=bool,
    )


class Facet:
    """No facetting: a single panel showing everything."""

    def panels(self, layout: Layout) -> list[Panel]:
        edges = layout.graph.edges
        return [Panel(None, 1, 1, np.ones(len(layout.data), dtype=bool), np.ones(len(edges), dtype=bool))]

    def shape(self, panels: list[Panel]) -> tuple[int, int]:
        return max(p.row for p in panels), max(p.col for p in panels)


class FacetNodes(Facet):
    """One panel per node group; edges shown when both ends are in the panel."""

    def __init__(self, by: str, ncol: int | None = None):
        self.by = by
        self.ncol = ncol

    def panels(self, layout: Layout) -> list[Panel]:
        nodes = layout.data
        edges = layout.graph.edges
        series = _column(nodes, self.by, "node")
        levels = discrete_levels(series)
        _, ncol = _grid(len(levels), self.ncol)
        panels = []
        for i, level in enumerate(levels):
            mask = (series == level).to_numpy()
            names = set(nodes.loc[mask, "name"])
            panels.append(Panel(
                f"{self.by} = {level}", i // ncol + 1, i % ncol + 1, mask, _endpoints_in(edges, names)
            ))
        return panels


class FacetEdges(Facet):
    """One panel per edge group; every node is shown in every panel."""

    def __init__(self, by: str, ncol: int | None = None):
        self.by = by
        self.ncol = ncol

    def panels(self, layout: Layout) -> list[Panel]:
        edges = layout.graph.edges
        series = _column(edges, self.by, "edge")
        levels = discrete_levels(series)
        _, ncol = _grid(len(levels), self.ncol)
        all_nodes = np.ones(len(layout.data), dtype=bool)
        return [
            Panel(f"{self.by} = {level}", i // ncol + 1, i % ncol + 1, all_nodes, (series == level).to_numpy())
            for i, level in enumerate(levels)
        ]


class FacetGraph(Facet):
    """Grid of panels with rows and columns taken from node or edge columns."""

    def __init__(self, row: str | None = None, col: str | None = None, row_type: str = "edge", col_type: str = "node"):
        if row is None and col is None:
            raise PlotError("facet_graph needs a row or a col variable")
        for kind in (row_type, col_type):
            if kind not in ("node", "edge"):
                raise PlotError(f"Facet type must be 'node' or 'edge', got '{kind}'")
        self.row = row
        self.col = col
        self.row_type = row_type
        self.col_type = col_type

    def _dimension(self, layout: Layout, column: str | None, kind: str) -> list[tuple[Any, pd.Series | None]]:
        if column is None:
            return [(None, None)]
        data = layout.data if kind == "node" else layout.graph.edges
        series = _column(data, column, kind)
        return [(level, series) for level in discrete_levels(series)]

    def panels(self, layout: Layout) -> list[Panel]:
        nodes = layout.data
        edges = layout.graph.edges
        panels = []
        for r, (row_level, row_series) in enumerate(self._dimension(layout, self.row, self.row_type), 1):
            for c, (col_level, col_series) in enumerate(self._dimension(layout, self.col, self.col_type), 1):
                node_mask = np.ones(len(nodes), dtype=bool)
                edge_mask = np.ones(len(edges), dtype=bool)
                titles = []
                node_facet = False
                for column, level, series, kind in (
                    (self.row, row_level, row_series, self.row_type),
                    (self.col, col_level, col_series, self.col_type),
                ):
                    if column is None:
                        continue
                    titles.append(f"{column} = {level}")
                    if kind == "node":
                        node_mask &= (series == level).to_numpy()
                        node_facet = True
                    else:
                        edge_mask &= (series == level).to_numpy()
                if node_facet:
                    edge_mask &= _endpoints_in(edges, set(nodes.loc[node_mask, "name"]))
                panels.append(Panel(", ".join(titles), r, c, node_mask, edge_mask))
        return panels


def facet_nodes(by: str, ncol: int | None = None) -> FacetNodes:
    return FacetNodes(by, ncol)


def facet_edges(by: str, ncol: int | None = None) -> FacetEdges:
    return FacetEdges(by, ncol)


def facet_graph(row: str | None = None, col: str | None = None, row_type: str = "edge", col_type: str = "node") -> FacetGraph:
    """Facet rows and columns by edge and/or node variables."""
    return FacetGraph(row, col, row_type, col_type)


__all__ = ["Panel", "Facet", "FacetNodes", "FacetEdges", "FacetGraph", "facet_nodes", "facet_edges", "facet_graph"]
