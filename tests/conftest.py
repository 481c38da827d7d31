"""Shared fixtures for graphgg tests."""

import pandas as pd
import pytest

from graphgg.graph import tbl_graph


@pytest.fixture
def node_table():
    return pd.DataFrame({
        "name": ["a", "b", "c", "d", "e"],
        "group": ["x", "x", "y", "y", "y"],
        "score": [1.0, 2.0, 3.0, 4.0, 5.0],
    })


@pytest.fixture
def edge_table():
    return pd.DataFrame({
        "from": ["a", "a", "b", "c", "d"],
        "to": ["b", "c", "c", "d", "e"],
        "kind": ["near", "far", "near", "far", "near"],
        "weight": [1, 2, 3, 4, 5],
    })


@pytest.fixture
def small_graph(node_table, edge_table):
    """Directed graph with five nodes, five edges and attributes on both."""
    return tbl_graph(nodes=node_table, edges=edge_table)


@pytest.fixture
def multi_graph():
    """Directed multigraph with parallel edges, a reciprocal edge and a loop."""
    edges = pd.DataFrame({
        "from": ["a", "a", "b", "c", "c"],
        "to": ["b", "b", "a", "c", "a"],
    })
    return tbl_graph(edges=edges)


@pytest.fixture
def table_files(tmp_path, node_table, edge_table):
    """Edge and node tables written as CSV files."""
    edges_path = tmp_path / "edges.csv"
    nodes_path = tmp_path / "nodes.csv"
    edge_table.to_csv(edges_path, index=False)
    node_table.to_csv(nodes_path, index=False)
    return edges_path, nodes_path
