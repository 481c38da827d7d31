"""Node and edge measures for use with ``TblGraph.mutate`` and ``filter``.

Each factory returns a callable that is evaluated against the graph and
yields one value per row of the active table::

    graph.mutate(degree=centrality_degree(), group=group_louvain(seed=1))

All computations are delegated to networkx.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Iterable

import networkx as nx

from ..errors import GraphError
from .tbl_graph import EDGES, NODES, TblGraph, iter_edges


def _simple(G: nx.Graph) -> nx.Graph:
    """Collapse parallel edges, which several networkx algorithms reject."""
    if not G.is_multigraph():
        return G
    return nx.DiGraph(G) if G.is_directed() else nx.Graph(G)


def _measure(table: str) -> Callable:
    """Turn ``func(G, *args, **kwargs)`` into a factory of graph measures.

    Node measures return a ``{node: value}`` dict; edge measures return a list
    aligned with the edge table.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def factory(*args: Any, **kwargs: Any) -> Callable[[TblGraph], list[Any]]:
            def measure(graph: TblGraph) -> list[Any]:
                if graph.active != table:
                    raise GraphError(
                        f"{func.__name__} needs {table} to be active, not {graph.active}"
                    )
                G = graph.graph
                values = func(G, *args, **kwargs)
                if table == NODES:
                    return [values.get(node) for node in G.nodes]
                return list(values)

            measure.graph_measure = True
            measure.__name__ = func.__name__
            return measure

        return factory

    return decorator


def _label_groups(G: nx.Graph, communities: Iterable[Iterable[Any]]) -> dict[Any, int]:
    """Number groups from 1 by size (largest first), ties by first node."""
    position = {node: i for i, node in enumerate(G.nodes)}
    groups = [set(c) for c in communities if c]
    groups.sort(key=lambda c: (-len(c), min(position[n] for n in c)))
    labels: dict[Any, int] = {}
    for index, members in enumerate(groups, 1):
        for node in members:
            labels[node] = index
    return labels


# =============================================================================
# Centrality
# =============================================================================

@_measure(NODES)
def centrality_degree(G, mode: str = "all", weights: str | None = None, normalized: bool = False):
    """Number (or total weight) of edges incident to each node.

    Args:
        mode: 'all', 'in' or 'out'. Ignored for undirected graphs.
        weights: Edge attribute to sum instead of counting edges
        normalized: Divide by ``n - 1``
    """
    if mode not in ("all", "in", "out"):
        raise GraphError(f"Unknown degree mode '{mode}'. Use 'all', 'in' or 'out'")
    if mode == "all" or not G.is_directed():
        degree = G.degree(weight=weights)
    elif mode == "in":
        degree = G.in_degree(weight=weights)
    else:
        degree = G.out_degree(weight=weights)
    values = dict(degree)
    if normalized and len(G) > 1:
        values = {node: value / (len(G) - 1) for node, value in values.items()}
    return values


@_measure(NODES)
def centrality_pagerank(G, weights: str | None = None, damping: float = 0.85):
    """PageRank score of each node."""
    if len(G) == 0:
        return {}
    return nx.pagerank(G, alpha=damping, weight=weights)


@_measure(NODES)
def centrality_betweenness(G, weights: str | None = None, normalized: bool = True):
    """Share of shortest paths passing through each node."""
    return nx.betweenness_centrality(_simple(G), normalized=normalized, weight=weights)


@_measure(NODES)
def centrality_closeness(G):
    return nx.closeness_centrality(_simple(G))


@_measure(NODES)
def centrality_eigen(G, weights: str | None = None):
    """Eigenvector centrality (numpy solver)."""
    if len(G) == 0:
        return {}
    return nx.eigenvector_centrality_numpy(_simple(G), weight=weights)


# =============================================================================
# Grouping
# =============================================================================

@_measure(NODES)
def group_components(G):
    """Connected components (weakly connected for directed graphs)."""
    if G.is_directed():
        return _label_groups(G, nx.weakly_connected_components(G))
    return _label_groups(G, nx.connected_components(G))


@_measure(NODES)
def group_louvain(G, weights: str | None = None, resolution: float = 1.0, seed: int | None = None):
    """Communities found by Louvain modularity optimisation."""
    communities = nx.community.louvain_communities(
        _simple(G), weight=weights, resolution=resolution, seed=seed
    )
    return _label_groups(G, communities)


@_measure(NODES)
def group_greedy_modularity(G, weights: str | None = None):
    """Communities found by Clauset-Newman-Moore greedy modularity."""
    H = _simple(G)
    if H.number_of_edges() == 0:
        return _label_groups(G, ({node} for node in G.nodes))
    return _label_groups(G, nx.community.greedy_modularity_communities(H, weight=weights))


@_measure(NODES)
def group_label_propagation(G):
    """Communities found by semi-synchronous label propagation."""
    H = _simple(G).to_undirected()
    return _label_groups(G, nx.community.label_propagation_communities(H))


# =============================================================================
# Node predicates
# =============================================================================

@_measure(NODES)
def node_is_isolated(G):
    return {node: G.degree(node) == 0 for node in G.nodes}


@_measure(NODES)
def node_is_source(G):
    """Nodes with outgoing but no incoming edges. Always False when undirected."""
    if not G.is_directed():
        return {node: False for node in G.nodes}
    return {node: G.in_degree(node) == 0 and G.out_degree(node) > 0 for node in G.nodes}


@_measure(NODES)
def node_is_sink(G):
    """Nodes with incoming but no outgoing edges. Always False when undirected."""
    if not G.is_directed():
        return {node: False for node in G.nodes}
    return {node: G.out_degree(node) == 0 and G.in_degree(node) > 0 for node in G.nodes}


# =============================================================================
# Edge predicates
# =============================================================================

@_measure(EDGES)
def edge_is_loop(G):
    return [edge_id[0] == edge_id[1] for edge_id, _ in iter_edges(G)]


@_measure(EDGES)
def edge_is_multiple(G):
    """True for the second and later edges between the same pair of nodes."""
    seen = set()
    flags = []
    for edge_id, _ in iter_edges(G):
        u, v = edge_id[0], edge_id[1]
        pair = (u, v) if G.is_directed() else frozenset((u, v))
        flags.append(pair in seen)
        seen.add(pair)
    return flags


@_measure(EDGES)
def edge_is_mutual(G):
    """True when the reverse edge exists. Always True when undirected."""
    if not G.is_directed():
        return [True] * G.number_of_edges()
    return [G.has_edge(edge_id[1], edge_id[0]) for edge_id, _ in iter_edges(G)]


CENTRALITIES = {
    "degree": centrality_degree,
    "pagerank": centrality_pagerank,
    "betweenness": centrality_betweenness,
    "closeness": centrality_closeness,
    "eigen": centrality_eigen,
}

GROUPINGS = {
    "components": group_components,
    "louvain": group_louvain,
    "greedy_modularity": group_greedy_modularity,
    "label_propagation": group_label_propagation,
}


__all__ = [
    "centrality_degree",
    "centrality_pagerank",
    "centrality_betweenness",
    "centrality_closeness",
    "centrality_eigen",
    "group_components",
    "group_louvain",
    "group_greedy_modularity",
    "group_label_propagation",
    "node_is_isolated",
    "node_is_source",
    "node_is_sink",
    "edge_is_loop",
    "edge_is_multiple",
    "edge_is_mutual",
    "CENTRALITIES",
    "GROUPINGS",
]
