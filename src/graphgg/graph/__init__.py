"""Tidy graph manipulation.

A graph is handled as two related tables (nodes and edges) with verbs
that operate on whichever table is active.
"""

from .tbl_graph import (
    TblGraph,
    tbl_graph,
    from_networkx,
    from_edgelist,
    as_tbl_graph,
)
from .algorithms import (
    centrality_degree,
    centrality_pagerank,
    centrality_betweenness,
    centrality_closeness,
    centrality_eigen,
    group_components,
    group_louvain,
    group_greedy_modularity,
    group_label_propagation,
    node_is_isolated,
    node_is_source,
    node_is_sink,
    edge_is_loop,
    edge_is_multiple,
    edge_is_mutual,
)

__all__ = [
    "TblGraph",
    "tbl_graph",
    "from_networkx",
    "from_edgelist",
    "as_tbl_graph",
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
]
