"""Tidy graph: a networkx graph viewed as a node table and an edge table.

Nodes are identified by their ``name`` and edges reference them through the
``from`` and ``to`` columns. Every verb returns a new ``TblGraph``; the
wrapped networkx graph of the source object is never modified.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Iterable, Iterator, Sequence

import networkx as nx
import numpy as np
import pandas as pd

from ..errors import GraphError

logger = logging.getLogger(__name__)

NODES = "nodes"
EDGES = "edges"
NODE_KEY = "name"
EDGE_KEYS = ("from", "to")
PAIR_KEY = ".pair"


def to_python(value: Any) -> Any:
    """Convert numpy scalars to plain Python values for networkx attributes."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def is_missing(value: Any) -> bool:
    """Return True for None and float NaN."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def iter_edges(G: nx.Graph) -> Iterator[tuple[tuple, dict[str, Any]]]:
    """Yield ``(edge_id, attrs)`` in networkx iteration order.

    ``edge_id`` is ``(u, v)`` for simple graphs and ``(u, v, key)`` for
    multigraphs. ``attrs`` is the live attribute dict of the edge.
    """
    if G.is_multigraph():
        for u, v, k, d in G.edges(keys=True, data=True):
            yield (u, v, k), d
    else:
        for u, v, d in G.edges(data=True):
            yield (u, v), d


def is_graph_measure(value: Any) -> bool:
    """Return True for callables produced by the algorithm factories."""
    return callable(value) and getattr(value, "graph_measure", False)


class TblGraph:
    """A graph with one active table (nodes or edges)."""

    def __init__(self, graph: nx.Graph, active: str = NODES):
        if active not in (NODES, EDGES):
            raise GraphError(f"Cannot activate '{active}'. Use 'nodes' or 'edges'")
        self._graph = graph
        self._active = active

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def graph(self) -> nx.Graph:
        """The wrapped networkx graph. Treat it as read-only."""
        return self._graph

    @property
    def active(self) -> str:
        return self._active

    @property
    def is_directed(self) -> bool:
        return self._graph.is_directed()

    @property
    def is_multigraph(self) -> bool:
        return self._graph.is_multigraph()

    @property
    def node_names(self) -> list[Any]:
        return list(self._graph.nodes)

    @property
    def nodes(self) -> pd.DataFrame:
        """Node table with ``name`` as the first column."""
        rows = []
        columns = [NODE_KEY]
        for node, attrs in self._graph.nodes(data=True):
            for key in attrs:
                if key not in columns:
                    columns.append(key)
            rows.append({**attrs, NODE_KEY: node})
        return pd.DataFrame(rows, columns=columns)

    @property
    def edges(self) -> pd.DataFrame:
        """Edge table with ``from`` and ``to`` as the first columns."""
        rows = []
        columns = list(EDGE_KEYS)
        for edge_id, attrs in iter_edges(self._graph):
            for key in attrs:
                if key not in columns:
                    columns.append(key)
            rows.append({**attrs, "from": edge_id[0], "to": edge_id[1]})
        return pd.DataFrame(rows, columns=columns)

    def active_table(self) -> pd.DataFrame:
        return self.nodes if self._active == NODES else self.edges

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __repr__(self) -> str:
        G = self._graph
        kind = "directed" if G.is_directed() else "undirected"
        if G.is_multigraph():
            kind += " multigraph"
        table = self.active_table()
        lines = [
            f"# A tbl_graph: {G.number_of_nodes()} nodes and {G.number_of_edges()} edges",
            f"# An {kind}" if kind.startswith("undirected") else f"# A {kind}",
            f"# Active: {self._active}",
        ]
        if not table.empty:
            lines.append(table.head(6).to_string(index=False))
        return "\n".join(lines)

    def to_networkx(self) -> nx.Graph:
        """Return a copy of the wrapped graph."""
        return self._graph.copy()

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def activate(self, what: str) -> "TblGraph":
        """Return the same graph with ``what`` ('nodes' or 'edges') active."""
        return TblGraph(self._graph, active=what)

    def mutate(self, **columns: Any) -> "TblGraph":
        """Add or replace columns of the active table.

        Columns are evaluated in the order given, so a later column can use
        the value of an earlier one.
        """
        reserved = (NODE_KEY,) if self._active == NODES else EDGE_KEYS
        G = self._graph.copy()
        for column, value in columns.items():
            if column in reserved:
                raise GraphError(f"Column '{column}' identifies {self._active} and cannot be mutated")
            current = TblGraph(G, self._active)
            values = current._evaluate(value, column)
            if self._active == NODES:
                for node, item in zip(G.nodes, values):
                    G.nodes[node][column] = to_python(item)
            else:
                for (_, attrs), item in zip(iter_edges(G), values):
                    attrs[column] = to_python(item)
        return TblGraph(G, self._active)

    def filter(self, predicate: Any) -> "TblGraph":
        """Keep the rows of the active table where ``predicate`` holds.

        Removing a node also removes its incident edges.
        """
        mask = self._mask(predicate)
        G = self._graph
        if self._active == NODES:
            keep = [node for node, flag in zip(G.nodes, mask) if flag]
            H = G.subgraph(keep).copy()
        else:
            H = G.copy()
            drop = [edge_id for (edge_id, _), flag in zip(iter_edges(G), mask) if not flag]
            H.remove_edges_from(drop)
        logger.debug("filter kept %d of %d %s", int(sum(mask)), len(mask), self._active)
        return TblGraph(H, self._active)

    def arrange(self, by: str | Sequence[str], ascending: bool = True) -> "TblGraph":
        """Reorder nodes by one or more node columns."""
        if self._active != NODES:
            raise GraphError("Only nodes can be arranged; edge order follows node adjacency")
        table = self.nodes
        keys = [by] if isinstance(by, str) else list(by)
        missing = [key for key in keys if key not in table.columns]
        if missing:
            raise GraphError(f"Cannot arrange by missing column(s): {', '.join(missing)}")
        order = table.sort_values(keys, ascending=ascending, kind="mergesort")[NODE_KEY].tolist()
        G = self._graph
        H = G.__class__()
        H.graph.update(G.graph)
        H.add_nodes_from((node, G.nodes[node]) for node in order)
        if G.is_multigraph():
            H.add_edges_from(G.edges(keys=True, data=True))
        else:
            H.add_edges_from(G.edges(data=True))
        return TblGraph(H, self._active)

    def left_join(self, other: pd.DataFrame, on: str | Sequence[str] | None = None) -> "TblGraph":
        """Join columns of ``other`` onto the active table."""
        if on is None:
            on = [NODE_KEY] if self._active == NODES else list(EDGE_KEYS)
        keys = [on] if isinstance(on, str) else list(on)
        table = self.active_table()
        for key in keys:
            if key not in table.columns or key not in other.columns:
                raise GraphError(f"Join column '{key}' must exist in both tables")
        clashes = [c for c in other.columns if c not in keys and c in table.columns]
        if clashes:
            raise GraphError(f"Joined table repeats existing column(s): {', '.join(clashes)}")
        left, right = table[keys], other
        if self._active == EDGES and not self.is_directed and set(EDGE_KEYS) <= set(keys):
            # Undirected edges match whichever way round their endpoints are given
            left = left.assign(**{PAIR_KEY: _unordered_pairs(left)}).drop(columns=list(EDGE_KEYS))
            right = right.assign(**{PAIR_KEY: _unordered_pairs(right)}).drop(columns=list(EDGE_KEYS))
            keys = [key for key in keys if key not in EDGE_KEYS] + [PAIR_KEY]
        try:
            merged = left.merge(right, on=keys, how="left", validate="many_to_one")
        except pd.errors.MergeError as e:
            raise GraphError(f"Join keys are not unique in the joined table: {e}") from e
        new_columns = {c: merged[c].tolist() for c in right.columns if c not in keys}
        return self.mutate(**new_columns)

    def bind_graphs(self, *others: "TblGraph | nx.Graph") -> "TblGraph":
        """Disjoint union with other graphs. Node names must not clash."""
        graphs = [self._graph]
        for other in others:
            G = other.graph if isinstance(other, TblGraph) else other
            if G.is_directed() != self._graph.is_directed():
                raise GraphError("Cannot bind directed and undirected graphs")
            graphs.append(G)
        if any(G.is_multigraph() for G in graphs):
            graphs = [G if G.is_multigraph() else _as_multigraph(G) for G in graphs]
        try:
            H = nx.union_all(graphs)
        except nx.NetworkXError as e:
            raise GraphError(f"Cannot bind graphs: {e}") from e
        return TblGraph(H, self._active)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _expected_length(self) -> int:
        G = self._graph
        return G.number_of_nodes() if self._active == NODES else G.number_of_edges()

    def _evaluate(self, value: Any, label: str) -> list[Any]:
        n = self._expected_length()
        if is_graph_measure(value):
            value = value(self)
        elif callable(value):
            value = value(self.active_table())

        if isinstance(value, pd.Series):
            values = value.tolist()
        elif isinstance(value, np.ndarray):
            values = value.tolist()
        elif isinstance(value, (list, tuple, range)):
            values = list(value)
        else:
            values = [value] * n

        if len(values) != n:
            raise GraphError(
                f"'{label}' has {len(values)} values but the {self._active} table has {n} rows"
            )
        return values

    def _mask(self, predicate: Any) -> list[bool]:
        if isinstance(predicate, str):
            table = self.active_table()
            if predicate not in table.columns:
                raise GraphError(f"Unknown {self._active} column '{predicate}'")
            predicate = table[predicate]
        values = self._evaluate(predicate, "filter")
        return [False if is_missing(v) else bool(v) for v in values]


def _as_multigraph(G: nx.Graph) -> nx.Graph:
    return nx.MultiDiGraph(G) if G.is_directed() else nx.MultiGraph(G)


def _has_parallel(pairs: Iterable[tuple[Any, Any]], directed: bool) -> bool:
    seen = set()
    for u, v in pairs:
        key = (u, v) if directed else frozenset((u, v))
        if key in seen:
            return True
        seen.add(key)
    return False


def _unordered_pairs(table: pd.DataFrame) -> list[frozenset]:
    return [frozenset((u, v)) for u, v in zip(table["from"], table["to"])]


def _clean_attrs(record: dict[str, Any]) -> dict[str, Any]:
    return {k: to_python(v) for k, v in record.items() if not is_missing(v)}


def tbl_graph(
    nodes: pd.DataFrame | None = None,
    edges: pd.DataFrame | None = None,
    directed: bool = True,
    node_key: str = NODE_KEY,
) -> TblGraph:
    """Build a graph from a node table and an edge table.

    Args:
        nodes: Optional node table; ``node_key`` identifies each node
        edges: Edge table with ``from``/``to`` columns (or the first two
            columns used as endpoints)
        directed: Whether edges are directed
        node_key: Node table column holding the node identifiers

    Returns:
        TblGraph with nodes active

    Raises:
        GraphError: If tables are malformed or edges reference unknown nodes
    """
    if edges is None:
        edges = pd.DataFrame(columns=list(EDGE_KEYS))
    edges = pd.DataFrame(edges)
    if not set(EDGE_KEYS).issubset(edges.columns):
        if edges.shape[1] < 2:
            raise GraphError("Edge table needs 'from' and 'to' columns")
        first, second = edges.columns[:2]
        edges = edges.rename(columns={first: "from", second: "to"})

    pairs = list(zip(edges["from"].tolist(), edges["to"].tolist()))
    if _has_parallel(pairs, directed):
        G = nx.MultiDiGraph() if directed else nx.MultiGraph()
    else:
        G = nx.DiGraph() if directed else nx.Graph()

    if nodes is not None:
        nodes = pd.DataFrame(nodes)
        if node_key not in nodes.columns:
            raise GraphError(f"Node table has no key column '{node_key}'")
        duplicated = nodes[node_key][nodes[node_key].duplicated()].tolist()
        if duplicated:
            raise GraphError(f"Duplicate node keys: {duplicated[:5]}")
        for record in nodes.to_dict("records"):
            key = to_python(record.pop(node_key))
            G.add_node(key, **_clean_attrs(record))
        unknown = {to_python(n) for pair in pairs for n in pair} - set(G.nodes)
        if unknown:
            sample = sorted(map(str, unknown))[:5]
            raise GraphError(f"Edges reference nodes missing from the node table: {sample}")

    for record in edges.to_dict("records"):
        u = to_python(record.pop("from"))
        v = to_python(record.pop("to"))
        G.add_edge(u, v, **_clean_attrs(record))

    logger.debug("Built tbl_graph with %d nodes and %d edges", G.number_of_nodes(), G.number_of_edges())
    return TblGraph(G)


def from_networkx(graph: nx.Graph) -> TblGraph:
    """Wrap a copy of a networkx graph."""
    return TblGraph(graph.copy())


def from_edgelist(pairs: Iterable[Sequence[Any]], directed: bool = True) -> TblGraph:
    """Build a graph from ``(from, to)`` pairs."""
    return tbl_graph(edges=pd.DataFrame(list(pairs), columns=list(EDGE_KEYS)), directed=directed)


def as_tbl_graph(graph: TblGraph | nx.Graph) -> TblGraph:
    """Return ``graph`` as a ``TblGraph``, wrapping networkx graphs."""
    if isinstance(graph, TblGraph):
        return graph
    if isinstance(graph, nx.Graph):
        return from_networkx(graph)
    raise GraphError(f"Expected a TblGraph or networkx graph, got {type(graph).__name__}")


GraphMeasure = Callable[[TblGraph], list[Any]]


__all__ = [
    "TblGraph",
    "GraphMeasure",
    "tbl_graph",
    "from_networkx",
    "from_edgelist",
    "as_tbl_graph",
    "iter_edges",
    "is_graph_measure",
    "NODES",
    "EDGES",
]
