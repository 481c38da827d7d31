"""Layout registry.

Each layout maps ``(G, nodes, **params)`` to ``{node: (x, y)}``. The
placement algorithms themselves come from networkx; the functions here only
pick parameters and arrange the results.
"""

from __future__ import annotations

import math
from typing import Any, Callable

import networkx as nx
import pandas as pd

from ..errors import LayoutError

LayoutFunc = Callable[..., dict[Any, tuple[float, float]]]

LAYOUTS: dict[str, LayoutFunc] = {}
ALIASES: dict[str, str] = {}
CIRCULAR_LAYOUTS = {"circle", "star"}


def register_layout(name: str, *aliases: str) -> Callable[[LayoutFunc], LayoutFunc]:
    """Register a layout function under ``name`` and optional aliases."""

    def decorator(func: LayoutFunc) -> LayoutFunc:
        LAYOUTS[name] = func
        for alias in aliases:
            ALIASES[alias] = name
        return func

    return decorator


def resolve_layout_name(name: str) -> str:
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    if key not in LAYOUTS:
        available = ", ".join(list_layouts())
        raise LayoutError(f"Unknown layout '{name}'. Available: {available}")
    return key


def list_layouts() -> list[str]:
    """Return all layout names, aliases included."""
    return sorted(set(LAYOUTS) | set(ALIASES))


def _simple(G: nx.Graph) -> nx.Graph:
    if not G.is_multigraph():
        return G
    return nx.DiGraph(G) if G.is_directed() else nx.Graph(G)


def _single(G: nx.Graph) -> dict[Any, tuple[float, float]] | None:
    if len(G) == 0:
        return {}
    if len(G) == 1:
        return {next(iter(G.nodes)): (0.0, 0.0)}
    return None


def _spread(count: int) -> list[float]:
    """Evenly spaced positions in [-1, 1] centred on 0."""
    if count == 1:
        return [0.0]
    return [-1.0 + 2.0 * i / (count - 1) for i in range(count)]


@register_layout("stress", "kk", "auto")
def layout_stress(G, nodes, weights: str | None = None, scale: float = 1.0):
    """Stress majorisation via Kamada-Kawai path-length springs.

    Direction is ignored. Nodes in different components are kept one step
    further apart than the longest shortest path.
    """
    trivial = _single(G)
    if trivial is not None:
        return trivial
    U = _simple(G).to_undirected(as_view=True)
    dist = dict(nx.shortest_path_length(U, weight=weights))
    longest = max((d for row in dist.values() for d in row.values()), default=0)
    for u in U:
        row = dist.setdefault(u, {})
        for v in U:
            row.setdefault(v, longest + 1)
    return nx.kamada_kawai_layout(U, dist=dist, weight=weights, scale=scale)


@register_layout("fr", "spring")
def layout_fr(G, nodes, weights: str | None = None, iterations: int = 50, k: float | None = None, seed: int | None = 42):
    """Fruchterman-Reingold force-directed placement."""
    trivial = _single(G)
    if trivial is not None:
        return trivial
    return nx.spring_layout(G, k=k, iterations=iterations, weight=weights, seed=seed)


@register_layout("circle")
def layout_circle(G, nodes):
    return nx.circular_layout(G)


@register_layout("shell")
def layout_shell(G, nodes, shells: list[list[Any]] | None = None):
    return nx.shell_layout(G, nlist=shells)


@register_layout("star")
def layout_star(G, nodes, center: Any = None):
    """One node in the middle, the others on a circle around it."""
    trivial = _single(G)
    if trivial is not None:
        return trivial
    order = list(G.nodes)
    if center is None:
        center = order[0]
    elif center not in G:
        raise LayoutError(f"Star center '{center}' is not a node of the graph")
    rim = G.subgraph(n for n in order if n != center)
    pos = dict(nx.circular_layout(rim))
    pos[center] = (0.0, 0.0)
    return pos


@register_layout("spectral")
def layout_spectral(G, nodes, weights: str | None = None):
    return nx.spectral_layout(_simple(G), weight=weights)


@register_layout("random")
def layout_random(G, nodes, seed: int | None = 42):
    return nx.random_layout(G, seed=seed)


@register_layout("grid")
def layout_grid(G, nodes, width: int | None = None):
    """Nodes on a square grid in node order, filled row by row."""
    count = len(G)
    if count == 0:
        return {}
    ncol = width or math.ceil(math.sqrt(count))
    return {node: (float(i % ncol), -float(i // ncol)) for i, node in enumerate(G.nodes)}


@register_layout("linear")
def layout_linear(G, nodes: pd.DataFrame, sort_by: str | None = None, circular: bool = False):
    """Nodes along a line (or around a circle) in node order.

    Combine with arc edges for arc diagrams.
    """
    order = list(G.nodes)
    if sort_by is not None:
        if sort_by not in nodes.columns:
            raise LayoutError(f"Cannot sort linear layout by missing column '{sort_by}'")
        order = nodes.sort_values(sort_by, kind="mergesort")["name"].tolist()
    count = len(order)
    if circular:
        return {
            node: (math.cos(math.pi / 2 - 2 * math.pi * i / count), math.sin(math.pi / 2 - 2 * math.pi * i / count))
            for i, node in enumerate(order)
        }
    return {node: (float(i), 0.0) for i, node in enumerate(order)}


@register_layout("tree", "hierarchy")
def layout_tree(G, nodes, root: Any = None):
    """Breadth-first layers from the root, root on top.

    Each connected component gets its own root (the first node without
    incoming edges, otherwise the first node), so forests are supported.
    """
    if len(G) == 0:
        return {}
    if root is not None and root not in G:
        raise LayoutError(f"Tree root '{root}' is not a node of the graph")
    U = _simple(G).to_undirected(as_view=True)
    depth: dict[Any, int] = {}
    for candidate in _root_candidates(G, root):
        if candidate in depth:
            continue
        for level, layer in enumerate(nx.bfs_layers(U, candidate)):
            for node in layer:
                depth[node] = level
    H = nx.Graph()
    for node in sorted(G.nodes, key=depth.__getitem__):
        H.add_node(node, layer=depth[node])
    pos = nx.multipartite_layout(H, subset_key="layer", align="horizontal")
    return {node: (float(x), -float(y)) for node, (x, y) in pos.items()}


def _root_candidates(G: nx.Graph, root: Any) -> list[Any]:
    order = list(G.nodes)
    first = [] if root is None else [root]
    if G.is_directed():
        first += [n for n in order if G.in_degree(n) == 0]
    return first + order


@register_layout("bipartite")
def layout_bipartite(G, nodes: pd.DataFrame, type: str = "type"):
    """Two rows of nodes split by a boolean node column."""
    if type not in nodes.columns:
        raise LayoutError(f"Bipartite layout needs a boolean node column '{type}'")
    top = nodes.loc[nodes[type].fillna(False).astype(bool), "name"].tolist()
    top_set = set(top)
    bottom = [n for n in G.nodes if n not in top_set]
    pos = {}
    for node, x in zip(top, _spread(len(top))):
        pos[node] = (x, 1.0)
    for node, x in zip(bottom, _spread(len(bottom))):
        pos[node] = (x, 0.0)
    return pos


@register_layout("manual")
def layout_manual(G, nodes: pd.DataFrame, x: str = "x", y: str = "y"):
    """Positions taken from node columns."""
    missing = [c for c in (x, y) if c not in nodes.columns]
    if missing:
        raise LayoutError(f"Manual layout needs node column(s): {', '.join(missing)}")
    return {
        name: (float(px), float(py))
        for name, px, py in zip(nodes["name"], nodes[x], nodes[y])
    }


__all__ = [
    "LAYOUTS",
    "CIRCULAR_LAYOUTS",
    "register_layout",
    "resolve_layout_name",
    "list_layouts",
]
