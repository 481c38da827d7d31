"""Well-known graphs and random graph generators (all from networkx)."""

from __future__ import annotations

from typing import Callable

import networkx as nx

from ..graph.tbl_graph import TblGraph

NOTABLE: dict[str, Callable[[], nx.Graph]] = {
    "zachary": nx.karate_club_graph,
    "florentine": nx.florentine_families_graph,
    "davis": nx.davis_southern_women_graph,
    "lesmis": nx.les_miserables_graph,
    "petersen": nx.petersen_graph,
    "bull": nx.bull_graph,
    "house": nx.house_graph,
    "krackhardt_kite": nx.krackhardt_kite_graph,
    "tutte": nx.tutte_graph,
}


def list_notable() -> list[str]:
    return sorted(NOTABLE)


def create_notable(name: str) -> TblGraph:
    """Create a well-known graph by name, e.g. ``'zachary'``.

    Raises:
        ValueError: If the name is unknown
    """
    key = name.strip().lower()
    if key not in NOTABLE:
        available = ", ".join(list_notable())
        raise ValueError(f"Unknown notable graph '{name}'. Available: {available}")
    return TblGraph(NOTABLE[key]())


def create_tree(n: int, children: int = 2) -> TblGraph:
    """Directed tree with ``n`` nodes, each parent having ``children`` children."""
    tree = nx.full_rary_tree(children, n)
    return TblGraph(nx.bfs_tree(tree, 0) if n else nx.DiGraph())


def create_ring(n: int) -> TblGraph:
    return TblGraph(nx.cycle_graph(n))


def play_erdos_renyi(n: int, p: float, directed: bool = False, seed: int | None = None) -> TblGraph:
    """Random graph where each pair of nodes is linked with probability ``p``."""
    return TblGraph(nx.gnp_random_graph(n, p, seed=seed, directed=directed))


def play_barabasi_albert(n: int, m: int, seed: int | None = None) -> TblGraph:
    """Preferential attachment graph; each new node brings ``m`` edges."""
    return TblGraph(nx.barabasi_albert_graph(n, m, seed=seed))


def play_smallworld(n: int, k: int, p: float, seed: int | None = None) -> TblGraph:
    """Watts-Strogatz ring lattice of degree ``k`` rewired with probability ``p``."""
    return TblGraph(nx.watts_strogatz_graph(n, k, p, seed=seed))


__all__ = [
    "NOTABLE",
    "list_notable",
    "create_notable",
    "create_tree",
    "create_ring",
    "play_erdos_renyi",
    "play_barabasi_albert",
    "play_smallworld",
]
