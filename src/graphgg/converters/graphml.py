"""Read and write graphs in common file formats.

Edge and node tables (CSV, JSON, JSONL) are converted to GraphML so they
can be opened by other network tools, and graph files are read back into
``TblGraph`` objects for plotting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import networkx as nx

from ..datasets import DataLoadError, load_table
from ..graph.tbl_graph import TblGraph, as_tbl_graph, is_missing, tbl_graph

logger = logging.getLogger(__name__)

GRAPH_SUFFIXES = (".graphml", ".gml", ".json", ".csv", ".jsonl")


def _scalar(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def graphml_safe(G: nx.Graph) -> nx.Graph:
    """Copy of ``G`` whose attributes GraphML can store.

    Missing values are dropped and non-scalar values become strings.
    """
    H = G.copy()
    H.graph = {k: _scalar(v) for k, v in H.graph.items() if not is_missing(v)}
    for _, attrs in H.nodes(data=True):
        for key in [k for k, v in attrs.items() if is_missing(v)]:
            del attrs[key]
        for key, value in attrs.items():
            attrs[key] = _scalar(value)
    edge_data = H.edges(keys=True, data=True) if H.is_multigraph() else H.edges(data=True)
    for *_, attrs in edge_data:
        for key in [k for k, v in attrs.items() if is_missing(v)]:
            del attrs[key]
        for key, value in attrs.items():
            attrs[key] = _scalar(value)
    return H


def read_graph(path: Path | str, directed: bool = True) -> TblGraph:
    """Read a graph file, choosing the reader by suffix.

    Args:
        path: ``.graphml``, ``.gml``, node-link ``.json``, or an edge list
            (``.csv``, ``.jsonl``, or a ``.json`` array)
        directed: Used for edge lists only; graph formats carry their own
            directedness

    Raises:
        DataLoadError: If the file is missing or the format is unsupported
    """
    path = Path(path)
    if not path.exists():
        raise DataLoadError(f"File not found: {path}", path)
    suffix = path.suffix.lower()

    if suffix == ".graphml":
        return TblGraph(nx.read_graphml(str(path)))
    if suffix == ".gml":
        return TblGraph(nx.read_gml(str(path)))
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise DataLoadError(f"Invalid JSON: {e}", path) from e
        if isinstance(data, dict) and "nodes" in data:
            edges_key = "edges" if "edges" in data else "links"
            return TblGraph(nx.node_link_graph(data, edges=edges_key))
        return tbl_graph(edges=load_table(path), directed=directed)
    if suffix in (".csv", ".jsonl"):
        return tbl_graph(edges=load_table(path), directed=directed)
    raise DataLoadError(
        f"Unknown graph format: {suffix}. Supported: {', '.join(GRAPH_SUFFIXES)}",
        path
    )


def write_graph(graph: TblGraph | nx.Graph, path: Path | str) -> Path:
    """Write a graph as ``.graphml``, ``.gml`` or node-link ``.json``."""
    path = Path(path)
    G = as_tbl_graph(graph).graph
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".graphml":
        nx.write_graphml(graphml_safe(G), str(path))
    elif suffix == ".gml":
        nx.write_gml(graphml_safe(G), str(path), stringizer=str)
    elif suffix == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(nx.node_link_data(graphml_safe(G), edges="edges"), f, ensure_ascii=False, indent=2)
    else:
        raise DataLoadError(f"Cannot write graph format: {suffix}. Supported: .graphml, .gml, .json", path)
    return path


def tables_to_graphml(
    edges_path: Path | str,
    nodes_path: Path | str | None = None,
    output_path: Path | str | None = None,
    directed: bool = True,
) -> TblGraph:
    """Convert an edge table (and optional node table) to a graph.

    Args:
        edges_path: Edge table with from/to columns
        nodes_path: Optional node table with a name column
        output_path: Optional path to save GraphML file
        directed: Whether edges are directed

    Returns:
        The graph built from the tables
    """
    edges = load_table(edges_path)
    nodes = load_table(nodes_path) if nodes_path else None
    graph = tbl_graph(nodes=nodes, edges=edges, directed=directed)
    if output_path:
        write_graph(graph, output_path)
    return graph


def convert_table_directory(
    input_dir: Path | str,
    output_dir: Path | str,
    directed: bool = True,
) -> list[Path]:
    """Convert every edge table in a directory to GraphML.

    A file ``<stem>.nodes.<ext>`` next to ``<stem>.<ext>`` is used as its
    node table. Files that cannot be converted are logged and skipped.

    Returns:
        List of paths to created GraphML files
    """
    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    graphml_files = []
    for table in sorted(input_dir.iterdir()):
        if table.suffix.lower() not in (".csv", ".json", ".jsonl") or table.stem.endswith(".nodes"):
            continue
        nodes = table.with_name(f"{table.stem}.nodes{table.suffix}")
        output_path = output_dir / f"{table.stem}.graphml"
        try:
            graph = tables_to_graphml(table, nodes if nodes.exists() else None, output_path, directed)
        except (DataLoadError, RuntimeError, ValueError) as e:
            logger.warning("Skipping %s: %s", table.name, e)
            continue
        logger.info("Converted %s: %d nodes, %d edges", table.name, len(graph), graph.graph.number_of_edges())
        graphml_files.append(output_path)

    return graphml_files


__all__ = [
    "read_graph",
    "write_graph",
    "graphml_safe",
    "tables_to_graphml",
    "convert_table_directory",
    "GRAPH_SUFFIXES",
]
