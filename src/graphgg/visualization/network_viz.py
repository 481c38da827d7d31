"""One-call interactive network plots.

Builds a degree-coloured plot with labels on top of the grammar of
graphics layer, for quick looks at graph files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import networkx as nx
import plotly.graph_objects as go
from tqdm import tqdm

from ..converters import GRAPH_SUFFIXES, read_graph
from ..graph import TblGraph, as_tbl_graph, centrality_degree
from ..plot import aes, geom_edge_link, geom_node_point, geom_node_text, ggraph, labs, theme_graph

logger = logging.getLogger(__name__)


def visualize_graph(
    graph: TblGraph | nx.Graph | str | Path,
    output_path: Path | str | None = None,
    title: str | None = None,
    dark_mode: bool = False,
    layout: str = "fr",
    auto_open: bool = False
) -> go.Figure:
    """Visualize a graph with interactive Plotly.

    Args:
        graph: TblGraph, NetworkX graph, or path to a graph file
        output_path: Output HTML file path
        title: Optional title for the visualization
        dark_mode: Whether to use dark mode theme
        layout: Layout name (see ``list_layouts()``)
        auto_open: Whether to open in browser after saving

    Returns:
        Plotly Figure object
    """
    # 1. Load Graph
    if isinstance(graph, (str, Path)):
        graph_path = Path(graph)
        tg = read_graph(graph_path)
        if title is None:
            title = graph_path.stem
        if output_path is None:
            output_path = graph_path.with_suffix(".html")
    else:
        tg = as_tbl_graph(graph)
        if title is None:
            title = "Network"

    # 2. Degree drives colour and size
    tg = tg.mutate(degree=centrality_degree())
    G = tg.graph
    directed = G.is_directed()

    # 3. Assemble layers
    plot = (
        ggraph(tg, layout=layout)
        + geom_edge_link(alpha=0.8, arrow=directed)
        + geom_node_point(aes(colour="degree", size="degree"))
        + geom_node_text(aes(label="name"), position="top center")
        + labs(
            title=title,
            subtitle=f"Nodes: {G.number_of_nodes()} | Edges: {G.number_of_edges()} | Layout: {layout}",
        )
        + theme_graph(dark_mode=dark_mode)
    )
    fig = plot.build()

    # 4. Save
    if output_path:
        fig.write_html(str(output_path), auto_open=auto_open)

    return fig


def batch_visualize_graphs(
    input_dir: Path | str,
    output_dir: Path | str | None = None,
    dark_mode: bool = False,
    layout: str = "fr",
    show_progress: bool = True,
) -> list[Path]:
    """Visualize all graph files in a directory.

    Args:
        input_dir: Directory containing graph files
        output_dir: Output directory for HTML files
        dark_mode: Whether to use dark mode
        layout: Layout name
        show_progress: Show a progress bar

    Returns:
        List of paths to created HTML files
    """
    input_dir = Path(input_dir)
    output_dir = Path(output_dir) if output_dir else input_dir / "visualizations"
    output_dir.mkdir(parents=True, exist_ok=True)

    graph_files = sorted(
        p for p in input_dir.iterdir()
        if p.suffix.lower() in GRAPH_SUFFIXES and not p.stem.endswith(".nodes")
    )

    if not graph_files:
        logger.warning("No graph files found in %s", input_dir)
        return []

    logger.info("Visualizing %d graphs", len(graph_files))

    html_files = []
    for graph_file in tqdm(graph_files, desc="Visualizing", disable=not show_progress):
        output_path = output_dir / f"{graph_file.stem}.html"
        try:
            visualize_graph(graph_file, output_path, dark_mode=dark_mode, layout=layout)
        except Exception as e:
            logger.warning("Error with %s: %s", graph_file.name, e)
            continue
        html_files.append(output_path)

    return html_files


__all__ = ["visualize_graph", "batch_visualize_graphs"]
