"""Command-line interface for network plots using Typer.

Graphs can come from edge/node tables (CSV, JSON, JSONL), graph files
(GraphML, GML, node-link JSON) or the built-in notable graphs.

Commands:
    plot            - Plot a graph with a layout, geoms and facets
    summary         - Show node/edge counts and basic structure
    convert         - Convert edge/node tables to GraphML
    visualize       - Quick plots for every graph file in a directory
    list layouts    - List available layouts
    list notable    - List built-in example graphs
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import networkx as nx
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import PlotConfig
from .converters import convert_table_directory, read_graph, tables_to_graphml
from .datasets import create_notable, list_notable, load_table
from .graph import TblGraph, centrality_degree, group_louvain, tbl_graph
from .layouts import list_layouts
from .plot import (
    aes,
    facet_edges,
    facet_nodes,
    factor,
    geom_edge_arc,
    geom_edge_fan,
    geom_edge_link,
    geom_edge_loop,
    geom_node_point,
    geom_node_text,
    ggraph,
    labs,
    theme_graph,
)
from .visualization import batch_visualize_graphs

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    help="Grammar-of-graphics network visualization.",
    no_args_is_help=True
)

list_app = typer.Typer(
    help="List available resources.",
    no_args_is_help=True
)
app.add_typer(list_app, name="list")

console = Console()


class EdgeGeom(str, Enum):
    """Edge drawing styles."""
    LINK = "link"
    ARC = "arc"
    FAN = "fan"


EDGE_GEOMS = {
    EdgeGeom.LINK: geom_edge_link,
    EdgeGeom.ARC: geom_edge_arc,
    EdgeGeom.FAN: geom_edge_fan,
}


def _load_graph(
    edges: Optional[Path],
    nodes: Optional[Path],
    graph_file: Optional[Path],
    notable: Optional[str],
    undirected: bool,
    edges_file: Optional[Path] = None,
) -> TblGraph:
    """Load a graph from exactly one source."""
    if edges is not None and edges_file is not None:
        raise typer.BadParameter("Give the edge table as an argument or with --edges, not both")
    edges = edges or edges_file
    sources = [s for s in (edges, graph_file, notable) if s is not None]
    if len(sources) != 1:
        raise typer.BadParameter("Give exactly one of an edge table (argument or --edges), --graph or --notable")
    if notable:
        return create_notable(notable)
    if graph_file:
        return read_graph(graph_file, directed=not undirected)
    node_table = load_table(nodes) if nodes else None
    return tbl_graph(nodes=node_table, edges=load_table(edges), directed=not undirected)


# =============================================================================
# LIST Commands
# =============================================================================

@list_app.command("layouts")
def list_layout_names():
    """List available layouts."""
    table = Table(title="Available Layouts")
    table.add_column("Layout", style="cyan")
    for name in list_layouts():
        table.add_row(name)
    console.print(table)


@list_app.command("notable")
def list_notable_graphs():
    """List built-in example graphs."""
    table = Table(title="Notable Graphs")
    table.add_column("Name", style="green")
    for name in list_notable():
        table.add_row(name)
    console.print(table)


# =============================================================================
# PLOT Command
# =============================================================================

@app.command()
def plot(
    edges_file: Optional[Path] = typer.Argument(None, help="Edge table (.csv, .json, .jsonl)", exists=True),
    edges: Optional[Path] = typer.Option(None, "--edges", "-e", help="Edge table (.csv, .json, .jsonl)", exists=True),
    nodes: Optional[Path] = typer.Option(None, "--nodes", "-n", help="Node table with a 'name' column", exists=True),
    graph_file: Optional[Path] = typer.Option(None, "--graph", "-g", help="Graph file (.graphml, .gml, .json)", exists=True),
    notable: Optional[str] = typer.Option(None, "--notable", help="Built-in graph (use 'list notable')"),
    output: Path = typer.Option(Path("network.html"), "--output", "-o", help="Output file (.html or .json)"),
    layout: Optional[str] = typer.Option(None, "--layout", "-l", help="Layout name (use 'list layouts')"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for randomised layouts"),
    colour: Optional[str] = typer.Option(None, "--colour", "--color", help="Node column mapped to colour"),
    size: Optional[str] = typer.Option(None, "--size", help="Node column mapped to size ('degree' is computed)"),
    label: Optional[str] = typer.Option(None, "--label", help="Node column used as label"),
    edge: EdgeGeom = typer.Option(EdgeGeom.LINK, "--edge", help="Edge geometry"),
    arrows: bool = typer.Option(False, "--arrows", help="Draw arrows on directed edges"),
    communities: bool = typer.Option(False, "--communities", help="Colour nodes by Louvain community"),
    facet_by_node: Optional[str] = typer.Option(None, "--facet-nodes", help="Node column to facet by"),
    facet_by_edge: Optional[str] = typer.Option(None, "--facet-edges", help="Edge column to facet by"),
    undirected: bool = typer.Option(False, "--undirected", help="Treat edge lists as undirected"),
    dark_mode: Optional[bool] = typer.Option(None, "--dark-mode/--light-mode", help="Theme (default from GRAPHGG_DARK_MODE)"),
    title: Optional[str] = typer.Option(None, "--title", help="Plot title"),
):
    """Plot a network.

    \b
    Examples:
        python -m graphgg plot --notable zachary --communities --label name
        python -m graphgg plot edges.csv --nodes nodes.csv --layout linear --edge arc
    """
    config = PlotConfig.from_env()
    layout_name = layout or config.layout
    if facet_by_node and facet_by_edge:
        console.print("[bold red]Error:[/bold red] Use only one of --facet-nodes and --facet-edges")
        raise typer.Exit(code=1)

    try:
        graph = _load_graph(edges, nodes, graph_file, notable, undirected, edges_file)
        console.print(f"Loaded graph: [cyan]{len(graph)}[/cyan] nodes, [cyan]{graph.graph.number_of_edges()}[/cyan] edges")

        if size == "degree" and "degree" not in graph.nodes.columns:
            graph = graph.mutate(degree=centrality_degree())
        if communities:
            graph = graph.mutate(community=group_louvain(seed=seed if seed is not None else config.seed))
            colour = colour or "community"

        layout_params = PlotConfig(layout=layout_name, seed=seed if seed is not None else config.seed).layout_params()
        mapping = {}
        if colour:
            mapping["colour"] = factor(colour) if colour == "community" else colour
        if size:
            mapping["size"] = size

        p = ggraph(graph, layout=layout_name, **layout_params)
        p = p + EDGE_GEOMS[edge](arrow=arrows and graph.is_directed, alpha=0.7)
        if (graph.edges["from"] == graph.edges["to"]).any():
            p = p + geom_edge_loop(alpha=0.7)
        p = p + geom_node_point(aes(**mapping))
        if label:
            p = p + geom_node_text(aes(label=label))
        if facet_by_node:
            p = p + facet_nodes(facet_by_node)
        if facet_by_edge:
            p = p + facet_edges(facet_by_edge)
        p = p + labs(title=title or config.title) + theme_graph(
            dark_mode=config.dark_mode if dark_mode is None else dark_mode,
            width=config.width,
            height=config.height,
        )

        saved = p.save(output)
        console.print(f"\n[bold green]✓ Plot saved.[/bold green]")
        console.print(f"Output: {saved}")
    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


# =============================================================================
# SUMMARY Command
# =============================================================================

@app.command()
def summary(
    edges_file: Optional[Path] = typer.Argument(None, help="Edge table", exists=True),
    edges: Optional[Path] = typer.Option(None, "--edges", "-e", help="Edge table", exists=True),
    nodes: Optional[Path] = typer.Option(None, "--nodes", "-n", help="Node table", exists=True),
    graph_file: Optional[Path] = typer.Option(None, "--graph", "-g", help="Graph file", exists=True),
    notable: Optional[str] = typer.Option(None, "--notable", help="Built-in graph"),
    undirected: bool = typer.Option(False, "--undirected", help="Treat edge lists as undirected"),
):
    """Show basic structure of a graph."""
    try:
        graph = _load_graph(edges, nodes, graph_file, notable, undirected, edges_file)
    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    G = graph.graph
    if G.is_directed():
        components = nx.number_weakly_connected_components(G)
    else:
        components = nx.number_connected_components(G)
    table = Table(title="Graph Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Nodes", str(G.number_of_nodes()))
    table.add_row("Edges", str(G.number_of_edges()))
    table.add_row("Directed", str(G.is_directed()))
    table.add_row("Multigraph", str(G.is_multigraph()))
    table.add_row("Components", str(components))
    table.add_row("Density", f"{nx.density(G):.4f}")
    table.add_row("Node columns", ", ".join(map(str, graph.nodes.columns)))
    table.add_row("Edge columns", ", ".join(map(str, graph.edges.columns)))
    console.print(table)


# =============================================================================
# CONVERT Command
# =============================================================================

@app.command()
def convert(
    input_path: Path = typer.Option(..., "--input", "-i", help="Edge table or directory of edge tables", exists=True),
    nodes: Optional[Path] = typer.Option(None, "--nodes", "-n", help="Node table (single file input only)", exists=True),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output GraphML file or directory"),
    undirected: bool = typer.Option(False, "--undirected", help="Treat edges as undirected"),
):
    """Convert edge/node tables to GraphML format.

    \b
    Examples:
        python -m graphgg convert --input edges.csv --nodes nodes.csv
        python -m graphgg convert --input tables/
    """
    console.print(f"[bold blue]Converting tables to GraphML[/bold blue]")

    try:
        if input_path.is_dir():
            graphml_dir = output or input_path.parent / "graphml"
            graphml_files = convert_table_directory(input_path, graphml_dir, directed=not undirected)
            console.print(f"\n[bold green]✓ Converted {len(graphml_files)} files[/bold green]")
            console.print(f"Output: {graphml_dir}")
            console.print(f"\n[dim]Next: python -m graphgg visualize --input {graphml_dir}[/dim]")
        else:
            output_path = output or input_path.with_suffix(".graphml")
            graph = tables_to_graphml(input_path, nodes, output_path, directed=not undirected)
            console.print(f"\n[bold green]✓ Converted {input_path.name}[/bold green]: {len(graph)} nodes, {graph.graph.number_of_edges()} edges")
            console.print(f"Output: {output_path}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


# =============================================================================
# VISUALIZE Command
# =============================================================================

@app.command()
def visualize(
    input_dir: Path = typer.Option(..., "--input", "-i", help="Directory with graph files", exists=True),
    output_dir: Optional[Path] = typer.Option(None, "--output", "-o", help="Output directory for HTML"),
    dark_mode: bool = typer.Option(False, "--dark-mode", help="Enable dark mode theme"),
    layout: Optional[str] = typer.Option(None, "--layout", "-l", help="Layout name (use 'list layouts')"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Hide progress bar"),
):
    """Create quick interactive plots for every graph file in a directory.

    \b
    Examples:
        python -m graphgg visualize --input outputs/graphml --dark-mode
    """
    console.print(f"[bold blue]Creating Network Visualizations[/bold blue]")

    config = PlotConfig.from_env()
    viz_dir = output_dir or input_dir.parent / "visualizations"

    try:
        html_files = batch_visualize_graphs(
            input_dir,
            viz_dir,
            dark_mode=dark_mode or config.dark_mode,
            layout=layout or config.layout,
            show_progress=not no_progress,
        )
        console.print(f"\n[bold green]✓ Created {len(html_files)} network visualizations[/bold green]")
        console.print(f"Output: {viz_dir}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress messages")):
    """Grammar-of-graphics network visualization."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


if __name__ == "__main__":
    app()
