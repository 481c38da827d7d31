"""Quick network visualization.

Provides one-call plots for graphs and directories of graph files, built on
the grammar of graphics layer in ``graphgg.plot``.
"""

from .network_viz import visualize_graph, batch_visualize_graphs

__all__ = ["visualize_graph", "batch_visualize_graphs"]
