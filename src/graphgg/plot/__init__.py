"""Grammar of graphics for networks.

Build a plot from a graph and a layout, then add layers::

    ggraph(graph, layout="fr") + geom_edge_link() + geom_node_point(aes(colour="group"))
"""

from .aes import aes, factor
from .facets import facet_edges, facet_graph, facet_nodes
from .geom_edges import geom_edge_arc, geom_edge_fan, geom_edge_link, geom_edge_loop
from .geom_nodes import geom_node_label, geom_node_point, geom_node_text
from .ggraph import GGraph, ggraph
from .theme import Theme, labs, theme_graph

__all__ = [
    "ggraph",
    "GGraph",
    "aes",
    "factor",
    "geom_node_point",
    "geom_node_text",
    "geom_node_label",
    "geom_edge_link",
    "geom_edge_arc",
    "geom_edge_fan",
    "geom_edge_loop",
    "facet_nodes",
    "facet_edges",
    "facet_graph",
    "labs",
    "theme_graph",
    "Theme",
]
