"""Graph format converters.

Converts node/edge tables to graph formats like GraphML and reads graph
files back for plotting.
"""

from .graphml import (
    GRAPH_SUFFIXES,
    convert_table_directory,
    read_graph,
    tables_to_graphml,
    write_graph,
)

__all__ = ["read_graph", "write_graph", "tables_to_graphml", "convert_table_directory", "GRAPH_SUFFIXES"]
