"""Data loading and example graphs."""

from .loaders import DataLoadError, detect_format, load_records, load_table
from .notable import (
    create_notable,
    create_ring,
    create_tree,
    list_notable,
    play_barabasi_albert,
    play_erdos_renyi,
    play_smallworld,
)

__all__ = [
    "load_records",
    "load_table",
    "detect_format",
    "DataLoadError",
    "create_notable",
    "list_notable",
    "create_tree",
    "create_ring",
    "play_erdos_renyi",
    "play_barabasi_albert",
    "play_smallworld",
]
