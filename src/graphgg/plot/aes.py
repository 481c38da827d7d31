"""Aesthetic mappings."""

from __future__ import annotations

from typing import Any

from ..errors import PlotError

ALIASES = {
    "color": "colour",
    "edge_colour": "colour",
    "edge_color": "colour",
    "edge_width": "width",
    "edge_alpha": "alpha",
    "edge_linetype": "linetype",
    "linewidth": "width",
}


def normalize_aesthetic(name: str) -> str:
    return ALIASES.get(name, name)


class Discrete(str):
    """A column name whose values are always treated as categories."""

    def __repr__(self) -> str:
        return f"factor({str.__repr__(self)})"


def factor(column: str) -> Discrete:
    """Mark ``column`` as discrete, e.g. integer group labels."""
    return Discrete(column)


class Aes(dict):
    """Mapping from aesthetic name to a data column."""

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.items())
        return f"aes({inner})"

    def __add__(self, other: "Aes") -> "Aes":
        merged = Aes(self)
        merged.update(other)
        return merged


def aes(**mapping: Any) -> Aes:
    """Create an aesthetic mapping.

    Values are column names of the node table (node geoms) or edge table
    (edge geoms). Edge geoms can also use ``node1.<column>`` and
    ``node2.<column>`` to reach the data of their endpoints.
    """
    result = Aes()
    for name, column in mapping.items():
        if not isinstance(column, str):
            raise PlotError(
                f"Aesthetic '{name}' must map to a column name, got {type(column).__name__}. "
                "Pass constants as geom parameters instead"
            )
        result[normalize_aesthetic(name)] = column
    return result


__all__ = ["Aes", "aes", "factor", "Discrete", "normalize_aesthetic"]
