"""Base class for node and edge geoms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np
import pandas as pd

from ..errors import PlotError
from ..layouts import Layout
from .aes import Aes, normalize_aesthetic
from .scales import ColourScale, discrete_levels
from .theme import Theme


@dataclass
class RenderContext:
    """Per-build state shared by every panel and geom."""

    theme: Theme
    legend_seen: set[str] = field(default_factory=set)
    legend_titles: list[str] = field(default_factory=list)
    colorbar_shown: bool = False

    def claim_legend(self, key: str) -> bool:
        """Return True the first time ``key`` is seen."""
        if key in self.legend_seen:
            return False
        self.legend_seen.add(key)
        return True


@dataclass
class Resolved:
    """Visual properties of every row, computed once on the full layout."""

    frame: pd.DataFrame
    colour_scale: ColourScale | None = None
    legend_order: list[str] = field(default_factory=list)


class Geom(ABC):
    """A layer drawing either nodes or edges."""

    kind: ClassVar[str] = "node"
    aesthetics: ClassVar[frozenset[str]] = frozenset()
    required: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, mapping: Aes | None = None, **params: Any):
        mapping = Aes(mapping or {})
        unknown = set(mapping) - self.aesthetics - {"filter"}
        if unknown:
            raise PlotError(
                f"{type(self).__name__} does not understand aesthetic(s): {', '.join(sorted(unknown))}"
            )
        missing = self.required - set(mapping)
        if missing:
            raise PlotError(f"{type(self).__name__} requires aesthetic(s): {', '.join(sorted(missing))}")
        self.mapping = mapping
        self.params = {normalize_aesthetic(k): v for k, v in params.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.mapping!r})"

    def data(self, layout: Layout) -> pd.DataFrame:
        return layout.data if self.kind == "node" else layout.edges()

    def column(self, data: pd.DataFrame, aesthetic: str) -> pd.Series:
        name = self.mapping[aesthetic]
        if name not in data.columns:
            available = ", ".join(map(str, data.columns))
            raise PlotError(
                f"Column '{name}' mapped to '{aesthetic}' not found in {self.kind} data. Available: {available}"
            )
        return data[name]

    def keep_mask(self, data: pd.DataFrame) -> np.ndarray:
        if "filter" not in self.mapping:
            return np.ones(len(data), dtype=bool)
        series = self.column(data, "filter")
        return series.fillna(False).astype(bool).to_numpy()

    def colour_aesthetic(self) -> str:
        """The aesthetic that sets the main colour and drives the legend."""
        return "colour"

    def colour(self, data: pd.DataFrame, frame: pd.DataFrame, default: str, theme: Theme) -> ColourScale | None:
        """Fill ``frame['colour']`` and ``frame['legend']``; return the trained scale."""
        aesthetic = self.colour_aesthetic()
        if aesthetic not in self.mapping:
            frame["colour"] = self.params.get(aesthetic, default)
            frame["legend"] = None
            return None
        series = self.column(data, aesthetic)
        scale = ColourScale.train(series, self.mapping[aesthetic], theme)
        frame["colour"] = scale.colours(series)
        frame["legend"] = scale.legend_labels(series)
        if not scale.discrete:
            frame["colour_value"] = pd.to_numeric(series, errors="coerce").to_numpy()
        return scale

    def legend_order(self, data: pd.DataFrame, frame: pd.DataFrame) -> list[str]:
        present = set(frame["legend"].dropna())
        if not present:
            return []
        levels = [str(level) for level in discrete_levels(self.column(data, self.colour_aesthetic()))]
        return [label for label in dict.fromkeys(levels) if label in present]

    def legend_key(self, label: str) -> str:
        return f"{self.kind}:{self.mapping.get(self.colour_aesthetic(), '')}:{label}"

    @abstractmethod
    def resolve(self, layout: Layout, theme: Theme) -> Resolved:
        """Compute visual properties for every row of the layout."""

    @abstractmethod
    def render(
        self,
        resolved: Resolved,
        rows: np.ndarray,
        ctx: RenderContext,
        xref: str,
        yref: str,
    ) -> tuple[list[Any], list[dict[str, Any]]]:
        """Return ``(traces, annotations)`` for the rows selected by a panel."""


def hover_text(title: str, attrs: dict[str, Any], skip: tuple[str, ...] = ()) -> str:
    """HTML hover text listing every non-missing attribute."""
    text = f"<b>{title}</b><br><br>"
    for key, value in attrs.items():
        if key in skip or value is None or (isinstance(value, float) and np.isnan(value)):
            continue
        text += f"<b>{key}:</b> {value}<br>"
    return text


def legend_groups(rows: pd.DataFrame, order: list[str]):
    """Yield ``(label, rows)`` per legend level, then the unlabelled rows."""
    for label in order:
        subset = rows[rows["legend"] == label]
        if not subset.empty:
            yield label, subset
    rest = rows[rows["legend"].isna()]
    if not rest.empty:
        yield None, rest


__all__ = ["Geom", "Resolved", "RenderContext", "hover_text", "legend_groups"]
