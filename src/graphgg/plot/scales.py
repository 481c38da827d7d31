"""Scales: translate data values into visual properties.

Scales are trained on the full layout before facetting, so every panel of
a facetted plot shares the same colours and sizes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
import pandas as pd
import plotly.colors
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from .aes import Discrete

SIZE_RANGE = (6.0, 24.0)
TEXT_SIZE_RANGE = (8.0, 18.0)
WIDTH_RANGE = (0.5, 4.0)
ALPHA_RANGE = (0.2, 1.0)

SYMBOLS = ["circle", "square", "diamond", "triangle-up", "cross", "x", "star", "hexagon", "pentagon"]
DASHES = ["solid", "dash", "dot", "dashdot", "longdash", "longdashdot"]


def is_discrete(series: pd.Series, column: str) -> bool:
    if isinstance(column, Discrete):
        return True
    if is_bool_dtype(series):
        return True
    return not is_numeric_dtype(series)


def discrete_levels(series: pd.Series) -> list[Any]:
    """Category order, else sorted unique values (appearance order if unsortable)."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    levels = pd.unique(series.dropna()).tolist()
    try:
        return sorted(levels)
    except TypeError:
        return levels


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and np.isnan(value))


def rescale(values: Sequence[Any], to_range: tuple[float, float]) -> list[float]:
    """Linearly map numbers onto ``to_range``; a constant maps to its midpoint.

    Missing values map to the lower bound.
    """
    lo, hi = to_range
    arr = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce").to_numpy(dtype=float)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return [lo] * len(arr)
    vmin, vmax = finite.min(), finite.max()
    if vmax == vmin:
        out = np.full(arr.shape, (lo + hi) / 2.0)
    else:
        out = lo + (arr - vmin) / (vmax - vmin) * (hi - lo)
    out[~np.isfinite(arr)] = lo
    return out.tolist()


def map_numeric(series: pd.Series, column: str, to_range: tuple[float, float]) -> list[float]:
    """Map a column to numbers in ``to_range`` (levels evenly spaced if discrete)."""
    if not is_discrete(series, column):
        return rescale(series.tolist(), to_range)
    levels = discrete_levels(series)
    lo, hi = to_range
    if len(levels) <= 1:
        steps = {level: (lo + hi) / 2.0 for level in levels}
    else:
        steps = {level: lo + i * (hi - lo) / (len(levels) - 1) for i, level in enumerate(levels)}
    return [lo if _missing(v) else steps[v] for v in series.tolist()]


def map_cycle(series: pd.Series, choices: Sequence[str]) -> list[str]:
    """Map each level to a choice, cycling when levels outnumber choices."""
    levels = discrete_levels(series)
    lookup = {level: choices[i % len(choices)] for i, level in enumerate(levels)}
    return [choices[0] if _missing(v) else lookup[v] for v in series.tolist()]


@dataclass
class ColourScale:
    """Discrete palette or continuous colorscale for one column."""

    column: str
    discrete: bool
    na_colour: str
    palette: list[str] = field(default_factory=list)
    colorscale: str = "Turbo"
    levels: list[Any] = field(default_factory=list)
    vmin: float = 0.0
    vmax: float = 1.0

    @classmethod
    def train(cls, series: pd.Series, column: str, theme: Any) -> "ColourScale":
        if is_discrete(series, column):
            return cls(
                column=str(column),
                discrete=True,
                na_colour=theme.na_colour,
                palette=list(theme.palette),
                levels=discrete_levels(series),
            )
        numeric = pd.to_numeric(series, errors="coerce")
        finite = numeric[np.isfinite(numeric)]
        vmin = float(finite.min()) if not finite.empty else 0.0
        vmax = float(finite.max()) if not finite.empty else 1.0
        return cls(
            column=str(column),
            discrete=False,
            na_colour=theme.na_colour,
            colorscale=theme.colorscale,
            vmin=vmin,
            vmax=vmax,
        )

    def level_colour(self, level: Any) -> str:
        return self.palette[self.levels.index(level) % len(self.palette)]

    def colours(self, series: pd.Series) -> list[str]:
        """Colour strings for every value."""
        values = series.tolist()
        if self.discrete:
            return [self.na_colour if _missing(v) else self.level_colour(v) for v in values]
        span = self.vmax - self.vmin
        colours = []
        scale = plotly.colors.get_colorscale(self.colorscale)
        for v in values:
            if _missing(v):
                colours.append(self.na_colour)
                continue
            t = 0.5 if span == 0 else (float(v) - self.vmin) / span
            colours.append(plotly.colors.sample_colorscale(scale, [min(max(t, 0.0), 1.0)])[0])
        return colours

    def legend_labels(self, series: pd.Series) -> list[str | None]:
        if not self.discrete:
            return [None] * len(series)
        return [None if _missing(v) else str(v) for v in series.tolist()]


__all__ = [
    "ColourScale",
    "rescale",
    "map_numeric",
    "map_cycle",
    "is_discrete",
    "discrete_levels",
    "SIZE_RANGE",
    "TEXT_SIZE_RANGE",
    "WIDTH_RANGE",
    "ALPHA_RANGE",
    "SYMBOLS",
    "DASHES",
]
