"""Plot themes and labels."""

from __future__ import annotations

from typing import Any, Optional

import plotly.colors
from pydantic import BaseModel, ConfigDict, Field


def _default_palette() -> list[str]:
    return list(plotly.colors.qualitative.Plotly)


class Theme(BaseModel):
    """Colours and sizes used when building a figure."""
    model_config = ConfigDict(frozen=True)

    background: str = "white"
    text: str = "#1e293b"
    muted_text: str = "#64748b"
    grid: str = "#e2e8f0"
    edge: str = "#94a3b8"
    node: str = "#334155"
    node_line: str = "white"
    label_fill: str = "white"
    na_colour: str = "#bdbdbd"
    colorscale: str = "Turbo"
    palette: list[str] = Field(default_factory=_default_palette)
    font_size: int = 11
    title_size: int = 20
    width: int = 1200
    height: int = 800


def theme_graph(dark_mode: bool = False, **overrides: Any) -> Theme:
    """Return the default network theme, optionally in dark mode."""
    base: dict[str, Any] = {}
    if dark_mode:
        base = {
            "background": "#0f172a",
            "text": "#f1f5f9",
            "muted_text": "#94a3b8",
            "grid": "#334155",
            "edge": "#475569",
            "node": "#e2e8f0",
            "node_line": "#1e293b",
            "label_fill": "#1e293b",
        }
    base.update(overrides)
    return Theme(**base)


class Labels(BaseModel):
    """Plot title and subtitle."""
    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    subtitle: Optional[str] = None

    def merge(self, other: "Labels") -> "Labels":
        return Labels(
            title=other.title if other.title is not None else self.title,
            subtitle=other.subtitle if other.subtitle is not None else self.subtitle,
        )


def labs(title: str | None = None, subtitle: str | None = None) -> Labels:
    return Labels(title=title, subtitle=subtitle)


__all__ = ["Theme", "theme_graph", "Labels", "labs"]
