"""Node geoms: points, text and boxed labels."""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.graph_objects as go

from ..layouts import Layout
from .aes import Aes
from .geom import Geom, RenderContext, Resolved, hover_text, legend_groups
from .scales import (
    ALPHA_RANGE,
    SIZE_RANGE,
    SYMBOLS,
    TEXT_SIZE_RANGE,
    ColourScale,
    map_cycle,
    map_numeric,
)
from .theme import Theme


def _node_hover(data: pd.DataFrame) -> list[str]:
    return [
        hover_text(str(record["name"]), record, skip=("name", "x", "y"))
        for record in data.to_dict("records")
    ]


class GeomNodePoint(Geom):
    """Nodes drawn as markers."""

    kind = "node"
    aesthetics = frozenset({"colour", "fill", "size", "alpha", "shape"})

    def colour_aesthetic(self) -> str:
        return "fill" if "fill" in self.mapping or "fill" in self.params else "colour"

    def outline(self, data: pd.DataFrame, theme: Theme) -> list[str] | str:
        """Marker outline colours. ``colour`` sets them once ``fill`` is in use."""
        if self.colour_aesthetic() == "colour":
            return theme.node_line
        if "colour" in self.mapping:
            series = self.column(data, "colour")
            return ColourScale.train(series, self.mapping["colour"], theme).colours(series)
        return self.params.get("colour", theme.node_line)

    def resolve(self, layout: Layout, theme: Theme) -> Resolved:
        data = layout.data
        frame = pd.DataFrame({"x": data["x"].to_numpy(), "y": data["y"].to_numpy()})
        frame["keep"] = self.keep_mask(data)
        scale = self.colour(data, frame, theme.node, theme)
        frame["line"] = self.outline(data, theme)

        if "size" in self.mapping:
            frame["size"] = map_numeric(self.column(data, "size"), self.mapping["size"], SIZE_RANGE)
        else:
            frame["size"] = self.params.get("size", 10)
        if "alpha" in self.mapping:
            frame["alpha"] = map_numeric(self.column(data, "alpha"), self.mapping["alpha"], ALPHA_RANGE)
        else:
            frame["alpha"] = self.params.get("alpha", 1.0)
        if "shape" in self.mapping:
            shapes = self.column(data, "shape")
            frame["symbol"] = map_cycle(shapes, SYMBOLS)
            shape_labels = [None if pd.isna(v) else str(v) for v in shapes.tolist()]
            frame["legend"] = [
                ", ".join(part for part in (c, s) if part is not None) or None
                for c, s in zip(frame["legend"].tolist(), shape_labels)
            ]
        else:
            frame["symbol"] = self.params.get("shape", "circle")
        frame["hover"] = _node_hover(data)

        order = self.legend_order(data, frame) if self.colour_aesthetic() in self.mapping else []
        if "shape" in self.mapping:
            order = list(dict.fromkeys(frame["legend"].dropna().tolist()))
        return Resolved(frame=frame, colour_scale=scale, legend_order=order)

    def render(self, resolved, rows, ctx: RenderContext, xref, yref):
        frame = resolved.frame
        selected = frame[rows & frame["keep"].to_numpy()]
        if selected.empty:
            return [], []
        theme = ctx.theme
        scale = resolved.colour_scale

        if scale is not None and not scale.discrete:
            show_scale = not ctx.colorbar_shown
            ctx.colorbar_shown = True
            marker = dict(
                color=selected["colour_value"].tolist(),
                colorscale=scale.colorscale,
                cmin=scale.vmin,
                cmax=scale.vmax,
                size=selected["size"].tolist(),
                opacity=selected["alpha"].tolist(),
                symbol=selected["symbol"].tolist(),
                line=dict(width=1.5, color=selected["line"].tolist()),
                showscale=show_scale,
            )
            if show_scale:
                marker["colorbar"] = dict(
                    thickness=15,
                    title=dict(text=scale.column, font=dict(color=theme.text)),
                    xanchor="left",
                    tickfont=dict(color=theme.text),
                )
            trace = go.Scatter(
                x=selected["x"].tolist(),
                y=selected["y"].tolist(),
                mode="markers",
                marker=marker,
                hovertext=selected["hover"].tolist(),
                hovertemplate="%{hovertext}<extra></extra>",
                showlegend=False,
            )
            return [trace], []

        traces = []
        for label, subset in legend_groups(selected, resolved.legend_order):
            show = label is not None and ctx.claim_legend(self.legend_key(label))
            traces.append(go.Scatter(
                x=subset["x"].tolist(),
                y=subset["y"].tolist(),
                mode="markers",
                name=label or "",
                legendgroup=self.legend_key(label) if label is not None else None,
                showlegend=show,
                marker=dict(
                    color=subset["colour"].tolist(),
                    size=subset["size"].tolist(),
                    opacity=subset["alpha"].tolist(),
                    symbol=subset["symbol"].tolist(),
                    line=dict(width=1.5, color=subset["line"].tolist()),
                ),
                hovertext=subset["hover"].tolist(),
                hovertemplate="%{hovertext}<extra></extra>",
            ))
        aesthetic = self.colour_aesthetic()
        if traces and any(t.showlegend for t in traces) and aesthetic in self.mapping:
            title = str(self.mapping[aesthetic])
            if title not in ctx.legend_titles:
                ctx.legend_titles.append(title)
        return traces, []


class GeomNodeText(Geom):
    """Node labels drawn as plain text."""

    kind = "node"
    aesthetics = frozenset({"label", "colour", "size"})
    required = frozenset({"label"})

    def resolve(self, layout: Layout, theme: Theme) -> Resolved:
        data = layout.data
        frame = pd.DataFrame({"x": data["x"].to_numpy(), "y": data["y"].to_numpy()})
        frame["keep"] = self.keep_mask(data)
        labels = self.column(data, "label")
        frame["label"] = ["" if pd.isna(v) else str(v) for v in labels.tolist()]
        scale = self.colour(data, frame, theme.text, theme)
        if "size" in self.mapping:
            frame["size"] = map_numeric(self.column(data, "size"), self.mapping["size"], TEXT_SIZE_RANGE)
        else:
            frame["size"] = self.params.get("size", theme.font_size)
        return Resolved(frame=frame, colour_scale=scale)

    def render(self, resolved, rows, ctx: RenderContext, xref, yref):
        frame = resolved.frame
        selected = frame[rows & frame["keep"].to_numpy()]
        if selected.empty:
            return [], []
        trace = go.Scatter(
            x=selected["x"].tolist(),
            y=selected["y"].tolist(),
            mode="text",
            text=selected["label"].tolist(),
            textposition=self.params.get("position", "top center"),
            textfont=dict(color=selected["colour"].tolist(), size=selected["size"].tolist()),
            hoverinfo="skip",
            showlegend=False,
        )
        return [trace], []


class GeomNodeLabel(GeomNodeText):
    """Node labels drawn in boxes (plotly annotations)."""

    def render(self, resolved, rows, ctx: RenderContext, xref, yref):
        frame = resolved.frame
        selected = frame[rows & frame["keep"].to_numpy()]
        theme = ctx.theme
        annotations = []
        for record in selected.to_dict("records"):
            annotations.append(dict(
                x=record["x"],
                y=record["y"],
                xref=xref,
                yref=yref,
                text=record["label"],
                showarrow=False,
                font=dict(color=record["colour"], size=record["size"]),
                bgcolor=self.params.get("fill", theme.label_fill),
                bordercolor=record["colour"],
                borderwidth=1,
                borderpad=2,
            ))
        return [], annotations


def geom_node_point(mapping: Aes | None = None, **params: Any) -> GeomNodePoint:
    """Draw nodes as points. Aesthetics: colour, fill, size, alpha, shape, filter.

    Without ``fill``, ``colour`` sets the marker colour. With ``fill``, the
    fill sets the marker colour and ``colour`` its outline.
    """
    return GeomNodePoint(mapping, **params)


def geom_node_text(mapping: Aes | None = None, **params: Any) -> GeomNodeText:
    """Draw node labels. ``position`` sets the plotly text position."""
    return GeomNodeText(mapping, **params)


def geom_node_label(mapping: Aes | None = None, **params: Any) -> GeomNodeLabel:
    """Draw node labels in boxes. ``fill`` sets the box colour."""
    return GeomNodeLabel(mapping, **params)


__all__ = [
    "GeomNodePoint",
    "GeomNodeText",
    "GeomNodeLabel",
    "geom_node_point",
    "geom_node_text",
    "geom_node_label",
]
