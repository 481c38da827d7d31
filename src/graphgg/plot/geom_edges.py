"""Edge geoms: straight links, arcs, fans and self loops.

Each geom turns the endpoint coordinates of the layout into a polyline per
edge. Edges sharing the same visual properties are drawn as a single plotly
trace, with ``None`` separating the individual lines.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from ..layouts import Layout
from .aes import Aes
from .geom import Geom, RenderContext, Resolved, hover_text
from .scales import ALPHA_RANGE, DASHES, WIDTH_RANGE, map_cycle, map_numeric
from .theme import Theme

Path = tuple[list[float], list[float]] | None


def bezier(x0: float, y0: float, cx: float, cy: float, x1: float, y1: float, n: int = 40) -> tuple[list[float], list[float]]:
    """Points along the quadratic Bezier curve from (x0, y0) to (x1, y1)."""
    t = np.linspace(0.0, 1.0, n)
    xs = (1 - t) ** 2 * x0 + 2 * (1 - t) * t * cx + t ** 2 * x1
    ys = (1 - t) ** 2 * y0 + 2 * (1 - t) * t * cy + t ** 2 * y1
    return xs.tolist(), ys.tolist()


def curved(x0, y0, x1, y1, offset: float, n: int = 40) -> tuple[list[float], list[float]]:
    """Curve bending ``offset`` times the edge length to the left of its direction.

    An offset of 1 gives a curve whose peak sits half an edge length away
    from the straight line.
    """
    if offset == 0:
        return [x0, x1], [y0, y1]
    mx, my = (x0 + x1) / 2, (y0 + y1) / 2
    dx, dy = x1 - x0, y1 - y0
    return bezier(x0, y0, mx - offset * dy, my + offset * dx, x1, y1, n)


class GeomEdge(Geom):
    """Common resolution and rendering of edge geoms."""

    kind = "edge"
    aesthetics = frozenset({"colour", "width", "alpha", "linetype", "label"})

    def paths(self, edges: pd.DataFrame, layout: Layout) -> list[Path]:
        raise NotImplementedError

    def resolve(self, layout: Layout, theme: Theme) -> Resolved:
        data = layout.edges()
        paths = self.paths(data, layout) if not data.empty else []
        frame = pd.DataFrame(index=range(len(data)))
        frame["path_x"] = pd.Series([p[0] if p else None for p in paths], index=frame.index, dtype=object)
        frame["path_y"] = pd.Series([p[1] if p else None for p in paths], index=frame.index, dtype=object)
        frame["keep"] = self.keep_mask(data) & np.array([p is not None for p in paths], dtype=bool)
        scale = self.colour(data, frame, theme.edge, theme)

        if "width" in self.mapping:
            frame["width"] = map_numeric(self.column(data, "width"), self.mapping["width"], WIDTH_RANGE)
        else:
            frame["width"] = float(self.params.get("width", 1.5))
        if "alpha" in self.mapping:
            frame["alpha"] = map_numeric(self.column(data, "alpha"), self.mapping["alpha"], ALPHA_RANGE)
        else:
            frame["alpha"] = float(self.params.get("alpha", 1.0))
        if "linetype" in self.mapping:
            frame["dash"] = map_cycle(self.column(data, "linetype"), DASHES)
        else:
            frame["dash"] = self.params.get("linetype", "solid")
        if "label" in self.mapping:
            frame["label"] = ["" if pd.isna(v) else str(v) for v in self.column(data, "label").tolist()]

        arrow = "→" if layout.graph.is_directed else "—"
        attributes = layout.graph.edges
        frame["hover"] = [
            hover_text(f"{record['from']} {arrow} {record['to']}", record, skip=("from", "to"))
            for record in attributes.to_dict("records")
        ]
        middle = [(p[0][len(p[0]) // 2], p[1][len(p[1]) // 2]) if p else (None, None) for p in paths]
        frame["mid_x"] = [m[0] for m in middle]
        frame["mid_y"] = [m[1] for m in middle]

        order = self.legend_order(data, frame) if "colour" in self.mapping else []
        return Resolved(frame=frame, colour_scale=scale, legend_order=order)

    def render(self, resolved, rows, ctx: RenderContext, xref, yref):
        frame = resolved.frame
        if frame.empty:
            return [], []
        selected = frame[rows & frame["keep"].to_numpy()]
        if selected.empty:
            return [], []

        traces = []
        keys = ["colour", "width", "alpha", "dash", "legend"]
        for (colour, width, alpha, dash, legend), group in selected.groupby(keys, sort=False, dropna=False):
            label = legend if isinstance(legend, str) else None
            xs: list[float | None] = []
            ys: list[float | None] = []
            for px, py in zip(group["path_x"], group["path_y"]):
                xs.extend(px + [None])
                ys.extend(py + [None])
            traces.append(go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=dict(color=colour, width=width, dash=dash),
                opacity=alpha,
                name=label or "",
                legendgroup=self.legend_key(label) if label else None,
                showlegend=label is not None and ctx.claim_legend(self.legend_key(label)),
                hoverinfo="skip",
            ))

        # Invisible markers at the midpoints carry the hover text
        traces.append(go.Scatter(
            x=selected["mid_x"].tolist(),
            y=selected["mid_y"].tolist(),
            mode="markers",
            marker=dict(size=12, color="rgba(0,0,0,0)", opacity=0),
            hovertext=selected["hover"].tolist(),
            hovertemplate="%{hovertext}<extra></extra>",
            showlegend=False,
        ))
        if "label" in selected.columns:
            traces.append(go.Scatter(
                x=selected["mid_x"].tolist(),
                y=selected["mid_y"].tolist(),
                mode="text",
                text=selected["label"].tolist(),
                textfont=dict(color=ctx.theme.muted_text, size=ctx.theme.font_size - 1),
                hoverinfo="skip",
                showlegend=False,
            ))

        annotations = []
        if self.params.get("arrow", False):
            gap = self.params.get("arrow_gap", 6)
            for record in selected.to_dict("records"):
                px, py = record["path_x"], record["path_y"]
                annotations.append(dict(
                    x=px[-1],
                    y=py[-1],
                    ax=px[-2],
                    ay=py[-2],
                    xref=xref,
                    yref=yref,
                    axref=xref,
                    ayref=yref,
                    text="",
                    showarrow=True,
                    arrowhead=2,
                    arrowsize=1,
                    arrowwidth=record["width"],
                    arrowcolor=record["colour"],
                    opacity=record["alpha"],
                    standoff=gap,
                ))
        return traces, annotations


class GeomEdgeLink(GeomEdge):
    """Straight lines between the endpoints. Loops are not drawn."""

    def paths(self, edges, layout):
        return [
            None if a == b else ([x0, x1], [y0, y1])
            for a, b, x0, y0, x1, y1 in zip(edges["from"], edges["to"], edges["x"], edges["y"], edges["xend"], edges["yend"])
        ]


class GeomEdgeArc(GeomEdge):
    """Curved edges. With a linear layout this draws an arc diagram.

    On circular layouts the arcs bend towards the centre.
    """

    def paths(self, edges, layout):
        strength = float(self.params.get("strength", 1.0))
        n = int(self.params.get("n", 40))
        cx, cy = layout.data["x"].mean(), layout.data["y"].mean()
        result: list[Path] = []
        for a, b, x0, y0, x1, y1 in zip(edges["from"], edges["to"], edges["x"], edges["y"], edges["xend"], edges["yend"]):
            if a == b:
                result.append(None)
                continue
            offset = strength
            if layout.circular:
                mx, my = (x0 + x1) / 2, (y0 + y1) / 2
                left = (mx - (y1 - y0) - cx) ** 2 + (my + (x1 - x0) - cy) ** 2
                right = (mx + (y1 - y0) - cx) ** 2 + (my - (x1 - x0) - cy) ** 2
                offset = strength if left <= right else -strength
            result.append(curved(x0, y0, x1, y1, offset, n))
        return result


class GeomEdgeFan(GeomEdge):
    """Parallel edges spread apart; single edges stay straight."""

    def paths(self, edges, layout):
        strength = float(self.params.get("strength", 1.0))
        n = int(self.params.get("n", 40))
        position = {name: i for i, name in enumerate(layout.data["name"])}
        pairs: dict[tuple[Any, Any], list[int]] = {}
        for i, (a, b) in enumerate(zip(edges["from"], edges["to"])):
            if a == b:
                continue
            key = (a, b) if position[a] <= position[b] else (b, a)
            pairs.setdefault(key, []).append(i)

        result: list[Path] = [None] * len(edges)
        for (first, _), indices in pairs.items():
            count = len(indices)
            for rank, i in enumerate(indices):
                row = edges.iloc[i]
                offset = (rank - (count - 1) / 2) * strength * 0.5
                if row["from"] != first:
                    offset = -offset
                result[i] = curved(row["x"], row["y"], row["xend"], row["yend"], offset, n)
        return result


class GeomEdgeLoop(GeomEdge):
    """Self loops drawn as small circles sitting on top of their node."""

    def paths(self, edges, layout):
        xmin, xmax, ymin, ymax = layout.bounds()
        extent = max(xmax - xmin, ymax - ymin) or 1.0
        radius = float(self.params.get("loop_size", 0.05)) * extent
        n = int(self.params.get("n", 40))
        seen: dict[Any, int] = {}
        result: list[Path] = []
        for a, b, x, y in zip(edges["from"], edges["to"], edges["x"], edges["y"]):
            if a != b:
                result.append(None)
                continue
            r = radius * (1 + 0.5 * seen.get(a, 0))
            seen[a] = seen.get(a, 0) + 1
            angles = np.linspace(-math.pi / 2, 3 * math.pi / 2, n)
            result.append(((x + r * np.cos(angles)).tolist(), (y + r + r * np.sin(angles)).tolist()))
        return result


def geom_edge_link(mapping: Aes | None = None, **params: Any) -> GeomEdgeLink:
    """Draw edges as straight lines. ``arrow=True`` marks direction."""
    return GeomEdgeLink(mapping, **params)


def geom_edge_arc(mapping: Aes | None = None, **params: Any) -> GeomEdgeArc:
    """Draw edges as arcs bent by ``strength`` (default 1)."""
    return GeomEdgeArc(mapping, **params)


def geom_edge_fan(mapping: Aes | None = None, **params: Any) -> GeomEdgeFan:
    """Draw edges so that parallel edges fan out."""
    return GeomEdgeFan(mapping, **params)


def geom_edge_loop(mapping: Aes | None = None, **params: Any) -> GeomEdgeLoop:
    """Draw self loops. ``loop_size`` is relative to the layout extent."""
    return GeomEdgeLoop(mapping, **params)


__all__ = [
    "GeomEdge",
    "GeomEdgeLink",
    "GeomEdgeArc",
    "GeomEdgeFan",
    "GeomEdgeLoop",
    "geom_edge_link",
    "geom_edge_arc",
    "geom_edge_fan",
    "geom_edge_loop",
    "bezier",
    "curved",
]
