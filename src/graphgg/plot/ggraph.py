"""The plot object: a graph, a layout, and layers added with ``+``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

import networkx as nx
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from ..errors import PlotError
from ..graph.tbl_graph import TblGraph
from ..layouts import Layout, create_layout
from .facets import Facet, Panel
from .geom import Geom, RenderContext, Resolved
from .theme import Labels, Theme, theme_graph

logger = logging.getLogger(__name__)


def _axis_refs(index: int) -> tuple[str, str]:
    """Axis names of the ``index``-th subplot (row-major, 0-based)."""
    if index == 0:
        return "x", "y"
    return f"x{index + 1}", f"y{index + 1}"


def _widen(extent: list[float], resolved: Resolved) -> None:
    """Grow ``[xmin, xmax, ymin, ymax]`` to cover the drawn edge paths."""
    frame = resolved.frame
    for px, py in zip(frame.loc[frame["keep"], "path_x"], frame.loc[frame["keep"], "path_y"]):
        xs = [v for v in px if v is not None]
        ys = [v for v in py if v is not None]
        if xs:
            extent[0] = min(extent[0], min(xs))
            extent[1] = max(extent[1], max(xs))
        if ys:
            extent[2] = min(extent[2], min(ys))
            extent[3] = max(extent[3], max(ys))


class GGraph:
    """A network plot built up from geoms, a facet, a theme and labels.

    Adding a component returns a new plot; the computed layout is shared, so
    force-directed layouts stay put while layers are added.
    """

    def __init__(
        self,
        graph: TblGraph | nx.Graph | Layout,
        layout: str = "auto",
        layout_params: dict[str, Any] | None = None,
        geoms: Iterable[Geom] = (),
        facet: Facet | None = None,
        theme: Theme | None = None,
        labels: Labels | None = None,
    ):
        if isinstance(graph, Layout):
            self._cache: dict[str, Layout] = {"layout": graph}
            self.graph = graph.graph
            layout = graph.name
        else:
            self._cache = {}
            self.graph = graph
        self.layout_name = layout
        self.layout_params = dict(layout_params or {})
        self.geoms = list(geoms)
        self.facet = facet or Facet()
        self.theme = theme or theme_graph()
        self.labels = labels or Labels()

    def __repr__(self) -> str:
        layers = ", ".join(repr(g) for g in self.geoms) or "no layers"
        return f"<GGraph layout='{self.layout_name}' [{layers}]>"

    @property
    def layout(self) -> Layout:
        if "layout" not in self._cache:
            self._cache["layout"] = create_layout(self.graph, self.layout_name, **self.layout_params)
        return self._cache["layout"]

    def _replace(self, **changes: Any) -> "GGraph":
        new = GGraph.__new__(GGraph)
        new.__dict__.update(self.__dict__)
        new.geoms = list(self.geoms)
        for key, value in changes.items():
            setattr(new, key, value)
        return new

    def __add__(self, other: Any) -> "GGraph":
        if isinstance(other, (list, tuple)):
            result = self
            for item in other:
                result = result + item
            return result
        if isinstance(other, Geom):
            return self._replace(geoms=self.geoms + [other])
        if isinstance(other, Facet):
            return self._replace(facet=other)
        if isinstance(other, Theme):
            return self._replace(theme=other)
        if isinstance(other, Labels):
            return self._replace(labels=self.labels.merge(other))
        return NotImplemented

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def build(self) -> go.Figure:
        """Render the plot to a plotly figure."""
        layout = self.layout
        theme = self.theme
        panels = self.facet.panels(layout)
        if not panels:
            raise PlotError("Facet produced no panels; the facet variable has no values")
        nrows, ncols = self.facet.shape(panels)
        titles = self._subplot_titles(panels, nrows, ncols)

        fig = make_subplots(
            rows=nrows,
            cols=ncols,
            subplot_titles=titles,
            horizontal_spacing=min(0.03, 0.5 / (ncols - 1)) if ncols > 1 else 0.2,
            vertical_spacing=min(0.08, 0.5 / (nrows - 1)) if nrows > 1 else 0.3,
        )
        fig.update_annotations(font=dict(color=theme.text, size=theme.font_size + 2))

        ctx = RenderContext(theme=theme)
        extent = list(layout.bounds())
        # Edges go underneath nodes
        ordered = sorted(self.geoms, key=lambda g: 0 if g.kind == "edge" else 1)
        for geom in ordered:
            resolved = geom.resolve(layout, theme)
            if geom.kind == "edge":
                _widen(extent, resolved)
            for panel in panels:
                index = (panel.row - 1) * ncols + (panel.col - 1)
                xref, yref = _axis_refs(index)
                rows = panel.edges if geom.kind == "edge" else panel.nodes
                traces, annotations = geom.render(resolved, rows, ctx, xref, yref)
                for trace in traces:
                    fig.add_trace(trace, row=panel.row, col=panel.col)
                for annotation in annotations:
                    fig.add_annotation(annotation)
        logger.debug("Built figure with %d traces in %d panel(s)", len(fig.data), len(panels))

        self._style(fig, extent, ctx, nrows * ncols)
        return fig

    def _subplot_titles(self, panels: list[Panel], nrows: int, ncols: int) -> list[str] | None:
        if all(p.title is None for p in panels):
            return None
        titles = [""] * (nrows * ncols)
        for panel in panels:
            titles[(panel.row - 1) * ncols + (panel.col - 1)] = panel.title or ""
        return titles

    def _style(self, fig: go.Figure, extent: list[float], ctx: RenderContext, count: int) -> None:
        theme = self.theme
        title_text = None
        if self.labels.title:
            title_text = f"<b>{self.labels.title}</b>"
            if self.labels.subtitle:
                title_text += f"<br><sup>{self.labels.subtitle}</sup>"
        elif self.labels.subtitle:
            title_text = self.labels.subtitle

        fig.update_layout(
            title=dict(text=title_text, x=0.5, xanchor="center", font=dict(size=theme.title_size, color=theme.text)),
            showlegend=bool(ctx.legend_seen),
            legend=dict(
                title=dict(text=", ".join(ctx.legend_titles)),
                font=dict(color=theme.text),
            ),
            hovermode="closest",
            margin=dict(b=40, l=40, r=40, t=80),
            paper_bgcolor=theme.background,
            plot_bgcolor=theme.background,
            width=theme.width,
            height=theme.height,
        )
        xmin, xmax, ymin, ymax = extent
        pad_x = (xmax - xmin) * 0.08 or 0.5
        pad_y = (ymax - ymin) * 0.08 or 0.5
        axis = dict(showgrid=False, zeroline=False, showticklabels=False, visible=False)
        fig.update_xaxes(range=[xmin - pad_x, xmax + pad_x], **axis)
        fig.update_yaxes(range=[ymin - pad_y, ymax + pad_y], **axis)
        for index in range(count):
            xref, yref = _axis_refs(index)
            fig.update_layout({"yaxis" + yref[1:]: dict(scaleanchor=xref, scaleratio=1)})

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save(self, path: Path | str, auto_open: bool = False) -> Path:
        """Write the figure to ``.html`` or ``.json``."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in (".html", ".json"):
            raise PlotError(f"Unsupported output format '{suffix}'. Use .html or .json")
        fig = self.build()
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".html":
            fig.write_html(str(path), auto_open=auto_open)
        else:
            fig.write_json(str(path))
        logger.info("Saved plot to %s", path)
        return path

    def show(self) -> None:
        self.build().show()


def ggraph(graph: TblGraph | nx.Graph | Layout, layout: str = "auto", **params: Any) -> GGraph:
    """Start a network plot.

    Args:
        graph: Graph (or a precomputed ``Layout``) to plot
        layout: Layout name (see ``list_layouts()``)
        **params: Layout parameters, e.g. ``seed`` or ``root``

    Returns:
        GGraph to which geoms, facets, themes and labels are added with ``+``
    """
    return GGraph(graph, layout=layout, layout_params=params)


__all__ = ["GGraph", "ggraph"]
