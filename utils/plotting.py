"""
utils/plotting.py
=================
Plotly implementation of the drawing surface.

Primitives become layout shapes (SVG paths, circles, rectangles), annotations
and, for gradient fills, a filled scatter trace. The figure uses pixel
coordinates directly: both axes are hidden, x runs 0..width and y is reversed
so that the origin sits top-left as on a canvas.

Shapes issued before the first trace are placed below the traces and the rest
above, which keeps the painter's order intact around gradient fills.
"""
from __future__ import annotations

import html
from typing import Any, Dict, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from domain.coordinates import ViewTransform
from domain.primitives import Gradient
from services.chart_service import HALO_RADIUS
from services.point_service import ProcessedPoint, point_hover_text

TRANSPARENT = "rgba(0,0,0,0)"
FONT_FAMILY = "Arial, sans-serif"
TOOLTIP_BACKGROUND = "rgba(0, 0, 0, 0.9)"


def _dash(pattern: Sequence[float]) -> str:
    if not pattern:
        return "solid"
    return ",".join(f"{d:g}px" for d in pattern)


class PlotlySurface:

    def __init__(self, width: float, height: float, bg_color: str = "#ffffff"):
        self.width = width
        self.height = height
        self.bg_color = bg_color
        self._shapes: List[Dict[str, Any]] = []
        self._annotations: List[Dict[str, Any]] = []
        self._traces: List[go.Scatter] = []
        self._reset_path()

    def _reset_path(self) -> None:
        self._segments: List[str] = []
        self._vertices: List[Tuple[float, float]] = []
        self._circle: Optional[Tuple[float, float, float]] = None

    def _add_shape(self, **shape) -> None:
        shape.update(xref="x", yref="y", layer="above" if self._traces else "below")
        self._shapes.append(shape)

    # ------------------------------------------------------------------
    # Surface operations
    # ------------------------------------------------------------------

    def clear(self, color: str) -> None:
        self.bg_color = color
        self._shapes = []
        self._annotations = []
        self._traces = []
        self._reset_path()

    def begin_path(self) -> None:
        self._reset_path()

    def move_to(self, x: float, y: float) -> None:
        self._segments.append(f"M {x:.2f},{y:.2f}")
        self._vertices.append((x, y))

    def line_to(self, x: float, y: float) -> None:
        self._segments.append(f"L {x:.2f},{y:.2f}")
        self._vertices.append((x, y))

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> None:
        self._segments.append(f"Q {cx:.2f},{cy:.2f} {x:.2f},{y:.2f}")
        self._vertices.append((x, y))

    def arc(self, x: float, y: float, radius: float) -> None:
        self._circle = (x, y, radius)

    def close_path(self) -> None:
        self._segments.append("Z")

    def fill(self, style) -> None:
        if self._circle is not None:
            x, y, r = self._circle
            self._add_shape(type="circle", x0=x - r, y0=y - r, x1=x + r, y1=y + r,
                            fillcolor=style, line=dict(width=0))
        elif isinstance(style, Gradient):
            self._fill_gradient(style)
        elif self._segments:
            self._add_shape(type="path", path=" ".join(self._segments), fillcolor=style, line=dict(width=0))

    def _fill_gradient(self, gradient: Gradient) -> None:
        xs = [x for x, _ in self._vertices]
        ys = [y for _, y in self._vertices]
        self._traces.append(go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            fill="toself",
            fillgradient=dict(
                type="vertical",
                start=gradient.start[1],
                stop=gradient.end[1],
                colorscale=[[0.0, gradient.start_color], [1.0, gradient.end_color]],
            ),
            line=dict(width=0),
            hoverinfo="skip",
            showlegend=False,
        ))

    def stroke(self, color: str, line_width: float = 1.0, dash: Sequence[float] = ()) -> None:
        line = dict(color=color, width=line_width, dash=_dash(dash))
        if self._circle is not None:
            x, y, r = self._circle
            self._add_shape(type="circle", x0=x - r, y0=y - r, x1=x + r, y1=y + r,
                            fillcolor=TRANSPARENT, line=line)
        elif self._segments:
            self._add_shape(type="path", path=" ".join(self._segments), line=line)

    def add_trace(self, trace: go.Scatter) -> None:
        """Extra interactive trace on top of the painted layers."""
        self._traces.append(trace)

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._add_shape(type="rect", x0=x, y0=y, x1=x + width, y1=y + height,
                        fillcolor=color, line=dict(width=0))

    def fill_text(self, text: str, x: float, y: float, color: str,
                  font_size: float = 12.0, bold: bool = False, align: str = "left") -> None:
        body = html.escape(text)
        self._annotations.append(dict(
            x=x,
            y=y,
            xref="x",
            yref="y",
            text=f"<b>{body}</b>" if bold else body,
            showarrow=False,
            xanchor=align if align in ("left", "center", "right") else "left",
            yanchor="bottom",
            font=dict(family=FONT_FAMILY, size=font_size, color=color),
        ))

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def figure(self, title: Optional[str] = None) -> go.Figure:
        fig = go.Figure(data=list(self._traces))
        fig.update_layout(
            width=self.width,
            height=self.height,
            autosize=False,
            margin=dict(l=0, r=0, t=0, b=0),
            paper_bgcolor=self.bg_color,
            plot_bgcolor=self.bg_color,
            shapes=self._shapes,
            annotations=self._annotations,
            showlegend=False,
            hovermode="closest",
            font=dict(family=FONT_FAMILY, size=12),
        )
        if title:
            fig.update_layout(
                margin=dict(l=0, r=0, t=40, b=0),
                height=self.height + 40,
                title=dict(text=title, x=0.5, xanchor="center", font=dict(size=16, family=FONT_FAMILY)),
            )
        fig.update_xaxes(range=[0, self.width], visible=False, fixedrange=True)
        fig.update_yaxes(range=[self.height, 0], visible=False, fixedrange=True)
        return fig


# ---------------------------------------------------------------------------
# Point tooltips
# ---------------------------------------------------------------------------

def add_point_markers(
    surface: PlotlySurface,
    points: Sequence[ProcessedPoint],
    view: ViewTransform,
    temperature_unit: str = "C",
) -> None:
    """
    One invisible hover target per point, sized like its halo.

    The painted dot stays a layout shape; shapes cannot carry hover text, so
    the tooltip with the derived values lives on this marker trace.
    """
    for p in points:
        x = float(view.temp_to_x(p.temp))
        y = float(view.humidity_to_y(p.temp, p.humidity))
        surface.add_trace(go.Scatter(
            x=[x],
            y=[y],
            mode="markers",
            name=p.label,
            marker=dict(size=2 * HALO_RADIUS * view.scale, color=TRANSPARENT),
            hovertext=[point_hover_text(p, temperature_unit)],
            hoverinfo="text",
            hoverlabel=dict(
                bgcolor=TOOLTIP_BACKGROUND,
                bordercolor=p.color,
                font=dict(family=FONT_FAMILY, size=13, color="white"),
            ),
            showlegend=False,
        ))
