"""
ui/callbacks/chart.py
=====================
Callback that renders the chart and the derived-values table.
"""
from __future__ import annotations

import json
import logging

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Input, Output, State

from config import CHART_HEIGHT_PX, CHART_WIDTH_PX
from services.chart_service import render_chart
from services.config_service import ConfigurationError, parse_config
from services.point_service import points_to_frame
from ui.layout import build_legend
from utils.helpers import mold_risk_color
from utils.plotting import PlotlySurface, add_point_markers

logger = logging.getLogger(__name__)


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(width=CHART_WIDTH_PX, height=CHART_HEIGHT_PX, margin=dict(l=0, r=0, t=0, b=0),
                      paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)")
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    return fig


def _mold_risk_styles(points, dark_mode: bool):
    return [
        {
            "if": {"row_index": i, "column_id": "Mold risk"},
            "color": mold_risk_color(p.properties.mold_risk, dark_mode),
            "fontWeight": "bold",
        }
        for i, p in enumerate(points)
    ]


def register(app):

    @app.callback(
        Output("psychro-chart", "figure"),
        Output("points-table", "columns"),
        Output("points-table", "data"),
        Output("points-table", "style_data_conditional"),
        Output("chart-messages", "children"),
        Output("chart-legend", "children"),
        Input("render-btn", "n_clicks"),
        State("config-json", "value"),
        State("snapshot-json", "value"),
    )
    def update_chart(_n_clicks, config_text, snapshot_text):
        try:
            raw_config = json.loads(config_text or "{}")
            snapshot = json.loads(snapshot_text or "{}")
        except json.JSONDecodeError as e:
            return _empty_figure(), [], [], [], dbc.Alert(f"Invalid JSON: {e}", color="danger"), []

        try:
            config = parse_config(raw_config)
        except ConfigurationError as e:
            logger.warning("Configuration rejected: %s", e)
            return _empty_figure(), [], [], [], dbc.Alert(str(e), color="danger"), []

        options = config.options
        surface = PlotlySurface(config.width, config.height, options.bg_color)
        result = render_chart(config, snapshot, surface)
        add_point_markers(surface, result.points, result.view, options.temperature_unit)

        frame = points_to_frame(result.points, options.temperature_unit, options.display_mode)
        columns = [{"name": c, "id": c} for c in frame.columns]
        styles = _mold_risk_styles(result.points, options.dark_mode)
        alerts = [dbc.Alert(msg, color="warning", className="py-2") for msg in result.messages]
        legend = build_legend(result.points)
        return surface.figure(config.title or None), columns, frame.to_dict("records"), styles, alerts, legend
