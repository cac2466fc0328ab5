"""
ui/layout.py
============
All Dash layout components: navbar, the input cards and the chart card.

Callbacks are NOT defined here – see ui/callbacks/.
This file only builds component trees; build_legend is filled per render.
"""
from __future__ import annotations

import json
from typing import List

import dash_bootstrap_components as dbc
from dash import dash_table, dcc, html

from config import CHART_HEIGHT_PX, DEFAULT_CHART_CONFIG, DEFAULT_SNAPSHOT
from utils.helpers import icon_class

# ---------------------------------------------------------------------------
# Navbar
# ---------------------------------------------------------------------------
navbar = dbc.Navbar(
    dbc.Container([
        dbc.NavbarBrand([html.I(className="bi bi-thermometer-half me-2"), "Psychrometric Chart"]),
    ], fluid=True),
    color="dark", dark=True, sticky="top",
)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------
def _config_card() -> dbc.Card:
    return dbc.Card([
        dbc.CardHeader("⚙️ Chart configuration"),
        dbc.CardBody([
            dcc.Textarea(
                id="config-json",
                value=json.dumps(DEFAULT_CHART_CONFIG, indent=2),
                style={"width": "100%", "height": "320px", "fontFamily": "monospace", "fontSize": "12px"},
            ),
            dbc.FormText(
                "points, comfortRange, massFlowRate, showEnthalpy, showWetBulb, showDewPoint, "
                "showPointLabels, displayMode, darkMode, temperatureUnit, zoom_temp_min/max, "
                "zoom_humidity_min/max"
            ),
        ]),
    ], className="mb-4")


def _snapshot_card() -> dbc.Card:
    return dbc.Card([
        dbc.CardHeader("📡 Sensor snapshot"),
        dbc.CardBody([
            dcc.Textarea(
                id="snapshot-json",
                value=json.dumps(DEFAULT_SNAPSHOT, indent=2),
                style={"width": "100%", "height": "220px", "fontFamily": "monospace", "fontSize": "12px"},
            ),
            dbc.Button("Render", id="render-btn", color="primary", className="mt-3", n_clicks=0),
        ]),
    ], className="mb-4")


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
def _chart_card() -> dbc.Card:
    return dbc.Card([
        dbc.CardHeader("📈 Psychrometric chart"),
        dbc.CardBody([
            html.Div(id="chart-messages"),
            dcc.Loading(
                dcc.Graph(id="psychro-chart", config={"displayModeBar": False},
                          style={"height": f"{CHART_HEIGHT_PX + 40}px"}),
            ),
            html.Div(id="chart-legend", className="d-flex flex-wrap gap-3 mt-2"),
        ]),
    ], className="mb-4")


def build_legend(points) -> List[html.Span]:
    """Legend entries (color swatch, icon, label) for the rendered points."""
    return [
        html.Span([
            html.Span(style={
                "display": "inline-block", "width": "12px", "height": "12px", "borderRadius": "50%",
                "backgroundColor": p.color, "boxShadow": f"0 2px 5px {p.color}",
            }, className="me-2"),
            html.I(className=f"{icon_class(p.config.icon)} me-1"),
            p.label,
        ], className="legend-item d-inline-flex align-items-center")
        for p in points
    ]


def _points_card() -> dbc.Card:
    return dbc.Card([
        dbc.CardHeader("🧮 Derived values"),
        dbc.CardBody([
            dash_table.DataTable(
                id="points-table",
                columns=[],
                data=[],
                style_data_conditional=[],
                style_table={"overflowX": "auto"},
                style_cell={"fontFamily": "Arial, sans-serif", "fontSize": "13px", "padding": "4px"},
                style_header={"fontWeight": "bold"},
            ),
        ]),
    ], className="mb-4")


def build_layout() -> html.Div:
    return html.Div([
        navbar,
        dbc.Container([
            dbc.Row([
                dbc.Col([_config_card(), _snapshot_card()], md=4),
                dbc.Col([_chart_card(), _points_card()], md=8),
            ], className="mt-4"),
        ], fluid=True),
    ])
