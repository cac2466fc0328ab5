"""
app.py
======
Dash entry point: builds the app, sets the layout and registers callbacks.

Run with ``python app.py``; ``server`` is exposed for WSGI hosting.
"""
from __future__ import annotations

import logging

import dash_bootstrap_components as dbc
from dash import Dash

from config import MDI_STYLESHEET
from ui.callbacks import chart
from ui.layout import build_layout

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

app = Dash(
    __name__,
    external_stylesheets=[dbc.themes.BOOTSTRAP, dbc.icons.BOOTSTRAP, MDI_STYLESHEET],
    suppress_callback_exceptions=True,
)
app.title = "Psychrometric Chart"
server = app.server

app.layout = build_layout()
chart.register(app)


if __name__ == "__main__":
    app.run(debug=True)
