from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.ui.ids import IDs
from fleet_browser.ui.layout.build_filter_panel import SEARCH_DEBOUNCE


def build_search_panel() -> dbc.Card:
    return dbc.Card(
        dbc.CardBody(
            [
                html.H4("חיפוש מהיר", className="card-title"),
                html.P("הקלידו מספר רישוי או חלק ממנו", className="text-muted"),
                dcc.Input(
                    id=IDs.Control.QUICK_SEARCH_INPUT,
                    type="search",
                    placeholder="מספר רישוי...",
                    debounce=SEARCH_DEBOUNCE,
                    className="form-control form-control-lg mb-3",
                ),
                html.Div(id=IDs.Control.QUICK_SEARCH_RESULTS),
            ]
        ),
        className="mt-3 fb-search-card",
    )
