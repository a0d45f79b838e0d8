from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.core.statistics import TIMEFRAMES
from fleet_browser.ui.ids import IDs

_TIMEFRAME_LABELS = {"year": "שנה", "month": "חודש", "week": "שבוע", "day": "יום"}


def build_views_panel() -> dbc.Row:
    controls = dbc.Card(
        [
            dbc.CardHeader("תצוגה", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("סוג תצוגה", className="form-label"),
                    dcc.Dropdown(id=IDs.Control.VIEW_SELECT, clearable=False, className="mb-3"),

                    html.Label("שדה", className="form-label"),
                    dcc.Dropdown(id=IDs.Control.VIEW_FIELD_SELECT, clearable=False, className="mb-3"),

                    html.Label("סוג גרף", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.VIEW_CHART_SELECT,
                        options=[
                            {"label": "אוטומטי", "value": "auto"},
                            {"label": "עוגה", "value": "pie"},
                            {"label": "עמודות", "value": "bar"},
                        ],
                        value="auto",
                        clearable=False,
                        className="mb-3",
                    ),

                    html.Label("טווח זמן", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.VIEW_TIMEFRAME_SELECT,
                        options=[{"label": _TIMEFRAME_LABELS.get(k, k), "value": k} for k in TIMEFRAMES],
                        value="month",
                        clearable=False,
                    ),
                    html.Small("התצוגה משתמשת בסינון שנבחר בלשונית הרשומות", className="text-muted d-block mt-3"),
                ]
            ),
        ],
        className="fb-sidebar",
    )

    plot = dbc.Card(
        dbc.CardBody(dcc.Loading(dcc.Graph(id=IDs.Control.MAIN_GRAPH, style={"height": "620px"}))),
    )

    return dbc.Row([dbc.Col(controls, md=3, className="mt-3"), dbc.Col(plot, md=9, className="mt-3")], className="gx-3")
