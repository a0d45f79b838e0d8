from __future__ import annotations

from typing import Dict, List

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.ui.helpers import dropdown_options
from fleet_browser.ui.ids import IDs, filter_id

# Client-side debounce for search-as-you-type, in seconds.
SEARCH_DEBOUNCE = 0.3


def build_filter_controls(options_by_field: Dict[str, List[str]]) -> List[html.Div]:
    """One multi-select per filterable field; rebuilt whenever the collection changes."""
    return [
        html.Div(
            [
                html.Label(field, className="form-label"),
                dcc.Dropdown(
                    id=filter_id(field),
                    options=dropdown_options(values),
                    multi=True,
                    placeholder="הכל",
                    className="mb-3",
                ),
            ]
        )
        for field, values in options_by_field.items()
    ]


def build_filter_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("סינון", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("חיפוש חופשי", className="form-label"),
                    dcc.Input(
                        id=IDs.Control.SEARCH_INPUT,
                        type="search",
                        placeholder="חיפוש בכל השדות...",
                        debounce=SEARCH_DEBOUNCE,
                        className="form-control mb-3",
                    ),
                    html.Div(id=IDs.Control.FILTERS_CONTAINER),
                    html.Div(
                        id=IDs.Control.DATE_RANGE_CONTAINER,
                        children=[
                            html.Label("טווח תאריכים", className="form-label"),
                            dcc.DatePickerRange(
                                id=IDs.Control.DATE_RANGE,
                                display_format="DD/MM/YYYY",
                                clearable=True,
                                is_RTL=True,
                                className="mb-3",
                            ),
                        ],
                    ),
                    html.Hr(),
                    html.Label("עמודות מוצגות", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.COLUMN_SELECT,
                        multi=True,
                        placeholder="עמודות ברירת מחדל",
                        className="mb-3",
                    ),
                    html.Div(
                        [
                            dbc.Button("ניקוי סינון", id=IDs.Control.CLEAR_FILTERS_BTN, color="light", className="me-2"),
                            dbc.Button("רענון נתונים", id=IDs.Control.RELOAD_BTN, color="light"),
                        ],
                        className="d-flex",
                    ),
                ]
            ),
        ],
        className="fb-sidebar",
    )
