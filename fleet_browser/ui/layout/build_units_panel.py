from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.ui.ids import IDs


def build_units_panel() -> html.Div:
    return html.Div(
        [
            dbc.Row(id=IDs.Control.REGION_CARDS, className="g-3 mt-1"),
            dbc.Card(
                [
                    dbc.CardHeader("היסטוריית כלי", className="fw-semibold"),
                    dbc.CardBody(
                        [
                            dcc.Dropdown(
                                id=IDs.Control.UNIT_SELECT,
                                placeholder="בחרו קוד רכב",
                                className="mb-3",
                            ),
                            html.Div(id=IDs.Control.UNIT_HISTORY),
                        ]
                    ),
                ],
                className="mt-3",
            ),
        ]
    )
