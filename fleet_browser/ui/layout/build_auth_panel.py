from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.ui.ids import IDs


def build_auth_panel() -> dbc.Offcanvas:
    return dbc.Offcanvas(
        [
            html.P("התחברות נדרשת לעריכת רשומות ולפעולות ניהול", className="text-muted"),
            html.Label("דוא\"ל", className="form-label"),
            dcc.Input(id=IDs.Control.AUTH_EMAIL, type="email", className="form-control mb-2"),
            html.Label("סיסמה", className="form-label"),
            dcc.Input(id=IDs.Control.AUTH_PASSWORD, type="password", className="form-control mb-3"),
            html.Div(
                [
                    dbc.Button("התחברות", id=IDs.Control.AUTH_SIGN_IN_BTN, color="primary", className="me-2"),
                    dbc.Button("התנתקות", id=IDs.Control.AUTH_SIGN_OUT_BTN, color="light"),
                ],
                className="d-flex",
            ),
            html.Div(id=IDs.Control.AUTH_STATUS, className="mt-3"),
        ],
        id=IDs.Control.AUTH_OFFCANVAS,
        title="חשבון",
        placement="end",
        is_open=False,
    )
