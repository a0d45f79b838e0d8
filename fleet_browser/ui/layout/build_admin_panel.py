from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.ui.ids import IDs


def build_admin_panel() -> dbc.Modal:
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle("הגדרות")),
            dbc.ModalBody(
                [
                    dbc.ListGroup(
                        [
                            dbc.ListGroupItem(
                                [
                                    html.Div("בדיקת בסיס נתונים", className="fw-medium"),
                                    html.Small("ספירת הרשומות במאגר הפעיל", className="text-muted d-block mb-2"),
                                    dbc.Button("בדיקה", id=IDs.Control.ADMIN_CHECK_BTN, size="sm", color="primary"),
                                ]
                            ),
                            dbc.ListGroupItem(
                                [
                                    html.Div("ביטול מרותקים", className="fw-medium"),
                                    html.Small("העברת כל הכלים המרותקים לסטטוס לא פעיל", className="text-muted d-block mb-2"),
                                    dbc.Button("ביטול", id=IDs.Control.ADMIN_RELEASE_BTN, size="sm", color="danger"),
                                ]
                            ),
                        ]
                    ),
                    dcc.ConfirmDialog(
                        id=IDs.Control.ADMIN_RELEASE_CONFIRM,
                        message="האם אתה בטוח שברצונך לבטל את כל המרותקים?",
                    ),
                    html.Div(id=IDs.Control.ADMIN_STATUS, className="mt-3"),
                ]
            ),
        ],
        id=IDs.Control.ADMIN_MODAL,
        is_open=False,
    )
