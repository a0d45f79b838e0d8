from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.core.search_engine import PAGE_SIZE
from fleet_browser.ui.helpers import records_table
from fleet_browser.ui.ids import IDs


def build_edit_modal() -> dbc.Modal:
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle("עריכת רשומה")),
            dbc.ModalBody(
                [
                    dcc.Store(id=IDs.Control.EDIT_RECORD_KEY),
                    html.Div(id=IDs.Control.EDIT_FORM),
                    html.Div(id=IDs.Control.EDIT_STATUS),
                ]
            ),
            dbc.ModalFooter(
                [
                    dbc.Button("ביטול", id=IDs.Control.EDIT_CANCEL_BTN, color="light", className="me-2"),
                    dbc.Button("שמירה", id=IDs.Control.EDIT_SAVE_BTN, color="primary"),
                ]
            ),
        ],
        id=IDs.Control.EDIT_MODAL,
        is_open=False,
        size="lg",
    )


def build_table_panel() -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Strong("רשומות"),
                        html.Span(id=IDs.Control.RESULT_COUNT, className="text-muted ms-3"),
                        html.Div(
                            [
                                dbc.Button("עריכה", id=IDs.Control.EDIT_BTN, size="sm", color="primary", disabled=True, className="me-2"),
                                dbc.Button("ייצוא CSV", id=IDs.Control.DOWNLOAD_CSV_BTN, size="sm", color="success", outline=True),
                                dcc.Download(id=IDs.Control.DOWNLOAD_CSV),
                            ],
                            className="ms-auto d-flex",
                        ),
                    ],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    html.Div(id=IDs.Control.TABLE_ALERT),
                    dcc.Loading(
                        records_table(
                            IDs.Control.RECORDS_TABLE,
                            columns=[],
                            data=[],
                            page_action="custom",
                            page_current=0,
                            page_size=PAGE_SIZE,
                            page_count=1,
                            sort_action="custom",
                            sort_mode="single",
                            sort_by=[],
                            row_selectable="single",
                            selected_rows=[],
                        ),
                        type="default",
                    ),
                    build_edit_modal(),
                ]
            ),
        ],
        className="fb-table-card",
    )
