from __future__ import annotations

from typing import List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.config.model import CollectionConfig, GlobalConfig
from fleet_browser.ui.ids import IDs


def build_navbar(
    global_config: GlobalConfig,
    collections: List[CollectionConfig],
    default_collection: Optional[str],
) -> dbc.Navbar:
    collection_options = [{"label": cfg.name, "value": cfg.id} for cfg in collections]

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                # Right (RTL start): title
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small(global_config.subtitle, className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),

                html.Div(
                    [
                        html.Div("מאגר פעיל", className="navbar-collection-title"),
                        dcc.Dropdown(
                            id=IDs.Control.COLLECTION_SELECT,
                            options=collection_options,
                            value=default_collection,
                            clearable=False,
                            placeholder="בחרו מאגר",
                            className="fb-collection-dropdown mt-1",
                        ),
                    ],
                    className="ms-auto me-4",
                    style={"minWidth": "240px", "maxWidth": "340px"},
                ),

                html.Div(
                    [
                        html.Span(id=IDs.Control.USER_BADGE, className="me-2"),
                        dbc.Button("התחברות", id=IDs.Control.AUTH_OPEN_BTN, color="primary", outline=True, className="me-2"),
                        dbc.Button("הגדרות", id=IDs.Control.ADMIN_OPEN_BTN, color="secondary", outline=True),
                    ],
                    className="d-flex align-items-center",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm fb-navbar",
    )
