from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from fleet_browser.ui.ids import IDs
from fleet_browser.ui.layout.build_admin_panel import build_admin_panel
from fleet_browser.ui.layout.build_auth_panel import build_auth_panel
from fleet_browser.ui.layout.build_filter_panel import build_filter_panel
from fleet_browser.ui.layout.build_navbar import build_navbar
from fleet_browser.ui.layout.build_search_panel import build_search_panel
from fleet_browser.ui.layout.build_table_panel import build_table_panel
from fleet_browser.ui.layout.build_units_panel import build_units_panel
from fleet_browser.ui.layout.build_views_panel import build_views_panel

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> html.Div:
    """
    Static page skeleton. Nothing is fetched here: every collection is
    loaded by the callbacks on first use.
    """
    global_config = ctx.global_config
    navbar = build_navbar(global_config, global_config.collections, global_config.default_collection)

    if not global_config.collections:
        body = dbc.Alert("לא הוגדרו מאגרים. הוסיפו קובץ הגדרות לתיקיית config/datasets.", color="warning", className="mt-3")
    else:
        body = dcc.Tabs(
            id=IDs.Control.PAGE_TABS,
            value="records",
            children=[
                dcc.Tab(label="חיפוש", value="search", children=[build_search_panel()]),
                dcc.Tab(
                    label="רשומות",
                    value="records",
                    children=[
                        dbc.Row(
                            [
                                dbc.Col(build_filter_panel(), md=3, className="mt-3"),
                                dbc.Col(build_table_panel(), md=9, className="mt-3"),
                            ],
                            className="gx-3",
                        ),
                    ],
                ),
                dcc.Tab(label="יצ\"מ", value="units", children=[build_units_panel()]),
                dcc.Tab(label="סטטיסטיקה ומפה", value="views", children=[build_views_panel()]),
            ],
            className="mt-2",
        )

    container = dbc.Container(
        fluid=True,
        className="fb-root",
        children=[
            navbar,

            # App-level stores
            dcc.Store(id=IDs.Store.QUERY, storage_type="session"),
            dcc.Store(id=IDs.Store.SESSION, storage_type="session"),
            dcc.Store(id=IDs.Store.DATA_VERSION, data=0),

            build_auth_panel(),
            build_admin_panel(),
            body,
        ],
    )
    return html.Div(container, dir="rtl")
