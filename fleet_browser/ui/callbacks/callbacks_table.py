from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, ctx as callback_context

from fleet_browser.core import search_engine
from fleet_browser.core.exceptions import LoadError
from fleet_browser.ui.callbacks.callbacks_utils import get_dataset, query_from_store
from fleet_browser.ui.helpers import alert, sort_spec_from_table, table_columns, table_rows
from fleet_browser.ui.ids import IDs

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_table_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Query + sort + page -> table
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.RECORDS_TABLE, "columns"),
        Output(IDs.Control.RECORDS_TABLE, "data"),
        Output(IDs.Control.RECORDS_TABLE, "page_count"),
        Output(IDs.Control.RECORDS_TABLE, "page_current"),
        Output(IDs.Control.RECORDS_TABLE, "selected_rows"),
        Output(IDs.Control.RESULT_COUNT, "children"),
        Output(IDs.Control.TABLE_ALERT, "children"),
        Input(IDs.Store.QUERY, "data"),
        Input(IDs.Control.RECORDS_TABLE, "sort_by"),
        Input(IDs.Control.RECORDS_TABLE, "page_current"),
        Input(IDs.Control.COLUMN_SELECT, "value"),
        Input(IDs.Store.DATA_VERSION, "data"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
    )
    def update_table(query_data, sort_by, page_current, visible_columns, _version, collection_id):
        ds, error = get_dataset(ctx, collection_id)
        if ds is None:
            return [], [], 1, 0, [], "", alert(error) if error else None

        cfg = ctx.datasets.config(collection_id)
        query = replace(query_from_store(query_data, collection_id), sort=sort_spec_from_table(sort_by))
        records = search_engine.apply_keyed(ds, query)

        # A new query or sort starts again from the first page.
        page = (page_current or 0) + 1
        if f"{IDs.Control.RECORDS_TABLE}.page_current" not in callback_context.triggered_prop_ids:
            page = 1
        result = search_engine.paginate(records, page)

        columns = table_columns(ds.column_layout(cfg.priority_columns), visible_columns or None)
        count = f"{result.total} מתוך {len(ds)} רשומות"
        return (
            columns,
            table_rows(ds, result.items),
            result.page_count,
            result.page - 1,
            [],
            count,
            None,
        )

    # ---------------------------------------------------------
    # Reload the selected collection from the store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Input(IDs.Control.RELOAD_BTN, "n_clicks"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def reload_collection(_n_clicks, collection_id, version):
        if collection_id not in ctx.datasets:
            raise dash.exceptions.PreventUpdate
        try:
            ctx.datasets.reload(collection_id)
        except LoadError:
            # The table callback retries the load and reports the failure.
            logger.warning("Reload failed", extra={"collection": collection_id})
        return (version or 0) + 1

    # ---------------------------------------------------------
    # Edit button: needs a selected row and edit capability
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.EDIT_BTN, "disabled"),
        Input(IDs.Control.RECORDS_TABLE, "selected_rows"),
        Input(IDs.Store.SESSION, "data"),
    )
    def toggle_edit_button(selected_rows, session_data):
        capability = ctx.identity(session_data).capability
        return not (selected_rows and capability.can_edit)
