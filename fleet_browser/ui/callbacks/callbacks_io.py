from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Tuple

import dash
from dash import Input, Output, State, dcc

from fleet_browser.core.exceptions import LoadError
from fleet_browser.core.query import Query
from fleet_browser.ui.callbacks.callbacks_utils import LOAD_ERROR_MESSAGE, get_dataset, query_from_store
from fleet_browser.ui.helpers import alert, sort_spec_from_table
from fleet_browser.ui.ids import IDs

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def build_csv_download(ctx: AppConfig, collection_id: Optional[str], query: Query) -> Tuple[Optional[dict], Optional[str]]:
    """
    (dcc.Download payload, None) on success, (None, user-facing message)
    when the collection cannot be loaded.
    """
    _ds, error = get_dataset(ctx, collection_id)
    if error:
        return None, error
    try:
        content = ctx.export_service.export_csv(collection_id, query)
    except LoadError:
        logger.exception("CSV export failed", extra={"collection": collection_id})
        return None, LOAD_ERROR_MESSAGE
    return dcc.send_bytes(content, ctx.export_service.filename(collection_id)), None


def register_io_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.DOWNLOAD_CSV, "data"),
        Output(IDs.Control.TABLE_ALERT, "children", allow_duplicate=True),
        Input(IDs.Control.DOWNLOAD_CSV_BTN, "n_clicks"),
        State(IDs.Store.QUERY, "data"),
        State(IDs.Control.RECORDS_TABLE, "sort_by"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
        prevent_initial_call=True,
    )
    def download_csv(_n_clicks, query_data, sort_by, collection_id):
        """Exports every record matching the current filters, not just the visible page."""
        if collection_id not in ctx.datasets:
            raise dash.exceptions.PreventUpdate

        query = replace(query_from_store(query_data, collection_id), sort=sort_spec_from_table(sort_by))
        download, error = build_csv_download(ctx, collection_id, query)
        if error:
            return dash.no_update, alert(error)
        return download, dash.no_update
