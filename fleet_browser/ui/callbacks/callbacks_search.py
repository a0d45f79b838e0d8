from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, html

from fleet_browser.core import search_engine
from fleet_browser.ui.callbacks.callbacks_utils import get_dataset
from fleet_browser.ui.helpers import alert, record_card
from fleet_browser.ui.ids import IDs

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

# Fields shown on a result card when the collection has no priority columns.
_MAX_CARD_FIELDS = 8


def register_search_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.QUICK_SEARCH_RESULTS, "children"),
        Input(IDs.Control.QUICK_SEARCH_INPUT, "value"),
        Input(IDs.Control.COLLECTION_SELECT, "value"),
        Input(IDs.Store.DATA_VERSION, "data"),
    )
    def update_quick_search(term, collection_id, _version):
        if not term or not str(term).strip():
            return None

        ds, error = get_dataset(ctx, collection_id)
        if ds is None:
            return alert(error) if error else None

        cfg = ctx.datasets.config(collection_id)
        field = cfg.identifier_field or (ds.fields[0] if ds.fields else None)
        if field is None:
            return html.P("אין רשומות במאגר", className="text-muted")

        results = search_engine.quick_search(ds, term, field)
        if not results:
            return html.P("לא נמצאו תוצאות", className="text-muted")

        fields = [f for f in cfg.priority_columns if f != field] or ds.fields[:_MAX_CARD_FIELDS]
        return [record_card(r, fields, title_field=field) for r in results]
