from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State

from fleet_browser.ui.callbacks.callbacks_utils import get_dataset
from fleet_browser.ui.helpers import build_query, dropdown_options
from fleet_browser.ui.ids import IDs
from fleet_browser.ui.layout.build_filter_panel import build_filter_controls

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Rebuild filter controls for the selected collection
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.FILTERS_CONTAINER, "children"),
        Output(IDs.Control.DATE_RANGE_CONTAINER, "style"),
        Output(IDs.Control.COLUMN_SELECT, "options"),
        Output(IDs.Control.COLUMN_SELECT, "value"),
        Input(IDs.Control.COLLECTION_SELECT, "value"),
    )
    def update_filter_controls(collection_id: str | None):
        ds, _error = get_dataset(ctx, collection_id)
        if ds is None:
            return [], {"display": "none"}, [], []

        cfg = ctx.datasets.config(collection_id)
        options = ds.filter_options()
        fields = cfg.filter_fields or ds.fields
        options_by_field = {f: options.get(f, []) for f in fields if options.get(f)}

        date_style = {} if cfg.date_field else {"display": "none"}
        layout = ds.column_layout(cfg.priority_columns)
        column_options = dropdown_options(c.key for c in layout)
        default_columns = [c.key for c in layout if c.visible]

        return build_filter_controls(options_by_field), date_style, column_options, default_columns

    # ---------------------------------------------------------
    # Controls -> Query store
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.QUERY, "data"),
        Input(IDs.Control.SEARCH_INPUT, "value"),
        Input({"type": IDs.Pattern.FILTER, "field": ALL}, "value"),
        Input(IDs.Control.DATE_RANGE, "start_date"),
        Input(IDs.Control.DATE_RANGE, "end_date"),
        Input(IDs.Control.COLLECTION_SELECT, "value"),
        State({"type": IDs.Pattern.FILTER, "field": ALL}, "id"),
    )
    def update_query(term, filter_values, start_date, end_date, collection_id, filter_ids):
        date_field = None
        if collection_id in ctx.datasets:
            date_field = ctx.datasets.config(collection_id).date_field

        query = build_query(term, filter_ids, filter_values, date_field, start_date, end_date)
        logger.debug("Query updated", extra={"collection": collection_id, "query": query.to_dict()})
        return {"collection": collection_id, "query": query.to_dict()}

    # ---------------------------------------------------------
    # Clear all filters
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.SEARCH_INPUT, "value"),
        Output({"type": IDs.Pattern.FILTER, "field": ALL}, "value"),
        Output(IDs.Control.DATE_RANGE, "start_date"),
        Output(IDs.Control.DATE_RANGE, "end_date"),
        Input(IDs.Control.CLEAR_FILTERS_BTN, "n_clicks"),
        State({"type": IDs.Pattern.FILTER, "field": ALL}, "id"),
        prevent_initial_call=True,
    )
    def clear_filters(_n_clicks, filter_ids):
        return "", [[] for _ in filter_ids], None, None
