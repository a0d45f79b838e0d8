from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
import dash_bootstrap_components as dbc
from dash import ALL, Input, Output, State, dcc, html
from dash import ctx as callback_context

from fleet_browser.core.exceptions import NetworkError, PermissionDeniedError
from fleet_browser.core.records import as_text, coerce_like
from fleet_browser.ui.callbacks.callbacks_utils import get_dataset
from fleet_browser.ui.helpers import KEY_COLUMN, alert
from fleet_browser.ui.ids import IDs, edit_field_id

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_edit_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Open / close the edit modal
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.EDIT_MODAL, "is_open"),
        Output(IDs.Control.EDIT_FORM, "children"),
        Output(IDs.Control.EDIT_RECORD_KEY, "data"),
        Output(IDs.Control.EDIT_STATUS, "children"),
        Input(IDs.Control.EDIT_BTN, "n_clicks"),
        Input(IDs.Control.EDIT_CANCEL_BTN, "n_clicks"),
        State(IDs.Control.RECORDS_TABLE, "selected_rows"),
        State(IDs.Control.RECORDS_TABLE, "data"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
        prevent_initial_call=True,
    )
    def toggle_edit_modal(_open_clicks, _cancel_clicks, selected_rows, rows, collection_id):
        if callback_context.triggered_id == IDs.Control.EDIT_CANCEL_BTN or not selected_rows:
            return False, [], None, None

        ds, error = get_dataset(ctx, collection_id)
        if ds is None:
            return True, [], None, alert(error or "")

        key = rows[selected_rows[0]].get(KEY_COLUMN)
        if key not in ds.keys:
            return True, [], None, alert("הרשומה לא נמצאה. רעננו את הנתונים.")
        record = ds[ds.keys.index(key)]

        cfg = ctx.datasets.config(collection_id)
        fields = cfg.editable_fields or ds.fields
        form = [
            dbc.Row(
                [
                    dbc.Label(field, width=4),
                    dbc.Col(
                        dcc.Input(
                            id=edit_field_id(field),
                            value=as_text(record.get(field)),
                            type="text",
                            className="form-control",
                        ),
                        width=8,
                    ),
                ],
                className="mb-2",
            )
            for field in fields
        ]
        return True, form, key, None

    # ---------------------------------------------------------
    # Save: field-level patch, then one optimistic local update
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.EDIT_STATUS, "children", allow_duplicate=True),
        Output(IDs.Control.EDIT_MODAL, "is_open", allow_duplicate=True),
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Input(IDs.Control.EDIT_SAVE_BTN, "n_clicks"),
        State({"type": IDs.Pattern.EDIT_FIELD, "field": ALL}, "value"),
        State({"type": IDs.Pattern.EDIT_FIELD, "field": ALL}, "id"),
        State(IDs.Control.EDIT_RECORD_KEY, "data"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
        State(IDs.Store.SESSION, "data"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def save_record(_n_clicks, values, field_ids, key, collection_id, session_data, version):
        ds, error = get_dataset(ctx, collection_id)
        if ds is None or key is None or key not in ds.keys:
            return alert(error or "אין רשומה נבחרת"), dash.no_update, dash.no_update

        index = ds.keys.index(key)
        record = ds[index]
        patch = {}
        for fid, value in zip(field_ids, values):
            field = fid["field"]
            if (value or "") != as_text(record.get(field)):
                patch[field] = coerce_like(record.get(field), value)

        if not patch:
            return None, False, dash.no_update

        capability = ctx.identity(session_data).capability
        try:
            ctx.record_service.update(ds.path, key, patch, capability)
        except PermissionDeniedError:
            return alert("אין הרשאה לעדכן את הרשומה. התחברו ונסו שוב."), dash.no_update, dash.no_update
        except NetworkError:
            return alert("העדכון נכשל. בדקו את החיבור ונסו שוב."), dash.no_update, dash.no_update

        updated = {**record, **patch}
        updated = {f: v for f, v in updated.items() if v is not None}
        ctx.datasets.replace(collection_id, ds.replace_record(index, updated))
        return html.Span("נשמר", className="text-success"), False, (version or 0) + 1
