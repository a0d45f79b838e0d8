from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State

from fleet_browser.core.exceptions import LoadError, NetworkError, PermissionDeniedError
from fleet_browser.ui.helpers import alert
from fleet_browser.ui.ids import IDs

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_admin_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.ADMIN_MODAL, "is_open"),
        Input(IDs.Control.ADMIN_OPEN_BTN, "n_clicks"),
        State(IDs.Control.ADMIN_MODAL, "is_open"),
        prevent_initial_call=True,
    )
    def toggle_admin_modal(_n_clicks, is_open):
        return not is_open

    # ---------------------------------------------------------
    # Database check
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.ADMIN_STATUS, "children"),
        Input(IDs.Control.ADMIN_CHECK_BTN, "n_clicks"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
        prevent_initial_call=True,
    )
    def check_database(_n_clicks, collection_id):
        if collection_id not in ctx.datasets:
            return alert("לא נבחר מאגר", color="warning")
        cfg = ctx.datasets.config(collection_id)
        try:
            count = ctx.record_service.check_database(cfg.path)
        except LoadError:
            return alert("שגיאה בבדיקת בסיס הנתונים")
        if count == 0:
            return alert("בסיס הנתונים ריק", color="warning")
        return alert(f"בסיס הנתונים תקין ומכיל {count} רשומות", color="success")

    # ---------------------------------------------------------
    # Release retained vehicles (confirm first)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.ADMIN_RELEASE_CONFIRM, "displayed"),
        Output(IDs.Control.ADMIN_STATUS, "children", allow_duplicate=True),
        Input(IDs.Control.ADMIN_RELEASE_BTN, "n_clicks"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def confirm_release(_n_clicks, session_data):
        if not ctx.identity(session_data).capability.can_edit:
            return False, alert("יש להתחבר כדי לבצע פעולה זו", color="warning")
        return True, None

    @app.callback(
        Output(IDs.Control.ADMIN_STATUS, "children", allow_duplicate=True),
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Input(IDs.Control.ADMIN_RELEASE_CONFIRM, "submit_n_clicks"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
        State(IDs.Store.SESSION, "data"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def release_retained(_submit, collection_id, session_data, version):
        if collection_id not in ctx.datasets:
            return alert("לא נבחר מאגר", color="warning"), dash.no_update

        cfg = ctx.datasets.config(collection_id)
        capability = ctx.identity(session_data).capability
        try:
            released = ctx.record_service.release_retained(cfg.path, capability)
        except PermissionDeniedError:
            return alert("אין הרשאה לבצע פעולה זו"), dash.no_update
        except NetworkError:
            return alert("שגיאה בביטול המרותקים"), dash.no_update

        try:
            ctx.datasets.reload(collection_id)
        except LoadError:
            logger.warning("Reload after release failed", extra={"collection": collection_id})
        return alert(f"כל המרותקים בוטלו בהצלחה ({released})", color="success"), (version or 0) + 1
