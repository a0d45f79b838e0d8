from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, html
from dash import ctx as callback_context

from fleet_browser.core.exceptions import AuthenticationError, NetworkError
from fleet_browser.ui.helpers import alert
from fleet_browser.ui.ids import IDs

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_auth_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Control.AUTH_OFFCANVAS, "is_open"),
        Input(IDs.Control.AUTH_OPEN_BTN, "n_clicks"),
        State(IDs.Control.AUTH_OFFCANVAS, "is_open"),
        prevent_initial_call=True,
    )
    def toggle_auth_panel(_n_clicks, is_open):
        return not is_open

    # ---------------------------------------------------------
    # Sign in / sign out
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SESSION, "data"),
        Output(IDs.Control.AUTH_STATUS, "children"),
        Output(IDs.Control.AUTH_PASSWORD, "value"),
        Input(IDs.Control.AUTH_SIGN_IN_BTN, "n_clicks"),
        Input(IDs.Control.AUTH_SIGN_OUT_BTN, "n_clicks"),
        State(IDs.Control.AUTH_EMAIL, "value"),
        State(IDs.Control.AUTH_PASSWORD, "value"),
        State(IDs.Store.SESSION, "data"),
        prevent_initial_call=True,
    )
    def sign_in_or_out(_in_clicks, _out_clicks, email, password, session_data):
        identity = ctx.identity(session_data)

        if callback_context.triggered_id == IDs.Control.AUTH_SIGN_OUT_BTN:
            identity.sign_out()
            return None, html.Span("התנתקתם בהצלחה", className="text-muted"), ""

        try:
            session = identity.sign_in(email or "", password or "")
        except AuthenticationError:
            return dash.no_update, alert("שגיאת התחברות. אנא בדקו את הפרטים ונסו שוב."), ""
        except NetworkError:
            return dash.no_update, alert("שירות ההתחברות אינו זמין כרגע. נסו שוב מאוחר יותר."), ""
        return session.to_dict(), html.Span(f"מחובר כ-{session.email}", className="text-success"), ""

    @app.callback(
        Output(IDs.Control.USER_BADGE, "children"),
        Output(IDs.Control.AUTH_OPEN_BTN, "children"),
        Input(IDs.Store.SESSION, "data"),
    )
    def update_user_badge(session_data):
        session = ctx.identity(session_data).session
        if session is None:
            return html.Small("צפייה בלבד", className="text-muted"), "התחברות"
        return html.Small(session.email, className="text-success"), "חשבון"
