from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import dash
import plotly.graph_objs as go
from dash import Input, Output, State

from fleet_browser.ui.callbacks.callbacks_utils import get_dataset, query_from_store
from fleet_browser.ui.helpers import dropdown_options
from fleet_browser.ui.ids import IDs
from fleet_browser.views.map_view import FleetMapView

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper: Empty/Error Figures
# -----------------------------------------------------------------------------
def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}<br><br>{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("אירעה שגיאה בהצגת התצוגה.", details)


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # View selector + field selector for the active collection
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.VIEW_SELECT, "options"),
        Output(IDs.Control.VIEW_SELECT, "value"),
        Output(IDs.Control.VIEW_FIELD_SELECT, "options"),
        Output(IDs.Control.VIEW_FIELD_SELECT, "value"),
        Input(IDs.Control.COLLECTION_SELECT, "value"),
        State(IDs.Control.VIEW_SELECT, "value"),
    )
    def update_view_options(collection_id: str | None, current_view: str | None):
        if collection_id not in ctx.datasets:
            return [], None, [], None

        cfg = ctx.datasets.config(collection_id)
        classes = [
            cls for cls in ctx.registry.all_classes(collection_id)
            if cls is not FleetMapView or cfg.has_map
        ]
        view_options = [{"label": cls.label, "value": cls.id} for cls in classes]
        view_ids = [cls.id for cls in classes]
        view_value = current_view if current_view in view_ids else (view_ids[0] if view_ids else None)

        ds, _error = get_dataset(ctx, collection_id)
        fields = cfg.filter_fields or (ds.fields if ds is not None else [])
        return view_options, view_value, dropdown_options(fields), (fields[0] if fields else None)

    # ---------------------------------------------------------
    # Main figure: view + options + table filters -> figure
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.MAIN_GRAPH, "figure"),
        Input(IDs.Control.VIEW_SELECT, "value"),
        Input(IDs.Control.VIEW_FIELD_SELECT, "value"),
        Input(IDs.Control.VIEW_CHART_SELECT, "value"),
        Input(IDs.Control.VIEW_TIMEFRAME_SELECT, "value"),
        Input(IDs.Store.QUERY, "data"),
        Input(IDs.Store.DATA_VERSION, "data"),
        State(IDs.Control.COLLECTION_SELECT, "value"),
    )
    def update_main_graph(view_id, field, chart, timeframe, query_data, _version, collection_id):
        if not view_id or not collection_id:
            return _message_figure("לא נבחרה תצוגה.", "בחרו מאגר ותצוגה כדי להציג גרף.")

        ds, error = get_dataset(ctx, collection_id)
        if ds is None:
            return _error_figure(error or "")

        cfg = ctx.datasets.config(collection_id)
        options: Dict[str, Any] = {
            "field": field,
            "chart": chart,
            "timeframe": timeframe,
            "exclude": cfg.map_exclude,
            "label_fields": cfg.map_label_fields,
        }
        query = query_from_store(query_data, collection_id)

        try:
            view = ctx.registry.create(view_id, ds, options)
            logger.info("render_start", extra={"view_id": view_id, "collection": collection_id})
            data = view.compute_data(query)
            return view.render_figure(data, query)
        except KeyError:
            return _error_figure(f"תצוגה לא מוכרת: {view_id}")
        except Exception:
            logger.exception(
                "Error in update_main_graph",
                extra={"view_id": view_id, "collection": collection_id},
            )
            return _error_figure("אירעה שגיאה לא צפויה. בדקו את הלוגים.")
