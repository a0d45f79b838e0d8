from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from fleet_browser.config.io import load_global_config
from fleet_browser.core.view_registry import ViewRegistry
from fleet_browser.services.dataset_service import DatasetLoader, DatasetManager
from fleet_browser.services.export_service import ExportService
from fleet_browser.services.record_service import RecordService
from fleet_browser.services.identity import TokenVerifier
from fleet_browser.services.record_store import FirebaseRecordStore, RecordStore, create_record_store
from fleet_browser.ui.layout.build_layout import build_layout
from fleet_browser.ui.callbacks.callbacks_admin import register_admin_callbacks
from fleet_browser.ui.callbacks.callbacks_auth import register_auth_callbacks
from fleet_browser.ui.callbacks.callbacks_edit import register_edit_callbacks
from fleet_browser.ui.callbacks.callbacks_filters import register_filter_callbacks
from fleet_browser.ui.callbacks.callbacks_io import register_io_callbacks
from fleet_browser.ui.callbacks.callbacks_render import register_render_callbacks
from fleet_browser.ui.callbacks.callbacks_search import register_search_callbacks
from fleet_browser.ui.callbacks.callbacks_table import register_table_callbacks
from fleet_browser.ui.callbacks.callbacks_units import register_units_callbacks

logger = logging.getLogger(__name__)


def _build_view_registry() -> ViewRegistry:
    from fleet_browser.views import (
        ValueCountsView,
        RecruitmentTimelineView,
        FleetMapView,
        RegionSummaryView,
    )

    registry = ViewRegistry()
    registry.register(ValueCountsView)
    registry.register(RecruitmentTimelineView)
    registry.register(FleetMapView)
    registry.register(RegionSummaryView)
    return registry


def create_dash_app(config_root: Path | str = Path("config"), store: RecordStore | None = None) -> Dash:
    """
    :param config_root: directory holding global.json and datasets/
    :param store: record store to use instead of the one the config selects
    """
    config_root = Path(config_root)

    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Initialize Service Layer
    store = store or create_record_store(global_config)
    cfg_by_id = {cfg.id: cfg for cfg in global_config.collections}
    datasets = DatasetManager(DatasetLoader(store), cfg_by_id)

    # 3) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        datasets=datasets,
        registry=_build_view_registry(),
        record_service=RecordService(store),
        export_service=ExportService(datasets=datasets),
        token_verifier=TokenVerifier(
            api_key=global_config.api_key,
            firebase_app=store.app if isinstance(store, FirebaseRecordStore) else None,
        ),
    )
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
        # Filter and edit controls are created per collection by callbacks.
        suppress_callback_exceptions=True,
    )
    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_filter_callbacks(app, ctx)
    register_table_callbacks(app, ctx)
    register_edit_callbacks(app, ctx)
    register_search_callbacks(app, ctx)
    register_units_callbacks(app, ctx)
    register_render_callbacks(app, ctx)
    register_auth_callbacks(app, ctx)
    register_io_callbacks(app, ctx)
    register_admin_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"config_root": str(config_root), "n_collections": len(cfg_by_id)},
    )
    return app
