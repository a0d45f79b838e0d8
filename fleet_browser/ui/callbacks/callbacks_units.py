from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

import dash
import dash_bootstrap_components as dbc
from dash import Input, Output, html

from fleet_browser.core.aggregator import (
    DISPLAY_REGIONS,
    STATUS_FIELD,
    TIMESTAMP_FIELD,
    UNIT_FIELD,
    RegionGroup,
    aggregate,
)
from fleet_browser.core.records import Record, as_text, sort_key
from fleet_browser.ui.callbacks.callbacks_utils import get_dataset
from fleet_browser.ui.helpers import alert, cell_text, records_table
from fleet_browser.ui.ids import IDs

if TYPE_CHECKING:
    from fleet_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

SUB_STATUS_FIELD = "תת-סטטוס"
_UNIT_COLUMNS = [UNIT_FIELD, STATUS_FIELD, SUB_STATUS_FIELD, TIMESTAMP_FIELD]


def _unit_rows(records: List[Record]) -> List[dict]:
    return [{c: cell_text(c, r.get(c)) for c in _UNIT_COLUMNS} for r in records]


def _region_card(group: RegionGroup) -> dbc.Col:
    badges = [
        dbc.Badge(f"{status}: {count}", color="info", className="me-1")
        for status, count in group.tally.by_status.items()
    ]
    return dbc.Col(
        dbc.Card(
            [
                dbc.CardHeader(group.region, className="fw-semibold"),
                dbc.CardBody(
                    [
                        html.Div(str(group.tally.total), className="display-6"),
                        html.Div(badges, className="mb-2"),
                        records_table(
                            f"region-table-{group.region}",
                            columns=[{"name": c, "id": c} for c in _UNIT_COLUMNS],
                            data=_unit_rows(group.current),
                            page_size=10,
                        ),
                    ]
                ),
            ],
            className="fb-region-card h-100",
        ),
        md=4,
    )


def register_units_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    events_collection = ctx.global_config.events_collection

    def _groups():
        ds, error = get_dataset(ctx, events_collection)
        if ds is None:
            return None, error
        return aggregate(ds, regions=DISPLAY_REGIONS), None

    # ---------------------------------------------------------
    # Region cards
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.REGION_CARDS, "children"),
        Output(IDs.Control.UNIT_SELECT, "options"),
        Input(IDs.Store.DATA_VERSION, "data"),
    )
    def update_region_cards(_version):
        if not events_collection:
            return [dbc.Col(alert("לא הוגדר מאגר דיווחים", color="secondary"))], []

        groups, error = _groups()
        if groups is None:
            return [dbc.Col(alert(error or ""))], []

        units = {u for g in groups.values() for u in g.history}
        options = [{"label": u, "value": u} for u in sorted(units, key=sort_key)]
        return [_region_card(g) for g in groups.values()], options

    # ---------------------------------------------------------
    # Unit history
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.UNIT_HISTORY, "children"),
        Input(IDs.Control.UNIT_SELECT, "value"),
        Input(IDs.Store.DATA_VERSION, "data"),
    )
    def update_unit_history(unit, _version):
        if not unit or not events_collection:
            return None

        groups, error = _groups()
        if groups is None:
            return alert(error or "")

        sections = []
        for group in groups.values():
            if unit not in group.history:
                continue
            latest = [r for r in group.current if as_text(r.get(UNIT_FIELD)) == unit]
            sections.append(html.H6(group.region, className="mt-2"))
            sections.append(
                records_table(
                    f"unit-history-{group.region}",
                    columns=[{"name": c, "id": c} for c in _UNIT_COLUMNS],
                    data=_unit_rows(latest + group.history_for(unit)),
                )
            )
        return sections or html.P("אין היסטוריה לכלי זה", className="text-muted")
