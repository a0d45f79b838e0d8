from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import dash_bootstrap_components as dbc
from dash import dash_table, html

from fleet_browser.core.dataset import ColumnConfig, Dataset
from fleet_browser.core.query import DateRange, Query, SortSpec
from fleet_browser.core.records import Record, display_value, format_phone_numbers

# Row field carrying the record's store key; present in table data, never shown.
KEY_COLUMN = "__key"
OWNER_PHONE_FIELD = "טלפון בעלים"

_FONT = 'system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", "Arial Hebrew", sans-serif'


def dropdown_options(values: Iterable[str]) -> List[dict]:
    return [{"label": v, "value": v} for v in values]


def cell_text(field: str, value: Any) -> str:
    if field == OWNER_PHONE_FIELD:
        return display_value(format_phone_numbers(value))
    return display_value(value)


def table_rows(ds: Dataset, keyed_records: Sequence[Tuple[str, Record]]) -> List[Dict[str, str]]:
    """
    Display rows for a DataTable: placeholder text for empty cells plus the
    record's store key, taken from the (key, record) pairs of apply_keyed.
    """
    rows = []
    for key, record in keyed_records:
        row = {f: cell_text(f, record.get(f)) for f in ds.fields}
        row[KEY_COLUMN] = key
        rows.append(row)
    return rows


def table_columns(layout: Sequence[ColumnConfig], visible: Optional[Sequence[str]] = None) -> List[dict]:
    """
    DataTable column definitions in layout order.
    :param visible: fields to show; defaults to the layout's own visibility flags
    """
    if visible is None:
        keys = [c.key for c in layout if c.visible] or [c.key for c in layout]
    else:
        keys = [c.key for c in layout if c.key in set(visible)]
    return [{"name": k, "id": k} for k in keys]


def sort_spec_from_table(sort_by: Optional[List[dict]]) -> Optional[SortSpec]:
    """DataTable sort_by ([{"column_id", "direction"}]) -> SortSpec."""
    if not sort_by:
        return None
    first = sort_by[0]
    return SortSpec(field=first["column_id"], descending=first.get("direction") == "desc")


def build_query(
    term: Optional[str],
    filter_ids: Sequence[dict],
    filter_values: Sequence[Optional[List[str]]],
    date_field: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> Query:
    """Assemble a Query from the filter panel controls (sort is owned by the table)."""
    allowed = {
        fid["field"]: list(values)
        for fid, values in zip(filter_ids, filter_values)
        if values
    }
    date_range = DateRange(field=date_field, start=start, end=end) if date_field else None
    return Query(term=term or "", allowed=allowed, date_range=date_range)


def alert(message: str, color: str = "danger") -> dbc.Alert:
    return dbc.Alert(message, color=color, dismissable=True, className="mt-2 mb-0")


def record_card(record: Record, fields: Sequence[str], title_field: Optional[str] = None) -> dbc.Card:
    """Compact card for a single record (quick search results)."""
    children = []
    if title_field:
        children.append(html.H5(cell_text(title_field, record.get(title_field)), className="card-title"))
    children.append(
        html.Dl(
            [
                item
                for f in fields
                for item in (html.Dt(f), html.Dd(cell_text(f, record.get(f))))
            ],
            className="fb-record-fields mb-0",
        )
    )
    return dbc.Card(dbc.CardBody(children), className="mb-2 shadow-sm")


def records_table(table_id: Any, columns: List[dict], data: List[dict], **kwargs: Any) -> dash_table.DataTable:
    """Styled, right-to-left DataTable; kwargs override the defaults."""
    options = dict(
        id=table_id,
        columns=columns,
        data=data,
        style_table={"overflowX": "auto"},
        style_as_list_view=True,
        style_cell={
            "fontFamily": _FONT,
            "fontSize": "13px",
            "padding": "6px 8px",
            "border": "none",
            "textAlign": "right",
            "minWidth": "80px",
            "maxWidth": "260px",
            "whiteSpace": "nowrap",
            "textOverflow": "ellipsis",
        },
        style_header={
            "fontFamily": _FONT,
            "fontWeight": "600",
            "backgroundColor": "#f3f4f6",
            "borderBottom": "1px solid #e5e7eb",
        },
        style_data={"borderBottom": "1px solid #e5e7eb"},
    )
    options.update(kwargs)
    return dash_table.DataTable(**options)
