from fleet_browser.core import search_engine
from fleet_browser.core.dataset import Dataset
from fleet_browser.core.query import DateRange, Query, SortSpec
from fleet_browser.ui.helpers import (
    KEY_COLUMN,
    build_query,
    cell_text,
    sort_spec_from_table,
    table_columns,
    table_rows,
)


def _make_dataset():
    return Dataset(
        name="vehicles",
        path="/data/data",
        records=[
            {"רישוי": "1", "דגם": "JCB", "טלפון בעלים": "050-1, nan, *nan"},
            {"רישוי": "2", "דגם": None, "טלפון בעלים": "nan"},
        ],
        keys=["0", "7"],
        identifier_field="רישוי",
    )


def test_cell_text_placeholders_and_phones():
    assert cell_text("דגם", None) == "-"
    assert cell_text("דגם", "לא ידוע") == "-"
    assert cell_text("טלפון בעלים", "050-1, nan, *nan") == "050-1"
    assert cell_text("טלפון בעלים", "nan") == "-"


def test_table_rows_carry_store_keys():
    ds = _make_dataset()

    rows = table_rows(ds, list(zip(ds.keys, ds.records))[::-1])

    assert [r[KEY_COLUMN] for r in rows] == ["7", "0"]
    assert rows[0]["דגם"] == "-"


def test_table_columns_follow_layout_and_selection():
    ds = _make_dataset()
    layout = ds.column_layout(["דגם", "רישוי"])

    assert [c["id"] for c in table_columns(layout)] == ["דגם", "רישוי"]
    assert [c["id"] for c in table_columns(layout, ["טלפון בעלים", "רישוי"])] == ["רישוי", "טלפון בעלים"]


def test_sort_spec_from_table():
    assert sort_spec_from_table(None) is None
    assert sort_spec_from_table([{"column_id": "דגם", "direction": "desc"}]) == SortSpec("דגם", True)
    assert sort_spec_from_table([{"column_id": "דגם", "direction": "asc"}]) == SortSpec("דגם", False)


def test_build_query_from_controls():
    query = build_query(
        " jcb ",
        [{"type": "filter", "field": "אזור"}, {"type": "filter", "field": "דגם"}],
        [["צפון"], []],
        date_field="תאריך",
        start="2024-01-01",
        end="2024-02-01",
    )

    assert query == Query(
        term=" jcb ",
        allowed={"אזור": ["צפון"]},
        date_range=DateRange(field="תאריך", start="2024-01-01", end="2024-02-01"),
    )
    assert build_query(None, [], []).date_range is None


def test_table_rows_keep_keys_when_identifiers_repeat():
    ds = Dataset(
        name="owners",
        path="/owner/data_owner",
        records=[{"חפ": "5", "שם": "a"}, {"חפ": "5", "שם": "b"}],
        keys=["k0", "k1"],
        identifier_field="חפ",
    )

    rows = table_rows(ds, search_engine.apply_keyed(ds, Query(term="b")))

    assert [r[KEY_COLUMN] for r in rows] == ["k1"]
    assert rows[0]["שם"] == "b"
