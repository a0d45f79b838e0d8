import copy

from fleet_browser.core import search_engine
from fleet_browser.core.dataset import Dataset
from fleet_browser.core.query import DateRange, Query, SortSpec
from fleet_browser.core.records import as_text, parse_timestamp


def _make_dataset() -> Dataset:
    records = [
        {"רישוי": "1234", "דגם": "JCB", "אזור": "צפון", "תאריך": "2024-01-10"},
        {"רישוי": "4123", "דגם": "Cat", "אזור": "דרום", "תאריך": "2024-02-10"},
        {"רישוי": "555", "דגם": "jcb 3cx", "אזור": "מרכז", "תאריך": "bad"},
        {"רישוי": "777", "דגם": None, "אזור": "צפון"},
    ]
    return Dataset(name="vehicles", path="/data/data", records=records)


def _licences(records):
    return [r["רישוי"] for r in records]


def _matches(record, query: Query) -> bool:
    """Brute-force reference predicate for a query without date range."""
    term = query.term.strip().casefold()
    if term and not any(term in as_text(v).casefold() for v in record.values()):
        return False
    for field, sub in query.contains.items():
        if sub and sub.casefold() not in as_text(record.get(field)).casefold():
            return False
    for field, values in query.allowed.items():
        if values and as_text(record.get(field)) not in values:
            return False
    return True


def test_empty_query_is_identity():
    ds = _make_dataset()
    assert search_engine.apply(ds, Query()) == ds.records


def test_term_search_preserves_order():
    ds = Dataset(
        name="licences",
        path="/x",
        records=[{"רישוי": "1234"}, {"רישוי": "4123"}, {"רישוי": "555"}],
    )
    assert _licences(search_engine.apply(ds, Query(term="123"))) == ["1234", "4123"]


def test_term_search_is_case_insensitive_and_stripped():
    ds = _make_dataset()
    assert _licences(search_engine.apply(ds, Query(term="  jcb "))) == ["1234", "555"]


def test_filtering_partitions_dataset_exactly():
    ds = _make_dataset()
    queries = [
        Query(term="jcb"),
        Query(allowed={"אזור": ["צפון"]}),
        Query(allowed={"אזור": ["צפון"]}, contains={"דגם": "jc"}),
        Query(term="2024", allowed={"אזור": ["דרום", "מרכז"]}),
        Query(contains={"דגם": "CAT"}),
    ]
    for query in queries:
        result = search_engine.apply(ds, query)
        expected = [r for r in ds if _matches(r, query)]
        assert result == expected, query


def test_empty_constraints_impose_nothing():
    ds = _make_dataset()
    query = Query(contains={"דגם": ""}, allowed={"אזור": []})
    assert search_engine.apply(ds, query) == ds.records


def test_date_range_is_inclusive_and_excludes_unparseable():
    ds = _make_dataset()
    query = Query(date_range=DateRange(field="תאריך", start="2024-01-10", end="2024-02-10"))
    assert _licences(search_engine.apply(ds, query)) == ["1234", "4123"]

    start, end = parse_timestamp("2024-01-10"), parse_timestamp("2024-02-10")
    for record in search_engine.apply(ds, query):
        assert start <= parse_timestamp(record["תאריך"]) <= end


def test_date_range_needs_both_bounds():
    ds = _make_dataset()
    query = Query(date_range=DateRange(field="תאריך", start="2024-01-10"))
    assert search_engine.apply(ds, query) == ds.records


def test_unparseable_date_bounds_are_ignored():
    ds = _make_dataset()
    query = Query(date_range=DateRange(field="תאריך", start="garbage", end="2024-02-10"))
    assert search_engine.apply(ds, query) == ds.records


def test_sort_missing_values_collate_as_empty():
    ds = _make_dataset()
    result = search_engine.apply(ds, Query(sort=SortSpec(field="דגם")))
    assert _licences(result) == ["777", "4123", "1234", "555"]


def test_sort_ties_are_stable():
    ds = _make_dataset()
    result = search_engine.apply(ds, Query(sort=SortSpec(field="אזור")))
    assert _licences(result) == ["4123", "555", "1234", "777"]


def test_sort_is_idempotent():
    ds = _make_dataset()
    spec = SortSpec(field="אזור")
    once = search_engine.sort_records(ds.records, spec)
    assert search_engine.sort_records(once, spec) == once


def test_descending_reverses_for_unique_keys():
    ds = _make_dataset()
    asc = search_engine.sort_records(ds.records, SortSpec(field="רישוי"))
    desc = search_engine.sort_records(ds.records, SortSpec(field="רישוי", descending=True))
    assert _licences(asc) == ["1234", "4123", "555", "777"]
    assert desc == list(reversed(asc))


def test_hebrew_sort_treats_final_forms_as_base_letters():
    ds = Dataset(name="x", path="/x", records=[{"n": "ךב"}, {"n": "כא"}, {"n": "א"}])
    result = search_engine.apply(ds, Query(sort=SortSpec(field="n")))
    assert [r["n"] for r in result] == ["א", "כא", "ךב"]


def test_apply_does_not_mutate_dataset():
    ds = _make_dataset()
    before = copy.deepcopy(ds.records)
    search_engine.apply(ds, Query(term="jcb", sort=SortSpec(field="רישוי", descending=True)))
    assert ds.records == before


def test_quick_search_caps_results_in_dataset_order():
    records = [{"רישוי": f"10{i:02d}"} for i in range(20)]
    ds = Dataset(name="x", path="/x", records=records)

    result = search_engine.quick_search(ds, "10", "רישוי")
    assert len(result) == 5
    assert _licences(result) == ["1000", "1001", "1002", "1003", "1004"]


def test_quick_search_blank_term_and_single_field():
    ds = _make_dataset()
    assert search_engine.quick_search(ds, "   ", "רישוי") == []
    assert search_engine.quick_search(ds, "צפון", "רישוי") == []
    assert _licences(search_engine.quick_search(ds, "55", "רישוי")) == ["555"]


def test_paginate_slices_and_clamps():
    records = [{"i": i} for i in range(23)]

    page = search_engine.paginate(records, 3)
    assert page.page_count == 3
    assert [r["i"] for r in page.items] == [20, 21, 22]

    assert search_engine.paginate(records, 99).page == 3
    assert search_engine.paginate(records, 0).page == 1


def test_paginate_empty():
    page = search_engine.paginate([], 1)
    assert page.items == []
    assert page.page_count == 1
    assert page.total == 0


def test_apply_keyed_pairs_follow_filter_and_sort():
    ds = Dataset(
        name="owners",
        path="/owner/data_owner",
        records=[{"חפ": "5", "שם": "ב"}, {"חפ": "9", "שם": "ג"}, {"חפ": "5", "שם": "א"}],
        keys=["k0", "k1", "k2"],
        identifier_field="חפ",
    )

    pairs = search_engine.apply_keyed(ds, Query(allowed={"חפ": ["5"]}, sort=SortSpec(field="שם")))

    assert [key for key, _ in pairs] == ["k2", "k0"]
    assert [r["שם"] for _, r in pairs] == ["א", "ב"]
    assert [r for _, r in pairs] == search_engine.apply(ds, Query(allowed={"חפ": ["5"]}, sort=SortSpec(field="שם")))
