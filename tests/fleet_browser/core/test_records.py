import pandas as pd

from fleet_browser.core.records import (
    PLACEHOLDER,
    UNKNOWN_VALUE,
    as_text,
    coerce_like,
    collation_key,
    discover_fields,
    display_value,
    format_phone_numbers,
    parse_number,
    parse_timestamp,
    sort_key,
)


def test_as_text_display_rules():
    assert as_text(None) == ""
    assert as_text(float("nan")) == ""
    assert as_text(True) == "true"
    assert as_text(False) == "false"
    assert as_text(1234.0) == "1234"
    assert as_text(1.5) == "1.5"
    assert as_text(7) == "7"
    assert as_text("טקסט") == "טקסט"


def test_display_value_uses_placeholder_for_absent_and_unknown():
    assert display_value(None) == PLACEHOLDER
    assert display_value("   ") == PLACEHOLDER
    assert display_value(UNKNOWN_VALUE) == PLACEHOLDER
    assert display_value("JCB") == "JCB"
    assert display_value(0) == "0"


def test_collation_ignores_niqqud_and_case():
    assert collation_key("שָׁלוֹם") == collation_key("שלום")
    assert collation_key("JCB") == collation_key("jcb")


def test_final_forms_collate_with_base_letter():
    assert collation_key("ם") == collation_key("מ")
    assert collation_key("ץ") == collation_key("צ")
    # Raw code points would put final kaf before kaf regardless of what follows.
    assert sorted(["ךב", "כא"], key=sort_key) == ["כא", "ךב"]


def test_hebrew_alphabetic_order():
    assert sorted(["ת", "כ", "א", "מ"], key=sort_key) == ["א", "כ", "מ", "ת"]


def test_parse_timestamp_numbers_are_epoch_millis():
    assert parse_timestamp(0) == pd.Timestamp("1970-01-01")
    assert parse_timestamp(1717286400000) == pd.Timestamp("2024-06-02")
    assert parse_timestamp(1717315200000) == pd.Timestamp("2024-06-02 08:00")


def test_parse_timestamp_strings_and_timezones():
    assert parse_timestamp("2024-01-15") == pd.Timestamp("2024-01-15")
    assert parse_timestamp("2024-01-01T02:00:00+02:00") == pd.Timestamp("2024-01-01 00:00:00")


def test_parse_timestamp_never_raises():
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp(True) is None
    assert parse_timestamp(float("inf")) is None


def test_parse_number():
    assert parse_number("32.06") == 32.06
    assert parse_number(" 35 ") == 35.0
    assert parse_number("abc") is None
    assert parse_number(None) is None
    assert parse_number("nan") is None


def test_discover_fields_first_seen_order():
    records = [{"b": 1, "a": 2}, {"c": 3, "a": 4}, {}]
    assert discover_fields(records) == ["b", "a", "c"]


def test_format_phone_numbers_drops_spreadsheet_junk():
    assert format_phone_numbers("050-1234567, nan, *nan") == "050-1234567"
    assert format_phone_numbers("050-1,052-2") == "050-1, 052-2"
    assert format_phone_numbers(f"nan, {UNKNOWN_VALUE}") == UNKNOWN_VALUE
    assert format_phone_numbers(None) == UNKNOWN_VALUE


def test_coerce_like_keeps_original_type():
    assert coerce_like(5, "7") == 7
    assert isinstance(coerce_like(5, "7"), int)
    assert coerce_like(1.5, "2.5") == 2.5
    assert coerce_like(5, "abc") == "abc"
    assert coerce_like(True, "false") is False
    assert coerce_like("x", "y") == "y"
    assert coerce_like("x", "  ") is None
