from __future__ import annotations

import math
import unicodedata
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

Scalar = Union[str, int, float, bool, None]
Record = Dict[str, Scalar]

# Literal the source data uses for "we don't know"; rendered like an absent value.
UNKNOWN_VALUE = "לא ידוע"
PLACEHOLDER = "-"

# Hebrew final letter forms collate with their base letter.
_FINAL_FORMS = str.maketrans({
    "ך": "כ",
    "ם": "מ",
    "ן": "נ",
    "ף": "פ",
    "ץ": "צ",
})


def as_text(value: Any) -> str:
    """
    String representation used for search, filtering, sorting and export.

    Absent values become "", booleans are lower-case and integral floats lose
    their trailing ".0" so that 1234.0 and "1234" look the same to a search.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def is_absent(value: Any) -> bool:
    return as_text(value).strip() == ""


def display_value(value: Any) -> str:
    """Table cell text: absent and "unknown" values show as a dash."""
    text = as_text(value)
    if not text.strip() or text == UNKNOWN_VALUE:
        return PLACEHOLDER
    return text


def collation_key(value: Any) -> str:
    """
    Primary collation key with Hebrew alphabetic order.

    Hebrew letters are already in alphabetic order in Unicode; what breaks a
    naive comparison is niqqud (combining marks), final forms and case.
    """
    text = unicodedata.normalize("NFD", as_text(value))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return text.translate(_FINAL_FORMS).casefold()


def sort_key(value: Any) -> tuple[str, str]:
    """Collation key with the raw text as tie-breaker, so the order is total."""
    return collation_key(value), as_text(value)


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a record's date/time field.

    Numbers are epoch milliseconds, strings go through pandas' parser.
    Returns None for anything that does not parse; timezone-aware values are
    normalised to naive UTC so they compare with naive ones.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, (int, float)):
            if isinstance(value, float) and not math.isfinite(value):
                return None
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        else:
            text = str(value).strip()
            if not text:
                return None
            ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None

    if ts is None or pd.isna(ts):
        return None

    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def parse_number(value: Any) -> Optional[float]:
    """Lenient float coercion; None for unparseable or non-finite values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def discover_fields(records: Iterable[Mapping[str, Any]]) -> List[str]:
    """Ordered union of keys across records (first-seen order)."""
    seen: Dict[str, None] = {}
    for record in records:
        for key in record.keys():
            seen.setdefault(str(key), None)
    return list(seen)


_PHONE_JUNK = {"nan", "*nan", UNKNOWN_VALUE}


def format_phone_numbers(value: Any) -> str:
    """
    Clean a comma-separated phone list exported from spreadsheets
    ("050-1234567, nan, *nan") into display text.
    """
    phones = [p.strip() for p in as_text(value).split(",")]
    phones = [p for p in phones if p and p not in _PHONE_JUNK]
    return ", ".join(phones) or UNKNOWN_VALUE


def coerce_like(original: Any, text: Optional[str]) -> Scalar:
    """
    Convert edited form text back to the type of the value it replaces.

    Numbers stay numbers when the text still parses as one; anything else is
    stored as text, and a cleared field becomes None.
    """
    if text is None or str(text).strip() == "":
        return None
    text = str(text).strip()
    if isinstance(original, bool):
        if text.lower() in ("true", "false"):
            return text.lower() == "true"
        return text
    if isinstance(original, (int, float)):
        number = parse_number(text)
        if number is None:
            return text
        if isinstance(original, int) and number.is_integer():
            return int(number)
        return number
    return text
