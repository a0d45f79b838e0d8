"""
Filter / sort / search over a loaded Dataset.

Every view that searches, filters or sorts records goes through `apply` (or
`quick_search` for type-ahead), so the matching rules live in one place.
All functions are pure: the Dataset is never modified.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from fleet_browser.core.dataset import Dataset
from fleet_browser.core.query import DateRange, Query, SortSpec
from fleet_browser.core.records import Record, as_text, parse_timestamp, sort_key

logger = logging.getLogger(__name__)

QUICK_SEARCH_LIMIT = 5
PAGE_SIZE = 10


@dataclass(frozen=True)
class Page:
    items: List[Any]
    page: int
    page_count: int
    total: int


# -----------------------------------------------------------------------------
# Masks
# -----------------------------------------------------------------------------
def _contains_mask(column, needle: str) -> np.ndarray:
    return column.str.casefold().str.contains(needle, regex=False).to_numpy(dtype=bool)


def term_mask(dataset: Dataset, term: str) -> np.ndarray:
    """True where any field's text contains term (case-insensitive)."""
    n = len(dataset)
    needle = (term or "").strip().casefold()
    if not needle:
        return np.ones(n, dtype=bool)

    hit = np.zeros(n, dtype=bool)
    frame = dataset.frame
    for column in frame.columns:
        hit |= _contains_mask(frame[column], needle)
    return hit


def date_range_mask(dataset: Dataset, date_range: Optional[DateRange]) -> np.ndarray:
    n = len(dataset)
    if date_range is None or not date_range.is_active:
        return np.ones(n, dtype=bool)

    start = parse_timestamp(date_range.start)
    end = parse_timestamp(date_range.end)
    if start is None or end is None:
        logger.warning(
            "Ignoring unparseable date range bounds",
            extra={"start": date_range.start, "end": date_range.end},
        )
        return np.ones(n, dtype=bool)

    mask = np.zeros(n, dtype=bool)
    for i, record in enumerate(dataset):
        ts = parse_timestamp(record.get(date_range.field))
        mask[i] = ts is not None and start <= ts <= end
    return mask


def filter_mask(dataset: Dataset, query: Query) -> np.ndarray:
    """Boolean mask of records satisfying every active constraint of query."""
    mask = term_mask(dataset, query.term)

    for field, substring in query.contains.items():
        needle = (substring or "").casefold()
        if needle:
            mask &= _contains_mask(dataset.text_column(field), needle)

    for field, values in query.allowed.items():
        if values:
            mask &= dataset.text_column(field).isin([str(v) for v in values]).to_numpy(dtype=bool)

    mask &= date_range_mask(dataset, query.date_range)
    return mask


# -----------------------------------------------------------------------------
# Sorting
# -----------------------------------------------------------------------------
def sort_records(records: Sequence[Mapping], spec: Optional[SortSpec]) -> List[Record]:
    """
    Stable sort on the Hebrew collation of spec.field; missing values sort
    as "". No spec keeps the input order.
    """
    if spec is None:
        return list(records)
    return sorted(
        records,
        key=lambda r: sort_key(r.get(spec.field)),
        reverse=spec.descending,
    )


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def apply_keyed(dataset: Dataset, query: Query) -> List[Tuple[str, Record]]:
    """
    Like `apply`, but each record comes paired with its store key, so callers
    that write back never have to find a record again by its values.
    """
    mask = filter_mask(dataset, query)
    pairs = [(key, r) for key, r, keep in zip(dataset.keys, dataset, mask) if keep]
    spec = query.sort
    if spec is None:
        return pairs
    return sorted(
        pairs,
        key=lambda pair: sort_key(pair[1].get(spec.field)),
        reverse=spec.descending,
    )


def apply(dataset: Dataset, query: Query) -> List[Record]:
    """
    Apply a Query to a Dataset and return the derived, ordered records.

    An empty query returns every record in dataset order.
    """
    return [record for _key, record in apply_keyed(dataset, query)]


def quick_search(
    dataset: Dataset,
    term: str,
    field: str,
    limit: int = QUICK_SEARCH_LIMIT,
) -> List[Record]:
    """
    Type-ahead: first `limit` records whose `field` contains term, in
    dataset order. A blank term returns nothing.
    """
    needle = (term or "").strip().casefold()
    if not needle or limit <= 0:
        return []

    results: List[Record] = []
    for record in dataset:
        if needle in as_text(record.get(field)).casefold():
            results.append(record)
            if len(results) >= limit:
                break
    return results


def paginate(records: Sequence[Any], page: int, page_size: int = PAGE_SIZE) -> Page:
    """Slice records (or key/record pairs) into 1-based pages; out-of-range pages are clamped."""
    total = len(records)
    page_count = max(1, math.ceil(total / page_size))
    page = min(max(1, int(page or 1)), page_count)
    start = (page - 1) * page_size
    return Page(
        items=list(records[start:start + page_size]),
        page=page,
        page_count=page_count,
        total=total,
    )
