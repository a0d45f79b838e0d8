from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union

import pandas as pd

from fleet_browser.core.records import Record, as_text, discover_fields, sort_key


@dataclass(frozen=True)
class ColumnConfig:
    """
    One table column as the records table shows it.

    - key: field name
    - visible: shown by default
    - priority: position in the configured priority list, -1 if not listed
    """
    key: str
    visible: bool
    priority: int


class Dataset:
    """
    Ordered, in-memory collection of flat records loaded from one store path.

    Includes:
    - Field discovery (union of keys across all records)
    - A string-normalised DataFrame used for vectorised filtering
    - Cached distinct values per field for filter dropdowns
    - Copy-on-write record replacement (optimistic update after a write)

    The Dataset never changes in place; `replace_record` returns a new one.
    """

    def __init__(
        self,
        name: str,
        path: str,
        records: Sequence[Mapping[str, Any]],
        keys: Optional[Sequence[str]] = None,
        identifier_field: Optional[str] = None,
        date_field: Optional[str] = None,
    ) -> None:
        self.name = name
        self.path = path
        self.identifier_field = identifier_field
        self.date_field = date_field

        self._records: tuple[Record, ...] = tuple(dict(r) for r in records)

        if keys is None:
            keys = [str(i) for i in range(len(self._records))]
        if len(keys) != len(self._records):
            raise ValueError(
                f"Dataset '{name}': got {len(keys)} keys for {len(self._records)} records"
            )
        self._keys: tuple[str, ...] = tuple(str(k) for k in keys)

        self._fields: List[str] = discover_fields(self._records)

        # Caches
        self._frame: Optional[pd.DataFrame] = None
        self._filter_options: Optional[Dict[str, List[str]]] = None

    # -------------------------------------------------------------------------
    # Sequence protocol
    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __getitem__(self, index: int) -> Record:
        return self._records[index]

    @property
    def records(self) -> List[Record]:
        return list(self._records)

    @property
    def keys(self) -> List[str]:
        """Store keys (array index or object key) of each record, same order."""
        return list(self._keys)

    @property
    def fields(self) -> List[str]:
        return list(self._fields)

    @property
    def is_empty(self) -> bool:
        return not self._records

    # -------------------------------------------------------------------------
    # Text frame for vectorised filtering
    # -------------------------------------------------------------------------
    @property
    def frame(self) -> pd.DataFrame:
        """
        One row per record, one column per discovered field, every cell the
        record value's string representation ("" when absent).
        """
        if self._frame is None:
            rows = [[as_text(r.get(f)) for f in self._fields] for r in self._records]
            self._frame = pd.DataFrame(rows, columns=self._fields, dtype=object)
        return self._frame

    def text_column(self, field: str) -> pd.Series:
        """Text column for field; all "" when no record carries it."""
        frame = self.frame
        if field in frame.columns:
            return frame[field]
        return pd.Series([""] * len(frame), index=frame.index, dtype=object)

    # -------------------------------------------------------------------------
    # Filter dropdown options (cached)
    # -------------------------------------------------------------------------
    def filter_options(self) -> Dict[str, List[str]]:
        """
        Distinct non-empty values per field, in Hebrew collation order.

        Computing uniques on every UI change is wasteful, so we do it once.
        """
        if self._filter_options is not None:
            return self._filter_options

        options: Dict[str, List[str]] = {}
        for field in self._fields:
            values = {v for v in self.text_column(field) if v.strip()}
            options[field] = sorted(values, key=sort_key)

        self._filter_options = options
        return self._filter_options

    # -------------------------------------------------------------------------
    # Column layout
    # -------------------------------------------------------------------------
    def column_layout(self, priority_columns: Sequence[str] = ()) -> List[ColumnConfig]:
        """
        Priority columns first (configured order, visible), then every other
        field in collation order (hidden until the user turns it on).
        """
        priority = list(priority_columns)
        configs = [
            ColumnConfig(
                key=field,
                visible=field in priority,
                priority=priority.index(field) if field in priority else -1,
            )
            for field in self._fields
        ]

        def order(cfg: ColumnConfig):
            if cfg.priority == -1:
                return (1, 0, sort_key(cfg.key))
            return (0, cfg.priority, ("", ""))

        return sorted(configs, key=order)

    # -------------------------------------------------------------------------
    # Record lookup / replacement
    # -------------------------------------------------------------------------
    def index_of(self, record: Mapping[str, Any]) -> int:
        """
        Position of record in this dataset, or -1.

        Matches on the identifier field when configured and present on the
        record, otherwise on equality of every field value.
        """
        ident = self.identifier_field
        if ident and record.get(ident) not in (None, ""):
            target = as_text(record.get(ident))
            for i, candidate in enumerate(self._records):
                if as_text(candidate.get(ident)) == target:
                    return i
            return -1

        wanted = dict(record)
        for i, candidate in enumerate(self._records):
            if candidate == wanted:
                return i
        return -1

    def key_of(self, target: Union[int, Mapping[str, Any]]) -> str:
        """Store key of a record given by index or by value."""
        index = target if isinstance(target, int) else self.index_of(target)
        if index < 0 or index >= len(self._records):
            raise KeyError(f"Record not found in dataset '{self.name}'")
        return self._keys[index]

    def replace_record(
        self,
        target: Union[int, Mapping[str, Any]],
        updated: Mapping[str, Any],
    ) -> "Dataset":
        """
        Return a new Dataset with one record swapped for `updated`.

        target is either the record's index or the record itself.
        """
        index = target if isinstance(target, int) else self.index_of(target)
        if index < 0 or index >= len(self._records):
            raise KeyError(f"Record not found in dataset '{self.name}'")

        records = list(self._records)
        records[index] = dict(updated)
        return Dataset(
            name=self.name,
            path=self.path,
            records=records,
            keys=self._keys,
            identifier_field=self.identifier_field,
            date_field=self.date_field,
        )

    def to_frame(self, records: Optional[Sequence[Mapping[str, Any]]] = None) -> pd.DataFrame:
        """
        Raw-valued DataFrame of `records` (defaults to all records), columns in
        discovered field order. Used by tables and exports.
        """
        rows = self._records if records is None else records
        return pd.DataFrame([dict(r) for r in rows], columns=self._fields)
