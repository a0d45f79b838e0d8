from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SortSpec:
    """Sort by one field; ascending unless `descending`."""
    field: str
    descending: bool = False

    def toggled(self, field_name: str) -> "SortSpec":
        """
        Header-click semantics: clicking the sorted column flips direction,
        clicking another column sorts it ascending.
        """
        if field_name == self.field and not self.descending:
            return SortSpec(field=field_name, descending=True)
        return SortSpec(field=field_name, descending=False)


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive [start, end] bound on a date field. Bounds are kept as given
    (ISO strings from the date picker) and parsed when applied.
    """
    field: str
    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return bool(self.start) and bool(self.end)


@dataclass
class Query:
    """
    Represents the current user search/filter/sort selection on one dataset.

    Fields:

    - term: free-text term, matched against every field
    - contains: field -> substring (per-column text filters)
    - allowed: field -> allowed values (multi-select filters; empty = no constraint)
    - date_range: optional inclusive range on a date field
    - sort: optional sort specification

    """

    term: str = ""
    contains: Dict[str, str] = field(default_factory=dict)
    allowed: Dict[str, List[str]] = field(default_factory=dict)
    date_range: Optional[DateRange] = None
    sort: Optional[SortSpec] = None

    @property
    def is_empty(self) -> bool:
        return (
            not self.term.strip()
            and not any(v for v in self.contains.values())
            and not any(v for v in self.allowed.values())
            and (self.date_range is None or not self.date_range.is_active)
            and self.sort is None
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Query:
        data = data or {}

        raw_range = data.get("date_range")
        date_range = None
        if raw_range and raw_range.get("field"):
            date_range = DateRange(
                field=raw_range["field"],
                start=raw_range.get("start"),
                end=raw_range.get("end"),
            )

        raw_sort = data.get("sort")
        sort = None
        if raw_sort and raw_sort.get("field"):
            sort = SortSpec(
                field=raw_sort["field"],
                descending=bool(raw_sort.get("descending", False)),
            )

        return cls(
            term=str(data.get("term") or ""),
            contains={str(k): str(v) for k, v in (data.get("contains") or {}).items() if v},
            allowed={
                str(k): [str(x) for x in v]
                for k, v in (data.get("allowed") or {}).items()
                if v
            },
            date_range=date_range,
            sort=sort,
        )
