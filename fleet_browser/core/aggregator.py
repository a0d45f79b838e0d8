"""
Region / unit history aggregation for recruitment events.

Input is a flat event log (one record per status report of a unit). Output
is, per region, the latest status of every unit plus the earlier reports and
per-status tallies.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from fleet_browser.core.records import Record, as_text, is_absent, parse_timestamp

logger = logging.getLogger(__name__)

REGION_FIELD = 'יצ"מ'
UNIT_FIELD = "קוד רכב"
STATUS_FIELD = "סטטוס"
TIMESTAMP_FIELD = "חותמת זמן"

STATUS_OCCUPIED = "תפוס"
STATUS_RECRUITED = "מגוייס"
TRACKED_STATUSES: Tuple[str, ...] = (STATUS_OCCUPIED, STATUS_RECRUITED)

# Display convention only: aggregate() accepts any region name.
DISPLAY_REGIONS: Tuple[str, ...] = ("צפון", "מרכז", "דרום")


@dataclass
class StatusTally:
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)

    def __getitem__(self, status: str) -> int:
        return self.by_status.get(status, 0)

    def to_dict(self) -> Dict[str, int]:
        return {"total": self.total, **self.by_status}


@dataclass
class RegionGroup:
    """
    Derived per-region view.

    - current: latest record of every unit whose latest record has a status
    - history: unit -> earlier records, newest first
    - tally: counts over `current`
    """
    region: str
    current: List[Record] = field(default_factory=list)
    history: Dict[str, List[Record]] = field(default_factory=dict)
    tally: StatusTally = field(default_factory=StatusTally)

    @property
    def count(self) -> int:
        return len(self.current)

    def history_for(self, unit: Any) -> List[Record]:
        return self.history.get(as_text(unit), [])


def _newest_first(events: Sequence[Record], timestamp_field: str) -> List[Record]:
    """
    Descending by parsed timestamp; unparseable timestamps sort last.
    Python's sort is stable with reverse=True too, so equal timestamps keep
    their input order.
    """
    def key(event: Record):
        ts = parse_timestamp(event.get(timestamp_field))
        if ts is None:
            return (0, 0)
        return (1, ts.value)

    return sorted(events, key=key, reverse=True)


def tally_statuses(
    current: Iterable[Mapping[str, Any]],
    status_field: str = STATUS_FIELD,
    tracked_statuses: Sequence[str] = TRACKED_STATUSES,
) -> StatusTally:
    current = list(current)
    counts = Counter(as_text(r.get(status_field)) for r in current)

    by_status: Dict[str, int] = {status: 0 for status in tracked_statuses}
    by_status.update(counts)
    return StatusTally(total=len(current), by_status=by_status)


def aggregate(
    events: Iterable[Mapping[str, Any]],
    region_field: str = REGION_FIELD,
    unit_field: str = UNIT_FIELD,
    status_field: str = STATUS_FIELD,
    timestamp_field: str = TIMESTAMP_FIELD,
    *,
    tracked_statuses: Sequence[str] = TRACKED_STATUSES,
    regions: Sequence[str] = (),
) -> Dict[str, RegionGroup]:
    """
    Partition events by region, group by unit, split latest vs. history.

    Events missing the region or unit field are skipped. A unit whose latest
    event has an empty status contributes no current record, but its earlier
    events are still kept in history. `regions` pre-seeds (possibly empty)
    groups for names the UI always shows; other regions are added as found.
    """
    grouped: Dict[str, Dict[str, List[Record]]] = {str(r): {} for r in regions}
    skipped = 0

    for event in events:
        region = event.get(region_field)
        unit = event.get(unit_field)
        if is_absent(region) or is_absent(unit):
            skipped += 1
            continue
        units = grouped.setdefault(as_text(region), {})
        units.setdefault(as_text(unit), []).append(dict(event))

    result: Dict[str, RegionGroup] = {}
    for region, units in grouped.items():
        group = RegionGroup(region=region)
        for unit, unit_events in units.items():
            ordered = _newest_first(unit_events, timestamp_field)
            latest = ordered[0]
            # Any non-empty status counts, whitespace included.
            if as_text(latest.get(status_field)) != "":
                group.current.append(latest)
            group.history[unit] = ordered[1:]

        group.tally = tally_statuses(group.current, status_field, tracked_statuses)
        result[region] = group

    logger.debug(
        "Aggregated recruitment events",
        extra={"n_regions": len(result), "n_skipped": skipped},
    )
    return result
