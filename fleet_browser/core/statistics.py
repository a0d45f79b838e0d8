from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

import pandas as pd

from fleet_browser.core.aggregator import STATUS_FIELD, STATUS_RECRUITED, TIMESTAMP_FIELD
from fleet_browser.core.records import UNKNOWN_VALUE, as_text, parse_timestamp

# Above this many distinct values a pie chart is unreadable.
PIE_MAX_SLICES = 8


@dataclass(frozen=True)
class Timeframe:
    """Bucket frequency, how many buckets to show and the bucket label format."""
    freq: str
    periods: int
    label_format: str


TIMEFRAMES: Dict[str, Timeframe] = {
    "year": Timeframe(freq="Y", periods=5, label_format="%Y"),
    "month": Timeframe(freq="M", periods=12, label_format="%m/%Y"),
    "week": Timeframe(freq="W", periods=12, label_format="%d/%m"),
    "day": Timeframe(freq="D", periods=30, label_format="%d/%m"),
}


@dataclass
class Timeline:
    frame: pd.DataFrame
    total: int
    percentage_change: float


def value_counts(records: Iterable[Mapping[str, Any]], field: str) -> pd.DataFrame:
    """
    Count each value of `field`; absent values count as "unknown".

    Returns columns [value, count, percent], most frequent first (ties keep
    first-seen order).
    """
    counts = Counter(as_text(r.get(field)) or UNKNOWN_VALUE for r in records)
    df = pd.DataFrame(list(counts.items()), columns=["value", "count"])
    if df.empty:
        df["percent"] = pd.Series(dtype=float)
        return df

    df = df.sort_values("count", ascending=False, kind="stable").reset_index(drop=True)
    df["percent"] = (df["count"] / df["count"].sum() * 100).round(1)
    return df


def suggest_chart_type(counts: pd.DataFrame) -> str:
    return "bar" if len(counts) > PIE_MAX_SLICES else "pie"


def recruitment_timeline(
    events: Iterable[Mapping[str, Any]],
    timeframe: str = "month",
    *,
    status_field: str = STATUS_FIELD,
    timestamp_field: str = TIMESTAMP_FIELD,
    status: str = STATUS_RECRUITED,
    now: Optional[pd.Timestamp] = None,
) -> Timeline:
    """
    Zero-filled count of `status` events per time bucket over a trailing
    window ending at `now`.

    percentage_change compares the second half of the window with the first
    half; it is 0 when the first half has no events.
    """
    try:
        tf = TIMEFRAMES[timeframe]
    except KeyError:
        raise ValueError(f"Unknown timeframe '{timeframe}'. Expected one of {sorted(TIMEFRAMES)}")

    now = pd.Timestamp.now() if now is None else pd.Timestamp(now)
    buckets = pd.period_range(end=now.to_period(tf.freq), periods=tf.periods, freq=tf.freq)
    first, last = buckets[0], buckets[-1]

    counts: Counter = Counter()
    for event in events:
        if as_text(event.get(status_field)) != status:
            continue
        ts = parse_timestamp(event.get(timestamp_field))
        if ts is None or ts > now:
            continue
        period = ts.to_period(tf.freq)
        if first <= period <= last:
            counts[period] += 1

    frame = pd.DataFrame(
        {
            "bucket": [p.start_time.strftime(tf.label_format) for p in buckets],
            "start": [p.start_time for p in buckets],
            "count": [counts.get(p, 0) for p in buckets],
        }
    )

    total = int(frame["count"].sum())
    midpoint = len(frame) // 2
    previous = int(frame["count"].iloc[:midpoint].sum())
    current = int(frame["count"].iloc[midpoint:].sum())
    change = 0.0 if previous == 0 else (current - previous) / previous * 100

    return Timeline(frame=frame, total=total, percentage_change=change)
