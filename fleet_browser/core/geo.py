from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from fleet_browser.core.records import as_text, parse_number

LATITUDE_FIELD = "רוחב"
LONGITUDE_FIELD = "אורך"

# Centre of Israel; used when there is nothing to show.
DEFAULT_CENTER: Tuple[float, float] = (31.0461, 34.8516)
DEFAULT_ZOOM = 7

# (max coordinate spread in degrees, zoom) from widest to tightest.
_ZOOM_STEPS: Sequence[Tuple[float, int]] = ((2, 7), (1, 8), (0.5, 9), (0.1, 10))
_MAX_ZOOM = 11


@dataclass(frozen=True)
class MapFrame:
    points: pd.DataFrame
    center: Tuple[float, float]
    zoom: int


def _excluded(record: Mapping[str, Any], exclude: Mapping[str, Sequence[str]]) -> bool:
    return any(as_text(record.get(f)) in set(values) for f, values in exclude.items())


def map_points(
    records: Iterable[Mapping[str, Any]],
    lat_field: str = LATITUDE_FIELD,
    lon_field: str = LONGITUDE_FIELD,
    *,
    exclude: Optional[Mapping[str, Sequence[str]]] = None,
    label_fields: Sequence[str] = (),
) -> pd.DataFrame:
    """
    Records that can be placed on a map.

    Keeps records whose coordinates parse to finite, in-range numbers and
    that carry none of the `exclude` field values (known placeholder rows).
    Returns columns [lat, lon, *label_fields].
    """
    exclude = exclude or {}
    rows: List[dict] = []
    for record in records:
        if _excluded(record, exclude):
            continue
        lat = parse_number(record.get(lat_field))
        lon = parse_number(record.get(lon_field))
        if lat is None or lon is None:
            continue
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            continue
        row = {"lat": lat, "lon": lon}
        for f in label_fields:
            row[f] = as_text(record.get(f))
        rows.append(row)

    return pd.DataFrame(rows, columns=["lat", "lon", *label_fields])


def map_center(points: pd.DataFrame) -> Tuple[float, float]:
    if points.empty:
        return DEFAULT_CENTER
    return float(points["lat"].mean()), float(points["lon"].mean())


def map_zoom(points: pd.DataFrame) -> int:
    """Zoom level from the larger of the latitude / longitude spreads."""
    if points.empty:
        return DEFAULT_ZOOM

    spread = max(
        points["lat"].max() - points["lat"].min(),
        points["lon"].max() - points["lon"].min(),
    )
    for threshold, zoom in _ZOOM_STEPS:
        if spread > threshold:
            return zoom
    return _MAX_ZOOM


def build_map_frame(records: Iterable[Mapping[str, Any]], **kwargs: Any) -> MapFrame:
    points = map_points(records, **kwargs)
    return MapFrame(points=points, center=map_center(points), zoom=map_zoom(points))
