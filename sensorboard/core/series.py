# -*- coding: utf-8 -*-
"""Time-series helpers for the dashboard chart and summary cards."""
from __future__ import annotations

import math
from bisect import bisect_left
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from sensorboard.core.config import THRESHOLDS
from sensorboard.core.models import ChartPoint, Range, SensorReading

DEFAULT_TOLERANCE = timedelta(minutes=5)

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

NO_DATA = "No data"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_timedelta(value: timedelta | float | int) -> timedelta:
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=float(value))


def filter_by_range(
    records: Iterable[SensorReading],
    range_: Range | str,
    now: Optional[datetime] = None,
) -> List[SensorReading]:
    """Keep records whose age is at most the range window (boundary included)."""
    window = Range.parse(range_).window
    now = now or _utcnow()
    return [r for r in records if now - r.time <= window]


def merge_series(
    temperature: Sequence[SensorReading],
    humidity: Sequence[SensorReading],
    tolerance: timedelta | float = DEFAULT_TOLERANCE,
) -> List[ChartPoint]:
    """Pair every temperature reading with the closest humidity reading.

    Temperature-anchored left join: one point per temperature reading, with
    ``humidity=None`` when no humidity reading lies within ``tolerance``.
    Equally close candidates resolve to the one listed first in ``humidity``.
    """
    tol = _as_timedelta(tolerance)
    order = sorted(range(len(humidity)), key=lambda i: (humidity[i].time, i))
    times = [humidity[i].time for i in order]

    points: List[ChartPoint] = []
    for reading in temperature:
        best: Optional[int] = None
        best_delta: Optional[timedelta] = None
        pos = bisect_left(times, reading.time)
        candidates = []
        if pos < len(times):
            candidates.append(pos)
        if pos > 0:
            # first entry sharing the closest earlier timestamp
            candidates.append(bisect_left(times, times[pos - 1]))
        for slot in candidates:
            idx = order[slot]
            delta = abs(times[slot] - reading.time)
            if delta > tol:
                continue
            if best is None or delta < best_delta or (delta == best_delta and idx < best):
                best, best_delta = idx, delta
        points.append(
            ChartPoint(
                time=reading.time,
                celcius=reading.value,
                humidity=humidity[best].value if best is not None else None,
            )
        )
    return points


def sort_points(points: Iterable[ChartPoint]) -> List[ChartPoint]:
    return sorted(points, key=lambda p: p.time)


def build_chart(
    temperature: Sequence[SensorReading],
    humidity: Sequence[SensorReading],
    range_: Range | str,
    tolerance: timedelta | float = DEFAULT_TOLERANCE,
    now: Optional[datetime] = None,
) -> List[ChartPoint]:
    """Filter both series to ``range_``, merge them and sort by time."""
    now = now or _utcnow()
    temp_in_range = filter_by_range(temperature, range_, now)
    hum_in_range = filter_by_range(humidity, range_, now)
    return sort_points(merge_series(temp_in_range, hum_in_range, tolerance))


def format_axis_label(ts: datetime, range_: Range | str, tz: tzinfo = timezone.utc) -> str:
    """Label for the chart x axis: clock time, weekday or week of month."""
    local = ts.astimezone(tz)
    range_ = Range.parse(range_)
    if range_ is Range.DAILY:
        return local.strftime("%H:%M")
    if range_ is Range.WEEKLY:
        return WEEKDAYS[local.weekday()]
    return f"Week {math.ceil(local.day / 7)}"


def latest_reading(records: Iterable[SensorReading]) -> Optional[SensorReading]:
    latest: Optional[SensorReading] = None
    for record in records:
        if latest is None or record.time > latest.time:
            latest = record
    return latest


def temperature_status(value: Optional[float], thresholds: Optional[Dict[str, float]] = None) -> str:
    cfg = thresholds or THRESHOLDS
    if value is None:
        return NO_DATA
    if value < float(cfg["temp_low_c"]):
        return "Low (unsafe)"
    if value <= float(cfg["temp_high_c"]):
        return "Safe"
    return "High (unsafe)"


def humidity_status(value: Optional[float], thresholds: Optional[Dict[str, float]] = None) -> str:
    cfg = thresholds or THRESHOLDS
    if value is None:
        return NO_DATA
    if value < float(cfg["hum_low_percent"]):
        return "Dry (unsafe)"
    if value <= float(cfg["hum_high_percent"]):
        return "Safe"
    return "Humid (unsafe)"


__all__ = [
    "DEFAULT_TOLERANCE",
    "build_chart",
    "filter_by_range",
    "format_axis_label",
    "humidity_status",
    "latest_reading",
    "merge_series",
    "sort_points",
    "temperature_status",
]
