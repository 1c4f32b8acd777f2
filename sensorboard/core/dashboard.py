# -*- coding: utf-8 -*-
"""Dashboard view model: summary cards, chart series and relay control."""
from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sensorboard.core.config import DASHBOARD
from sensorboard.core.models import (
    ChartPoint,
    Range,
    RecordFormatError,
    SensorReading,
    normalize_humidity,
    normalize_temperature,
)
from sensorboard.core.relay import RelayController
from sensorboard.core.scheduler import RelayPoller
from sensorboard.core.series import (
    build_chart,
    format_axis_label,
    humidity_status,
    latest_reading,
    temperature_status,
)
from sensorboard.core.upstream import UpstreamClient, UpstreamError

logger = logging.getLogger(__name__)


def load_timezone(name: Optional[str]) -> tzinfo:
    if not name or str(name).upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; axis labels use UTC", name)
        return timezone.utc


class Dashboard:
    """Server-side counterpart of the dashboard page.

    Holds the selected range, the latest temperature/humidity readings and
    the merged chart series, and owns the relay controller and its poller.
    Failed loads keep whatever was shown before.
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        relay: Optional[RelayController] = None,
        *,
        default_range: Optional[Range | str] = None,
        tolerance_s: Optional[float] = None,
        tz: Optional[tzinfo] = None,
        poll_interval_s: Optional[float] = None,
    ) -> None:
        self.upstream = upstream
        self.relay = relay or RelayController(upstream)
        self.poller = RelayPoller(self.relay, poll_interval_s)
        self.selected_range = Range.parse(default_range or DASHBOARD["default_range"])
        self.chart_range = self.selected_range
        tol = tolerance_s if tolerance_s is not None else DASHBOARD["merge_tolerance_s"]
        self.tolerance = timedelta(seconds=float(tol))
        self.tz = tz or load_timezone(DASHBOARD.get("timezone"))
        self.temperature: Optional[SensorReading] = None
        self.humidity: Optional[SensorReading] = None
        self.chart: List[ChartPoint] = []
        self._initial_load: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        self.poller.start()
        if self._initial_load is None or self._initial_load.done():
            self._initial_load = asyncio.create_task(self.refresh(), name="dashboard-initial-load")

    async def stop(self) -> None:
        await self.poller.stop()
        if self._initial_load and not self._initial_load.done():
            self._initial_load.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._initial_load
        self._initial_load = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    async def _fetch_histories(self) -> Tuple[List[SensorReading], List[SensorReading]]:
        cel_raw, hum_raw = await asyncio.gather(self.upstream.get_celcius(), self.upstream.get_humidity())
        return normalize_temperature(cel_raw), normalize_humidity(hum_raw)

    async def load_latest(self) -> bool:
        try:
            temperature, humidity = await self._fetch_histories()
        except (UpstreamError, RecordFormatError) as exc:
            logger.warning("Error fetching latest readings: %s", exc)
            return False
        self.temperature = latest_reading(temperature)
        self.humidity = latest_reading(humidity)
        return True

    async def load_chart(self, range_: Optional[Range | str] = None, now: Optional[datetime] = None) -> bool:
        selected = Range.parse(range_ or self.selected_range)
        try:
            temperature, humidity = await self._fetch_histories()
        except (UpstreamError, RecordFormatError) as exc:
            logger.warning("Error fetching chart data for %s: %s", selected.value, exc)
            return False
        self.chart = build_chart(temperature, humidity, selected, self.tolerance, now=now)
        self.chart_range = selected
        logger.info("%s chart: %d points", selected.value, len(self.chart))
        return True

    async def select_range(self, range_: Range | str) -> bool:
        self.selected_range = Range.parse(range_)
        return await self.load_chart(self.selected_range)

    async def refresh(self) -> None:
        await asyncio.gather(self.load_latest(), self.load_chart())

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def _card(self, reading: Optional[SensorReading], classify) -> Dict[str, Any]:
        if reading is None:
            return {"value": None, "time": None, "status": classify(None)}
        return dict(reading.to_dict(), status=classify(reading.value))

    def snapshot(self) -> Dict[str, Any]:
        points = [
            dict(p.to_dict(), label=format_axis_label(p.time, self.chart_range, self.tz))
            for p in self.chart
        ]
        return {
            "range": self.selected_range.value,
            "temperature": self._card(self.temperature, temperature_status),
            "humidity": self._card(self.humidity, humidity_status),
            "chart": {"range": self.chart_range.value, "points": points},
            "relay": self.relay.export(),
            "busy": self.relay.busy,
            "error": self.relay.error,
        }


__all__ = ["Dashboard", "load_timezone"]
