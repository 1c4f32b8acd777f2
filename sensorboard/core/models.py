# -*- coding: utf-8 -*-
# sensorboard/core/models.py - runtime records + normalization of upstream JSON
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class RecordFormatError(ValueError):
    """Raised when an upstream record does not match any known field layout."""


class Range(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: "Range | str") -> "Range":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown range {value!r}; expected daily, weekly or monthly") from None

    @property
    def window(self) -> timedelta:
        return RANGE_WINDOWS[self]


RANGE_WINDOWS: Dict[Range, timedelta] = {
    Range.DAILY: timedelta(hours=24),
    Range.WEEKLY: timedelta(days=7),
    Range.MONTHLY: timedelta(days=30),
}


class RelayMode(str, Enum):
    AUTOMATIC = "AUTO"
    MANUAL = "MANUAL"

    @classmethod
    def parse(cls, value: Any) -> "RelayMode":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        if text in ("AUTO", "AUTOMATIC"):
            return cls.AUTOMATIC
        if text == "MANUAL":
            return cls.MANUAL
        raise RecordFormatError(f"Unknown relay mode {value!r}")

    def toggled(self) -> "RelayMode":
        return RelayMode.MANUAL if self is RelayMode.AUTOMATIC else RelayMode.AUTOMATIC


class RelayStatus(str, Enum):
    ON = "ON"
    OFF = "OFF"

    @classmethod
    def parse(cls, value: Any) -> "RelayStatus":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        if text in ("ON", "OFF"):
            return cls(text)
        raise RecordFormatError(f"Unknown relay status {value!r}")

    def toggled(self) -> "RelayStatus":
        return RelayStatus.OFF if self is RelayStatus.ON else RelayStatus.ON


# Field names used by the upstream service, in lookup order
TIME_KEYS = ("time", "created_at")
TEMPERATURE_KEYS = ("value", "degrees")
HUMIDITY_KEYS = ("value", "percent")


@dataclass(frozen=True)
class SensorReading:
    time: datetime
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"time": isoformat(self.time), "value": self.value}


@dataclass(frozen=True)
class ChartPoint:
    time: datetime
    celcius: Optional[float]
    humidity: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {"time": isoformat(self.time), "celcius": self.celcius, "humidity": self.humidity}


@dataclass(frozen=True)
class RelayState:
    id: Optional[int]
    reported_status: RelayStatus
    mode: RelayMode
    manual_since: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RelayState":
        if not isinstance(payload, dict):
            raise RecordFormatError(f"Relay payload must be an object, got {type(payload).__name__}")
        for key in ("mode", "reported_status"):
            if payload.get(key) is None:
                raise RecordFormatError(f"Relay payload is missing '{key}'")
        relay_id = payload.get("id")
        if relay_id is not None:
            try:
                relay_id = int(relay_id)
            except (OverflowError, TypeError, ValueError):
                raise RecordFormatError(f"Invalid relay id {relay_id!r}") from None
        return cls(
            id=relay_id,
            reported_status=RelayStatus.parse(payload["reported_status"]),
            mode=RelayMode.parse(payload["mode"]),
            manual_since=payload.get("manual_since"),
            updated_at=payload.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "reported_status": self.reported_status.value,
            "mode": self.mode.value,
            "manual_since": self.manual_since,
            "updated_at": self.updated_at,
        }


def isoformat(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime:
    """Parse an upstream timestamp into an aware UTC datetime.

    Strings are ISO-8601 (a trailing ``Z`` is accepted, naive values are
    taken as UTC); numbers are epoch milliseconds.
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, bool):
        raise RecordFormatError(f"Invalid timestamp {value!r}")
    elif isinstance(value, (int, float)):
        try:
            ts = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise RecordFormatError(f"Invalid timestamp {value!r}") from None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError:
            raise RecordFormatError(f"Invalid timestamp {value!r}") from None
    else:
        raise RecordFormatError(f"Invalid timestamp {value!r}")
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _first_present(raw: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def normalize_reading(raw: Any, value_keys: Sequence[str] = ("value",)) -> SensorReading:
    """Map one upstream record to a :class:`SensorReading`.

    The timestamp comes from ``time`` or ``created_at`` and the value from
    the first of ``value_keys`` that is present. A record carrying neither
    raises :class:`RecordFormatError`.
    """
    if not isinstance(raw, dict):
        raise RecordFormatError(f"Reading must be an object, got {type(raw).__name__}")
    raw_time = _first_present(raw, TIME_KEYS)
    if raw_time is None:
        raise RecordFormatError(f"Reading has no {' or '.join(TIME_KEYS)} field: {raw!r}")
    raw_value = _first_present(raw, value_keys)
    if raw_value is None or isinstance(raw_value, bool):
        raise RecordFormatError(f"Reading has no {' or '.join(value_keys)} field: {raw!r}")
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        raise RecordFormatError(f"Reading value is not numeric: {raw_value!r}") from None
    return SensorReading(time=parse_timestamp(raw_time), value=value)


def normalize_readings(payload: Any, value_keys: Sequence[str] = ("value",)) -> List[SensorReading]:
    if not isinstance(payload, list):
        raise RecordFormatError(f"Expected a list of readings, got {type(payload).__name__}")
    return [normalize_reading(item, value_keys) for item in payload]


def normalize_temperature(payload: Any) -> List[SensorReading]:
    return normalize_readings(payload, TEMPERATURE_KEYS)


def normalize_humidity(payload: Any) -> List[SensorReading]:
    return normalize_readings(payload, HUMIDITY_KEYS)
