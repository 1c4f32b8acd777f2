import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from datetime import datetime, timezone

import pytest

from sensorboard.core.models import (
    Range,
    RecordFormatError,
    RelayMode,
    RelayState,
    RelayStatus,
    normalize_humidity,
    normalize_reading,
    normalize_temperature,
    parse_timestamp,
)


def test_temperature_accepts_time_or_created_at():
    readings = normalize_temperature([
        {"time": "2024-05-01T10:00:00Z", "value": 25},
        {"created_at": "2024-05-01T10:05:00Z", "degrees": "26.5"},
    ])
    assert [r.value for r in readings] == [25.0, 26.5]
    assert readings[0].time == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert readings[1].time == datetime(2024, 5, 1, 10, 5, tzinfo=timezone.utc)


def test_humidity_reads_percent_field():
    readings = normalize_humidity([{"time": "2024-05-01T10:00:00Z", "percent": 61}])
    assert readings[0].value == 61.0


def test_value_takes_precedence_over_alias():
    reading = normalize_reading({"time": "2024-05-01T10:00:00Z", "value": 1, "degrees": 2}, ("value", "degrees"))
    assert reading.value == 1.0


def test_missing_timestamp_fails_loudly():
    with pytest.raises(RecordFormatError):
        normalize_temperature([{"value": 25}])


def test_missing_value_fails_loudly():
    with pytest.raises(RecordFormatError):
        normalize_humidity([{"time": "2024-05-01T10:00:00Z", "degrees": 25}])


def test_non_numeric_value_rejected():
    with pytest.raises(RecordFormatError):
        normalize_temperature([{"time": "2024-05-01T10:00:00Z", "value": "warm"}])


def test_non_list_payload_rejected():
    with pytest.raises(RecordFormatError):
        normalize_temperature({"error": "Failed to fetch celcius"})


def test_parse_timestamp_variants():
    utc = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert parse_timestamp("2024-05-01T10:00:00") == utc
    assert parse_timestamp("2024-05-01T17:00:00+07:00") == utc
    assert parse_timestamp(int(utc.timestamp() * 1000)) == utc
    with pytest.raises(RecordFormatError):
        parse_timestamp("yesterday")
    with pytest.raises(RecordFormatError):
        parse_timestamp(True)


def test_out_of_range_epoch_rejected():
    with pytest.raises(RecordFormatError):
        normalize_temperature([{"time": 1e20, "value": 1}])
    with pytest.raises(RecordFormatError):
        normalize_temperature([{"time": float("nan"), "value": 1}])


def test_relay_state_from_payload():
    state = RelayState.from_payload({
        "id": 1,
        "reported_status": "ON",
        "mode": "AUTO",
        "manual_since": None,
        "updated_at": "2024-05-01T10:00:00Z",
    })
    assert state.mode is RelayMode.AUTOMATIC
    assert state.reported_status is RelayStatus.ON
    assert state.to_dict()["mode"] == "AUTO"
    assert RelayState.from_payload({"mode": "automatic", "reported_status": "off"}).mode is RelayMode.AUTOMATIC


def test_relay_state_requires_mode_and_status():
    with pytest.raises(RecordFormatError):
        RelayState.from_payload({"id": 1, "reported_status": "ON"})
    with pytest.raises(RecordFormatError):
        RelayState.from_payload({"id": 1, "mode": "MANUAL"})
    with pytest.raises(RecordFormatError):
        RelayState.from_payload({"mode": "SOMETIMES", "reported_status": "ON"})


def test_relay_state_rejects_non_numeric_id():
    with pytest.raises(RecordFormatError):
        RelayState.from_payload({"id": "relay-1", "mode": "MANUAL", "reported_status": "ON"})
    assert RelayState.from_payload({"id": "7", "mode": "MANUAL", "reported_status": "ON"}).id == 7


def test_toggles_flip_between_two_values():
    assert RelayMode.AUTOMATIC.toggled() is RelayMode.MANUAL
    assert RelayMode.MANUAL.toggled() is RelayMode.AUTOMATIC
    assert RelayStatus.ON.toggled() is RelayStatus.OFF
    assert RelayStatus.OFF.toggled() is RelayStatus.ON


def test_range_parse():
    assert Range.parse("Weekly") is Range.WEEKLY
    with pytest.raises(ValueError):
        Range.parse("yearly")
