"""Tests for reinterpreting naive values inside detected zones."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from src.scheduling.schema import ManualOffset, NamedZone
from src.scheduling.zones import format_offset, local_now, localize, tzinfo_for

NAIVE = datetime(2026, 10, 15, 15, 0)


def test_format_offset() -> None:
    assert format_offset(330) == "+5:30"
    assert format_offset(-420) == "-7"
    assert format_offset(0) == "+0"
    assert format_offset(-570) == "-9:30"


def test_manual_offset_reinterprets_wall_clock() -> None:
    conversion = localize(NAIVE, ManualOffset(minutes=330), reference_tz=UTC)

    assert conversion.ok
    assert conversion.instant.astimezone(UTC) == datetime(2026, 10, 15, 9, 30, tzinfo=UTC)
    assert conversion.info is not None
    assert conversion.info.timezone == "UTC+5:30"
    assert conversion.info.offset == 330
    assert conversion.info.offset_name == "UTC+5.5"
    assert conversion.info.zone_name == "Manual Offset"
    assert conversion.info.is_manual_offset
    assert conversion.info.original_time_in_timezone == "15:00 UTC+5:30"


def test_named_zone_uses_zone_rules() -> None:
    conversion = localize(NAIVE, NamedZone(id="Asia/Dhaka"), reference_tz=UTC)

    assert conversion.ok
    assert conversion.instant.utcoffset() == timedelta(hours=6)
    assert conversion.instant.hour == 15
    assert conversion.info is not None
    assert conversion.info.offset == 360
    assert conversion.info.zone_name == "Asia/Dhaka"
    assert not conversion.info.is_manual_offset


def test_unknown_zone_falls_back_to_reference_zone() -> None:
    conversion = localize(NAIVE, NamedZone(id="Mars/Olympus_Mons"), reference_tz=UTC)

    assert not conversion.ok
    assert conversion.error is not None
    assert conversion.instant == NAIVE.replace(tzinfo=UTC)
    assert conversion.info is None


def test_no_zone_uses_reference_zone() -> None:
    conversion = localize(NAIVE, None, reference_tz=UTC)

    assert conversion.ok
    assert conversion.instant == NAIVE.replace(tzinfo=UTC)
    assert conversion.info is None


def test_aware_input_is_treated_as_wall_clock() -> None:
    aware = NAIVE.replace(tzinfo=UTC)
    conversion = localize(aware, ManualOffset(minutes=-60), reference_tz=UTC)
    assert conversion.instant.astimezone(UTC).hour == 16


def test_local_now_follows_detected_zone(now: datetime) -> None:
    assert local_now(now, NamedZone(id="Asia/Tokyo")).hour == 21
    assert local_now(now, None) == now
    assert local_now(now, NamedZone(id="Nowhere/Zone")) == now


def test_tzinfo_for_unknown_zone_is_none() -> None:
    assert tzinfo_for(NamedZone(id="Nowhere/Zone")) is None
    assert tzinfo_for(None) is None


def test_timezone_info_serializes_with_camel_case_aliases() -> None:
    conversion = localize(NAIVE, ManualOffset(minutes=60), reference_tz=UTC)
    assert conversion.info is not None
    dumped = conversion.info.model_dump(by_alias=True)
    assert dumped["isManualOffset"] is True
    assert dumped["offsetName"] == "UTC+1"
    assert dumped["originalTimeInTimezone"] == "15:00 UTC+1"
