"""Reinterpreting naive wall-clock values inside a detected timezone.

Conversion never raises: `localize` returns a `ZoneConversion` that either carries the converted
instant or the failure reason, with the naive value kept in the reference zone as the fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.scheduling.schema import ManualOffset, NamedZone, TimezoneInfo, TimezoneSpec


@dataclass(frozen=True)
class ZoneConversion:
    """Result of placing a naive value into a zone."""

    instant: datetime
    info: TimezoneInfo | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def format_offset(minutes: int) -> str:
    """Format signed minutes as "+5:30" / "-7" (hours unpadded, minutes only when non-zero)."""

    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours}:{mins:02d}" if mins else f"{sign}{hours}"


def tzinfo_for(spec: TimezoneSpec | None) -> tzinfo | None:
    """Map a spec to a `tzinfo`, or `None` when the spec is absent or names an unknown zone."""

    if isinstance(spec, ManualOffset):
        return timezone(timedelta(minutes=spec.minutes))
    if isinstance(spec, NamedZone):
        try:
            return ZoneInfo(spec.id)
        except (ZoneInfoNotFoundError, ValueError):
            return None
    return None


def local_now(now: datetime, spec: TimezoneSpec | None) -> datetime:
    """Express `now` on the wall clock of the detected zone (reference zone as fallback)."""

    tz = tzinfo_for(spec)
    return now.astimezone(tz) if tz is not None else now


def _manual_offset_info(spec: ManualOffset, naive: datetime) -> TimezoneInfo:
    offset_str = format_offset(spec.minutes)
    hours = abs(spec.minutes) / 60
    return TimezoneInfo(
        timezone=f"UTC{offset_str}",
        offset=spec.minutes,
        offset_name=f"UTC{'+' if spec.minutes >= 0 else '-'}{hours:g}",
        zone_name="Manual Offset",
        is_manual_offset=True,
        original_time_in_timezone=f"{naive.hour}:{naive.minute:02d} UTC{offset_str}",
    )


def _named_zone_info(spec: NamedZone, aware: datetime) -> TimezoneInfo:
    utc_offset = aware.utcoffset() or timedelta(0)
    return TimezoneInfo(
        timezone=spec.id,
        offset=int(utc_offset.total_seconds() // 60),
        offset_name=aware.tzname() or spec.id,
        zone_name=spec.id,
        is_manual_offset=False,
    )


def localize(naive: datetime, spec: TimezoneSpec | None, *, reference_tz: tzinfo) -> ZoneConversion:
    """Interpret naive wall-clock components inside `spec`.

    Without a spec the value is placed in the reference zone. An unknown named zone yields a
    failed conversion whose instant is the same reference-zone fallback.
    """

    if naive.tzinfo is not None:
        naive = naive.replace(tzinfo=None)
    fallback = naive.replace(tzinfo=reference_tz)

    if spec is None:
        return ZoneConversion(instant=fallback)

    tz = tzinfo_for(spec)
    if tz is None:
        return ZoneConversion(instant=fallback, error=f"unknown timezone {spec.label()!r}")

    aware = naive.replace(tzinfo=tz)
    if isinstance(spec, ManualOffset):
        return ZoneConversion(instant=aware, info=_manual_offset_info(spec, naive))
    return ZoneConversion(instant=aware, info=_named_zone_info(spec, aware))
