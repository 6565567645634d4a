"""Wire-format assembly for resolution outcomes.

The JSON shape keeps the legacy top-level fields (`unix_timestamp`, `readable_date`, ...) next to
the structured ones so existing chat front ends keep working.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from src.scheduling.normalize import MONTH_NAMES
from src.scheduling.schema import (
    ManualOffset,
    NamedZone,
    ResolvedInstant,
    Resolution,
    ResolutionKind,
)

EXAMPLE_QUERY = "/parse?text=tomorrow at 3pm bangladesh time"


def iso_utc(value: datetime) -> str:
    """`2026-10-19T09:00:00.000Z` style UTC timestamp."""

    utc = value.astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def _clock(value: datetime, *, seconds: bool) -> str:
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    if seconds:
        return f"{hour}:{value.minute:02d}:{value.second:02d} {meridiem}"
    return f"{hour}:{value.minute:02d} {meridiem}"


def readable(value: datetime) -> str:
    """`10/19/2026, 3:00:00 PM` on the instant's own wall clock."""

    return f"{value.month}/{value.day}/{value.year}, {_clock(value, seconds=True)}"


def full_local(value: datetime) -> str:
    """`October 19, 2026 at 3:00 PM +06` on the instant's own wall clock."""

    date_part = f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"
    return f"{date_part} at {_clock(value, seconds=False)} {value.tzname() or ''}".rstrip()


def time_fields(resolved: ResolvedInstant) -> dict[str, Any]:
    return {
        "unix_timestamp": resolved.epoch_seconds,
        "readable_date": readable(resolved.instant),
        "iso_date": iso_utc(resolved.instant),
        "utc_time": iso_utc(resolved.instant),
    }


def _timezone_info(resolved: ResolvedInstant) -> dict[str, Any] | None:
    if resolved.timezone_info is None:
        return None
    return resolved.timezone_info.model_dump(by_alias=True, exclude_none=True)


def missing_text_response() -> dict[str, Any]:
    return {"error": "Missing text parameter", "example": EXAMPLE_QUERY}


def build_response(resolution: Resolution) -> dict[str, Any]:
    """Shape a `Resolution` into the `/parse` JSON document."""

    if resolution.kind == ResolutionKind.not_relevant:
        return {
            "original_text": resolution.original_text,
            "found_dates": False,
            "is_scheduling_relevant": False,
            "message": "Text does not contain a time indication",
        }

    detected = resolution.timezone.label() if resolution.timezone is not None else None
    body: dict[str, Any] = {
        "original_text": resolution.original_text,
        "found_dates": resolution.found_dates,
        "is_scheduling_relevant": True,
        "is_range": resolution.kind in {ResolutionKind.range, ResolutionKind.date_range_series},
        "is_multiple_times": resolution.is_series,
        "detected_timezone": detected,
    }

    if resolution.kind == ResolutionKind.no_dates:
        body["message"] = "No dates found in the text"
        return body

    if resolution.is_series:
        first = resolution.series[0].instant
        body["timezone_info"] = _timezone_info(first)
        body["multiple_times"] = [
            {"day": entry.label, **time_fields(entry.instant)} for entry in resolution.series
        ]
        body.update(time_fields(first))
        noun = "recurring times" if resolution.kind == ResolutionKind.weekday_series else "dates in range"
        body["message"] = f"Found {len(resolution.series)} {noun}"
        return body

    if resolution.range is None:
        raise ValueError(f"{resolution.kind} outcome without a range result")
    start, end = resolution.range.start, resolution.range.end
    body["timezone_info"] = _timezone_info(start)
    body["start_time"] = time_fields(start)
    body.update(time_fields(start))
    body["local_time_in_timezone"] = None

    if end is not None:
        body["end_time"] = time_fields(end)
        duration_ms = int((end.instant - start.instant).total_seconds() * 1000)
        body["duration"] = {
            "milliseconds": duration_ms,
            "seconds": duration_ms // 1000,
            "minutes": duration_ms // (1000 * 60),
            "hours": duration_ms // (1000 * 60 * 60),
        }

    info = start.timezone_info
    if info is not None:
        if isinstance(start.timezone, ManualOffset):
            body["local_time_in_timezone"] = info.original_time_in_timezone
            body["equivalent_utc"] = iso_utc(start.instant)
        elif isinstance(start.timezone, NamedZone):
            body["local_time_in_timezone"] = full_local(start.instant)
            if end is not None:
                body["end_local_time_in_timezone"] = full_local(end.instant)

    if resolution.raw_parse_result is not None:
        body["raw_parse_result"] = resolution.raw_parse_result.model_dump(mode="json")
    return body
