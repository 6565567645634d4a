"""Weekday-range expansion ("monday 10pm to thursday 10pm").

Produces one instant per weekday in the cyclic span from the start weekday to the end weekday
(inclusive), each anchored to the next occurrence of that weekday after "now".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo

from src.scheduling.future import WEEKDAY_NAMES
from src.scheduling.schema import ResolvedInstant, SeriesEntry, TimezoneSpec
from src.scheduling.zones import local_now, localize

logger = logging.getLogger(__name__)

MAX_SPAN_DAYS = 7

_WEEKDAY_INDEX: dict[str, int] = {name: idx for idx, name in enumerate(WEEKDAY_NAMES)}
_WEEKDAY_GROUP = "|".join(WEEKDAY_NAMES)

_WEEKDAY_RANGE_RE = re.compile(
    rf"\b(?P<start>{_WEEKDAY_GROUP})\s+.*?\bto\s+(?P<end>{_WEEKDAY_GROUP})\b",
    flags=re.IGNORECASE,
)
TWELVE_HOUR_RE = re.compile(
    r"\b(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<meridiem>am|pm)\b",
    flags=re.IGNORECASE,
)


@dataclass(frozen=True)
class WeekdaySpan:
    start: int
    end: int
    at: time


def parse_twelve_hour_time(text: str) -> time | None:
    """Extract the first 12-hour time token ("10pm", "9:30 am") as a 24-hour `time`."""

    match = TWELVE_HOUR_RE.search(text)
    if not match:
        return None

    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    if not 1 <= hour <= 12 or minute > 59:
        return None

    meridiem = match.group("meridiem").lower()
    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return time(hour, minute)


def match_weekday_span(text: str) -> WeekdaySpan | None:
    match = _WEEKDAY_RANGE_RE.search(text)
    if not match:
        return None
    at = parse_twelve_hour_time(text)
    if at is None:
        return None
    return WeekdaySpan(
        start=_WEEKDAY_INDEX[match.group("start").lower()],
        end=_WEEKDAY_INDEX[match.group("end").lower()],
        at=at,
    )


def walk_weekdays(start: int, end: int) -> list[int]:
    """Weekday indices (Sunday=0) from start to end inclusive, wrapping past Saturday.

    Identical start and end yield a single day; the walk never exceeds seven entries.
    """

    days = [start]
    current = start
    while current != end and len(days) < MAX_SPAN_DAYS:
        current = (current + 1) % 7
        days.append(current)
    return days


def _python_to_sunday_first(weekday: int) -> int:
    # datetime.weekday(): Monday=0 .. Sunday=6
    return (weekday + 1) % 7


def expand_weekday_range(
        text: str,
        *,
        now: datetime,
        timezone: TimezoneSpec | None,
) -> list[SeriesEntry] | None:
    """Expand weekday-range phrasing into one instant per weekday, or `None` if it does not apply."""

    span = match_weekday_span(text)
    if span is None:
        return None

    reference_tz: tzinfo = now.tzinfo  # type: ignore[assignment]
    today = local_now(now, timezone)
    current_weekday = _python_to_sunday_first(today.weekday())

    entries: list[SeriesEntry] = []
    for day in walk_weekdays(span.start, span.end):
        days_until = day - current_weekday
        if days_until <= 0:
            days_until += 7

        target = datetime.combine(today.date() + timedelta(days=days_until), span.at)
        conversion = localize(target, timezone, reference_tz=reference_tz)
        if not conversion.ok:
            logger.warning("timezone conversion failed: %s", conversion.error)

        entries.append(
            SeriesEntry(
                label=WEEKDAY_NAMES[day],
                instant=ResolvedInstant(
                    instant=conversion.instant,
                    timezone=timezone,
                    timezone_info=conversion.info,
                ),
            )
        )
    return entries
