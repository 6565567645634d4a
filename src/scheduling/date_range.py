"""Calendar-day range expansion ("15th to 20th at 10pm").

Produces one instant per day of a numeric span in the current month. When any day of the span
has already passed, the whole span moves to the next month so the series stays chronological and
in the future.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, tzinfo

from src.scheduling.future import add_months
from src.scheduling.schema import ResolvedInstant, SeriesEntry, TimezoneSpec
from src.scheduling.weekdays import parse_twelve_hour_time
from src.scheduling.zones import ZoneConversion, local_now, localize

logger = logging.getLogger(__name__)

_DATE_RANGE_RE = re.compile(
    r"\b(?P<start>\d{1,2})(?:st|nd|rd|th)?\s+to\s+(?P<end>\d{1,2})(?:st|nd|rd|th)?\s+at\s+"
    r"(?P<time>\d{1,2}(?::\d{2})?\s*(?:am|pm))\b",
    flags=re.IGNORECASE,
)


def match_day_span(text: str) -> tuple[int, int, time] | None:
    """Return `(start_day, end_day, time)` for "<day> to <day> at <time>" phrasing."""

    match = _DATE_RANGE_RE.search(text)
    if not match:
        return None

    start, end = int(match.group("start")), int(match.group("end"))
    if not (1 <= start <= end <= 31):
        return None

    at = parse_twelve_hour_time(match.group("time"))
    if at is None:
        return None
    return start, end, at


def _span_dates(anchor: date, start: int, end: int) -> list[date]:
    days: list[date] = []
    for day in range(start, end + 1):
        try:
            days.append(anchor.replace(day=day))
        except ValueError:
            logger.info("skipping day=%d: not in %s", day, anchor.strftime("%Y-%m"))
    return days


def _localize_span(
        month_start: date,
        start: int,
        end: int,
        at: time,
        timezone: TimezoneSpec | None,
        reference_tz: tzinfo,
) -> list[tuple[date, ZoneConversion]]:
    return [
        (day, localize(datetime.combine(day, at), timezone, reference_tz=reference_tz))
        for day in _span_dates(month_start, start, end)
    ]


def expand_date_range(
        text: str,
        *,
        now: datetime,
        timezone: TimezoneSpec | None,
) -> list[SeriesEntry] | None:
    """Expand a day-number span into one instant per day, or `None` if it does not apply."""

    span = match_day_span(text)
    if span is None:
        return None
    start, end, at = span

    reference_tz: tzinfo = now.tzinfo  # type: ignore[assignment]
    month_start = local_now(now, timezone).date().replace(day=1)

    candidates = _localize_span(month_start, start, end, at, timezone, reference_tz)
    rolled = not candidates or any(conv.instant < now for _, conv in candidates)
    if rolled:
        next_month_start = add_months(month_start, 1) or month_start
        candidates = _localize_span(next_month_start, start, end, at, timezone, reference_tz)

    entries: list[SeriesEntry] = []
    for day, conversion in candidates:
        if not conversion.ok:
            logger.warning("timezone conversion failed: %s", conversion.error)
        entries.append(
            SeriesEntry(
                label=day.day,
                instant=ResolvedInstant(
                    instant=conversion.instant,
                    timezone=timezone,
                    timezone_info=conversion.info,
                    was_adjusted_to_future=rolled,
                ),
            )
        )
    return entries or None
