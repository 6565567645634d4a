"""Future policy: resolved instants are never presented as already elapsed.

The branches form a priority cascade. Explicit keywords ("tomorrow", "today") always win over the
generic lateness heuristics, and range ends are only ever moved relative to their start.

All calendar arithmetic happens on the wall clock of the instant's own zone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

WEEKDAY_NAMES: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

_TOMORROW_RE = re.compile(r"\btomorrow\b", flags=re.IGNORECASE)
_TODAY_RE = re.compile(r"\btoday\b", flags=re.IGNORECASE)
_WEEKDAY_RE = re.compile(rf"\b(?:{'|'.join(WEEKDAY_NAMES)})\b", flags=re.IGNORECASE)
_BARE_TIME_RE = re.compile(
    r"^\s*(?:at\s+)?(?:\d{1,2}(?::\d{2})?\s*(?:am|pm)?|noon|midnight)\s*$",
    flags=re.IGNORECASE,
)


@dataclass(frozen=True)
class Adjusted:
    """An instant after the policy ran, plus whether it was moved."""

    instant: datetime
    changed: bool


def _on_date(instant: datetime, day: date) -> datetime:
    return instant.replace(year=day.year, month=day.month, day=day.day)


def _shift_days(instant: datetime, days: int) -> datetime:
    # Wall-clock shift: keeps the time of day stable across DST changes.
    return _on_date(instant, instant.date() + timedelta(days=days))


def is_bare_time(text: str) -> bool:
    """Whether the text is only a time of day ("3pm", "at 10:30", "noon")."""

    return bool(_BARE_TIME_RE.match(text or ""))


def mentions_weekday(text: str) -> bool:
    return bool(_WEEKDAY_RE.search(text or ""))


def ensure_future(
        instant: datetime,
        text: str,
        *,
        now: datetime,
        is_end_of_range: bool = False,
        start: datetime | None = None,
) -> Adjusted:
    """Apply the future policy to one instant.

    Args:
        instant: Timezone-aware candidate.
        text: The phrase the candidate was read from.
        now: The request instant.
        is_end_of_range: Whether the candidate is the end of a range.
        start: The already-resolved start instant (range ends only).
    """

    today = now.astimezone(instant.tzinfo).date()

    if is_end_of_range and start is not None:
        result = instant
        while result <= start:
            result = _shift_days(result, 1)
        while result < now:
            result = _shift_days(result, 1)
        return Adjusted(instant=result, changed=result != instant)

    if _TOMORROW_RE.search(text):
        result = _on_date(instant, today + timedelta(days=1))
        return Adjusted(instant=result, changed=result != instant)

    if _TODAY_RE.search(text):
        result = _on_date(instant, today)
        if result < now:
            result = _shift_days(result, 1)
        return Adjusted(instant=result, changed=result != instant)

    if instant >= now:
        return Adjusted(instant=instant, changed=False)

    if mentions_weekday(text):
        return Adjusted(instant=_shift_days(instant, 7), changed=True)

    if is_bare_time(text):
        result = _on_date(instant, today)
        if result < now:
            result = _shift_days(result, 1)
        return Adjusted(instant=result, changed=result != instant)

    return Adjusted(instant=_shift_days(instant, 1), changed=True)


def add_months(day: date, months: int) -> date | None:
    """Move a calendar day forward by whole months, or `None` if the day does not exist there."""

    index = day.month - 1 + months
    year, month = day.year + index // 12, index % 12 + 1
    try:
        return day.replace(year=year, month=month)
    except ValueError:
        return None
