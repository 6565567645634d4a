"""Text normalization for deterministic phrase matching.

Day-number + time-of-day phrasing is rewritten into the canonical form
`<time> on <day><suffix> of <Month>` so downstream matchers see one shape. The month always comes
from the request instant, never from the text.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_TIME = r"\d{1,2}(?::\d{2})?\s*(?:am|pm)"
_SUFFIX = r"(?:st|nd|rd|th)"
_MONTH_WORDS = "|".join(
    [m.lower() for m in MONTH_NAMES] + ["jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep",
                                        "sept", "oct", "nov", "dec"]
)
# The day is already anchored to a month: "15th of ...", "15 october".
_NOT_ANCHORED = rf"(?!\s+(?:of\b|(?:{_MONTH_WORDS})\b))"


def ordinal_suffix(day: int) -> str:
    """Return the English ordinal suffix for a day number (1 -> "st", 11 -> "th")."""

    if day % 100 in {11, 12, 13}:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _day_phrase(day: str, month: str) -> str | None:
    value = int(day)
    if not 1 <= value <= 31:
        return None
    return f"{value}{ordinal_suffix(value)} of {month}"


@dataclass(frozen=True)
class NormalizationRule:
    """A single rewrite: a pattern plus a builder producing the canonical replacement."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], str], str | None]

    def apply(self, text: str, month: str) -> str:
        def _replace(match: re.Match[str]) -> str:
            replacement = self.build(match, month)
            return match.group(0) if replacement is None else replacement

        return self.pattern.sub(_replace, text)


def _time_on_day(match: re.Match[str], month: str) -> str | None:
    day = _day_phrase(match.group("day"), month)
    return None if day is None else f"{match.group('time')} on {day}"


_OFFSET_PREFIX_RE = re.compile(r"\b(?:utc|gmt)\s*$", flags=re.IGNORECASE)
_MONTH_PREFIX_RE = re.compile(rf"\b(?:{_MONTH_WORDS})\.?\s*$", flags=re.IGNORECASE)


def _day_then_time(match: re.Match[str], month: str) -> str | None:
    # "utc 5 10pm": the number is an offset, not a day.
    if _OFFSET_PREFIX_RE.search(match.string, 0, match.start()):
        return None
    # "november 15 3pm": the day already belongs to an explicit month.
    if _MONTH_PREFIX_RE.search(match.string, 0, match.start()):
        return None
    day = _day_phrase(match.group("day"), month)
    return None if day is None else f"{match.group('time')} on {day}"


def _at_time_on_day(match: re.Match[str], month: str) -> str | None:
    day = _day_phrase(match.group("day"), month)
    return None if day is None else f"at {match.group('time')} on {day}"


NORMALIZATION_RULES: tuple[NormalizationRule, ...] = (
    # "10pm on 15" -> "10pm on 15th of October"
    NormalizationRule(
        name="time_on_day",
        pattern=re.compile(
            rf"\b(?P<time>{_TIME})\s+on\s+(?P<day>\d{{1,2}}){_SUFFIX}?\b{_NOT_ANCHORED}",
            flags=re.IGNORECASE,
        ),
        build=_time_on_day,
    ),
    # "15th 10pm" -> "10pm on 15th of October"
    NormalizationRule(
        name="day_then_time",
        pattern=re.compile(
            rf"(?<![\w:+\-])(?P<day>\d{{1,2}}){_SUFFIX}?\s+(?P<time>{_TIME})\b",
            flags=re.IGNORECASE,
        ),
        build=_day_then_time,
    ),
    # "10pm 15th" -> "10pm on 15th of October"
    NormalizationRule(
        name="time_then_day",
        pattern=re.compile(
            rf"\b(?P<time>{_TIME})\s+(?P<day>\d{{1,2}}){_SUFFIX}\b{_NOT_ANCHORED}",
            flags=re.IGNORECASE,
        ),
        build=_time_on_day,
    ),
    # "at 10pm on 15" -> "at 10pm on 15th of October"
    NormalizationRule(
        name="at_time_on_day",
        pattern=re.compile(
            rf"\bat\s+(?P<time>{_TIME})\s+on\s+(?P<day>\d{{1,2}}){_SUFFIX}?\b{_NOT_ANCHORED}",
            flags=re.IGNORECASE,
        ),
        build=_at_time_on_day,
    ),
)


def normalize_text(text: str, now: datetime) -> str:
    """Rewrite day/time adjacency phrasing into the canonical `<time> on <Nth> of <Month>` form.

    Rules run in order over the same text, each seeing the output of the previous one.
    Already-canonical text is left unchanged.
    """

    value = (text or "").strip()
    month = MONTH_NAMES[now.month - 1]
    for rule in NORMALIZATION_RULES:
        value = rule.apply(value, month)
    return value
