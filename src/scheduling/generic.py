"""Generic phrase resolution through an external date/time parser.

The parser is a black box returning structured date components. The default backend is
`dateparser`; any object implementing `GenericParser` can be injected instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Protocol

from dateparser.search import search_dates

from src.scheduling.future import ensure_future, is_bare_time
from src.scheduling.schema import (
    ComponentValues,
    RangeResult,
    RawParseResult,
    ResolvedInstant,
    TimezoneSpec,
)
from src.scheduling.weekdays import TWELVE_HOUR_RE, parse_twelve_hour_time
from src.scheduling.zones import local_now, localize

logger = logging.getLogger(__name__)

COMPONENT_FIELDS: tuple[str, ...] = ("year", "month", "day", "hour", "minute", "second")

_DATEPARSER_SETTINGS: dict[str, object] = {
    "PREFER_DATES_FROM": "future",
    "RETURN_AS_TIMEZONE_AWARE": False,
}

_RANGE_SPLIT_RE = re.compile(
    r"^(?:.*?\bfrom\s+)?(?P<start>.+?)\s+(?:to|until|till|through|-|–)\s+(?P<end>.+)$",
    flags=re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedComponent:
    """One side (start or end) of a parse result."""

    naive: datetime
    values: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_datetime(cls, value: datetime) -> ParsedComponent:
        naive = value.replace(tzinfo=None)
        return cls(naive=naive, values={name: getattr(naive, name) for name in COMPONENT_FIELDS})

    def get(self, name: str) -> int | None:
        return self.values.get(name)

    def date(self) -> datetime:
        return self.naive

    def to_values(self) -> ComponentValues:
        return ComponentValues(date=self.naive, **{name: self.get(name) for name in COMPONENT_FIELDS})


@dataclass(frozen=True)
class ParsedResult:
    """A matched fragment of text with its start and optional end components."""

    text: str
    start: ParsedComponent
    end: ParsedComponent | None = None

    def to_raw(self) -> RawParseResult:
        return RawParseResult(
            text=self.text,
            start=self.start.to_values(),
            end=self.end.to_values() if self.end is not None else None,
        )


class GenericParser(Protocol):
    """Contract of the external natural-language date/time parser."""

    def parse(self, text: str, *, relative_base: datetime) -> list[ParsedResult]:
        ...


def canonical_clock_times(text: str) -> str:
    """Spell whole-hour 12-hour times with minutes ("9am" -> "9:00am").

    `search_dates` reads a bare "9am" as the month September at midnight; "9:00am" is a time.
    """

    def _replace(match: re.Match[str]) -> str:
        if match.group("minute") is not None:
            return match.group(0)
        return f"{match.group('hour')}:00{match.group('meridiem')}"

    return TWELVE_HOUR_RE.sub(_replace, text)


def _keep_clock_time(
        found: tuple[str, datetime],
        clock: tuple[str, datetime] | None,
) -> tuple[str, datetime]:
    """Graft the phrase's clock time onto a match that covered only the day ("tomorrow")."""

    matched, value = found
    if clock is None or TWELVE_HOUR_RE.search(matched) is not None:
        return found
    return matched, datetime.combine(value.date(), clock[1].time())


class DateparserBackend:
    """`GenericParser` backed by `dateparser.search.search_dates` (English only)."""

    def __init__(self, languages: tuple[str, ...] = ("en",)) -> None:
        self._languages = list(languages)

    def _search(self, text: str, relative_base: datetime) -> list[tuple[str, datetime]]:
        settings = {**_DATEPARSER_SETTINGS, "RELATIVE_BASE": relative_base}
        found = search_dates(
            canonical_clock_times(text),
            languages=self._languages,
            settings=settings,
        )
        return found or []

    @staticmethod
    def _clock_time(text: str, relative_base: datetime) -> tuple[str, datetime] | None:
        # dateparser finds nothing in a lone "3pm"; read it on the relative base's date.
        match = TWELVE_HOUR_RE.search(text)
        at = parse_twelve_hour_time(text)
        if match is None or at is None:
            return None
        return match.group(0), datetime.combine(relative_base.date(), at)

    def _parse_side(self, text: str, relative_base: datetime) -> tuple[str, datetime] | None:
        clock = self._clock_time(text, relative_base)
        if clock is not None and is_bare_time(text):
            return clock

        found = self._search(text, relative_base)
        if not found:
            return clock
        return _keep_clock_time(found[0], clock)

    def _parse_range(self, text: str, relative_base: datetime) -> ParsedResult | None:
        match = _RANGE_SPLIT_RE.match(text.strip())
        if not match:
            return None

        left = self._parse_side(match.group("start"), relative_base)
        right = self._parse_side(match.group("end"), relative_base)
        if left is None or right is None:
            return None

        (start_text, start_dt), (end_text, end_dt) = left, right
        # A bare-time side takes its calendar date from the other side ("3pm to 5pm tomorrow").
        if is_bare_time(end_text) and not is_bare_time(start_text):
            end_dt = datetime.combine(start_dt.date(), end_dt.time())
        elif is_bare_time(start_text) and not is_bare_time(end_text):
            start_dt = datetime.combine(end_dt.date(), start_dt.time())

        return ParsedResult(
            text=f"{start_text} to {end_text}",
            start=ParsedComponent.from_datetime(start_dt),
            end=ParsedComponent.from_datetime(end_dt),
        )

    def parse(self, text: str, *, relative_base: datetime) -> list[ParsedResult]:
        ranged = self._parse_range(text, relative_base)
        if ranged is not None:
            return [ranged]

        found = self._search(text, relative_base)
        clock = self._clock_time(text, relative_base)
        if not found:
            found = [clock] if clock is not None else []
        else:
            found[0] = _keep_clock_time(found[0], clock)
        return [
            ParsedResult(text=matched, start=ParsedComponent.from_datetime(value))
            for matched, value in found
        ]


def _naive_from_components(component: ParsedComponent) -> datetime:
    """Rebuild the wall-clock value from the extracted components (the date's own zone is ignored)."""

    year, month, day = component.get("year"), component.get("month"), component.get("day")
    if year is None or month is None or day is None:
        return component.date().replace(tzinfo=None)
    try:
        return datetime(
            year,
            month,
            day,
            component.get("hour") or 0,
            component.get("minute") or 0,
            component.get("second") or 0,
        )
    except ValueError:
        return component.date().replace(tzinfo=None)


def mask_span(text: str, start: int, end: int) -> str:
    """Blank out `text[start:end]` so the external parser never sees the timezone phrase."""

    return f"{text[:start]} {text[end:]}".strip()


@dataclass(frozen=True)
class GenericResolution:
    range: RangeResult
    raw: ParsedResult


class GenericResolver:
    """Resolve phrasing that no specialized expander recognized."""

    def __init__(self, parser: GenericParser) -> None:
        self._parser = parser

    def _resolve_component(
            self,
            component: ParsedComponent,
            *,
            text: str,
            now: datetime,
            timezone: TimezoneSpec | None,
            start: datetime | None = None,
    ) -> ResolvedInstant:
        reference_tz: tzinfo = now.tzinfo  # type: ignore[assignment]
        conversion = localize(_naive_from_components(component), timezone, reference_tz=reference_tz)
        if not conversion.ok:
            logger.warning("timezone conversion failed: %s", conversion.error)

        adjusted = ensure_future(
            conversion.instant,
            text,
            now=now,
            is_end_of_range=start is not None,
            start=start,
        )
        return ResolvedInstant(
            instant=adjusted.instant,
            timezone=timezone if conversion.ok else None,
            timezone_info=conversion.info,
            was_adjusted_to_future=adjusted.changed,
        )

    def resolve(
            self,
            text: str,
            *,
            parse_text: str,
            now: datetime,
            timezone: TimezoneSpec | None,
    ) -> GenericResolution | None:
        """Parse `parse_text`, then localize and future-adjust its start (and end) components.

        Args:
            text: The phrase as used by the future policy keyword checks.
            parse_text: The text handed to the external parser (timezone phrase masked).
            now: The request instant.
            timezone: The detected zone, if any.
        """

        relative_base = local_now(now, timezone).replace(tzinfo=None)
        results = self._parser.parse(parse_text, relative_base=relative_base)
        if not results:
            return None

        first = results[0]
        start = self._resolve_component(first.start, text=text, now=now, timezone=timezone)
        end = None
        if first.end is not None:
            end = self._resolve_component(
                first.end,
                text=text,
                now=now,
                timezone=timezone,
                start=start.instant,
            )
        return GenericResolution(range=RangeResult(start=start, end=end), raw=first)
