"""Phrase resolution pipeline orchestration.

Normalizer -> relevance gate -> timezone detection -> first matching expander
(weekday range, calendar-day range, generic parser). `now` is taken once by the caller and
threaded through every step; no step reads the clock itself.
"""

from __future__ import annotations

import logging
from datetime import datetime

from pydantic import ValidationError

from src.scheduling.date_range import expand_date_range
from src.scheduling.generic import GenericParser, GenericResolver, mask_span
from src.scheduling.normalize import normalize_text
from src.scheduling.relevance import is_scheduling_relevant
from src.scheduling.schema import RawInput, Resolution, ResolutionKind
from src.scheduling.timezone_resolver import TimezoneResolver
from src.scheduling.timezones import TimezoneLookupTable
from src.scheduling.weekdays import expand_weekday_range

logger = logging.getLogger(__name__)


class SchedulingInputError(ValueError):
    """Raised when the raw input itself is invalid (e.g. a naive `now`)."""


class PhraseResolver:
    """Resolve scheduling phrases into instants, instant series, or ranges."""

    def __init__(self, table: TimezoneLookupTable, parser: GenericParser) -> None:
        self._timezones = TimezoneResolver(table)
        self._generic = GenericResolver(parser)

    @property
    def timezone_resolver(self) -> TimezoneResolver:
        return self._timezones

    def resolve(self, text: str, now: datetime) -> Resolution:
        """Resolve one phrase relative to the request instant `now` (timezone-aware).

        Raises:
            SchedulingInputError: If `now` is naive.
        """

        try:
            raw = RawInput(text=text, now=now)
        except ValidationError as exc:
            raise SchedulingInputError(str(exc)) from exc

        normalized = normalize_text(raw.text, raw.now)
        base = {"original_text": raw.text, "normalized_text": normalized, "now": raw.now}

        if not is_scheduling_relevant(normalized):
            return Resolution(kind=ResolutionKind.not_relevant, **base)

        found = self._timezones.match(normalized)
        timezone = found.spec if found is not None else None

        weekday_series = expand_weekday_range(normalized, now=raw.now, timezone=timezone)
        if weekday_series:
            return Resolution(
                kind=ResolutionKind.weekday_series,
                timezone=timezone,
                series=weekday_series,
                **base,
            )

        day_series = expand_date_range(normalized, now=raw.now, timezone=timezone)
        if day_series:
            return Resolution(
                kind=ResolutionKind.date_range_series,
                timezone=timezone,
                series=day_series,
                **base,
            )

        lowered = normalized.lower()
        parse_text = mask_span(lowered, found.start, found.end) if found is not None else lowered
        generic = self._generic.resolve(
            normalized,
            parse_text=parse_text,
            now=raw.now,
            timezone=timezone,
        )
        if generic is None:
            return Resolution(kind=ResolutionKind.no_dates, timezone=timezone, **base)

        return Resolution(
            kind=ResolutionKind.range if generic.range.end is not None else ResolutionKind.single,
            timezone=timezone,
            range=generic.range,
            raw_parse_result=generic.raw.to_raw(),
            **base,
        )
