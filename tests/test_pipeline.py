"""Tests for the end-to-end resolution pipeline (generic parser faked)."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

from src.scheduling.generic import ParsedComponent, ParsedResult
from src.scheduling.pipeline import PhraseResolver, SchedulingInputError
from src.scheduling.schema import ManualOffset, NamedZone, ResolutionKind
from src.scheduling.timezones import TimezoneLookupTable


class _FakeParser:
    def __init__(self, results: list[ParsedResult] | None = None) -> None:
        self.results = results or []
        self.calls: list[str] = []

    def parse(self, text: str, *, relative_base: datetime) -> list[ParsedResult]:
        """Record the text handed to the parser and return the canned results."""
        self.calls.append(text)
        return self.results


def _resolver(table: TimezoneLookupTable, parser: _FakeParser) -> PhraseResolver:
    return PhraseResolver(table, parser)


def test_irrelevant_text_short_circuits(table: TimezoneLookupTable, now: datetime) -> None:
    parser = _FakeParser()
    resolution = _resolver(table, parser).resolve("see you soon", now)

    assert resolution.kind == ResolutionKind.not_relevant
    assert not resolution.found_dates
    assert resolution.timezone is None
    assert parser.calls == []


def test_weekday_range_wins_over_generic(table: TimezoneLookupTable, now: datetime) -> None:
    parser = _FakeParser()
    resolution = _resolver(table, parser).resolve(
        "available on monday 10pm to thursday 10pm est", now
    )

    assert resolution.kind == ResolutionKind.weekday_series
    assert resolution.timezone == NamedZone(id="America/New_York")
    assert [e.label for e in resolution.series] == ["monday", "tuesday", "wednesday", "thursday"]
    assert all(e.instant.epoch_seconds >= int(now.timestamp()) for e in resolution.series)
    new_york = ZoneInfo("America/New_York")
    assert all(e.instant.instant.astimezone(new_york).hour == 22 for e in resolution.series)
    assert parser.calls == []


def test_date_range_for_netherlands(table: TimezoneLookupTable, now: datetime) -> None:
    resolution = _resolver(table, _FakeParser()).resolve(
        "available from 15th to 20th at 10pm netherlands", now
    )

    assert resolution.kind == ResolutionKind.date_range_series
    assert resolution.timezone == NamedZone(id="Europe/Amsterdam")
    assert [e.label for e in resolution.series] == [15, 16, 17, 18, 19, 20]
    amsterdam = ZoneInfo("Europe/Amsterdam")
    assert all(e.instant.instant.astimezone(amsterdam).hour == 22 for e in resolution.series)
    assert all(e.instant.instant >= now for e in resolution.series)


def test_generic_path_masks_the_zone_phrase(table: TimezoneLookupTable, now: datetime) -> None:
    parser = _FakeParser(
        [ParsedResult(text="tomorrow at 3pm", start=ParsedComponent.from_datetime(datetime(2026, 10, 15, 15)))]
    )
    resolution = _resolver(table, parser).resolve("tomorrow at 3pm bangladesh time", now)

    assert parser.calls == ["tomorrow at 3pm"]
    assert resolution.kind == ResolutionKind.single
    assert resolution.timezone == NamedZone(id="Asia/Dhaka")
    assert resolution.range is not None
    start = resolution.range.start.instant
    assert start.astimezone(ZoneInfo("Asia/Dhaka")) == datetime(2026, 10, 15, 15, 0, tzinfo=ZoneInfo("Asia/Dhaka"))
    assert resolution.raw_parse_result is not None
    assert resolution.raw_parse_result.start.hour == 15


def test_generic_range(table: TimezoneLookupTable, now: datetime) -> None:
    parser = _FakeParser(
        [
            ParsedResult(
                text="3pm to 5pm",
                start=ParsedComponent.from_datetime(datetime(2026, 10, 14, 15)),
                end=ParsedComponent.from_datetime(datetime(2026, 10, 14, 17)),
            )
        ]
    )
    resolution = _resolver(table, parser).resolve("call 3pm to 5pm gmt-7", now)

    assert resolution.kind == ResolutionKind.range
    assert resolution.timezone == ManualOffset(minutes=-420)
    assert resolution.range is not None
    assert resolution.range.end is not None
    assert resolution.range.end.epoch_seconds > resolution.range.start.epoch_seconds
    assert resolution.range.start.instant.astimezone(UTC) == datetime(2026, 10, 14, 22, 0, tzinfo=UTC)


def test_normalized_text_reaches_the_parser(table: TimezoneLookupTable, now: datetime) -> None:
    parser = _FakeParser()
    resolution = _resolver(table, parser).resolve("dinner 15th 7pm", now)

    assert resolution.normalized_text == "dinner 7pm on 15th of October"
    assert parser.calls == ["dinner 7pm on 15th of october"]


def test_no_dates(table: TimezoneLookupTable, now: datetime) -> None:
    resolution = _resolver(table, _FakeParser()).resolve("at 5 maybe", now)

    assert resolution.kind == ResolutionKind.no_dates
    assert not resolution.found_dates


def test_naive_now_is_rejected(table: TimezoneLookupTable) -> None:
    with pytest.raises(SchedulingInputError):
        _resolver(table, _FakeParser()).resolve("at 3pm", datetime(2026, 10, 14, 12, 0))


@pytest.mark.parametrize("text", ["november 15 3pm", "dec 5 10am"])
def test_explicit_month_reaches_the_parser_intact(table: TimezoneLookupTable, now: datetime, text: str) -> None:
    parser = _FakeParser(
        [ParsedResult(text=text, start=ParsedComponent.from_datetime(datetime(2026, 11, 15, 15)))]
    )
    resolution = _resolver(table, parser).resolve(text, now)

    assert resolution.normalized_text == text
    assert parser.calls == [text]
    assert resolution.kind == ResolutionKind.single


def test_year_alone_is_not_a_time(table: TimezoneLookupTable, now: datetime) -> None:
    parser = _FakeParser()
    resolution = _resolver(table, parser).resolve("see you in 2026", now)

    assert resolution.kind == ResolutionKind.not_relevant
    assert parser.calls == []
