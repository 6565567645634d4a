"""Tests for calendar-day range expansion and its month roll-over."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from src.scheduling.date_range import expand_date_range, match_day_span
from src.scheduling.schema import NamedZone

NETHERLANDS = NamedZone(id="Europe/Amsterdam")


def test_match_day_span() -> None:
    assert match_day_span("available from 15th to 20th at 10pm") == (15, 20, time(22, 0))
    assert match_day_span("3 to 5 at 9:30am") == (3, 5, time(9, 30))
    assert match_day_span("20th to 15th at 10pm") is None
    assert match_day_span("15th to 20th") is None
    assert match_day_span("0 to 3 at 1pm") is None


def test_span_in_current_month(now: datetime) -> None:
    amsterdam = ZoneInfo("Europe/Amsterdam")
    entries = expand_date_range(
        "available from 15th to 20th at 10pm netherlands",
        now=now,
        timezone=NETHERLANDS,
    )

    assert entries is not None
    assert [e.label for e in entries] == [15, 16, 17, 18, 19, 20]

    local = [e.instant.instant.astimezone(amsterdam) for e in entries]
    assert [d.date() for d in local] == [date(2026, 10, d) for d in range(15, 21)]
    assert all(d.time() == time(22, 0) for d in local)
    assert all(e.instant.instant >= now for e in entries)
    assert not any(e.instant.was_adjusted_to_future for e in entries)


def test_partially_elapsed_span_moves_to_next_month() -> None:
    now = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
    entries = expand_date_range("from 15th to 20th at 10pm", now=now, timezone=NETHERLANDS)

    assert entries is not None
    assert [e.label for e in entries] == [15, 16, 17, 18, 19, 20]
    assert all(e.instant.instant.month == 11 for e in entries)
    assert all(e.instant.instant >= now for e in entries)
    assert all(e.instant.was_adjusted_to_future for e in entries)

    stamps = [e.instant.epoch_seconds for e in entries]
    assert stamps == sorted(stamps)


def test_days_missing_from_the_month_are_skipped() -> None:
    now = datetime(2026, 10, 31, 12, 0, tzinfo=UTC)
    entries = expand_date_range("29th to 31st at 9am", now=now, timezone=None)

    assert entries is not None
    assert [e.label for e in entries] == [29, 30]
    assert all(e.instant.instant.month == 11 for e in entries)


def test_span_absent_from_current_month_rolls_forward() -> None:
    now = datetime(2026, 2, 10, 12, 0, tzinfo=UTC)
    entries = expand_date_range("30th to 31st at 9am", now=now, timezone=None)

    assert entries is not None
    assert [e.instant.instant for e in entries] == [
        datetime(2026, 3, 30, 9, 0, tzinfo=UTC),
        datetime(2026, 3, 31, 9, 0, tzinfo=UTC),
    ]


def test_december_rolls_into_january() -> None:
    now = datetime(2026, 12, 20, 12, 0, tzinfo=UTC)
    entries = expand_date_range("1st to 2nd at 8am", now=now, timezone=None)

    assert entries is not None
    assert [e.instant.instant.date() for e in entries] == [date(2027, 1, 1), date(2027, 1, 2)]


def test_no_match(now: datetime) -> None:
    assert expand_date_range("monday 10pm to thursday 10pm", now=now, timezone=None) is None
