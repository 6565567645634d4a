"""Tests for the scheduling relevance gate."""

from __future__ import annotations

import pytest

from src.scheduling.relevance import is_scheduling_relevant


@pytest.mark.parametrize(
    "text",
    [
        "tomorrow at 3pm",
        "call 10:30 am",
        "standup 14:30",
        "report at 1500 hours",
        "shift starts 0900z",
        "standup 1500 est",
        "lunch at noon",
        "before midnight",
        "friday morning",
        "this evening works",
        "meet at 5",
        "7 o'clock sharp",
        "available from 15th to 20th at 10pm netherlands",
    ],
)
def test_time_indications_are_relevant(text: str) -> None:
    assert is_scheduling_relevant(text)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "hello there",
        "see you tomorrow",
        "room 12 on monday",
        "how are you doing",
        "see you in 2026",
        "budget for 2025",
        "room 1830",
        "since 1999 we have shipped",
    ],
)
def test_text_without_time_is_not_relevant(text: str) -> None:
    assert not is_scheduling_relevant(text)
