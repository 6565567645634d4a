"""Scheduling relevance gate.

Text with no time-of-day indication is rejected before any date parsing is attempted.
"""

from __future__ import annotations

import re

_ZONE_ABBREVIATIONS = "|".join(
    ("utc", "gmt", "est", "edt", "cst", "cdt", "mst", "mdt", "pst", "pdt", "bst", "cet", "cest", "ist", "jst")
)

_TIME_INDICATOR_PATTERNS: tuple[re.Pattern[str], ...] = (
    # 12-hour: "3pm", "10:30 am"
    re.compile(r"\b\d{1,2}(?::\d{2})?\s*(?:am|pm)\b", flags=re.IGNORECASE),
    # 24-hour: "14:00"
    re.compile(r"\b(?:[01]?\d|2[0-3]):[0-5]\d\b"),
    # Military: "1500 hours", "0900z", "1500 est", "1500 +0530". A bare "2026" is a year, not a time.
    re.compile(
        rf"\b(?:[01]\d|2[0-3])[0-5]\d(?:\s*(?:hours|hrs|h|z)|\s*(?:{_ZONE_ABBREVIATIONS})|\s*[+-]\d{{1,2}}(?::?\d{{2}})?)\b",
        flags=re.IGNORECASE,
    ),
    re.compile(r"\b(?:noon|midnight|morning|afternoon|evening)\b", flags=re.IGNORECASE),
    re.compile(r"\bat\s+\d", flags=re.IGNORECASE),
    re.compile(r"\b\d{1,2}\s*o'?clock\b", flags=re.IGNORECASE),
)


def is_scheduling_relevant(text: str) -> bool:
    """Whether the text carries any time-of-day indication."""

    value = text or ""
    return any(pattern.search(value) for pattern in _TIME_INDICATOR_PATTERNS)
