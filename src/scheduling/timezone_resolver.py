"""Timezone detection (explicit UTC/GMT offsets first, then named-zone aliases).

Offset rules are an ordered table walked once; the first rule whose match passes range validation
wins. Rules whose match is out of range are skipped and the walk continues with the next rule.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from src.scheduling.schema import ManualOffset, NamedZone, TimezoneSpec
from src.scheduling.timezones import TimezoneLookupTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OffsetRule:
    """One offset pattern. Groups: `sign` (optional), `hours`, `minutes` (optional)."""

    name: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class TimezoneMatch:
    """A detected timezone plus the text span it was read from."""

    spec: TimezoneSpec
    start: int
    end: int


def _prefixed_rules(prefix: str) -> list[OffsetRule]:
    return [
        # "utc 5:30"
        OffsetRule(
            name=f"{prefix}_space_colon",
            pattern=re.compile(rf"\b{prefix}\s+(?P<hours>\d{{1,2}}):(?P<minutes>\d{{2}})\b"),
        ),
        # "utc 5"
        OffsetRule(
            name=f"{prefix}_space",
            pattern=re.compile(rf"\b{prefix}\s+(?P<hours>\d{{1,2}})(?!\d)\b"),
        ),
        # "utc +5:30"
        OffsetRule(
            name=f"{prefix}_space_signed_colon",
            pattern=re.compile(
                rf"\b{prefix}\s+(?P<sign>[+-])\s*(?P<hours>\d{{1,2}}):(?P<minutes>\d{{2}})\b"
            ),
        ),
        # "utc +5"
        OffsetRule(
            name=f"{prefix}_space_signed",
            pattern=re.compile(rf"\b{prefix}\s+(?P<sign>[+-])\s*(?P<hours>\d{{1,2}})(?!\d)\b"),
        ),
        # "utc+5:30", "utc-7", "utc+0530"
        OffsetRule(
            name=f"{prefix}_direct",
            pattern=re.compile(
                rf"\b{prefix}\s*(?P<sign>[+-])\s*(?P<hours>\d{{1,2}})(?::?(?P<minutes>\d{{2}}))?\b"
            ),
        ),
    ]


OFFSET_RULES: tuple[OffsetRule, ...] = (
    *_prefixed_rules("utc"),
    *_prefixed_rules("gmt"),
    # "+05:30", "-0700"
    OffsetRule(
        name="standalone_hh_mm",
        pattern=re.compile(r"(?<![\w:+\-])(?P<sign>[+-])(?P<hours>\d{1,2}):?(?P<minutes>\d{2})\b"),
    ),
    # "+5", "-7"
    OffsetRule(
        name="standalone_hours",
        pattern=re.compile(r"(?<![\w:+\-])(?P<sign>[+-])(?P<hours>\d{1,2})\b"),
    ),
)


def offset_minutes(sign: str, hours: int, minutes: int) -> int | None:
    """Validate an offset and convert it to signed minutes.

    Returns:
        Signed minutes in UTC-12 .. UTC+14, or `None` when out of range.
    """

    if minutes > 59:
        return None
    if hours > 14 or (hours == 14 and minutes > 0):
        return None
    if sign == "-" and (hours > 12 or (hours == 12 and minutes > 0)):
        return None
    total = hours * 60 + minutes
    return -total if sign == "-" else total


def _match_offset(text: str) -> TimezoneMatch | None:
    for rule in OFFSET_RULES:
        match = rule.pattern.search(text)
        if not match:
            continue

        groups = match.groupdict()
        sign = groups.get("sign") or "+"
        hours = int(groups["hours"])
        minutes = int(groups["minutes"]) if groups.get("minutes") else 0

        value = offset_minutes(sign, hours, minutes)
        if value is None:
            logger.debug("offset rejected rule=%s value=%s", rule.name, match.group(0))
            continue

        return TimezoneMatch(spec=ManualOffset(minutes=value), start=match.start(), end=match.end())
    return None


class TimezoneResolver:
    """Detect an explicit offset or a named zone in free-form text."""

    def __init__(self, table: TimezoneLookupTable) -> None:
        self._table = table

    @property
    def table(self) -> TimezoneLookupTable:
        return self._table

    def match(self, text: str) -> TimezoneMatch | None:
        """Return the detected zone and its span, or `None`.

        The offset phase always runs first; aliases are only consulted when no valid offset is
        present.
        """

        value = (text or "").lower()

        offset = _match_offset(value)
        if offset is not None:
            return offset

        alias = self._table.find(value)
        if alias is not None:
            return TimezoneMatch(spec=NamedZone(id=alias.zone_id), start=alias.start, end=alias.end)
        return None

    def detect(self, text: str) -> TimezoneSpec | None:
        """Return the detected `TimezoneSpec`, or `None` when the text names no zone."""

        found = self.match(text)
        return None if found is None else found.spec
