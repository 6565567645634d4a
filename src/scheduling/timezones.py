"""Timezone alias lookup table.

Maps lowercase city/country/abbreviation aliases to IANA zone ids. The table order is the
matching priority (most specific aliases first), so "new york" wins over "york"-like shorter
aliases and cities win over countries.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

_DEFAULT_TABLE_PATH = Path(__file__).resolve().parent / "timezone_aliases.json"


@dataclass(frozen=True)
class AliasMatch:
    """A lookup-table alias found in text."""

    alias: str
    zone_id: str
    start: int
    end: int


@dataclass(frozen=True)
class _AliasPattern:
    alias: str
    zone_id: str
    pattern: re.Pattern[str]


@dataclass(frozen=True)
class TimezoneLookupTable(Mapping[str, str]):
    """Read-only, ordered alias -> zone id mapping with whole-word matching."""

    entries: Mapping[str, str]
    _patterns: tuple[_AliasPattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        frozen = MappingProxyType({k.strip().lower(): v for k, v in self.entries.items()})
        object.__setattr__(self, "entries", frozen)
        patterns = tuple(
            _AliasPattern(
                alias=alias,
                zone_id=zone_id,
                # An alias may be followed by "time" ("bangladesh time"); the span covers it.
                pattern=re.compile(rf"\b{re.escape(alias)}\b(?:\s+time\b)?", flags=re.IGNORECASE),
            )
            for alias, zone_id in frozen.items()
        )
        object.__setattr__(self, "_patterns", patterns)

    def __getitem__(self, alias: str) -> str:
        return self.entries[alias.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, text: str) -> AliasMatch | None:
        """Return the first alias (in table order) that occurs in text as a whole word."""

        for entry in self._patterns:
            match = entry.pattern.search(text)
            if match:
                return AliasMatch(
                    alias=entry.alias,
                    zone_id=entry.zone_id,
                    start=match.start(),
                    end=match.end(),
                )
        return None


def load_timezone_table(path: str | Path | None = None) -> TimezoneLookupTable:
    """Load the alias table from JSON (the bundled table when `path` is omitted).

    Raises:
        ValueError: If the file is not a JSON object of string -> string.
    """

    table_path = Path(path) if path is not None else _DEFAULT_TABLE_PATH
    raw = json.loads(table_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in raw.items()
    ):
        raise ValueError(f"timezone table must map strings to strings: {table_path}")
    return TimezoneLookupTable(entries=raw)
