"""Scheduling data model (Pydantic models).

Every entity is built fresh per request and discarded after the response is assembled. The only
state shared across requests is the read-only timezone lookup table.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

MIN_OFFSET_MINUTES = -12 * 60
MAX_OFFSET_MINUTES = 14 * 60


class ManualOffset(BaseModel):
    """A timezone given as a raw UTC offset (UTC-12 .. UTC+14)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["manual_offset"] = "manual_offset"
    minutes: int = Field(ge=MIN_OFFSET_MINUTES, le=MAX_OFFSET_MINUTES)

    def label(self) -> str:
        """Legacy wire form, e.g. `UTC_OFFSET_-420`."""

        return f"UTC_OFFSET_{self.minutes}"


class NamedZone(BaseModel):
    """A timezone referred to by an alias and resolved to an IANA zone id."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["named_zone"] = "named_zone"
    id: str = Field(min_length=1)

    def label(self) -> str:
        return self.id


TimezoneSpec = Annotated[ManualOffset | NamedZone, Field(discriminator="kind")]


class RawInput(BaseModel):
    """Request text plus the single instant at which the request arrived."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    now: AwareDatetime


class TimezoneInfo(BaseModel):
    """Display metadata for the zone applied to an instant."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    timezone: str
    offset: int
    offset_name: str
    zone_name: str
    is_manual_offset: bool
    original_time_in_timezone: str | None = None


class ResolvedInstant(BaseModel):
    """A concrete instant produced by the pipeline."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    instant: AwareDatetime
    timezone: TimezoneSpec | None = None
    timezone_info: TimezoneInfo | None = None
    was_adjusted_to_future: bool = False

    @property
    def epoch_seconds(self) -> int:
        return int(self.instant.timestamp())


class SeriesEntry(BaseModel):
    """One element of an instant series (weekday name or calendar-day number)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str | int
    instant: ResolvedInstant


class RangeResult(BaseModel):
    """A start instant with an optional strictly-later end instant."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: ResolvedInstant
    end: ResolvedInstant | None = None

    @model_validator(mode="after")
    def validate_order(self) -> RangeResult:
        """Validate that the end (when present) is strictly after the start."""

        if self.end is not None and self.end.instant <= self.start.instant:
            raise ValueError("end must be strictly after start")
        return self


class ComponentValues(BaseModel):
    """Date/time components reported by the generic parser for one side of a match."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int | None = None
    month: int | None = None
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None
    date: datetime


class RawParseResult(BaseModel):
    """Serializable echo of the generic parser result that was used."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    start: ComponentValues
    end: ComponentValues | None = None


class ResolutionKind(StrEnum):
    """Which branch of the pipeline produced the outcome."""

    not_relevant = "not_relevant"
    no_dates = "no_dates"
    weekday_series = "weekday_series"
    date_range_series = "date_range_series"
    single = "single"
    range = "range"


class Resolution(BaseModel):
    """The outcome of resolving one phrase."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: ResolutionKind
    original_text: str
    normalized_text: str
    now: AwareDatetime
    timezone: TimezoneSpec | None = None
    series: list[SeriesEntry] = Field(default_factory=list)
    range: RangeResult | None = None
    raw_parse_result: RawParseResult | None = None

    @property
    def is_series(self) -> bool:
        return self.kind in {ResolutionKind.weekday_series, ResolutionKind.date_range_series}

    @property
    def found_dates(self) -> bool:
        return self.kind not in {ResolutionKind.not_relevant, ResolutionKind.no_dates}

    @model_validator(mode="after")
    def validate_shape(self) -> Resolution:
        """Enforce that each outcome kind carries exactly the data it describes."""

        if self.is_series:
            if not self.series:
                raise ValueError("series outcomes require at least one entry")
            if self.range is not None:
                raise ValueError("series outcomes must not carry a range")
        elif self.kind in {ResolutionKind.single, ResolutionKind.range}:
            if self.range is None:
                raise ValueError("single/range outcomes require a range result")
            if (self.kind == ResolutionKind.range) != (self.range.end is not None):
                raise ValueError("range outcomes require an end instant; single outcomes forbid it")
        elif self.series or self.range is not None:
            raise ValueError("negative outcomes must not carry instants")
        return self
