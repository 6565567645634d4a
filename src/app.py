"""Application composition root.

This module wires together configuration, the timezone lookup table, the generic date parser and
the clock used to sample the request instant.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from src.config.settings import Settings
from src.scheduling.generic import DateparserBackend, GenericParser
from src.scheduling.pipeline import PhraseResolver
from src.scheduling.schema import Resolution
from src.scheduling.timezones import TimezoneLookupTable, load_timezone_table

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class App:
    """Shared application dependencies for the HTTP routes and bot handlers."""

    settings: Settings
    table: TimezoneLookupTable
    resolver: PhraseResolver
    clock: Clock = field(default=system_clock)

    def now(self) -> datetime:
        """Sample the request instant once, expressed in the reference timezone."""

        return self.clock().astimezone(ZoneInfo(self.settings.default_timezone))

    def resolve(self, text: str) -> Resolution:
        return self.resolver.resolve(text, self.now())


def create_app(
        settings: Settings,
        *,
        parser: GenericParser | None = None,
        clock: Clock = system_clock,
) -> App:
    """Create the application container."""

    table = load_timezone_table(settings.timezone_table_path)
    resolver = PhraseResolver(table, parser or DateparserBackend())
    return App(settings=settings, table=table, resolver=resolver, clock=clock)
