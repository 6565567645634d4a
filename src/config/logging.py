"""Logging configuration shared by the HTTP service and the chat bot."""

from __future__ import annotations

import logging

_QUIET_LOGGERS: tuple[str, ...] = ("aiogram.event", "uvicorn.access", "dateparser")


def configure_logging(level: str = "INFO") -> None:
    """Configure process-wide logging at the `LOG_LEVEL` from settings.

    Log records carry resolution kinds, detected zones and latencies. Exception details stay in the
    logs and only reach an HTTP client when the service runs in development mode.
    """

    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
