"""HTTP routes: `/parse` and the service description.

Hard contract: negative outcomes (missing text, no time, no dates) are ordinary 200 JSON documents.
Only unexpected internal errors produce a 500, with details hidden outside development mode.
"""

from __future__ import annotations

import logging
from time import monotonic
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.app import App
from src.scheduling.response import build_response, missing_text_response

logger = logging.getLogger(__name__)
router = APIRouter(tags=["parse"])

EXAMPLE_QUERIES: tuple[str, ...] = (
    "/parse?text=tomorrow at 3pm bangladesh time",
    "/parse?text=next friday 2pm UTC+5:30",
    "/parse?text=meeting at 9am GMT-7",
    "/parse?text=call at 5pm UTC +08:00",
    "/parse?text=conference 2pm australia time",
    "/parse?text=lunch at noon GMT+0",
    "/parse?text=party tonight 8pm UTC-5",
    "/parse?text=meeting monday 10am +0530",
    "/parse?text=deadline tomorrow 5pm GMT +05:30",
    "/parse?text=call next week 3pm -07:00",
    "/parse?text=meeting tomorrow 3pm UTC 5:30",
    "/parse?text=playing at 10pm utc 5",
    "/parse?text=gaming at 8pm UTC +7",
    "/parse?text=stream at 9pm GMT 2:30",
    "/parse?text=available on monday 10pm to thursday 10pm est",
    "/parse?text=available from 15th to 20th at 10pm netherlands",
)


def get_container(request: Request) -> App:
    return request.app.state.container


def internal_error_response(container: App, exc: Exception) -> JSONResponse:
    message = str(exc) if container.settings.is_development else "Something went wrong"
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": message},
    )


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """App-level fallback for errors raised outside the `/parse` boundary."""

    logger.error("unhandled error on %s", request.url.path, exc_info=exc)
    return internal_error_response(get_container(request), exc)


@router.get("/parse", response_model=None)
def parse(request: Request, text: str | None = None) -> dict[str, Any] | JSONResponse:
    """Resolve the `text` query parameter into timestamps."""

    container = get_container(request)
    if not text:
        return missing_text_response()

    started = monotonic()
    # noinspection PyBroadException
    try:
        resolution = container.resolve(text)
        body = build_response(resolution)
    except Exception as exc:
        # Route boundary: internal errors become a 500 without leaking details.
        logger.exception("parse failed")
        return internal_error_response(container, exc)

    latency_ms = int((monotonic() - started) * 1000)
    logger.info(
        "parsed kind=%s timezone=%s latency_ms=%d",
        resolution.kind,
        body.get("detected_timezone"),
        latency_ms,
    )
    return body


@router.get("/")
async def describe(request: Request) -> dict[str, Any]:
    """Static service description."""

    container = get_container(request)
    aliases = list(container.table)
    return {
        "status": "running",
        "timezone_support": "Named zones via alias table plus UTC/GMT offset parsing",
        "endpoints": {"parse": "/parse?text=your message here"},
        "supported_timezones": f"{len(aliases)} countries/cities/timezones supported",
        "sample_supported": aliases[:20] + ["..."],
        "examples": list(EXAMPLE_QUERIES),
    }
