"""aiogram message handlers.

Hard contract: every incoming message produces exactly one reply. Resolved phrases are answered
with one line per instant; anything else gets a short plain-text explanation. Internal errors are
logged and never leak to the chat.
"""

from __future__ import annotations

import logging
from time import monotonic

from aiogram.types import Message

from src.app import App
from src.scheduling.response import readable
from src.scheduling.schema import Resolution, ResolutionKind, ResolvedInstant

logger = logging.getLogger(__name__)

NOT_RELEVANT_REPLY = "I could not find a time in that message."
NO_DATES_REPLY = "I could not work out a date from that message."
ERROR_REPLY = "Sorry, something went wrong while reading that message."


def _is_command_text(text: str) -> bool:
    return text.lstrip().startswith("/")


def _instant_line(label: str, resolved: ResolvedInstant) -> str:
    return f"{label}: {readable(resolved.instant)} ({resolved.epoch_seconds})"


def format_reply(resolution: Resolution) -> str:
    """Render a resolution as the chat reply text."""

    if resolution.kind == ResolutionKind.not_relevant:
        return NOT_RELEVANT_REPLY
    if resolution.kind == ResolutionKind.no_dates:
        return NO_DATES_REPLY

    if resolution.is_series:
        return "\n".join(_instant_line(str(entry.label), entry.instant) for entry in resolution.series)

    lines: list[str] = []
    if resolution.range is not None:
        lines.append(_instant_line("start", resolution.range.start))
        if resolution.range.end is not None:
            lines.append(_instant_line("end", resolution.range.end))
    return "\n".join(lines) or NO_DATES_REPLY


async def handle_message(message: Message, app: App) -> None:
    """Handle any incoming Telegram message and reply exactly once."""

    started = monotonic()
    reply = NOT_RELEVANT_REPLY

    # noinspection PyBroadException
    try:
        raw_text = (message.text or message.caption or "")
        if raw_text.strip() and not _is_command_text(raw_text):
            resolution = app.resolve(raw_text)
            reply = format_reply(resolution)

            latency_ms = int((monotonic() - started) * 1000)
            logger.info("handled kind=%s latency_ms=%d", resolution.kind, latency_ms)
    except Exception:
        # Handler boundary: any internal error must still produce a single reply,
        # without leaking details.
        logger.exception("handler failed")
        reply = ERROR_REPLY

    await message.answer(reply)
