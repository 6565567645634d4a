"""Bot process entrypoint."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties

from src.app import create_app
from src.bot.router import router
from src.config.logging import configure_logging
from src.config.settings import load_settings

logger = logging.getLogger(__name__)


async def main() -> None:
    """Poll Telegram and answer every message with resolved timestamps."""

    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.telegram_bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is required to run the bot")

    app = create_app(settings)
    logger.info(
        "bot starting reference_timezone=%s aliases=%d",
        settings.default_timezone,
        len(app.table),
    )

    bot = Bot(token=settings.telegram_bot_token, default=DefaultBotProperties(parse_mode=None))
    dispatcher = Dispatcher()
    dispatcher.include_router(router)

    try:
        await dispatcher.start_polling(
            bot,
            app=app,
            allowed_updates=dispatcher.resolve_used_update_types(),
        )
    finally:
        logger.info("shutting down")
        await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
