"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode

from gamescout.bot.middlewares import SearchSessionMiddleware, ThrottleMiddleware
from gamescout.bot.routers import setup_routers
from gamescout.bot.utils.telegram import SearchResultNotifier
from gamescout.config import BotSettings, get_settings
from gamescout.i18n import I18nService
from gamescout.logging import configure_logging, logger
from gamescout.services.catalog import CatalogCaches, CatalogClient
from gamescout.services.error_monitor import ErrorMonitor
from gamescout.services.exceptions import ConfigError
from gamescout.services.search_sessions import SearchSessionRegistry


def ensure_credentials(settings: BotSettings) -> None:
    """Fail fast on missing secrets instead of on the first request."""

    if settings.telegram_token is None or not settings.telegram_token.get_secret_value():
        raise ConfigError("Missing Telegram bot token. Set GAMESCOUT_TELEGRAM_TOKEN.")
    if settings.rawg.api_key is None or not settings.rawg.api_key.get_secret_value():
        raise ConfigError("Missing RAWG API key. Set GAMESCOUT_RAWG__API_KEY.")


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    ensure_credentials(settings)

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(
        token=settings.telegram_token.get_secret_value(),
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        session=session,
    )
    i18n = I18nService(default_locale=settings.default_language)

    async with httpx.AsyncClient() as http_client:
        catalog = CatalogClient(
            http_client,
            settings=settings.rawg,
            caches=CatalogCaches.from_settings(settings.cache),
        )
        registry = SearchSessionRegistry(
            catalog,
            SearchResultNotifier(bot, i18n),
            settings=settings.search,
        )

        dp = Dispatcher()
        dp.include_router(setup_routers())
        dp.errors.register(ErrorMonitor(settings))
        dp.message.middleware(ThrottleMiddleware(settings.request_limit, i18n))
        dp.message.middleware(SearchSessionMiddleware(registry, i18n))

        logger.info("bot_starting", environment=settings.environment)
        try:
            await dp.start_polling(bot)
        finally:
            registry.close_all()
            logger.info("bot_stopped", sessions_closed=True)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
