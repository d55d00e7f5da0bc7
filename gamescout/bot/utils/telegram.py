"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramNetworkError, TelegramServerError
from aiogram.types import LinkPreviewOptions, Message

from gamescout.bot.utils.cards import render_search_update
from gamescout.i18n import I18nService
from gamescout.logging import logger
from gamescout.services.search_controller import SearchUpdate
from gamescout.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
TRANSIENT_TELEGRAM_ERRORS = (TelegramNetworkError, TelegramServerError)


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply with retry/backoff."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=TRANSIENT_TELEGRAM_ERRORS,
        logger=logger,
        operation_name="telegram_answer",
    )


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot with retry/backoff."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=TRANSIENT_TELEGRAM_ERRORS,
        logger=logger,
        operation_name="telegram_send_message",
    )


class SearchResultNotifier:
    """Delivers committed search results to the chat that asked for them."""

    def __init__(self, bot: Bot, i18n: I18nService, locale: str | None = None) -> None:
        self._bot = bot
        self._i18n = i18n
        self._locale = locale

    async def __call__(
        self, chat_id: int, update: SearchUpdate, locale: str | None = None
    ) -> None:
        text = render_search_update(update, self._i18n, locale or self._locale)
        await bot_send_with_retry(
            self._bot,
            chat_id=chat_id,
            text=text,
            parse_mode=ParseMode.HTML,
            link_preview_options=LinkPreviewOptions(is_disabled=True),
        )


__all__ = ["answer_with_retry", "bot_send_with_retry", "SearchResultNotifier"]
