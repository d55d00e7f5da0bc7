"""Log unhandled bot errors and notify the administrator."""

from __future__ import annotations

import traceback
from typing import Any

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update

from gamescout.bot.utils.telegram import bot_send_with_retry
from gamescout.logging import logger

TELEGRAM_MESSAGE_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 1800


class ErrorMonitor:
    """Async callable plugged into the aiogram error observer."""

    def __init__(self, settings: Any) -> None:
        self._settings = settings

    async def __call__(self, event: ErrorEvent, bot: Bot) -> Any:
        return await self.handle_error(event, bot)

    async def handle_error(self, event: ErrorEvent, bot: Bot) -> Any:
        update_id = getattr(event.update, "update_id", None)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=update_id,
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        try:
            await bot_send_with_retry(
                bot, chat_id=admin_id, text=self._build_message(event), parse_mode=None
            )
        except Exception:
            logger.exception("error_monitor_notification_failed", update_id=update_id)
        return UNHANDLED

    def _build_message(self, event: ErrorEvent) -> str:
        exception = event.exception
        lines = [
            "GAMESCOUT ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(event.update, 'update_id', 'unknown')}",
            f"Chat: {self._describe_chat(event.update)}",
        ]
        trace = "".join(
            traceback.format_exception(exception.__class__, exception, exception.__traceback__)
        ).strip()
        if trace:
            lines.extend(["", "Traceback:", _truncate(trace, TRACEBACK_CHAR_LIMIT)])
        return _truncate("\n".join(lines), TELEGRAM_MESSAGE_LIMIT)

    @staticmethod
    def _describe_chat(update: Update | None) -> str:
        message = getattr(update, "message", None) if update is not None else None
        chat = getattr(message, "chat", None)
        if chat is None:
            return "unknown"
        return f"{chat.id} | {chat.type}"


def _truncate(value: str, limit: int) -> str:
    value = value.strip()
    if len(value) <= limit:
        return value
    return f"{value[: limit - 15].rstrip()}\n...[truncated]"


__all__ = ["ErrorMonitor"]
