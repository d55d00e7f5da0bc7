"""Attach the chat's search session and shared services to handler data."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from gamescout.i18n import I18nService
from gamescout.services.search_sessions import SearchSessionRegistry


class SearchSessionMiddleware(BaseMiddleware):
    def __init__(self, registry: SearchSessionRegistry, i18n: I18nService) -> None:
        self.registry = registry
        self.i18n = i18n

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        data["catalog"] = self.registry.catalog
        data["i18n"] = self.i18n
        chat = getattr(event, "chat", None)
        if chat is not None:
            from_user = getattr(event, "from_user", None)
            locale = getattr(from_user, "language_code", None)
            data["search"] = self.registry.get(chat.id, locale=locale)
        return await handler(event, data)


__all__ = ["SearchSessionMiddleware"]
