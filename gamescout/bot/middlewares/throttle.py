"""Simple per-user throttle to prevent rapid-fire requests."""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any, Awaitable, Callable, Deque, Dict

from aiogram import BaseMiddleware
from aiogram.types import Message, TelegramObject

from gamescout.config import RequestLimitSettings
from gamescout.i18n import I18nService


class ThrottleMiddleware(BaseMiddleware):
    def __init__(
        self,
        settings: RequestLimitSettings | None = None,
        i18n: I18nService | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        limits = settings or RequestLimitSettings()
        self.window_seconds = limits.interval_seconds
        self.max_requests = limits.max_requests
        self._i18n = i18n or I18nService()
        self._clock = clock
        self._events: Dict[int, Deque[float]] = defaultdict(deque)

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        if self.max_requests <= 0 or not isinstance(event, Message) or event.from_user is None:
            return await handler(event, data)

        now = self._clock()
        bucket = self._events[event.from_user.id]

        while bucket and now - bucket[0] > self.window_seconds:
            bucket.popleft()

        if len(bucket) >= self.max_requests:
            locale = getattr(event.from_user, "language_code", None)
            await event.answer(self._i18n.gettext("throttle.limited", locale=locale), parse_mode=None)
            return None

        bucket.append(now)
        return await handler(event, data)


__all__ = ["ThrottleMiddleware"]
