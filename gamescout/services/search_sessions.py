"""One search controller per chat, created on first use."""

from __future__ import annotations

from functools import partial
from typing import Awaitable, Callable

from gamescout.config import SearchSettings
from gamescout.logging import logger
from gamescout.services.search_controller import (
    Scheduler,
    SearchBackend,
    SearchController,
    SearchUpdate,
)

ChatNotifier = Callable[[int, SearchUpdate, str | None], Awaitable[None]]


class SearchSessionRegistry:
    """Keeps at most ``settings.max_sessions`` controllers alive.

    When the limit is reached the session created first is closed and
    dropped to make room. Each session remembers the language of the last
    user who touched it so asynchronous results are rendered in it.
    """

    def __init__(
        self,
        catalog: SearchBackend,
        notifier: ChatNotifier,
        settings: SearchSettings | None = None,
        scheduler_factory: Callable[[], Scheduler] | None = None,
    ) -> None:
        self.catalog = catalog
        self._notifier = notifier
        self._settings = settings or SearchSettings()
        self._scheduler_factory = scheduler_factory
        self._sessions: dict[int, SearchController] = {}
        self._locales: dict[int, str | None] = {}

    def get(self, chat_id: int, locale: str | None = None) -> SearchController:
        if locale:
            self._locales[chat_id] = locale
        controller = self._sessions.get(chat_id)
        if controller is not None:
            return controller

        if len(self._sessions) >= self._settings.max_sessions:
            oldest_chat = next(iter(self._sessions))
            self.discard(oldest_chat)
            logger.info("search_session_evicted", chat_id=oldest_chat)

        controller = SearchController(
            self.catalog,
            scheduler=self._scheduler_factory() if self._scheduler_factory else None,
            debounce_seconds=self._settings.debounce_seconds,
            page_size=self._settings.page_size,
            listener=partial(self._deliver, chat_id),
        )
        self._sessions[chat_id] = controller
        return controller

    def locale_for(self, chat_id: int) -> str | None:
        return self._locales.get(chat_id)

    def discard(self, chat_id: int) -> None:
        controller = self._sessions.pop(chat_id, None)
        self._locales.pop(chat_id, None)
        if controller is not None:
            controller.close()

    def close_all(self) -> None:
        for chat_id in list(self._sessions):
            self.discard(chat_id)

    async def _deliver(self, chat_id: int, update: SearchUpdate) -> None:
        await self._notifier(chat_id, update, self._locales.get(chat_id))

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["ChatNotifier", "SearchSessionRegistry"]
