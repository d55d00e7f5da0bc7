"""Debounced search state for a single conversation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Awaitable, Callable, Iterable, Protocol

from gamescout.domain.models import (
    DEFAULT_ORDERING,
    DEFAULT_PAGE_SIZE,
    ORDERINGS,
    GameSummary,
    Ordering,
    SearchCriteria,
    SearchResultPage,
)
from gamescout.logging import logger
from gamescout.services.exceptions import InvalidArgument
from gamescout.utils.scheduler import TaskScheduler

DEFAULT_DEBOUNCE_SECONDS = 0.3
FALLBACK_ERROR_MESSAGE = "Failed to fetch games"


class SearchBackend(Protocol):
    async def search(self, criteria: SearchCriteria) -> SearchResultPage: ...


class Scheduler(Protocol):
    def schedule(self, callback: Callable[[], None], delay: float) -> Any: ...

    def cancel(self, task: Any) -> bool: ...


@dataclass(slots=True)
class SearchState:
    query: str = ""
    platform_ids: frozenset[int] = frozenset()
    ordering: Ordering = DEFAULT_ORDERING
    page: int = 1
    displayed_games: list[GameSummary] = field(default_factory=list)
    loading: bool = False
    error: str | None = None
    has_more: bool = False


@dataclass(frozen=True, slots=True)
class SearchSnapshot:
    query: str
    platform_ids: frozenset[int]
    ordering: Ordering
    page: int
    games: tuple[GameSummary, ...]
    loading: bool
    error: str | None
    has_more: bool


@dataclass(frozen=True, slots=True)
class SearchUpdate:
    snapshot: SearchSnapshot
    new_games: tuple[GameSummary, ...]
    appended: bool


SearchListener = Callable[[SearchUpdate], Awaitable[None]]


class SearchController:
    """Owns the query/filter/sort/page state and turns changes into fetches.

    State changes are debounced: each one cancels the pending fetch and
    schedules a new one. Every scheduled fetch carries a sequence number and
    its result is committed only if no newer fetch was requested since, so
    overlapping requests are applied in the order they were issued.
    Listener deliveries are serialized in the same order, and an update
    whose results were replaced before its turn came is not delivered.
    """

    def __init__(
        self,
        catalog: SearchBackend,
        *,
        scheduler: Scheduler | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        page_size: int = DEFAULT_PAGE_SIZE,
        listener: SearchListener | None = None,
    ) -> None:
        self._catalog = catalog
        self._scheduler = scheduler or TaskScheduler()
        self._debounce_seconds = debounce_seconds
        self._page_size = page_size
        self._listener = listener
        self._state = SearchState()
        self._pending: Any = None
        self._issued = 0
        self._replaced_at = 0
        self._notify_lock = asyncio.Lock()
        self._inflight: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def state(self) -> SearchSnapshot:
        return self.snapshot()

    @property
    def fetch_pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> SearchSnapshot:
        state = self._state
        return SearchSnapshot(
            query=state.query,
            platform_ids=state.platform_ids,
            ordering=state.ordering,
            page=state.page,
            games=tuple(state.displayed_games),
            loading=state.loading,
            error=state.error,
            has_more=state.has_more,
        )

    def set_query(self, text: str) -> bool:
        return self._update_criteria(query=text)

    def set_platforms(self, platform_ids: Iterable[int]) -> bool:
        return self._update_criteria(platform_ids=frozenset(int(pid) for pid in platform_ids))

    def set_ordering(self, ordering: str) -> bool:
        if ordering not in ORDERINGS:
            raise InvalidArgument(f"Unsupported ordering: {ordering!r}")
        return self._update_criteria(ordering=ordering)

    def refresh(self) -> None:
        """Fetch page 1 of the current criteria again."""

        self._ensure_open()
        self._reset_results()
        self._schedule_fetch()

    def load_more(self) -> bool:
        self._ensure_open()
        state = self._state
        if state.loading or not state.has_more or self._pending is not None:
            return False
        state.page += 1
        self._schedule_fetch()
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._pending is not None:
            self._scheduler.cancel(self._pending)
            self._pending = None
        # Anything still in flight is now stale.
        self._issued += 1

    async def wait_idle(self) -> None:
        while self._inflight:
            await asyncio.gather(*list(self._inflight))

    def _update_criteria(self, **changes: Any) -> bool:
        self._ensure_open()
        state = self._state
        if all(getattr(state, name) == value for name, value in changes.items()):
            return False
        for name, value in changes.items():
            setattr(state, name, value)
        self._reset_results()
        self._schedule_fetch()
        return True

    def _reset_results(self) -> None:
        self._state.page = 1
        self._state.displayed_games = []

    def _criteria(self) -> SearchCriteria:
        state = self._state
        return SearchCriteria(
            text=state.query,
            platform_ids=state.platform_ids,
            ordering=state.ordering,
            page=state.page,
            page_size=self._page_size,
        )

    def _schedule_fetch(self) -> None:
        if self._pending is not None:
            self._scheduler.cancel(self._pending)
        self._issued += 1
        if self._state.page == 1:
            self._replaced_at = self._issued
        callback = partial(self._start_fetch, self._issued, self._criteria())
        self._pending = self._scheduler.schedule(callback, self._debounce_seconds)

    def _start_fetch(self, sequence: int, criteria: SearchCriteria) -> None:
        self._pending = None
        task = asyncio.get_running_loop().create_task(self._fetch(sequence, criteria))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _fetch(self, sequence: int, criteria: SearchCriteria) -> None:
        state = self._state
        state.loading = True
        state.error = None
        try:
            page = await self._catalog.search(criteria)
        except Exception as exc:
            if not self._is_current(sequence, criteria):
                return
            logger.warning(
                "search_fetch_failed",
                query=criteria.text,
                page=criteria.page,
                error=str(exc),
            )
            state.error = str(exc) or FALLBACK_ERROR_MESSAGE
            state.displayed_games = []
            new_games: tuple[GameSummary, ...] = ()
        else:
            if not self._is_current(sequence, criteria):
                return
            new_games = page.results
            if criteria.page > 1:
                state.displayed_games.extend(new_games)
            else:
                state.displayed_games = list(new_games)
            state.has_more = page.has_more
        state.loading = False

        await self._notify(
            sequence,
            SearchUpdate(
                snapshot=self.snapshot(),
                new_games=new_games,
                appended=criteria.page > 1,
            ),
        )

    def _is_current(self, sequence: int, criteria: SearchCriteria) -> bool:
        if sequence == self._issued:
            return True
        logger.debug(
            "search_result_discarded",
            query=criteria.text,
            page=criteria.page,
            sequence=sequence,
            latest=self._issued,
        )
        return False

    async def _notify(self, sequence: int, update: SearchUpdate) -> None:
        if self._listener is None:
            return
        # Deliveries go out one at a time; an update replaced while it waited
        # for the previous send is dropped.
        async with self._notify_lock:
            if self._closed or sequence < self._replaced_at:
                logger.debug(
                    "search_update_superseded",
                    query=update.snapshot.query,
                    sequence=sequence,
                    latest=self._issued,
                )
                return
            try:
                await self._listener(update)
            except Exception:
                logger.exception("search_listener_failed", query=update.snapshot.query)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("SearchController is closed")


__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "SearchBackend",
    "SearchController",
    "SearchListener",
    "SearchSnapshot",
    "SearchState",
    "SearchUpdate",
]
