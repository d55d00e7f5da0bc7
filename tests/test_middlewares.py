"""Tests for the throttle and search session middlewares."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from gamescout.bot.middlewares.search_session import SearchSessionMiddleware
from gamescout.bot.middlewares.throttle import ThrottleMiddleware
from gamescout.config import RequestLimitSettings, SearchSettings
from gamescout.i18n import I18nService
from gamescout.services.search_sessions import SearchSessionRegistry


class DummyFromUser:
    def __init__(self, user_id: int = 1, language_code: str = "en") -> None:
        self.id = user_id
        self.full_name = "Test User"
        self.language_code = language_code


class DummyMessage:
    def __init__(self, text: str = "hi", from_user: DummyFromUser | None = None, chat_id: int = 100) -> None:
        self.text = text
        self.from_user = from_user
        self.answers: list[tuple[str, str | None]] = []
        self.chat = SimpleNamespace(id=chat_id, type="private")

    async def answer(self, text: str, parse_mode: str | None = None):
        self.answers.append((text, parse_mode))
        return text


@pytest.fixture(autouse=True)
def patch_aiogram_message(monkeypatch):
    from gamescout.bot.middlewares import throttle as throttle_module

    monkeypatch.setattr(throttle_module, "Message", DummyMessage)


async def _noop_notifier(chat_id, update, locale):
    return None


@pytest.mark.asyncio
async def test_throttle_blocks_excess_requests(fake_clock):
    middleware = ThrottleMiddleware(
        RequestLimitSettings(interval_seconds=60, max_requests=1), clock=fake_clock
    )
    message = DummyMessage(text="/start", from_user=DummyFromUser())
    handled = []

    async def handler(event, data):
        handled.append("called")
        return "ok"

    assert await middleware(handler, message, {}) == "ok"
    assert len(handled) == 1

    assert await middleware(handler, message, {}) is None
    assert len(handled) == 1
    assert message.answers[-1] == ("Too many requests, please slow down.", None)


@pytest.mark.asyncio
async def test_throttle_window_slides(fake_clock):
    middleware = ThrottleMiddleware(
        RequestLimitSettings(interval_seconds=10, max_requests=2), clock=fake_clock
    )
    handled = []

    async def handler(event, data):
        handled.append(event.from_user.id)

    first_user = DummyMessage(from_user=DummyFromUser(1))
    other_user = DummyMessage(from_user=DummyFromUser(2))

    await middleware(handler, first_user, {})
    await middleware(handler, first_user, {})
    await middleware(handler, first_user, {})
    await middleware(handler, other_user, {})
    assert handled == [1, 1, 2]

    fake_clock.advance(11)
    await middleware(handler, first_user, {})
    assert handled == [1, 1, 2, 1]


@pytest.mark.asyncio
async def test_throttle_passes_events_without_user():
    middleware = ThrottleMiddleware(RequestLimitSettings(max_requests=1))
    handled = []

    async def handler(event, data):
        handled.append(event)

    anonymous = DummyMessage(from_user=None)
    await middleware(handler, anonymous, {})
    await middleware(handler, anonymous, {})
    await middleware(handler, SimpleNamespace(), {})

    assert len(handled) == 3


@pytest.mark.asyncio
async def test_throttle_disabled_with_zero_limit():
    middleware = ThrottleMiddleware(RequestLimitSettings(max_requests=0))
    handled = []

    async def handler(event, data):
        handled.append(event)

    message = DummyMessage(from_user=DummyFromUser())
    for _ in range(10):
        await middleware(handler, message, {})

    assert len(handled) == 10


@pytest.mark.asyncio
async def test_search_session_middleware_injects_dependencies(manual_scheduler):
    catalog = SimpleNamespace(name="catalog")
    registry = SearchSessionRegistry(
        catalog,
        _noop_notifier,
        settings=SearchSettings(),
        scheduler_factory=lambda: manual_scheduler,
    )
    i18n = I18nService()
    middleware = SearchSessionMiddleware(registry, i18n)
    seen = {}

    async def handler(event, data):
        seen.update(data)
        return "ok"

    result = await middleware(handler, DummyMessage(chat_id=42), {})

    assert result == "ok"
    assert seen["catalog"] is catalog
    assert seen["i18n"] is i18n
    assert seen["search"] is registry.get(42)

    seen.clear()
    await middleware(handler, SimpleNamespace(), {})
    assert "search" not in seen
    assert seen["catalog"] is catalog


@pytest.mark.asyncio
async def test_search_session_middleware_records_user_locale(manual_scheduler):
    registry = SearchSessionRegistry(
        SimpleNamespace(),
        _noop_notifier,
        scheduler_factory=lambda: manual_scheduler,
    )
    middleware = SearchSessionMiddleware(registry, I18nService())

    async def handler(event, data):
        return data["search"]

    message = DummyMessage(from_user=DummyFromUser(language_code="de"), chat_id=7)
    controller = await middleware(handler, message, {})

    assert controller is registry.get(7)
    assert registry.locale_for(7) == "de"
