"""Telegram handlers for searching and browsing the game catalog."""

from __future__ import annotations

import asyncio
from html import escape

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandStart
from aiogram.types import LinkPreviewOptions, Message

from gamescout.bot.utils.cards import (
    describe_platforms,
    ordering_label,
    render_detail,
    render_platforms,
    render_sort_options,
)
from gamescout.bot.utils.telegram import answer_with_retry
from gamescout.domain.models import ORDERINGS, PLATFORMS
from gamescout.i18n import I18nService
from gamescout.logging import logger
from gamescout.services.catalog import CatalogClient
from gamescout.services.exceptions import ServiceError
from gamescout.services.search_controller import SearchController

router = Router()

CLEAR_PLATFORM_WORDS = {"all", "any", "none"}
GAME_LINK_PATTERN = r"^/game_(\d+)(?:@\w+)?$"


def _locale(message: Message) -> str | None:
    return getattr(message.from_user, "language_code", None)


def _argument(message: Message) -> str:
    parts = message.text.split(maxsplit=1) if message.text else []
    return parts[1].strip() if len(parts) > 1 else ""


def _resolve_platform(token: str) -> int | None:
    lowered = token.lower()
    for platform in PLATFORMS:
        if lowered in (platform.name.lower(), str(platform.id)):
            return platform.id
    return None


@router.message(CommandStart())
async def handle_start(message: Message, search: SearchController, i18n: I18nService) -> None:
    search.refresh()
    name = message.from_user.full_name if message.from_user else ""
    await answer_with_retry(
        message,
        i18n.gettext("start.greeting", locale=_locale(message), name=name),
        parse_mode=None,
    )


@router.message(Command("help"))
async def handle_help(message: Message, i18n: I18nService) -> None:
    await answer_with_retry(message, i18n.gettext("help.text", locale=_locale(message)), parse_mode=None)


@router.message(Command("search"))
async def handle_search(message: Message, search: SearchController, i18n: I18nService) -> None:
    await _apply_query(message, search, i18n, _argument(message))


@router.message(Command("platforms"))
async def handle_platforms(message: Message, search: SearchController, i18n: I18nService) -> None:
    locale = _locale(message)
    argument = _argument(message)
    if not argument:
        await answer_with_retry(
            message,
            render_platforms(search.state.platform_ids, i18n, locale),
            parse_mode=ParseMode.HTML,
        )
        return

    tokens = argument.replace(",", " ").split()
    platform_ids: list[int] = []
    if not CLEAR_PLATFORM_WORDS.intersection(token.lower() for token in tokens):
        for token in tokens:
            platform_id = _resolve_platform(token)
            if platform_id is None:
                await answer_with_retry(
                    message,
                    i18n.gettext("platforms.unknown", locale=locale, value=token),
                    parse_mode=None,
                )
                return
            platform_ids.append(platform_id)

    search.set_platforms(platform_ids)
    logger.info("search_platforms_set", platforms=sorted(platform_ids))
    await answer_with_retry(
        message,
        i18n.gettext(
            "platforms.updated",
            locale=locale,
            platforms=describe_platforms(search.state, i18n, locale),
        ),
        parse_mode=None,
    )


@router.message(Command("sort"))
async def handle_sort(message: Message, search: SearchController, i18n: I18nService) -> None:
    locale = _locale(message)
    ordering = _argument(message).lower()
    if not ordering:
        await answer_with_retry(
            message,
            render_sort_options(search.state.ordering, i18n, locale),
            parse_mode=ParseMode.HTML,
        )
        return
    if ordering not in ORDERINGS:
        await answer_with_retry(
            message,
            "\n\n".join(
                [
                    escape(i18n.gettext("sort.invalid", locale=locale, value=ordering)),
                    render_sort_options(search.state.ordering, i18n, locale),
                ]
            ),
            parse_mode=ParseMode.HTML,
        )
        return

    search.set_ordering(ordering)
    await answer_with_retry(
        message,
        i18n.gettext("sort.updated", locale=locale, label=ordering_label(ordering)),
        parse_mode=None,
    )


@router.message(Command("more"))
async def handle_more(message: Message, search: SearchController, i18n: I18nService) -> None:
    key = "search.loading" if search.load_more() else "more.unavailable"
    await answer_with_retry(message, i18n.gettext(key, locale=_locale(message)), parse_mode=None)


@router.message(Command("refresh"))
async def handle_refresh(message: Message, search: SearchController, i18n: I18nService) -> None:
    search.refresh()
    await answer_with_retry(message, i18n.gettext("search.pending", locale=_locale(message)), parse_mode=None)


@router.message(Command("game"))
async def handle_game(message: Message, catalog: CatalogClient, i18n: I18nService) -> None:
    await _show_game(message, catalog, i18n, _argument(message))


@router.message(F.text.regexp(GAME_LINK_PATTERN))
async def handle_game_link(message: Message, catalog: CatalogClient, i18n: I18nService) -> None:
    raw_id = message.text.removeprefix("/game_").split("@", 1)[0]
    await _show_game(message, catalog, i18n, raw_id)


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(message: Message, search: SearchController, i18n: I18nService) -> None:
    await _apply_query(message, search, i18n, message.text.strip())


async def _apply_query(
    message: Message, search: SearchController, i18n: I18nService, query: str
) -> None:
    key = "search.pending" if search.set_query(query) else "search.unchanged"
    await answer_with_retry(message, i18n.gettext(key, locale=_locale(message)), parse_mode=None)


async def _show_game(
    message: Message, catalog: CatalogClient, i18n: I18nService, raw_id: str
) -> None:
    locale = _locale(message)
    if not raw_id.isdigit() or int(raw_id) <= 0:
        await answer_with_retry(message, i18n.gettext("game.usage", locale=locale), parse_mode=None)
        return

    game_id = int(raw_id)
    detail, images = await asyncio.gather(
        catalog.get_details(game_id),
        catalog.get_images(game_id),
        return_exceptions=True,
    )
    failure = next((item for item in (detail, images) if isinstance(item, BaseException)), None)
    if failure is not None:
        if not isinstance(failure, ServiceError):
            raise failure
        logger.info("game_lookup_failed", game_id=game_id, error=str(failure))
        await answer_with_retry(
            message,
            i18n.gettext("game.error", locale=locale, error=str(failure)),
            parse_mode=None,
        )
        return

    await answer_with_retry(
        message,
        render_detail(detail, images, i18n, locale),
        parse_mode=ParseMode.HTML,
        link_preview_options=LinkPreviewOptions(is_disabled=True),
    )


__all__ = [
    "handle_game",
    "handle_game_link",
    "handle_help",
    "handle_more",
    "handle_platforms",
    "handle_refresh",
    "handle_search",
    "handle_sort",
    "handle_start",
    "handle_text",
    "router",
]
