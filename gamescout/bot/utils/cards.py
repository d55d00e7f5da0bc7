"""Render catalog data as Telegram HTML messages."""

from __future__ import annotations

from datetime import date
from html import escape
from typing import Iterable, Sequence

from gamescout.domain.models import PLATFORMS, GameDetail, GameSummary
from gamescout.i18n import I18nService
from gamescout.services.search_controller import SearchSnapshot, SearchUpdate
from gamescout.utils.sanitize import to_telegram_html

SORT_FIELDS = (("rating", "Rating"), ("released", "Release Date"))
DESCRIPTION_CHAR_LIMIT = 1500


def format_release_date(released: str | None) -> str | None:
    """Format ``2023-10-31`` as ``Oct 31, 2023``."""

    if not released:
        return None
    try:
        parsed = date.fromisoformat(released)
    except ValueError:
        return released
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_rating(rating: float | None) -> str | None:
    if not rating:
        return None
    return f"{float(rating):.1f}"


def ordering_label(ordering: str) -> str:
    descending = ordering.startswith("-")
    field = ordering.lstrip("-")
    label = dict(SORT_FIELDS).get(field, field)
    return f"{label} ({'desc' if descending else 'asc'})"


def render_card(game: GameSummary, i18n: I18nService, locale: str | None = None) -> str:
    name = game.name or i18n.gettext("card.untitled", locale=locale)
    rating = format_rating(game.rating) or i18n.gettext("card.not_rated", locale=locale)
    released = format_release_date(game.released) or i18n.gettext(
        "card.release_tba", locale=locale
    )
    return "\n".join(
        [
            f"<b>{escape(name)}</b>",
            f"★ {escape(rating)} · {escape(released)}",
            f"/game_{game.id}",
        ]
    )


def render_cards(games: Iterable[GameSummary], i18n: I18nService, locale: str | None = None) -> str:
    return "\n\n".join(render_card(game, i18n, locale) for game in games)


def render_search_update(
    update: SearchUpdate, i18n: I18nService, locale: str | None = None
) -> str:
    snapshot = update.snapshot
    if snapshot.error:
        return escape(i18n.gettext("search.error", locale=locale, error=snapshot.error))
    if snapshot.loading:
        return escape(i18n.gettext("search.loading", locale=locale))
    if not snapshot.games:
        return escape(i18n.gettext("search.empty", locale=locale))

    if update.appended:
        header = i18n.gettext(
            "search.more_header", locale=locale, page=snapshot.page, shown=len(snapshot.games)
        )
        games: Sequence[GameSummary] = update.new_games
    else:
        header = i18n.gettext("search.header", locale=locale, shown=len(snapshot.games))
        games = snapshot.games

    parts = [escape(header), render_cards(games, i18n, locale)]
    if snapshot.has_more:
        parts.append(escape(i18n.gettext("search.more_hint", locale=locale)))
    return "\n\n".join(part for part in parts if part)


def render_detail(
    detail: GameDetail,
    images: Sequence[str],
    i18n: I18nService,
    locale: str | None = None,
) -> str:
    lines = [f"<b>{escape(detail.name or i18n.gettext('card.untitled', locale=locale))}</b>"]
    rating = format_rating(detail.rating)
    if rating:
        lines.append(f"★ {rating}")
    released = format_release_date(detail.released)
    if released:
        lines.append(escape(i18n.gettext("detail.released", locale=locale, date=released)))
    if detail.genres:
        lines.append(
            escape(i18n.gettext("detail.genres", locale=locale, genres=", ".join(detail.genres)))
        )
    if detail.developers:
        lines.append(
            escape(
                i18n.gettext("detail.developers", locale=locale, names=", ".join(detail.developers))
            )
        )
    if detail.publishers:
        lines.append(
            escape(
                i18n.gettext("detail.publishers", locale=locale, names=", ".join(detail.publishers))
            )
        )
    if images:
        lines.append(escape(i18n.gettext("detail.screenshots", locale=locale, count=len(images))))

    description = to_telegram_html(detail.description, limit=DESCRIPTION_CHAR_LIMIT)
    if description:
        lines.extend(["", f"<b>{escape(i18n.gettext('detail.about', locale=locale))}</b>", description])
    if detail.website:
        url = escape(detail.website, quote=True)
        link = f'<a href="{url}">{escape(detail.website)}</a>'
        lines.extend(["", i18n.gettext("detail.website", locale=locale, url=link)])
    return "\n".join(lines)


def render_platforms(
    selected: Iterable[int], i18n: I18nService, locale: str | None = None
) -> str:
    chosen = set(selected)
    lines = [escape(i18n.gettext("platforms.header", locale=locale))]
    for platform in PLATFORMS:
        mark = "✓" if platform.id in chosen else "·"
        lines.append(f"{mark} {escape(platform.label)} ({platform.name.lower()}, id {platform.id})")
    lines.append(escape(i18n.gettext("platforms.usage", locale=locale)))
    return "\n".join(lines)


def render_sort_options(current: str, i18n: I18nService, locale: str | None = None) -> str:
    lines = [escape(i18n.gettext("sort.header", locale=locale, current=ordering_label(current)))]
    for field, _label in SORT_FIELDS:
        for ordering in (f"-{field}", field):
            mark = "✓" if ordering == current else "·"
            lines.append(f"{mark} /sort {ordering} - {escape(ordering_label(ordering))}")
    return "\n".join(lines)


def describe_platforms(snapshot: SearchSnapshot, i18n: I18nService, locale: str | None = None) -> str:
    names = [platform.label for platform in PLATFORMS if platform.id in snapshot.platform_ids]
    return ", ".join(names) if names else i18n.gettext("platforms.any", locale=locale)


__all__ = [
    "describe_platforms",
    "format_rating",
    "format_release_date",
    "ordering_label",
    "render_card",
    "render_cards",
    "render_detail",
    "render_platforms",
    "render_search_update",
    "render_sort_options",
]
