"""HTML allow-list sanitizing for provider-supplied rich text."""

from __future__ import annotations

import html
import re

import nh3

ALLOWED_TAGS = frozenset({"p", "b", "i", "em", "strong", "a", "ul", "li", "br"})
ALLOWED_ATTRIBUTES = frozenset({"href", "target", "rel"})

# Subset understood by Telegram's HTML parse mode.
TELEGRAM_TAGS = frozenset({"b", "i", "em", "strong", "a"})

_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PARAGRAPH_END_RE = re.compile(r"</p\s*>", re.IGNORECASE)
_LIST_ITEM_RE = re.compile(r"<li(\s[^>]*)?>", re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def sanitize(raw_html: str | None) -> str:
    if not raw_html:
        return ""
    return nh3.clean(
        raw_html,
        tags=set(ALLOWED_TAGS),
        attributes={"a": set(ALLOWED_ATTRIBUTES)},
        link_rel=None,
    )


def to_telegram_html(raw_html: str | None, limit: int = 1500) -> str:
    """Sanitize ``raw_html`` and reduce it to markup Telegram can render.

    Text longer than ``limit`` is returned as escaped plain text, cut at the
    limit, so a truncation never splits a tag.
    """

    safe = sanitize(raw_html)
    if not safe:
        return ""
    flattened = _BREAK_RE.sub("\n", safe)
    flattened = _PARAGRAPH_END_RE.sub("\n\n", flattened)
    flattened = _LIST_ITEM_RE.sub("\n• ", flattened)
    rendered = nh3.clean(
        flattened,
        tags=set(TELEGRAM_TAGS),
        attributes={"a": {"href"}},
        link_rel=None,
    )
    rendered = _BLANK_LINES_RE.sub("\n\n", rendered).strip()
    if len(rendered) <= limit:
        return rendered

    plain = html.unescape(nh3.clean(rendered, tags=set()))
    return html.escape(f"{plain[: max(limit - 3, 0)].rstrip()}...", quote=False)


__all__ = ["ALLOWED_ATTRIBUTES", "ALLOWED_TAGS", "sanitize", "to_telegram_html"]
