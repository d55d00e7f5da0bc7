"""Pydantic models shared across catalog/search/bot layers."""

from __future__ import annotations

import json
from typing import Any, Iterable, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

Ordering = Literal["-rating", "rating", "-released", "released"]

ORDERINGS: tuple[str, ...] = get_args(Ordering)
DEFAULT_ORDERING: Ordering = "-rating"
DEFAULT_PAGE_SIZE = 20


class Platform(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    label: str


# Platform ids as published by RAWG.
PLATFORMS: tuple[Platform, ...] = (
    Platform(id=4, name="PC", label="PC (Windows)"),
    Platform(id=187, name="PlayStation", label="PlayStation"),
    Platform(id=1, name="Xbox", label="Xbox"),
)


class SearchCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    platform_ids: frozenset[int] = frozenset()
    ordering: Ordering = DEFAULT_ORDERING
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=40)

    def cache_key(self) -> str:
        """Serialize every field deterministically; platform order never matters."""

        return json.dumps(
            {
                "text": self.text,
                "platforms": sorted(self.platform_ids),
                "ordering": self.ordering,
                "page": self.page,
                "page_size": self.page_size,
            },
            sort_keys=True,
            separators=(",", ":"),
        )

    def query_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "search": self.text or None,
            "ordering": self.ordering or None,
            "page": self.page,
            "page_size": self.page_size,
        }
        if self.platform_ids:
            params["platforms"] = ",".join(str(pid) for pid in sorted(self.platform_ids))
        return {key: value for key, value in params.items() if value not in (None, "")}


class GameSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str | None = None
    rating: float | None = None
    released: str | None = None
    background_image: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "GameSummary":
        return cls(**_summary_fields(data))


class GameDetail(GameSummary):
    description: str | None = None
    genres: tuple[str, ...] = ()
    website: str | None = None
    developers: tuple[str, ...] = ()
    publishers: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "GameDetail":
        fields = _summary_fields(data)
        fields["name"] = data.get("name") or None
        return cls(
            **fields,
            description=data.get("description") or data.get("description_raw") or None,
            genres=_names(data.get("genres")),
            website=data.get("website") or None,
            developers=_names(data.get("developers")),
            publishers=_names(data.get("publishers")),
        )


class SearchResultPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: tuple[GameSummary, ...] = ()

    @property
    def has_more(self) -> bool:
        return bool(self.next)


def _summary_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": data.get("id"),
        "name": data.get("name") or data.get("title") or None,
        "rating": data.get("rating"),
        "released": data.get("released") or None,
        "background_image": data.get("background_image") or None,
    }


def _names(items: Iterable[Any] | None) -> tuple[str, ...]:
    if not isinstance(items, list):
        return ()
    return tuple(
        item["name"] for item in items if isinstance(item, dict) and item.get("name")
    )


__all__ = [
    "DEFAULT_ORDERING",
    "DEFAULT_PAGE_SIZE",
    "GameDetail",
    "GameSummary",
    "ORDERINGS",
    "Ordering",
    "PLATFORMS",
    "Platform",
    "SearchCriteria",
    "SearchResultPage",
]
