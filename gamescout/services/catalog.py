"""RAWG catalog client with per-resource response caches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from gamescout.config import CacheSettings, RawgSettings
from gamescout.domain.models import GameDetail, GameSummary, SearchCriteria, SearchResultPage
from gamescout.logging import logger
from gamescout.services.cache import TimedCache
from gamescout.services.exceptions import (
    ConfigError,
    InvalidArgument,
    NetworkError,
    ProviderError,
    ResponseParseError,
)

GameId = int | str


@dataclass(slots=True)
class CatalogCaches:
    search: TimedCache[str, SearchResultPage] = field(default_factory=lambda: TimedCache(50))
    details: TimedCache[GameId, GameDetail] = field(default_factory=TimedCache)
    images: TimedCache[GameId, tuple[str, ...]] = field(default_factory=TimedCache)

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> "CatalogCaches":
        return cls(
            search=TimedCache(settings.search_capacity, settings.ttl_seconds),
            details=TimedCache(settings.detail_capacity, settings.ttl_seconds),
            images=TimedCache(settings.image_capacity, settings.ttl_seconds),
        )

    def clear(self) -> None:
        self.search.clear()
        self.details.clear()
        self.images.clear()


class CatalogClient:
    """Search, detail and screenshot lookups against the RAWG API.

    Every call checks its cache first and stores the normalized response on a
    miss. Failures are raised to the caller unchanged; nothing is retried here.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: RawgSettings | None = None,
        caches: CatalogCaches | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or RawgSettings()
        self._caches = caches or CatalogCaches()

    @property
    def caches(self) -> CatalogCaches:
        return self._caches

    async def search(self, criteria: SearchCriteria) -> SearchResultPage:
        cache_key = criteria.cache_key()
        cached = self._caches.search.get(cache_key)
        if cached is not None:
            logger.debug("catalog_cache_hit", resource="search", key=cache_key)
            return cached

        data = await self._get_json("/games", criteria.query_params(), operation="search")
        raw_results = data.get("results")
        try:
            results = tuple(
                GameSummary.from_payload(item)
                for item in (raw_results if isinstance(raw_results, list) else [])
            )
            page = SearchResultPage(
                count=data.get("count") or len(results),
                next=data.get("next") or None,
                previous=data.get("previous") or None,
                results=results,
            )
        except (ValidationError, TypeError, AttributeError) as exc:
            raise ResponseParseError(f"Unexpected search payload: {exc}") from exc

        self._caches.search.set(cache_key, page)
        logger.info(
            "catalog_search_fetched",
            text=criteria.text,
            page=criteria.page,
            results=len(results),
            has_more=page.has_more,
        )
        return page

    async def get_details(self, game_id: GameId) -> GameDetail:
        self._require_id(game_id)
        cached = self._caches.details.get(game_id)
        if cached is not None:
            logger.debug("catalog_cache_hit", resource="details", key=game_id)
            return cached

        data = await self._get_json(f"/games/{_quote_id(game_id)}", operation="details")
        try:
            detail = GameDetail.from_payload(data)
        except ValidationError as exc:
            raise ResponseParseError(f"Unexpected detail payload: {exc}") from exc

        self._caches.details.set(game_id, detail)
        return detail

    async def get_images(self, game_id: GameId) -> tuple[str, ...]:
        self._require_id(game_id)
        cached = self._caches.images.get(game_id)
        if cached is not None:
            logger.debug("catalog_cache_hit", resource="images", key=game_id)
            return cached

        data = await self._get_json(
            f"/games/{_quote_id(game_id)}/screenshots", operation="images"
        )
        results = data.get("results")
        images = tuple(
            item["image"]
            for item in (results if isinstance(results, list) else [])
            if isinstance(item, dict) and item.get("image")
        )
        self._caches.images.set(game_id, images)
        return images

    def clear_caches(self) -> None:
        self._caches.clear()

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        operation: str,
    ) -> dict[str, Any]:
        api_key = self._api_key()
        url = f"{str(self._settings.base_url).rstrip('/')}{path}"
        query = dict(params or {})
        query["key"] = api_key

        try:
            response = await self._client.get(
                url,
                params=query,
                timeout=self._settings.request_timeout_seconds,
            )
        except httpx.RequestError as exc:
            logger.warning("catalog_request_failed", operation=operation, error=str(exc))
            raise NetworkError(f"Catalog request failed: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "catalog_provider_error",
                operation=operation,
                status=response.status_code,
            )
            raise ProviderError(response.status_code, response.reason_phrase, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseParseError("Catalog response is not valid JSON.") from exc
        if not isinstance(data, dict):
            raise ResponseParseError("Catalog response format is invalid.")
        return data

    def _api_key(self) -> str:
        secret = self._settings.api_key
        value = secret.get_secret_value() if secret else ""
        if not value:
            raise ConfigError("Missing RAWG API key. Set GAMESCOUT_RAWG__API_KEY.")
        return value

    @staticmethod
    def _require_id(game_id: GameId) -> None:
        if not game_id:
            raise InvalidArgument("game_id is required")


def _quote_id(game_id: GameId) -> str:
    return quote(str(game_id), safe="")


__all__ = ["CatalogCaches", "CatalogClient", "GameId"]
