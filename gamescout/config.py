"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RawgSettings(BaseModel):
    api_key: SecretStr | None = None
    base_url: AnyHttpUrl = Field(default="https://api.rawg.io/api")
    request_timeout_seconds: int = Field(default=10, ge=1, le=60)

    @field_validator("api_key", mode="before")
    @classmethod
    def _empty_key_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CacheSettings(BaseModel):
    ttl_seconds: float = Field(default=300.0, gt=0)
    search_capacity: int = Field(default=50, ge=1)
    detail_capacity: int = Field(default=100, ge=1)
    image_capacity: int = Field(default=100, ge=1)


class SearchSettings(BaseModel):
    debounce_seconds: float = Field(default=0.3, ge=0)
    page_size: int = Field(default=20, ge=1, le=40)
    max_sessions: int = Field(default=1000, ge=1)


class RequestLimitSettings(BaseModel):
    max_requests: int = Field(default=5, ge=0)
    interval_seconds: int = Field(default=10, ge=1)


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GAMESCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    telegram_token: SecretStr | None = None
    telegram_proxy: str | None = None
    default_language: str = "en"
    admin_telegram_id: int | None = None

    rawg: RawgSettings = Field(default_factory=RawgSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    request_limit: RequestLimitSettings = Field(default_factory=RequestLimitSettings)


@lru_cache
def get_settings() -> BotSettings:
    """Return cached settings instance."""

    return BotSettings()


__all__ = [
    "BotSettings",
    "CacheSettings",
    "RawgSettings",
    "RequestLimitSettings",
    "SearchSettings",
    "get_settings",
]
