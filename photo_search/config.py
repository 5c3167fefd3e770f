"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlickrSettings(BaseModel):
    api_key: SecretStr | None = None
    endpoint: HttpUrl = Field(default="https://www.flickr.com/services/rest/")
    image_host: str = Field(
        default="live.staticflickr.com",
        description="Host serving photo files as /<server>/<id>_<secret>.jpg.",
    )
    safe_search: int = Field(default=1, ge=1, le=3)
    per_page: int | None = Field(default=None, ge=1, le=500)
    request_timeout_seconds: float | None = Field(
        default=None,
        description="None keeps requests unbounded.",
    )
    max_attempts: int = Field(default=1, ge=1, le=5)

    @field_validator("image_host", mode="before")
    @classmethod
    def _strip_scheme(cls, value):
        if isinstance(value, str):
            value = value.strip().removeprefix("https://").removeprefix("http://")
            return value.rstrip("/")
        return value


class RequestLimitSettings(BaseModel):
    max_requests: int = Field(default=5, ge=1)
    interval_seconds: int = Field(default=10, ge=1)


class PhotoBotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PHOTOBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    default_language: str = "en"
    admin_telegram_id: int | None = None
    results_page_size: int = Field(default=10, ge=1, le=50)

    flickr: FlickrSettings = Field(default_factory=FlickrSettings)
    request_limit: RequestLimitSettings = Field(default_factory=RequestLimitSettings)


@lru_cache
def get_settings() -> PhotoBotSettings:
    """Return cached settings instance."""

    return PhotoBotSettings()  # type: ignore[call-arg]


__all__ = [
    "FlickrSettings",
    "PhotoBotSettings",
    "RequestLimitSettings",
    "get_settings",
]
