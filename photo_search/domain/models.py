"""Pydantic models for Flickr search payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_IMAGE_HOST = "live.staticflickr.com"


class Photo(BaseModel):
    """One search hit; only the fields needed to build its image URL."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    server: str
    secret: str
    title: str = ""

    @field_validator("id", "server", mode="before")
    @classmethod
    def _coerce_str(cls, value):
        # Flickr sends these as strings, but older payloads used integers.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def image_url(self, host: str = DEFAULT_IMAGE_HOST) -> str:
        return f"https://{host}/{self.server}/{self.id}_{self.secret}.jpg"


class PhotoPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: int | None = None
    pages: int | None = None
    photo: list[Photo]


class PhotoSearchResponse(BaseModel):
    """Top-level `flickr.photos.search` JSON body."""

    model_config = ConfigDict(extra="ignore")

    stat: str = "ok"
    photos: PhotoPage | None = None
    code: int | None = None
    message: str | None = None


__all__ = [
    "DEFAULT_IMAGE_HOST",
    "Photo",
    "PhotoPage",
    "PhotoSearchResponse",
]
