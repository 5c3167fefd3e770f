"""Flickr `photos.search` client."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from photo_search.config import FlickrSettings
from photo_search.domain.models import Photo, PhotoSearchResponse
from photo_search.logging import logger
from photo_search.services.exceptions import ConfigurationError, NetworkFailure
from photo_search.utils.retry import retry_async

SEARCH_METHOD = "flickr.photos.search"


class FlickrPhotoClient:
    """Fetch one page of photo records for a free-text query."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: FlickrSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or FlickrSettings()

    @property
    def image_host(self) -> str:
        return self._settings.image_host

    def build_params(self, query: str, page: int) -> dict[str, Any]:
        api_key = self._settings.api_key
        if api_key is None:
            raise ConfigurationError("Flickr API key is not configured.")

        # The query goes out verbatim, including the empty string.
        params: dict[str, Any] = {
            "method": SEARCH_METHOD,
            "api_key": api_key.get_secret_value(),
            "text": query,
            "safe_search": self._settings.safe_search,
            "format": "json",
            "nojsoncallback": 1,
            "page": page,
        }
        if self._settings.per_page is not None:
            params["per_page"] = self._settings.per_page
        return params

    async def search_photos(self, query: str, page: int = 1) -> list[Photo]:
        params = self.build_params(query, page)

        async def _request() -> httpx.Response:
            response = await self._client.get(
                str(self._settings.endpoint),
                params=params,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
            return response

        try:
            response = await retry_async(
                _request,
                max_attempts=self._settings.max_attempts,
                base_delay=0.5,
                retry_on=(httpx.TransportError,),
                logger=logger,
                operation_name="flickr_photos_search",
            )
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:500] if exc.response is not None else str(exc)
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            raise NetworkFailure(f"Flickr request failed ({status_code}): {detail}") from exc
        except httpx.RequestError as exc:
            raise NetworkFailure(f"Flickr request failed: {exc}") from exc

        try:
            payload = PhotoSearchResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise NetworkFailure(f"Malformed Flickr response: {exc.error_count()} errors") from exc

        if payload.stat != "ok" or payload.photos is None:
            raise NetworkFailure(
                f"Flickr returned stat={payload.stat!r} ({payload.code}): {payload.message or 'no photos'}"
            )

        logger.debug(
            "flickr_page_fetched",
            query=query,
            page=page,
            count=len(payload.photos.photo),
            pages=payload.photos.pages,
        )
        return list(payload.photos.photo)


__all__ = ["FlickrPhotoClient", "SEARCH_METHOD"]
