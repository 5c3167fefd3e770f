"""Shared pytest fixtures for search session tests."""

from __future__ import annotations

import asyncio
from typing import Callable

import pytest

from photo_search.domain.models import Photo


class FakeFetcher:
    """Scripted stand-in for the Flickr client.

    `pages` maps (query, page) to a list of photos or an exception to raise.
    `hold` returns an event the matching request waits on before answering.
    """

    def __init__(self) -> None:
        self.pages: dict[tuple[str, int], list[Photo] | Exception] = {}
        self.calls: list[tuple[str, int]] = []
        self._gates: dict[tuple[str, int], asyncio.Event] = {}

    def hold(self, query: str, page: int) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[(query, page)] = gate
        return gate

    async def search_photos(self, query: str, page: int = 1) -> list[Photo]:
        self.calls.append((query, page))
        gate = self._gates.get((query, page))
        if gate is not None:
            await gate.wait()
        result = self.pages.get((query, page), [])
        if isinstance(result, Exception):
            raise result
        return list(result)


def _make_photos(*ids: int) -> list[Photo]:
    return [
        Photo(id=str(photo_id), server="65535", secret=f"s{photo_id}", title=f"Photo {photo_id}")
        for photo_id in ids
    ]


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def make_photos() -> Callable[..., list[Photo]]:
    return _make_photos
