"""Search state and the reducer that owns every transition.

A chat's search session is a `SearchState` value plus a stream of events.
`reduce` is pure: it never performs I/O and never mutates its input, so the
whole pagination state machine can be exercised without a network or a
rendering surface.

Each fetch is tagged with the `generation` that was current when it started.
Starting a new fetch bumps the generation; results or failures carrying an
older generation are ignored, so a top-level search always wins over a
pagination response that arrives late.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from photo_search.domain.models import Photo


@dataclass(frozen=True, slots=True)
class SearchState:
    query: str = ""
    active_query: str = ""
    photos: tuple[Photo, ...] = ()
    page: int = 1
    has_more: bool = True
    loading: bool = False
    failed: bool = False
    generation: int = 0
    selected: Photo | None = None
    suggestions: tuple[str, ...] = ()
    show_suggestions: bool = False

    @property
    def can_load_more(self) -> bool:
        return self.has_more and not self.loading

    def find_photo(self, photo_id: str) -> Photo | None:
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None


@dataclass(frozen=True, slots=True)
class SearchStarted:
    query: str


@dataclass(frozen=True, slots=True)
class PageRequested:
    pass


@dataclass(frozen=True, slots=True)
class PageLoaded:
    generation: int
    page: int
    photos: tuple[Photo, ...] = ()
    top_level: bool = False


@dataclass(frozen=True, slots=True)
class FetchFailed:
    generation: int


@dataclass(frozen=True, slots=True)
class InputChanged:
    text: str
    suggestions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PhotoOpened:
    photo: Photo


@dataclass(frozen=True, slots=True)
class PhotoClosed:
    pass


SearchEvent = Union[
    SearchStarted,
    PageRequested,
    PageLoaded,
    FetchFailed,
    InputChanged,
    PhotoOpened,
    PhotoClosed,
]


def reduce(state: SearchState, event: SearchEvent) -> SearchState:
    """Return the state that follows `event`."""

    if isinstance(event, SearchStarted):
        return replace(
            state,
            query=event.query,
            active_query=event.query,
            page=1,
            has_more=True,
            loading=True,
            failed=False,
            generation=state.generation + 1,
        )

    if isinstance(event, PageRequested):
        if not state.can_load_more:
            return state
        return replace(
            state,
            loading=True,
            failed=False,
            generation=state.generation + 1,
        )

    if isinstance(event, PageLoaded):
        if event.generation != state.generation:
            return state
        if event.top_level:
            return replace(state, photos=tuple(event.photos), page=1, loading=False)
        if not event.photos:
            # The page cursor stays put so a retry asks for the same page.
            return replace(state, has_more=False, loading=False)
        return replace(
            state,
            photos=state.photos + tuple(event.photos),
            page=event.page,
            loading=False,
        )

    if isinstance(event, FetchFailed):
        if event.generation != state.generation:
            return state
        return replace(state, loading=False, failed=True)

    if isinstance(event, InputChanged):
        return replace(
            state,
            query=event.text,
            suggestions=tuple(event.suggestions),
            show_suggestions=True,
        )

    if isinstance(event, PhotoOpened):
        return replace(state, selected=event.photo)

    if isinstance(event, PhotoClosed):
        return replace(state, selected=None)

    raise TypeError(f"Unsupported search event: {event!r}")


__all__ = [
    "FetchFailed",
    "InputChanged",
    "PageLoaded",
    "PageRequested",
    "PhotoClosed",
    "PhotoOpened",
    "SearchEvent",
    "SearchStarted",
    "SearchState",
    "reduce",
]
