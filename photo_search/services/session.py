"""Per-chat search session: the store around the search reducer."""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from structlog.typing import FilteringBoundLogger

from photo_search.domain.models import Photo
from photo_search.domain.state import (
    FetchFailed,
    InputChanged,
    PageLoaded,
    PageRequested,
    PhotoClosed,
    PhotoOpened,
    SearchEvent,
    SearchStarted,
    SearchState,
    reduce,
)
from photo_search.logging import logger
from photo_search.services.exceptions import NetworkFailure, PhotoNotFound
from photo_search.services.history import SearchHistory

StateListener = Callable[[SearchState], None]


class PhotoFetcher(Protocol):
    async def search_photos(self, query: str, page: int = 1) -> Sequence[Photo]:
        ...


class PhotoSearchSession:
    """Owns the query, results, pagination cursor and history of one user.

    All mutations go through `dispatch`, which runs the reducer and notifies
    listeners synchronously. Network calls are awaited between two dispatches,
    so the reset done by `start_search` is visible before the fetch begins.
    """

    def __init__(
        self,
        fetcher: PhotoFetcher,
        history: SearchHistory | None = None,
        *,
        state: SearchState | None = None,
    ) -> None:
        self._fetcher = fetcher
        self.history = history if history is not None else SearchHistory()
        self._state = state or SearchState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SearchState:
        return self._state

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: SearchEvent) -> SearchState:
        previous = self._state
        self._state = reduce(previous, event)
        if self._state is not previous:
            for listener in list(self._listeners):
                listener(self._state)
        return self._state

    def set_input(self, text: str) -> list[str]:
        suggestions = self.history.suggest(text)
        self.dispatch(InputChanged(text=text, suggestions=tuple(suggestions)))
        return suggestions

    async def start(self) -> SearchState:
        """Initial search issued when the session is first opened."""

        return await self.start_search(self._state.query)

    async def search_from_history(self, query: str) -> SearchState:
        self.set_input(query)
        return await self.start_search(query)

    async def start_search(self, query: str | None = None) -> SearchState:
        if query is None:
            query = self._state.query
        generation = self.dispatch(SearchStarted(query=query)).generation
        log = logger.bind(query=query, page=1, generation=generation)

        photos = await self._fetch(query, 1, generation, log)
        if photos is None:
            return self._state

        if generation != self._state.generation:
            log.info("photo_search_superseded", current_generation=self._state.generation)
            return self._state

        self.dispatch(PageLoaded(generation=generation, page=1, photos=tuple(photos), top_level=True))
        self.history.record(query)
        log.info("photo_search_completed", count=len(photos))
        return self._state

    async def load_next_page(self) -> bool:
        """Fetch and append the next page; False when no fetch was issued."""

        state = self._state
        if not state.can_load_more:
            logger.debug(
                "photo_page_skipped",
                query=state.active_query,
                has_more=state.has_more,
                loading=state.loading,
            )
            return False

        next_page = state.page + 1
        state = self.dispatch(PageRequested())
        generation = state.generation
        log = logger.bind(query=state.active_query, page=next_page, generation=generation)

        photos = await self._fetch(state.active_query, next_page, generation, log)
        if photos is None:
            return True

        if generation != self._state.generation:
            log.info("photo_page_superseded", current_generation=self._state.generation)
            return True

        self.dispatch(PageLoaded(generation=generation, page=next_page, photos=tuple(photos)))
        if photos:
            log.info("photo_page_loaded", count=len(photos), total=len(self._state.photos))
        else:
            log.info("photo_results_exhausted", total=len(self._state.photos))
        return True

    def open_photo(self, photo_id: str) -> Photo:
        photo = self._state.find_photo(photo_id)
        if photo is None:
            raise PhotoNotFound(f"Photo {photo_id} is not in the current results.")
        self.dispatch(PhotoOpened(photo=photo))
        return photo

    def close_photo(self) -> None:
        self.dispatch(PhotoClosed())

    async def _fetch(self, query: str, page: int, generation: int, log: FilteringBoundLogger) -> Sequence[Photo] | None:
        try:
            return await self._fetcher.search_photos(query, page)
        except NetworkFailure as exc:
            log.warning("photo_search_failed", error=str(exc))
            self.dispatch(FetchFailed(generation=generation))
            return None
        except Exception:
            self.dispatch(FetchFailed(generation=generation))
            raise


__all__ = ["PhotoFetcher", "PhotoSearchSession", "StateListener"]
