"""Infinite-scroll coordination between a visibility source and a session."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Hashable, Protocol

from photo_search.domain.state import SearchState
from photo_search.services.session import PhotoSearchSession

VisibilityCallback = Callable[[bool], Awaitable[Any]]


class VisibilityObserver(Protocol):
    def observe(self, sentinel: Hashable, callback: VisibilityCallback) -> None:
        ...

    def unobserve(self, sentinel: Hashable) -> None:
        ...


class ScrollTrigger:
    """Keep the sentinel observed only while another page may be requested.

    The session's `loading` flag is the re-entrancy guard: it is checked before
    subscribing and again before firing, so a second page is never requested
    while one is outstanding.
    """

    def __init__(
        self,
        session: PhotoSearchSession,
        observer: VisibilityObserver,
        sentinel: Hashable,
    ) -> None:
        self._session = session
        self._observer = observer
        self._sentinel = sentinel
        self._closed = False
        self.observing = False
        session.add_listener(self.sync)
        self.sync(session.state)

    def sync(self, state: SearchState | None = None) -> None:
        state = state or self._session.state
        wanted = state.can_load_more and not self._closed
        if wanted and not self.observing:
            self._observer.observe(self._sentinel, self.on_visibility)
            self.observing = True
        elif not wanted and self.observing:
            self._observer.unobserve(self._sentinel)
            self.observing = False

    async def on_visibility(self, is_intersecting: bool) -> bool:
        if not is_intersecting or self._closed:
            return False
        if not self._session.state.can_load_more:
            return False
        return await self._session.load_next_page()

    def close(self) -> None:
        self._closed = True
        self._session.remove_listener(self.sync)
        if self.observing:
            self._observer.unobserve(self._sentinel)
            self.observing = False


__all__ = ["ScrollTrigger", "VisibilityCallback", "VisibilityObserver"]
