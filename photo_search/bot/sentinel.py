"""Telegram stand-in for a viewport visibility observer.

A results message shows a "Load more" button only while its sentinel is
observed; pressing the button is the moment the sentinel scrolls into view.
"""

from __future__ import annotations

from typing import Hashable

from photo_search.services.scroll import VisibilityCallback

LOAD_MORE = "more"


class ButtonSentinel:
    def __init__(self) -> None:
        self._callbacks: dict[Hashable, VisibilityCallback] = {}

    def observe(self, sentinel: Hashable, callback: VisibilityCallback) -> None:
        self._callbacks[sentinel] = callback

    def unobserve(self, sentinel: Hashable) -> None:
        self._callbacks.pop(sentinel, None)

    def is_observed(self, sentinel: Hashable = LOAD_MORE) -> bool:
        return sentinel in self._callbacks

    async def press(self, sentinel: Hashable = LOAD_MORE) -> bool:
        callback = self._callbacks.get(sentinel)
        if callback is None:
            return False
        return bool(await callback(True))


__all__ = ["ButtonSentinel", "LOAD_MORE"]
