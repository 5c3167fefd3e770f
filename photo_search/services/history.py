"""In-memory record of past queries and the suggestions derived from it."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator


class SearchHistory:
    """Most-recent-first list of submitted queries.

    Entries are never deduplicated or removed; repeating a search records it
    again at the front.
    """

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._entries: Deque[str] = deque(entries)

    def record(self, query: str) -> None:
        self._entries.appendleft(query)

    def suggest(self, text: str) -> list[str]:
        """Return entries containing `text`, ignoring case, newest first.

        An empty `text` matches everything, which is how the full history is
        offered once the input is cleared.
        """

        needle = text.lower()
        return [entry for entry in self._entries if needle in entry.lower()]

    @property
    def latest(self) -> str | None:
        return self._entries[0] if self._entries else None

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["SearchHistory"]
