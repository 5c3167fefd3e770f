"""Per-chat search sessions kept for the lifetime of the process."""

from __future__ import annotations

from dataclasses import dataclass, field

from aiogram.types import InlineKeyboardMarkup

from photo_search.bot.sentinel import LOAD_MORE, ButtonSentinel
from photo_search.services.scroll import ScrollTrigger
from photo_search.services.session import PhotoFetcher, PhotoSearchSession

HISTORY_MENU_LIMIT = 20


@dataclass(slots=True)
class ChatSearch:
    session: PhotoSearchSession
    sentinel: ButtonSentinel
    trigger: ScrollTrigger
    # Message currently carrying the "Load more" button, if any.
    tail_message_id: int | None = None
    tail_markup: InlineKeyboardMarkup | None = None
    opened: bool = False
    # Suggestions shown by each /history message, keyed by message id.
    history_menus: dict[int, tuple[str, ...]] = field(default_factory=dict)

    @property
    def more_visible(self) -> bool:
        return self.trigger.observing and self.sentinel.is_observed(LOAD_MORE)

    def remember_history_menu(self, message_id: int, suggestions: tuple[str, ...]) -> None:
        self.history_menus[message_id] = suggestions
        while len(self.history_menus) > HISTORY_MENU_LIMIT:
            del self.history_menus[next(iter(self.history_menus))]


class SessionRegistry:
    def __init__(self, fetcher: PhotoFetcher) -> None:
        self._fetcher = fetcher
        self._chats: dict[int, ChatSearch] = {}

    def get(self, chat_id: int) -> ChatSearch:
        chat = self._chats.get(chat_id)
        if chat is None:
            session = PhotoSearchSession(self._fetcher)
            sentinel = ButtonSentinel()
            trigger = ScrollTrigger(session, sentinel, LOAD_MORE)
            chat = ChatSearch(session=session, sentinel=sentinel, trigger=trigger)
            self._chats[chat_id] = chat
        return chat

    def close(self, chat_id: int) -> None:
        chat = self._chats.pop(chat_id, None)
        if chat is not None:
            chat.trigger.close()

    def close_all(self) -> None:
        for chat_id in list(self._chats):
            self.close(chat_id)

    def __contains__(self, chat_id: int) -> bool:
        return chat_id in self._chats

    def __len__(self) -> int:
        return len(self._chats)


__all__ = ["ChatSearch", "SessionRegistry"]
