"""Middleware that injects the chat's search session into handlers."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, InlineQuery, TelegramObject

from photo_search.bot.registry import SessionRegistry


class SearchContextMiddleware(BaseMiddleware):
    def __init__(self, registry: SessionRegistry) -> None:
        super().__init__()
        self.registry = registry

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        chat_id = self._extract_chat_id(event)
        if chat_id is None:
            return await handler(event, data)

        data["search"] = self.registry.get(chat_id)
        from_user = getattr(event, "from_user", None)
        data["locale"] = getattr(from_user, "language_code", None)
        return await handler(event, data)

    @staticmethod
    def _extract_chat_id(event: TelegramObject) -> int | None:
        # Inline queries carry no chat; the user's private chat shares their id.
        if isinstance(event, InlineQuery):
            return event.from_user.id
        if isinstance(event, CallbackQuery):
            if event.message is not None:
                return event.message.chat.id
            return event.from_user.id
        chat = getattr(event, "chat", None)
        if chat is not None:
            return chat.id
        return None


__all__ = ["SearchContextMiddleware"]
