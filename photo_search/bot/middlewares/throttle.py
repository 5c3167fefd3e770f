"""Simple per-user throttle to prevent rapid-fire searches."""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any, Awaitable, Callable, Deque, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from photo_search.config import PhotoBotSettings, get_settings
from photo_search.i18n import I18nService


class ThrottleMiddleware(BaseMiddleware):
    def __init__(self, settings: PhotoBotSettings | None = None) -> None:
        self.settings = settings or get_settings()
        self.window_seconds = self.settings.request_limit.interval_seconds
        self.max_requests = self.settings.request_limit.max_requests
        self.i18n = I18nService(default_locale=self.settings.default_language)
        self._events: Dict[int, Deque[float]] = defaultdict(deque)

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        from_user = getattr(event, "from_user", None)
        if from_user is None or self.max_requests <= 0:
            return await handler(event, data)

        now = time.monotonic()
        bucket = self._events[from_user.id]

        while bucket and now - bucket[0] > self.window_seconds:
            bucket.popleft()

        if len(bucket) >= self.max_requests:
            await self._notify_limit(event, getattr(from_user, "language_code", None))
            return None

        bucket.append(now)
        return await handler(event, data)

    async def _notify_limit(self, event: TelegramObject, locale: str | None) -> None:
        text = self.i18n.gettext("throttle.too_many", locale=locale)
        if isinstance(event, Message):
            await event.answer(text, parse_mode=None)
        elif isinstance(event, CallbackQuery):
            await event.answer(text, show_alert=False)


__all__ = ["ThrottleMiddleware"]
