"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

from aiogram.exceptions import TelegramNetworkError, TelegramRetryAfter
from aiogram.types import Message

from photo_search.logging import logger
from photo_search.utils.retry import retry_async

T = TypeVar("T")

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
RETRYABLE_ERRORS = (TelegramNetworkError, TelegramRetryAfter)


async def _with_retry(name: str, operation: Callable[[], Awaitable[T]]) -> T:
    return await retry_async(
        operation,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=RETRYABLE_ERRORS,
        logger=logger,
        operation_name=name,
    )


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a text reply with retry/backoff."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await _with_retry("telegram_answer", _send)


async def answer_photo_with_retry(message: Message, photo: str, **kwargs: Any) -> Any:
    """Send a photo (by URL) as a reply with retry/backoff."""

    async def _send():
        return await message.answer_photo(photo, **kwargs)

    return await _with_retry("telegram_answer_photo", _send)


async def bot_send_with_retry(bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot with retry/backoff."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await _with_retry("telegram_send_message", _send)


__all__ = ["answer_photo_with_retry", "answer_with_retry", "bot_send_with_retry"]
