"""Log unhandled bot errors and notify the administrator."""

from __future__ import annotations

import traceback

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update

from photo_search.bot.utils.telegram import bot_send_with_retry
from photo_search.config import PhotoBotSettings
from photo_search.logging import logger

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 2400

UPDATE_FIELDS = ("message", "callback_query", "inline_query", "edited_message")


class ErrorMonitor:
    """Async callable registered as the dispatcher's error observer."""

    def __init__(self, settings: PhotoBotSettings) -> None:
        self._settings = settings

    async def __call__(self, event: ErrorEvent, bot: Bot):
        return await self.handle_error(event, bot)

    async def handle_error(self, event: ErrorEvent, bot: Bot):
        update_id = getattr(event.update, "update_id", None)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=update_id,
            update_type=self._update_type(event.update),
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        try:
            await bot_send_with_retry(bot, chat_id=admin_id, text=self._build_message(event), parse_mode=None)
        except Exception:
            logger.exception("error_monitor_notification_failed", update_id=update_id)
        return UNHANDLED

    def _build_message(self, event: ErrorEvent) -> str:
        exception = event.exception
        lines = [
            "PHOTO BOT ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(event.update, 'update_id', 'unknown')}",
            f"Update Type: {self._update_type(event.update)}",
        ]
        trace = "".join(traceback.format_exception(exception.__class__, exception, exception.__traceback__)).strip()
        if trace:
            if len(trace) > TRACEBACK_CHAR_LIMIT:
                trace = f"...{trace[-TRACEBACK_CHAR_LIMIT:]}"
            lines.extend(["", "Traceback:", trace])

        text = "\n".join(lines)
        if len(text) > TELEGRAM_MESSAGE_LIMIT:
            text = f"{text[:TELEGRAM_MESSAGE_LIMIT - 15].rstrip()}\n...[truncated]"
        return text

    @staticmethod
    def _update_type(update: Update | None) -> str:
        if update is None:
            return "unknown"
        for field in UPDATE_FIELDS:
            if getattr(update, field, None) is not None:
                return field
        return "other"


__all__ = ["ErrorMonitor"]
