"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession

from photo_search.bot.error_monitor import ErrorMonitor
from photo_search.bot.middlewares import SearchContextMiddleware, ThrottleMiddleware
from photo_search.bot.registry import SessionRegistry
from photo_search.bot.routers import setup_routers
from photo_search.config import get_settings
from photo_search.i18n import I18nService
from photo_search.logging import configure_logging, logger
from photo_search.services.flickr import FlickrPhotoClient


async def main() -> None:
    configure_logging()
    settings = get_settings()
    if settings.flickr.api_key is None:
        logger.warning("flickr_api_key_missing")

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(token=settings.telegram_token.get_secret_value(), session=session)
    dp = Dispatcher()
    dp.include_router(setup_routers())
    dp.errors.register(ErrorMonitor(settings=settings))

    http_client = httpx.AsyncClient()
    registry = SessionRegistry(FlickrPhotoClient(http_client, settings=settings.flickr))

    throttle_middleware = ThrottleMiddleware(settings)
    search_context_middleware = SearchContextMiddleware(registry)
    dp.message.middleware(throttle_middleware)
    dp.callback_query.middleware(throttle_middleware)
    # Inline queries fire on every keystroke, so they are not throttled.
    for observer in (dp.message, dp.callback_query, dp.inline_query):
        observer.middleware(search_context_middleware)

    i18n = I18nService(default_locale=settings.default_language)
    logger.info("bot_starting", environment=settings.environment)
    try:
        await dp.start_polling(bot, settings=settings, i18n=i18n)
    finally:
        registry.close_all()
        await http_client.aclose()
        logger.info("bot_stopped")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
