"""Telegram handlers for searching, paging and viewing photos."""

from __future__ import annotations

from typing import Sequence

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import (
    CallbackQuery,
    InlineKeyboardMarkup,
    InlineQuery,
    InlineQueryResultArticle,
    InputTextMessageContent,
    Message,
)

from photo_search.bot.registry import ChatSearch
from photo_search.bot.sentinel import LOAD_MORE
from photo_search.bot.utils.telegram import answer_photo_with_retry, answer_with_retry
from photo_search.bot.views import (
    CLOSE,
    HISTORY_PREFIX,
    PHOTO_PREFIX,
    chunk_photos,
    history_keyboard,
    photo_keyboard,
    results_header,
    results_keyboard,
    strip_load_more,
)
from photo_search.config import PhotoBotSettings
from photo_search.domain.models import Photo
from photo_search.i18n import I18nService
from photo_search.logging import logger
from photo_search.services.exceptions import PhotoNotFound

router = Router()
INLINE_RESULT_LIMIT = 50


@router.message(CommandStart())
async def handle_start(
    message: Message,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    name = message.from_user.full_name if message.from_user else ""
    await answer_with_retry(
        message,
        i18n.gettext("start.greeting", locale=locale, name=name),
        parse_mode=None,
    )
    if search.opened:
        return
    search.opened = True
    # First open runs a search for the (still empty) input, like a page load.
    await _run_search(message, search, search.session.state.query, i18n=i18n, settings=settings, locale=locale, quiet=True)


@router.message(Command("help"))
async def handle_help(message: Message, i18n: I18nService, locale: str | None = None) -> None:
    await answer_with_retry(message, i18n.gettext("help.text", locale=locale), parse_mode=None)


@router.message(Command("search"))
async def handle_search_command(
    message: Message,
    command: CommandObject,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    await _run_search(message, search, command.args or "", i18n=i18n, settings=settings, locale=locale)


@router.message(Command("more"))
async def handle_more_command(
    message: Message,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    await _retire_tail(message, search)
    await _load_more(message, search, i18n=i18n, settings=settings, locale=locale)


@router.message(Command("history"))
async def handle_history(
    message: Message,
    command: CommandObject,
    search: ChatSearch,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    text = command.args or ""
    suggestions = search.session.set_input(text)
    if suggestions:
        reply = i18n.gettext("history.header", locale=locale)
    elif text and len(search.session.history):
        reply = i18n.gettext("history.none_matching", locale=locale, text=text)
    else:
        reply = i18n.gettext("history.empty", locale=locale)
    keyboard = history_keyboard(suggestions)
    sent = await answer_with_retry(message, reply, reply_markup=keyboard, parse_mode=None)
    if keyboard is not None and getattr(sent, "message_id", None) is not None:
        search.remember_history_menu(sent.message_id, tuple(suggestions))


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(
    message: Message,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    await _run_search(message, search, message.text, i18n=i18n, settings=settings, locale=locale)


@router.callback_query(F.data == LOAD_MORE)
async def handle_load_more(
    callback: CallbackQuery,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    await callback.answer()
    if callback.message is None:
        return
    await _retire_tail(callback.message, search, pressed=callback.message)
    await _load_more(callback.message, search, i18n=i18n, settings=settings, locale=locale)


@router.callback_query(F.data.startswith(PHOTO_PREFIX))
async def handle_open_photo(
    callback: CallbackQuery,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    photo_id = callback.data.removeprefix(PHOTO_PREFIX)
    try:
        photo = search.session.open_photo(photo_id)
    except PhotoNotFound:
        await callback.answer(i18n.gettext("photo.not_found", locale=locale), show_alert=True)
        return

    await callback.answer()
    if callback.message is None:
        return
    image_host = settings.flickr.image_host
    await answer_photo_with_retry(
        callback.message,
        photo.image_url(image_host),
        caption=photo.title or None,
        reply_markup=photo_keyboard(photo, image_host=image_host, i18n=i18n, locale=locale),
        parse_mode=None,
    )


@router.callback_query(F.data == CLOSE)
async def handle_close_photo(callback: CallbackQuery, search: ChatSearch) -> None:
    search.session.close_photo()
    await callback.answer()
    if callback.message is None:
        return
    try:
        await callback.message.delete()
    except TelegramBadRequest as exc:
        logger.debug("photo_message_delete_failed", error=str(exc))


@router.callback_query(F.data.startswith(HISTORY_PREFIX))
async def handle_history_pick(
    callback: CallbackQuery,
    search: ChatSearch,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None = None,
) -> None:
    message_id = callback.message.message_id if callback.message is not None else None
    suggestions = search.history_menus.get(message_id, ())
    raw_index = callback.data.removeprefix(HISTORY_PREFIX)
    if not raw_index.isdigit() or int(raw_index) >= len(suggestions):
        await callback.answer(i18n.gettext("history.expired", locale=locale), show_alert=True)
        return

    await callback.answer()
    if callback.message is None:
        return
    query = suggestions[int(raw_index)]
    await _run_search(
        callback.message,
        search,
        query,
        i18n=i18n,
        settings=settings,
        locale=locale,
        from_history=True,
    )


@router.inline_query()
async def handle_inline_query(inline_query: InlineQuery, search: ChatSearch) -> None:
    suggestions = search.session.set_input(inline_query.query)
    results = [
        InlineQueryResultArticle(
            id=str(index),
            title=entry,
            input_message_content=InputTextMessageContent(message_text=entry),
        )
        for index, entry in enumerate(suggestions)
        if entry.strip()
    ][:INLINE_RESULT_LIMIT]
    await inline_query.answer(results, cache_time=0, is_personal=True)


async def _run_search(
    message: Message,
    search: ChatSearch,
    query: str,
    *,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None,
    quiet: bool = False,
    from_history: bool = False,
) -> None:
    await _retire_tail(message, search)
    session = search.session
    expected_generation = session.state.generation + 1
    if from_history:
        state = await session.search_from_history(query)
    else:
        state = await session.start_search(query)

    if state.generation != expected_generation:
        # A newer search started while this one was in flight; it renders itself.
        return
    if state.failed:
        if not quiet:
            await answer_with_retry(message, i18n.gettext("search.failed", locale=locale), parse_mode=None)
        return
    if not state.photos:
        if not quiet:
            await answer_with_retry(
                message,
                i18n.gettext("search.no_results", locale=locale, query=query),
                parse_mode=None,
            )
        return

    await _send_results(
        message,
        search,
        state.photos,
        first_position=1,
        header=results_header(query, len(state.photos), i18n=i18n, locale=locale),
        i18n=i18n,
        settings=settings,
        locale=locale,
    )


async def _load_more(
    message: Message,
    search: ChatSearch,
    *,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None,
) -> None:
    state = search.session.state
    if state.loading:
        await answer_with_retry(message, i18n.gettext("more.loading", locale=locale), parse_mode=None)
        return
    if not state.has_more:
        await answer_with_retry(message, i18n.gettext("more.exhausted", locale=locale), parse_mode=None)
        return

    loaded_before = len(state.photos)
    expected_generation = state.generation + 1
    fired = await search.sentinel.press(LOAD_MORE)
    if not fired:
        await answer_with_retry(message, i18n.gettext("more.unavailable", locale=locale), parse_mode=None)
        return

    state = search.session.state
    if state.generation != expected_generation:
        return
    if state.failed:
        keyboard = results_keyboard(
            (),
            first_position=loaded_before + 1,
            i18n=i18n,
            locale=locale,
            show_more=search.more_visible,
        )
        sent = await answer_with_retry(
            message,
            i18n.gettext("search.failed", locale=locale),
            reply_markup=keyboard,
            parse_mode=None,
        )
        _remember_tail(search, sent, keyboard)
        return

    new_photos = state.photos[loaded_before:]
    if not new_photos:
        await answer_with_retry(message, i18n.gettext("more.exhausted", locale=locale), parse_mode=None)
        return

    await _send_results(
        message,
        search,
        new_photos,
        first_position=loaded_before + 1,
        header=i18n.gettext("search.page_header", locale=locale, page=state.page, count=len(new_photos)),
        i18n=i18n,
        settings=settings,
        locale=locale,
    )


async def _send_results(
    message: Message,
    search: ChatSearch,
    photos: Sequence[Photo],
    *,
    first_position: int,
    header: str,
    i18n: I18nService,
    settings: PhotoBotSettings,
    locale: str | None,
) -> None:
    size = settings.results_page_size
    chunks = list(chunk_photos(photos, size))
    for index, chunk in enumerate(chunks):
        is_last = index == len(chunks) - 1
        start = first_position + index * size
        keyboard = results_keyboard(
            chunk,
            first_position=start,
            i18n=i18n,
            locale=locale,
            show_more=is_last and search.more_visible,
        )
        text = header if index == 0 else f"{start}-{start + len(chunk) - 1}"
        sent = await answer_with_retry(message, text, reply_markup=keyboard, parse_mode=None)
        if is_last:
            _remember_tail(search, sent, keyboard)


def _remember_tail(
    search: ChatSearch,
    sent: Message | None,
    keyboard: InlineKeyboardMarkup | None,
) -> None:
    if keyboard is None or strip_load_more(keyboard) == keyboard:
        return
    search.tail_message_id = getattr(sent, "message_id", None)
    search.tail_markup = keyboard


async def _retire_tail(message: Message, search: ChatSearch, pressed: Message | None = None) -> None:
    """Remove the "Load more" button from the previous results message."""

    if pressed is not None:
        target_id, markup = pressed.message_id, getattr(pressed, "reply_markup", None)
    elif search.tail_message_id is not None:
        target_id, markup = search.tail_message_id, search.tail_markup
    else:
        return
    search.tail_message_id = None
    search.tail_markup = None
    bot = getattr(message, "bot", None)
    if bot is None or target_id is None:
        return
    try:
        await bot.edit_message_reply_markup(
            chat_id=message.chat.id,
            message_id=target_id,
            reply_markup=strip_load_more(markup),
        )
    except TelegramBadRequest as exc:
        logger.debug("load_more_button_cleanup_failed", message_id=target_id, error=str(exc))


__all__ = ["router"]
