"""Render search state into Telegram message text and inline keyboards."""

from __future__ import annotations

from typing import Iterator, Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from photo_search.bot.sentinel import LOAD_MORE
from photo_search.domain.models import Photo
from photo_search.i18n import I18nService

PHOTO_PREFIX = "photo:"
HISTORY_PREFIX = "history:"
CLOSE = "close"
BUTTON_TITLE_LIMIT = 40
HISTORY_BUTTON_LIMIT = 20
PHOTOS_PER_ROW = 2


def chunk_photos(photos: Sequence[Photo], size: int) -> Iterator[Sequence[Photo]]:
    for start in range(0, len(photos), size):
        yield photos[start : start + size]


def button_title(photo: Photo, position: int, untitled: str) -> str:
    title = " ".join(photo.title.split()) or untitled
    label = f"{position}. {title}"
    if len(label) > BUTTON_TITLE_LIMIT:
        label = f"{label[: BUTTON_TITLE_LIMIT - 1].rstrip()}…"
    return label


def results_keyboard(
    photos: Sequence[Photo],
    *,
    first_position: int,
    i18n: I18nService,
    locale: str | None,
    show_more: bool,
) -> InlineKeyboardMarkup | None:
    untitled = i18n.gettext("photo.untitled", locale=locale)
    rows: list[list[InlineKeyboardButton]] = []
    row: list[InlineKeyboardButton] = []
    for offset, photo in enumerate(photos):
        row.append(
            InlineKeyboardButton(
                text=button_title(photo, first_position + offset, untitled),
                callback_data=f"{PHOTO_PREFIX}{photo.id}",
            )
        )
        if len(row) == PHOTOS_PER_ROW:
            rows.append(row)
            row = []
    if row:
        rows.append(row)
    if show_more:
        rows.append(
            [
                InlineKeyboardButton(
                    text=i18n.gettext("more.button", locale=locale),
                    callback_data=LOAD_MORE,
                )
            ]
        )
    if not rows:
        return None
    return InlineKeyboardMarkup(inline_keyboard=rows)


def photo_keyboard(photo: Photo, *, image_host: str, i18n: I18nService, locale: str | None) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(
                    text=i18n.gettext("photo.open_original", locale=locale),
                    url=photo.image_url(image_host),
                ),
                InlineKeyboardButton(
                    text=i18n.gettext("photo.close", locale=locale),
                    callback_data=CLOSE,
                ),
            ]
        ]
    )


def history_keyboard(suggestions: Sequence[str]) -> InlineKeyboardMarkup | None:
    if not suggestions:
        return None
    rows = [
        [InlineKeyboardButton(text=entry or '""', callback_data=f"{HISTORY_PREFIX}{index}")]
        for index, entry in enumerate(suggestions[:HISTORY_BUTTON_LIMIT])
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def strip_load_more(markup: InlineKeyboardMarkup | None) -> InlineKeyboardMarkup | None:
    """Drop the "Load more" row, keeping the photo buttons."""

    if markup is None:
        return None
    rows = [
        row
        for row in markup.inline_keyboard
        if not any(button.callback_data == LOAD_MORE for button in row)
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows) if rows else None


def results_header(query: str, count: int, *, i18n: I18nService, locale: str | None) -> str:
    if not query:
        return i18n.gettext("search.header_empty_query", locale=locale, count=count)
    return i18n.gettext("search.header", locale=locale, query=query, count=count)


__all__ = [
    "CLOSE",
    "HISTORY_PREFIX",
    "PHOTO_PREFIX",
    "button_title",
    "chunk_photos",
    "history_keyboard",
    "photo_keyboard",
    "results_header",
    "results_keyboard",
    "strip_load_more",
]
