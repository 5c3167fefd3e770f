"""Tests for the I18nService translation lookup and fallback."""

from __future__ import annotations

from pathlib import Path

from photo_search.i18n import I18nService


def test_gettext_formats_translated_string(tmp_path: Path):
    (tmp_path / "en.json").write_text('{"greet": "Hello {name}"}', encoding="utf-8")
    service = I18nService(locales_path=tmp_path, default_locale="en")

    assert service.gettext("greet", name="World") == "Hello World"


def test_gettext_falls_back_to_base_language_then_default(tmp_path: Path):
    (tmp_path / "en.json").write_text('{"greet": "Hello", "bye": "Bye"}', encoding="utf-8")
    (tmp_path / "pt.json").write_text('{"greet": "Olá"}', encoding="utf-8")
    service = I18nService(locales_path=tmp_path, default_locale="en")

    assert service.gettext("greet", locale="pt-BR") == "Olá"
    assert service.gettext("bye", locale="pt_BR") == "Bye"
    assert service.gettext("missing.key", locale="es") == "missing.key"


def test_bundled_catalogue_has_bot_strings():
    service = I18nService()

    assert service.gettext("more.button") == "Load more"
    assert service.gettext("more.button", locale="es") == "Cargar más"
    assert service.gettext("more.loading", locale="es") == "Still loading, please wait."
