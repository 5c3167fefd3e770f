"""Settings loading from environment variables."""

from __future__ import annotations

from photo_search.config import FlickrSettings, PhotoBotSettings


def test_settings_read_nested_environment(monkeypatch):
    monkeypatch.setenv("PHOTOBOT_TELEGRAM_TOKEN", "123:abc")
    monkeypatch.setenv("PHOTOBOT_FLICKR__API_KEY", "flickr-key")
    monkeypatch.setenv("PHOTOBOT_FLICKR__PER_PAGE", "25")
    monkeypatch.setenv("PHOTOBOT_RESULTS_PAGE_SIZE", "8")

    settings = PhotoBotSettings(_env_file=None)

    assert settings.telegram_token.get_secret_value() == "123:abc"
    assert settings.flickr.api_key.get_secret_value() == "flickr-key"
    assert settings.flickr.per_page == 25
    assert settings.results_page_size == 8
    assert settings.flickr.request_timeout_seconds is None
    assert settings.flickr.max_attempts == 1


def test_flickr_defaults_match_public_api():
    settings = FlickrSettings()

    assert str(settings.endpoint) == "https://www.flickr.com/services/rest/"
    assert settings.image_host == "live.staticflickr.com"
    assert settings.safe_search == 1


def test_image_host_scheme_is_stripped():
    settings = FlickrSettings(image_host="https://images.example.com/")

    assert settings.image_host == "images.example.com"
