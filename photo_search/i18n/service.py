"""JSON-backed message catalogue with default-locale fallback."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

LOCALES_DIR = Path(__file__).with_name("locales")


@lru_cache(maxsize=32)
def _load_catalogue(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


class I18nService:
    def __init__(self, *, locales_path: str | Path | None = None, default_locale: str = "en") -> None:
        self.locales_path = Path(locales_path or LOCALES_DIR)
        self.default_locale = default_locale

    def gettext(self, key: str, *, locale: str | None = None, **kwargs: Any) -> str:
        for candidate in self._candidates(locale):
            text = _load_catalogue(self.locales_path / f"{candidate}.json").get(key)
            if text is not None:
                return text.format(**kwargs) if kwargs else text
        return key

    def _candidates(self, locale: str | None) -> list[str]:
        # "pt-BR" falls back to "pt" before the default locale.
        loc = (locale or self.default_locale).lower().replace("_", "-")
        candidates = [loc]
        base = loc.split("-", 1)[0]
        if base != loc:
            candidates.append(base)
        if self.default_locale not in candidates:
            candidates.append(self.default_locale)
        return candidates


__all__ = ["I18nService"]
