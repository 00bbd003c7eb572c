"""Translations for user-facing messages (gettext catalogs under theming/locale)."""
from __future__ import annotations

import gettext
from functools import lru_cache
from pathlib import Path

import config

LOCALE_DIR = Path(__file__).resolve().parent.parent / "locale"
DOMAIN = "theming"


class L10N:
    """Translate messages for one language; falls back to the source text."""

    def __init__(self, translations: gettext.NullTranslations):
        self._translations = translations

    def t(self, text: str, *args) -> str:
        translated = self._translations.gettext(text)
        return translated % args if args else translated


@lru_cache(maxsize=None)
def get_l10n(language: str = config.THEMING_LOCALE) -> L10N:
    translations = gettext.translation(DOMAIN, localedir=LOCALE_DIR, languages=[language], fallback=True)
    return L10N(translations)
