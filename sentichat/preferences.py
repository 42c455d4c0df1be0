"""
User preferences: display theme and speech recognition language.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .memory import SPEECH_LANG_KEY, THEME_KEY, StateStore

logger = logging.getLogger(__name__)


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"


SPEECH_LANGUAGES = {
    "en-US": "English (US)",
    "kn-IN": "Kannada",
    "hi-IN": "Hindi",
    "mr-IN": "Marathi",
    "ta-IN": "Tamil",
    "te-IN": "Telugu",
    "es-ES": "Spanish",
    "fr-FR": "French",
}

DEFAULT_THEME = Theme.DARK
DEFAULT_SPEECH_LANG = "en-US"


@dataclass
class Preferences:
    """Persisted display and speech settings."""
    theme: Theme = DEFAULT_THEME
    speech_lang: str = DEFAULT_SPEECH_LANG

    @classmethod
    def load(cls, store: StateStore) -> "Preferences":
        """
        Read preferences from the store.

        Missing or unrecognised values fall back to the defaults.
        """
        prefs = cls()

        theme = store.get(THEME_KEY)
        if theme:
            try:
                prefs.theme = Theme(theme)
            except ValueError:
                logger.warning(f"Ignoring stored theme {theme!r}")

        lang = store.get(SPEECH_LANG_KEY)
        if lang in SPEECH_LANGUAGES:
            prefs.speech_lang = lang
        elif lang:
            logger.warning(f"Ignoring stored speech language {lang!r}")

        return prefs

    def save(self, store: StateStore) -> None:
        store.set(THEME_KEY, self.theme.value)
        store.set(SPEECH_LANG_KEY, self.speech_lang)

    def toggle_theme(self) -> Theme:
        self.theme = Theme.LIGHT if self.theme is Theme.DARK else Theme.DARK
        return self.theme

    def set_speech_lang(self, code: str) -> None:
        """
        Select the speech recognition language.

        Raises:
            ValueError: If the code is not one of SPEECH_LANGUAGES.
        """
        if code not in SPEECH_LANGUAGES:
            raise ValueError(f"Unsupported speech language: {code}")
        self.speech_lang = code
