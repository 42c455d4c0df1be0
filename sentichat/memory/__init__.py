"""
Memory module for SentiChat.
Provides persisted key-value state for transcripts and preferences.
"""

from .state_store import (
    CHAT_HISTORY_KEY,
    SPEECH_LANG_KEY,
    THEME_KEY,
    MemoryBackend,
    StateStore,
)

__all__ = [
    "StateStore",
    "MemoryBackend",
    "CHAT_HISTORY_KEY",
    "THEME_KEY",
    "SPEECH_LANG_KEY",
]
