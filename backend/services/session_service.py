"""Shared conversation session behind the API routes."""

import asyncio
import logging
from typing import Optional, Tuple

from sentichat.config import Settings
from sentichat.llm import GroqClient, GroqConfig
from sentichat.memory import StateStore
from sentichat.models import Message
from sentichat.preferences import Preferences
from sentichat.session import ConversationSession
from sentichat.stt import WhisperTranscriber

logger = logging.getLogger(__name__)


class SessionService:
    """
    Holds the single conversation served by the API.

    Components are created on first use from environment settings unless
    they were supplied through ``configure``.
    """

    def __init__(self):
        self._store: Optional[StateStore] = None
        self._classifier = None
        self._transcriber = None
        self._session: Optional[ConversationSession] = None
        self._preferences: Optional[Preferences] = None

    def configure(self, classifier=None, store: Optional[StateStore] = None, transcriber=None) -> None:
        """Replace components and drop any existing session."""
        self._classifier = classifier
        self._store = store
        self._transcriber = transcriber
        self._session = None
        self._preferences = None

    @property
    def store(self) -> StateStore:
        if self._store is None:
            self._store = StateStore()
        return self._store

    @property
    def session(self) -> ConversationSession:
        if self._session is None:
            if self._classifier is None:
                settings = Settings.from_env()
                self._classifier = GroqClient(
                    GroqConfig(api_key=settings.groq_api_key, model=settings.groq_model)
                )
            self._session = ConversationSession(self._classifier, store=self.store)
            logger.info(f"Session ready with {len(self._session.transcript)} messages")
        return self._session

    @property
    def preferences(self) -> Preferences:
        if self._preferences is None:
            self._preferences = Preferences.load(self.store)
        return self._preferences

    @property
    def transcriber(self):
        if self._transcriber is None:
            settings = Settings.from_env()
            self._transcriber = WhisperTranscriber(
                api_key=settings.groq_api_key, model=settings.whisper_model
            )
        return self._transcriber

    async def chat(self, text: str) -> Tuple[bool, Optional[Message]]:
        """
        Submit a user turn.

        Returns:
            (accepted, bot_message); accepted is False for blank text.
        """
        if not text.strip():
            return False, None
        reply = await self.session.submit(text)
        return reply is not None, reply

    async def transcribe(self, audio: bytes, lang: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: self.transcriber.transcribe(audio, lang))

    def close(self) -> None:
        """Release the storage connection."""
        if self._store is not None:
            self._store.close()

    def get_health_status(self) -> dict:
        return {
            "llm": "configured" if Settings.from_env().groq_api_key or self._classifier else "missing_api_key",
            "storage": "memory" if self.store.is_fallback else "redis",
        }


session_service = SessionService()
