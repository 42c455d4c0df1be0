"""Groq Whisper API client for speech-to-text transcription."""

import logging
import os
from typing import Optional

import groq

from ..errors import RecognizerError

logger = logging.getLogger(__name__)


def language_code(lang: str) -> str:
    """Reduce a locale tag such as 'hi-IN' to the ISO-639-1 code 'hi'."""
    return (lang or "en").split("-")[0].lower()


class WhisperTranscriber:
    """
    Groq Whisper API client for speech-to-text.

    Cloud-based, no local model download needed.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "whisper-large-v3",
        client=None,
    ):
        """
        Initialize the transcriber.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY env var)
            model: Whisper model name
            client: Optional pre-built Groq client
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        self.model = model
        self._client = client

    def _get_client(self):
        """Lazy load Groq client."""
        if self._client is None:
            if not self.api_key:
                raise RecognizerError(
                    "service-not-allowed", "GROQ_API_KEY not found. Set it in .env."
                )
            self._client = groq.Groq(api_key=self.api_key)
        return self._client

    def transcribe(self, wav_bytes: bytes, lang: str = "en-US") -> str:
        """
        Transcribe WAV audio.

        Args:
            wav_bytes: WAV file contents
            lang: Locale tag of the spoken language

        Returns:
            Transcribed text

        Raises:
            RecognizerError: Tagged 'network' for transport failures.
        """
        client = self._get_client()
        try:
            transcription = client.audio.transcriptions.create(
                file=("audio.wav", wav_bytes),
                model=self.model,
                response_format="json",
                language=language_code(lang),
            )
        except groq.APIConnectionError as e:
            logger.error(f"Groq transcription failed: {e}")
            raise RecognizerError("network", f"Transcription failed: {e}") from e
        except (groq.AuthenticationError, groq.PermissionDeniedError) as e:
            logger.error(f"Groq rejected credentials: {e}")
            raise RecognizerError("service-not-allowed", f"Transcription failed: {e}") from e
        except groq.APIError as e:
            logger.error(f"Groq transcription failed: {e}")
            raise RecognizerError("transcription-failed", f"Transcription failed: {e}") from e

        return transcription.text.strip()

    __call__ = transcribe
