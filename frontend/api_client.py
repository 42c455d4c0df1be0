"""HTTP client for SentiChat backend API."""

import logging
from typing import Optional, Dict, Any
import requests

from sentichat.config import Settings
from sentichat.errors import RecognizerError

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Exception raised when the backend answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Client for communicating with SentiChat backend API."""

    def __init__(self, base_url: Optional[str] = None):
        """
        Initialize API client.

        Args:
            base_url: Base URL of the backend API (defaults to Settings.backend_url)
        """
        self.base_url = base_url or Settings.from_env().backend_url
        logger.info(f"Initialized API client with base URL: {self.base_url}")

    def _handle_response(self, response: requests.Response) -> Dict[str, Any]:
        """
        Handle API response and raise exceptions for errors.

        Args:
            response: Response from API

        Returns:
            JSON response data

        Raises:
            APIError: If API returns an error status
        """
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"API error: {e}")
            try:
                error_detail = response.json().get("detail", str(e))
            except ValueError:
                error_detail = str(e)
            raise APIError(str(error_detail), status_code=response.status_code) from e
        return response.json()

    def health_check(self) -> Dict[str, Any]:
        response = requests.get(f"{self.base_url}/api/health", timeout=5)
        return self._handle_response(response)

    def get_messages(self) -> Dict[str, Any]:
        """
        Fetch the current transcript.

        Returns:
            Dict with 'messages' and 'awaiting_reply'
        """
        response = requests.get(f"{self.base_url}/api/messages", timeout=10)
        return self._handle_response(response)

    def chat(self, text: str) -> Dict[str, Any]:
        """
        Send a chat message.

        Args:
            text: User input text

        Returns:
            Chat response with the bot reply and full transcript
        """
        response = requests.post(
            f"{self.base_url}/api/chat",
            json={"text": text},
            timeout=120
        )
        result = self._handle_response(response)
        if result.get("reply"):
            logger.info(f"Chat response: {result['reply']['text'][:50]}...")
        return result

    def reset(self) -> Dict[str, Any]:
        """Start a new chat."""
        response = requests.post(f"{self.base_url}/api/session/reset", timeout=10)
        return self._handle_response(response)

    def get_preferences(self) -> Dict[str, Any]:
        response = requests.get(f"{self.base_url}/api/preferences", timeout=5)
        return self._handle_response(response)

    def update_preferences(
        self,
        theme: Optional[str] = None,
        speech_lang: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {"theme": theme, "speech_lang": speech_lang}
        response = requests.put(f"{self.base_url}/api/preferences", json=payload, timeout=5)
        return self._handle_response(response)

    def get_languages(self) -> Dict[str, str]:
        response = requests.get(f"{self.base_url}/api/languages", timeout=5)
        return self._handle_response(response)["languages"]

    def transcribe_audio(self, wav_bytes: bytes, lang: str = "en-US") -> str:
        """
        Transcribe recorded audio through the backend.

        Args:
            wav_bytes: WAV file contents
            lang: Speech locale

        Returns:
            Transcribed text

        Raises:
            RecognizerError: With the recognizer error code
        """
        try:
            response = requests.post(
                f"{self.base_url}/api/transcribe",
                files={"audio": ("audio.wav", wav_bytes, "audio/wav")},
                data={"lang": lang},
                timeout=30
            )
            result = self._handle_response(response)
        except requests.exceptions.RequestException as e:
            logger.error(f"Transcription request failed: {e}")
            raise RecognizerError("network", str(e)) from e
        except APIError as e:
            code = str(e) if e.status_code == 502 else "transcription-failed"
            raise RecognizerError(code, str(e)) from e

        logger.info(f"Transcribed audio: {result['text']}")
        return result["text"]
