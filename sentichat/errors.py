"""
Error types and user-facing error messages for SentiChat.
"""

from typing import Optional


class SentiChatError(Exception):
    """Base exception for SentiChat."""
    pass


class ClassifierError(SentiChatError):
    """Exception raised when the sentiment classifier call fails."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ClassifierFormatError(ClassifierError):
    """The model reply could not be parsed into reply + sentiment."""
    pass


class ClassifierNetworkError(ClassifierError):
    """The classifier could not be reached."""
    pass


class ClassifierConfigError(ClassifierError):
    """Missing or rejected API credentials."""
    pass


class RecognizerError(SentiChatError):
    """Exception raised by a speech recognizer, tagged with an error code."""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        super().__init__(message or code)


FORMAT_ERROR_MESSAGE = (
    "I seem to have gotten my wires crossed and sent an invalid response. "
    "Could you try again?"
)
NETWORK_ERROR_MESSAGE = (
    "I'm having trouble connecting to the network. "
    "Please check your internet connection and try again."
)
CONFIG_ERROR_MESSAGE = (
    "There's an issue with the API configuration. Please contact support."
)
UNKNOWN_ERROR_MESSAGE = (
    "An unexpected error occurred. I've noted it down and will try to do better."
)

SPEECH_ERROR_MESSAGES = {
    "no-speech": "No speech was detected. Please try again.",
    "audio-capture": "Microphone not found. Please ensure it's connected and enabled.",
    "not-allowed": "Microphone access denied. Please enable it in your browser settings.",
    "network": "A network error prevented speech recognition. Please check your connection.",
}
UNKNOWN_SPEECH_ERROR_MESSAGE = "An unknown error occurred during speech recognition."


def get_error_message(error: BaseException) -> str:
    """
    Map a classifier failure to the sentence shown in the transcript.

    Args:
        error: Exception raised while waiting for the bot reply.

    Returns:
        Fixed human-readable explanation for the failure category.
    """
    if isinstance(error, ClassifierFormatError):
        return FORMAT_ERROR_MESSAGE
    if isinstance(error, ClassifierNetworkError):
        return NETWORK_ERROR_MESSAGE
    if isinstance(error, ClassifierConfigError):
        return CONFIG_ERROR_MESSAGE
    return UNKNOWN_ERROR_MESSAGE


def speech_error_message(code: Optional[str]) -> str:
    """Map a speech recognizer error code to a banner message."""
    return SPEECH_ERROR_MESSAGES.get(code or "", UNKNOWN_SPEECH_ERROR_MESSAGE)
