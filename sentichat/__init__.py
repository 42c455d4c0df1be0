"""
SentiChat - Chat companion with per-message sentiment analysis and voice input.
"""

from .errors import (
    ClassifierConfigError,
    ClassifierError,
    ClassifierFormatError,
    ClassifierNetworkError,
    RecognizerError,
    SentiChatError,
)
from .models import Message, Sender, Sentiment, Transcript
from .session import ConversationSession
from .llm import GroqClient, GroqConfig, ClassifierReply
from .memory import StateStore
from .preferences import Preferences, Theme, SPEECH_LANGUAGES
from .stt import VoiceCapture, CaptureState, InputBuffer

__version__ = "0.1.0"

__all__ = [
    "ConversationSession",
    "Message",
    "Sender",
    "Sentiment",
    "Transcript",
    "GroqClient",
    "GroqConfig",
    "ClassifierReply",
    "StateStore",
    "Preferences",
    "Theme",
    "SPEECH_LANGUAGES",
    "VoiceCapture",
    "CaptureState",
    "InputBuffer",
    "SentiChatError",
    "ClassifierError",
    "ClassifierFormatError",
    "ClassifierNetworkError",
    "ClassifierConfigError",
    "RecognizerError",
]
