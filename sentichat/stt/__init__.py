from .recognizer import (
    EventKind,
    MicrophoneRecognizer,
    RecognitionEvent,
    SpeechRecognizer,
    create_recognizer,
)
from .voice_capture import CaptureState, Cue, InputBuffer, VoiceCapture
from .whisper import WhisperTranscriber

__all__ = [
    "SpeechRecognizer",
    "MicrophoneRecognizer",
    "RecognitionEvent",
    "EventKind",
    "create_recognizer",
    "VoiceCapture",
    "CaptureState",
    "Cue",
    "InputBuffer",
    "WhisperTranscriber",
]
