"""
Voice capture state machine.

Turns a speech recognizer's event stream into an on/off toggle that
writes recognised speech into the message input buffer:

    IDLE --start()--> LISTENING --stop()/end--> IDLE
                          |
                          +--error--> IDLE (transient error banner)
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..errors import RecognizerError, speech_error_message
from .recognizer import EventKind, RecognitionEvent, SpeechRecognizer

logger = logging.getLogger(__name__)

ERROR_DISPLAY_SECONDS = 5.0


class CaptureState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


class Cue(Enum):
    """Audible notifications requested from the presentation layer."""

    MIC_ON = "mic_on"
    MIC_OFF = "mic_off"
    ERROR = "error"


@dataclass
class InputBuffer:
    """Text currently in the message input."""
    text: str = ""


class VoiceCapture:
    """
    Voice input toggle for one input widget.

    Only one listening phase is active at a time. Text typed before
    listening starts is kept as a prefix and speech is appended to it.
    """

    def __init__(
        self,
        recognizer: Optional[SpeechRecognizer],
        buffer: Optional[InputBuffer] = None,
        is_busy: Optional[Callable[[], bool]] = None,
        on_cue: Optional[Callable[[Cue], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        error_ttl: float = ERROR_DISPLAY_SECONDS,
    ):
        """
        Initialize voice capture.

        Args:
            recognizer: Speech recognizer, or None if the host has none.
            buffer: Input buffer that receives recognised text.
            is_busy: Returns True while a chat reply is pending.
            on_cue: Callback for audible notifications.
            clock: Monotonic time source in seconds.
            error_ttl: Seconds an error message stays visible.
        """
        self.recognizer = recognizer
        self.buffer = buffer or InputBuffer()
        self.is_busy = is_busy or (lambda: False)
        self.on_cue = on_cue
        self.clock = clock
        self.error_ttl = error_ttl

        self._state = CaptureState.IDLE
        self._prefix = ""
        self._error: Optional[str] = None
        self._error_expires_at = 0.0
        self._unsubscribe: Optional[Callable[[], None]] = None

        if recognizer is not None:
            self._unsubscribe = recognizer.subscribe(self._handle_event)
        else:
            logger.warning("Speech recognition not supported on this host.")

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is CaptureState.LISTENING

    @property
    def available(self) -> bool:
        """True if voice input can be used at all."""
        return self.recognizer is not None

    @property
    def can_start(self) -> bool:
        return self.available and not self.is_busy()

    @property
    def error(self) -> Optional[str]:
        """Current error message, or None once it has expired."""
        if self._error is not None and self.clock() >= self._error_expires_at:
            self._error = None
        return self._error

    def _cue(self, cue: Cue) -> None:
        if self.on_cue:
            self.on_cue(cue)

    def set_language(self, lang: str) -> None:
        """Change the recognition locale for the next listening phase."""
        if self.recognizer is not None:
            self.recognizer.lang = lang

    def start(self) -> bool:
        """
        Start listening.

        Returns:
            True if listening (already or newly), False if unavailable or busy.
        """
        if self.is_listening:
            return True
        if not self.can_start:
            return False

        self._state = CaptureState.LISTENING
        self._prefix = self.buffer.text
        self._error = None
        self._cue(Cue.MIC_ON)

        try:
            self.recognizer.start()
        except RecognizerError as e:
            self._fail(e.code)
        except Exception as e:
            logger.error(f"Failed to start recognizer: {e}")
            self._fail("audio-capture")
        return self.is_listening

    def stop(self) -> None:
        """Stop listening; a pending utterance is delivered first."""
        if not self.is_listening:
            return

        try:
            self.recognizer.stop()
        except RecognizerError as e:
            self._fail(e.code)
            return
        self._to_idle()

    def toggle(self) -> bool:
        """Start when idle, stop when listening. Returns the new listening flag."""
        if self.is_listening:
            self.stop()
        else:
            self.start()
        return self.is_listening

    def dispose(self) -> None:
        """Release the recognizer; any active utterance is discarded."""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        if self.is_listening:
            self.recognizer.abort()
        self._state = CaptureState.IDLE
        self._prefix = ""

    def _to_idle(self) -> None:
        if not self.is_listening:
            return
        self._state = CaptureState.IDLE
        self._prefix = ""
        self._cue(Cue.MIC_OFF)

    def _fail(self, code: Optional[str]) -> None:
        logger.error(f"Speech recognition error: {code}")
        self._error = speech_error_message(code)
        self._error_expires_at = self.clock() + self.error_ttl
        self._cue(Cue.ERROR)
        self._state = CaptureState.IDLE
        self._prefix = ""

    def _join(self, transcript: str) -> str:
        if self._prefix and transcript and not self._prefix[-1].isspace():
            return f"{self._prefix} {transcript}"
        return self._prefix + transcript

    def _handle_event(self, event: RecognitionEvent) -> None:
        if event.kind is EventKind.START:
            self._error = None
            return

        if not self.is_listening:
            # No buffering once idle
            return

        if event.kind is EventKind.RESULT:
            self.buffer.text = self._join(event.transcript)
            if event.is_final:
                self._prefix = self.buffer.text
        elif event.kind is EventKind.END:
            self._to_idle()
        elif event.kind is EventKind.ERROR:
            self._fail(event.error)
