"""
Speech recognizer event sources for SentiChat.

A recognizer is a host-owned, callback-driven resource. Consumers subscribe
to its events and must unsubscribe when they are torn down.
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import numpy as np
from scipy.io import wavfile

from ..errors import RecognizerError

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Lifecycle events emitted by a recognizer."""

    START = "start"
    RESULT = "result"
    END = "end"
    ERROR = "error"


@dataclass
class RecognitionEvent:
    """A single recognizer event."""
    kind: EventKind
    transcript: str = ""
    is_final: bool = False
    error: Optional[str] = None


Listener = Callable[[RecognitionEvent], None]
Transcribe = Callable[[bytes, str], str]


class SpeechRecognizer:
    """
    Base class for speech-to-text event sources.

    Subclasses implement start/stop/abort and report progress through
    ``_emit``.
    """

    def __init__(self, lang: str = "en-US"):
        self.lang = lang
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for recognizer events.

        Returns:
            Function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: RecognitionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def start(self) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        """Finish the current utterance and deliver its result."""
        raise NotImplementedError

    def abort(self) -> None:
        """Cancel the current utterance without a result."""
        raise NotImplementedError


class MicrophoneRecognizer(SpeechRecognizer):
    """
    Records from the default input device and transcribes on stop.

    Audio is captured with sounddevice; transcription is delegated to the
    injected ``transcribe(wav_bytes, lang)`` callable.
    """

    def __init__(
        self,
        transcribe: Transcribe,
        lang: str = "en-US",
        sample_rate: int = 16000,
        silence_threshold: float = 0.01,
        device: Optional[str] = None,
    ):
        """
        Initialize the recognizer.

        Args:
            transcribe: Callable turning WAV bytes and a locale into text.
            lang: BCP-47 locale tag, e.g. 'en-US'.
            sample_rate: Recording sample rate in Hz.
            silence_threshold: Mean amplitude (0-1) below which audio is silence.
            device: Optional input device name or index.
        """
        super().__init__(lang)
        self.transcribe = transcribe
        self.sample_rate = sample_rate
        self.silence_threshold = silence_threshold
        self.device = device
        self._stream = None
        self._frames: List[np.ndarray] = []

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def _on_audio(self, indata, frames, time_info, status) -> None:
        if status:
            logger.debug(f"Input stream status: {status}")
        self._frames.append(indata.copy())

    def start(self) -> None:
        if self._stream is not None:
            return

        import sounddevice as sd

        self._frames = []
        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=1,
                dtype="int16",
                device=self.device,
                callback=self._on_audio,
            )
            stream.start()
        except (sd.PortAudioError, OSError, ValueError) as e:
            logger.error(f"Failed to access microphone: {e}")
            code = "not-allowed" if "permission" in str(e).lower() else "audio-capture"
            self._emit(RecognitionEvent(EventKind.ERROR, error=code))
            return

        self._stream = stream
        logger.info(f"Recording started ({self.lang})")
        self._emit(RecognitionEvent(EventKind.START))

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()

    def _collect_audio(self) -> np.ndarray:
        frames, self._frames = self._frames, []
        if not frames:
            return np.zeros(0, dtype=np.int16)
        return np.concatenate(frames, axis=0).reshape(-1)

    def _is_speech(self, audio: np.ndarray) -> bool:
        """Simple voice activity detection."""
        if audio.size == 0:
            return False
        level = np.abs(audio.astype(np.float32)).mean() / 32768.0
        return level > self.silence_threshold

    def _to_wav_bytes(self, audio: np.ndarray) -> bytes:
        buffer = io.BytesIO()
        wavfile.write(buffer, self.sample_rate, audio)
        return buffer.getvalue()

    def stop(self) -> None:
        if self._stream is None:
            return

        self._close_stream()
        audio = self._collect_audio()
        logger.info(f"Recording stopped, {audio.size / self.sample_rate:.1f}s captured")

        if not self._is_speech(audio):
            self._emit(RecognitionEvent(EventKind.ERROR, error="no-speech"))
            self._emit(RecognitionEvent(EventKind.END))
            return

        try:
            text = self.transcribe(self._to_wav_bytes(audio), self.lang)
        except RecognizerError as e:
            logger.error(f"Transcription failed: {e}")
            self._emit(RecognitionEvent(EventKind.ERROR, error=e.code))
            self._emit(RecognitionEvent(EventKind.END))
            return

        text = (text or "").strip()
        if text:
            self._emit(RecognitionEvent(EventKind.RESULT, transcript=text, is_final=True))
        else:
            self._emit(RecognitionEvent(EventKind.ERROR, error="no-speech"))
        self._emit(RecognitionEvent(EventKind.END))

    def abort(self) -> None:
        if self._stream is None:
            return
        self._close_stream()
        self._frames = []
        self._emit(RecognitionEvent(EventKind.END))


def create_recognizer(
    transcribe: Transcribe, lang: str = "en-US"
) -> Optional[MicrophoneRecognizer]:
    """
    Create a microphone recognizer if the host has an input device.

    Returns:
        A MicrophoneRecognizer, or None when voice input is unavailable.
    """
    try:
        import sounddevice as sd
    except OSError as e:
        logger.warning(f"Speech recognition not supported: {e}")
        return None

    try:
        sd.query_devices(kind="input")
    except (sd.PortAudioError, ValueError) as e:
        logger.warning(f"No microphone found: {e}")
        return None

    return MicrophoneRecognizer(transcribe, lang=lang)
