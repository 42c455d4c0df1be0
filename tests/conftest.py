import pytest

from sentichat.llm import ClassifierReply, map_sentiment
from sentichat.memory import StateStore
from sentichat.stt import EventKind, RecognitionEvent, SpeechRecognizer


class FakeClassifier:
    """Classifier returning canned replies, or raising a given error."""

    def __init__(self, reply="Glad to hear it!", sentiment="positive", error=None):
        self.reply = reply
        self.sentiment = sentiment
        self.error = error
        self.calls = []
        self.gate = None

    async def classify(self, message, history=None):
        self.calls.append((message, history))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return ClassifierReply(
            reply=self.reply,
            sentiment=map_sentiment(self.sentiment),
            raw_sentiment=self.sentiment,
        )


class FakeRecognizer(SpeechRecognizer):
    """Recognizer driven by the test through emit helpers."""

    def __init__(self, lang="en-US"):
        super().__init__(lang)
        self.started = 0
        self.stopped = 0
        self.aborted = 0

    @property
    def listener_count(self):
        return len(self._listeners)

    def start(self):
        self.started += 1
        self._emit(RecognitionEvent(EventKind.START))

    def stop(self):
        self.stopped += 1

    def abort(self):
        self.aborted += 1
        self._emit(RecognitionEvent(EventKind.END))

    def result(self, transcript, is_final=False):
        self._emit(RecognitionEvent(EventKind.RESULT, transcript=transcript, is_final=is_final))

    def end(self):
        self._emit(RecognitionEvent(EventKind.END))

    def fail(self, code):
        self._emit(RecognitionEvent(EventKind.ERROR, error=code))


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def classifier():
    return FakeClassifier()


@pytest.fixture
def store():
    return StateStore.in_memory(namespace="test")


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def clock():
    return FakeClock()
