import asyncio
from types import SimpleNamespace

import groq
import httpx
import pytest

from sentichat.errors import (
    ClassifierConfigError,
    ClassifierFormatError,
    ClassifierNetworkError,
)
from sentichat.llm import GroqClient, GroqConfig, map_sentiment, parse_reply
from sentichat.models import Sentiment


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_client(content=None, error=None, history_limit=20):
    completions = FakeCompletions(content, error)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    client = GroqClient(GroqConfig(api_key="test-key", history_limit=history_limit), client=fake)
    return client, completions


@pytest.mark.parametrize("label, expected", [
    ("positive", Sentiment.POSITIVE),
    ("POSITIVE", Sentiment.POSITIVE),
    ("Negative", Sentiment.NEGATIVE),
    ("neutral", Sentiment.NEUTRAL),
    ("mixed", Sentiment.NEUTRAL),
    ("", Sentiment.NEUTRAL),
    (None, Sentiment.NEUTRAL),
])
def test_map_sentiment(label, expected):
    assert map_sentiment(label) is expected


def test_parse_reply_plain_json():
    result = parse_reply('{"reply": "Glad to hear it!", "sentiment": "positive"}')
    assert result.reply == "Glad to hear it!"
    assert result.sentiment is Sentiment.POSITIVE
    assert result.raw_sentiment == "positive"


def test_parse_reply_strips_code_fence():
    raw = '```json\n{"reply": "Sorry to hear that.", "sentiment": "negative"}\n```'
    result = parse_reply(raw)
    assert result.reply == "Sorry to hear that."
    assert result.sentiment is Sentiment.NEGATIVE


def test_parse_reply_missing_sentiment_is_neutral():
    result = parse_reply('{"reply": "ok"}')
    assert result.sentiment is Sentiment.NEUTRAL
    assert result.raw_sentiment == ""


@pytest.mark.parametrize("raw", [
    "Sure! Here you go.",
    "",
    '["reply", "positive"]',
    '{"sentiment": "positive"}',
    '{"reply": 42, "sentiment": "positive"}',
])
def test_parse_reply_rejects_bad_payloads(raw):
    with pytest.raises(ClassifierFormatError):
        parse_reply(raw)


def test_classify_sends_history_and_json_mode():
    client, completions = make_client('{"reply": "Hi!", "sentiment": "neutral"}', history_limit=2)
    history = [
        {"role": "assistant", "content": "Welcome"},
        {"role": "user", "content": "first"},
        {"role": "assistant", "content": "second"},
    ]

    result = asyncio.run(client.classify("hello", history))

    assert result.reply == "Hi!"
    messages = completions.kwargs["messages"]
    assert messages[0]["role"] == "system"
    assert messages[1:] == history[-2:] + [{"role": "user", "content": "hello"}]
    assert completions.kwargs["response_format"] == {"type": "json_object"}


def test_classify_missing_api_key_is_config_error():
    client = GroqClient(GroqConfig(api_key=None))
    with pytest.raises(ClassifierConfigError):
        asyncio.run(client.classify("hello"))


def test_classify_connection_error_is_network_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    client, _ = make_client(error=groq.APIConnectionError(request=request))
    with pytest.raises(ClassifierNetworkError):
        asyncio.run(client.classify("hello"))


def test_classify_auth_error_is_config_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    response = httpx.Response(401, request=request)
    error = groq.AuthenticationError("Invalid API Key", response=response, body=None)
    client, _ = make_client(error=error)
    with pytest.raises(ClassifierConfigError):
        asyncio.run(client.classify("hello"))


def test_classify_unparseable_reply_is_format_error():
    client, _ = make_client("I am not JSON")
    with pytest.raises(ClassifierFormatError):
        asyncio.run(client.classify("hello"))
