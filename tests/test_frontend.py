import requests
from streamlit.testing.v1 import AppTest

from sentichat.errors import NETWORK_ERROR_MESSAGE
from sentichat.models import WELCOME_MESSAGE
from sentichat.preferences import SPEECH_LANGUAGES

chat_calls = []


class FakeAPIClient:
    """Backend stand-in whose chat endpoint is unreachable."""

    def __init__(self, base_url=None):
        self.base_url = base_url

    def health_check(self):
        return {"status": "healthy"}

    def get_messages(self):
        return {
            "messages": [{"id": 1, "sender": "bot", "text": WELCOME_MESSAGE}],
            "awaiting_reply": False,
        }

    def get_preferences(self):
        return {"theme": "dark", "speech_lang": "en-US"}

    def get_languages(self):
        return dict(SPEECH_LANGUAGES)

    def chat(self, text):
        import streamlit as st

        chat_calls.append((text, st.session_state.awaiting_reply))
        raise requests.ConnectionError("connection refused")

    def transcribe_audio(self, wav_bytes, lang="en-US"):
        return ""


def test_failed_send_leaves_trace_and_banner(monkeypatch):
    chat_calls.clear()
    monkeypatch.setattr("frontend.api_client.APIClient", FakeAPIClient)
    at = AppTest.from_file("../frontend/app.py", default_timeout=10)
    at.run()

    at.text_input(key="draft").input("hello").run()

    assert chat_calls == [("hello", True)]
    texts = [block.value for block in at.markdown]
    assert "hello" in texts
    assert NETWORK_ERROR_MESSAGE in texts
    assert any("connection refused" in banner.value for banner in at.error)
    assert at.session_state["awaiting_reply"] is False
