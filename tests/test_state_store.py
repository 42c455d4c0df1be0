import pytest
import redis

from sentichat.memory import SPEECH_LANG_KEY, THEME_KEY, StateStore
from sentichat.preferences import DEFAULT_SPEECH_LANG, Preferences, Theme


class BrokenRedis:
    def get(self, name):
        raise redis.ConnectionError("connection lost")

    def set(self, name, value):
        raise redis.ConnectionError("connection lost")

    def delete(self, *names):
        raise redis.ConnectionError("connection lost")


def test_in_memory_store_roundtrip(store):
    assert store.get("missing") is None
    assert store.set("greeting", "hello")
    assert store.get("greeting") == "hello"
    assert store.delete("greeting")
    assert store.get("greeting") is None
    assert store.is_fallback


def test_keys_are_namespaced():
    backend = StateStore.in_memory(namespace="alpha")
    other = StateStore(namespace="beta", client=backend._client)
    backend.set(THEME_KEY, "light")
    assert other.get(THEME_KEY) is None
    assert backend._client.get("alpha:theme") == "light"


def test_unreachable_redis_falls_back_to_memory():
    store = StateStore(host="127.0.0.1", port=1, namespace="test")
    assert store.is_fallback
    assert store.set("key", "value")
    assert store.get("key") == "value"


def test_store_errors_are_not_raised():
    store = StateStore(namespace="test", client=BrokenRedis())
    assert store.get("key") is None
    assert store.set("key", "value") is False
    assert store.delete("key") is False


def test_preferences_defaults(store):
    prefs = Preferences.load(store)
    assert prefs.theme is Theme.DARK
    assert prefs.speech_lang == DEFAULT_SPEECH_LANG


def test_preferences_roundtrip(store):
    prefs = Preferences.load(store)
    assert prefs.toggle_theme() is Theme.LIGHT
    prefs.set_speech_lang("kn-IN")
    prefs.save(store)

    loaded = Preferences.load(store)
    assert loaded.theme is Theme.LIGHT
    assert loaded.speech_lang == "kn-IN"


def test_corrupt_preferences_fall_back_to_defaults(store):
    store.set(THEME_KEY, "sepia")
    store.set(SPEECH_LANG_KEY, "xx-XX")

    prefs = Preferences.load(store)

    assert prefs.theme is Theme.DARK
    assert prefs.speech_lang == DEFAULT_SPEECH_LANG


def test_unknown_speech_language_rejected():
    with pytest.raises(ValueError):
        Preferences().set_speech_lang("de-DE")
