import pytest

from sentichat.models import WELCOME_MESSAGE, Message, Sender, Sentiment, Transcript


def test_seeded_transcript_has_single_greeting():
    transcript = Transcript.seeded()
    assert len(transcript) == 1
    assert transcript.last.sender is Sender.BOT
    assert transcript.last.text == WELCOME_MESSAGE
    assert transcript.last.id == 1


def test_ids_are_unique_and_increasing():
    transcript = Transcript.seeded()
    first = transcript.append(Sender.USER, "hi", Sentiment.UNKNOWN)
    second = transcript.append(Sender.BOT, "hello")
    assert transcript.last_id == second.id
    assert 1 < first.id < second.id


def test_reseeding_keeps_ids_monotonic():
    transcript = Transcript.seeded()
    transcript.append(Sender.USER, "hi", Sentiment.UNKNOWN)
    fresh = Transcript.seeded(last_id=transcript.last_id)
    assert fresh.last.id > transcript.last_id


def test_update_sentiment_only_touches_user_message():
    transcript = Transcript.seeded()
    user = transcript.append(Sender.USER, "I had a great day", Sentiment.UNKNOWN)
    updated = transcript.update_sentiment(user.id, Sentiment.POSITIVE)

    assert updated.id == user.id
    assert updated.text == user.text
    assert transcript.get(user.id).sentiment is Sentiment.POSITIVE
    assert transcript.update_sentiment(1, Sentiment.POSITIVE) is None
    assert transcript.get(1).sentiment is None


def test_sentiment_is_set_only_once():
    transcript = Transcript.seeded()
    user = transcript.append(Sender.USER, "meh", Sentiment.UNKNOWN)
    transcript.update_sentiment(user.id, Sentiment.NEUTRAL)

    assert transcript.update_sentiment(user.id, Sentiment.NEGATIVE) is None
    assert transcript.get(user.id).sentiment is Sentiment.NEUTRAL

    classified = transcript.append(Sender.USER, "yay", Sentiment.POSITIVE)
    assert transcript.update_sentiment(classified.id, Sentiment.NEGATIVE) is None


def test_message_dict_shape():
    message = Message(id=7, sender=Sender.USER, text="hey", sentiment=Sentiment.NEUTRAL)
    assert message.to_dict() == {"id": 7, "sender": "user", "text": "hey", "sentiment": "neutral"}
    assert "sentiment" not in Message(id=8, sender=Sender.BOT, text="yo").to_dict()
    assert Message.from_dict(message.to_dict()) == message


def test_transcript_list_roundtrip_preserves_order():
    transcript = Transcript.seeded()
    transcript.append(Sender.USER, "one", Sentiment.NEGATIVE)
    transcript.append(Sender.BOT, "two")

    restored = Transcript.from_list(transcript.to_list())
    assert restored.messages == transcript.messages


@pytest.mark.parametrize("payload", [
    {"not": "a list"},
    [{"id": "1", "sender": "bot", "text": "x"}],
    [{"id": 1, "sender": "robot", "text": "x"}],
    [{"id": 1, "sender": "bot"}],
    [{"id": 1, "sender": "user", "text": "x", "sentiment": "ecstatic"}],
    [{"id": 1, "sender": "bot", "text": "a"}, {"id": 1, "sender": "bot", "text": "b"}],
    ["oops"],
])
def test_from_list_rejects_malformed_payloads(payload):
    with pytest.raises(ValueError):
        Transcript.from_list(payload)
