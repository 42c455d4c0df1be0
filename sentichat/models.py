"""
Data models for SentiChat conversations.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


WELCOME_MESSAGE = (
    "Welcome! I'm NMS, your AI companion with sentiment analysis. "
    "Feel free to chat about anything on your mind. How can I help you today?"
)


class Sender(Enum):
    """Author of a message."""

    USER = "user"
    BOT = "bot"


class Sentiment(Enum):
    """Sentiment label attached to user messages."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Message:
    """A single transcript entry."""

    id: int
    sender: Sender
    text: str
    sentiment: Optional[Sentiment] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON shape."""
        data = {
            "id": self.id,
            "sender": self.sender.value,
            "text": self.text,
        }
        if self.sentiment is not None:
            data["sentiment"] = self.sentiment.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """
        Build a message from its persisted JSON shape.

        Raises:
            ValueError: If the record is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Message record must be an object, got {type(data).__name__}")

        message_id = data.get("id")
        text = data.get("text")
        # bool is an int subclass
        if not isinstance(message_id, int) or isinstance(message_id, bool):
            raise ValueError(f"Invalid message id: {message_id!r}")
        if not isinstance(text, str):
            raise ValueError(f"Invalid message text: {text!r}")

        sender = Sender(data.get("sender"))
        sentiment = data.get("sentiment")
        return cls(
            id=message_id,
            sender=sender,
            text=text,
            sentiment=Sentiment(sentiment) if sentiment is not None else None,
        )


class Transcript:
    """
    Ordered, append-only message history.

    The only in-place change allowed is patching a user message's
    sentiment once the classifier has answered.
    """

    def __init__(self, messages: Optional[List[Message]] = None, last_id: int = 0):
        self._messages: List[Message] = list(messages or [])
        self._last_id = max([last_id] + [m.id for m in self._messages])

    @classmethod
    def seeded(cls, last_id: int = 0) -> "Transcript":
        """Create a transcript holding only the welcome message."""
        transcript = cls(last_id=last_id)
        transcript.append(Sender.BOT, WELCOME_MESSAGE)
        return transcript

    @classmethod
    def from_list(cls, records: List[Dict[str, Any]]) -> "Transcript":
        """
        Rebuild a transcript from persisted records.

        Raises:
            ValueError: If the payload is not a list, or ids repeat.
        """
        if not isinstance(records, list):
            raise ValueError("Transcript payload must be a list")

        messages = [Message.from_dict(record) for record in records]
        ids = [m.id for m in messages]
        if len(ids) != len(set(ids)):
            raise ValueError("Transcript contains duplicate message ids")
        return cls(messages)

    def to_list(self) -> List[Dict[str, Any]]:
        """Convert to a JSON-serialisable list."""
        return [m.to_dict() for m in self._messages]

    @property
    def messages(self) -> List[Message]:
        """Copy of the messages in chronological order."""
        return list(self._messages)

    @property
    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    @property
    def last_id(self) -> int:
        return self._last_id

    def next_id(self) -> int:
        """Issue a new id, greater than any id seen so far."""
        self._last_id += 1
        return self._last_id

    def append(
        self,
        sender: Sender,
        text: str,
        sentiment: Optional[Sentiment] = None,
    ) -> Message:
        """Append a new message and return it."""
        message = Message(id=self.next_id(), sender=sender, text=text, sentiment=sentiment)
        self._messages.append(message)
        return message

    def get(self, message_id: int) -> Optional[Message]:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def update_sentiment(self, message_id: int, sentiment: Sentiment) -> Optional[Message]:
        """
        Classify the user message with the given id.

        Only a message still marked UNKNOWN can be classified, and only once.

        Returns:
            The updated message, or None if no pending user message has that id.
        """
        for index, message in enumerate(self._messages):
            if (
                message.id == message_id
                and message.sender is Sender.USER
                and message.sentiment is Sentiment.UNKNOWN
            ):
                updated = replace(message, sentiment=sentiment)
                self._messages[index] = updated
                return updated
        return None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))
