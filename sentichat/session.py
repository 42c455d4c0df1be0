"""
Conversation session for SentiChat.

Turns one user submission into one classifier call and keeps the
transcript consistent whether the call succeeds or fails:

    user message (sentiment unknown) -> classifier -> sentiment patch -> bot reply
"""

import json
import logging
from typing import Callable, Dict, List, Optional

from .errors import get_error_message
from .memory import CHAT_HISTORY_KEY, StateStore
from .models import Message, Sender, Sentiment, Transcript

logger = logging.getLogger(__name__)


class ConversationSession:
    """
    Owns the transcript and mediates calls to the sentiment classifier.

    At most one classifier call is in flight; submissions made while a
    reply is pending are rejected rather than queued.
    """

    def __init__(
        self,
        classifier,
        store: Optional[StateStore] = None,
        on_update: Optional[Callable[[Transcript], None]] = None,
    ):
        """
        Initialize the session and load any saved transcript.

        Args:
            classifier: Object with an async ``classify(message, history)``
                returning a ClassifierReply.
            store: Optional state store used to persist the transcript.
            on_update: Callback invoked after every transcript change.
        """
        self.classifier = classifier
        self.store = store
        self.on_update = on_update

        self._awaiting_reply = False
        # Bumped on reset so replies for abandoned turns are dropped
        self._generation = 0
        self._transcript = self.load()

    @property
    def transcript(self) -> List[Message]:
        """Messages in chronological order."""
        return self._transcript.messages

    @property
    def awaiting_reply(self) -> bool:
        """True while a classifier call is in flight."""
        return self._awaiting_reply

    def history(self) -> List[Dict[str, str]]:
        """Transcript as chat-completion turns for the classifier."""
        return [
            {
                "role": "user" if message.sender is Sender.USER else "assistant",
                "content": message.text,
            }
            for message in self._transcript
        ]

    def load(self) -> Transcript:
        """
        Load the saved transcript, or a fresh greeting if there is none.

        Absent, corrupt or empty saved state never raises.
        """
        if self.store is None:
            return Transcript.seeded()

        raw = self.store.get(CHAT_HISTORY_KEY)
        if not raw:
            return Transcript.seeded()

        try:
            transcript = Transcript.from_list(json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to load chat history: {e}")
            return Transcript.seeded()

        if not len(transcript):
            return Transcript.seeded()

        logger.info(f"Loaded chat history with {len(transcript)} messages")
        return transcript

    def persist(self) -> bool:
        """Save the full transcript. Failures are logged, never raised."""
        if self.store is None:
            return False

        saved = self.store.set(CHAT_HISTORY_KEY, json.dumps(self._transcript.to_list()))
        if not saved:
            logger.warning("Chat history was not saved")
        return saved

    def _changed(self) -> None:
        self.persist()
        if self.on_update:
            self.on_update(self._transcript)

    def reset(self) -> None:
        """Start a new chat with only the welcome message."""
        self._generation += 1
        self._awaiting_reply = False
        self._transcript = Transcript.seeded(last_id=self._transcript.last_id)
        logger.info("Started new chat")
        self._changed()

    async def submit(self, text: str) -> Optional[Message]:
        """
        Send a user turn to the classifier and record the outcome.

        Args:
            text: The user's message.

        Returns:
            The bot message appended for this turn, or None if the
            submission was rejected (blank text or a reply already pending)
            or abandoned by a reset.
        """
        if not text or not text.strip():
            return None

        if self._awaiting_reply:
            logger.info("Ignoring submission while a reply is pending")
            return None

        history = self.history()
        user_message = self._transcript.append(Sender.USER, text, Sentiment.UNKNOWN)
        self._changed()

        self._awaiting_reply = True
        generation = self._generation

        try:
            try:
                result = await self.classifier.classify(text, history)
            except Exception as e:
                logger.error(f"Failed to get response from bot: {e}")
                if generation != self._generation:
                    return None
                bot_message = self._transcript.append(Sender.BOT, get_error_message(e))
            else:
                if generation != self._generation:
                    logger.info("Discarding reply for a chat that was reset")
                    return None
                logger.debug(
                    f"Message {user_message.id} classified as {result.sentiment.value} "
                    f"(label: {result.raw_sentiment!r})"
                )
                self._transcript.update_sentiment(user_message.id, result.sentiment)
                self._changed()
                bot_message = self._transcript.append(Sender.BOT, result.reply)

            self._changed()
            return bot_message
        finally:
            if generation == self._generation:
                self._awaiting_reply = False
