"""
Groq API client for SentiChat.
Provides an async sentiment-classifying chat interface to Llama 3.
"""

import asyncio
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import groq
from dotenv import load_dotenv

from ..errors import (
    ClassifierConfigError,
    ClassifierFormatError,
    ClassifierNetworkError,
)
from ..models import Sentiment

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# Leading ```json / ``` and trailing ``` around the payload
_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

SYSTEM_PROMPT = """You are NMS, a helpful and empathetic chatbot.
Analyze the user's sentiment from their message.
Your response MUST BE a valid JSON object with two keys:
"reply" (your text response as a string) and
"sentiment" (one of 'positive', 'negative', 'neutral').

Only output the JSON object, no additional text."""


@dataclass
class GroqConfig:
    """Configuration for Groq API client."""
    api_key: Optional[str]
    model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7
    max_tokens: int = 1024
    history_limit: int = 20


@dataclass
class ClassifierReply:
    """Bot reply with the sentiment detected in the user's message."""
    reply: str
    sentiment: Sentiment
    raw_sentiment: str = ""


def map_sentiment(label: Optional[str]) -> Sentiment:
    """
    Map a model-provided label to a Sentiment.

    Anything other than positive/negative, including empty or garbled
    labels, is treated as neutral.
    """
    value = (label or "").strip().lower()
    if value == "positive":
        return Sentiment.POSITIVE
    if value == "negative":
        return Sentiment.NEGATIVE
    if value != "neutral":
        logger.debug(f"Unrecognized sentiment label {label!r}, using neutral")
    return Sentiment.NEUTRAL


def parse_reply(raw_response: str) -> ClassifierReply:
    """
    Parse the LLM output into a ClassifierReply.

    Args:
        raw_response: Raw text from the LLM, possibly wrapped in a code fence.

    Returns:
        Parsed ClassifierReply.

    Raises:
        ClassifierFormatError: If the payload is not a JSON object with a reply.
    """
    json_str = _FENCE_RE.sub("", (raw_response or "").strip())

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON response: {e}")
        raise ClassifierFormatError(
            "Failed to parse bot response. The format was invalid.", cause=e
        ) from e

    if not isinstance(data, dict) or not isinstance(data.get("reply"), str):
        raise ClassifierFormatError("Bot response is missing a text reply.")

    raw_sentiment = data.get("sentiment")
    if not isinstance(raw_sentiment, str):
        raw_sentiment = ""

    return ClassifierReply(
        reply=data["reply"],
        sentiment=map_sentiment(raw_sentiment),
        raw_sentiment=raw_sentiment,
    )


class GroqClient:
    """
    Async client for Groq API with Llama 3.

    Each call is stateless: recent conversation history is sent along with
    the new message so the model keeps conversational context.
    """

    def __init__(self, config: Optional[GroqConfig] = None, client: Any = None):
        """
        Initialize the Groq client.

        Args:
            config: Optional GroqConfig. If not provided, uses environment variables.
            client: Optional pre-built Groq client (used by tests).
        """
        if config is None:
            config = GroqConfig(
                api_key=os.getenv("GROQ_API_KEY"),
                model=os.getenv("GROQ_MODEL", GroqConfig.model),
            )

        self.config = config
        self._client = client

    def _get_client(self):
        """Lazy initialization of Groq client."""
        if self._client is None:
            if not self.config.api_key:
                raise ClassifierConfigError("GROQ_API_KEY environment variable not set")
            self._client = groq.Groq(api_key=self.config.api_key)
        return self._client

    def chat(self, user_message: str, history: Optional[List[Dict[str, str]]] = None) -> str:
        """
        Send a message to Llama 3 and get the raw response.

        Args:
            user_message: The user's input text.
            history: Earlier turns as {"role", "content"} dicts, oldest first.

        Returns:
            The assistant's raw response text.
        """
        client = self._get_client()

        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        if history:
            messages.extend(history[-self.config.history_limit:])
        messages.append({"role": "user", "content": user_message})

        response = client.chat.completions.create(
            model=self.config.model,
            messages=messages,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            response_format={"type": "json_object"},
        )

        return response.choices[0].message.content or ""

    async def classify(
        self, message: str, history: Optional[List[Dict[str, str]]] = None
    ) -> ClassifierReply:
        """
        Get a reply and the sentiment of the user's message.

        Args:
            message: The user's input text.
            history: Optional conversation history.

        Returns:
            ClassifierReply with the reply text and mapped sentiment.

        Raises:
            ClassifierConfigError: Missing or rejected API key.
            ClassifierNetworkError: Groq could not be reached.
            ClassifierFormatError: The reply was not valid JSON.
        """
        loop = asyncio.get_running_loop()
        try:
            raw_response = await loop.run_in_executor(
                None, lambda: self.chat(message, history)
            )
        except (groq.AuthenticationError, groq.PermissionDeniedError) as e:
            logger.error(f"Groq rejected credentials: {e}")
            raise ClassifierConfigError(f"API key not valid: {e}", cause=e) from e
        except groq.APIConnectionError as e:
            logger.error(f"Groq connection failed: {e}")
            raise ClassifierNetworkError(f"Connection failed: {e}", cause=e) from e

        return parse_reply(raw_response)
