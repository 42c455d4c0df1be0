"""
LLM module for SentiChat.
Provides Groq API integration with Llama 3 for replies and sentiment labels.
"""

from .groq_client import (
    ClassifierReply,
    GroqClient,
    GroqConfig,
    map_sentiment,
    parse_reply,
)

__all__ = ["GroqClient", "GroqConfig", "ClassifierReply", "map_sentiment", "parse_reply"]
