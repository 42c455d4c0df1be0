"""Pydantic models for API request/response validation."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from sentichat.models import Message


class MessageModel(BaseModel):
    """A transcript message."""
    id: int = Field(..., description="Unique, increasing message id")
    sender: str = Field(..., description="'user' or 'bot'")
    text: str = Field(..., description="Message text")
    sentiment: Optional[str] = Field(None, description="Sentiment of a user message")

    @classmethod
    def from_message(cls, message: Message) -> "MessageModel":
        return cls(**message.to_dict())


class TranscriptResponse(BaseModel):
    """Response model for the current transcript."""
    messages: List[MessageModel] = Field(..., description="Messages, oldest first")
    awaiting_reply: bool = Field(False, description="Whether a bot reply is pending")


class ChatRequest(BaseModel):
    """Request model for a user turn."""
    text: str = Field(..., description="User input text")


class ChatResponse(BaseModel):
    """Response model for a user turn."""
    accepted: bool = Field(..., description="False if the text was blank")
    reply: Optional[MessageModel] = Field(None, description="Bot message appended for this turn")
    messages: List[MessageModel] = Field(..., description="Full transcript after the turn")


class PreferencesModel(BaseModel):
    """Display and speech preferences."""
    theme: str = Field(..., description="'light' or 'dark'")
    speech_lang: str = Field(..., description="Speech recognition locale")


class PreferencesUpdate(BaseModel):
    """Partial preferences update."""
    theme: Optional[str] = Field(None, description="'light' or 'dark'")
    speech_lang: Optional[str] = Field(None, description="Speech recognition locale")


class LanguagesResponse(BaseModel):
    """Supported speech recognition languages."""
    languages: Dict[str, str] = Field(..., description="Locale code to display name")


class TranscribeResponse(BaseModel):
    """Response model for audio transcription."""
    text: str = Field(..., description="Transcribed text from audio")


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str = Field(..., description="Service status")
    services: dict = Field(..., description="Status of individual services")
