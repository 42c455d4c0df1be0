"""FastAPI routes for SentiChat API."""

import logging
from fastapi import APIRouter, UploadFile, File, HTTPException, Form

from sentichat.errors import RecognizerError
from sentichat.preferences import DEFAULT_SPEECH_LANG, SPEECH_LANGUAGES, Theme

from .models import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    LanguagesResponse,
    MessageModel,
    PreferencesModel,
    PreferencesUpdate,
    TranscribeResponse,
    TranscriptResponse,
)
from ..services.session_service import session_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _transcript_models():
    return [MessageModel.from_message(m) for m in session_service.session.transcript]


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns the status of all services.
    """
    return HealthResponse(status="healthy", services=session_service.get_health_status())


@router.get("/messages", response_model=TranscriptResponse)
async def get_messages():
    """Return the current transcript."""
    session = session_service.session
    return TranscriptResponse(
        messages=_transcript_models(),
        awaiting_reply=session.awaiting_reply
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """
    Send a user message and wait for the bot reply.

    Classifier failures come back as a bot message, not as an HTTP error.
    """
    if session_service.session.awaiting_reply:
        raise HTTPException(status_code=409, detail="A reply is already pending")

    accepted, reply = await session_service.chat(request.text)

    return ChatResponse(
        accepted=accepted,
        reply=MessageModel.from_message(reply) if reply else None,
        messages=_transcript_models()
    )


@router.post("/session/reset", response_model=TranscriptResponse)
async def reset_session():
    """Start a new chat."""
    session_service.session.reset()
    return TranscriptResponse(messages=_transcript_models(), awaiting_reply=False)


@router.get("/preferences", response_model=PreferencesModel)
async def get_preferences():
    prefs = session_service.preferences
    return PreferencesModel(theme=prefs.theme.value, speech_lang=prefs.speech_lang)


@router.put("/preferences", response_model=PreferencesModel)
async def update_preferences(update: PreferencesUpdate):
    """
    Update theme and/or speech language.

    Unknown values are rejected with 400 and nothing is saved.
    """
    prefs = session_service.preferences

    try:
        theme = Theme(update.theme) if update.theme is not None else prefs.theme
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unsupported theme: {update.theme}")

    if update.speech_lang is not None and update.speech_lang not in SPEECH_LANGUAGES:
        raise HTTPException(status_code=400, detail=f"Unsupported speech language: {update.speech_lang}")

    prefs.theme = theme
    if update.speech_lang is not None:
        prefs.set_speech_lang(update.speech_lang)
    prefs.save(session_service.store)

    return PreferencesModel(theme=prefs.theme.value, speech_lang=prefs.speech_lang)


@router.get("/languages", response_model=LanguagesResponse)
async def get_languages():
    return LanguagesResponse(languages=SPEECH_LANGUAGES)


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe_audio(
    audio: UploadFile = File(..., description="WAV audio to transcribe"),
    lang: str = Form(DEFAULT_SPEECH_LANG, description="Speech locale")
):
    """
    Transcribe recorded speech to text.

    Recognizer failures return 502 with the error code as detail.
    """
    audio_data = await audio.read()
    logger.info(f"Received audio file: {audio.filename}, size: {len(audio_data)} bytes")

    try:
        text = await session_service.transcribe(audio_data, lang)
    except RecognizerError as e:
        logger.error(f"Transcription failed: {e}")
        raise HTTPException(status_code=502, detail=e.code)

    return TranscribeResponse(text=text)
