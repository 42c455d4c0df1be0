import logging
import time
import uuid
import streamlit as st
import streamlit.components.v1 as components

from frontend.api_client import APIClient
from sentichat.errors import NETWORK_ERROR_MESSAGE
from sentichat.models import Sentiment
from sentichat.preferences import DEFAULT_SPEECH_LANG, SPEECH_LANGUAGES
from sentichat.stt import Cue, InputBuffer, VoiceCapture, create_recognizer

logger = logging.getLogger(__name__)

SOUNDS = {
    "message_sent": "https://cdn.aistudio.google.com/studio/sounds/message_sent.mp3",
    "message_received": "https://cdn.pixabay.com/download/audio/2022/03/15/audio_2c3d56998b.mp3",
    Cue.MIC_ON.value: "https://cdn.aistudio.google.com/studio/sounds/mic_on.mp3",
    Cue.MIC_OFF.value: "https://cdn.aistudio.google.com/studio/sounds/mic_off.mp3",
    Cue.ERROR.value: "https://cdn.aistudio.google.com/studio/sounds/error.mp3",
}

SENTIMENT_BADGES = {
    Sentiment.POSITIVE.value: "😊 Positive",
    Sentiment.NEGATIVE.value: "😠 Negative",
    Sentiment.NEUTRAL.value: "😐 Neutral",
}

THEMES = {
    "dark": {"background": "#111827", "text": "#ffffff", "panel": "#1f2937"},
    "light": {"background": "#ffffff", "text": "#111827", "panel": "#f3f4f6"},
}

# Page configuration
st.set_page_config(
    page_title="NMS",
    page_icon="💬",
    layout="centered",
    initial_sidebar_state="collapsed"
)

# Initialize API Client
if "api_client" not in st.session_state:
    st.session_state.api_client = APIClient()

api_client = st.session_state.api_client

# Check API Health
if "api_health" not in st.session_state:
    try:
        st.session_state.api_health = api_client.health_check().get("status") == "healthy"
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        st.session_state.api_health = False


def queue_cue(name: str):
    st.session_state.cues.append(name)


def play_sound(src: str):
    unique_id = f"audio_{uuid.uuid4().hex[:8]}"
    components.html(
        f'<audio id="{unique_id}" autoplay style="display:none"><source src="{src}"></audio>',
        height=0
    )


# Initialize Session State
if "cues" not in st.session_state:
    st.session_state.cues = []
if "messages" not in st.session_state:
    st.session_state.messages = []
    st.session_state.awaiting_reply = False
    if st.session_state.api_health:
        data = api_client.get_messages()
        st.session_state.messages = data["messages"]
        st.session_state.awaiting_reply = data["awaiting_reply"]
if "preferences" not in st.session_state:
    st.session_state.preferences = {"theme": "dark", "speech_lang": DEFAULT_SPEECH_LANG}
    if st.session_state.api_health:
        st.session_state.preferences = api_client.get_preferences()
if "languages" not in st.session_state:
    st.session_state.languages = dict(SPEECH_LANGUAGES)
    if st.session_state.api_health:
        st.session_state.languages = api_client.get_languages()
if "input_buffer" not in st.session_state:
    st.session_state.input_buffer = InputBuffer()
    st.session_state.draft = ""
if "voice_capture" not in st.session_state:
    recognizer = create_recognizer(
        api_client.transcribe_audio,
        lang=st.session_state.preferences["speech_lang"]
    )
    st.session_state.voice_capture = VoiceCapture(
        recognizer,
        buffer=st.session_state.input_buffer,
        is_busy=lambda: st.session_state.awaiting_reply,
        on_cue=lambda cue: queue_cue(cue.value),
    )

capture: VoiceCapture = st.session_state.voice_capture
buffer: InputBuffer = st.session_state.input_buffer
prefs = st.session_state.preferences
colors = THEMES.get(prefs["theme"], THEMES["dark"])

# Theme
st.markdown(f"""
    <style>
    .stApp {{
        background: {colors['background']};
        color: {colors['text']};
    }}
    [data-testid="stChatMessageContent"] {{
        background: {colors['panel']};
        border-radius: 16px;
        padding: 0.75rem 1rem;
    }}
    .sentiment-badge {{
        display: inline-block;
        font-size: 11px;
        opacity: 0.8;
        margin-top: 4px;
    }}
    .speech-error {{
        color: #fb7185;
        text-align: center;
        font-size: 14px;
    }}
    #MainMenu, footer {{visibility: hidden;}}
    </style>
""", unsafe_allow_html=True)

# Header
col_title, col_new, col_theme = st.columns([8, 1, 1])
with col_title:
    st.markdown("## NMS")
    st.caption("Your AI companion with sentiment analysis")
with col_new:
    if st.button("➕", help="Start new chat", disabled=not st.session_state.api_health):
        data = api_client.reset()
        st.session_state.messages = data["messages"]
        st.session_state.awaiting_reply = False
        st.rerun()
with col_theme:
    if st.button("🌙" if prefs["theme"] == "light" else "☀️", help="Toggle theme"):
        new_theme = "light" if prefs["theme"] == "dark" else "dark"
        try:
            st.session_state.preferences = api_client.update_preferences(theme=new_theme)
        except Exception as e:
            logger.error(f"Failed to save theme: {e}")
            prefs["theme"] = new_theme
        st.rerun()

with st.expander("Settings"):
    languages = st.session_state.languages
    codes = list(languages)
    selected = st.selectbox(
        "Speech Recognition Language",
        codes,
        index=codes.index(prefs["speech_lang"]) if prefs["speech_lang"] in codes else 0,
        format_func=lambda code: languages[code]
    )
    if selected != prefs["speech_lang"]:
        try:
            st.session_state.preferences = api_client.update_preferences(speech_lang=selected)
        except Exception as e:
            logger.error(f"Failed to save speech language: {e}")
            prefs["speech_lang"] = selected
        capture.set_language(selected)

if not st.session_state.api_health:
    st.error("Backend disconnected. Start it with `uvicorn backend.main:app`.")

if st.session_state.get("backend_error"):
    st.error(f"Error communicating with backend: {st.session_state.backend_error}")
    del st.session_state.backend_error

# Transcript
for msg in st.session_state.messages:
    role = "user" if msg["sender"] == "user" else "assistant"
    with st.chat_message(role):
        st.markdown(msg["text"])
        badge = SENTIMENT_BADGES.get(msg.get("sentiment") or "")
        if badge:
            st.markdown(f'<span class="sentiment-badge">{badge}</span>', unsafe_allow_html=True)

# Input Area
if st.session_state.get("sync_draft"):
    st.session_state.draft = buffer.text
    st.session_state.sync_draft = False


def submit_text():
    text = st.session_state.draft
    if text.strip() and not st.session_state.awaiting_reply:
        st.session_state.pending_text = text
        st.session_state.awaiting_reply = True
        st.session_state.draft = ""
        buffer.text = ""
        queue_cue("message_sent")


col_input, col_voice = st.columns([8.8, 1.2], gap="small")
with col_input:
    st.text_input(
        "msg",
        placeholder="Type your message or use the microphone...",
        key="draft",
        label_visibility="collapsed",
        on_change=submit_text,
        disabled=st.session_state.awaiting_reply or not st.session_state.api_health
    )
with col_voice:
    label = "⏹️" if capture.is_listening else "🎤"
    if st.button(
        label,
        key="mic",
        help="Stop listening" if capture.is_listening else "Start listening",
        disabled=not capture.is_listening and not capture.can_start
    ):
        buffer.text = st.session_state.draft
        capture.toggle()
        st.session_state.sync_draft = True
        st.rerun()

if capture.is_listening:
    st.info("Listening... click ⏹️ when you are done speaking.")

speech_error = capture.error
if speech_error:
    st.markdown(f'<p class="speech-error">{speech_error}</p>', unsafe_allow_html=True)

# Process pending text: show the user's message first, then wait for the reply
if st.session_state.get("pending_text"):
    user_text = st.session_state.pending_text
    del st.session_state.pending_text

    with st.chat_message("user"):
        st.markdown(user_text)
    try:
        with st.spinner("NMS is typing..."):
            result = api_client.chat(user_text)
        st.session_state.messages = result["messages"]
        if result.get("reply"):
            queue_cue("message_received")
    except Exception as e:
        logger.error(f"Error communicating with backend: {e}")
        # Keep the failed turn visible until the transcript is next fetched
        st.session_state.messages = st.session_state.messages + [
            {"id": None, "sender": "user", "text": user_text, "sentiment": Sentiment.UNKNOWN.value},
            {"id": None, "sender": "bot", "text": NETWORK_ERROR_MESSAGE},
        ]
        st.session_state.backend_error = str(e)
    finally:
        st.session_state.awaiting_reply = False
    st.rerun()

# Cue sounds
for cue in st.session_state.cues:
    if cue in SOUNDS:
        play_sound(SOUNDS[cue])
st.session_state.cues = []

# Keep the error banner's expiry visible without user interaction
if speech_error:
    time.sleep(1)
    st.rerun()
