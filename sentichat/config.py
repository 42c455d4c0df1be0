"""
Runtime configuration for SentiChat.

Values come from environment variables, optionally loaded from a .env file.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class Settings:
    """Application settings."""
    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.3-70b-versatile"
    whisper_model: str = "whisper-large-v3"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    namespace: str = "sentichat"
    backend_url: str = "http://localhost:8000"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        return cls(
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("GROQ_MODEL", cls.groq_model),
            whisper_model=os.getenv("WHISPER_MODEL", cls.whisper_model),
            redis_host=os.getenv("REDIS_HOST", cls.redis_host),
            redis_port=int(os.getenv("REDIS_PORT", str(cls.redis_port))),
            redis_db=int(os.getenv("REDIS_DB", str(cls.redis_db))),
            namespace=os.getenv("SENTICHAT_NAMESPACE", cls.namespace),
            backend_url=os.getenv("BACKEND_API_URL", cls.backend_url),
        )
