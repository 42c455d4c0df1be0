"""
Key-value state store for SentiChat.
Persists the transcript and preferences in Redis, with an in-memory fallback.
"""

import logging
from typing import Dict, Optional

import redis

from ..config import Settings

logger = logging.getLogger(__name__)

CHAT_HISTORY_KEY = "chatHistory"
THEME_KEY = "theme"
SPEECH_LANG_KEY = "speechLang"


class MemoryBackend:
    """
    In-memory stand-in for a Redis connection when no server is reachable.

    Implements only the string commands the state store uses.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}

    def ping(self) -> bool:
        return True

    def get(self, name: str) -> Optional[str]:
        return self._data.get(name)

    def set(self, name: str, value: str) -> bool:
        self._data[name] = str(value)
        return True

    def delete(self, *names) -> int:
        count = 0
        for name in names:
            if name in self._data:
                del self._data[name]
                count += 1
        return count

    def close(self):
        pass


class StateStore:
    """
    Namespaced key-value store for persisted client state.

    Reads and writes never raise: failures are logged and reported
    through return values so callers can treat persistence as
    fire-and-forget.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        db: Optional[int] = None,
        namespace: Optional[str] = None,
        client=None,
    ):
        """
        Initialize the state store.

        Args:
            host: Redis host. Defaults to REDIS_HOST env var or 'localhost'.
            port: Redis port. Defaults to REDIS_PORT env var or 6379.
            db: Redis database number. Defaults to REDIS_DB env var or 0.
            namespace: Key prefix. Defaults to SENTICHAT_NAMESPACE or 'sentichat'.
            client: Optional pre-built Redis-compatible client.
        """
        settings = Settings.from_env()
        self.host = host or settings.redis_host
        self.port = port or settings.redis_port
        self.db = settings.redis_db if db is None else db
        self.namespace = namespace or settings.namespace
        self._client = client
        self._use_fallback = False

    @classmethod
    def in_memory(cls, namespace: str = "sentichat") -> "StateStore":
        """Create a store that never touches Redis."""
        store = cls(namespace=namespace, client=MemoryBackend())
        store._use_fallback = True
        return store

    def _get_client(self):
        """Lazy initialization of Redis client."""
        if self._client is None:
            try:
                client = redis.Redis(
                    host=self.host,
                    port=self.port,
                    db=self.db,
                    decode_responses=True,
                    socket_connect_timeout=1
                )
                client.ping()
                self._client = client
                logger.info(f"Connected to Redis at {self.host}:{self.port}")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning(f"Failed to connect to Redis: {e}. Using in-memory fallback.")
                self._use_fallback = True
                self._client = MemoryBackend()

        return self._client

    @property
    def is_fallback(self) -> bool:
        """True when state only lives in this process."""
        self._get_client()
        return self._use_fallback

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if absent or unreadable.
        """
        try:
            return self._get_client().get(self._key(key))
        except redis.RedisError as e:
            logger.error(f"Failed to read {key} from state store: {e}")
            return None

    def set(self, key: str, value: str) -> bool:
        """
        Write a value.

        Returns:
            True if the write succeeded.
        """
        try:
            self._get_client().set(self._key(key), value)
            return True
        except redis.RedisError as e:
            logger.error(f"Failed to save {key} to state store: {e}")
            return False

    def delete(self, key: str) -> bool:
        try:
            self._get_client().delete(self._key(key))
            return True
        except redis.RedisError as e:
            logger.error(f"Failed to delete {key} from state store: {e}")
            return False

    def close(self):
        """Close the Redis connection."""
        if self._client:
            self._client.close()
            self._client = None
            logger.info("State store connection closed")
