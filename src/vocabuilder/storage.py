from datetime import timedelta
from typing import Dict, Optional, Protocol, Union

import redis

from .config import settings

Expiry = Union[int, timedelta, None]

# Keys shared by every component that touches the store.
USERNAME_KEY = "username"
WORDS_KEY = "words"
PROGRESS_KEY = "progress"
SESSION_KEY_PREFIX = "session:"


def session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


class KeyValueStore(Protocol):
    """String-keyed blob store with get/set/remove semantics."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, ex: Expiry = None) -> None: ...

    def remove(self, key: str) -> None: ...


class RedisStore:
    """Store backed by a Redis connection."""

    def __init__(self, client: redis.Redis):
        self.client = client

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def set(self, key: str, value: str, ex: Expiry = None) -> None:
        self.client.set(key, value, ex=ex)

    def remove(self, key: str) -> None:
        self.client.delete(key)


class MemoryStore:
    """In-process store. Expiry is ignored."""

    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str, ex: Expiry = None) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


redis_client = (
    redis.from_url(settings.REDIS_URL, decode_responses=True)
    if settings.REDIS_URL
    else None
)
memory_store = MemoryStore()


def get_default_store() -> KeyValueStore:
    if redis_client is None:
        return memory_store
    return RedisStore(redis_client)
