import os
from typing import List, Optional

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    return int(value) if value else None


class Settings:
    PROJECT_NAME: str = "vocabuilder"
    DEBUG: bool = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "vocabuilder.log"
    # An empty REDIS_URL keeps everything in process memory.
    REDIS_URL: str = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
    TEMPLATE_DIR: str = os.path.join(PACKAGE_DIR, "templates")
    STATIC_DIR: str = os.path.join(PACKAGE_DIR, "static")
    DEFAULT_WORDS_FILE: str = os.environ.get(
        "DEFAULT_WORDS_FILE", os.path.join(STATIC_DIR, "default_words.csv")
    )
    SESSION_SIZE: int = 10
    OPTION_COUNT: int = 4
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    # Plaintext shared secret. Keeps casual visitors out of the admin page,
    # nothing more.
    ADMIN_PASSWORD: str = os.environ.get("ADMIN_PASSWORD", "admin123")
    ADMIN_COOKIE_NAME: str = "vocab_admin"
    DEFAULT_USERNAME: str = "Guest"
    RANDOM_SEED: Optional[int] = _optional_int("RANDOM_SEED")
    CACHE_NAME: str = "vocab-cache-v2"
    # Static assets only. Pages are rendered per request and must not be
    # served from the cache while the network is reachable.
    PRECACHE_URLS: List[str] = [
        "/static/styles.css",
        "/static/app.js",
        "/static/manifest.json",
        "/static/default_words.csv",
    ]


settings = Settings()
