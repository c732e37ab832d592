"""Project-level configuration and path helpers."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_PATH = LOGS_DIR / "groupchat.log"

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_PAGE_LIMIT = 50


@dataclass(frozen=True)
class Settings:
    """Client settings resolved from the environment."""

    api_url: str = DEFAULT_API_URL
    session_cookie: str | None = None
    user_id: str | None = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    page_limit: int = DEFAULT_PAGE_LIMIT
    request_timeout: float | None = None  # None: wait as long as the server takes
    log_level: str = "INFO"
    log_file: str = str(DEFAULT_LOG_PATH)

    def __post_init__(self):
        if not self.api_url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid API URL: {self.api_url}")

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "Settings":
        """Load .env (if present) and build Settings from GROUPCHAT_* variables."""
        if env_file is None:
            env_file = PROJECT_ROOT / ".env"
        load_dotenv(env_file)

        timeout = _get_float("GROUPCHAT_REQUEST_TIMEOUT", None)

        return cls(
            api_url=os.getenv("GROUPCHAT_API_URL", DEFAULT_API_URL).rstrip("/"),
            session_cookie=os.getenv("GROUPCHAT_SESSION_COOKIE") or None,
            user_id=os.getenv("GROUPCHAT_USER_ID") or None,
            poll_interval=_get_float("GROUPCHAT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            page_limit=_get_int("GROUPCHAT_PAGE_LIMIT", DEFAULT_PAGE_LIMIT),
            request_timeout=timeout,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", str(DEFAULT_LOG_PATH)),
        )


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid integer for %s, using default %s", key, default)
        return default


def _get_float(key: str, default: float | None) -> float | None:
    value = os.getenv(key)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Invalid number for %s, using default %s", key, default)
        return default
