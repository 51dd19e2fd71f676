"""Application configuration helpers.

`BRAVE_SEARCH_API_KEY` is a billable key and must only come from the
environment (or a local `.env` file picked up by python-dotenv).
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

FRESHNESS_VALUES = ("day", "week", "month", "year")


@dataclass(frozen=True)
class Settings:
    brave_search_api_key: str
    database_url: str
    worker_port: int = 9000
    search_timeout: float = 10.0
    result_count: int = 10
    freshness: Optional[str] = "month"
    admin_api_token: Optional[str] = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    brave_search_api_key = os.getenv("BRAVE_SEARCH_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    search_timeout = float(os.getenv("BRAVE_SEARCH_TIMEOUT", "10"))
    result_count = int(os.getenv("SEARCH_RESULT_COUNT", "10"))
    freshness_raw = os.getenv("SEARCH_FRESHNESS", "month").strip().lower()
    freshness = freshness_raw or None
    admin_api_token = os.getenv("ADMIN_API_TOKEN") or None

    if freshness is not None and freshness not in FRESHNESS_VALUES:
        logger.warning("SEARCH_FRESHNESS=%s is not one of %s; ignoring it.", freshness, ", ".join(FRESHNESS_VALUES))
        freshness = None
    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if not brave_search_api_key:
        logger.warning("BRAVE_SEARCH_API_KEY is not configured; opportunity searches will fail.")

    return Settings(
        brave_search_api_key=brave_search_api_key,
        database_url=database_url,
        worker_port=worker_port,
        search_timeout=search_timeout,
        result_count=result_count,
        freshness=freshness,
        admin_api_token=admin_api_token,
    )
