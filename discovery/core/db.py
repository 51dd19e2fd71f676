"""Database helpers for the discovery service."""

import logging
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from psycopg2 import extras, pool

from discovery.core.config import get_settings
from discovery.errors import ConfigurationError
from discovery.models import ScoredResult

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise ConfigurationError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


_SELECT_COMPANY = """
SELECT id, name, industry, business_type, headquarters_address, profile_data
FROM companies
WHERE id = %(company_id)s
"""

_UPDATE_REQUEST = """
UPDATE opportunity_requests SET
    status = 'processing',
    search_query_used = %(query)s,
    search_results = %(search_results)s,
    processed_by = NULL,
    processed_at = %(processed_at)s
WHERE id = %(request_id)s
"""


def fetch_company(company_id: str) -> Optional[Dict[str, Any]]:
    with get_connection() as conn:
        with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
            cur.execute(_SELECT_COMPANY, {"company_id": company_id})
            row = cur.fetchone()
    if row is None:
        logger.info("Company %s not found", company_id)
        return None
    return dict(row)


def build_search_results_payload(query: str, results: Iterable[ScoredResult], searched_at: datetime) -> Dict[str, Any]:
    items = [asdict(result) for result in results]
    return {
        "query": query,
        "results": items,
        "searched_at": searched_at.isoformat(),
        "total_results": len(items),
    }


def save_search_results(
    request_id: str,
    query: str,
    results: Iterable[ScoredResult],
    searched_at: datetime,
) -> bool:
    """Attach scored results to an opportunity request; False when no row matched."""
    params = {
        "request_id": request_id,
        "query": query,
        "search_results": extras.Json(build_search_results_payload(query, results, searched_at)),
        "processed_at": searched_at,
    }
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(_UPDATE_REQUEST, params)
            updated = cur.rowcount
        conn.commit()
    logger.debug("Stored search results for request %s (rows=%s)", request_id, updated)
    return updated > 0

