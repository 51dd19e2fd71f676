"""Client for the Brave web-search API used to discover contract opportunities."""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import requests

from discovery.core.config import FRESHNESS_VALUES, get_settings
from discovery.errors import ConfigurationError, UpstreamError
from discovery.etl.classifier import is_actual_opportunity, is_gov_domain, is_government_related
from discovery.models import SearchResponse, SearchResult

logger = logging.getLogger(__name__)

BASE_URL = "https://api.search.brave.com/res/v1/web/search"
GOV_SITE_CLAUSE = '(site:.gov OR site:.mil OR "government contracts")'

FilterTier = Tuple[str, Callable[[SearchResult], bool]]

# Tried in order; the first tier that keeps anything wins.
GOV_FILTER_TIERS: Sequence[FilterTier] = (
    ("actual_opportunity", is_actual_opportunity),
    ("gov_domain", is_gov_domain),
    ("government_related", is_government_related),
)


def extract_domain(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def parse_web_results(data: Optional[Dict[str, Any]]) -> List[SearchResult]:
    """Turn a raw Brave payload into SearchResult objects ranked by original position."""
    if not isinstance(data, dict):
        data = {}
    web = data.get("web") or {}
    items = web.get("results") if isinstance(web, dict) else None

    if not isinstance(items, list) or not items:
        logger.warning(
            "Brave Search returned no web results. has_web=%s keys=%s",
            bool(web),
            list(data.keys())[:10],
        )
        return []

    results: List[SearchResult] = []
    for index, raw in enumerate(items):
        if not isinstance(raw, dict):
            continue
        url = raw.get("url") or ""
        results.append(
            SearchResult(
                title=raw.get("title") or "",
                url=url,
                description=raw.get("description") or "",
                domain=extract_domain(url),
                rank=index + 1,
                published_date=raw.get("published_date") or raw.get("age") or None,
            )
        )
    return results


def apply_fallback_filters(results: List[SearchResult], tiers: Sequence[FilterTier] = GOV_FILTER_TIERS) -> List[SearchResult]:
    for name, predicate in tiers:
        kept = [result for result in results if predicate(result)]
        if kept:
            logger.info("Filter tier %s kept %d of %d results", name, len(kept), len(results))
            return kept
    logger.info("No filter tier kept any of %d results", len(results))
    return []


class BraveSearchClient:
    """Thin wrapper around the Brave web-search endpoint.

    Build one instance at startup and pass it to request handlers; the api key
    is read once here and its absence only fails when a search is attempted.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.brave_search_api_key
        self._session = session or requests.Session()
        self._timeout = timeout if timeout is not None else settings.search_timeout
        if not self._api_key:
            logger.warning("BRAVE_SEARCH_API_KEY not configured")

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def search_opportunities(
        self,
        query: str,
        *,
        count: int = 10,
        filter_gov: bool = True,
        freshness: Optional[str] = None,
    ) -> SearchResponse:
        if not self._api_key:
            raise ConfigurationError("Brave Search API key not configured")
        if freshness is not None and freshness not in FRESHNESS_VALUES:
            raise ValueError(f"freshness must be one of {', '.join(FRESHNESS_VALUES)}")

        search_query = f"{query} {GOV_SITE_CLAUSE}" if filter_gov else query

        params = {
            "q": search_query,
            "count": str(count),
            "text_decorations": "false",
            "search_lang": "en",
            "country": "US",
        }
        if freshness:
            params["freshness"] = freshness

        data = self._get(params)
        results = parse_web_results(data)
        if filter_gov:
            results = apply_fallback_filters(results)

        return SearchResponse(query=search_query, results=results)

    def _get(self, params: Dict[str, str]) -> Dict[str, Any]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": self._api_key,
        }
        logger.info("Calling Brave Search for q=%s count=%s", params["q"], params["count"])
        try:
            response = self._session.get(BASE_URL, params=params, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Brave Search request failed: %s", exc)
            raise UpstreamError(None, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            logger.error("Brave Search returned status=%s body=%s", response.status_code, response.text[:500])
            raise UpstreamError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            logger.error("Brave Search returned a non-JSON body: %s", response.text[:200])
            raise UpstreamError(response.status_code, response.text) from exc
