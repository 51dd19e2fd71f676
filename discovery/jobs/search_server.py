"""HTTP entrypoint for the admin opportunity search (Cloud Run friendly)."""

from __future__ import annotations

import hmac
import logging
import os
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, request

from discovery.core.config import get_settings
from discovery.core.db import fetch_company, save_search_results
from discovery.errors import ConfigurationError, UpstreamError
from discovery.etl.query_builder import build_company_query
from discovery.etl.scorer import score_for_profile
from discovery.etl.transform import to_company_profile
from discovery.vendors.brave_search import BraveSearchClient

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

SEARCH_CLIENT_KEY = "brave_search"


def create_app(search_client: Optional[BraveSearchClient] = None) -> Flask:
    app = Flask(__name__)
    app.extensions[SEARCH_CLIENT_KEY] = search_client or BraveSearchClient()

    app.add_url_rule("/", "root", root, methods=["GET"])
    app.add_url_rule("/healthz", "healthcheck", healthcheck, methods=["GET"])
    app.add_url_rule(
        "/api/admin/search-opportunities",
        "search_opportunities",
        search_opportunities,
        methods=["POST"],
    )
    return app


# ---------- Routes ----------


def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


def healthcheck() -> Any:
    """Lightweight health endpoint; does not touch the database or the provider."""
    client = current_app.extensions[SEARCH_CLIENT_KEY]
    return (
        jsonify(
            {
                "status": "ok",
                "search_configured": client.configured,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


def search_opportunities() -> Any:
    """
    Search Brave for opportunities matching a company and store them on the request.
    Required JSON fields: requestId, companyId
    """
    if not _is_authorized():
        return jsonify({"error": "unauthorized"}), 401

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        payload = {}
    request_id = payload.get("requestId")
    company_id = payload.get("companyId")
    if not request_id or not company_id:
        return jsonify({"error": "Request ID and Company ID are required"}), 400
    if not isinstance(request_id, (str, int)) or not isinstance(company_id, (str, int)):
        return jsonify({"error": "Request ID and Company ID must be strings or integers"}), 400

    try:
        company = fetch_company(company_id)
        if company:
            profile = to_company_profile(company)
            query = build_company_query(profile)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Company lookup failed for request %s: %s", request_id, exc)
        return jsonify({"error": "Internal server error", "details": str(exc), "retryable": True}), 500
    if not company:
        return jsonify({"error": "Company not found"}), 404

    settings = get_settings()
    client: BraveSearchClient = current_app.extensions[SEARCH_CLIENT_KEY]

    try:
        response = client.search_opportunities(
            query,
            count=settings.result_count,
            filter_gov=True,
            freshness=settings.freshness,
        )
    except ConfigurationError as exc:
        logger.error("Opportunity search not configured: %s", exc)
        return jsonify({"error": "search not configured"}), 500
    except UpstreamError as exc:
        logger.warning("Opportunity search failed for request %s: %s", request_id, exc)
        return jsonify({"error": "search failed, try again", "retryable": True, "status": exc.status_code}), 502

    scored = score_for_profile(response.results, profile)
    searched_at = datetime.now(timezone.utc)

    try:
        saved = save_search_results(request_id, query, scored, searched_at)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error updating opportunity request %s: %s", request_id, exc)
        saved = False
    if not saved:
        return jsonify({"error": "Failed to save search results"}), 500

    if scored:
        message = f"Found {len(scored)} opportunities"
    else:
        message = "No opportunities found for this profile"

    return (
        jsonify(
            {
                "success": True,
                "query": query,
                "sent_query": response.query,
                "results": [asdict(item) for item in scored],
                "total_results": len(scored),
                "message": message,
            }
        ),
        200,
    )


# ---------- Internals ----------


def _is_authorized() -> bool:
    expected = get_settings().admin_api_token
    if not expected:
        return True
    provided = request.headers.get("X-Admin-Token", "")
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def main() -> None:
    """Cloud Run injects PORT; fall back to WORKER_PORT for local runs."""
    port = int(os.getenv("PORT") or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    create_app().run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
