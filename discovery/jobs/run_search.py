"""CLI job to run an opportunity search for an ad-hoc company profile."""

import argparse
import json
import logging
from dataclasses import asdict
from typing import List, Optional

from discovery.core.config import FRESHNESS_VALUES, get_settings
from discovery.errors import ConfigurationError, UpstreamError
from discovery.etl.query_builder import build_company_query
from discovery.etl.scorer import score_for_profile
from discovery.models import CompanyProfile, ScoredResult
from discovery.vendors.brave_search import BraveSearchClient

logger = logging.getLogger(__name__)


def run_search_job(
    profile: CompanyProfile,
    *,
    count: int,
    filter_gov: bool = True,
    freshness: Optional[str] = None,
    client: Optional[BraveSearchClient] = None,
) -> dict:
    query = build_company_query(profile)
    logger.info("Running Brave search for query=%s", query)

    client = client or BraveSearchClient()
    response = client.search_opportunities(query, count=count, filter_gov=filter_gov, freshness=freshness)
    scored: List[ScoredResult] = score_for_profile(response.results, profile)
    logger.info("Scored %d results", len(scored))

    return {
        "query": query,
        "sent_query": response.query,
        "results": [asdict(item) for item in scored],
        "total_results": len(scored),
    }


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Search Brave for government contract opportunities")
    parser.add_argument("--industry", required=True, help="Company industry, e.g. Construction")
    parser.add_argument("--city", help="Headquarters city")
    parser.add_argument("--state", help="Headquarters state")
    parser.add_argument("--naics", dest="naics_codes", action="append", default=[], help="NAICS code (repeatable)")
    parser.add_argument("--business-type", dest="business_type", help="e.g. Small Business")
    parser.add_argument("--county", dest="counties", action="append", default=[], help="Target county (repeatable)")
    parser.add_argument("--target-city", dest="cities", action="append", default=[], help="Target city (repeatable)")
    parser.add_argument("--count", type=int, default=settings.result_count, help="Number of results to request")
    parser.add_argument("--freshness", choices=FRESHNESS_VALUES, default=settings.freshness)
    parser.add_argument(
        "--no-gov-filter",
        dest="filter_gov",
        action="store_false",
        help="Return every provider hit instead of the government-filtered set",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    profile = CompanyProfile(
        industry=args.industry,
        city=args.city,
        state=args.state,
        naics_codes=tuple(args.naics_codes),
        business_type=args.business_type,
        counties=tuple(args.counties),
        cities=tuple(args.cities),
    )

    try:
        output = run_search_job(profile, count=args.count, filter_gov=args.filter_gov, freshness=args.freshness)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except UpstreamError as exc:
        logger.error("Brave search failed: %s", exc)
        raise SystemExit(1) from exc

    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
