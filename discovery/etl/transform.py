"""Utilities for turning stored company rows into search profiles."""

import logging
from typing import Any, Dict, Optional, Tuple

from discovery.models import CompanyProfile

logger = logging.getLogger(__name__)


def parse_headquarters(address: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return (city, state) from a structured or "City, State, ..." address."""
    if isinstance(address, dict):
        return address.get("city") or None, address.get("state") or None
    if isinstance(address, str):
        parts = [part.strip() for part in address.split(",")]
        if len(parts) >= 2:
            return parts[0] or None, parts[1] or None
    return None, None


def _string_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item).strip() for item in value if item is not None and str(item).strip())


def to_company_profile(row: Dict[str, Any]) -> CompanyProfile:
    city, state = parse_headquarters(row.get("headquarters_address"))
    profile_data = row.get("profile_data") or {}
    if not isinstance(profile_data, dict):
        logger.debug("Ignoring non-dict profile_data for company %s", row.get("id"))
        profile_data = {}

    return CompanyProfile(
        industry=row.get("industry") or "",
        city=city,
        state=state,
        naics_codes=_string_tuple(profile_data.get("naics_codes")),
        business_type=row.get("business_type") or None,
        counties=_string_tuple(profile_data.get("counties")),
        cities=_string_tuple(profile_data.get("cities")),
    )
