"""Build Brave search queries from a company profile."""

from typing import List

from discovery.models import CompanyProfile

BASE_TERMS = ("government contract opportunity", "solicitation", "RFP")
MAX_CITIES = 2
MAX_COUNTIES = 2
MAX_NAICS_CODES = 3


def build_company_query(profile: CompanyProfile) -> str:
    """Return a single query string focused on actual contract opportunities.

    Location goes right after the fixed discovery terms because geography is the
    strongest relevance filter for the provider's ranking.
    """
    parts: List[str] = list(BASE_TERMS)

    if profile.cities:
        parts.extend(profile.cities[:MAX_CITIES])
    if profile.counties:
        parts.extend(profile.counties[:MAX_COUNTIES])
    if profile.city and profile.state:
        parts.append(profile.city)
        parts.append(profile.state)
    elif profile.state:
        parts.append(profile.state)

    if profile.industry:
        parts.append(profile.industry)

    if profile.naics_codes:
        parts.append("NAICS")
        parts.extend(profile.naics_codes[:MAX_NAICS_CODES])

    if profile.business_type:
        parts.append(profile.business_type)

    return " ".join(parts)
