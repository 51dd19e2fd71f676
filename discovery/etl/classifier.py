"""Heuristics separating real procurement listings from informational pages.

Search results for contracting queries are dominated by SEO content (NAICS
explainers, compliance blogs) sharing vocabulary with real listings, so plain
keyword matching is not enough. `is_actual_opportunity` also looks at URL shape
and applies per-domain rules; `is_government_related` is the loose fallback.
"""

import re

from discovery.models import SearchResult

OPPORTUNITY_DOMAINS = (
    "sam.gov",
    "beta.sam.gov",
    "grants.gov",
    "usaspending.gov",
    "contracts.gov",
    "fbo.gov",
    "govtribe.com",
    "governmentcontracts.us",
)
SAM_DOMAINS = ("sam.gov", "beta.sam.gov")

OPPORTUNITY_PATHS = (
    "/opportunity/",
    "/solicitation/",
    "/rfp/",
    "/rfq/",
    "/contract/",
    "/award/",
    "/notice/",
    "/pre-solicitation",
    "/sources-sought",
    "/view/",
    "/details/",
    "/contract-opportunity/",
    "/solicitation-details/",
)

EXCLUDE_PATHS = (
    "/home",
    "/search",
    "/browse",
    "/index",
    "/main",
    "/about",
    "/contact",
    "/help",
    "/faq",
    "/blog",
    "/news",
    "/resources",
    "/guides",
    "/naics-codes",
    "/top-codes",
    "/list",
)

EXCLUDE_KEYWORDS = (
    "blog",
    "article",
    "guide",
    "how to",
    "understanding",
    "what are",
    "101",
    "decoded",
    "top codes",
    "list of",
    "importance of",
    "why they matter",
    "naics codes by domain",
    "main page",
    "homepage",
    "browse opportunities",
    "search opportunities",
)

OPPORTUNITY_INDICATORS = (
    "solicitation",
    "rfp",
    "rfq",
    "contract opportunity",
    "pre-solicitation",
    "sources sought",
    "notice id",
    "opportunity id",
    "award id",
    "contract number",
    "solicitation number",
)

GOVERNMENT_DOMAIN_MARKERS = (".gov", ".mil", ".state.", ".county.", ".city.")

GOVERNMENT_KEYWORDS = (
    "government",
    "federal",
    "contract",
    "solicitation",
    "rfp",
    "rfq",
    "bid",
    "procurement",
    "sam.gov",
    "grants.gov",
    "usaspending",
    "gsa",
)

# An exclude path is ignored when one of these is also in the URL.
EXCLUDE_OVERRIDE_RE = re.compile(r"/opportunity/|/solicitation/|/rfp/|/contract/")
SAM_OPPORTUNITY_RE = re.compile(r"/opportunities/|/entity/|/view/|/award/|/contract/|/notice/")
UUID_SEGMENT_RE = re.compile(r"/[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}")
GOVERNMENTCONTRACTS_RE = re.compile(r"/contract/|/opportunity/")
BARE_PAGE_RE = re.compile(r"/$|/index|/home|/search|/browse")
LISTING_PAGE_RE = re.compile(r"/list|/search|/browse|/index")


def _combined_text(result: SearchResult) -> str:
    return f"{result.title} {result.description}".lower()


def _has_opportunity_path(url: str) -> bool:
    return any(path in url for path in OPPORTUNITY_PATHS)


def is_actual_opportunity(result: SearchResult) -> bool:
    """Return True when the result looks like an individual opportunity page."""
    url = result.url.lower()
    text = _combined_text(result)

    if any(keyword in text for keyword in EXCLUDE_KEYWORDS):
        return False

    if any(path in url for path in EXCLUDE_PATHS) and not EXCLUDE_OVERRIDE_RE.search(url):
        return False

    if any(domain in url for domain in OPPORTUNITY_DOMAINS):
        if any(domain in url for domain in SAM_DOMAINS):
            # Main SAM.gov listing pages are never opportunities.
            return bool(SAM_OPPORTUNITY_RE.search(url) or UUID_SEGMENT_RE.search(url))
        if "governmentcontracts.us" in url:
            return _has_opportunity_path(url) or bool(GOVERNMENTCONTRACTS_RE.search(url))
        if _has_opportunity_path(url):
            return True

    if _has_opportunity_path(url):
        return True

    if ".gov" in url and not BARE_PAGE_RE.search(url):
        if any(indicator in text for indicator in OPPORTUNITY_INDICATORS):
            return not LISTING_PAGE_RE.search(url)

    return False


def is_government_related(result: SearchResult) -> bool:
    """Loose check used when nothing stricter matched."""
    if result.domain and any(marker in result.domain for marker in GOVERNMENT_DOMAIN_MARKERS):
        return True

    url = result.url.lower()
    if any(marker in url for marker in GOVERNMENT_DOMAIN_MARKERS):
        return True

    text = _combined_text(result)
    return any(keyword in text for keyword in GOVERNMENT_KEYWORDS)


def is_gov_domain(result: SearchResult) -> bool:
    return ".gov" in result.domain or ".gov" in result.url
