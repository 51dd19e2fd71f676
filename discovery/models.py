"""Core data models shared by the opportunity discovery pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True, slots=True)
class CompanyProfile:
    """Search-relevant view of a company record."""

    industry: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    naics_codes: Tuple[str, ...] = ()
    business_type: Optional[str] = None
    counties: Tuple[str, ...] = ()
    cities: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Normalized snapshot of a single Brave web-search hit.

    `rank` is the 1-based position in the provider's unfiltered response and is
    never renumbered after filtering.
    """

    title: str
    url: str
    description: str
    domain: str
    rank: int
    published_date: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ScoredResult:
    title: str
    url: str
    description: str
    domain: str
    rank: int
    score: int
    published_date: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SearchResponse:
    query: str
    results: List[SearchResult] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return len(self.results)
