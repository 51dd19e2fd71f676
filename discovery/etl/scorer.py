"""Relevance scoring for filtered search results.

A weighted-linear heuristic an admin can sanity-check by hand before approving
results for a customer:

* base score 100
* +20 when the domain is a .gov domain
* +15 when the company's industry appears in the title or description
* +10 when any NAICS code appears in the title or description (counted once)
* -2 for every position below the top of the provider's original ranking

Scores never go below zero.
"""

from typing import Iterable, List, Optional, Sequence

from discovery.models import CompanyProfile, ScoredResult, SearchResult

BASE_SCORE = 100
GOV_DOMAIN_BONUS = 20
INDUSTRY_BONUS = 15
NAICS_BONUS = 10
RANK_PENALTY = 2


def score_result(result: SearchResult, industry: Optional[str], naics_codes: Sequence[str] = ()) -> int:
    score = BASE_SCORE
    raw_text = f"{result.title} {result.description}"
    text = raw_text.lower()

    if ".gov" in result.domain:
        score += GOV_DOMAIN_BONUS

    if industry and industry.lower() in text:
        score += INDUSTRY_BONUS

    for code in naics_codes or ():
        if code and code in raw_text:
            score += NAICS_BONUS
            break

    score -= (result.rank - 1) * RANK_PENALTY
    return max(0, score)


def score_results(
    results: Iterable[SearchResult],
    industry: Optional[str],
    naics_codes: Sequence[str] = (),
) -> List[ScoredResult]:
    """Score every result and return them best first; ties keep input order."""
    scored = [
        ScoredResult(
            title=result.title,
            url=result.url,
            description=result.description,
            domain=result.domain,
            rank=result.rank,
            score=score_result(result, industry, naics_codes),
            published_date=result.published_date,
        )
        for result in results
    ]
    return sorted(scored, key=lambda item: item.score, reverse=True)


def score_for_profile(results: Iterable[SearchResult], profile: CompanyProfile) -> List[ScoredResult]:
    return score_results(results, profile.industry, profile.naics_codes)
