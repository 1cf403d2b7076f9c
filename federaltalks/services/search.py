"""
Contract Relevance Search

Weighted substring scoring over an in-memory candidate list, AND-combined
with structured facet filters.

Score per query token (tokens of 3+ characters):
- title match: +10
- agency match: +8
- description match: +6
- products/services match: +7
- any keyword match: +9
Plus a flat +15 when the contract's NAICS code appears in the raw query.

A query with no usable tokens is browse mode: facets apply, nothing is
scored or dropped.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from federaltalks.config import DEADLINE_BUCKETS
from federaltalks.services.field_mapping import parse_keywords

FIELD_WEIGHTS = (
    ("title", 10),
    ("agency", 8),
    ("description", 6),
    ("products_services", 7),
)
KEYWORD_WEIGHT = 9
NAICS_BONUS = 15
MIN_TOKEN_LENGTH = 3


@dataclass
class SearchFacets:
    """Structured filters. None (or "all") disables a facet."""

    contract_type: Optional[str] = None
    state: Optional[str] = None
    naics_code: Optional[str] = None
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    set_aside: Optional[str] = None
    deadline: Optional[str] = "all"


@dataclass
class SearchHit:
    contract: Dict[str, Any]
    score: int


def tokenize(query: str) -> List[str]:
    return [token for token in (query or "").lower().split() if len(token) >= MIN_TOKEN_LENGTH]


def score_contract(contract: Dict[str, Any], tokens: List[str], raw_query: str = "") -> int:
    """Relevance score of one contract for already-tokenized terms."""
    score = 0
    keywords = [k.lower() for k in parse_keywords(contract.get("keywords"))]

    for token in tokens:
        for name, weight in FIELD_WEIGHTS:
            if token in (contract.get(name) or "").lower():
                score += weight
        if any(token in keyword for keyword in keywords):
            score += KEYWORD_WEIGHT

    naics = contract.get("naics_code")
    if naics and str(naics) in raw_query:
        score += NAICS_BONUS

    return score


# =============================================================================
# Facets
# =============================================================================

def _active(value: Any) -> bool:
    return value not in (None, "", "all")


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
        return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    return None


def passes_facets(contract: Dict[str, Any], facets: SearchFacets, now: datetime) -> bool:
    if _active(facets.contract_type) and contract.get("contract_type") != facets.contract_type:
        return False
    if _active(facets.state) and contract.get("state") != facets.state:
        return False
    if _active(facets.naics_code) and contract.get("naics_code") != facets.naics_code:
        return False
    if _active(facets.set_aside) and contract.get("set_aside_code") != facets.set_aside:
        return False

    budget_min = contract.get("budget_min")
    if facets.budget_min is not None and budget_min is not None and budget_min < facets.budget_min:
        return False
    budget_max = contract.get("budget_max")
    if facets.budget_max is not None and budget_max is not None and budget_max > facets.budget_max:
        return False

    days = DEADLINE_BUCKETS.get(facets.deadline or "all")
    if days is not None:
        deadline = _as_datetime(contract.get("response_deadline"))
        # Undated contracts never fall inside a deadline window
        if deadline is None or deadline > now + timedelta(days=days):
            return False

    return True


# =============================================================================
# Search
# =============================================================================

def search_contracts(
    query: str,
    candidates: List[Dict[str, Any]],
    facets: Optional[SearchFacets] = None,
    now: Optional[datetime] = None,
) -> List[SearchHit]:
    """
    Filter and rank candidates.

    Ties keep the candidates' original order. In search mode, contracts
    scoring zero are dropped even when they pass every facet.
    """
    facets = facets or SearchFacets()
    if (facets.deadline or "all") not in DEADLINE_BUCKETS:
        raise ValueError(f"Unknown deadline filter: {facets.deadline}")
    now = now or datetime.utcnow()

    filtered = [c for c in candidates if passes_facets(c, facets, now)]
    tokens = tokenize(query)

    if not tokens:
        return [SearchHit(contract=c, score=0) for c in filtered]

    hits = []
    for contract in filtered:
        score = score_contract(contract, tokens, query)
        if score > 0:
            hits.append(SearchHit(contract=contract, score=score))

    # list.sort is stable, so equal scores keep fetch order
    hits.sort(key=lambda hit: hit.score, reverse=True)
    return hits
