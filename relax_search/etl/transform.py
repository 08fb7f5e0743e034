"""Utilities for transforming catalog API responses into search records."""

import logging
import math
from typing import Any, Dict, List, Optional

from relax_search.models import Candidate, Rating

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_review_count(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def to_candidate(item: Dict[str, Any]) -> Optional[Candidate]:
    firm_id = _as_text(item.get("id"))
    if not firm_id:
        logger.debug("Skipping search result without id: %s", item)
        return None

    return Candidate(
        id=firm_id,
        name=_as_text(item.get("name")),
        address=_as_text(item.get("address")),
        review_count=_as_review_count(item.get("reviews_count")),
    )


def parse_candidates(payload: Optional[Dict[str, Any]]) -> List[Candidate]:
    """Extract candidates from a search payload, preserving response order."""
    if not payload:
        return []

    items = payload.get("result")
    if not isinstance(items, list):
        return []

    candidates: List[Candidate] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        candidate = to_candidate(item)
        if candidate is not None:
            candidates.append(candidate)
    return candidates


def parse_rating(payload: Optional[Dict[str, Any]], firm_id: str) -> Rating:
    """Read the string encoded ``rating`` of a profile payload.

    A missing or unparsable rating yields ``Rating(value=None)``; it is never an error.
    """
    raw = (payload or {}).get("rating")
    if raw is None:
        return Rating(business_id=firm_id)

    logger.debug("Raw rating for %s: %r", firm_id, raw)
    try:
        value = float(str(raw).strip())
    except ValueError:
        logger.warning("Unparsable rating %r for firm %s", raw, firm_id)
        return Rating(business_id=firm_id)

    if not math.isfinite(value):
        logger.warning("Non-finite rating %r for firm %s", raw, firm_id)
        return Rating(business_id=firm_id)
    return Rating(business_id=firm_id, value=value)


def format_address(location: str, address: str) -> str:
    return f"{location}, {address}"
