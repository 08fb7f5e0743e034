"""Per-location resolution: the first reviewed firm with a positive rating."""

from __future__ import annotations

import logging
import time
from typing import Optional

from relax_search.etl.transform import format_address
from relax_search.models import LocationResult
from relax_search.vendors.catalog import CatalogClient

logger = logging.getLogger(__name__)


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline


def resolve_location(
    client: CatalogClient,
    what: str,
    where: str,
    deadline: Optional[float] = None,
) -> Optional[LocationResult]:
    """Return the result for ``where`` or ``None`` when no firm qualifies.

    Candidates are scanned in the order the catalog returned them (rating sort).
    Firms without a review count are skipped without a profile call. The first
    firm whose profile rating is strictly positive wins, even if a later firm
    might rate higher. ``CatalogError`` from either call propagates.

    ``deadline`` is a ``time.monotonic()`` value; once it passes no further
    catalog call is made and ``None`` is returned.
    """
    started = time.perf_counter()
    result: Optional[LocationResult] = None

    if _expired(deadline):
        logger.info("Deadline passed before searching what=%s where=%s", what, where)
        return None

    candidates = client.search_firms(what, where)
    for candidate in candidates:
        if not candidate.has_reviews:
            continue
        if _expired(deadline):
            logger.info("Deadline passed while scanning what=%s where=%s", what, where)
            return None

        logger.debug("Firm %s in %s has %d reviews", candidate.id, where, candidate.review_count)
        rating = client.firm_rating(candidate.id)
        if rating.is_positive:
            result = LocationResult(
                name=candidate.name,
                address=format_address(where, candidate.address),
                rating=rating.value,
            )
            break

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Resolved what=%s where=%s found=%s candidates=%d in %.1f ms",
        what,
        where,
        result is not None,
        len(candidates),
        elapsed_ms,
    )
    return result
