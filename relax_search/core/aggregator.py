"""Fan a search term out to every configured location and merge the results."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, wait
from typing import List, Optional, Tuple

from relax_search.core.config import Settings
from relax_search.core.ordering import order_by_rating
from relax_search.core.pool import PoolExhaustionError, WorkerPool
from relax_search.core.resolver import resolve_location
from relax_search.models import LocationResult, SearchQuery
from relax_search.vendors.catalog import CatalogClient, CatalogError

logger = logging.getLogger(__name__)


class SearchAggregator:
    """Answers "best rated firm per location" queries.

    The pool and client are shared by concurrent requests; nothing else is
    kept between calls to :meth:`search`.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[CatalogClient] = None,
        pool: Optional[WorkerPool] = None,
    ) -> None:
        self.settings = settings
        self.client = client or CatalogClient.from_settings(settings)
        self.pool = pool or WorkerPool.from_settings(settings)

    def search(self, term: Optional[str]) -> List[LocationResult]:
        """Return one result per resolved location, best rated first.

        Raises ``ValidationError`` for an empty term before any remote call.
        Failed, exhausted or timed out locations are dropped from the result.
        Submission, resolution and the join all share one ``search_timeout``
        deadline; resolvers stop calling the catalog once it passes.
        """
        query = SearchQuery.build(term, self.settings.locations)
        started = time.perf_counter()
        deadline = time.monotonic() + self.settings.search_timeout

        submitted: List[Tuple[str, Future]] = []
        for location in query.locations:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning("Skipping location %s: search deadline passed before submission", location)
                continue
            try:
                future = self.pool.submit(
                    resolve_location,
                    self.client,
                    query.term,
                    location,
                    deadline=deadline,
                    acquire_timeout=min(self.pool.acquire_timeout, remaining),
                )
            except PoolExhaustionError as exc:
                logger.warning("Skipping location %s: %s", location, exc)
                continue
            submitted.append((location, future))

        if submitted:
            remaining = max(deadline - time.monotonic(), 0.0)
            _, pending = wait([future for _, future in submitted], timeout=remaining)
            for future in pending:
                future.cancel()

        results: List[LocationResult] = []
        for location, future in submitted:
            outcome = self._collect(query.term, location, future)
            if outcome is not None:
                results.append(outcome)

        ordered = order_by_rating(results)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Search what=%s resolved %d/%d locations in %.1f ms",
            query.term,
            len(ordered),
            len(query.locations),
            elapsed_ms,
        )
        logger.debug("Pool metrics: %s", self.pool.metrics().to_dict())
        return ordered

    def _collect(self, term: str, location: str, future: Future) -> Optional[LocationResult]:
        if not future.done():
            logger.warning(
                "Location %s did not finish within %.1fs for what=%s",
                location,
                self.settings.search_timeout,
                term,
            )
            return None
        if future.cancelled():
            logger.warning("Location %s was cancelled for what=%s", location, term)
            return None

        try:
            return future.result()
        except CatalogError as exc:
            logger.warning("Catalog call failed for what=%s where=%s: %s", term, location, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure resolving what=%s where=%s: %s", term, location, exc)
        return None

    def close(self) -> None:
        self.pool.shutdown(wait=False)
