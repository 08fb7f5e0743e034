"""Ordering of aggregated location results."""

from typing import Iterable, List

from relax_search.models import LocationResult


def order_by_rating(results: Iterable[LocationResult]) -> List[LocationResult]:
    """Best rated first. Equal ratings keep their input order."""
    return sorted(results, key=lambda item: item.rating, reverse=True)
