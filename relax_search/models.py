"""Core data models shared by the search pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple


class ValidationError(ValueError):
    """Raised when a search request cannot be served, e.g. an empty term."""


@dataclass(frozen=True)
class SearchQuery:
    """One inbound search: a term scoped to the configured locations."""

    term: str
    locations: Tuple[str, ...] = ()

    @classmethod
    def build(cls, term: Optional[str], locations: Sequence[str]) -> "SearchQuery":
        cleaned = (term or "").strip()
        if not cleaned:
            raise ValidationError("Search term must not be empty.")
        return cls(term=cleaned, locations=tuple(locations))


@dataclass(slots=True)
class Candidate:
    """A single firm from the catalog search response, before rating lookup."""

    id: str
    name: str = ""
    address: str = ""
    review_count: Optional[int] = None

    @property
    def has_reviews(self) -> bool:
        return self.review_count is not None


@dataclass(slots=True)
class Rating:
    business_id: str
    value: Optional[float] = None

    @property
    def is_positive(self) -> bool:
        # Missing rating and an explicit 0.0 are both treated as "not rated".
        return self.value is not None and math.isfinite(self.value) and self.value > 0.0


@dataclass(frozen=True)
class LocationResult:
    """Best rated firm found for one location."""

    name: str
    address: str
    rating: float

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "address": self.address, "rating": self.rating}
