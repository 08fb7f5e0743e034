"""Client utilities for the 2GIS catalog API."""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter

from relax_search.core.config import Settings
from relax_search.etl.transform import parse_candidates, parse_rating
from relax_search.models import Candidate, Rating

logger = logging.getLogger(__name__)


class CatalogError(RuntimeError):
    """Raised when a catalog call cannot be completed or returns garbage."""


def build_session(pool_maxsize: int = 10) -> requests.Session:
    """Session whose connection pool can serve ``pool_maxsize`` concurrent workers."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class CatalogClient:
    def __init__(
        self,
        api_key: str,
        base_url: str,
        version: str,
        page_size: int = 20,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.page_size = page_size
        self.timeout = timeout
        self.session = session or build_session()

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "CatalogClient":
        return cls(
            api_key=settings.catalog_api_key,
            base_url=settings.catalog_base_url,
            version=settings.catalog_api_version,
            page_size=settings.catalog_page_size,
            timeout=settings.catalog_timeout,
            session=session or build_session(settings.pool_size),
        )

    def search_firms(self, what: str, where: str) -> List[Candidate]:
        """First page of firms matching ``what`` in ``where``, best rated first."""
        params = {
            "version": self.version,
            "key": self.api_key,
            "what": what,
            "where": where,
            "sort": "rating",
            "pagesize": str(self.page_size),
            "page": "1",
        }
        payload = self._get("search", params)
        candidates = parse_candidates(payload)
        logger.debug("search what=%s where=%s returned %d firms", what, where, len(candidates))
        return candidates

    def firm_rating(self, firm_id: str) -> Rating:
        params = {"version": self.version, "key": self.api_key, "id": firm_id}
        payload = self._get("profile", params)
        return parse_rating(payload, firm_id)

    def _get(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise CatalogError(f"{endpoint} request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogError(f"{endpoint} returned malformed JSON") from exc

        if not isinstance(payload, dict):
            raise CatalogError(f"{endpoint} returned {type(payload).__name__}, expected an object")
        return payload
