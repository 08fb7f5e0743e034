import sys
import threading
import time
from pathlib import Path

import pytest

# Ensure the `relax_search` package is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from relax_search.etl.transform import parse_candidates, parse_rating  # noqa: E402
from relax_search.vendors.catalog import CatalogError  # noqa: E402


class FakeCatalog:
    """Stands in for CatalogClient with canned payloads per location and firm.

    ``searches`` maps location -> search payload (or an exception to raise),
    ``profiles`` maps firm id -> profile payload (or an exception to raise).
    ``gates`` maps location -> threading.Event the search waits on.
    ``profile_delay`` is slept on every profile call.
    """

    def __init__(self, searches=None, profiles=None, gates=None, profile_delay=0.0):
        self.searches = searches or {}
        self.profiles = profiles or {}
        self.gates = gates or {}
        self.profile_delay = profile_delay
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, call):
        with self._lock:
            self.calls.append(call)

    def search_firms(self, what, where):
        self._record(("search", what, where))
        gate = self.gates.get(where)
        if gate is not None:
            gate.wait(5)
        payload = self.searches.get(where, {})
        if isinstance(payload, Exception):
            raise payload
        return parse_candidates(payload)

    def firm_rating(self, firm_id):
        self._record(("profile", firm_id))
        if self.profile_delay:
            time.sleep(self.profile_delay)
        payload = self.profiles.get(firm_id, {})
        if isinstance(payload, Exception):
            raise payload
        return parse_rating(payload, firm_id)


@pytest.fixture
def fake_catalog():
    return FakeCatalog


@pytest.fixture
def network_error():
    return CatalogError("search request failed: connection reset")
