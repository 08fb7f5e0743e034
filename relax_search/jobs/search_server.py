"""HTTP entrypoint serving best-rated firm searches."""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from typing import Any

from flask import Flask, Response, jsonify, request

from relax_search.core.aggregator import SearchAggregator
from relax_search.core.config import get_settings
from relax_search.models import ValidationError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# ---------- App ----------
app = Flask(__name__)


@lru_cache(maxsize=1)
def get_aggregator() -> SearchAggregator:
    """Build the process-wide aggregator (settings, client and pool) once."""
    return SearchAggregator(get_settings())


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    aggregator = get_aggregator()
    return (
        jsonify(
            {
                "status": "ok",
                "locations": len(aggregator.settings.locations),
                "pool": aggregator.pool.metrics().to_dict(),
            }
        ),
        200,
    )


@app.get("/search")
def search() -> Any:
    """
    Best rated firm per configured location for ``what``.
    Responds 400 with an empty body when ``what`` is missing or blank.
    """
    what = request.args.get("what", "")
    if not what.strip():
        return Response(status=400)

    try:
        results = get_aggregator().search(what)
    except ValidationError as exc:
        logger.info("Rejected search: %s", exc)
        return Response(status=400)

    body = json.dumps([item.to_dict() for item in results], ensure_ascii=False)
    return Response(body.encode("utf-8"), status=200, content_type=JSON_CONTENT_TYPE)


def main() -> None:
    """Bind on $PORT when the platform injects it, otherwise on the configured port."""
    env_port = os.getenv("PORT")
    port = int(env_port or get_settings().port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)

    app.run(host="0.0.0.0", port=port, threaded=True)


if __name__ == "__main__":
    main()
