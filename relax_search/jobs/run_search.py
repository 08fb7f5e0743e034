"""CLI job running one aggregate search and printing the JSON result."""

import argparse
import dataclasses
import json
import logging
import sys
from typing import List, Optional

from relax_search.core.aggregator import SearchAggregator
from relax_search.core.config import get_settings
from relax_search.models import ValidationError

logger = logging.getLogger(__name__)


def run_search_job(what: str, locations: Optional[List[str]] = None) -> List[dict]:
    settings = get_settings()
    if locations:
        settings = dataclasses.replace(settings, locations=tuple(locations))

    aggregator = SearchAggregator(settings)
    try:
        results = aggregator.search(what)
    finally:
        aggregator.close()
    return [item.to_dict() for item in results]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the best rated firm per location")
    parser.add_argument("what", help="What to search for, e.g. 'pizza'")
    parser.add_argument(
        "--location",
        dest="locations",
        action="append",
        help="Location to search in; repeat to search several. Defaults to SEARCH_LOCATIONS.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        payload = run_search_job(args.what, args.locations)
    except ValidationError as exc:
        logger.error("Invalid search: %s", exc)
        return 2

    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
