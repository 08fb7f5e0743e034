"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_BASE_URL = "http://catalog.api.2gis.ru"
DEFAULT_CATALOG_API_VERSION = "1.3"


class ConfigError(RuntimeError):
    """Raised when a configuration value cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    catalog_api_key: str = ""
    locations: Tuple[str, ...] = ()
    catalog_base_url: str = DEFAULT_CATALOG_BASE_URL
    catalog_api_version: str = DEFAULT_CATALOG_API_VERSION
    catalog_page_size: int = 20
    catalog_timeout: float = 10.0
    search_timeout: float = 30.0
    pool_size: int = 8
    pool_queue_size: int = 32
    pool_acquire_timeout: float = 1.0
    port: int = 8080


def parse_locations(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma separated location list, dropping blank entries."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _get_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    catalog_api_key = os.getenv("CATALOG_API_KEY", "")
    locations = parse_locations(os.getenv("SEARCH_LOCATIONS"))

    if not catalog_api_key:
        logger.warning("CATALOG_API_KEY is not configured; catalog requests will be rejected.")
    if not locations:
        logger.warning("SEARCH_LOCATIONS is not set; every search will return an empty result.")
    logger.info("Configured search locations: %s", list(locations))

    return Settings(
        catalog_api_key=catalog_api_key,
        locations=locations,
        catalog_base_url=os.getenv("CATALOG_BASE_URL", DEFAULT_CATALOG_BASE_URL).rstrip("/"),
        catalog_api_version=os.getenv("CATALOG_API_VERSION", DEFAULT_CATALOG_API_VERSION),
        catalog_page_size=_get_int("CATALOG_PAGE_SIZE", 20, minimum=1),
        catalog_timeout=_get_float("CATALOG_TIMEOUT_SECONDS", 10.0),
        search_timeout=_get_float("SEARCH_TIMEOUT_SECONDS", 30.0),
        pool_size=_get_int("SEARCH_POOL_SIZE", 8, minimum=1),
        pool_queue_size=_get_int("SEARCH_POOL_QUEUE", 32),
        pool_acquire_timeout=_get_float("SEARCH_POOL_ACQUIRE_TIMEOUT", 1.0),
        port=_get_int("WORKER_PORT", 8080, minimum=1),
    )
