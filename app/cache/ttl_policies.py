"""
TTL configuration per cache space.
"""
from typing import Dict, Optional

from .core import CacheSpace
from config.settings import settings


# Key of the single list entry (first page, fixed pagination)
LIST_PAGE = 0
LIST_PAGE_SIZE = 50
FULL_WORKFLOWS_CACHE_KEY = f"full-workflows:page={LIST_PAGE}:pageSize={LIST_PAGE_SIZE}"

# Prefix of per-id detail entries
DETAIL_CACHE_PREFIX = "detail:"


def detail_cache_key(workflow_id: str) -> str:
    """Cache key for a single workflow detail."""
    return f"{DETAIL_CACHE_PREFIX}{workflow_id}"


def get_ttl_for_space(
    space: CacheSpace,
    overrides: Optional[Dict[CacheSpace, int]] = None,
) -> int:
    """
    Get the TTL (whole seconds) for a cache space.

    Both spaces share WORKFLOWS_CACHE_TTL_SECONDS unless an override is given.

    Args:
        space: The cache space
        overrides: Optional per-space TTLs, mainly for tests

    Returns:
        TTL in seconds (never negative)
    """
    if overrides and space in overrides:
        ttl = overrides[space]
    else:
        ttl = settings.workflows_cache_ttl_seconds
    return max(int(ttl), 0)
