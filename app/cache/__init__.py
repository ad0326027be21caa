"""
Caching module with fixed per-space TTL and request coalescing.
"""
from .core import CacheEntry, CacheSpace, CacheState, CacheStatus
from .coalescer import InFlightRequest
from .ttl_policies import (
    DETAIL_CACHE_PREFIX,
    FULL_WORKFLOWS_CACHE_KEY,
    LIST_PAGE,
    LIST_PAGE_SIZE,
    detail_cache_key,
    get_ttl_for_space,
)
from .manager import CacheSpaceManager, get_cache_manager, reset_cache_managers

__all__ = [
    # Core types
    "CacheEntry",
    "CacheSpace",
    "CacheState",
    "CacheStatus",
    # Coalescing
    "InFlightRequest",
    # TTL policies and keys
    "DETAIL_CACHE_PREFIX",
    "FULL_WORKFLOWS_CACHE_KEY",
    "LIST_PAGE",
    "LIST_PAGE_SIZE",
    "detail_cache_key",
    "get_ttl_for_space",
    # Manager
    "CacheSpaceManager",
    "get_cache_manager",
    "reset_cache_managers",
]
