"""
Core cache data structures.
"""
import time
from dataclasses import dataclass
from typing import Any, Optional
from enum import Enum

from .coalescer import InFlightRequest


class CacheSpace(Enum):
    """The two cache spaces the service keeps."""
    WORKFLOW_LIST = "workflow_list"       # single "full first page" entry
    WORKFLOW_DETAIL = "workflow_detail"   # one entry per workflow id


class CacheState(Enum):
    """Observable state of a cache entry."""
    EMPTY = "empty"       # Key unseen, or only ever failed
    PENDING = "pending"   # Upstream call in flight
    FRESH = "fresh"       # Value within TTL
    STALE = "stale"       # Value past TTL, kept for inspection


class CacheStatus(Enum):
    """How a single read was served. Used for the X-Cache header."""
    HIT = "HIT"
    HIT_STALE_INFLIGHT = "HIT-STALE-INFLIGHT"
    MISS = "MISS"
    MISS_REFRESH = "MISS-REFRESH"


@dataclass
class CacheEntry:
    """
    Per-key cache slot.

    The stored value and the in-flight marker are separate fields: a key can
    hold last-known-good data while a refresh is pending, and a failed refresh
    clears only ``pending``.
    """
    value: Any = None
    has_value: bool = False
    expires_at: float = 0.0   # time.monotonic() based
    pending: Optional[InFlightRequest] = None

    def is_fresh(self, now: Optional[float] = None) -> bool:
        """Check if the stored value is within its TTL."""
        if not self.has_value:
            return False
        now = time.monotonic() if now is None else now
        return now < self.expires_at

    def state(self, now: Optional[float] = None) -> CacheState:
        """Determine the entry state. Pending wins over any stored value."""
        if self.pending is not None:
            return CacheState.PENDING
        if not self.has_value:
            return CacheState.EMPTY
        if self.is_fresh(now):
            return CacheState.FRESH
        return CacheState.STALE

    def seconds_to_expiry(self, now: Optional[float] = None) -> float:
        if not self.has_value:
            return 0.0
        now = time.monotonic() if now is None else now
        return max(self.expires_at - now, 0.0)
