"""
Cache orchestration: fixed TTL per cache space plus request coalescing.
"""
import threading
import time
import logging
from typing import Dict, Optional, Callable, Any, Tuple

from .core import CacheEntry, CacheSpace, CacheState, CacheStatus
from .coalescer import InFlightRequest
from .ttl_policies import get_ttl_for_space

logger = logging.getLogger("cache.manager")


class CacheSpaceManager:
    """
    Read-through cache for one cache space with:
    - Fixed TTL for every entry in the space
    - At most one in-flight upstream call per key (unless forced)
    - Failures never cached; prior values survive a failed refresh
    - Per-read cache status for observability headers
    """

    def __init__(self, space: CacheSpace, ttl_seconds: int):
        """
        Initialize a cache space.

        Args:
            space: Which cache space this manager owns
            ttl_seconds: Freshness window applied on completion
        """
        self.space = space
        self.ttl_seconds = max(int(ttl_seconds), 0)
        self._entries: Dict[str, CacheEntry] = {}
        # Guards _entries and every entry's fields
        self._lock = threading.Lock()

        self._stats = {
            "hits": 0,
            "inflight_hits": 0,
            "misses": 0,
            "refreshes": 0,
            "failures": 0,
        }

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def get(self, cache_key: str) -> Optional[Any]:
        """Return the stored value only if present and unexpired."""
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is not None and entry.is_fresh():
                return entry.value
            return None

    def peek(self, cache_key: str) -> Optional[Any]:
        """Return the last stored value, fresh or stale."""
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is not None and entry.has_value:
                return entry.value
            return None

    def get_pending(self, cache_key: str) -> Optional[InFlightRequest]:
        """Return the in-flight handle for a key, if any."""
        with self._lock:
            entry = self._entries.get(cache_key)
            return entry.pending if entry is not None else None

    def get_state(self, cache_key: str) -> CacheState:
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is None:
                return CacheState.EMPTY
            return entry.state()

    def begin(self, cache_key: str) -> InFlightRequest:
        """
        Publish a new Pending handle for a key.

        Replaces any existing Pending marker; callers are expected to have
        checked get()/get_pending() first unless forcing a refresh.
        """
        with self._lock:
            return self._begin_locked(cache_key)

    def complete(
        self,
        cache_key: str,
        value: Any,
        handle: Optional[InFlightRequest] = None,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        """
        Store a Fresh value and resolve the in-flight handle.

        The Pending marker is only cleared if it still points at ``handle``;
        a forced refresh may have replaced it in the meantime.
        """
        ttl = self.ttl_seconds if ttl_seconds is None else max(int(ttl_seconds), 0)
        with self._lock:
            entry = self._entries.setdefault(cache_key, CacheEntry())
            if handle is None:
                handle = entry.pending
            entry.value = value
            entry.has_value = True
            entry.expires_at = time.monotonic() + ttl
            if entry.pending is handle:
                entry.pending = None

        if handle is not None:
            handle.set_result(value)

    def fail(
        self,
        cache_key: str,
        error: Optional[BaseException] = None,
        handle: Optional[InFlightRequest] = None,
    ) -> None:
        """
        Clear the Pending marker after a failed call.

        Any prior value and its expiry are left exactly as they were. The
        error is delivered to the handle's waiters only.
        """
        with self._lock:
            entry = self._entries.get(cache_key)
            if entry is not None:
                if handle is None:
                    handle = entry.pending
                if entry.pending is handle:
                    entry.pending = None
            self._stats["failures"] += 1

        if handle is not None:
            handle.set_error(error or RuntimeError(f"Fetch failed for {cache_key}"))

    # ------------------------------------------------------------------
    # Read policy
    # ------------------------------------------------------------------

    def fetch(
        self,
        cache_key: str,
        compute: Callable[[], Any],
        force_refresh: bool = False,
    ) -> Tuple[Any, CacheStatus]:
        """
        Get a value from cache, join an in-flight call, or compute it.

        Args:
            cache_key: Unique key within this space
            compute: Upstream call producing the value
            force_refresh: Always call compute, even if fresh or pending

        Returns:
            (value, cache_status) tuple

        Raises:
            Exception: Any error from compute, for the initiator and every
                waiter on the same in-flight handle
        """
        with self._lock:
            entry = self._entries.setdefault(cache_key, CacheEntry())

            if not force_refresh and entry.is_fresh():
                self._stats["hits"] += 1
                logger.debug(
                    f"CACHE HIT: {cache_key} "
                    f"[expires in {entry.seconds_to_expiry():.1f}s]"
                )
                return entry.value, CacheStatus.HIT

            in_flight = entry.pending if not force_refresh else None
            if in_flight is not None:
                in_flight.waiter_count += 1
                self._stats["inflight_hits"] += 1
                logger.debug(
                    f"Coalescing request for {cache_key} "
                    f"(waiters: {in_flight.waiter_count})"
                )
            else:
                had_value = entry.has_value
                handle = self._begin_locked(cache_key)
                if had_value:
                    self._stats["refreshes"] += 1
                else:
                    self._stats["misses"] += 1

        if in_flight is not None:
            return in_flight.wait(), CacheStatus.HIT_STALE_INFLIGHT

        if force_refresh:
            logger.info(f"FORCE REFRESH: {cache_key}")
        elif had_value:
            logger.info(f"CACHE EXPIRED: {cache_key}")
        else:
            logger.info(f"CACHE MISS: {cache_key}")

        try:
            value = compute()
        except BaseException as e:
            logger.warning(f"Fetch failed for {cache_key}: {e}")
            self.fail(cache_key, e, handle)
            raise

        self.complete(cache_key, value, handle)
        status = CacheStatus.MISS_REFRESH if had_value else CacheStatus.MISS
        return value, status

    def _begin_locked(self, cache_key: str) -> InFlightRequest:
        entry = self._entries.setdefault(cache_key, CacheEntry())
        handle = InFlightRequest(key=cache_key)
        entry.pending = handle
        logger.debug(f"Initiating fetch for {cache_key}")
        return handle

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            now = time.monotonic()
            states = [entry.state(now) for entry in self._entries.values()]
            served = self._stats["hits"] + self._stats["inflight_hits"]
            total_requests = served + self._stats["misses"] + self._stats["refreshes"]
            hit_rate = (served / total_requests * 100) if total_requests > 0 else 0

            return {
                "space": self.space.value,
                "ttl_seconds": self.ttl_seconds,
                "entries": len(self._entries),
                "fresh": states.count(CacheState.FRESH),
                "stale": states.count(CacheState.STALE),
                "pending": states.count(CacheState.PENDING),
                "hits": self._stats["hits"],
                "inflight_hits": self._stats["inflight_hits"],
                "misses": self._stats["misses"],
                "refreshes": self._stats["refreshes"],
                "failures": self._stats["failures"],
                "hit_rate_percent": round(hit_rate, 1),
            }


# Global cache managers, one per space
_cache_managers: Dict[CacheSpace, CacheSpaceManager] = {}
_registry_lock = threading.Lock()


def get_cache_manager(space: CacheSpace) -> CacheSpaceManager:
    """Get or create the global manager for a cache space."""
    with _registry_lock:
        manager = _cache_managers.get(space)
        if manager is None:
            manager = CacheSpaceManager(space, get_ttl_for_space(space))
            _cache_managers[space] = manager
        return manager


def reset_cache_managers() -> None:
    """Drop all global managers (fresh caches on next access)."""
    with _registry_lock:
        _cache_managers.clear()
