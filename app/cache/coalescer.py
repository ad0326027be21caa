"""
In-flight request handles used to coalesce concurrent upstream calls.

When multiple concurrent requests ask for the same key, only the first one
calls upstream; the rest wait on its handle and receive the same outcome.
"""
import threading
import logging
from typing import Optional, Any
from dataclasses import dataclass, field

logger = logging.getLogger("cache.coalescer")


@dataclass
class InFlightRequest:
    """
    Tracks an in-progress upstream request.

    Pattern:
    - The initiator publishes the handle, runs the fetch, then resolves it
    - Waiters block on the Event until the handle is resolved
    - Every waiter gets the initiator's result, or its exception re-raised

    There is no wait timeout: once started, all waiters receive the eventual
    outcome of the upstream call.
    """
    key: str = ""
    event: threading.Event = field(default_factory=threading.Event)
    result: Optional[Any] = None
    error: Optional[BaseException] = None
    waiter_count: int = 0

    def set_result(self, result: Any) -> None:
        """Resolve the handle successfully and wake all waiters."""
        self.result = result
        self.event.set()

    def set_error(self, error: BaseException) -> None:
        """Resolve the handle with a failure and wake all waiters."""
        self.error = error
        self.event.set()

    def wait(self) -> Any:
        """
        Block until the initiator finishes.

        Returns:
            The shared result

        Raises:
            Exception: The initiator's error, re-raised for this waiter
        """
        if not self.event.is_set():
            logger.debug(f"Waiting on in-flight request for {self.key}")
        self.event.wait()

        if self.error is not None:
            raise self.error
        return self.result
