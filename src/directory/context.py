"""
Request context - cancellation and deadline shared by one request's work.

A RequestContext is created by the caller (normally the HTTP route) and
handed to the aggregator. Every fetch launched for that request observes the
same cancel flag and the same deadline.
"""
import threading
import time
from typing import Optional

CONTEXT_CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"


class RequestContext:
    """
    Thread-safe cancel flag plus an optional monotonic deadline.

    Example:
        >>> context = RequestContext.with_timeout(5.0)
        >>> context.done()
        False
        >>> context.cancel()
        >>> context.error()
        'context canceled'
    """

    def __init__(self, deadline: Optional[float] = None):
        """
        Args:
            deadline: Absolute time.monotonic() value, or None for no deadline
        """
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def with_timeout(cls, timeout_seconds: Optional[float]) -> "RequestContext":
        """Create a context that expires timeout_seconds from now."""
        if timeout_seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + timeout_seconds)

    @classmethod
    def background(cls) -> "RequestContext":
        """A context that is never canceled and has no deadline."""
        return cls()

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def cancel(self) -> None:
        """Cancel the context. Safe to call from any thread, repeatedly."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def done(self) -> bool:
        """True once the context is canceled or past its deadline."""
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (never negative), None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def error(self) -> Optional[str]:
        """Why the context is done, or None while it is still live."""
        if self.cancelled:
            return CONTEXT_CANCELED
        if self.expired:
            return DEADLINE_EXCEEDED
        return None
