"""Fixed-window rate limiting per request key.

Each key owns one window entry. The first request for a key, or the first
request after its window elapsed, opens a new window with ``count=1``. Later
requests in the window are admitted while ``count < max_requests``. Bursts at
window boundaries are possible; in exchange every check is O(1) and memory is
bounded by the keys active within one window, which ``sweep()`` enforces.
"""

import asyncio
import threading
import time
from typing import TYPE_CHECKING, Any, Callable

from agent_runtime.security.types import RateLimitConfig, RateLimitResult, RateWindowEntry
from agent_runtime.telemetry import RATE_LIMIT_EXCEEDED, RATE_LIMIT_SWEEP, get_logger

if TYPE_CHECKING:  # pragma: no cover
    from agent_runtime.orchestrator.types import RequestContext

log = get_logger(__name__)

ANONYMOUS_KEY = "anonymous"


def default_key(context: "RequestContext") -> str:
    """Bucket key: client IP, then user id, then session id, then "anonymous"."""
    metadata = context.metadata or {}
    for candidate in (metadata.get("ip"), metadata.get("user_id"), context.session_id):
        if candidate:
            return str(candidate)
    return ANONYMOUS_KEY


class RateLimiter:
    """Per-key fixed-window admission counter."""

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize rate limiter.

        Args:
            config: Limits to enforce. None disables rate limiting.
            clock: Returns the current time in seconds.
        """
        self.config = config
        self._clock = clock
        self._windows: dict[str, RateWindowEntry] = {}
        self._lock = threading.Lock()
        self._denied_count = 0
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def enabled(self) -> bool:
        return self.config is not None

    @property
    def entry_count(self) -> int:
        """Number of keys currently holding a window."""
        return len(self._windows)

    @property
    def denied_count(self) -> int:
        """Requests denied since creation."""
        return self._denied_count

    def configure(self, config: RateLimitConfig | None) -> None:
        """Swap the limits. Existing windows keep counting against the new maximum."""
        with self._lock:
            self.config = config

    def derive_key(self, context: "RequestContext") -> str:
        """Derive the bucket key for a request context."""
        if self.config is not None and self.config.key_extractor is not None:
            return self.config.key_extractor(context)
        return default_key(context)

    def check(self, key: str) -> RateLimitResult:
        """Count one request against ``key`` and decide admission.

        Args:
            key: Bucket key.

        Returns:
            RateLimitResult with the decision, remaining admissions and the
            window reset time.
        """
        config = self.config
        if config is None:
            return RateLimitResult(allowed=True, remaining=-1, reset_time=0)

        with self._lock:
            now = self._clock()
            entry = self._windows.get(key)
            if entry is None or entry.reset_at <= now:
                entry = RateWindowEntry(count=1, reset_at=now + config.window_seconds)
                self._windows[key] = entry
                return RateLimitResult(
                    allowed=True, remaining=config.max_requests - 1, reset_time=entry.reset_at
                )

            if entry.count >= config.max_requests:
                self._denied_count += 1
                log.warning(
                    RATE_LIMIT_EXCEEDED,
                    key=key,
                    max_requests=config.max_requests,
                    reset_time=entry.reset_at,
                )
                return RateLimitResult(allowed=False, remaining=0, reset_time=entry.reset_at)

            entry.count += 1
            return RateLimitResult(
                allowed=True,
                remaining=config.max_requests - entry.count,
                reset_time=entry.reset_at,
            )

    def sweep(self) -> int:
        """Drop windows that have already elapsed.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._windows.items() if entry.reset_at <= now]
            for key in expired:
                del self._windows[key]

        if expired:
            log.debug(RATE_LIMIT_SWEEP, removed=len(expired), remaining=len(self._windows))
        return len(expired)

    async def _run_sweeper(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.sweep()

    def start_sweeper(self, interval_seconds: float | None = None) -> "asyncio.Task[Any] | None":
        """Start periodic sweeping on the running event loop.

        Args:
            interval_seconds: Sweep period; defaults to the configured one.

        Returns:
            The background task, or None when rate limiting is disabled.
        """
        if self.config is None:
            return None
        if self._sweeper is not None and not self._sweeper.done():
            return self._sweeper
        interval = interval_seconds or self.config.sweep_interval_seconds
        self._sweeper = asyncio.create_task(self._run_sweeper(interval))
        return self._sweeper

    async def stop_sweeper(self) -> None:
        """Cancel the periodic sweeper if it is running."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
