"""Opt-in performance and tool-execution telemetry.

Registration, middleware and execution timings are noisy, so they are only
emitted when ``log_performance`` is enabled. Tool call start/complete events
follow ``log_tool_execution`` the same way. Failures are always logged by the
calling component; these switches never hide an error.
"""

import time
from typing import Any

from agent_runtime.telemetry.events import PERFORMANCE_METRIC


def _settings() -> Any:
    from agent_runtime.config.settings import get_settings  # noqa: PLC0415

    return get_settings()


def performance_logging_enabled() -> bool:
    """Return whether performance metrics should be emitted."""
    return bool(_settings().log_performance)


def tool_execution_logging_enabled() -> bool:
    """Return whether per-call tool execution events should be emitted."""
    return bool(_settings().log_tool_execution)


def elapsed_ms(start_time: float) -> float:
    """Milliseconds elapsed since ``start_time`` (a ``time.time()`` value)."""
    return (time.time() - start_time) * 1000


def log_performance(log: Any, operation: str, start_time: float, **metadata: Any) -> None:
    """Emit a performance metric for ``operation`` if enabled.

    Args:
        log: Bound structlog logger of the calling module.
        operation: Human-readable operation name (e.g. "agent_registration").
        start_time: ``time.time()`` captured when the operation began.
        **metadata: Extra structured fields (agent, tool counts, flags).
    """
    if not performance_logging_enabled():
        return
    log.info(
        PERFORMANCE_METRIC,
        operation=operation,
        duration_ms=round(elapsed_ms(start_time), 3),
        **metadata,
    )
