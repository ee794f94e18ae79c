"""Telemetry module for structured logging and trace correlation.

This module provides:
- TraceContext for request correlation
- Structured logging via structlog
- Semantic event constants
- Opt-in performance metrics
"""

from agent_runtime.telemetry.events import (
    AGENT_EXECUTION_FAILED,
    AGENT_REGISTERED,
    AUTHENTICATION_FAILED,
    CORE_EXECUTION_FAILED,
    FALLBACK_EXHAUSTED,
    FALLBACK_STARTED,
    FALLBACK_TOOL_FAILED,
    FALLBACK_TOOL_SELECTED,
    INPUT_REJECTED,
    LIFECYCLE_EVENT,
    LIFECYCLE_OBSERVER_FAILED,
    MALICIOUS_CONTENT_DETECTED,
    MIDDLEWARE_AFTER_FAILED,
    MIDDLEWARE_BEFORE_FAILED,
    MODEL_CALL_COMPLETED,
    MODEL_CALL_ERROR,
    MODEL_CALL_STARTED,
    MODEL_ITERATIONS_EXHAUSTED,
    ORCHESTRATION_DEGRADED,
    PARAMETER_RESOLUTION_FAILED,
    PARAMETERS_RESOLVED,
    PERFORMANCE_METRIC,
    RATE_LIMIT_EXCEEDED,
    RATE_LIMIT_SWEEP,
    REPLY_READY,
    REQUEST_RECEIVED,
    SECURITY_CONFIGURED,
    STATE_TRANSITION,
    TOOL_CALL_COMPLETED,
    TOOL_CALL_FAILED,
    TOOL_CALL_STARTED,
    TOOL_REGISTERED,
    TOOLS_DISCOVERED,
)
from agent_runtime.telemetry.logger import configure_logging, get_logger, preview
from agent_runtime.telemetry.performance import log_performance
from agent_runtime.telemetry.trace import TraceContext

__all__ = [
    # Core exports
    "TraceContext",
    "get_logger",
    "configure_logging",
    "preview",
    "log_performance",
    # Event constants
    "REQUEST_RECEIVED",
    "REPLY_READY",
    "STATE_TRANSITION",
    "AGENT_EXECUTION_FAILED",
    "ORCHESTRATION_DEGRADED",
    "RATE_LIMIT_EXCEEDED",
    "RATE_LIMIT_SWEEP",
    "INPUT_REJECTED",
    "MALICIOUS_CONTENT_DETECTED",
    "AUTHENTICATION_FAILED",
    "SECURITY_CONFIGURED",
    "AGENT_REGISTERED",
    "TOOL_REGISTERED",
    "TOOLS_DISCOVERED",
    "PARAMETERS_RESOLVED",
    "PARAMETER_RESOLUTION_FAILED",
    "TOOL_CALL_STARTED",
    "TOOL_CALL_COMPLETED",
    "TOOL_CALL_FAILED",
    "MODEL_CALL_STARTED",
    "MODEL_CALL_COMPLETED",
    "MODEL_CALL_ERROR",
    "MODEL_ITERATIONS_EXHAUSTED",
    "FALLBACK_STARTED",
    "FALLBACK_TOOL_SELECTED",
    "FALLBACK_TOOL_FAILED",
    "FALLBACK_EXHAUSTED",
    "MIDDLEWARE_BEFORE_FAILED",
    "MIDDLEWARE_AFTER_FAILED",
    "CORE_EXECUTION_FAILED",
    "LIFECYCLE_EVENT",
    "LIFECYCLE_OBSERVER_FAILED",
    "PERFORMANCE_METRIC",
]
