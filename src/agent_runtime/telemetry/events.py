"""Semantic event constants for structured logging.

All log events should use these constants rather than magic strings to ensure
consistency and enable reliable querying and analysis.
"""

# Request lifecycle
REQUEST_RECEIVED = "request_received"
REPLY_READY = "reply_ready"
STATE_TRANSITION = "state_transition"
AGENT_EXECUTION_FAILED = "agent_execution_failed"
ORCHESTRATION_DEGRADED = "orchestration_degraded"

# Admission
RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
RATE_LIMIT_SWEEP = "rate_limit_sweep"
INPUT_REJECTED = "input_rejected"
MALICIOUS_CONTENT_DETECTED = "malicious_content_detected"
AUTHENTICATION_FAILED = "authentication_failed"
SECURITY_CONFIGURED = "security_configured"

# Registration
AGENT_REGISTERED = "agent_registered"
TOOL_REGISTERED = "tool_registered"
TOOLS_DISCOVERED = "tools_discovered"

# Parameter resolution
PARAMETERS_RESOLVED = "parameters_resolved"
PARAMETER_RESOLUTION_FAILED = "parameter_resolution_failed"

# Tool execution
TOOL_CALL_STARTED = "tool_call_started"
TOOL_CALL_COMPLETED = "tool_call_completed"
TOOL_CALL_FAILED = "tool_call_failed"

# Model calls
MODEL_CALL_STARTED = "model_call_started"
MODEL_CALL_COMPLETED = "model_call_completed"
MODEL_CALL_ERROR = "model_call_error"
MODEL_ITERATIONS_EXHAUSTED = "model_iterations_exhausted"

# Fallback
FALLBACK_STARTED = "fallback_started"
FALLBACK_TOOL_SELECTED = "fallback_tool_selected"
FALLBACK_TOOL_FAILED = "fallback_tool_failed"
FALLBACK_EXHAUSTED = "fallback_exhausted"

# Middleware
MIDDLEWARE_BEFORE_FAILED = "middleware_before_failed"
MIDDLEWARE_AFTER_FAILED = "middleware_after_failed"
CORE_EXECUTION_FAILED = "core_execution_failed"

# Event bus
LIFECYCLE_EVENT = "lifecycle_event"
LIFECYCLE_OBSERVER_FAILED = "lifecycle_observer_failed"

# Performance (emitted only when log_performance is enabled)
PERFORMANCE_METRIC = "performance_metric"
