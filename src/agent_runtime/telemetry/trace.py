"""Trace context for correlating the log lines of a single agent request."""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class TraceContext:
    """Lightweight trace context for request correlation.

    One trace covers one call to ``Orchestrator.execute``: admission, the
    middleware hooks, every tool adapter call and the fallback scan all log
    with the same ``trace_id``. Nested operations (a tool call, a model turn)
    open a child span with ``new_span()``.

    Attributes:
        trace_id: Unique identifier for the request (UUID string).
        parent_span_id: Span that nested operations hang off, if any.
    """

    trace_id: str
    parent_span_id: str | None = None

    @classmethod
    def new_trace(cls) -> "TraceContext":
        """Start a new trace with a generated trace_id."""
        return cls(trace_id=str(uuid.uuid4()))

    @classmethod
    def from_id(cls, trace_id: str | None) -> "TraceContext":
        """Continue a trace started by the caller, or start a new one.

        Args:
            trace_id: Trace id handed in by the outer request layer.

        Returns:
            TraceContext reusing ``trace_id`` when given.
        """
        if trace_id:
            return cls(trace_id=trace_id)
        return cls.new_trace()

    def new_span(self) -> tuple["TraceContext", str]:
        """Create a child span within this trace.

        Returns:
            Tuple of (child context whose parent is the new span, span_id).
        """
        span_id = str(uuid.uuid4())
        return TraceContext(trace_id=self.trace_id, parent_span_id=span_id), span_id
