"""Before/after middleware around the core execution.

Hooks are best-effort enrichment: a hook that raises (or returns the wrong
type) is logged and replaced by the identity, so the pipeline continues with
the original context or returns the original response. Hooks receive deep
copies, so partial in-place edits made before a failure never leak. The core
execution is not isolated; its failures are logged and re-raised.
"""

import inspect
import time
from typing import Any, Awaitable, Callable

from agent_runtime.orchestrator.types import RequestContext, ResponseEnvelope
from agent_runtime.telemetry import (
    CORE_EXECUTION_FAILED,
    MIDDLEWARE_AFTER_FAILED,
    MIDDLEWARE_BEFORE_FAILED,
    TraceContext,
    get_logger,
    log_performance,
)
from agent_runtime.tools.types import AgentRecord

log = get_logger(__name__)

BeforeHook = Callable[[RequestContext, AgentRecord], Any]
AfterHook = Callable[[RequestContext, ResponseEnvelope, AgentRecord], Any]
CoreExecution = Callable[[RequestContext], Awaitable[ResponseEnvelope]]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class MiddlewarePipeline:
    """Runs ``before -> core -> after`` for one agent."""

    def __init__(
        self,
        before: BeforeHook | None = None,
        after: AfterHook | None = None,
    ) -> None:
        self.before = before
        self.after = after

    @classmethod
    def for_instance(cls, instance: Any) -> "MiddlewarePipeline":
        """Build a pipeline from an agent instance's ``before_model_call`` /
        ``after_model_call`` methods; missing methods are identity."""
        before = getattr(instance, "before_model_call", None)
        after = getattr(instance, "after_model_call", None)
        return cls(
            before=before if callable(before) else None,
            after=after if callable(after) else None,
        )

    async def run(
        self,
        context: RequestContext,
        agent: AgentRecord,
        core: CoreExecution,
        trace_ctx: TraceContext | None = None,
    ) -> ResponseEnvelope:
        """Execute the pipeline.

        Args:
            context: Admitted request context.
            agent: Agent record, passed to hooks as a copy.
            core: Core execution.
            trace_ctx: Trace for log correlation.

        Returns:
            The (possibly post-processed) response.

        Raises:
            Exception: Whatever the core execution raised.
        """
        trace_id = trace_ctx.trace_id if trace_ctx else None
        processed = await self._run_before(context, agent, trace_id)

        try:
            response = await core(processed)
        except Exception as e:
            log.error(
                CORE_EXECUTION_FAILED,
                agent_name=agent.name,
                error=str(e),
                error_type=type(e).__name__,
                trace_id=trace_id,
            )
            raise

        return await self._run_after(context, response, agent, trace_id)

    async def _run_before(
        self, context: RequestContext, agent: AgentRecord, trace_id: str | None
    ) -> RequestContext:
        if self.before is None:
            return context

        start_time = time.time()
        try:
            result = await _maybe_await(
                self.before(context.model_copy(deep=True), agent.model_copy(deep=True))
            )
            if not isinstance(result, RequestContext):
                raise TypeError(
                    f"before hook returned {type(result).__name__}, expected RequestContext"
                )
        except Exception as e:
            log.warning(
                MIDDLEWARE_BEFORE_FAILED,
                agent_name=agent.name,
                error=str(e),
                error_type=type(e).__name__,
                trace_id=trace_id,
            )
            return context

        log_performance(
            log,
            "before_model_call",
            start_time,
            agent_name=agent.name,
            context_modified=result != context,
        )
        return result

    async def _run_after(
        self,
        context: RequestContext,
        response: ResponseEnvelope,
        agent: AgentRecord,
        trace_id: str | None,
    ) -> ResponseEnvelope:
        if self.after is None:
            return response

        start_time = time.time()
        try:
            result = await _maybe_await(
                self.after(
                    context.model_copy(deep=True),
                    response.model_copy(deep=True),
                    agent.model_copy(deep=True),
                )
            )
            if not isinstance(result, ResponseEnvelope):
                raise TypeError(
                    f"after hook returned {type(result).__name__}, expected ResponseEnvelope"
                )
        except Exception as e:
            log.warning(
                MIDDLEWARE_AFTER_FAILED,
                agent_name=agent.name,
                error=str(e),
                error_type=type(e).__name__,
                trace_id=trace_id,
            )
            return response

        log_performance(
            log,
            "after_model_call",
            start_time,
            agent_name=agent.name,
            response_modified=result != response,
        )
        return result
