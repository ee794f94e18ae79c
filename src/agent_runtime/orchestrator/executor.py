"""Per-request execution state machine.

States: ADMITTED, VALIDATED, RESOLVED, INVOKED, then SUCCEEDED, or FALLBACK
followed by SUCCEEDED, or FAILED.

Admission (rate limit, authentication), validation and agent lookup failures
raise to the caller so the outer layer can reject the request. Everything
after that (tool resolution, the model call, the fallback scan) is the core
step of the agent's middleware pipeline. A failure there becomes a degraded
ResponseEnvelope inside the core step, so the after hook still sees it and
``agent_executed`` is emitted. Only a failure escaping the pipeline itself
emits ``agent_errored``. The caller never sees a raw exception for these
steps.
"""

import time
from typing import Any

from agent_runtime.config.settings import AppConfig
from agent_runtime.errors import (
    AgentNotFoundError,
    AuthenticationError,
    InputValidationError,
    RateLimitExceededError,
)
from agent_runtime.orchestrator.events import EventBus, LifecycleEventType
from agent_runtime.orchestrator.fallback import FallbackDispatcher
from agent_runtime.orchestrator.middleware import MiddlewarePipeline
from agent_runtime.orchestrator.provider import system_prompt_for, with_model_defaults
from agent_runtime.orchestrator.types import (
    ExecutionState,
    ModelOrchestrator,
    RequestContext,
    ResponseEnvelope,
)
from agent_runtime.security import Authenticator, InputGuard, RateLimiter
from agent_runtime.telemetry import (
    AGENT_EXECUTION_FAILED,
    ORCHESTRATION_DEGRADED,
    REPLY_READY,
    REQUEST_RECEIVED,
    STATE_TRANSITION,
    TOOLS_DISCOVERED,
    TraceContext,
    get_logger,
    log_performance,
    preview,
)
from agent_runtime.tools import AgentRegistry, ParameterResolver, build_tool_adapters
from agent_runtime.tools.types import AgentRecord, ToolAdapter

log = get_logger(__name__)

ERROR_REPLY_PREFIX = "I encountered an error while processing your request: "


class AgentExecutor:
    """Runs a single request through admission, the pipeline and fallback."""

    def __init__(
        self,
        registry: AgentRegistry,
        model_orchestrator: ModelOrchestrator,
        *,
        settings: AppConfig,
        resolver: ParameterResolver,
        rate_limiter: RateLimiter,
        guard: InputGuard,
        authenticator: Authenticator,
        events: EventBus,
        fallback: FallbackDispatcher | None = None,
    ) -> None:
        self.registry = registry
        self.model_orchestrator = model_orchestrator
        self.settings = settings
        self.resolver = resolver
        self.rate_limiter = rate_limiter
        self.guard = guard
        self.authenticator = authenticator
        self.events = events
        self.fallback = fallback or FallbackDispatcher()

    async def execute(
        self,
        agent_name: str,
        context: RequestContext,
        trace_ctx: TraceContext | None = None,
    ) -> ResponseEnvelope:
        """Execute ``agent_name`` for ``context``.

        Args:
            agent_name: Registered agent name.
            context: Request context.
            trace_ctx: Trace to correlate logs with; a new one by default.

        Returns:
            ResponseEnvelope, degraded if execution failed after admission.

        Raises:
            RateLimitExceededError: Request denied by the rate limiter.
            AuthenticationError: Request rejected by the authentication scheme.
            InputValidationError: Input rejected by the guard.
            AgentNotFoundError: ``agent_name`` is not registered.
        """
        trace_ctx = trace_ctx or TraceContext.new_trace()
        trace_id = trace_ctx.trace_id
        start_time = time.time()

        log.info(
            REQUEST_RECEIVED,
            agent_name=agent_name,
            session_id=context.session_id,
            input_preview=preview(context.input),
            history_length=len(context.history),
            trace_id=trace_id,
        )

        context = self._admit(context, trace_id)
        agent = self.registry.get_agent(agent_name)
        if agent is None:
            raise AgentNotFoundError(agent_name)

        pipeline = MiddlewarePipeline.for_instance(self.registry.get_instance(agent.handle))
        resolved: dict[str, Any] = {"tools": [], "available_tools": [], "error": None}

        async def core(ctx: RequestContext) -> ResponseEnvelope:
            try:
                return await self._run_core(agent, ctx, resolved, trace_ctx)
            except Exception as e:
                resolved["error"] = str(e)
                return self._degraded_response(agent.name, e, resolved, trace_id)

        try:
            response = await pipeline.run(context, agent, core, trace_ctx)
        except Exception as e:
            await self.events.emit(LifecycleEventType.AGENT_ERRORED, agent_name, error=str(e))
            log_performance(log, "agent_execution_failed", start_time, agent_name=agent_name)
            return self._degraded_response(agent_name, e, resolved, trace_id)

        if resolved["error"] is None:
            self._transition(ExecutionState.SUCCEEDED, trace_id)
        await self.events.emit(
            LifecycleEventType.AGENT_EXECUTED,
            agent_name,
            session_id=context.session_id,
            fallback_used=bool(response.metadata.get("fallback_used")),
            degraded=resolved["error"] is not None,
        )
        log.info(
            REPLY_READY,
            agent_name=agent_name,
            output_preview=preview(response.output),
            trace_id=trace_id,
        )
        log_performance(
            log,
            "agent_execution",
            start_time,
            agent_name=agent_name,
            input_length=len(context.input),
            output_length=len(response.output),
        )
        return response

    def _degraded_response(
        self, agent_name: str, error: Exception, resolved: dict[str, Any], trace_id: str
    ) -> ResponseEnvelope:
        self._transition(ExecutionState.FAILED, trace_id)
        log.error(
            AGENT_EXECUTION_FAILED,
            agent_name=agent_name,
            error=str(error),
            error_type=type(error).__name__,
            trace_id=trace_id,
            exc_info=error,
        )
        return ResponseEnvelope(
            output=f"{ERROR_REPLY_PREFIX}{error}",
            metadata={
                "agent_name": agent_name,
                "tools": resolved["tools"],
                "available_tools": resolved["available_tools"],
                "error": str(error),
                "trace_id": trace_id,
            },
        )

    def _admit(self, context: RequestContext, trace_id: str) -> RequestContext:
        """Rate limit, authenticate and validate; returns the context to execute."""
        key = self.rate_limiter.derive_key(context)
        decision = self.rate_limiter.check(key)
        if not decision.allowed:
            raise RateLimitExceededError(key, decision.reset_time)
        self._transition(ExecutionState.ADMITTED, trace_id)

        if self.authenticator.enabled:
            auth = self.authenticator.authenticate(context)
            if not auth.authenticated:
                raise AuthenticationError(
                    auth.error or "Authentication failed",
                    context={"scheme": self.authenticator.config.scheme},
                )

        validation = self.guard.validate(context.input, context)
        if not validation.is_valid:
            raise InputValidationError(validation.errors)
        self._transition(ExecutionState.VALIDATED, trace_id)

        if validation.sanitized_input is not None and validation.sanitized_input != context.input:
            return context.with_input(validation.sanitized_input)
        return context

    async def _run_core(
        self,
        agent: AgentRecord,
        context: RequestContext,
        resolved: dict[str, Any],
        trace_ctx: TraceContext,
    ) -> ResponseEnvelope:
        trace_id = trace_ctx.trace_id
        records = self.registry.tools_for(agent.handle)
        adapters: list[ToolAdapter] = build_tool_adapters(
            records, self.registry, self.resolver, trace_ctx
        )
        resolved["tools"] = list(records)
        resolved["available_tools"] = [adapter.name for adapter in adapters]
        log.info(
            TOOLS_DISCOVERED,
            agent_name=agent.name,
            tools=resolved["tools"],
            trace_id=trace_id,
        )
        self._transition(ExecutionState.RESOLVED, trace_id)

        effective = with_model_defaults(agent, self.settings)
        result = await self.model_orchestrator.invoke(
            effective,
            system_prompt_for(effective),
            adapters,
            context.input,
            context.history,
            self.settings.orchestrator_max_iterations,
            trace_ctx=trace_ctx,
        )
        self._transition(ExecutionState.INVOKED, trace_id)

        metadata: dict[str, Any] = {
            "agent_name": agent.name,
            "tools": resolved["tools"],
            "available_tools": resolved["available_tools"],
            "trace_id": trace_id,
        }
        if result.usable:
            return ResponseEnvelope(output=result.output, metadata=metadata)

        self._transition(ExecutionState.FALLBACK, trace_id)
        log.info(
            ORCHESTRATION_DEGRADED,
            agent_name=agent.name,
            stopped_without_answer=result.stopped_without_answer,
            trace_id=trace_id,
        )
        output, exhausted = await self.fallback.dispatch(adapters, context.input, trace_ctx)
        metadata["fallback_used"] = True
        if exhausted:
            metadata["fallback_exhausted"] = True
        return ResponseEnvelope(output=output, metadata=metadata)

    @staticmethod
    def _transition(state: ExecutionState, trace_id: str) -> None:
        log.debug(STATE_TRANSITION, to_state=state.value, trace_id=trace_id)
