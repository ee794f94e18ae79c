"""High-level orchestrator API.

The Orchestrator is the single entry point of the runtime: hosts push agent
and tool registrations into it at startup and call ``execute`` once per
request. It owns the registry, the admission components and the lifecycle
event bus, and delegates request execution to AgentExecutor.
"""

import time
from typing import Any, Iterable

from agent_runtime.config.settings import AppConfig, get_settings
from agent_runtime.orchestrator.events import EventBus, LifecycleEventType
from agent_runtime.orchestrator.executor import AgentExecutor
from agent_runtime.orchestrator.fallback import FallbackDispatcher
from agent_runtime.orchestrator.provider import AgentProvider
from agent_runtime.orchestrator.types import ModelOrchestrator, RequestContext, ResponseEnvelope
from agent_runtime.security import (
    Authenticator,
    InputGuard,
    RateLimiter,
    SecurityConfig,
)
from agent_runtime.telemetry import (
    AGENT_REGISTERED,
    SECURITY_CONFIGURED,
    TOOL_REGISTERED,
    TraceContext,
    get_logger,
    log_performance,
)
from agent_runtime.tools import AgentRegistry, ParameterResolver
from agent_runtime.tools.types import AgentRecord, ToolRecord

log = get_logger(__name__)


class Orchestrator:
    """Registration and execution entry point.

    Usage:
        orchestrator = Orchestrator(model_orchestrator)
        await orchestrator.register_provider(WeatherAgent())
        response = await orchestrator.execute(
            "weather", RequestContext(input="What's the weather in Paris?")
        )
    """

    def __init__(
        self,
        model_orchestrator: ModelOrchestrator | None = None,
        *,
        settings: AppConfig | None = None,
        security: SecurityConfig | None = None,
        registry: AgentRegistry | None = None,
        resolver: ParameterResolver | None = None,
        events: EventBus | None = None,
        fallback: FallbackDispatcher | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            model_orchestrator: Model collaborator. Defaults to the
                function-calling client configured from settings.
            settings: Application settings. Defaults to ``get_settings()``.
            security: Admission configuration. Defaults to one built from settings.
            registry: Agent/tool registry. A new one by default.
            resolver: Parameter resolver. Default extractor table by default.
            events: Lifecycle event bus. A new one by default.
            fallback: Fallback dispatcher.
        """
        self.settings = settings or get_settings()
        self.registry = registry or AgentRegistry()
        self.resolver = resolver or ParameterResolver()
        self.events = events or EventBus()

        self._security = security or SecurityConfig.from_settings(self.settings)
        self.rate_limiter = RateLimiter(self._security.rate_limit)
        self.guard = InputGuard(self._security.guard)
        self.authenticator = Authenticator(self._security.authentication)
        self._started = False

        if model_orchestrator is None:
            from agent_runtime.llm_client import FunctionCallingOrchestrator  # noqa: PLC0415

            model_orchestrator = FunctionCallingOrchestrator.from_settings(self.settings)

        self.executor = AgentExecutor(
            self.registry,
            model_orchestrator,
            settings=self.settings,
            resolver=self.resolver,
            rate_limiter=self.rate_limiter,
            guard=self.guard,
            authenticator=self.authenticator,
            events=self.events,
            fallback=fallback,
        )

    # Security

    @property
    def security(self) -> SecurityConfig:
        """Current admission configuration."""
        return self._security

    def configure_security(self, **sections: Any) -> SecurityConfig:
        """Replace admission sections at runtime.

        Sections are validated before any component is reconfigured. When
        rate limiting is enabled on a started orchestrator, the sweeper is
        started as well.

        Args:
            **sections: Any of ``rate_limit``, ``guard``, ``authentication``,
                as models or dicts.

        Returns:
            The merged configuration now in effect.

        Raises:
            ValueError: If a section is unknown or invalid.
        """
        security = self._security.merged(**sections)
        self._security = security
        self.rate_limiter.configure(security.rate_limit)
        if self._started:
            self.rate_limiter.start_sweeper()
        self.guard.configure(security.guard)
        self.authenticator.configure(security.authentication)
        log.info(
            SECURITY_CONFIGURED,
            rate_limit_enabled=self.rate_limiter.enabled,
            sanitize_input=security.guard.sanitize_input,
            detect_malicious_content=security.guard.detect_malicious_content,
            auth_scheme=security.authentication.scheme,
        )
        return security

    def security_stats(self) -> dict[str, int]:
        """Admission counters since startup."""
        guard_stats = self.guard.stats()
        return {
            "rate_limit_entries": self.rate_limiter.entry_count,
            "blocked_requests": self.rate_limiter.denied_count,
            "malicious_content_detected": guard_stats["malicious_content_detected"],
            "invalid_inputs": guard_stats["invalid_inputs"],
        }

    # Registration

    async def register_agent(self, record: AgentRecord, instance: Any) -> AgentRecord:
        """Register an agent implemented by ``instance``.

        Returns:
            The stored record, carrying the instance handle.
        """
        start_time = time.time()
        stored = self.registry.save_agent(record.name, record, instance)
        if isinstance(instance, AgentProvider):
            instance.bind(self)
        log.info(AGENT_REGISTERED, agent_name=stored.name, handle=stored.handle)
        await self.events.emit(LifecycleEventType.AGENT_REGISTERED, stored.name)
        log_performance(
            log, "agent_registration", start_time, agent_name=stored.name, model=stored.model
        )
        return stored

    async def register_tools(
        self, records: Iterable[ToolRecord], instance: Any
    ) -> list[ToolRecord]:
        """Register tools whose methods live on ``instance``."""
        start_time = time.time()
        handle = self.registry.handle_for(instance)
        stored = []
        for record in records:
            tool = self.registry.save_tool(record.name, record.model_copy(update={"owner": handle}))
            log.info(TOOL_REGISTERED, tool_name=tool.name, handle=handle)
            await self.events.emit(LifecycleEventType.TOOL_REGISTERED, tool.name)
            stored.append(tool)
        log_performance(log, "tool_registration", start_time, tools_count=len(stored))
        return stored

    async def register_tool(self, record: ToolRecord) -> ToolRecord:
        """Register a standalone tool; its ``executor`` performs the work."""
        tool = self.registry.save_tool(record.name, record)
        log.info(TOOL_REGISTERED, tool_name=tool.name, handle=tool.owner)
        await self.events.emit(LifecycleEventType.TOOL_REGISTERED, tool.name)
        return tool

    async def register_provider(self, provider: AgentProvider) -> AgentRecord:
        """Register an AgentProvider together with its declared tools."""
        await self.register_tools(provider.tool_records(), provider)
        return await self.register_agent(provider.agent_record(), provider)

    def list_agents(self) -> list[str]:
        return self.registry.list_agent_names()

    def list_tools(self) -> list[str]:
        return self.registry.list_tool_names()

    # Execution

    async def execute(
        self, agent_name: str, context: RequestContext, trace_id: str | None = None
    ) -> ResponseEnvelope:
        """Execute one request against a registered agent.

        Args:
            agent_name: Registered agent name.
            context: Request context.
            trace_id: Trace id from the calling layer, if any.

        Returns:
            ResponseEnvelope; degraded rather than raised for failures after
            admission.

        Raises:
            RateLimitExceededError, AuthenticationError, InputValidationError,
            AgentNotFoundError: The request was rejected.
        """
        trace_ctx = TraceContext.from_id(trace_id)
        return await self.executor.execute(agent_name, context, trace_ctx)

    # Lifecycle

    async def start(self) -> None:
        """Start background maintenance (rate-limit sweeping)."""
        self._started = True
        self.rate_limiter.start_sweeper()

    async def stop(self) -> None:
        self._started = False
        await self.rate_limiter.stop_sweeper()

    async def __aenter__(self) -> "Orchestrator":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()
