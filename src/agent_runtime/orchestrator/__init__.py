"""Orchestrator module for request execution.

This module provides:
- Orchestrator, the registration and execution entry point
- AgentExecutor with the per-request state machine
- MiddlewarePipeline, FallbackDispatcher and the lifecycle EventBus
- AgentProvider base class for agent implementations
"""

from agent_runtime.orchestrator.events import (
    EventBus,
    LifecycleEvent,
    LifecycleEventType,
    LoggingObserver,
)
from agent_runtime.orchestrator.executor import AgentExecutor
from agent_runtime.orchestrator.fallback import APOLOGY, FallbackDispatcher
from agent_runtime.orchestrator.middleware import MiddlewarePipeline
from agent_runtime.orchestrator.orchestrator import Orchestrator
from agent_runtime.orchestrator.provider import AgentProvider
from agent_runtime.orchestrator.types import (
    STOPPED_SENTINEL,
    ChatMessage,
    ExecutionState,
    ModelOrchestrator,
    OrchestrationResult,
    RequestContext,
    ResponseEnvelope,
)

__all__ = [
    "Orchestrator",
    "AgentExecutor",
    "AgentProvider",
    "MiddlewarePipeline",
    "FallbackDispatcher",
    "APOLOGY",
    "EventBus",
    "LifecycleEvent",
    "LifecycleEventType",
    "LoggingObserver",
    "ChatMessage",
    "ExecutionState",
    "ModelOrchestrator",
    "OrchestrationResult",
    "RequestContext",
    "ResponseEnvelope",
    "STOPPED_SENTINEL",
]
