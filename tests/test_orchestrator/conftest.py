"""Fixtures shared by the orchestrator tests."""

from typing import Any, Sequence

import pytest

from agent_runtime.config import AppConfig
from agent_runtime.orchestrator import (
    AgentProvider,
    ChatMessage,
    EventBus,
    LifecycleEvent,
    OrchestrationResult,
    Orchestrator,
)
from agent_runtime.telemetry import TraceContext
from agent_runtime.tools.types import AgentRecord, ToolAdapter, ToolParameter, ToolRecord


class FakeModelOrchestrator:
    """Records invocations and returns a scripted result.

    When ``call_tool`` is set, the named tool adapter is invoked with
    ``tool_input`` and its output becomes the answer.
    """

    def __init__(
        self,
        result: OrchestrationResult | None = None,
        call_tool: str | None = None,
        tool_input: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.result = result or OrchestrationResult("The model answered.")
        self.call_tool = call_tool
        self.tool_input = tool_input
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def invoke(
        self,
        agent: AgentRecord,
        system_prompt: str,
        tools: Sequence[ToolAdapter],
        input_text: str,
        history: Sequence[ChatMessage],
        max_iterations: int,
        trace_ctx: TraceContext | None = None,
    ) -> OrchestrationResult:
        self.calls.append(
            {
                "agent": agent,
                "system_prompt": system_prompt,
                "tools": [tool.name for tool in tools],
                "input_text": input_text,
                "history": list(history),
                "max_iterations": max_iterations,
                "trace_id": trace_ctx.trace_id if trace_ctx else None,
            }
        )
        if self.error is not None:
            raise self.error
        if self.call_tool is not None:
            adapter = next(tool for tool in tools if tool.name == self.call_tool)
            return OrchestrationResult(await adapter(self.tool_input or input_text))
        return self.result


class WeatherAgent(AgentProvider):
    """Test provider with one weather tool and recording hooks."""

    agent_name = "weather"
    description = "Answers weather questions"
    tools = [
        ToolRecord(
            name="get-weather",
            description="Get current weather for a city",
            method_name="get_weather",
            parameters={"city": ToolParameter(type="string", required=True)},
        )
    ]

    def __init__(self) -> None:
        super().__init__()
        self.cities: list[str] = []

    async def get_weather(self, city: str) -> str:
        self.cities.append(city)
        return f"Sunny, 22C in {city}"


class EventRecorder:
    """Observer collecting published lifecycle events."""

    def __init__(self) -> None:
        self.events: list[LifecycleEvent] = []

    def __call__(self, event: LifecycleEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [event.type.value for event in self.events]


@pytest.fixture
def model() -> FakeModelOrchestrator:
    return FakeModelOrchestrator()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def orchestrator(
    app_config: AppConfig, model: FakeModelOrchestrator, recorder: EventRecorder
) -> Orchestrator:
    """Orchestrator with security disabled and a recording event bus."""
    events = EventBus()
    events.subscribe(recorder)
    return Orchestrator(model, settings=app_config, events=events)


@pytest.fixture
def weather_agent() -> WeatherAgent:
    return WeatherAgent()


@pytest.fixture
def make_orchestrator(app_config: AppConfig, recorder: EventRecorder):
    """Factory building orchestrators around a scripted model."""

    def build(model: FakeModelOrchestrator | None = None, **kwargs: Any) -> Orchestrator:
        events = EventBus()
        events.subscribe(recorder)
        return Orchestrator(
            model or FakeModelOrchestrator(),
            settings=kwargs.pop("settings", app_config),
            events=events,
            **kwargs,
        )

    return build


@pytest.fixture
def scripted_model():
    """The FakeModelOrchestrator class, for tests that script their own model."""
    return FakeModelOrchestrator
