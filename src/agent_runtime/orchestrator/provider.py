"""Base class for agent implementations.

Subclasses declare the agent's metadata as class attributes and its tools as
ToolRecords naming methods of the subclass. Registering a provider pushes
both into the orchestrator; the provider instance itself is only referenced
from the registry arena.

Example:
    class WeatherAgent(AgentProvider):
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

        async def get_weather(self, city: str) -> str:
            ...
"""

from typing import TYPE_CHECKING, ClassVar

from agent_runtime.orchestrator.types import (
    DEFAULT_SYSTEM_PROMPT,
    RequestContext,
    ResponseEnvelope,
)
from agent_runtime.tools.types import AgentRecord, ToolRecord

if TYPE_CHECKING:  # pragma: no cover
    from agent_runtime.config.settings import AppConfig
    from agent_runtime.orchestrator.orchestrator import Orchestrator


class AgentProvider:
    """Agent implementation with optional model-call middleware."""

    agent_name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    model: ClassVar[str | None] = None
    temperature: ClassVar[float | None] = None
    max_tokens: ClassVar[int | None] = None
    system_prompt: ClassVar[str | None] = None
    tools: ClassVar[list[ToolRecord]] = []

    def __init__(self) -> None:
        if not self.agent_name:
            raise ValueError(f"{type(self).__name__} must define agent_name")
        self._orchestrator: "Orchestrator | None" = None

    def agent_record(self) -> AgentRecord:
        """Agent metadata declared on the class."""
        return AgentRecord(
            name=self.agent_name,
            description=self.description,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            system_prompt=self.system_prompt,
        )

    def tool_records(self) -> list[ToolRecord]:
        """Copies of the declared tools."""
        return [tool.model_copy() for tool in self.tools]

    def bind(self, orchestrator: "Orchestrator") -> None:
        self._orchestrator = orchestrator

    async def execute(self, context: RequestContext) -> ResponseEnvelope:
        """Run this agent through the orchestrator it was registered with.

        Raises:
            RuntimeError: If the provider was never registered.
        """
        if self._orchestrator is None:
            raise RuntimeError(f"Agent provider '{self.agent_name}' is not registered")
        return await self._orchestrator.execute(self.agent_name, context)

    async def before_model_call(self, context: RequestContext, agent: AgentRecord) -> RequestContext:
        """Pre-process the request before the model runs. Identity by default."""
        return context

    async def after_model_call(
        self, context: RequestContext, response: ResponseEnvelope, agent: AgentRecord
    ) -> ResponseEnvelope:
        """Post-process the response. Identity by default."""
        return response


def system_prompt_for(agent: AgentRecord) -> str:
    return agent.system_prompt or DEFAULT_SYSTEM_PROMPT


def with_model_defaults(agent: AgentRecord, settings: "AppConfig") -> AgentRecord:
    """Fill unset model settings of ``agent`` from configured defaults."""
    return agent.model_copy(
        update={
            "model": agent.model or settings.default_model,
            "temperature": (
                agent.temperature if agent.temperature is not None else settings.default_temperature
            ),
            "max_tokens": agent.max_tokens or settings.default_max_tokens,
        }
    )
