"""Type definitions for agents and tools.

This module defines the Pydantic models stored in the registry and the
adapter shape handed to the model orchestration layer.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field

# Opaque token linking a tool to the agent instance that performs its work.
InstanceHandle = NewType("InstanceHandle", str)


def new_instance_handle() -> InstanceHandle:
    """Generate a fresh instance handle."""
    return InstanceHandle(f"inst-{uuid.uuid4().hex[:12]}")


class ToolParameter(BaseModel):
    """Declared parameter of a tool."""

    type: Literal["string", "number", "boolean"] = Field(..., description="Parameter type")
    description: str = Field("", description="Parameter description for the model")
    required: bool = Field(False, description="Whether resolution must find this parameter")
    enum: list[str] | None = Field(None, description="Allowed string values")


class AgentRecord(BaseModel):
    """Registered agent.

    Model settings left as None fall back to the configured defaults at
    execution time.
    """

    name: str = Field(..., description="Unique agent name")
    description: str = Field("", description="What the agent is for")
    model: str | None = Field(None, description="Model identifier")
    temperature: float | None = Field(None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int | None = Field(None, ge=1, description="Maximum output tokens")
    system_prompt: str | None = Field(None, description="System prompt template")
    handle: InstanceHandle | None = Field(
        None, description="Handle of the instance, assigned by the registry"
    )


class ToolRecord(BaseModel):
    """Registered tool.

    ``owner`` is a lookup-only back-reference to the agent instance whose
    method performs the work; custom tools registered on their own have none.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Unique tool name (e.g., 'get-weather')")
    description: str = Field("", description="Clear description for the model")
    category: str | None = Field(None, description="Free-form category")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    parameters: dict[str, ToolParameter] = Field(
        default_factory=dict, description="Ordered parameter schema"
    )
    return_type: Literal["string", "number", "boolean", "object"] | None = Field(
        None, description="Declared return type"
    )
    owner: InstanceHandle | None = Field(None, description="Owning instance handle")
    method_name: str | None = Field(None, description="Method name on the owning instance")
    executor: Callable[..., Any] | None = Field(
        None, exclude=True, description="Callable performing the work"
    )

    def required_parameters(self) -> list[str]:
        """Names of required parameters, in declaration order."""
        return [name for name, param in self.parameters.items() if param.required]


@dataclass(frozen=True)
class ToolAdapter:
    """A tool as seen by the model orchestration layer.

    ``func`` takes the raw input text chosen by the model and always returns
    a string; failures come back as ``"Error: <message>"``.
    """

    name: str
    description: str
    func: Callable[[str], Awaitable[str]]

    async def __call__(self, input_text: str) -> str:
        return await self.func(input_text)
