"""Core types for the orchestrator.

This module defines the data structures used throughout request execution:
- ChatMessage: One turn of conversation history
- RequestContext: Immutable request passed through the pipeline
- ResponseEnvelope: Output returned to the caller
- ExecutionState: State machine states
- OrchestrationResult: Outcome of the model orchestration step
- ModelOrchestrator: Protocol of the model orchestration collaborator
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field

from agent_runtime.telemetry.trace import TraceContext
from agent_runtime.tools.types import AgentRecord, ToolAdapter

# Output of a model loop that ran out of iterations without a final answer.
STOPPED_SENTINEL = "Agent stopped due to max iterations."

DEFAULT_SYSTEM_PROMPT = (
    "You are an intelligent assistant with access to various tools.\n\n"
    "Use the appropriate tools when needed to provide accurate and helpful "
    "responses. When no tool fits the request, answer directly."
)


class ChatMessage(BaseModel):
    """One message of conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant", "tool"]
    content: str


class RequestContext(BaseModel):
    """A single request as it flows through the pipeline.

    Instances are frozen; stages that change the request return a copy.
    Client identity used for admission lives in ``metadata``: ``ip``,
    ``user_id`` and ``headers``.
    """

    model_config = ConfigDict(frozen=True)

    input: str = Field(..., description="Request text")
    history: list[ChatMessage] = Field(default_factory=list, description="Prior turns")
    session_id: str | None = Field(None, description="Conversation identifier")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Caller-supplied data")

    def with_input(self, text: str) -> "RequestContext":
        """Copy of this context with ``input`` replaced."""
        return self.model_copy(update={"input": text})


class ResponseEnvelope(BaseModel):
    """Output of one execution plus descriptive metadata."""

    output: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class ExecutionState(str, Enum):
    """State machine states for request execution."""

    ADMITTED = "admitted"
    VALIDATED = "validated"
    RESOLVED = "resolved"
    INVOKED = "invoked"
    FALLBACK = "fallback"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class OrchestrationResult:
    """What the model orchestration step produced.

    Attributes:
        output: Final answer text (may be empty or the stopped sentinel).
        stopped_without_answer: True when the loop gave up before answering.
    """

    output: str
    stopped_without_answer: bool = False

    @property
    def usable(self) -> bool:
        return (
            not self.stopped_without_answer
            and bool(self.output.strip())
            and self.output != STOPPED_SENTINEL
        )


class ModelOrchestrator(Protocol):
    """Capability that drives a model over an agent's tools."""

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
        """Run the model until it answers or ``max_iterations`` is reached.

        ``trace_ctx`` is the request's trace; model-call logs carry its id.

        Raises:
            OrchestrationError: If the model call itself fails.
        """
        ...
