"""Type definitions for the LLM client module.

This module defines the core types used by the ChatCompletionsClient:
- LLMResponse: Normalized response of one chat-completions call
- ToolCall: Tool call requested by the model
- Error classes: Hierarchy of LLM client errors
"""

from typing import Any

from typing_extensions import TypedDict

from agent_runtime.errors import OrchestrationError


class ToolCall(TypedDict):
    """Tool call structure for function calling.

    Attributes:
        id: Unique identifier for the tool call.
        name: Name of the tool to call.
        arguments: JSON string containing tool arguments.
    """

    id: str
    name: str
    arguments: str  # JSON string


class LLMResponse(TypedDict):
    """Response structure from LLM calls.

    Attributes:
        role: Response role (typically "assistant").
        content: Natural language content from the model.
        tool_calls: Tool calls the model requested.
        usage: Token usage information (prompt_tokens, completion_tokens, ...).
        raw: Raw response from the backend for debugging.
    """

    role: str
    content: str
    tool_calls: list[ToolCall]
    usage: dict[str, Any]
    raw: dict[str, Any]


# Error hierarchy. Every client failure is an orchestration failure, which the
# executor turns into a degraded response.


class LLMClientError(OrchestrationError):
    """Base exception for all LLM client errors."""


class LLMTimeout(LLMClientError):
    """Raised when an LLM request times out."""


class LLMConnectionError(LLMClientError):
    """Raised when connection to the LLM server fails."""


class LLMRateLimit(LLMClientError):
    """Raised when the LLM server returns a rate limit error."""


class LLMServerError(LLMClientError):
    """Raised when the LLM server returns an error (5xx)."""


class LLMInvalidResponse(LLMClientError):
    """Raised when the LLM server returns an unexpected response format."""
