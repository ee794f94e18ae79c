"""Exception hierarchy for the agent runtime.

Admission failures (rate limit, authentication, validation) and unknown
agents are raised to the caller of ``Orchestrator.execute`` so the outer layer
can reject the request. Parameter resolution and tool failures are recovered
inside the tool adapter; orchestration failures become a degraded response.
"""

from typing import Any


class AgentRuntimeError(Exception):
    """Base exception for all agent runtime errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize error.

        Args:
            message: Human-readable description.
            context: Structured details for logging and rejection payloads.
        """
        super().__init__(message)
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging or a structured rejection response."""
        return {
            "error_type": type(self).__name__,
            "message": str(self),
            **self.context,
        }


class RateLimitExceededError(AgentRuntimeError):
    """Raised when a request is denied admission by the rate limiter."""

    def __init__(self, key: str, reset_time: float) -> None:
        super().__init__(
            f"Rate limit exceeded for '{key}'",
            context={"key": key, "reset_time": reset_time},
        )
        self.key = key
        self.reset_time = reset_time


class InputValidationError(AgentRuntimeError):
    """Raised when the input guard rejects the request text."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("Input validation failed: " + "; ".join(errors), context={"errors": errors})
        self.errors = errors


class AuthenticationError(AgentRuntimeError):
    """Raised when the configured authentication scheme rejects the request."""


class AgentNotFoundError(AgentRuntimeError):
    """Raised when executing an agent name that was never registered."""

    def __init__(self, agent_name: str) -> None:
        super().__init__(f"Agent {agent_name} not found", context={"agent_name": agent_name})
        self.agent_name = agent_name


class ParameterResolutionError(AgentRuntimeError):
    """Raised when a required tool parameter cannot be located in the input."""

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message, context={"parameter": parameter})
        self.parameter = parameter


class ToolInvocationError(AgentRuntimeError):
    """Raised when a tool's underlying method fails."""

    def __init__(self, tool_name: str, cause: Exception) -> None:
        super().__init__(str(cause), context={"tool_name": tool_name})
        self.tool_name = tool_name
        self.__cause__ = cause


class OrchestrationError(AgentRuntimeError):
    """Raised when the model-driven orchestration itself fails."""
