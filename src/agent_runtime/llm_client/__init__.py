"""LLM client module.

This module provides the ChatCompletionsClient for OpenAI-compatible servers
and the FunctionCallingOrchestrator, the default model orchestration
collaborator of the orchestrator.
"""

from agent_runtime.llm_client.client import ChatCompletionsClient
from agent_runtime.llm_client.orchestration import FunctionCallingOrchestrator
from agent_runtime.llm_client.types import (
    LLMClientError,
    LLMConnectionError,
    LLMInvalidResponse,
    LLMRateLimit,
    LLMResponse,
    LLMServerError,
    LLMTimeout,
    ToolCall,
)

__all__ = [
    "ChatCompletionsClient",
    "FunctionCallingOrchestrator",
    "LLMClientError",
    "LLMConnectionError",
    "LLMInvalidResponse",
    "LLMResponse",
    "LLMRateLimit",
    "LLMServerError",
    "LLMTimeout",
    "ToolCall",
]
