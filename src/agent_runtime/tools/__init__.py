"""Agent and tool registry, parameter resolution and tool adapters.

This module provides:
- AgentRegistry for agent/tool records and the instance arena
- ParameterResolver turning raw input into typed tool arguments
- Adapter builders exposing tools to the model orchestration layer
"""

from agent_runtime.tools.adapters import build_tool_adapter, build_tool_adapters
from agent_runtime.tools.registry import AgentRegistry
from agent_runtime.tools.resolver import Extractor, ParameterResolver, default_extractors
from agent_runtime.tools.types import (
    AgentRecord,
    InstanceHandle,
    ToolAdapter,
    ToolParameter,
    ToolRecord,
)

__all__ = [
    "AgentRegistry",
    "ParameterResolver",
    "Extractor",
    "default_extractors",
    "build_tool_adapter",
    "build_tool_adapters",
    "AgentRecord",
    "ToolRecord",
    "ToolParameter",
    "ToolAdapter",
    "InstanceHandle",
]
