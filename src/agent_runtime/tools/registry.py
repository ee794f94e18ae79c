"""In-memory registry of agents and tools.

This module provides the AgentRegistry class that stores agent and tool
records keyed by name, together with the instance arena that maps opaque
instance handles back to the objects implementing agents and tools. It
performs no validation: storage, lookup, deletion and existence checks only.
"""

from typing import Any

from agent_runtime.telemetry import get_logger
from agent_runtime.tools.types import AgentRecord, InstanceHandle, ToolRecord, new_instance_handle

log = get_logger(__name__)


class AgentRegistry:
    """Central registry of agents, tools and their instances.

    Names are unique keys: saving under an existing name replaces the
    previous record. "Get all" methods return copies so callers cannot
    mutate registry state.
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._agents: dict[str, AgentRecord] = {}
        self._tools: dict[str, ToolRecord] = {}
        self._instances: dict[InstanceHandle, Any] = {}
        self._handles_by_id: dict[int, InstanceHandle] = {}
        log.debug("agent_registry_initialized")

    # Instance arena

    def handle_for(self, instance: Any) -> InstanceHandle:
        """Return the handle of ``instance``, adding it to the arena if new.

        Args:
            instance: Object implementing an agent and/or its tools.

        Returns:
            Stable handle for this object.
        """
        handle = self._handles_by_id.get(id(instance))
        if handle is None:
            handle = new_instance_handle()
            self._instances[handle] = instance
            self._handles_by_id[id(instance)] = handle
        return handle

    def get_instance(self, handle: InstanceHandle | None) -> Any | None:
        """Resolve a handle to its instance, or None if unknown."""
        if handle is None:
            return None
        return self._instances.get(handle)

    # Agents

    def save_agent(self, name: str, record: AgentRecord, instance: Any) -> AgentRecord:
        """Store an agent record under ``name``.

        Args:
            name: Unique agent name.
            record: Agent metadata.
            instance: Object implementing the agent.

        Returns:
            The stored record, carrying the instance handle.
        """
        handle = self.handle_for(instance)
        stored = record.model_copy(update={"name": name, "handle": handle})
        if name in self._agents:
            log.debug("agent_record_replaced", agent_name=name)
        self._agents[name] = stored
        return stored

    def get_agent(self, name: str) -> AgentRecord | None:
        """Retrieve an agent record, or None if not registered."""
        return self._agents.get(name)

    def get_all_agents(self) -> dict[str, AgentRecord]:
        """Snapshot of all agent records keyed by name."""
        return dict(self._agents)

    def delete_agent(self, name: str) -> bool:
        """Remove an agent record.

        Returns:
            True if a record was removed.
        """
        return self._agents.pop(name, None) is not None

    def agent_exists(self, name: str) -> bool:
        """Check whether an agent is registered under ``name``."""
        return name in self._agents

    def list_agent_names(self) -> list[str]:
        """Names of all registered agents."""
        return list(self._agents.keys())

    # Tools

    def save_tool(self, name: str, record: ToolRecord) -> ToolRecord:
        """Store a tool record under ``name``.

        Re-saving an existing name keeps the original registration position
        (dict semantics), which is the order fallback dispatch scans in.
        """
        stored = record if record.name == name else record.model_copy(update={"name": name})
        if name in self._tools:
            log.debug("tool_record_replaced", tool_name=name)
        self._tools[name] = stored
        return stored

    def get_tool(self, name: str) -> ToolRecord | None:
        """Retrieve a tool record, or None if not registered."""
        return self._tools.get(name)

    def get_all_tools(self) -> dict[str, ToolRecord]:
        """Snapshot of all tool records keyed by name, in registration order."""
        return dict(self._tools)

    def delete_tool(self, name: str) -> bool:
        """Remove a tool record.

        Returns:
            True if a record was removed.
        """
        return self._tools.pop(name, None) is not None

    def tool_exists(self, name: str) -> bool:
        """Check whether a tool is registered under ``name``."""
        return name in self._tools

    def list_tool_names(self) -> list[str]:
        """Names of all registered tools."""
        return list(self._tools.keys())

    def tools_for(self, handle: InstanceHandle | None) -> dict[str, ToolRecord]:
        """Tools owned by the instance behind ``handle``, in registration order."""
        if handle is None:
            return {}
        return {name: tool for name, tool in self._tools.items() if tool.owner == handle}
