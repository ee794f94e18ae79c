"""Tests for AgentRegistry."""

import pytest

from agent_runtime.tools.registry import AgentRegistry
from agent_runtime.tools.types import AgentRecord, ToolParameter, ToolRecord


class WeatherAgent:
    def get_weather(self, city: str) -> str:
        return f"Sunny in {city}"


@pytest.fixture
def registry() -> AgentRegistry:
    """Fixture for an empty registry."""
    return AgentRegistry()


@pytest.fixture
def weather_tool() -> ToolRecord:
    return ToolRecord(
        name="get-weather",
        description="Get current weather for a city",
        parameters={"city": ToolParameter(type="string", required=True)},
        method_name="get_weather",
    )


def test_save_and_get_agent(registry: AgentRegistry) -> None:
    """Test saving an agent assigns an instance handle."""
    instance = WeatherAgent()
    stored = registry.save_agent("weather", AgentRecord(name="weather"), instance)

    assert stored.handle is not None
    assert registry.get_agent("weather") == stored
    assert registry.get_instance(stored.handle) is instance
    assert registry.agent_exists("weather")


def test_save_agent_uses_registration_name(registry: AgentRegistry) -> None:
    """Test the name argument wins over the record's name."""
    stored = registry.save_agent("alias", AgentRecord(name="original"), WeatherAgent())

    assert stored.name == "alias"
    assert registry.get_agent("original") is None


def test_reregistering_agent_overwrites(registry: AgentRegistry) -> None:
    """Test saving under an existing name replaces the record."""
    instance = WeatherAgent()
    registry.save_agent("weather", AgentRecord(name="weather", description="old"), instance)
    registry.save_agent("weather", AgentRecord(name="weather", description="new"), instance)

    assert registry.get_agent("weather").description == "new"
    assert registry.list_agent_names() == ["weather"]


def test_same_instance_keeps_handle(registry: AgentRegistry) -> None:
    """Test an instance maps to one stable handle."""
    instance = WeatherAgent()

    assert registry.handle_for(instance) == registry.handle_for(instance)
    assert registry.handle_for(instance) != registry.handle_for(WeatherAgent())


def test_get_instance_unknown_handle(registry: AgentRegistry) -> None:
    """Test unknown or missing handles resolve to None."""
    assert registry.get_instance(None) is None
    assert registry.get_instance("inst-missing") is None


def test_get_all_agents_returns_copy(registry: AgentRegistry) -> None:
    """Test mutating the snapshot does not change the registry."""
    registry.save_agent("weather", AgentRecord(name="weather"), WeatherAgent())

    snapshot = registry.get_all_agents()
    snapshot.clear()

    assert registry.agent_exists("weather")


def test_delete_agent(registry: AgentRegistry) -> None:
    """Test deleting agents reports whether anything was removed."""
    registry.save_agent("weather", AgentRecord(name="weather"), WeatherAgent())

    assert registry.delete_agent("weather") is True
    assert registry.delete_agent("weather") is False
    assert not registry.agent_exists("weather")


def test_save_and_get_tool(registry: AgentRegistry, weather_tool: ToolRecord) -> None:
    """Test tool storage and lookup."""
    registry.save_tool(weather_tool.name, weather_tool)

    assert registry.tool_exists("get-weather")
    assert registry.get_tool("get-weather") == weather_tool
    assert registry.get_tool("missing") is None


def test_get_all_tools_preserves_registration_order(registry: AgentRegistry) -> None:
    """Test tools come back in registration order, even after re-registration."""
    for name in ("b-tool", "a-tool", "c-tool"):
        registry.save_tool(name, ToolRecord(name=name))
    registry.save_tool("b-tool", ToolRecord(name="b-tool", description="updated"))

    tools = registry.get_all_tools()

    assert list(tools) == ["b-tool", "a-tool", "c-tool"]
    assert tools["b-tool"].description == "updated"


def test_delete_tool(registry: AgentRegistry, weather_tool: ToolRecord) -> None:
    """Test deleting tools."""
    registry.save_tool(weather_tool.name, weather_tool)

    assert registry.delete_tool("get-weather") is True
    assert registry.delete_tool("get-weather") is False
    assert registry.list_tool_names() == []


def test_tools_for_filters_by_owner(registry: AgentRegistry, weather_tool: ToolRecord) -> None:
    """Test only tools owned by the given instance are returned."""
    weather = WeatherAgent()
    other = WeatherAgent()
    weather_handle = registry.handle_for(weather)
    other_handle = registry.handle_for(other)

    registry.save_tool("get-weather", weather_tool.model_copy(update={"owner": weather_handle}))
    registry.save_tool("other-tool", ToolRecord(name="other-tool", owner=other_handle))
    registry.save_tool("custom-tool", ToolRecord(name="custom-tool"))

    assert list(registry.tools_for(weather_handle)) == ["get-weather"]
    assert list(registry.tools_for(other_handle)) == ["other-tool"]
    assert registry.tools_for(None) == {}


def test_required_parameters(weather_tool: ToolRecord) -> None:
    """Test required parameter names are listed in declaration order."""
    tool = weather_tool.model_copy(
        update={
            "parameters": {
                "units": ToolParameter(type="string"),
                "city": ToolParameter(type="string", required=True),
                "days": ToolParameter(type="number", required=True),
            }
        }
    )

    assert tool.required_parameters() == ["city", "days"]
