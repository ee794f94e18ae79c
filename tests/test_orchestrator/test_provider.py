"""Tests for the AgentProvider base class."""

import pytest

from agent_runtime.config import AppConfig
from agent_runtime.orchestrator import AgentProvider, RequestContext
from agent_runtime.orchestrator.provider import system_prompt_for, with_model_defaults
from agent_runtime.orchestrator.types import DEFAULT_SYSTEM_PROMPT
from agent_runtime.tools.types import AgentRecord


class ConfiguredAgent(AgentProvider):
    agent_name = "configured"
    description = "Fully configured agent"
    model = "local-model"
    temperature = 0.0
    max_tokens = 50
    system_prompt = "Be brief."


class Nameless(AgentProvider):
    pass


def test_agent_name_required() -> None:
    with pytest.raises(ValueError, match="Nameless must define agent_name"):
        Nameless()


def test_agent_record_from_class_attributes() -> None:
    record = ConfiguredAgent().agent_record()

    assert record == AgentRecord(
        name="configured",
        description="Fully configured agent",
        model="local-model",
        temperature=0.0,
        max_tokens=50,
        system_prompt="Be brief.",
    )


def test_tool_records_are_copies(weather_agent) -> None:
    records = weather_agent.tool_records()
    records[0].description = "changed"

    assert type(weather_agent).tools[0].description == "Get current weather for a city"


@pytest.mark.asyncio
async def test_execute_requires_registration(weather_agent) -> None:
    with pytest.raises(RuntimeError, match="not registered"):
        await weather_agent.execute(RequestContext(input="hi"))


@pytest.mark.asyncio
async def test_execute_through_bound_orchestrator(orchestrator, weather_agent) -> None:
    await orchestrator.register_provider(weather_agent)

    response = await weather_agent.execute(RequestContext(input="hi"))

    assert response.output == "The model answered."


@pytest.mark.asyncio
async def test_default_hooks_are_identity(weather_agent) -> None:
    context = RequestContext(input="hi")
    agent = weather_agent.agent_record()

    assert await weather_agent.before_model_call(context, agent) is context


def test_with_model_defaults_keeps_explicit_values(app_config: AppConfig) -> None:
    record = ConfiguredAgent().agent_record()

    effective = with_model_defaults(record, app_config)

    assert effective.model == "local-model"
    assert effective.temperature == 0.0
    assert effective.max_tokens == 50


def test_with_model_defaults_fills_unset(app_config: AppConfig) -> None:
    effective = with_model_defaults(AgentRecord(name="plain"), app_config)

    assert (effective.model, effective.temperature, effective.max_tokens) == (
        app_config.default_model,
        app_config.default_temperature,
        app_config.default_max_tokens,
    )


def test_system_prompt_for() -> None:
    assert system_prompt_for(AgentRecord(name="a")) == DEFAULT_SYSTEM_PROMPT
    assert system_prompt_for(AgentRecord(name="a", system_prompt="Custom")) == "Custom"
