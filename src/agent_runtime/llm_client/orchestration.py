"""Function-calling loop over the chat-completions client.

One model turn per iteration: the model either answers (the loop ends) or
requests tool calls, which are executed through the tool adapters and fed
back as ``tool`` messages. When ``max_iterations`` turns pass without an
answer, the loop stops with the stopped sentinel.
"""

import json
from typing import Any, Sequence

from agent_runtime.config.settings import AppConfig
from agent_runtime.llm_client.adapters import (
    TOOL_INPUT_FIELD,
    assistant_tool_call_message,
    history_messages,
    tool_definition,
)
from agent_runtime.llm_client.client import ChatCompletionsClient
from agent_runtime.llm_client.types import ToolCall
from agent_runtime.orchestrator.types import STOPPED_SENTINEL, ChatMessage, OrchestrationResult
from agent_runtime.telemetry import MODEL_ITERATIONS_EXHAUSTED, TraceContext, get_logger
from agent_runtime.tools.types import AgentRecord, ToolAdapter

log = get_logger(__name__)


def tool_input(arguments: str) -> str:
    """Extract the text handed to a tool from the model's call arguments.

    The ``input`` field is used when present; any other JSON object is passed
    through whole so the parameter resolver can read its fields. Arguments
    that are not JSON are passed through unchanged.
    """
    try:
        parsed: Any = json.loads(arguments)
    except (json.JSONDecodeError, TypeError):
        return arguments
    if isinstance(parsed, dict) and TOOL_INPUT_FIELD in parsed:
        value = parsed[TOOL_INPUT_FIELD]
        return value if isinstance(value, str) else json.dumps(value)
    if isinstance(parsed, str):
        return parsed
    return arguments


class FunctionCallingOrchestrator:
    """Default model orchestration collaborator."""

    def __init__(self, client: ChatCompletionsClient) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: AppConfig) -> "FunctionCallingOrchestrator":
        return cls(ChatCompletionsClient.from_settings(settings))

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
        """Drive the model until it answers or runs out of iterations.

        Raises:
            LLMClientError: If a model call fails.
        """
        trace_ctx = trace_ctx or TraceContext.new_trace()
        tool_map = {tool.name: tool for tool in tools}
        definitions = [tool_definition(tool) for tool in tools] or None
        messages = history_messages(history)
        messages.append({"role": "user", "content": input_text})

        for _ in range(max_iterations):
            response = await self.client.respond(
                messages=messages,
                model=agent.model or "",
                tools=definitions,
                system_prompt=system_prompt,
                max_tokens=agent.max_tokens,
                temperature=agent.temperature,
                trace_ctx=trace_ctx,
            )
            if not response["tool_calls"]:
                return OrchestrationResult(output=response["content"])

            messages.append(assistant_tool_call_message(response))
            for call in response["tool_calls"]:
                output = await self._run_tool_call(call, tool_map)
                messages.append({"role": "tool", "tool_call_id": call["id"], "content": output})

        log.warning(
            MODEL_ITERATIONS_EXHAUSTED,
            agent_name=agent.name,
            max_iterations=max_iterations,
            trace_id=trace_ctx.trace_id,
        )
        return OrchestrationResult(output=STOPPED_SENTINEL, stopped_without_answer=True)

    @staticmethod
    async def _run_tool_call(call: ToolCall, tool_map: dict[str, ToolAdapter]) -> str:
        tool = tool_map.get(call["name"])
        if tool is None:
            return f"Error: Unknown tool '{call['name']}'"
        return await tool(tool_input(call["arguments"]))
