"""Request and response adapters for the chat-completions API.

Tools are always exposed to the model as functions taking a single string
argument named ``input``; the tool adapter resolves that string into the
tool's real parameters.
"""

from typing import Any, Sequence

from agent_runtime.llm_client.types import LLMInvalidResponse, LLMResponse, ToolCall
from agent_runtime.orchestrator.types import ChatMessage
from agent_runtime.tools.types import ToolAdapter

TOOL_INPUT_FIELD = "input"


def tool_definition(tool: ToolAdapter) -> dict[str, Any]:
    """Function-calling definition for one tool adapter."""
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": {
                "type": "object",
                "properties": {
                    TOOL_INPUT_FIELD: {
                        "type": "string",
                        "description": "Input for the tool, as text or a JSON object",
                    }
                },
                "required": [TOOL_INPUT_FIELD],
            },
        },
    }


def history_messages(history: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    return [{"role": message.role, "content": message.content} for message in history]


def build_chat_completions_request(
    messages: list[dict[str, Any]],
    model: str,
    tools: list[dict[str, Any]] | None = None,
    tool_choice: str | dict[str, Any] | None = None,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> dict[str, Any]:
    """Build a chat_completions API request payload.

    Args:
        messages: List of message dicts with role and content.
        model: Model identifier.
        tools: Optional list of tool definitions for function calling.
        tool_choice: Tool choice parameter ("auto", "none", or specific tool).
        max_tokens: Maximum tokens to generate.
        temperature: Sampling temperature.

    Returns:
        Request payload dictionary.
    """
    payload: dict[str, Any] = {
        "model": model,
        "messages": [message.copy() for message in messages],
    }

    if tools:
        payload["tools"] = tools
        payload["tool_choice"] = tool_choice or "auto"

    if max_tokens is not None:
        payload["max_tokens"] = max_tokens

    if temperature is not None:
        payload["temperature"] = temperature

    return payload


def adapt_chat_completions_response(response_data: dict[str, Any]) -> LLMResponse:
    """Adapt an OpenAI-style chat_completions response to LLMResponse.

    Raises:
        LLMInvalidResponse: If the response has no choices or a malformed shape.
    """
    try:
        choices = response_data.get("choices", [])
        if not choices:
            raise LLMInvalidResponse("Response has no choices")

        message = choices[0].get("message", {})
        content = message.get("content", "") or ""

        tool_calls: list[ToolCall] = []
        for tc in message.get("tool_calls") or []:
            if isinstance(tc, dict):
                function = tc.get("function", {})
                tool_calls.append(
                    ToolCall(
                        id=tc.get("id", ""),
                        name=function.get("name", ""),
                        arguments=function.get("arguments", "{}") or "{}",
                    )
                )

        usage = response_data.get("usage") or {
            "prompt_tokens": 0,
            "completion_tokens": 0,
            "total_tokens": 0,
        }

        return LLMResponse(
            role=message.get("role", "assistant"),
            content=content,
            tool_calls=tool_calls,
            usage=usage,
            raw=response_data,
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise LLMInvalidResponse(f"Invalid response format: {e}") from e


def assistant_tool_call_message(response: LLMResponse) -> dict[str, Any]:
    """Echo the model's tool calls back into the conversation."""
    return {
        "role": "assistant",
        "content": response["content"] or None,
        "tool_calls": [
            {
                "id": call["id"],
                "type": "function",
                "function": {"name": call["name"], "arguments": call["arguments"]},
            }
            for call in response["tool_calls"]
        ],
    }
