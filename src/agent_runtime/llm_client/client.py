"""Chat-completions client.

This module provides the ChatCompletionsClient class for calling any
OpenAI-compatible ``/chat/completions`` endpoint with error handling,
retries, and telemetry.
"""

import asyncio
import time
from typing import Any

import httpx

from agent_runtime.config.settings import AppConfig
from agent_runtime.llm_client.adapters import (
    adapt_chat_completions_response,
    build_chat_completions_request,
)
from agent_runtime.llm_client.types import (
    LLMClientError,
    LLMConnectionError,
    LLMInvalidResponse,
    LLMRateLimit,
    LLMResponse,
    LLMServerError,
    LLMTimeout,
)
from agent_runtime.telemetry import (
    MODEL_CALL_COMPLETED,
    MODEL_CALL_ERROR,
    MODEL_CALL_STARTED,
    TraceContext,
    get_logger,
)

log = get_logger(__name__)


class ChatCompletionsClient:
    """Client for OpenAI-compatible chat-completions servers.

    Attributes:
        base_url: Base URL for the API (e.g., "https://api.openai.com/v1").
        api_key: Bearer token sent with every request, if set.
        timeout_seconds: Read timeout for model generation.
        max_retries: Retries after the first attempt for timeouts, 429 and 5xx.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_seconds: float = 60.0,
        max_retries: int = 2,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries

    @classmethod
    def from_settings(cls, settings: AppConfig) -> "ChatCompletionsClient":
        return cls(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            timeout_seconds=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    @property
    def endpoint(self) -> str:
        base = self.base_url.rstrip("/")
        if base.endswith("/v1"):
            return f"{base}/chat/completions"
        return f"{base}/v1/chat/completions"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def respond(
        self,
        messages: list[dict[str, Any]],
        model: str,
        tools: list[dict[str, Any]] | None = None,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        trace_ctx: TraceContext | None = None,
    ) -> LLMResponse:
        """Make a single chat-completions call.

        Args:
            messages: Conversation so far (without the system prompt).
            model: Model identifier.
            tools: Optional function definitions.
            system_prompt: Prepended as a system message when given.
            max_tokens: Maximum tokens to generate.
            temperature: Sampling temperature.
            trace_ctx: Trace context for telemetry correlation.

        Returns:
            LLMResponse with normalized structure.

        Raises:
            LLMTimeout: If the request times out on every attempt.
            LLMConnectionError: If the server cannot be reached.
            LLMRateLimit: If the server keeps answering 429.
            LLMServerError: If the server keeps answering 5xx.
            LLMInvalidResponse: If the response format is unexpected.
            LLMClientError: For any other HTTP or API error.
        """
        endpoint = self.endpoint
        request_messages = list(messages)
        if system_prompt:
            request_messages.insert(0, {"role": "system", "content": system_prompt})

        payload = build_chat_completions_request(
            messages=request_messages,
            model=model,
            tools=tools,
            max_tokens=max_tokens,
            temperature=temperature,
        )

        trace_ctx = trace_ctx or TraceContext.new_trace()
        start_time = time.time()
        _, span_id = trace_ctx.new_span()
        log.info(
            MODEL_CALL_STARTED,
            model_id=model,
            endpoint=endpoint,
            message_count=len(request_messages),
            tools_count=len(tools or []),
            trace_id=trace_ctx.trace_id,
            span_id=span_id,
        )

        timeout_config = httpx.Timeout(
            connect=10.0,
            read=self.timeout_seconds,
            write=10.0,
            pool=10.0,
        )

        last_error: Exception | None = None
        attempt = 0
        while attempt <= self.max_retries:
            try:
                async with httpx.AsyncClient(timeout=timeout_config) as client:
                    response = await client.post(endpoint, json=payload, headers=self._headers())
                    response.raise_for_status()
                    response_data = response.json()

                if isinstance(response_data, dict) and response_data.get("error"):
                    error_obj = response_data["error"]
                    error_msg = (
                        error_obj.get("message", str(error_obj))
                        if isinstance(error_obj, dict)
                        else str(error_obj)
                    )
                    raise LLMClientError(f"API returned error: {error_msg}")

                llm_response = adapt_chat_completions_response(response_data)

                log.info(
                    MODEL_CALL_COMPLETED,
                    model_id=model,
                    endpoint=endpoint,
                    latency_ms=int((time.time() - start_time) * 1000),
                    tool_calls=len(llm_response["tool_calls"]),
                    prompt_tokens=llm_response["usage"].get("prompt_tokens", 0),
                    completion_tokens=llm_response["usage"].get("completion_tokens", 0),
                    trace_id=trace_ctx.trace_id,
                    span_id=span_id,
                )
                return llm_response

            except httpx.TimeoutException:
                last_error = LLMTimeout(
                    f"Request to {endpoint} timed out after {self.timeout_seconds}s"
                )
                if attempt < self.max_retries:
                    await self._backoff(attempt, trace_ctx)
                    attempt += 1
                    continue
                break

            except httpx.ConnectError as e:
                # Server is likely down; retrying will not help.
                last_error = LLMConnectionError(f"Failed to connect to {endpoint}: {e}")
                break

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status == 429:
                    last_error = LLMRateLimit(f"Rate limit exceeded: {e}")
                elif status >= 500:
                    last_error = LLMServerError(f"Server error {status}: {e}")
                else:
                    last_error = LLMClientError(f"HTTP error {status}: {e}")
                    break
                if attempt < self.max_retries:
                    await self._backoff(attempt, trace_ctx)
                    attempt += 1
                    continue
                break

            except httpx.RequestError as e:
                last_error = LLMConnectionError(f"Request error: {e}")
                break

            except LLMClientError as e:
                last_error = e
                break

            except (ValueError, KeyError, TypeError) as e:
                last_error = LLMInvalidResponse(f"Invalid response format: {e}")
                break

        log.error(
            MODEL_CALL_ERROR,
            model_id=model,
            endpoint=endpoint,
            error_type=type(last_error).__name__,
            error=str(last_error),
            latency_ms=int((time.time() - start_time) * 1000),
            trace_id=trace_ctx.trace_id,
            span_id=span_id,
        )
        if last_error is not None:
            raise last_error
        raise LLMClientError("Request failed with unknown error")

    @staticmethod
    async def _backoff(attempt: int, trace_ctx: TraceContext) -> None:
        wait_time = 2**attempt
        log.warning(
            "model_call_retry",
            attempt=attempt + 1,
            wait_time=wait_time,
            trace_id=trace_ctx.trace_id,
        )
        await asyncio.sleep(wait_time)
