"""Build tool adapters for the model orchestration layer.

An adapter wraps one registered tool as ``func(input_text) -> str``: it
resolves the text into arguments with the ParameterResolver, calls the tool
method (async methods are awaited, sync ones run in the default executor),
and stringifies the result. Resolution and invocation failures never escape
the adapter; they come back as ``"Error: <message>"`` so the model can react
to them conversationally.
"""

import asyncio
import inspect
import json
import time
from typing import Any, Callable, Mapping

from agent_runtime.errors import ParameterResolutionError, ToolInvocationError
from agent_runtime.telemetry import (
    TOOL_CALL_COMPLETED,
    TOOL_CALL_FAILED,
    TOOL_CALL_STARTED,
    TraceContext,
    get_logger,
    preview,
)
from agent_runtime.telemetry.performance import elapsed_ms, tool_execution_logging_enabled
from agent_runtime.tools.registry import AgentRegistry
from agent_runtime.tools.resolver import ParameterResolver
from agent_runtime.tools.types import ToolAdapter, ToolRecord

log = get_logger(__name__)


def resolve_executor(tool: ToolRecord, registry: AgentRegistry) -> Callable[..., Any]:
    """Find the callable performing ``tool``'s work.

    Args:
        tool: Tool record.
        registry: Registry holding the instance arena.

    Returns:
        The explicit executor, or the named method of the owning instance.

    Raises:
        ToolInvocationError: If neither is available.
    """
    if tool.executor is not None:
        return tool.executor

    instance = registry.get_instance(tool.owner)
    method = getattr(instance, tool.method_name, None) if tool.method_name else None
    if instance is None or not callable(method):
        raise ToolInvocationError(
            tool.name, LookupError(f"No callable registered for tool '{tool.name}'")
        )
    return method


def format_tool_output(result: Any) -> str:
    """Stringify a tool result for the model."""
    if isinstance(result, str):
        return result
    if isinstance(result, (dict, list)):
        return json.dumps(result, default=str)
    return str(result)


async def _call_executor(executor: Callable[..., Any], arguments: Any) -> Any:
    # Resolved dicts map onto keyword arguments; scalars are passed positionally.
    if isinstance(arguments, dict):
        call: Callable[[], Any] = lambda: executor(**arguments)  # noqa: E731
    else:
        call = lambda: executor(arguments)  # noqa: E731

    if inspect.iscoroutinefunction(executor):
        return await call()

    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, call)
    if inspect.isawaitable(result):
        result = await result
    return result


def build_tool_adapter(
    tool: ToolRecord,
    registry: AgentRegistry,
    resolver: ParameterResolver,
    trace_ctx: TraceContext | None = None,
) -> ToolAdapter:
    """Wrap a single tool record as a ToolAdapter.

    Args:
        tool: Tool to wrap.
        registry: Registry used to reach the owning instance.
        resolver: Resolver turning input text into arguments.
        trace_ctx: Trace of the request the adapter is built for.

    Returns:
        Adapter whose function never raises.
    """
    trace_ctx = trace_ctx or TraceContext.new_trace()

    async def run(input_text: str) -> str:
        _, span_id = trace_ctx.new_span()
        verbose = tool_execution_logging_enabled()
        start_time = time.time()
        if verbose:
            log.info(
                TOOL_CALL_STARTED,
                tool_name=tool.name,
                input_preview=preview(input_text),
                trace_id=trace_ctx.trace_id,
                span_id=span_id,
            )

        try:
            arguments = resolver.resolve(input_text, tool.parameters, tool_name=tool.name)
            executor = resolve_executor(tool, registry)
            try:
                result = await _call_executor(executor, arguments)
            except Exception as e:
                raise ToolInvocationError(tool.name, e) from e
        except (ParameterResolutionError, ToolInvocationError) as e:
            log.error(
                TOOL_CALL_FAILED,
                tool_name=tool.name,
                error=str(e),
                error_type=type(e).__name__,
                latency_ms=elapsed_ms(start_time),
                trace_id=trace_ctx.trace_id,
                span_id=span_id,
                exc_info=isinstance(e, ToolInvocationError),
            )
            return f"Error: {e}"

        output = format_tool_output(result)
        if verbose:
            log.info(
                TOOL_CALL_COMPLETED,
                tool_name=tool.name,
                output_preview=preview(output, 200),
                latency_ms=elapsed_ms(start_time),
                trace_id=trace_ctx.trace_id,
                span_id=span_id,
            )
        return output

    return ToolAdapter(name=tool.name, description=tool.description, func=run)


def build_tool_adapters(
    tools: Mapping[str, ToolRecord],
    registry: AgentRegistry,
    resolver: ParameterResolver,
    trace_ctx: TraceContext | None = None,
) -> list[ToolAdapter]:
    """Wrap every tool in ``tools``, preserving order."""
    return [build_tool_adapter(tool, registry, resolver, trace_ctx) for tool in tools.values()]
