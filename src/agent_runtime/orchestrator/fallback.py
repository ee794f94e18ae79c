"""Heuristic direct tool invocation.

Used when the model orchestration stops without an answer. Tools are scanned
in registration order and the first relevant one is invoked with the raw
input. A tool is relevant when the lower-cased input contains its full name,
any hyphen-separated token of its name, or any word of its description that
is longer than three characters. There is no ranking beyond first match.
"""

from typing import Sequence

from agent_runtime.telemetry import (
    FALLBACK_EXHAUSTED,
    FALLBACK_STARTED,
    FALLBACK_TOOL_FAILED,
    FALLBACK_TOOL_SELECTED,
    TraceContext,
    get_logger,
    preview,
)
from agent_runtime.tools.types import ToolAdapter

log = get_logger(__name__)

APOLOGY = (
    "I'm sorry, I couldn't process your request properly. "
    "Please try rephrasing your question."
)


def is_relevant(tool: ToolAdapter, input_text: str) -> bool:
    """Apply the textual relevance heuristic to one tool."""
    text = input_text.lower()
    name = tool.name.lower()
    if name in text:
        return True
    if any(token in text for token in name.split("-")):
        return True
    return any(len(word) > 3 and word in text for word in tool.description.lower().split(" "))


def format_fallback(tool_name: str, result: str) -> str:
    return f"Based on the {tool_name} information: {result}"


class FallbackDispatcher:
    """Picks and runs the first relevant tool."""

    def __init__(self, apology: str = APOLOGY) -> None:
        self.apology = apology

    async def dispatch(
        self,
        tools: Sequence[ToolAdapter],
        input_text: str,
        trace_ctx: TraceContext | None = None,
    ) -> tuple[str, bool]:
        """Run the fallback scan.

        Args:
            tools: Adapters in registration order.
            input_text: Raw request input.
            trace_ctx: Trace for log correlation.

        Returns:
            Tuple of (output, exhausted). ``exhausted`` is True when no tool
            matched or every matching tool failed, in which case the output
            is the apology.
        """
        trace_id = trace_ctx.trace_id if trace_ctx else None
        log.info(
            FALLBACK_STARTED,
            tool_count=len(tools),
            input_preview=preview(input_text),
            trace_id=trace_id,
        )

        for tool in tools:
            if not is_relevant(tool, input_text):
                continue

            log.info(FALLBACK_TOOL_SELECTED, tool_name=tool.name, trace_id=trace_id)
            try:
                result = await tool(input_text)
            except Exception as e:
                log.error(
                    FALLBACK_TOOL_FAILED,
                    tool_name=tool.name,
                    error=str(e),
                    error_type=type(e).__name__,
                    trace_id=trace_id,
                    exc_info=True,
                )
                continue
            return format_fallback(tool.name, result), False

        log.warning(FALLBACK_EXHAUSTED, tool_count=len(tools), trace_id=trace_id)
        return self.apology, True
