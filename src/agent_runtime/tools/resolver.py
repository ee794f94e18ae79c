"""Resolve raw tool input into typed arguments.

The model (or the fallback dispatcher) hands a tool a single string. This
module turns that string into the argument value the tool method receives:

1. If the string is a JSON object, declared parameters are taken from its
   same-named fields. Required parameters missing from the object are
   extracted from the raw text with the name-keyed extractors; if one cannot
   be found, resolution fails. If nothing was assembled, a single value is
   returned instead: the ``input`` field, else the first string field, else
   the raw text.
2. Otherwise every declared parameter is run through the extractors against
   the raw text. Missing required parameters fail resolution; if nothing was
   extracted the raw text is returned unchanged.

Extraction is keyed by parameter *name* through an open table. Names outside
the table only resolve from JSON. The default table is deliberately small and
literal; known gaps (symbolic operators such as "+", city names containing
punctuation) are part of its contract.
"""

import json
import re
from typing import Any, Callable, Mapping

from agent_runtime.errors import ParameterResolutionError
from agent_runtime.telemetry import (
    PARAMETER_RESOLUTION_FAILED,
    PARAMETERS_RESOLVED,
    get_logger,
    preview,
)
from agent_runtime.tools.types import ToolParameter

log = get_logger(__name__)

# (raw_text, parameter_name, parameter) -> value, or None when not found
Extractor = Callable[[str, str, ToolParameter], Any]

_LOCATION_PATTERN = re.compile(r"(?:in|for|at)\s+([A-Za-z\s]+?)(?:\?|$|,|\.)", re.IGNORECASE)
_QUOTED_PATTERN = re.compile(r'"([^"]+)"')
_OPERATION_PATTERN = re.compile(r"(add|subtract|multiply|divide|power|sqrt)", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")
_EMAIL_PATTERN = re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")


def extract_location(text: str, name: str, parameter: ToolParameter) -> str | None:
    """Find a place name after "in", "for" or "at", else inside double quotes."""
    match = _LOCATION_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return extract_quoted(text, name, parameter)


def extract_quoted(text: str, name: str, parameter: ToolParameter) -> str | None:
    """Return the first double-quoted span."""
    match = _QUOTED_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return None


def extract_operation(text: str, name: str, parameter: ToolParameter) -> str | None:
    """Match an arithmetic operation word (no symbolic operators)."""
    match = _OPERATION_PATTERN.search(text)
    if match:
        return match.group(1).lower()
    return None


def extract_email(text: str, name: str, parameter: ToolParameter) -> str | None:
    """Return the first email-looking token."""
    match = _EMAIL_PATTERN.search(text)
    if match:
        return match.group(1)
    return None


def numeric_position_extractor(position: int) -> Extractor:
    """Build an extractor returning the n-th decimal number in the text.

    Args:
        position: Zero-based index into the numbers found, in order of appearance.

    Returns:
        Extractor yielding a float, or None when there are too few numbers.
    """

    def extract(text: str, name: str, parameter: ToolParameter) -> float | None:
        numbers = [float(n) for n in _NUMBER_PATTERN.findall(text)]
        if len(numbers) > position:
            return numbers[position]
        return None

    return extract


def default_extractors() -> dict[str, Extractor]:
    """The built-in parameter-name → extractor table."""
    return {
        "city": extract_location,
        "location": extract_location,
        "operation": extract_operation,
        "a": numeric_position_extractor(0),
        "b": numeric_position_extractor(1),
        "text": extract_quoted,
        "email": extract_email,
    }


class ParameterResolver:
    """Turns raw tool input into arguments for a declared parameter schema."""

    def __init__(self, extractors: Mapping[str, Extractor] | None = None) -> None:
        """Initialize resolver.

        Args:
            extractors: Name-keyed extractor table. Defaults to ``default_extractors()``.
        """
        self._extractors: dict[str, Extractor] = dict(
            default_extractors() if extractors is None else extractors
        )

    @property
    def extractors(self) -> dict[str, Extractor]:
        """Copy of the current extractor table."""
        return dict(self._extractors)

    def register_extractor(self, parameter_name: str, extractor: Extractor) -> None:
        """Add or replace the extractor used for ``parameter_name``."""
        self._extractors[parameter_name] = extractor
        log.debug("parameter_extractor_registered", parameter=parameter_name)

    def extract(self, text: str, name: str, parameter: ToolParameter) -> Any:
        """Run the extractor registered for ``name``.

        Returns:
            Extracted value, or None if no extractor exists or it found nothing.
        """
        extractor = self._extractors.get(name)
        if extractor is None:
            return None
        return extractor(text, name, parameter)

    def resolve(
        self,
        raw_input: str,
        parameters: Mapping[str, ToolParameter],
        tool_name: str | None = None,
    ) -> Any:
        """Resolve ``raw_input`` against a tool's parameter schema.

        Args:
            raw_input: Text handed to the tool.
            parameters: Ordered parameter schema of the tool.
            tool_name: Tool name, for logging only.

        Returns:
            A dict of arguments, or a single scalar value.

        Raises:
            ParameterResolutionError: If a required parameter cannot be located.
        """
        payload = _parse_object(raw_input)
        try:
            if payload is not None:
                resolved = self._resolve_structured(raw_input, payload, parameters)
            else:
                resolved = self._resolve_text(raw_input, parameters)
        except ParameterResolutionError as e:
            log.warning(
                PARAMETER_RESOLUTION_FAILED,
                tool_name=tool_name,
                parameter=e.parameter,
                input_preview=preview(raw_input),
            )
            raise

        log.debug(
            PARAMETERS_RESOLVED,
            tool_name=tool_name,
            structured=payload is not None,
            resolved_type=type(resolved).__name__,
        )
        return resolved

    def _resolve_structured(
        self,
        raw_input: str,
        payload: dict[str, Any],
        parameters: Mapping[str, ToolParameter],
    ) -> Any:
        resolved: dict[str, Any] = {}
        for name, parameter in parameters.items():
            if name in payload:
                resolved[name] = payload[name]
            elif parameter.required:
                value = self.extract(raw_input, name, parameter)
                if value is None:
                    raise ParameterResolutionError(
                        name, f"Required parameter '{name}' not found in input"
                    )
                resolved[name] = value

        if resolved:
            return resolved

        if payload.get("input"):
            return payload["input"]
        first_string = next((value for value in payload.values() if isinstance(value, str)), None)
        return first_string or raw_input

    def _resolve_text(self, raw_input: str, parameters: Mapping[str, ToolParameter]) -> Any:
        resolved: dict[str, Any] = {}
        for name, parameter in parameters.items():
            value = self.extract(raw_input, name, parameter)
            if value is not None:
                resolved[name] = value
            elif parameter.required:
                raise ParameterResolutionError(
                    name, f"Required parameter '{name}' not found in input: \"{raw_input}\""
                )

        if resolved:
            return resolved
        return raw_input


def _parse_object(raw_input: str) -> dict[str, Any] | None:
    """Decode ``raw_input`` as a JSON object; anything else counts as free text."""
    try:
        parsed = json.loads(raw_input)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(parsed, dict):
        return parsed
    return None
