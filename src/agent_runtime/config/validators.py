"""Custom Pydantic validators for configuration.

Plain functions so the bootstrap helpers can reuse them before the settings
model is importable.
"""

import json
from pathlib import Path
from typing import Any

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_LOG_FORMATS = {"json", "console"}


def validate_log_level(value: str) -> str:
    """Validate log level is one of the standard levels.

    Args:
        value: Log level string.

    Returns:
        Uppercased log level.

    Raises:
        ValueError: If log level is not valid.
    """
    if value.upper() not in VALID_LOG_LEVELS:
        raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}, got {value}")
    return value.upper()


def validate_log_format(value: str) -> str:
    """Validate log format is 'json' or 'console'.

    Raises:
        ValueError: If log format is not valid.
    """
    if value.lower() not in VALID_LOG_FORMATS:
        raise ValueError(f"log_format must be one of {VALID_LOG_FORMATS}, got {value}")
    return value.lower()


def resolve_path(value: Path | str) -> Path:
    """Resolve a possibly relative path against the working directory."""
    path = Path(value) if isinstance(value, str) else value
    if not path.is_absolute():
        path = Path.cwd() / path
    return path.resolve()


def parse_string_list(value: Any) -> list[str] | None:
    """Parse a list of strings given as a list, JSON array or comma-separated text.

    Handles:
    - Already a list: ["example.com", "api.example.com"]
    - JSON array: '["example.com", "api.example.com"]'
    - Comma-separated: "example.com, api.example.com"

    Args:
        value: Raw value from the environment or constructor.

    Returns:
        List of non-empty stripped strings, or None when unset.

    Raises:
        ValueError: If the value has an unsupported type.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if stripped.startswith("["):
            try:
                parsed = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON list: {value}") from e
            return parse_string_list(parsed)
        return [item.strip() for item in stripped.split(",") if item.strip()]
    raise ValueError(f"Invalid list value type: {type(value)}")
