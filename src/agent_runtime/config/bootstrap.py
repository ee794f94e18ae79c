"""Bootstrap configuration helpers (pre-settings).

Logging has to be configured before the Pydantic settings singleton can be
imported (the settings loader itself logs). These helpers read the handful of
values logging needs straight from the environment.

Constraints:
- Keep this module dependency-light (no telemetry imports) to avoid circular imports.
- Reuse the config validators so values mean the same thing in both places.
"""

from __future__ import annotations

import os
from pathlib import Path

from agent_runtime.config.validators import resolve_path, validate_log_format, validate_log_level

DEFAULT_LOG_DIR = "logs"


def get_bootstrap_log_level(default: str = "INFO") -> str:
    """Get logging level from ``AGENT_LOG_LEVEL`` without importing settings.

    Args:
        default: Default log level if not set or invalid.

    Returns:
        Uppercased, validated log level string.
    """
    value = os.getenv("AGENT_LOG_LEVEL", default)
    try:
        return validate_log_level(value)
    except ValueError:
        return validate_log_level(default)


def get_bootstrap_log_dir(default: str = DEFAULT_LOG_DIR) -> Path:
    """Get the JSON log directory from ``AGENT_LOG_DIR`` without importing settings."""
    return resolve_path(os.getenv("AGENT_LOG_DIR", default))


def get_bootstrap_log_format(default: str = "console") -> str:
    """Get the console log format from ``AGENT_LOG_FORMAT``; invalid values fall back."""
    try:
        return validate_log_format(os.getenv("AGENT_LOG_FORMAT", default))
    except ValueError:
        return default
