"""Unified configuration management for the agent runtime.

Settings come from environment variables (``AGENT_`` prefix), layered
``.env`` files and defaults.
"""

from agent_runtime.config.env_loader import Environment, get_environment
from agent_runtime.config.settings import AppConfig, get_settings, load_app_config, reset_settings

__all__ = [
    "AppConfig",
    "get_settings",
    "load_app_config",
    "reset_settings",
    "Environment",
    "get_environment",
]
