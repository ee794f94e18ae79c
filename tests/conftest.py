"""Shared fixtures for the agent runtime test suite."""

import os
import tempfile
from typing import Iterator

import pytest

# Keep JSON logs out of the working tree; must happen before agent_runtime is imported.
os.environ.setdefault("AGENT_LOG_DIR", tempfile.mkdtemp(prefix="agent-runtime-logs-"))

from agent_runtime.config import AppConfig, reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Drop the settings singleton around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def app_config() -> AppConfig:
    """Settings with every security feature disabled and quiet telemetry."""
    return AppConfig(
        log_performance=False,
        log_tool_execution=True,
        rate_limit_max_requests=None,
        guard_max_input_length=None,
        guard_sanitize_input=False,
        guard_allowed_domains=None,
        auth_scheme="none",
        auth_api_keys=None,
        orchestrator_max_iterations=3,
    )
