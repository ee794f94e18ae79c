"""Application configuration settings.

This module provides the AppConfig class and settings singleton.
"""

from pathlib import Path
from typing import Annotated, Any, Literal

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from agent_runtime.config.env_loader import Environment, get_environment, load_env_files
from agent_runtime.config.validators import (
    parse_string_list,
    resolve_path,
    validate_log_format,
    validate_log_level,
)

log = structlog.get_logger(__name__)

AuthScheme = Literal["none", "jwt", "api_key", "oauth"]


class AppConfig(BaseSettings):
    """Unified runtime configuration.

    Loads configuration from environment variables (``AGENT_`` prefix), the
    layered ``.env`` files and defaults. Every security feature is disabled
    unless configured.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded by env_loader so environment-specific files
        # can take priority; here we only read os.environ.
        env_prefix="AGENT_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(default=False, description="Debug mode flag")
    project_name: str = Field(default="Agent Runtime", description="Project name")
    version: str = Field(default="0.1.0", description="Application version")

    # Telemetry
    log_dir: Path = Field(default=Path("logs"), description="JSON log directory")
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(default="console", description="Console log format (json or console)")
    log_performance: bool = Field(
        default=False, description="Emit performance_metric events for registration and execution"
    )
    log_tool_execution: bool = Field(
        default=True, description="Emit tool_call_started/completed events for every tool call"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    # Rate limiting
    rate_limit_max_requests: int | None = Field(
        default=None, ge=1, description="Admissions per key and window (unset disables)"
    )
    rate_limit_window_seconds: float = Field(
        default=60.0, gt=0, description="Fixed window length in seconds"
    )
    rate_limit_sweep_interval_seconds: float = Field(
        default=300.0, gt=0, description="How often expired windows are swept"
    )

    # Input guard
    guard_max_input_length: int | None = Field(
        default=None, ge=1, description="Maximum input length in characters (unset disables)"
    )
    guard_sanitize_input: bool = Field(
        default=False, description="Strip control characters and collapse whitespace"
    )
    guard_allowed_domains: Annotated[list[str] | None, NoDecode] = Field(
        default=None, description="Hostnames URLs in the input may point to (unset disables)"
    )
    guard_detect_malicious_content: bool = Field(
        default=False, description="Reject input matching the SQL, script and shell patterns"
    )

    # Authentication
    auth_scheme: AuthScheme = Field(
        default="none", description="Authentication scheme: none, jwt, api_key or oauth"
    )
    auth_api_keys: Annotated[list[str] | None, NoDecode] = Field(
        default=None, description="Accepted keys for the api_key scheme"
    )

    @field_validator("guard_allowed_domains", "auth_api_keys", mode="before")
    @classmethod
    def parse_lists(cls, v: Any) -> list[str] | None:
        """Accept JSON arrays or comma-separated strings."""
        return parse_string_list(v)

    # Orchestrator
    orchestrator_max_iterations: int = Field(
        default=3, ge=1, description="Model turns per request before falling back"
    )

    # Agent defaults (used when an agent record leaves them unset)
    default_model: str = Field(default="gpt-3.5-turbo", description="Default model identifier")
    default_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    default_max_tokens: int = Field(default=1000, ge=1)

    # LLM client (OpenAI-compatible chat completions)
    llm_base_url: str = Field(
        default="https://api.openai.com/v1", description="Base URL for the chat completions API"
    )
    llm_api_key: str | None = Field(default=None, description="Bearer token for the LLM API")
    llm_timeout_seconds: float = Field(default=60.0, gt=0, description="Request timeout")
    llm_max_retries: int = Field(default=2, ge=0, description="Maximum retry attempts")


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info("loading_app_config", environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
        log.info(
            "app_config_loaded",
            environment=config.environment.value,
            debug=config.debug,
            log_level=config.log_level,
            rate_limit_enabled=config.rate_limit_max_requests is not None,
            auth_scheme=config.auth_scheme,
        )
        return config
    except Exception as e:
        log.error("app_config_load_failed", error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> AppConfig:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next ``get_settings()`` reloads them."""
    global _settings
    _settings = None
