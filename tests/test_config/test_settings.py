"""Tests for configuration settings."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_runtime.config import (
    AppConfig,
    Environment,
    get_environment,
    get_settings,
    load_app_config,
    reset_settings,
)
from agent_runtime.config.env_loader import env_files_for, load_env_files
from agent_runtime.config.validators import parse_string_list
from agent_runtime.security import SecurityConfig


class TestEnvironmentDetection:
    """Test environment detection."""

    def test_default_is_development(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_ENV", raising=False)

        assert get_environment() == Environment.DEVELOPMENT

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("production", Environment.PRODUCTION),
            ("prod", Environment.PRODUCTION),
            ("STAGE", Environment.STAGING),
            ("testing", Environment.TEST),
            ("unknown", Environment.DEVELOPMENT),
        ],
    )
    def test_aliases(
        self, monkeypatch: pytest.MonkeyPatch, value: str, expected: Environment
    ) -> None:
        monkeypatch.setenv("APP_ENV", value)

        assert get_environment() == expected


class TestAppConfig:
    """Test AppConfig loading and validation."""

    def test_defaults_disable_security(self) -> None:
        config = AppConfig()

        assert config.rate_limit_max_requests is None
        assert config.guard_max_input_length is None
        assert config.guard_sanitize_input is False
        assert config.guard_allowed_domains is None
        assert config.auth_scheme == "none"
        assert config.orchestrator_max_iterations == 3

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_RATE_LIMIT_MAX_REQUESTS", "20")
        monkeypatch.setenv("AGENT_AUTH_SCHEME", "api_key")
        monkeypatch.setenv("AGENT_ORCHESTRATOR_MAX_ITERATIONS", "5")

        config = AppConfig()

        assert config.rate_limit_max_requests == 20
        assert config.auth_scheme == "api_key"
        assert config.orchestrator_max_iterations == 5

    def test_comma_separated_lists(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_GUARD_ALLOWED_DOMAINS", "example.com, api.example.com")
        monkeypatch.setenv("AGENT_AUTH_API_KEYS", '["k1", "k2"]')

        config = AppConfig()

        assert config.guard_allowed_domains == ["example.com", "api.example.com"]
        assert config.auth_api_keys == ["k1", "k2"]

    def test_log_level_normalized(self) -> None:
        assert AppConfig(log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("log_level", "LOUD"),
            ("log_format", "xml"),
            ("auth_scheme", "kerberos"),
            ("rate_limit_max_requests", 0),
            ("orchestrator_max_iterations", 0),
        ],
    )
    def test_invalid_values(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            AppConfig(**{field: value})

    def test_log_dir_resolved(self) -> None:
        assert AppConfig(log_dir="relative/logs").log_dir.is_absolute()

    def test_security_config_from_settings(self) -> None:
        config = AppConfig(
            rate_limit_max_requests=10,
            rate_limit_window_seconds=30,
            guard_sanitize_input=True,
            guard_detect_malicious_content=True,
            auth_scheme="api_key",
            auth_api_keys="a,b",
        )

        security = SecurityConfig.from_settings(config)

        assert security.rate_limit.max_requests == 10
        assert security.rate_limit.window_seconds == 30
        assert security.guard.sanitize_input is True
        assert security.guard.detect_malicious_content is True
        assert security.authentication.api_keys == ["a", "b"]

    def test_malicious_detection_off_by_default(self) -> None:
        assert SecurityConfig.from_settings(AppConfig()).guard.detect_malicious_content is False


class TestSettingsSingleton:
    """Test the cached settings accessor."""

    def test_get_settings_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_reset_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("AGENT_DEFAULT_MODEL", "local-model")
        reset_settings()

        second = get_settings()

        assert second is not first
        assert second.default_model == "local-model"

    def test_load_app_config_invalid_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_AUTH_SCHEME", "kerberos")

        with pytest.raises(ValidationError):
            load_app_config()


class TestEnvFiles:
    """Test layered .env loading."""

    def test_env_files_order(self, tmp_path: Path) -> None:
        files = env_files_for(Environment.STAGING, tmp_path)

        assert [f.name for f in files] == [
            ".env",
            ".env.local",
            ".env.staging",
            ".env.staging.local",
        ]

    def test_specific_file_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_ENV", "test")
        monkeypatch.setenv("AGENT_TEST_VALUE", "unset")
        monkeypatch.delenv("AGENT_TEST_VALUE")
        (tmp_path / ".env").write_text("AGENT_TEST_VALUE=base\n")
        (tmp_path / ".env.test").write_text("AGENT_TEST_VALUE=specific\n")

        loaded = load_env_files(tmp_path)

        assert os.environ["AGENT_TEST_VALUE"] == "specific"
        assert [path.name for path in loaded] == [".env.test", ".env"]

    def test_process_environment_wins(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AGENT_TEST_VALUE", "process")
        (tmp_path / ".env").write_text("AGENT_TEST_VALUE=file\n")

        load_env_files(tmp_path)

        assert os.environ["AGENT_TEST_VALUE"] == "process"

    def test_no_files(self, tmp_path: Path) -> None:
        assert load_env_files(tmp_path) == []


class TestParseStringList:
    """Test list parsing for environment values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, None),
            ("", None),
            ("a, b,,c", ["a", "b", "c"]),
            ('["a", " b "]', ["a", "b"]),
            (["x", ""], ["x"]),
        ],
    )
    def test_parse(self, value: object, expected: list[str] | None) -> None:
        assert parse_string_list(value) == expected

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_string_list(42)
        with pytest.raises(ValueError):
            parse_string_list("[not json")
