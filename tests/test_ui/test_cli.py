"""Tests for the developer CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from agent_runtime.ui.cli import app

runner = CliRunner()


@pytest.fixture
def weather_schema(tmp_path: Path) -> Path:
    path = tmp_path / "weather.json"
    path.write_text(json.dumps({"city": {"type": "string", "required": True}}))
    return path


class TestValidateCommand:
    """Test the validate command."""

    def test_accepts_plain_input(self) -> None:
        result = runner.invoke(app, ["validate", "What's the weather in Paris?"])

        assert result.exit_code == 0
        assert "Input accepted" in result.output
        assert "What's the weather in Paris?" in result.output

    def test_prose_accepted_without_detection(self) -> None:
        result = runner.invoke(app, ["validate", "Should I update my plans for Paris?"])

        assert result.exit_code == 0
        assert "Input accepted" in result.output

    def test_rejects_malicious_input(self) -> None:
        result = runner.invoke(app, ["validate", "DROP TABLE users", "--detect-malicious"])

        assert result.exit_code == 1
        assert "Input rejected" in result.output
        assert "malicious content" in result.output

    def test_max_length_override(self) -> None:
        result = runner.invoke(app, ["validate", "hello world", "--max-length", "5"])

        assert result.exit_code == 1
        assert "maximum allowed length of 5" in result.output

    def test_sanitize_override(self) -> None:
        result = runner.invoke(app, ["validate", "  spaced    out  ", "--sanitize"])

        assert result.exit_code == 0
        assert "spaced out" in result.output

    def test_uses_configured_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_GUARD_MAX_INPUT_LENGTH", "3")

        result = runner.invoke(app, ["validate", "hello"])

        assert result.exit_code == 1

    def test_detection_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_GUARD_DETECT_MALICIOUS_CONTENT", "true")

        result = runner.invoke(app, ["validate", "DROP TABLE users"])

        assert result.exit_code == 1
        assert "malicious content" in result.output


class TestResolveCommand:
    """Test the resolve command."""

    def test_free_text(self, weather_schema: Path) -> None:
        result = runner.invoke(app, ["resolve", "weather in Paris", "--schema", str(weather_schema)])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"city": "Paris"}

    def test_structured_input(self, weather_schema: Path) -> None:
        result = runner.invoke(app, ["resolve", '{"city": "Oslo"}', "-s", str(weather_schema)])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"city": "Oslo"}

    def test_missing_parameter(self, weather_schema: Path) -> None:
        result = runner.invoke(app, ["resolve", "hello", "-s", str(weather_schema)])

        assert result.exit_code == 1
        assert "Required parameter 'city'" in result.output

    def test_invalid_schema(self, tmp_path: Path) -> None:
        schema = tmp_path / "bad.json"
        schema.write_text('{"city": {"type": "date"}}')

        result = runner.invoke(app, ["resolve", "hello", "-s", str(schema)])

        assert result.exit_code == 2
        assert "Invalid schema" in result.output


class TestConfigCommand:
    """Test the config command."""

    def test_json_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENT_RATE_LIMIT_MAX_REQUESTS", "7")
        monkeypatch.setenv("AGENT_AUTH_SCHEME", "api_key")
        monkeypatch.setenv("AGENT_AUTH_API_KEYS", "secret-1,secret-2")

        result = runner.invoke(app, ["config", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["rate_limit"]["max_requests"] == 7
        assert data["authentication"] == {"scheme": "api_key", "api_keys": 2}
        assert "secret-1" not in result.output

    def test_table_output(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AGENT_RATE_LIMIT_MAX_REQUESTS", raising=False)

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "rate_limit" in result.output
        assert "disabled" in result.output
