"""Tests for the input guard."""

import pytest

from agent_runtime.security.guard import (
    EMPTY_INPUT_ERROR,
    MALICIOUS_CONTENT_ERROR,
    InputGuard,
    contains_malicious_content,
    extract_urls,
    is_allowed_domain,
    sanitize,
)
from agent_runtime.security.types import GuardConfig


class TestSanitize:
    """Test input sanitization."""

    def test_strips_control_characters(self) -> None:
        assert sanitize("hel\x00lo\x07 world") == "hello world"

    def test_collapses_whitespace(self) -> None:
        assert sanitize("  many \t\n  spaces  ") == "many spaces"

    @pytest.mark.parametrize(
        "text",
        ["plain", "  padded  ", "a\x00b\x1fc", "tabs\t\tand\nnewlines", "\x7f\x0b mixed \x0c"],
    )
    def test_idempotent(self, text: str) -> None:
        """Test sanitizing twice changes nothing."""
        once = sanitize(text)

        assert sanitize(once) == once


class TestHeuristics:
    """Test the malicious content patterns."""

    @pytest.mark.parametrize(
        "text",
        [
            "SELECT * FROM users",
            "please drop the table",
            "<script>alert(1)</script>",
            "run powershell now",
            "read ../../etc/passwd",
            "download payload.exe",
        ],
    )
    def test_flagged(self, text: str) -> None:
        assert contains_malicious_content(text)

    @pytest.mark.parametrize(
        "text",
        ["What's the weather in Paris?", "multiply 6 and 7", "selection of fruits"],
    )
    def test_not_flagged(self, text: str) -> None:
        assert not contains_malicious_content(text)

    def test_ordinary_word_is_flagged(self) -> None:
        """Test keyword heuristics flag plain prose containing SQL verbs."""
        assert contains_malicious_content("can you update me on the news")


class TestDomains:
    """Test URL allowlist helpers."""

    def test_extract_urls(self) -> None:
        text = "see https://example.com/a and http://b.org?x=1 but not ftp://c.net"

        assert extract_urls(text) == ["https://example.com/a", "http://b.org?x=1"]

    def test_subdomains_allowed(self) -> None:
        assert is_allowed_domain("https://docs.example.com/page", ["example.com"])
        assert is_allowed_domain("https://EXAMPLE.com", ["Example.COM"])

    def test_lookalike_rejected(self) -> None:
        assert not is_allowed_domain("https://badexample.com", ["example.com"])
        assert not is_allowed_domain("https://", ["example.com"])


class TestInputGuard:
    """Test full validation."""

    def test_default_config_accepts(self) -> None:
        """Test plain input passes unchanged without any limits."""
        result = InputGuard().validate("  hello   there ")

        assert result.is_valid is True
        assert result.sanitized_input == "  hello   there "
        assert result.errors == []

    def test_detection_off_by_default(self) -> None:
        """Test ordinary prose with SQL-like words passes the default guard."""
        guard = InputGuard()

        result = guard.validate("Should I select, create or update my travel plans?")

        assert result.is_valid is True
        assert guard.stats()["malicious_content_detected"] == 0

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_empty_or_non_string_rejected(self, value: object) -> None:
        result = InputGuard().validate(value)

        assert result.is_valid is False
        assert result.sanitized_input is None
        assert result.errors == [EMPTY_INPUT_ERROR]

    def test_sanitized_when_enabled(self) -> None:
        guard = InputGuard(GuardConfig(sanitize_input=True))

        result = guard.validate("  hello \x00  there ")

        assert result.is_valid is True
        assert result.sanitized_input == "hello there"

    def test_length_limit(self) -> None:
        guard = InputGuard(GuardConfig(max_input_length=5))

        result = guard.validate("too long input")

        assert result.is_valid is False
        assert result.errors == ["Input length exceeds maximum allowed length of 5 characters"]

    def test_errors_accumulate(self) -> None:
        """Test every failed rule is reported, in order."""
        guard = InputGuard(
            GuardConfig(
                max_input_length=10,
                detect_malicious_content=True,
                allowed_domains=["example.com"],
            )
        )

        result = guard.validate("drop everything and visit https://evil.test/x")

        assert result.errors == [
            "Input length exceeds maximum allowed length of 10 characters",
            MALICIOUS_CONTENT_ERROR,
            "External URLs not allowed: https://evil.test/x",
        ]

    def test_allowed_domain_passes(self) -> None:
        guard = InputGuard(GuardConfig(allowed_domains=["example.com"]))

        assert guard.validate("summarize https://news.example.com/today").is_valid

    def test_empty_allowlist_rejects_any_url(self) -> None:
        guard = InputGuard(GuardConfig(allowed_domains=[]))

        result = guard.validate("open https://example.com")

        assert result.errors == ["External URLs not allowed: https://example.com"]

    def test_stats(self) -> None:
        """Test rejection and detection counters."""
        guard = InputGuard(GuardConfig(detect_malicious_content=True))
        guard.validate("SELECT secrets")
        guard.validate("")
        guard.validate("fine")

        assert guard.stats() == {"invalid_inputs": 2, "malicious_content_detected": 1}

    def test_configure_replaces_rules(self) -> None:
        guard = InputGuard()
        guard.configure(GuardConfig(max_input_length=3))

        assert not guard.validate("four").is_valid
