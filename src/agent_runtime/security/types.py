"""Configuration models and result types for admission checks.

Every feature is optional: a missing rate-limit section disables rate
limiting, an unset maximum length or allowlist disables that check, pattern
detection is off unless requested, and the
"none" authentication scheme accepts every request.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from agent_runtime.config.settings import AppConfig, AuthScheme

# Token -> user claims; returning None (or raising) rejects the token.
TokenVerifier = Callable[[str], dict[str, Any] | None]
# RequestContext -> rate-limit bucket key
KeyExtractor = Callable[[Any], str]


class RateLimitConfig(BaseModel):
    """Fixed-window rate limiting."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    max_requests: int = Field(..., ge=1, description="Admissions per key and window")
    window_seconds: float = Field(60.0, gt=0, description="Window length in seconds")
    sweep_interval_seconds: float = Field(300.0, gt=0, description="Sweeper period")
    key_extractor: KeyExtractor | None = Field(
        None, exclude=True, description="Derives the bucket key from a request context"
    )


class GuardConfig(BaseModel):
    """Input validation and sanitization."""

    max_input_length: int | None = Field(None, ge=1, description="Maximum input length")
    sanitize_input: bool = Field(False, description="Strip control chars, collapse whitespace")
    detect_malicious_content: bool = Field(
        False, description="Reject input matching the malicious-content patterns"
    )
    allowed_domains: list[str] | None = Field(
        None, description="Hostnames URLs may point to; None disables the check"
    )


class AuthenticationConfig(BaseModel):
    """Authentication scheme and its parameters."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    scheme: AuthScheme = Field("none", description="none, jwt, api_key or oauth")
    api_keys: list[str] = Field(default_factory=list, description="Accepted keys (api_key)")
    token_header: str = Field("authorization", description="Header carrying bearer tokens")
    api_key_header: str = Field("x-api-key", description="Header carrying API keys")
    token_verifier: TokenVerifier | None = Field(
        None, exclude=True, description="Validates bearer tokens (jwt, oauth)"
    )

    @property
    def enabled(self) -> bool:
        return self.scheme != "none"


class SecurityConfig(BaseModel):
    """All admission settings of the orchestrator."""

    rate_limit: RateLimitConfig | None = None
    guard: GuardConfig = Field(default_factory=GuardConfig)
    authentication: AuthenticationConfig = Field(default_factory=AuthenticationConfig)

    @classmethod
    def from_settings(cls, settings: AppConfig) -> "SecurityConfig":
        """Build the admission configuration from application settings."""
        rate_limit = None
        if settings.rate_limit_max_requests is not None:
            rate_limit = RateLimitConfig(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
                sweep_interval_seconds=settings.rate_limit_sweep_interval_seconds,
            )
        return cls(
            rate_limit=rate_limit,
            guard=GuardConfig(
                max_input_length=settings.guard_max_input_length,
                sanitize_input=settings.guard_sanitize_input,
                detect_malicious_content=settings.guard_detect_malicious_content,
                allowed_domains=settings.guard_allowed_domains,
            ),
            authentication=AuthenticationConfig(
                scheme=settings.auth_scheme,
                api_keys=settings.auth_api_keys or [],
            ),
        )

    def merged(self, **overrides: Any) -> "SecurityConfig":
        """Return a copy with top-level sections replaced by ``overrides``.

        Sections may be given as models or plain dicts; either way the result
        is validated before anything is returned.

        Raises:
            ValueError: If a section name is unknown.
            pydantic.ValidationError: If a section is invalid.
        """
        unknown = set(overrides) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown security sections: {', '.join(sorted(unknown))}")
        return type(self).model_validate({**dict(self), **overrides})


@dataclass
class RateWindowEntry:
    """Counter for one rate-limit key within its current window."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate-limit check.

    ``remaining`` is -1 and ``reset_time`` 0 when rate limiting is disabled.
    """

    allowed: bool
    remaining: int
    reset_time: float


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of input validation.

    ``sanitized_input`` is only set when the input is valid; ``errors`` lists
    every problem found.
    """

    is_valid: bool
    sanitized_input: str | None = None
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an authentication check."""

    authenticated: bool
    user: dict[str, Any] | None = None
    error: str | None = None
