"""Admission checks: rate limiting, input guarding and authentication."""

from agent_runtime.security.auth import Authenticator
from agent_runtime.security.guard import InputGuard, sanitize
from agent_runtime.security.rate_limiter import RateLimiter
from agent_runtime.security.types import (
    AuthenticationConfig,
    AuthResult,
    GuardConfig,
    RateLimitConfig,
    RateLimitResult,
    SecurityConfig,
    ValidationResult,
)

__all__ = [
    "Authenticator",
    "InputGuard",
    "RateLimiter",
    "sanitize",
    "AuthenticationConfig",
    "AuthResult",
    "GuardConfig",
    "RateLimitConfig",
    "RateLimitResult",
    "SecurityConfig",
    "ValidationResult",
]
