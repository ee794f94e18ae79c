"""Pluggable request authentication.

Credentials travel in ``context.metadata["headers"]``; header names are
matched case-insensitively. Each scheme is a small class, and
``Authenticator`` picks one from the configured scheme name:

- ``none``: every request passes.
- ``jwt`` / ``oauth``: a bearer token from the token header is handed to the
  configured ``token_verifier``; its claims become the authenticated user.
  Without a verifier, tokens cannot be trusted and are rejected.
- ``api_key``: the key from the API-key header (or the token header) must
  equal one of the configured keys.
"""

import hmac
from typing import TYPE_CHECKING, Any, Mapping

from agent_runtime.security.types import AuthenticationConfig, AuthResult
from agent_runtime.telemetry import AUTHENTICATION_FAILED, get_logger

if TYPE_CHECKING:  # pragma: no cover
    from agent_runtime.orchestrator.types import RequestContext

log = get_logger(__name__)

BEARER_PREFIX = "bearer "


def request_headers(context: "RequestContext") -> dict[str, str]:
    """Lower-cased header mapping from the context metadata."""
    headers = (context.metadata or {}).get("headers") or {}
    if not isinstance(headers, Mapping):
        return {}
    return {str(name).lower(): str(value) for name, value in headers.items()}


def bearer_token(header_value: str | None) -> str | None:
    if not header_value:
        return None
    if header_value.lower().startswith(BEARER_PREFIX):
        return header_value[len(BEARER_PREFIX) :].strip() or None
    return None


class AuthScheme:
    """Base class for authentication schemes."""

    name = "none"

    def __init__(self, config: AuthenticationConfig) -> None:
        self.config = config

    def authenticate(self, headers: dict[str, str]) -> AuthResult:
        return AuthResult(authenticated=True)


class BearerTokenScheme(AuthScheme):
    """Bearer tokens checked by an injected verifier (jwt, oauth)."""

    def __init__(self, config: AuthenticationConfig, label: str) -> None:
        super().__init__(config)
        self.name = config.scheme
        self.label = label

    def authenticate(self, headers: dict[str, str]) -> AuthResult:
        token = bearer_token(headers.get(self.config.token_header.lower()))
        if token is None:
            return AuthResult(authenticated=False, error=f"No {self.label} token provided")

        verifier = self.config.token_verifier
        if verifier is None:
            return AuthResult(
                authenticated=False, error=f"No {self.label} token verifier configured"
            )

        claims = verifier(token)
        if not claims:
            return AuthResult(authenticated=False, error=f"Invalid {self.label} token")
        return AuthResult(authenticated=True, user=dict(claims))


class ApiKeyScheme(AuthScheme):
    """Static API keys."""

    name = "api_key"

    def authenticate(self, headers: dict[str, str]) -> AuthResult:
        key = headers.get(self.config.api_key_header.lower()) or headers.get(
            self.config.token_header.lower()
        )
        if not key:
            return AuthResult(authenticated=False, error="No API key provided")

        if any(hmac.compare_digest(key.encode(), valid.encode()) for valid in self.config.api_keys):
            return AuthResult(authenticated=True, user={"id": "api-user", "role": "api"})
        return AuthResult(authenticated=False, error="Invalid API key")


def build_scheme(config: AuthenticationConfig) -> AuthScheme:
    if config.scheme == "jwt":
        return BearerTokenScheme(config, "JWT")
    if config.scheme == "oauth":
        return BearerTokenScheme(config, "OAuth")
    if config.scheme == "api_key":
        return ApiKeyScheme(config)
    return AuthScheme(config)


class Authenticator:
    """Authenticates request contexts with the configured scheme."""

    def __init__(self, config: AuthenticationConfig | None = None) -> None:
        self.configure(config or AuthenticationConfig())

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def configure(self, config: AuthenticationConfig) -> None:
        self.config = config
        self._scheme = build_scheme(config)

    def authenticate(self, context: "RequestContext") -> AuthResult:
        """Authenticate ``context``.

        A verifier that raises counts as a rejection, never as an error of
        the caller.

        Returns:
            AuthResult with the user claims on success or an error message.
        """
        headers = request_headers(context)
        try:
            result = self._scheme.authenticate(headers)
        except Exception as e:
            log.warning(
                AUTHENTICATION_FAILED,
                scheme=self.config.scheme,
                session_id=context.session_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return AuthResult(authenticated=False, error="Authentication validation failed")

        if not result.authenticated:
            log.warning(
                AUTHENTICATION_FAILED,
                scheme=self.config.scheme,
                session_id=context.session_id,
                error=result.error,
            )
        return result

    def describe(self) -> dict[str, Any]:
        return {"scheme": self.config.scheme, "api_keys": len(self.config.api_keys)}
