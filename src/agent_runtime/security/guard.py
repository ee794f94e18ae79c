"""Pattern-based input guard.

Validation runs in a fixed order and collects every problem instead of
stopping at the first one: length limit, optional sanitization, malicious
content heuristics (when enabled), then the URL domain allowlist. The
heuristics are keyword and regex based. They are not a parser and will flag
ordinary prose that happens to contain words such as "update" or "system".
They only run when ``detect_malicious_content`` is set.
"""

import re
import threading
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from agent_runtime.security.types import GuardConfig, ValidationResult
from agent_runtime.telemetry import INPUT_REJECTED, MALICIOUS_CONTENT_DETECTED, get_logger, preview

if TYPE_CHECKING:  # pragma: no cover
    from agent_runtime.orchestrator.types import RequestContext

log = get_logger(__name__)

EMPTY_INPUT_ERROR = "Input must be a non-empty string"
MALICIOUS_CONTENT_ERROR = "Input contains potentially malicious content"

MALICIOUS_PATTERNS: tuple[re.Pattern[str], ...] = (
    # SQL keywords
    re.compile(r"\b(union|select|insert|update|delete|drop|create|alter)\b", re.IGNORECASE),
    # Script blocks
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    # Shell commands
    re.compile(r"\b(cmd|powershell|bash|sh|exec|system|eval)\b", re.IGNORECASE),
    # Path traversal
    re.compile(r"\.\./"),
    # Executable or server-side script extension at the end
    re.compile(r"\.(php|asp|jsp|exe|bat|cmd|ps1)$", re.IGNORECASE),
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_WHITESPACE_RUN = re.compile(r"\s+")
_URL_PATTERN = re.compile(r"https?://[^\s]+", re.IGNORECASE)


def sanitize(text: str) -> str:
    """Remove null and control characters, collapse whitespace, trim.

    The result is a fixed point: ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    text = text.replace("\x00", "")
    text = _CONTROL_CHARS.sub("", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def contains_malicious_content(text: str) -> bool:
    return any(pattern.search(text) for pattern in MALICIOUS_PATTERNS)


def extract_urls(text: str) -> list[str]:
    return _URL_PATTERN.findall(text)


def is_allowed_domain(url: str, allowed_domains: list[str]) -> bool:
    """Check whether ``url``'s host equals or is a subdomain of an allowed entry."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return False
    if not hostname:
        return False
    for domain in allowed_domains:
        domain = domain.lower()
        if hostname == domain or hostname.endswith("." + domain):
            return True
    return False


class InputGuard:
    """Validates and optionally sanitizes request input."""

    def __init__(self, config: GuardConfig | None = None) -> None:
        self.config = config or GuardConfig()
        self._lock = threading.Lock()
        self._rejected_count = 0
        self._malicious_count = 0

    def configure(self, config: GuardConfig) -> None:
        self.config = config

    def validate(self, text: Any, context: "RequestContext | None" = None) -> ValidationResult:
        """Validate ``text`` against the configured rules.

        Args:
            text: Raw request input. Anything but a non-empty string is invalid.
            context: Request context, used for log correlation only.

        Returns:
            ValidationResult. ``sanitized_input`` holds the (possibly
            sanitized) text when valid and is None otherwise.
        """
        session_id = context.session_id if context is not None else None
        if not isinstance(text, str) or not text:
            return self._reject([EMPTY_INPUT_ERROR], session_id)

        config = self.config
        errors: list[str] = []

        if config.max_input_length is not None and len(text) > config.max_input_length:
            errors.append(
                "Input length exceeds maximum allowed length of "
                f"{config.max_input_length} characters"
            )

        candidate = sanitize(text) if config.sanitize_input else text

        if config.detect_malicious_content and contains_malicious_content(candidate):
            errors.append(MALICIOUS_CONTENT_ERROR)
            with self._lock:
                self._malicious_count += 1
            log.warning(
                MALICIOUS_CONTENT_DETECTED,
                input_preview=preview(candidate),
                session_id=session_id,
            )

        if config.allowed_domains is not None:
            disallowed = [
                url
                for url in extract_urls(candidate)
                if not is_allowed_domain(url, config.allowed_domains)
            ]
            if disallowed:
                errors.append(f"External URLs not allowed: {', '.join(disallowed)}")

        if errors:
            return self._reject(errors, session_id)
        return ValidationResult(is_valid=True, sanitized_input=candidate)

    def _reject(self, errors: list[str], session_id: str | None) -> ValidationResult:
        with self._lock:
            self._rejected_count += 1
        log.warning(INPUT_REJECTED, errors=errors, session_id=session_id)
        return ValidationResult(is_valid=False, errors=errors)

    def stats(self) -> dict[str, int]:
        """Counters since creation."""
        return {
            "invalid_inputs": self._rejected_count,
            "malicious_content_detected": self._malicious_count,
        }
