"""Structured logging for the agent runtime.

Every structlog event and every stdlib record is routed through the root
logger to two handlers:

- ``current.jsonl`` in the log directory: one JSON object per line, INFO and
  above, rotated at 50 MB.
- stderr: the configured level, rendered for humans or as JSON
  (``AGENT_LOG_FORMAT``).

Each entry carries ``level``, ``logger``, ``component`` (the last segment of
the logger name) and a UTC ``timestamp``. Level, directory and format are read
through the bootstrap helpers because settings cannot be imported yet when
the first logger is requested.
"""

import logging
import logging.handlers
import pathlib
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

PREVIEW_LENGTH = 100

LOG_FILE_NAME = "current.jsonl"
LOG_FILE_MAX_BYTES = 50 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Libraries that log every request at INFO.
QUIET_LOGGERS = ("httpx", "httpcore")


def _get_log_level() -> str:
    from agent_runtime.config.bootstrap import get_bootstrap_log_level  # noqa: PLC0415

    return get_bootstrap_log_level()


def _get_log_dir() -> pathlib.Path:
    from agent_runtime.config.bootstrap import get_bootstrap_log_dir  # noqa: PLC0415

    return get_bootstrap_log_dir()


def _get_log_format() -> str:
    from agent_runtime.config.bootstrap import get_bootstrap_log_format  # noqa: PLC0415

    return get_bootstrap_log_format()


def component_for(logger_name: str | None) -> str:
    """Map a dotted logger name to its component.

    >>> component_for("agent_runtime.security.rate_limiter")
    'rate_limiter'
    """
    if not logger_name:
        return "unknown"
    return logger_name.rsplit(".", 1)[-1]


def _stamp_foreign_record(
    logger: logging.Logger | None, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Give stdlib records the timestamp and component structlog events get."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    # The logger can be gone for third-party records emitted at shutdown.
    event_dict["component"] = component_for(getattr(logger, "name", None))
    return event_dict


def _add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict["component"] = component_for(event_dict.get("logger"))
    return event_dict


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            _stamp_foreign_record,  # type: ignore[list-item]
        ],
    )


def _json_file_handler(log_dir: pathlib.Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / LOG_FILE_NAME),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    handler.setLevel(logging.INFO)
    return handler


def _stderr_handler(log_format: str, level: str) -> logging.Handler:
    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(renderer))
    handler.setLevel(getattr(logging, level, logging.INFO))
    return handler


def configure_logging(log_format: str | None = None) -> None:
    """Install the JSON file and stderr handlers and configure structlog.

    Safe to call again: existing root handlers are replaced.

    Args:
        log_format: "console" or "json" for stderr. Defaults to
            ``AGENT_LOG_FORMAT``.
    """
    root_logger = logging.getLogger()
    # Handlers gate output; the root passes everything through.
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()
    root_logger.addHandler(_json_file_handler(_get_log_dir()))
    root_logger.addHandler(_stderr_handler(log_format or _get_log_format(), _get_log_level()))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            _add_component,  # type: ignore[list-item]
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:  # structlog.stdlib.BoundLogger
    """Return a structlog logger, configuring logging on first use.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("tool_call_started", tool_name="get-weather", trace_id="abc")
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)


def preview(text: str, limit: int = PREVIEW_LENGTH) -> str:
    """Truncate user-supplied text before it goes into a log line.

    Returns:
        ``text`` unchanged when short enough, otherwise its prefix plus "...".
    """
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
