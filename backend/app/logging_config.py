"""structlog setup.

Events go through stdlib logging so uvicorn and library logs share one
format: JSON in production, coloured console elsewhere. Two processors
run before rendering: raw skill lists are reduced to their length, and
client addresses or credentials are redacted.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from app.config import Environment, get_settings

REDACTED = "[REDACTED]"

# Fields this service may see (request headers, client address)
REDACTED_KEYS = frozenset({"authorization", "cookie", "client_ip", "ip_address", "x_forwarded_for"})
REDACTED_SUBSTRINGS = ("token", "secret")

QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def redact_sensitive(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Blank out client addresses and credential-like values."""
    for key in list(event_dict):
        lowered = key.lower()
        if lowered in REDACTED_KEYS or any(s in lowered for s in REDACTED_SUBSTRINGS):
            event_dict[key] = REDACTED
    return event_dict


def summarize_skill_lists(
    _logger: Any, _method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace ``*_skills`` lists with a ``*_skills_count`` field."""
    for key in [k for k in event_dict if k.endswith("_skills")]:
        value = event_dict[key]
        if isinstance(value, (list, tuple, set, frozenset)):
            del event_dict[key]
            event_dict[f"{key}_count"] = len(value)
    return event_dict


def _renderer(environment: Environment) -> structlog.types.Processor:
    if environment == Environment.PRODUCTION:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=environment == Environment.DEVELOPMENT)


def setup_logging() -> None:
    """Configure structlog and the root stdlib logger."""
    settings = get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            summarize_skill_lists,
            redact_sensitive,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings.environment),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(settings.log_level.upper())

    # Request lines are logged by the app middleware
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
