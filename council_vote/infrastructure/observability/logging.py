"""Structured logging configuration with structlog.

Supports both production (JSON) and development (console) output.

Log Entry Format (production):
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "round_evaluated",
        "round_id": "uuid",
        "component": "vote_tally",
        "status": "DECIDED",
        ...additional context
    }

Usage:
    from council_vote.infrastructure.observability import configure_structlog

    configure_structlog()  # format from VOTE_LOG_FORMAT, JSON by default
    configure_structlog(environment="development")  # Console output
"""

import logging
import os
from enum import Enum
from typing import Any

import structlog
from structlog.typing import Processor

# Environment variable for log level (default: INFO)
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"

# Environment variable selecting the renderer when none is passed
LOG_FORMAT_ENV = "VOTE_LOG_FORMAT"
DEFAULT_ENVIRONMENT = "production"


def _get_log_level() -> int:
    """Get the configured log level from environment.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def enum_values_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor rendering Enum members as their values.

    Lets services log positions, stages and statuses directly while the
    JSON output stays plain strings.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with Enum values unwrapped.
    """
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, (list, tuple)) and any(isinstance(v, Enum) for v in value):
            event_dict[key] = [v.value if isinstance(v, Enum) else v for v in value]
    return event_dict


def configure_structlog(environment: str | None = None) -> None:
    """Configure structlog for the vote engine.

    Should be called once by the hosting application at startup.
    ``round_id`` bound through ``structlog.contextvars`` during an
    evaluation is merged into every entry.

    Args:
        environment: 'production' for JSON output, 'development' for
            console. Defaults to VOTE_LOG_FORMAT, then 'production'.
    """
    if environment is None:
        environment = os.getenv(LOG_FORMAT_ENV, DEFAULT_ENVIRONMENT)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        enum_values_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
