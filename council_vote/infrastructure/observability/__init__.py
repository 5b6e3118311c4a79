"""Observability infrastructure for structured logging.

Structured JSON logging with structlog. Services bind ``round_id``
through ``structlog.contextvars`` while a round is evaluated; the
``merge_contextvars`` processor configured here stamps it on every
entry.

Usage:
    from council_vote.infrastructure.observability import configure_structlog

    configure_structlog(environment="production")
"""

from council_vote.infrastructure.observability.logging import (
    configure_structlog,
    enum_values_processor,
)

__all__: list[str] = ["configure_structlog", "enum_values_processor"]
