"""Bootstrap wiring for the vote engine."""

from council_vote.bootstrap.logging import configure_structlog
from council_vote.bootstrap.vote_engine import (
    get_judgment_round_service,
    reset_judgment_round_service,
    set_judgment_round_service,
)

__all__ = [
    "configure_structlog",
    "get_judgment_round_service",
    "reset_judgment_round_service",
    "set_judgment_round_service",
]
