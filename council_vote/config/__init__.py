"""Configuration module for the council vote engine.

Available Configurations:
- VoteEngineConfig: Roster limits and rapporteur-group policy
"""

from council_vote.config.vote_config import (
    DEFAULT_VOTE_ENGINE_CONFIG,
    STRICT_VOTE_ENGINE_CONFIG,
    TEST_VOTE_ENGINE_CONFIG,
    VoteEngineConfig,
)

__all__ = [
    "VoteEngineConfig",
    "DEFAULT_VOTE_ENGINE_CONFIG",
    "TEST_VOTE_ENGINE_CONFIG",
    "STRICT_VOTE_ENGINE_CONFIG",
]
