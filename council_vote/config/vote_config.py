"""Vote engine configuration.

This module defines the operational limits of the vote engine with
environment variable overrides for deployment tuning.

Environment Variables:
- VOTE_MAX_ROSTER_SIZE: Largest accepted roster (default: 50, min: 1, max: 500)
- VOTE_ALLOW_EMPTY_RAPPORTEUR_GROUP: Accept cases with no rapporteur or
  reviewer ballots (default: true)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or unrecognised.

    Returns:
        Parsed boolean value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


# =============================================================================
# Roster Size
# =============================================================================

# Default largest roster (regular voters, presiding voter excluded)
DEFAULT_MAX_ROSTER_SIZE = 50

# A round needs at least one voter
MIN_ROSTER_SIZE_FLOOR = 1

# Hard ceiling on roster size
MAX_ROSTER_SIZE_CEILING = 500

# =============================================================================
# Rapporteur Group
# =============================================================================

# Cases without a rapporteur still go to the council
DEFAULT_ALLOW_EMPTY_RAPPORTEUR_GROUP = True


@dataclass(frozen=True)
class VoteEngineConfig:
    """Configuration for the vote engine.

    Attributes:
        max_roster_size: Largest accepted roster.
                         Default: 50. Minimum: 1. Maximum: 500.
        allow_empty_rapporteur_group: Whether a round may have no
                         rapporteur or reviewer. Default: True.
    """

    max_roster_size: int = DEFAULT_MAX_ROSTER_SIZE
    allow_empty_rapporteur_group: bool = DEFAULT_ALLOW_EMPTY_RAPPORTEUR_GROUP

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not MIN_ROSTER_SIZE_FLOOR <= self.max_roster_size <= MAX_ROSTER_SIZE_CEILING:
            raise ValueError(
                f"max_roster_size must be between {MIN_ROSTER_SIZE_FLOOR} "
                f"and {MAX_ROSTER_SIZE_CEILING}, got {self.max_roster_size}"
            )

    @classmethod
    def from_environment(cls) -> VoteEngineConfig:
        """Create config from environment variables with defaults.

        Environment Variables:
            VOTE_MAX_ROSTER_SIZE: Largest accepted roster (default: 50)
            VOTE_ALLOW_EMPTY_RAPPORTEUR_GROUP: Accept rounds without
                rapporteurs (default: true)

        Returns:
            VoteEngineConfig with values from environment or defaults.
        """
        max_roster_size = _get_int_env("VOTE_MAX_ROSTER_SIZE", DEFAULT_MAX_ROSTER_SIZE)
        # Clamp to valid range
        max_roster_size = max(
            MIN_ROSTER_SIZE_FLOOR,
            min(max_roster_size, MAX_ROSTER_SIZE_CEILING),
        )

        allow_empty = _get_bool_env(
            "VOTE_ALLOW_EMPTY_RAPPORTEUR_GROUP",
            DEFAULT_ALLOW_EMPTY_RAPPORTEUR_GROUP,
        )

        return cls(
            max_roster_size=max_roster_size,
            allow_empty_rapporteur_group=allow_empty,
        )


# Pre-defined configurations for common use cases

# Default production config
DEFAULT_VOTE_ENGINE_CONFIG = VoteEngineConfig()

# Small rosters for unit tests
TEST_VOTE_ENGINE_CONFIG = VoteEngineConfig(max_roster_size=10)

# Every case must carry at least one rapporteur or reviewer ballot
STRICT_VOTE_ENGINE_CONFIG = VoteEngineConfig(allow_empty_rapporteur_group=False)
