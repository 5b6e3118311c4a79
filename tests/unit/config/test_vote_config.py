"""Unit tests for VoteEngineConfig.

Tests engine limits with validation and environment overrides.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from council_vote.config.vote_config import (
    DEFAULT_MAX_ROSTER_SIZE,
    DEFAULT_VOTE_ENGINE_CONFIG,
    MAX_ROSTER_SIZE_CEILING,
    MIN_ROSTER_SIZE_FLOOR,
    STRICT_VOTE_ENGINE_CONFIG,
    TEST_VOTE_ENGINE_CONFIG,
    VoteEngineConfig,
)


class TestVoteEngineConfig:
    """Tests for VoteEngineConfig dataclass."""

    def test_defaults(self) -> None:
        config = VoteEngineConfig()
        assert config.max_roster_size == DEFAULT_MAX_ROSTER_SIZE == 50
        assert config.allow_empty_rapporteur_group is True

    def test_valid_at_bounds(self) -> None:
        assert VoteEngineConfig(max_roster_size=MIN_ROSTER_SIZE_FLOOR).max_roster_size == 1
        assert VoteEngineConfig(max_roster_size=MAX_ROSTER_SIZE_CEILING).max_roster_size == 500

    def test_below_floor_raises(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            VoteEngineConfig(max_roster_size=0)

        assert "max_roster_size must be between" in str(exc_info.value)

    def test_above_ceiling_raises(self) -> None:
        with pytest.raises(ValueError):
            VoteEngineConfig(max_roster_size=501)

    def test_is_frozen(self) -> None:
        config = VoteEngineConfig()
        with pytest.raises(AttributeError):
            config.max_roster_size = 10  # type: ignore[misc]


class TestPredefinedConfigs:
    """Tests for the pre-defined configurations."""

    def test_default_config(self) -> None:
        assert DEFAULT_VOTE_ENGINE_CONFIG == VoteEngineConfig()

    def test_test_config_is_small(self) -> None:
        assert TEST_VOTE_ENGINE_CONFIG.max_roster_size == 10

    def test_strict_config_requires_rapporteur(self) -> None:
        assert STRICT_VOTE_ENGINE_CONFIG.allow_empty_rapporteur_group is False


class TestFromEnvironment:
    """Tests for VoteEngineConfig.from_environment."""

    def test_no_env_vars_gives_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = VoteEngineConfig.from_environment()

        assert config == DEFAULT_VOTE_ENGINE_CONFIG

    def test_env_overrides(self) -> None:
        env = {
            "VOTE_MAX_ROSTER_SIZE": "25",
            "VOTE_ALLOW_EMPTY_RAPPORTEUR_GROUP": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            config = VoteEngineConfig.from_environment()

        assert config.max_roster_size == 25
        assert config.allow_empty_rapporteur_group is False

    def test_roster_size_clamped_to_floor(self) -> None:
        with patch.dict(os.environ, {"VOTE_MAX_ROSTER_SIZE": "-5"}, clear=True):
            config = VoteEngineConfig.from_environment()

        assert config.max_roster_size == MIN_ROSTER_SIZE_FLOOR

    def test_roster_size_clamped_to_ceiling(self) -> None:
        with patch.dict(os.environ, {"VOTE_MAX_ROSTER_SIZE": "10000"}, clear=True):
            config = VoteEngineConfig.from_environment()

        assert config.max_roster_size == MAX_ROSTER_SIZE_CEILING

    def test_invalid_values_use_defaults(self) -> None:
        env = {
            "VOTE_MAX_ROSTER_SIZE": "many",
            "VOTE_ALLOW_EMPTY_RAPPORTEUR_GROUP": "maybe",
        }
        with patch.dict(os.environ, env, clear=True):
            config = VoteEngineConfig.from_environment()

        assert config == DEFAULT_VOTE_ENGINE_CONFIG

    @pytest.mark.parametrize("value", ["1", "TRUE", " yes ", "on"])
    def test_truthy_values(self, value: str) -> None:
        with patch.dict(os.environ, {"VOTE_ALLOW_EMPTY_RAPPORTEUR_GROUP": value}, clear=True):
            config = VoteEngineConfig.from_environment()

        assert config.allow_empty_rapporteur_group is True
