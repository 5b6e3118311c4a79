"""Ballot resolver protocol.

This module defines the abstract interface for collapsing "follows"
ballots into concrete positions. Implementations must be pure: the
same ballots always resolve the same way.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from council_vote.domain.models.ballot import Ballot, ResolvedBallot


class BallotResolverProtocol(Protocol):
    """Protocol for resolving follow chains among rapporteur ballots."""

    def resolve(self, ballots: Sequence[Ballot]) -> tuple[ResolvedBallot, ...]:
        """Resolve every FOLLOWS ballot to a concrete position.

        Args:
            ballots: Rapporteur/reviewer ballots of one round.

        Returns:
            Resolved ballots in input order; none is FOLLOWS.

        Raises:
            CycleDetectedError: If a follow chain loops.
            UnknownReferenceError: If a ballot follows a name not in the set.
        """
        ...
