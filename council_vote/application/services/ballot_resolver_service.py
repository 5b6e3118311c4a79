"""Ballot resolver service implementation.

This module collapses "follows" ballots into the concrete position
they ultimately point at. The ballot set is treated as an adjacency
map (voter name -> ballot); each chain is walked once with a
path-visited set for cycle detection, and every terminal position is
memoized so the whole set resolves in linear time. Each entry holds
only the terminal voter, never the walked path, so the output is linear
too.

The service is stateless: the memo lives only for one resolve() call,
so concurrent calls for independent rounds never interact.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from council_vote.application.ports.ballot_resolver import BallotResolverProtocol
from council_vote.domain.errors.ballot import (
    CycleDetectedError,
    UnknownReferenceError,
)
from council_vote.domain.errors.roster import DuplicateBallotError
from council_vote.domain.models.ballot import Ballot, ResolvedBallot, VotePosition

logger = structlog.get_logger(__name__)

# name -> (terminal position, terminal voter or None for a direct ballot)
_Memo = dict[str, tuple[VotePosition, str | None]]


class BallotResolverService(BallotResolverProtocol):
    """Resolves follow chains among rapporteur/reviewer ballots.

    Algorithm:
    1. Index ballots by voter name (a repeated name is rejected)
    2. For each ballot, walk FOLLOWS references until a direct ballot
       or an already-resolved voter is reached
    3. A name seen twice on the current walk is a cycle
    4. A name missing from the index is a dangling reference
    5. Record the terminal position and terminal voter for every voter
       on the walk
    """

    def __init__(self) -> None:
        """Initialize the ballot resolver service."""
        self._log = logger.bind(component="ballot_resolver")

    def resolve(self, ballots: Sequence[Ballot]) -> tuple[ResolvedBallot, ...]:
        """Resolve every FOLLOWS ballot to a concrete position.

        Args:
            ballots: Rapporteur/reviewer ballots of one round. Council
                ballots may be included; they never follow anyone and
                pass through unchanged.

        Returns:
            Resolved ballots in input order; none is FOLLOWS.

        Raises:
            DuplicateBallotError: If two ballots carry the same voter name.
            CycleDetectedError: If a follow chain loops (self-reference
                included).
            UnknownReferenceError: If a ballot follows a name not in the set.
        """
        by_name: dict[str, Ballot] = {}
        for ballot in ballots:
            if ballot.voter_name in by_name:
                raise DuplicateBallotError(ballot.voter_name)
            by_name[ballot.voter_name] = ballot

        memo: _Memo = {}
        resolved = []
        for ballot in ballots:
            position, terminal = self._terminal(ballot.voter_name, by_name, memo)
            resolved.append(
                ResolvedBallot(
                    voter_name=ballot.voter_name,
                    position=position,
                    cast_position=ballot.position,
                    follows_voter_name=ballot.follows_voter_name,
                    terminal_voter_name=terminal,
                )
            )

        self._log.debug(
            "ballots_resolved",
            ballot_count=len(resolved),
            followed_count=sum(1 for b in resolved if b.followed),
        )
        return tuple(resolved)

    def _terminal(
        self,
        start: str,
        by_name: dict[str, Ballot],
        memo: _Memo,
    ) -> tuple[VotePosition, str | None]:
        """Walk one chain from ``start`` and memoize every voter on it."""
        path: list[str] = []
        on_path: set[str] = set()
        name = start

        while True:
            if name in memo:
                position, terminal = memo[name]
                if terminal is None:
                    terminal = name
                break
            if name in on_path:
                cycle = (*path, name)
                self._log.warning("follow_cycle_detected", path=list(cycle))
                raise CycleDetectedError(cycle)

            ballot = by_name.get(name)
            if ballot is None:
                self._log.warning(
                    "unknown_follow_reference",
                    name=name,
                    referenced_by=path[-1],
                )
                raise UnknownReferenceError(name, referenced_by=path[-1])

            on_path.add(name)
            path.append(name)
            if ballot.follows_voter_name is None:
                position = ballot.position
                terminal = name
                break
            name = ballot.follows_voter_name

        for voter_name in path:
            memo[voter_name] = (position, None if voter_name == terminal else terminal)
        return memo[start]
