"""Ballot domain models.

A Ballot is what a voter cast. A ResolvedBallot is the derived view in
which any "follows" chain has been collapsed to the concrete position
it ends in. Resolved ballots are recomputed on every evaluation and
never stored on their own.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from council_vote.domain.errors.ballot import InvalidBallotError
from council_vote.domain.models.voter import normalize_name


class VotePosition(Enum):
    """Position a ballot can carry.

    Substantive (decide the case):
        APPROVED: Request granted
        DENIED: Request rejected
        PARTIAL: Request partially granted

    Rapporteur/reviewer only:
        FOLLOWS: Adopt another named voter's resolved position

    Council member only (recorded, never decide):
        ABSTAIN: Member abstained
        ABSENT: Member was absent
        BARRED: Member was impeded from voting
    """

    APPROVED = "APPROVED"
    DENIED = "DENIED"
    PARTIAL = "PARTIAL"
    FOLLOWS = "FOLLOWS"
    ABSTAIN = "ABSTAIN"
    ABSENT = "ABSENT"
    BARRED = "BARRED"

    def is_substantive(self) -> bool:
        """Check if this position counts toward the decision."""
        return self in SUBSTANTIVE_POSITIONS

    def is_non_substantive(self) -> bool:
        """Check if this position is a recorded non-vote status."""
        return self in NON_SUBSTANTIVE_POSITIONS


# Canonical order; also the order used to report tied positions
SUBSTANTIVE_POSITIONS: tuple[VotePosition, ...] = (
    VotePosition.APPROVED,
    VotePosition.DENIED,
    VotePosition.PARTIAL,
)

NON_SUBSTANTIVE_POSITIONS: tuple[VotePosition, ...] = (
    VotePosition.ABSTAIN,
    VotePosition.ABSENT,
    VotePosition.BARRED,
)

RAPPORTEUR_POSITIONS: frozenset[VotePosition] = frozenset(
    SUBSTANTIVE_POSITIONS + (VotePosition.FOLLOWS,)
)

COUNCIL_POSITIONS: frozenset[VotePosition] = frozenset(
    SUBSTANTIVE_POSITIONS + NON_SUBSTANTIVE_POSITIONS
)


@dataclass(frozen=True, eq=True)
class Ballot:
    """One vote cast by one voter in a judgment round.

    Attributes:
        voter_name: Name of the voter, matched against the roster.
        position: Position cast.
        follows_voter_name: Voter whose position is adopted. Required
            for FOLLOWS, forbidden otherwise.
    """

    voter_name: str
    position: VotePosition
    follows_voter_name: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate ballot invariants."""
        name = normalize_name(self.voter_name) if isinstance(self.voter_name, str) else ""
        if not name:
            raise InvalidBallotError("", "ballot has no voter name")
        object.__setattr__(self, "voter_name", name)

        if not isinstance(self.position, VotePosition):
            raise InvalidBallotError(name, f"unknown position {self.position!r}")

        target = self.follows_voter_name
        if self.position == VotePosition.FOLLOWS:
            target = normalize_name(target) if target else ""
            if not target:
                raise InvalidBallotError(name, "FOLLOWS ballot must name a voter to follow")
            object.__setattr__(self, "follows_voter_name", target)
        elif target is not None:
            raise InvalidBallotError(
                name, f"{self.position.value} ballot cannot name a voter to follow"
            )

    @classmethod
    def cast(cls, voter_name: str, position: VotePosition) -> Ballot:
        """Create a direct ballot."""
        return cls(voter_name=voter_name, position=position)

    @classmethod
    def following(cls, voter_name: str, follows_voter_name: str) -> Ballot:
        """Create a ballot that adopts another voter's position."""
        return cls(
            voter_name=voter_name,
            position=VotePosition.FOLLOWS,
            follows_voter_name=follows_voter_name,
        )

    @property
    def is_follows(self) -> bool:
        """Check if this ballot defers to another voter."""
        return self.position == VotePosition.FOLLOWS


@dataclass(frozen=True, eq=True)
class ResolvedBallot:
    """A ballot whose follow chain has been collapsed.

    Each follower keeps only its next hop and the voter whose direct
    ballot ended the chain, so a resolved set stays linear in size.
    Use :func:`follow_path` to rebuild the full walk.

    Attributes:
        voter_name: Name of the voter.
        position: Terminal position; never FOLLOWS.
        cast_position: Position actually cast (FOLLOWS for followers).
        follows_voter_name: Voter this ballot deferred to, None for
            direct ballots.
        terminal_voter_name: Voter whose direct ballot supplied the
            position, None for direct ballots.
    """

    voter_name: str
    position: VotePosition
    cast_position: VotePosition
    follows_voter_name: str | None = None
    terminal_voter_name: str | None = None

    def __post_init__(self) -> None:
        """Validate that no FOLLOWS survives resolution."""
        if self.position == VotePosition.FOLLOWS:
            raise InvalidBallotError(
                self.voter_name, "resolved ballot cannot remain FOLLOWS"
            )
        if (self.follows_voter_name is None) != (self.terminal_voter_name is None):
            raise InvalidBallotError(
                self.voter_name,
                "follows_voter_name and terminal_voter_name must be set together",
            )

    @classmethod
    def direct(cls, ballot: Ballot) -> ResolvedBallot:
        """Wrap a ballot that needs no resolution."""
        return cls(
            voter_name=ballot.voter_name,
            position=ballot.position,
            cast_position=ballot.position,
        )

    @property
    def is_substantive(self) -> bool:
        """Check if the resolved position counts toward the decision."""
        return self.position.is_substantive()

    @property
    def followed(self) -> bool:
        """Check if this position was adopted from another voter."""
        return self.cast_position == VotePosition.FOLLOWS

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization by the host."""
        return {
            "voter_name": self.voter_name,
            "position": self.position.value,
            "cast_position": self.cast_position.value,
            "follows_voter_name": self.follows_voter_name,
            "terminal_voter_name": self.terminal_voter_name,
        }


def follow_path(
    resolved_ballots: Sequence[ResolvedBallot], voter_name: str
) -> tuple[str, ...]:
    """Rebuild the names walked from ``voter_name`` to its terminal ballot.

    Args:
        resolved_ballots: One round's resolved rapporteur/reviewer ballots.
        voter_name: Voter whose walk is wanted.

    Returns:
        Names in walk order, ending with the terminal voter; empty for a
        direct ballot.

    Raises:
        KeyError: If ``voter_name`` or a hop is not among the ballots.
    """
    by_name = {b.voter_name: b for b in resolved_ballots}
    path: list[str] = []
    hop = by_name[voter_name].follows_voter_name
    while hop is not None:
        path.append(hop)
        hop = by_name[hop].follows_voter_name
    return tuple(path)
