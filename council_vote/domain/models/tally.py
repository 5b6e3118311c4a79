"""Tally domain model.

Counts of every position across the resolved ballots of a round.
Only APPROVED, DENIED and PARTIAL take part in the plurality; the
ABSTAIN, ABSENT and BARRED counters exist for reporting.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from council_vote.domain.models.ballot import (
    SUBSTANTIVE_POSITIONS,
    VotePosition,
)

_COUNTER_FIELDS: dict[VotePosition, str] = {
    VotePosition.APPROVED: "approved",
    VotePosition.DENIED: "denied",
    VotePosition.PARTIAL: "partial",
    VotePosition.ABSTAIN: "abstain",
    VotePosition.ABSENT: "absent",
    VotePosition.BARRED: "barred",
}


@dataclass(frozen=True, eq=True)
class Tally:
    """Vote counts for one round.

    Attributes:
        approved: Substantive APPROVED votes.
        denied: Substantive DENIED votes.
        partial: Substantive PARTIAL votes.
        abstain: Council abstentions (reporting only).
        absent: Council absences (reporting only).
        barred: Council impediments (reporting only).
    """

    approved: int = field(default=0)
    denied: int = field(default=0)
    partial: int = field(default=0)
    abstain: int = field(default=0)
    absent: int = field(default=0)
    barred: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate that counts are non-negative."""
        for name in _COUNTER_FIELDS.values():
            if getattr(self, name) < 0:
                raise ValueError(f"Tally.{name} must be >= 0, got {getattr(self, name)}")

    @classmethod
    def from_positions(cls, positions: Iterable[VotePosition]) -> Tally:
        """Count an iterable of resolved positions.

        Args:
            positions: Resolved positions (FOLLOWS is not countable).

        Returns:
            Tally of the positions. Order of the input does not matter.

        Raises:
            ValueError: If a FOLLOWS position is passed.
        """
        counts = dict.fromkeys(_COUNTER_FIELDS.values(), 0)
        for position in positions:
            name = _COUNTER_FIELDS.get(position)
            if name is None:
                raise ValueError(f"Cannot count unresolved position {position.value}")
            counts[name] += 1
        return cls(**counts)

    def count(self, position: VotePosition) -> int:
        """Get the count for a position."""
        name = _COUNTER_FIELDS.get(position)
        if name is None:
            raise ValueError(f"Position {position.value} has no counter")
        return int(getattr(self, name))

    def with_vote(self, position: VotePosition) -> Tally:
        """Return a new tally with one more vote for a position."""
        name = _COUNTER_FIELDS.get(position)
        if name is None:
            raise ValueError(f"Cannot count unresolved position {position.value}")
        counts = self.to_dict()
        counts[name] += 1
        return Tally(**counts)

    @property
    def total_substantive(self) -> int:
        """Total of votes that decide the case."""
        return self.approved + self.denied + self.partial

    @property
    def total_non_substantive(self) -> int:
        """Total of recorded abstentions, absences and impediments."""
        return self.abstain + self.absent + self.barred

    def ranked(self) -> list[tuple[VotePosition, int]]:
        """Rank substantive positions by count, highest first.

        Equal counts keep canonical order (APPROVED, DENIED, PARTIAL),
        so the ranking is deterministic.
        """
        return sorted(
            ((position, self.count(position)) for position in SUBSTANTIVE_POSITIONS),
            key=lambda item: -item[1],
        )

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for serialization."""
        return {name: int(getattr(self, name)) for name in _COUNTER_FIELDS.values()}
