"""Ballot reconciliation result model.

Reconciliation checks ballots against the closed roster of a round.
Missing ballots are a recoverable condition and are reported through
this result; ballots that break the roster rules raise instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ReconciliationStatus(Enum):
    """Status of ballot reconciliation.

    Statuses:
        COMPLETE: Every eligible voter in the checked groups has a ballot
        INCOMPLETE: Some eligible voters have not voted yet
    """

    COMPLETE = "COMPLETE"
    INCOMPLETE = "INCOMPLETE"


@dataclass(frozen=True, eq=True)
class BallotReconciliation:
    """Result of checking ballots against a roster.

    Attributes:
        status: COMPLETE or INCOMPLETE.
        missing_voters: Names owing a ballot, in roster order.
    """

    status: ReconciliationStatus
    missing_voters: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate status consistency."""
        if (self.status == ReconciliationStatus.INCOMPLETE) != bool(self.missing_voters):
            raise ValueError("missing_voters must be set exactly when INCOMPLETE")

    @classmethod
    def complete(cls) -> BallotReconciliation:
        """Create a result for a fully voted roster."""
        return cls(status=ReconciliationStatus.COMPLETE)

    @classmethod
    def incomplete(cls, missing_voters: tuple[str, ...]) -> BallotReconciliation:
        """Create a result listing voters who still owe a ballot.

        Args:
            missing_voters: Names without a ballot.

        Returns:
            BallotReconciliation with INCOMPLETE status.
        """
        return cls(status=ReconciliationStatus.INCOMPLETE, missing_voters=missing_voters)

    @property
    def is_complete(self) -> bool:
        """Check if no ballot is missing."""
        return self.status == ReconciliationStatus.COMPLETE

    def merge(self, other: BallotReconciliation) -> BallotReconciliation:
        """Combine the results of two ballot groups."""
        missing = self.missing_voters + other.missing_voters
        if missing:
            return BallotReconciliation.incomplete(missing)
        return BallotReconciliation.complete()
