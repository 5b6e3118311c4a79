"""Decision and round evaluation domain models.

TallyDecision is the result of ranking one tally. RoundEvaluation is the
full answer the engine hands back to the hosting workflow for a round:
resolved ballots, counts, the tie flag and, when reachable, the
decision. Both are recomputed from ballots and never edited in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from council_vote.domain.models.ballot import (
    Ballot,
    ResolvedBallot,
    VotePosition,
    follow_path,
)
from council_vote.domain.models.tally import Tally

# Bumped whenever resolution or tie rules change, so stored results can
# be re-derived with the rules that produced them
VOTE_ALGORITHM_VERSION = 1


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class TallyDecision:
    """Outcome of ranking a tally.

    Attributes:
        tally: The tally that was ranked (with any tie-break folded in).
        is_tie: True when the top substantive counts were equal and
            nonzero before any tie-break.
        decision: Position with the strict plurality, None while a tie
            is unbroken or when no substantive vote exists.
        tied_positions: Positions sharing first place, canonical order.
        tie_broken_by: Position of the presiding ballot, if one was folded.
    """

    tally: Tally
    is_tie: bool
    decision: VotePosition | None = field(default=None)
    tied_positions: tuple[VotePosition, ...] = field(default_factory=tuple)
    tie_broken_by: VotePosition | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate decision consistency."""
        if self.decision is not None and not self.decision.is_substantive():
            raise ValueError(
                f"decision must be substantive, got {self.decision.value}"
            )
        if self.is_tie != bool(self.tied_positions):
            raise ValueError("tied_positions must be set exactly when is_tie is true")
        if self.is_tie and self.tie_broken_by is None and self.decision is not None:
            raise ValueError("a tie cannot be decided without a presiding ballot")
        if self.tie_broken_by is not None and not self.is_tie:
            raise ValueError("tie_broken_by requires a tie")

    @property
    def requires_tie_break(self) -> bool:
        """Check if a presiding ballot is still needed."""
        return self.is_tie and self.tie_broken_by is None

    @property
    def is_resolved(self) -> bool:
        """Check if a decision was reached."""
        return self.decision is not None


class EvaluationStatus(Enum):
    """Status of a round evaluation.

    Statuses:
        DECIDED: A binding decision exists
        TIE_BREAK_REQUIRED: Tied, waiting for the presiding ballot
        INCOMPLETE_ROSTER: Some eligible voters have no ballot yet
        NO_SUBSTANTIVE_VOTES: Every ballot is an abstention, absence
            or impediment, so there is nothing to decide on
    """

    DECIDED = "DECIDED"
    TIE_BREAK_REQUIRED = "TIE_BREAK_REQUIRED"
    INCOMPLETE_ROSTER = "INCOMPLETE_ROSTER"
    NO_SUBSTANTIVE_VOTES = "NO_SUBSTANTIVE_VOTES"


@dataclass(frozen=True, eq=True)
class RoundEvaluation:
    """Everything the engine computed for one round.

    Attributes:
        status: What the hosting workflow must do next.
        resolved_ballots: Rapporteur/reviewer ballots (resolved) then
            council ballots, in input order.
        tally: Final counts, including the presiding ballot if applied.
        initial_tally: Counts before any tie-break.
        is_tie: True if the round was tied before any tie-break.
        tied_positions: Positions that shared first place.
        decision: The binding position, when one exists.
        presiding_ballot_applied: True if a tie-break ballot was folded.
        missing_voters: Roster names still owing a ballot.
        voters_by_position: Voter names grouped by resolved position.
        algorithm_version: Rules version that produced this result.
        evaluated_at: When the evaluation ran.
    """

    status: EvaluationStatus
    resolved_ballots: tuple[ResolvedBallot, ...] = field(default_factory=tuple)
    tally: Tally = field(default_factory=Tally)
    initial_tally: Tally = field(default_factory=Tally)
    is_tie: bool = field(default=False)
    tied_positions: tuple[VotePosition, ...] = field(default_factory=tuple)
    decision: VotePosition | None = field(default=None)
    presiding_ballot_applied: bool = field(default=False)
    missing_voters: tuple[str, ...] = field(default_factory=tuple)
    voters_by_position: dict[VotePosition, tuple[str, ...]] = field(
        default_factory=dict, compare=False
    )
    algorithm_version: int = field(default=VOTE_ALGORITHM_VERSION)
    evaluated_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        """Validate status consistency."""
        if self.status == EvaluationStatus.DECIDED and self.decision is None:
            raise ValueError("DECIDED evaluation must carry a decision")
        if self.status == EvaluationStatus.TIE_BREAK_REQUIRED:
            if not self.is_tie or self.decision is not None:
                raise ValueError(
                    "TIE_BREAK_REQUIRED evaluation must be tied and undecided"
                )
        if self.status == EvaluationStatus.INCOMPLETE_ROSTER and not self.missing_voters:
            raise ValueError("INCOMPLETE_ROSTER evaluation must list missing voters")
        if self.presiding_ballot_applied and not self.is_tie:
            raise ValueError("A presiding ballot is only applied to a tied round")

    @classmethod
    def incomplete(cls, missing_voters: tuple[str, ...]) -> RoundEvaluation:
        """Create an evaluation for a round still missing ballots.

        Args:
            missing_voters: Names of voters without a ballot.

        Returns:
            RoundEvaluation with INCOMPLETE_ROSTER status.
        """
        return cls(
            status=EvaluationStatus.INCOMPLETE_ROSTER,
            missing_voters=missing_voters,
        )

    @classmethod
    def from_decision(
        cls,
        resolved_ballots: tuple[ResolvedBallot, ...],
        initial: TallyDecision,
        final: TallyDecision,
        presiding_ballot: Ballot | None = None,
    ) -> RoundEvaluation:
        """Create an evaluation from the pre- and post-tie-break decisions.

        Args:
            resolved_ballots: All resolved ballots of the round.
            initial: Decision on the tally before any tie-break.
            final: Decision after folding the presiding ballot (the same
                object as ``initial`` when none was applied).
            presiding_ballot: The folded tie-break ballot, if any.

        Returns:
            RoundEvaluation with the status implied by the decision.
        """
        if final.decision is not None:
            status = EvaluationStatus.DECIDED
        elif final.requires_tie_break:
            status = EvaluationStatus.TIE_BREAK_REQUIRED
        else:
            status = EvaluationStatus.NO_SUBSTANTIVE_VOTES

        grouped: dict[VotePosition, list[str]] = {}
        for ballot in resolved_ballots:
            grouped.setdefault(ballot.position, []).append(ballot.voter_name)
        applied = final.tie_broken_by is not None
        if applied and presiding_ballot is not None:
            grouped.setdefault(presiding_ballot.position, []).append(
                presiding_ballot.voter_name
            )

        return cls(
            status=status,
            resolved_ballots=resolved_ballots,
            tally=final.tally,
            initial_tally=initial.tally,
            is_tie=initial.is_tie,
            tied_positions=initial.tied_positions,
            decision=final.decision,
            presiding_ballot_applied=applied,
            voters_by_position={k: tuple(v) for k, v in grouped.items()},
        )

    @property
    def is_decided(self) -> bool:
        """Check if the round has a binding decision."""
        return self.status == EvaluationStatus.DECIDED

    @property
    def requires_tie_break(self) -> bool:
        """Check if the presiding ballot must be collected."""
        return self.status == EvaluationStatus.TIE_BREAK_REQUIRED

    def follow_path(self, voter_name: str) -> tuple[str, ...]:
        """Names walked from a rapporteur or reviewer to their terminal ballot."""
        return follow_path(self.resolved_ballots, voter_name)

    def to_dict(self) -> dict:
        """Convert to dictionary for the host to store or display.

        Returns:
            Dictionary representation with enum values as strings.
        """
        return {
            "status": self.status.value,
            "resolved_ballots": [b.to_dict() for b in self.resolved_ballots],
            "tally": self.tally.to_dict(),
            "initial_tally": self.initial_tally.to_dict(),
            "is_tie": self.is_tie,
            "tied_positions": [p.value for p in self.tied_positions],
            "decision": self.decision.value if self.decision else None,
            "presiding_ballot_applied": self.presiding_ballot_applied,
            "missing_voters": list(self.missing_voters),
            "voters_by_position": {
                position.value: list(self.voters_by_position[position])
                for position in VotePosition
                if position in self.voters_by_position
            },
            "algorithm_version": self.algorithm_version,
            "evaluated_at": self.evaluated_at.isoformat(),
        }
