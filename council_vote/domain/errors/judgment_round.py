"""Judgment round domain errors.

Errors raised by the judgment-round state machine and by the presiding
tie-break rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from council_vote.domain.exceptions import VoteEngineError

if TYPE_CHECKING:
    from council_vote.domain.models.ballot import VotePosition
    from council_vote.domain.models.judgment_round import JudgmentStage


class JudgmentRoundError(VoteEngineError):
    """Base class for judgment-round errors."""

    pass


class InvalidStageTransitionError(JudgmentRoundError):
    """Raised when a stage move is not in the transition matrix.

    Attributes:
        from_stage: Current stage.
        to_stage: Attempted target stage.
        allowed: Stages reachable from the current stage.
    """

    def __init__(
        self,
        from_stage: JudgmentStage,
        to_stage: JudgmentStage,
        allowed: frozenset[JudgmentStage],
    ) -> None:
        """Initialize InvalidStageTransitionError.

        Args:
            from_stage: Current stage.
            to_stage: Attempted target stage.
            allowed: Stages reachable from the current stage.
        """
        self.from_stage = from_stage
        self.to_stage = to_stage
        self.allowed = allowed

        allowed_str = ", ".join(sorted(s.value for s in allowed)) or "None (terminal)"
        super().__init__(
            f"Invalid stage transition from {from_stage.value} to {to_stage.value}. "
            f"Allowed next stages: {allowed_str}"
        )


class RoundAlreadyConfirmedError(JudgmentRoundError):
    """Raised when modifying a confirmed round.

    A confirmed decision is immutable. Re-voting starts a new round.

    Attributes:
        round_id: ID of the confirmed round.
    """

    def __init__(self, round_id: UUID) -> None:
        """Initialize RoundAlreadyConfirmedError.

        Args:
            round_id: ID of the confirmed round.
        """
        self.round_id = round_id
        super().__init__(
            f"Round {round_id} is confirmed and can no longer change; "
            "start a new round to vote again"
        )


class RoundNotConfirmedError(JudgmentRoundError):
    """Raised when a new round is requested before the current one is confirmed.

    Attributes:
        round_id: ID of the open round.
        stage: Stage the open round is in.
    """

    def __init__(self, round_id: UUID, stage: JudgmentStage) -> None:
        self.round_id = round_id
        self.stage = stage
        super().__init__(
            f"Round {round_id} is still in {stage.value}; confirm it before "
            "starting the next round"
        )


class BallotsLockedError(JudgmentRoundError):
    """Raised when ballots are recorded outside their collection stage.

    Attributes:
        stage: Current stage of the round.
        ballot_group: The ballot group the caller tried to record.
    """

    def __init__(self, stage: JudgmentStage, ballot_group: str) -> None:
        """Initialize BallotsLockedError.

        Args:
            stage: Current stage of the round.
            ballot_group: The ballot group the caller tried to record.
        """
        self.stage = stage
        self.ballot_group = ballot_group
        super().__init__(
            f"Cannot record {ballot_group} ballots while round is in {stage.value}"
        )


class TieBreakNotRequiredError(JudgmentRoundError):
    """Raised when a presiding ballot is supplied for an untied tally.

    The presiding member votes only to break a tie.
    """

    def __init__(self) -> None:
        """Initialize TieBreakNotRequiredError."""
        super().__init__(
            "Presiding ballot supplied but the substantive tally is not tied"
        )


class InvalidTieBreakError(JudgmentRoundError):
    """Raised when a presiding ballot cannot break the current tie.

    The deciding ballot must be substantive and must back one of the
    tied positions, otherwise the tie would stand.

    Attributes:
        position: Position on the presiding ballot.
        tied_positions: Positions currently tied for first place.
    """

    def __init__(
        self,
        position: VotePosition,
        tied_positions: tuple[VotePosition, ...],
    ) -> None:
        """Initialize InvalidTieBreakError.

        Args:
            position: Position on the presiding ballot.
            tied_positions: Positions currently tied for first place.
        """
        self.position = position
        self.tied_positions = tied_positions
        tied = ", ".join(p.value for p in tied_positions)
        super().__init__(
            f"Presiding ballot {position.value} cannot break the tie between {tied}"
        )
