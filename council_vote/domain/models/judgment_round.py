"""Judgment round aggregate.

A judgment round collects the ballots for one case in one session and
walks a fixed sequence of stages:

    COLLECTING_RAPPORTEUR_VOTES -> COLLECTING_COUNCIL_VOTES
        -> (TIE_BREAK_REQUIRED <-> TIE_BREAK_RESOLVED) -> REVIEWING
        -> CONFIRMED

The aggregate only knows which moves are legal and which ballots may
be recorded where. Guards that need a tally (completeness, ties) live
in JudgmentRoundService. CONFIRMED is terminal: a decided round never
changes, and voting again means starting the next round.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from uuid6 import uuid7

from council_vote.domain.errors.ballot import InvalidBallotError
from council_vote.domain.errors.judgment_round import (
    BallotsLockedError,
    InvalidStageTransitionError,
    RoundAlreadyConfirmedError,
    RoundNotConfirmedError,
)
from council_vote.domain.errors.roster import UnauthorizedBallotError
from council_vote.domain.models.ballot import Ballot
from council_vote.domain.models.evaluation import RoundEvaluation
from council_vote.domain.models.voter import Roster


class JudgmentStage(Enum):
    """Stage of a judgment round.

    Stages:
        COLLECTING_RAPPORTEUR_VOTES: Rapporteur/reviewer ballots
        COLLECTING_COUNCIL_VOTES: Council member ballots
        TIE_BREAK_REQUIRED: Tied; waiting for the presiding ballot
        TIE_BREAK_RESOLVED: Presiding ballot recorded
        REVIEWING: Result shown for confirmation
        CONFIRMED: Terminal - decision recorded
    """

    COLLECTING_RAPPORTEUR_VOTES = "COLLECTING_RAPPORTEUR_VOTES"
    COLLECTING_COUNCIL_VOTES = "COLLECTING_COUNCIL_VOTES"
    TIE_BREAK_REQUIRED = "TIE_BREAK_REQUIRED"
    TIE_BREAK_RESOLVED = "TIE_BREAK_RESOLVED"
    REVIEWING = "REVIEWING"
    CONFIRMED = "CONFIRMED"

    def is_terminal(self) -> bool:
        """Check if this is the CONFIRMED stage."""
        return self == JudgmentStage.CONFIRMED

    def allowed_next(self) -> frozenset[JudgmentStage]:
        """Get the stages reachable from this stage."""
        return STAGE_TRANSITION_MATRIX[self]


# Forward moves, the tie-break pair, and the wizard's "back" moves
STAGE_TRANSITION_MATRIX: dict[JudgmentStage, frozenset[JudgmentStage]] = {
    JudgmentStage.COLLECTING_RAPPORTEUR_VOTES: frozenset(
        {JudgmentStage.COLLECTING_COUNCIL_VOTES}
    ),
    JudgmentStage.COLLECTING_COUNCIL_VOTES: frozenset(
        {
            JudgmentStage.TIE_BREAK_REQUIRED,
            JudgmentStage.REVIEWING,
            JudgmentStage.COLLECTING_RAPPORTEUR_VOTES,
        }
    ),
    JudgmentStage.TIE_BREAK_REQUIRED: frozenset(
        {JudgmentStage.TIE_BREAK_RESOLVED, JudgmentStage.COLLECTING_COUNCIL_VOTES}
    ),
    JudgmentStage.TIE_BREAK_RESOLVED: frozenset(
        {JudgmentStage.TIE_BREAK_REQUIRED, JudgmentStage.REVIEWING}
    ),
    JudgmentStage.REVIEWING: frozenset(
        {JudgmentStage.CONFIRMED, JudgmentStage.COLLECTING_COUNCIL_VOTES}
    ),
    JudgmentStage.CONFIRMED: frozenset(),
}

# Stages in which a presiding ballot may be held
_PRESIDING_STAGES = frozenset(
    {
        JudgmentStage.TIE_BREAK_RESOLVED,
        JudgmentStage.REVIEWING,
        JudgmentStage.CONFIRMED,
    }
)

# Moving back to these stages discards the tie-break and evaluation
_COLLECTING_STAGES = frozenset(
    {
        JudgmentStage.COLLECTING_RAPPORTEUR_VOTES,
        JudgmentStage.COLLECTING_COUNCIL_VOTES,
    }
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class JudgmentRound:
    """One voting round on one case.

    Attributes:
        round_id: UUIDv7 unique identifier.
        roster: Closed set of eligible voters for the round.
        round_number: 1 for the first vote, incremented by next_round().
        stage: Current stage.
        rapporteur_ballots: Ballots of rapporteurs and reviewers.
        council_ballots: Ballots of council members.
        presiding_ballot: Tie-break ballot of the presiding member.
        evaluation: Last evaluation attached by the service.
        created_at: Round creation timestamp (UTC).
        confirmed_at: Confirmation timestamp (None until confirmed).
        version: Incremented on every change.
    """

    round_id: UUID
    roster: Roster
    round_number: int = field(default=1)
    stage: JudgmentStage = field(default=JudgmentStage.COLLECTING_RAPPORTEUR_VOTES)
    rapporteur_ballots: tuple[Ballot, ...] = field(default_factory=tuple)
    council_ballots: tuple[Ballot, ...] = field(default_factory=tuple)
    presiding_ballot: Ballot | None = field(default=None)
    evaluation: RoundEvaluation | None = field(default=None)
    created_at: datetime = field(default_factory=_utc_now)
    confirmed_at: datetime | None = field(default=None)
    version: int = field(default=1)

    def __post_init__(self) -> None:
        """Validate round invariants."""
        if self.round_number < 1:
            raise ValueError(f"round_number must be >= 1, got {self.round_number}")
        if self.presiding_ballot is not None and self.stage not in _PRESIDING_STAGES:
            raise ValueError(
                f"presiding_ballot cannot be held in stage {self.stage.value}"
            )
        if self.stage == JudgmentStage.CONFIRMED:
            if self.evaluation is None or not self.evaluation.is_decided:
                raise ValueError("CONFIRMED round must carry a decided evaluation")
            if self.confirmed_at is None:
                raise ValueError("CONFIRMED round must have confirmed_at")

    @classmethod
    def create(cls, roster: Roster, round_id: UUID | None = None) -> JudgmentRound:
        """Create a new round collecting rapporteur ballots.

        Args:
            roster: Eligible voters, with promotions already applied.
            round_id: Optional identifier (UUIDv7 generated if omitted).

        Returns:
            New JudgmentRound in COLLECTING_RAPPORTEUR_VOTES.
        """
        return cls(round_id=round_id or uuid7(), roster=roster)

    @property
    def is_confirmed(self) -> bool:
        """Check if the round is in its terminal stage."""
        return self.stage.is_terminal()

    def _ensure_mutable(self) -> None:
        if self.stage.is_terminal():
            raise RoundAlreadyConfirmedError(self.round_id)

    def _changed(self, **changes: object) -> JudgmentRound:
        return replace(self, version=self.version + 1, **changes)  # type: ignore[arg-type]

    def with_stage(
        self,
        new_stage: JudgmentStage,
        evaluation: RoundEvaluation | None = None,
    ) -> JudgmentRound:
        """Create new round moved to another stage.

        Moving back to a collecting stage drops the presiding ballot and
        the evaluation, since the ballots they were based on may change.

        Args:
            new_stage: Stage to move to.
            evaluation: Evaluation to attach (None clears it).

        Returns:
            New JudgmentRound in ``new_stage``.

        Raises:
            RoundAlreadyConfirmedError: If the round is confirmed.
            InvalidStageTransitionError: If the move is not allowed.
        """
        self._ensure_mutable()
        allowed = self.stage.allowed_next()
        if new_stage not in allowed:
            raise InvalidStageTransitionError(
                from_stage=self.stage, to_stage=new_stage, allowed=allowed
            )
        if new_stage == JudgmentStage.TIE_BREAK_RESOLVED:
            # only with_presiding_ballot() resolves a tie-break
            raise InvalidStageTransitionError(
                from_stage=self.stage, to_stage=new_stage, allowed=allowed
            )

        presiding = self.presiding_ballot
        if new_stage in _COLLECTING_STAGES or new_stage == JudgmentStage.TIE_BREAK_REQUIRED:
            presiding = None

        confirmed_at = _utc_now() if new_stage.is_terminal() else None
        return self._changed(
            stage=new_stage,
            presiding_ballot=presiding,
            evaluation=evaluation,
            confirmed_at=confirmed_at,
        )

    def with_rapporteur_ballots(self, ballots: list[Ballot] | tuple[Ballot, ...]) -> JudgmentRound:
        """Create new round with the rapporteur/reviewer ballots replaced.

        Raises:
            RoundAlreadyConfirmedError: If the round is confirmed.
            BallotsLockedError: If not collecting rapporteur ballots.
        """
        self._ensure_mutable()
        if self.stage != JudgmentStage.COLLECTING_RAPPORTEUR_VOTES:
            raise BallotsLockedError(self.stage, "rapporteur/reviewer")
        return self._changed(rapporteur_ballots=tuple(ballots), evaluation=None)

    def with_council_ballots(self, ballots: list[Ballot] | tuple[Ballot, ...]) -> JudgmentRound:
        """Create new round with the council member ballots replaced.

        Raises:
            RoundAlreadyConfirmedError: If the round is confirmed.
            BallotsLockedError: If not collecting council ballots.
        """
        self._ensure_mutable()
        if self.stage != JudgmentStage.COLLECTING_COUNCIL_VOTES:
            raise BallotsLockedError(self.stage, "council member")
        return self._changed(council_ballots=tuple(ballots), evaluation=None)

    def with_presiding_ballot(self, ballot: Ballot) -> JudgmentRound:
        """Record the presiding tie-break ballot.

        Recording it is the only way out of TIE_BREAK_REQUIRED.

        Args:
            ballot: Substantive ballot cast by the roster's presiding voter.

        Returns:
            New JudgmentRound in TIE_BREAK_RESOLVED.

        Raises:
            RoundAlreadyConfirmedError: If the round is confirmed.
            BallotsLockedError: If no tie-break is pending.
            UnauthorizedBallotError: If the ballot is not the presiding voter's.
            InvalidBallotError: If the ballot is not substantive.
        """
        self._ensure_mutable()
        if self.stage != JudgmentStage.TIE_BREAK_REQUIRED:
            raise BallotsLockedError(self.stage, "presiding")
        presiding = self.roster.presiding
        if presiding is None or not presiding.matches(None, ballot.voter_name):
            raise UnauthorizedBallotError(ballot.voter_name, "presiding")
        if not ballot.position.is_substantive():
            raise InvalidBallotError(
                ballot.voter_name,
                f"tie-break ballot must be substantive, got {ballot.position.value}",
            )
        stage = JudgmentStage.TIE_BREAK_RESOLVED
        return self._changed(stage=stage, presiding_ballot=ballot, evaluation=None)

    def without_presiding_ballot(self) -> JudgmentRound:
        """Withdraw the presiding ballot, returning to TIE_BREAK_REQUIRED."""
        return self.with_stage(JudgmentStage.TIE_BREAK_REQUIRED)

    def next_round(self) -> JudgmentRound:
        """Start a fresh round on the same roster.

        Only a confirmed round can be followed by another one; an open
        round is still the live vote.

        Returns:
            New JudgmentRound with a new id and round_number + 1.

        Raises:
            RoundNotConfirmedError: If this round is not CONFIRMED.
        """
        if not self.is_confirmed:
            raise RoundNotConfirmedError(self.round_id, self.stage)
        return JudgmentRound(
            round_id=uuid7(),
            roster=self.roster,
            round_number=self.round_number + 1,
        )
