"""Judgment round service implementation.

This module drives a JudgmentRound through its stages using the
engine's outputs as guards:

- Leaving rapporteur collection needs every rapporteur/reviewer
  ballot, and every follow chain must resolve
- Leaving council collection needs every council ballot; a tie sends
  the round to TIE_BREAK_REQUIRED instead of REVIEWING
- Only a recorded presiding ballot gets a tied round to REVIEWING
- CONFIRMED is terminal

Recoverable conditions (missing ballots, an open tie) come back as a
StageAdvance that names what blocks the round. Malformed input
(cycles, dangling references, foreign ballots) raises and is never
papered over.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from council_vote.application.ports.ballot_resolver import BallotResolverProtocol
from council_vote.application.ports.vote_tally import VoteTallyProtocol
from council_vote.application.services.ballot_resolver_service import (
    BallotResolverService,
)
from council_vote.application.services.roster_reconciliation_service import (
    RosterReconciliationService,
)
from council_vote.application.services.vote_tally_service import VoteTallyService
from council_vote.domain.errors.judgment_round import (
    InvalidStageTransitionError,
    RoundAlreadyConfirmedError,
)
from council_vote.domain.models.ballot import Ballot
from council_vote.domain.models.evaluation import EvaluationStatus, RoundEvaluation
from council_vote.domain.models.judgment_round import JudgmentRound, JudgmentStage
from council_vote.domain.models.voter import Roster

logger = structlog.get_logger(__name__)


class RoundBlock(Enum):
    """Reason a round cannot advance yet.

    Blocks:
        INCOMPLETE_ROSTER: Eligible voters still owe a ballot
        UNRESOLVED_TIE: Tied; the presiding ballot has not been recorded
        PRESIDING_VOTER_UNAVAILABLE: Tied, and the roster has no
            presiding voter to break the tie
        NO_SUBSTANTIVE_VOTES: Nobody cast a substantive vote
    """

    INCOMPLETE_ROSTER = "INCOMPLETE_ROSTER"
    UNRESOLVED_TIE = "UNRESOLVED_TIE"
    PRESIDING_VOTER_UNAVAILABLE = "PRESIDING_VOTER_UNAVAILABLE"
    NO_SUBSTANTIVE_VOTES = "NO_SUBSTANTIVE_VOTES"


@dataclass(frozen=True, eq=True)
class StageAdvance:
    """Result of asking a round to move to its next stage.

    Attributes:
        round: The round after the attempt (unchanged when blocked).
        advanced: True if the stage changed.
        blocked_by: Why the round stayed put.
        missing_voters: Voters whose ballot is needed to unblock.
    """

    round: JudgmentRound
    advanced: bool
    blocked_by: RoundBlock | None = field(default=None)
    missing_voters: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def moved(cls, judgment_round: JudgmentRound) -> StageAdvance:
        """Create a result for a round that advanced."""
        return cls(round=judgment_round, advanced=True)

    @classmethod
    def blocked(
        cls,
        judgment_round: JudgmentRound,
        block: RoundBlock,
        missing_voters: tuple[str, ...] = (),
    ) -> StageAdvance:
        """Create a result for a round that must wait."""
        return cls(
            round=judgment_round,
            advanced=False,
            blocked_by=block,
            missing_voters=missing_voters,
        )


# Stage reached by the wizard's "back" action
_BACK_TARGETS: dict[JudgmentStage, JudgmentStage] = {
    JudgmentStage.COLLECTING_COUNCIL_VOTES: JudgmentStage.COLLECTING_RAPPORTEUR_VOTES,
    JudgmentStage.TIE_BREAK_REQUIRED: JudgmentStage.COLLECTING_COUNCIL_VOTES,
    JudgmentStage.TIE_BREAK_RESOLVED: JudgmentStage.TIE_BREAK_REQUIRED,
    JudgmentStage.REVIEWING: JudgmentStage.COLLECTING_COUNCIL_VOTES,
}


class JudgmentRoundService:
    """Drives judgment rounds from ballot collection to confirmation.

    The service holds no per-round state; every method takes a round
    and returns a new one, so independent rounds can be processed
    concurrently.
    """

    def __init__(
        self,
        tally_service: VoteTallyProtocol | None = None,
        reconciliation_service: RosterReconciliationService | None = None,
        resolver: BallotResolverProtocol | None = None,
    ) -> None:
        """Initialize the judgment round service.

        Args:
            tally_service: Tally/decision engine (defaults to VoteTallyService).
            reconciliation_service: Roster checks (defaults to
                RosterReconciliationService with default config).
            resolver: Follow-chain resolver used by the rapporteur guard.
        """
        self._resolver = resolver or BallotResolverService()
        self._tally = tally_service or VoteTallyService(resolver=self._resolver)
        self._reconciliation = reconciliation_service or RosterReconciliationService()
        self._log = logger.bind(component="judgment_round")

    def start_round(self, roster: Roster) -> JudgmentRound:
        """Open a round on a roster.

        Args:
            roster: Eligible voters, promotions already applied.

        Returns:
            New round collecting rapporteur/reviewer ballots.

        Raises:
            InvalidRosterError: If the roster breaks the configured limits.
        """
        self._reconciliation.validate_roster(roster)
        judgment_round = JudgmentRound.create(roster)
        self._log.info(
            "round_started",
            round_id=str(judgment_round.round_id),
            roster_size=roster.size,
            has_presiding=roster.has_presiding,
        )
        return judgment_round

    def record_rapporteur_ballots(
        self, judgment_round: JudgmentRound, ballots: Sequence[Ballot]
    ) -> JudgmentRound:
        """Record rapporteur/reviewer ballots (a partial set is accepted).

        Raises:
            UnauthorizedBallotError, DuplicateBallotError, InvalidBallotError:
                If a ballot breaks the roster rules.
            BallotsLockedError: If the round is past rapporteur collection.
        """
        self._reconciliation.check_rapporteur_ballots(judgment_round.roster, ballots)
        return judgment_round.with_rapporteur_ballots(tuple(ballots))

    def record_council_ballots(
        self, judgment_round: JudgmentRound, ballots: Sequence[Ballot]
    ) -> JudgmentRound:
        """Record council member ballots (a partial set is accepted).

        Raises:
            UnauthorizedBallotError, DuplicateBallotError, InvalidBallotError:
                If a ballot breaks the roster rules.
            BallotsLockedError: If the round is not collecting council ballots.
        """
        self._reconciliation.check_council_ballots(judgment_round.roster, ballots)
        return judgment_round.with_council_ballots(tuple(ballots))

    def record_presiding_ballot(
        self, judgment_round: JudgmentRound, ballot: Ballot
    ) -> JudgmentRound:
        """Record the presiding tie-break ballot.

        Returns:
            Round in TIE_BREAK_RESOLVED.

        Raises:
            BallotsLockedError: If no tie-break is pending.
            UnauthorizedBallotError: If the ballot is not the presiding voter's.
            InvalidBallotError: If the ballot is not substantive.
            InvalidTieBreakError: If the ballot backs a position outside the tie.
        """
        updated = judgment_round.with_presiding_ballot(ballot)
        # Fail now rather than at review if the ballot cannot break the tie
        self._evaluate_ballots(updated)
        self._log.info(
            "presiding_ballot_recorded",
            round_id=str(updated.round_id),
            position=ballot.position,
        )
        return updated

    def withdraw_presiding_ballot(self, judgment_round: JudgmentRound) -> JudgmentRound:
        """Withdraw the presiding ballot, returning to TIE_BREAK_REQUIRED."""
        return judgment_round.without_presiding_ballot()

    def evaluate(self, judgment_round: JudgmentRound) -> RoundEvaluation:
        """Evaluate a round's current ballots.

        Args:
            judgment_round: Round to evaluate.

        Returns:
            RoundEvaluation; INCOMPLETE_ROSTER when ballots are missing.

        Raises:
            CycleDetectedError, UnknownReferenceError: If follow chains are
                malformed.
        """
        reconciliation = self._reconciliation.reconcile(
            judgment_round.roster,
            judgment_round.rapporteur_ballots,
            judgment_round.council_ballots,
        )
        if not reconciliation.is_complete:
            return RoundEvaluation.incomplete(reconciliation.missing_voters)
        return self._evaluate_ballots(judgment_round)

    def _evaluate_ballots(self, judgment_round: JudgmentRound) -> RoundEvaluation:
        with structlog.contextvars.bound_contextvars(
            round_id=str(judgment_round.round_id)
        ):
            return self._tally.evaluate(
                judgment_round.rapporteur_ballots,
                judgment_round.council_ballots,
                judgment_round.presiding_ballot,
            )

    def advance(self, judgment_round: JudgmentRound) -> StageAdvance:
        """Move a round to its next stage if its guard allows it.

        Args:
            judgment_round: Round to advance.

        Returns:
            StageAdvance with the new round, or the reason it is blocked.

        Raises:
            RoundAlreadyConfirmedError: If the round is confirmed.
            CycleDetectedError, UnknownReferenceError: If follow chains are
                malformed.
        """
        stage = judgment_round.stage
        log = self._log.bind(round_id=str(judgment_round.round_id), stage=stage)

        if stage == JudgmentStage.CONFIRMED:
            raise RoundAlreadyConfirmedError(judgment_round.round_id)

        if stage == JudgmentStage.COLLECTING_RAPPORTEUR_VOTES:
            result = self._advance_from_rapporteurs(judgment_round)
        elif stage == JudgmentStage.COLLECTING_COUNCIL_VOTES:
            result = self._advance_from_council(judgment_round)
        elif stage == JudgmentStage.TIE_BREAK_REQUIRED:
            presiding = judgment_round.roster.presiding
            missing = (presiding.name,) if presiding is not None else ()
            result = StageAdvance.blocked(judgment_round, RoundBlock.UNRESOLVED_TIE, missing)
        elif stage == JudgmentStage.TIE_BREAK_RESOLVED:
            evaluation = self._evaluate_ballots(judgment_round)
            result = StageAdvance.moved(
                judgment_round.with_stage(JudgmentStage.REVIEWING, evaluation)
            )
        else:
            result = StageAdvance.moved(self.confirm(judgment_round))

        if result.advanced:
            log.info("round_advanced", to_stage=result.round.stage)
        else:
            log.info(
                "round_blocked",
                blocked_by=result.blocked_by,
                missing_count=len(result.missing_voters),
            )
        return result

    def _advance_from_rapporteurs(self, judgment_round: JudgmentRound) -> StageAdvance:
        roster = judgment_round.roster
        self._reconciliation.validate_roster(roster)
        reconciliation = self._reconciliation.check_rapporteur_ballots(
            roster, judgment_round.rapporteur_ballots
        )
        if not reconciliation.is_complete:
            return StageAdvance.blocked(
                judgment_round,
                RoundBlock.INCOMPLETE_ROSTER,
                reconciliation.missing_voters,
            )
        # Cycles and dangling references propagate to the caller
        self._resolver.resolve(judgment_round.rapporteur_ballots)
        return StageAdvance.moved(
            judgment_round.with_stage(JudgmentStage.COLLECTING_COUNCIL_VOTES)
        )

    def _advance_from_council(self, judgment_round: JudgmentRound) -> StageAdvance:
        evaluation = self.evaluate(judgment_round)

        if evaluation.status == EvaluationStatus.INCOMPLETE_ROSTER:
            return StageAdvance.blocked(
                judgment_round, RoundBlock.INCOMPLETE_ROSTER, evaluation.missing_voters
            )
        if evaluation.status == EvaluationStatus.NO_SUBSTANTIVE_VOTES:
            return StageAdvance.blocked(judgment_round, RoundBlock.NO_SUBSTANTIVE_VOTES)
        if evaluation.status == EvaluationStatus.TIE_BREAK_REQUIRED:
            if not judgment_round.roster.has_presiding:
                return StageAdvance.blocked(
                    judgment_round, RoundBlock.PRESIDING_VOTER_UNAVAILABLE
                )
            return StageAdvance.moved(
                judgment_round.with_stage(JudgmentStage.TIE_BREAK_REQUIRED, evaluation)
            )
        return StageAdvance.moved(
            judgment_round.with_stage(JudgmentStage.REVIEWING, evaluation)
        )

    def go_back(self, judgment_round: JudgmentRound) -> JudgmentRound:
        """Return to the previous collection step.

        Going back discards the evaluation. Returning to a collecting
        stage or to TIE_BREAK_REQUIRED also discards the presiding ballot.

        Raises:
            RoundAlreadyConfirmedError: If the round is confirmed.
            InvalidStageTransitionError: If the round is at its first stage.
        """
        if judgment_round.is_confirmed:
            raise RoundAlreadyConfirmedError(judgment_round.round_id)
        target = _BACK_TARGETS.get(judgment_round.stage)
        if target is None:
            raise InvalidStageTransitionError(
                from_stage=judgment_round.stage,
                to_stage=judgment_round.stage,
                allowed=judgment_round.stage.allowed_next(),
            )
        return judgment_round.with_stage(target)

    def confirm(self, judgment_round: JudgmentRound) -> JudgmentRound:
        """Confirm the decision of a round under review.

        Args:
            judgment_round: Round in REVIEWING.

        Returns:
            Immutable CONFIRMED round.

        Raises:
            RoundAlreadyConfirmedError: If the round is already confirmed.
            InvalidStageTransitionError: If the round is not in REVIEWING.
        """
        evaluation = judgment_round.evaluation
        if evaluation is None and judgment_round.stage == JudgmentStage.REVIEWING:
            evaluation = self._evaluate_ballots(judgment_round)
        confirmed = judgment_round.with_stage(JudgmentStage.CONFIRMED, evaluation)
        self._log.info(
            "round_confirmed",
            round_id=str(confirmed.round_id),
            decision=confirmed.evaluation.decision if confirmed.evaluation else None,
        )
        return confirmed
