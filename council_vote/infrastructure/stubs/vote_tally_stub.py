"""Vote tally stub for testing.

This module provides a configurable stub implementation of the
VoteTallyProtocol for exercising JudgmentRoundService guards without
building ballot sets that produce a given outcome.

WARNING: This stub is NOT for production use.
Production implementation is in
council_vote/application/services/vote_tally_service.py.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from council_vote.application.ports.vote_tally import VoteTallyProtocol
from council_vote.application.services.vote_tally_service import VoteTallyService
from council_vote.domain.models.ballot import Ballot, ResolvedBallot, VotePosition
from council_vote.domain.models.evaluation import (
    EvaluationStatus,
    RoundEvaluation,
    TallyDecision,
)
from council_vote.domain.models.tally import Tally


class VoteTallyOperation(Enum):
    """Operations tracked by the stub."""

    TALLY = "tally"
    DECIDE = "decide"
    APPLY_TIE_BREAK = "apply_tie_break"
    EVALUATE = "evaluate"


@dataclass
class TallyCall:
    """Record of a call to the stub."""

    operation: VoteTallyOperation
    ballot_count: int = 0
    presiding_ballot: Ballot | None = None


class VoteTallyStub(VoteTallyProtocol):
    """Configurable stub for VoteTallyProtocol.

    Modes:
    - default: Delegates to the real VoteTallyService
    - force_decision: evaluate() always reports the given decision
    - force_tie: evaluate() reports a tie until a presiding ballot is
      supplied, then decides for that ballot's position

    Usage:
        stub = VoteTallyStub.force_tie()
        service = JudgmentRoundService(tally_service=stub)
        ...
        assert stub.calls[-1].operation == VoteTallyOperation.EVALUATE
    """

    def __init__(self) -> None:
        """Initialize stub in default mode."""
        self._calls: list[TallyCall] = []
        self._delegate = VoteTallyService()
        self._forced_decision: VotePosition | None = None
        self._forced_tie: tuple[VotePosition, ...] = ()

    @classmethod
    def force_decision(
        cls, position: VotePosition = VotePosition.APPROVED
    ) -> VoteTallyStub:
        """Create stub whose evaluations are always decided for ``position``."""
        stub = cls()
        stub._forced_decision = position
        return stub

    @classmethod
    def force_tie(
        cls,
        tied_positions: tuple[VotePosition, ...] = (
            VotePosition.APPROVED,
            VotePosition.DENIED,
        ),
    ) -> VoteTallyStub:
        """Create stub whose evaluations are tied between ``tied_positions``.

        Args:
            tied_positions: At least two substantive positions.

        Returns:
            Configured stub instance.
        """
        stub = cls()
        stub._forced_tie = tied_positions
        return stub

    @property
    def calls(self) -> list[TallyCall]:
        """Get list of calls made to the stub."""
        return self._calls.copy()

    def reset(self) -> None:
        """Reset call history."""
        self._calls.clear()

    def tally(
        self,
        resolved_rapporteur_ballots: Sequence[ResolvedBallot],
        council_ballots: Sequence[Ballot | ResolvedBallot],
    ) -> Tally:
        """Count ballots with the real tally logic."""
        self._calls.append(
            TallyCall(
                operation=VoteTallyOperation.TALLY,
                ballot_count=len(resolved_rapporteur_ballots) + len(council_ballots),
            )
        )
        return self._delegate.tally(resolved_rapporteur_ballots, council_ballots)

    def decide(self, tally: Tally) -> TallyDecision:
        """Rank a tally with the real decision logic."""
        self._calls.append(TallyCall(operation=VoteTallyOperation.DECIDE))
        return self._delegate.decide(tally)

    def apply_tie_break(
        self, decision: TallyDecision, presiding_ballot: Ballot
    ) -> TallyDecision:
        """Fold a tie-break with the real logic."""
        self._calls.append(
            TallyCall(
                operation=VoteTallyOperation.APPLY_TIE_BREAK,
                presiding_ballot=presiding_ballot,
            )
        )
        return self._delegate.apply_tie_break(decision, presiding_ballot)

    def evaluate(
        self,
        rapporteur_ballots: Sequence[Ballot],
        council_ballots: Sequence[Ballot],
        presiding_ballot: Ballot | None = None,
    ) -> RoundEvaluation:
        """Evaluate a round - stub implementation.

        Returns:
            RoundEvaluation based on stub configuration.
        """
        self._calls.append(
            TallyCall(
                operation=VoteTallyOperation.EVALUATE,
                ballot_count=len(rapporteur_ballots) + len(council_ballots),
                presiding_ballot=presiding_ballot,
            )
        )

        if self._forced_decision is not None:
            tally = Tally().with_vote(self._forced_decision)
            return RoundEvaluation(
                status=EvaluationStatus.DECIDED,
                tally=tally,
                initial_tally=tally,
                decision=self._forced_decision,
            )

        if self._forced_tie:
            initial = Tally.from_positions(self._forced_tie)
            if presiding_ballot is None:
                return RoundEvaluation(
                    status=EvaluationStatus.TIE_BREAK_REQUIRED,
                    tally=initial,
                    initial_tally=initial,
                    is_tie=True,
                    tied_positions=self._forced_tie,
                )
            return RoundEvaluation(
                status=EvaluationStatus.DECIDED,
                tally=initial.with_vote(presiding_ballot.position),
                initial_tally=initial,
                is_tie=True,
                tied_positions=self._forced_tie,
                decision=presiding_ballot.position,
                presiding_ballot_applied=True,
            )

        return self._delegate.evaluate(rapporteur_ballots, council_ballots, presiding_ballot)
