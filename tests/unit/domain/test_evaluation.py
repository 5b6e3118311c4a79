"""Unit tests for TallyDecision and RoundEvaluation."""

from __future__ import annotations

import pytest

from council_vote.domain.models.ballot import Ballot, ResolvedBallot, VotePosition
from council_vote.domain.models.evaluation import (
    VOTE_ALGORITHM_VERSION,
    EvaluationStatus,
    RoundEvaluation,
    TallyDecision,
)
from council_vote.domain.models.tally import Tally

TIED = (VotePosition.APPROVED, VotePosition.DENIED)


class TestTallyDecision:
    """Tests for TallyDecision invariants."""

    def test_decided(self) -> None:
        decision = TallyDecision(
            tally=Tally(approved=5, denied=2, partial=1),
            is_tie=False,
            decision=VotePosition.APPROVED,
        )

        assert decision.is_resolved
        assert not decision.requires_tie_break

    def test_open_tie(self) -> None:
        decision = TallyDecision(tally=Tally(approved=3, denied=3), is_tie=True, tied_positions=TIED)

        assert decision.requires_tie_break
        assert not decision.is_resolved

    def test_tie_cannot_carry_decision_without_tie_break(self) -> None:
        """A tie is never settled by default."""
        with pytest.raises(ValueError, match="presiding"):
            TallyDecision(
                tally=Tally(approved=3, denied=3),
                is_tie=True,
                decision=VotePosition.APPROVED,
                tied_positions=TIED,
            )

    def test_decision_must_be_substantive(self) -> None:
        with pytest.raises(ValueError):
            TallyDecision(tally=Tally(abstain=1), is_tie=False, decision=VotePosition.ABSTAIN)

    def test_tied_positions_only_with_tie(self) -> None:
        with pytest.raises(ValueError):
            TallyDecision(tally=Tally(), is_tie=False, tied_positions=TIED)

    def test_tie_broken_by_requires_tie(self) -> None:
        with pytest.raises(ValueError):
            TallyDecision(
                tally=Tally(approved=1),
                is_tie=False,
                decision=VotePosition.APPROVED,
                tie_broken_by=VotePosition.APPROVED,
            )

    def test_broken_tie(self) -> None:
        decision = TallyDecision(
            tally=Tally(approved=3, denied=4),
            is_tie=True,
            decision=VotePosition.DENIED,
            tied_positions=TIED,
            tie_broken_by=VotePosition.DENIED,
        )

        assert decision.is_resolved
        assert not decision.requires_tie_break


class TestRoundEvaluation:
    """Tests for RoundEvaluation factories and invariants."""

    def test_incomplete(self) -> None:
        evaluation = RoundEvaluation.incomplete(("Member 4",))

        assert evaluation.status == EvaluationStatus.INCOMPLETE_ROSTER
        assert evaluation.missing_voters == ("Member 4",)
        assert evaluation.decision is None
        assert evaluation.algorithm_version == VOTE_ALGORITHM_VERSION

    def test_incomplete_requires_missing_voters(self) -> None:
        with pytest.raises(ValueError):
            RoundEvaluation(status=EvaluationStatus.INCOMPLETE_ROSTER)

    def test_decided_requires_decision(self) -> None:
        with pytest.raises(ValueError):
            RoundEvaluation(status=EvaluationStatus.DECIDED)

    def test_from_decision_decided(self) -> None:
        ballots = (
            ResolvedBallot.direct(Ballot.cast("Ana", VotePosition.APPROVED)),
            ResolvedBallot(
                voter_name="Bruno",
                position=VotePosition.APPROVED,
                cast_position=VotePosition.FOLLOWS,
                follows_voter_name="Ana",
                terminal_voter_name="Ana",
            ),
            ResolvedBallot.direct(Ballot.cast("M1", VotePosition.ABSTAIN)),
        )
        decision = TallyDecision(
            tally=Tally(approved=2, abstain=1), is_tie=False, decision=VotePosition.APPROVED
        )

        evaluation = RoundEvaluation.from_decision(ballots, decision, decision)

        assert evaluation.status == EvaluationStatus.DECIDED
        assert evaluation.is_decided
        assert evaluation.tally == evaluation.initial_tally
        assert evaluation.voters_by_position == {
            VotePosition.APPROVED: ("Ana", "Bruno"),
            VotePosition.ABSTAIN: ("M1",),
        }

    def test_from_decision_tie_break_required(self) -> None:
        tied = TallyDecision(tally=Tally(approved=1, denied=1), is_tie=True, tied_positions=TIED)

        evaluation = RoundEvaluation.from_decision((), tied, tied)

        assert evaluation.status == EvaluationStatus.TIE_BREAK_REQUIRED
        assert evaluation.requires_tie_break
        assert evaluation.decision is None

    def test_from_decision_with_presiding_ballot(self) -> None:
        initial = TallyDecision(tally=Tally(approved=3, denied=3), is_tie=True, tied_positions=TIED)
        final = TallyDecision(
            tally=Tally(approved=3, denied=4),
            is_tie=True,
            decision=VotePosition.DENIED,
            tied_positions=TIED,
            tie_broken_by=VotePosition.DENIED,
        )
        presiding = Ballot.cast("Clara", VotePosition.DENIED)

        evaluation = RoundEvaluation.from_decision((), initial, final, presiding)

        assert evaluation.status == EvaluationStatus.DECIDED
        assert evaluation.is_tie
        assert evaluation.presiding_ballot_applied
        assert evaluation.initial_tally == Tally(approved=3, denied=3)
        assert evaluation.tally == Tally(approved=3, denied=4)
        assert evaluation.voters_by_position[VotePosition.DENIED] == ("Clara",)

    def test_from_decision_no_substantive_votes(self) -> None:
        empty = TallyDecision(tally=Tally(abstain=2), is_tie=False)

        evaluation = RoundEvaluation.from_decision((), empty, empty)

        assert evaluation.status == EvaluationStatus.NO_SUBSTANTIVE_VOTES

    def test_to_dict(self) -> None:
        initial = TallyDecision(tally=Tally(approved=1, denied=1), is_tie=True, tied_positions=TIED)
        evaluation = RoundEvaluation.from_decision(
            (ResolvedBallot.direct(Ballot.cast("M1", VotePosition.DENIED)),), initial, initial
        )

        data = evaluation.to_dict()

        assert data["status"] == "TIE_BREAK_REQUIRED"
        assert data["tied_positions"] == ["APPROVED", "DENIED"]
        assert data["decision"] is None
        assert data["tally"]["approved"] == 1
        assert data["voters_by_position"] == {"DENIED": ["M1"]}
        assert "evaluated_at" in data

    def test_equality_ignores_timestamp(self) -> None:
        """Identical inputs give equal evaluations."""
        assert RoundEvaluation.incomplete(("A",)) == RoundEvaluation.incomplete(("A",))
