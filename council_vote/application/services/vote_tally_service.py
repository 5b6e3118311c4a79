"""Vote tally and decision service implementation.

This module counts the resolved ballots of a round, ranks the three
substantive outcomes and detects plurality ties. A tie is never
settled by default: the decision stays open until the presiding
member's ballot is folded into the tally.

Tie rule: the round is tied when the two highest substantive counts
are equal and nonzero. A three-way tie is a tie as well.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from council_vote.application.ports.ballot_resolver import BallotResolverProtocol
from council_vote.application.ports.vote_tally import VoteTallyProtocol
from council_vote.application.services.ballot_resolver_service import (
    BallotResolverService,
)
from council_vote.domain.errors.ballot import InvalidBallotError
from council_vote.domain.errors.judgment_round import (
    InvalidTieBreakError,
    TieBreakNotRequiredError,
)
from council_vote.domain.models.ballot import Ballot, ResolvedBallot, VotePosition
from council_vote.domain.models.evaluation import RoundEvaluation, TallyDecision
from council_vote.domain.models.tally import Tally

logger = structlog.get_logger(__name__)


class VoteTallyService(VoteTallyProtocol):
    """Counts ballots and computes the binding decision of a round.

    The service is pure: given the same ballots it always produces the
    same tally and decision, whatever order the ballots arrive in.
    """

    def __init__(self, resolver: BallotResolverProtocol | None = None) -> None:
        """Initialize the vote tally service.

        Args:
            resolver: Follow-chain resolver (defaults to BallotResolverService).
        """
        self._resolver = resolver or BallotResolverService()
        self._log = logger.bind(component="vote_tally")

    def tally(
        self,
        resolved_rapporteur_ballots: Sequence[ResolvedBallot],
        council_ballots: Sequence[Ballot | ResolvedBallot],
    ) -> Tally:
        """Count substantive and non-substantive positions.

        Args:
            resolved_rapporteur_ballots: Resolved rapporteur/reviewer ballots.
            council_ballots: Council member ballots.

        Returns:
            Tally over both groups.

        Raises:
            InvalidBallotError: If a rapporteur ballot is not substantive or
                a council ballot is FOLLOWS.
        """
        positions: list[VotePosition] = []
        for resolved in resolved_rapporteur_ballots:
            if not resolved.position.is_substantive():
                raise InvalidBallotError(
                    resolved.voter_name,
                    f"rapporteur/reviewer ballot must resolve to a substantive "
                    f"position, got {resolved.position.value}",
                )
            positions.append(resolved.position)
        for ballot in council_ballots:
            if ballot.position == VotePosition.FOLLOWS:
                raise InvalidBallotError(
                    ballot.voter_name, "council members cannot follow another vote"
                )
            positions.append(ballot.position)
        return Tally.from_positions(positions)

    def decide(self, tally: Tally) -> TallyDecision:
        """Rank a tally and report the decision or the tie.

        Args:
            tally: Counts to rank.

        Returns:
            TallyDecision with the strict-plurality position, or
            ``is_tie`` set and no decision, or neither when every count
            is zero.
        """
        ranked = tally.ranked()
        top_count = ranked[0][1]
        if top_count == 0:
            return TallyDecision(tally=tally, is_tie=False)

        tied = tuple(position for position, count in ranked if count == top_count)
        if len(tied) > 1:
            return TallyDecision(tally=tally, is_tie=True, tied_positions=tied)
        return TallyDecision(tally=tally, is_tie=False, decision=ranked[0][0])

    def apply_tie_break(
        self, decision: TallyDecision, presiding_ballot: Ballot
    ) -> TallyDecision:
        """Fold the presiding ballot into a tied decision.

        Args:
            decision: A tied decision still waiting for its tie-break.
            presiding_ballot: Ballot of the presiding member.

        Returns:
            TallyDecision over the folded tally, still flagged as tied,
            with the decision set to the presiding member's position.

        Raises:
            TieBreakNotRequiredError: If the decision is not an open tie.
            InvalidTieBreakError: If the ballot is not substantive or backs
                a position outside the tie.
        """
        if not decision.requires_tie_break:
            raise TieBreakNotRequiredError()

        position = presiding_ballot.position
        if not position.is_substantive() or position not in decision.tied_positions:
            raise InvalidTieBreakError(position, decision.tied_positions)

        folded = decision.tally.with_vote(position)
        recomputed = self.decide(folded)

        self._log.info(
            "tie_broken_by_presiding_ballot",
            tied_positions=[p.value for p in decision.tied_positions],
            decision=position.value,
        )
        return TallyDecision(
            tally=folded,
            is_tie=True,
            decision=recomputed.decision,
            tied_positions=decision.tied_positions,
            tie_broken_by=position,
        )

    def evaluate(
        self,
        rapporteur_ballots: Sequence[Ballot],
        council_ballots: Sequence[Ballot],
        presiding_ballot: Ballot | None = None,
    ) -> RoundEvaluation:
        """Run resolution, tally, decision and optional tie-break.

        Args:
            rapporteur_ballots: Raw rapporteur/reviewer ballots.
            council_ballots: Council member ballots.
            presiding_ballot: Tie-break ballot, supplied only when requested.

        Returns:
            RoundEvaluation for the round.

        Raises:
            CycleDetectedError: If a follow chain loops.
            UnknownReferenceError: If a follow chain dangles.
            TieBreakNotRequiredError: If a presiding ballot is supplied
                for an untied round.
            InvalidTieBreakError: If the presiding ballot cannot break the tie.
        """
        resolved_rapporteurs = self._resolver.resolve(rapporteur_ballots)
        resolved_council = tuple(ResolvedBallot.direct(b) for b in council_ballots)

        tally = self.tally(resolved_rapporteurs, resolved_council)
        initial = self.decide(tally)
        final = initial
        if presiding_ballot is not None:
            final = self.apply_tie_break(initial, presiding_ballot)

        evaluation = RoundEvaluation.from_decision(
            resolved_ballots=resolved_rapporteurs + resolved_council,
            initial=initial,
            final=final,
            presiding_ballot=presiding_ballot,
        )
        self._log.info(
            "round_evaluated",
            status=evaluation.status.value,
            tally=evaluation.tally.to_dict(),
            is_tie=evaluation.is_tie,
            decision=evaluation.decision.value if evaluation.decision else None,
        )
        return evaluation
