"""Vote tally protocol.

This module defines the abstract interface for counting resolved
ballots, detecting ties and folding in the presiding tie-break.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from council_vote.domain.models.ballot import Ballot, ResolvedBallot
from council_vote.domain.models.evaluation import RoundEvaluation, TallyDecision
from council_vote.domain.models.tally import Tally


class VoteTallyProtocol(Protocol):
    """Protocol for tallying a round and computing its decision.

    Implementations must be deterministic and independent of ballot
    order.
    """

    def tally(
        self,
        resolved_rapporteur_ballots: Sequence[ResolvedBallot],
        council_ballots: Sequence[Ballot | ResolvedBallot],
    ) -> Tally:
        """Count substantive and non-substantive positions."""
        ...

    def decide(self, tally: Tally) -> TallyDecision:
        """Rank a tally and report the decision or the tie."""
        ...

    def apply_tie_break(
        self, decision: TallyDecision, presiding_ballot: Ballot
    ) -> TallyDecision:
        """Fold the presiding ballot into a tied decision."""
        ...

    def evaluate(
        self,
        rapporteur_ballots: Sequence[Ballot],
        council_ballots: Sequence[Ballot],
        presiding_ballot: Ballot | None = None,
    ) -> RoundEvaluation:
        """Run resolution, tally, decision and optional tie-break."""
        ...
