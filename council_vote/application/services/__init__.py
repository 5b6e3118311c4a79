"""Application services - Use case orchestration.

Available services:
- BallotResolverService: Collapses FOLLOWS chains into final positions
- VoteTallyService: Counts, ranks, detects ties, folds the tie-break
- RosterReconciliationService: Checks ballots against the round roster
- JudgmentRoundService: Drives a round from collection to confirmation
"""

from council_vote.application.services.ballot_resolver_service import (
    BallotResolverService,
)
from council_vote.application.services.judgment_round_service import (
    JudgmentRoundService,
    RoundBlock,
    StageAdvance,
)
from council_vote.application.services.roster_reconciliation_service import (
    COUNCIL_GROUP,
    RAPPORTEUR_GROUP,
    RosterReconciliationService,
)
from council_vote.application.services.vote_tally_service import VoteTallyService

__all__ = [
    "COUNCIL_GROUP",
    "RAPPORTEUR_GROUP",
    "BallotResolverService",
    "JudgmentRoundService",
    "RosterReconciliationService",
    "RoundBlock",
    "StageAdvance",
    "VoteTallyService",
]
