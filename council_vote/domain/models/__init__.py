"""Domain models for the council vote engine.

Value objects and aggregates for voters, ballots, tallies and judgment
rounds. These models are immutable and contain no infrastructure
dependencies.
"""

from council_vote.domain.models.ballot import (
    COUNCIL_POSITIONS,
    NON_SUBSTANTIVE_POSITIONS,
    RAPPORTEUR_POSITIONS,
    SUBSTANTIVE_POSITIONS,
    Ballot,
    ResolvedBallot,
    VotePosition,
    follow_path,
)
from council_vote.domain.models.evaluation import (
    VOTE_ALGORITHM_VERSION,
    EvaluationStatus,
    RoundEvaluation,
    TallyDecision,
)
from council_vote.domain.models.judgment_round import (
    STAGE_TRANSITION_MATRIX,
    JudgmentRound,
    JudgmentStage,
)
from council_vote.domain.models.reconciliation import (
    BallotReconciliation,
    ReconciliationStatus,
)
from council_vote.domain.models.tally import Tally
from council_vote.domain.models.voter import Roster, Voter, VoterRole

__all__: list[str] = [
    "COUNCIL_POSITIONS",
    "NON_SUBSTANTIVE_POSITIONS",
    "RAPPORTEUR_POSITIONS",
    "STAGE_TRANSITION_MATRIX",
    "SUBSTANTIVE_POSITIONS",
    "VOTE_ALGORITHM_VERSION",
    "Ballot",
    "BallotReconciliation",
    "EvaluationStatus",
    "JudgmentRound",
    "JudgmentStage",
    "ResolvedBallot",
    "ReconciliationStatus",
    "Roster",
    "RoundEvaluation",
    "Tally",
    "TallyDecision",
    "Voter",
    "VoterRole",
    "VotePosition",
    "follow_path",
]
