"""Domain errors for the council vote engine.

All exceptions inherit from VoteEngineError.
"""

from council_vote.domain.errors.ballot import (
    BallotError,
    CycleDetectedError,
    InvalidBallotError,
    UnknownReferenceError,
)
from council_vote.domain.errors.judgment_round import (
    BallotsLockedError,
    InvalidStageTransitionError,
    InvalidTieBreakError,
    JudgmentRoundError,
    RoundAlreadyConfirmedError,
    RoundNotConfirmedError,
    TieBreakNotRequiredError,
)
from council_vote.domain.errors.roster import (
    DuplicateBallotError,
    DuplicateVoterError,
    InvalidRosterError,
    RosterError,
    UnauthorizedBallotError,
    VoterNotPromotableError,
)

__all__: list[str] = [
    "BallotError",
    "BallotsLockedError",
    "CycleDetectedError",
    "DuplicateBallotError",
    "DuplicateVoterError",
    "InvalidBallotError",
    "InvalidRosterError",
    "InvalidStageTransitionError",
    "InvalidTieBreakError",
    "JudgmentRoundError",
    "RosterError",
    "RoundAlreadyConfirmedError",
    "RoundNotConfirmedError",
    "TieBreakNotRequiredError",
    "UnauthorizedBallotError",
    "UnknownReferenceError",
    "VoterNotPromotableError",
]
