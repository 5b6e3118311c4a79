"""Infrastructure stubs for development and testing.

Available stubs:
- VoteTallyStub: Forces decided or tied evaluations, records calls

WARNING: These stubs are NOT for production use.
"""

from council_vote.infrastructure.stubs.vote_tally_stub import (
    TallyCall,
    VoteTallyOperation,
    VoteTallyStub,
)

__all__ = [
    "TallyCall",
    "VoteTallyOperation",
    "VoteTallyStub",
]
