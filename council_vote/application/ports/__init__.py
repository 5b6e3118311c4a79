"""Application ports - Abstract interfaces for the vote engine.

Available ports:
- BallotResolverProtocol: Follow-chain resolution
- VoteTallyProtocol: Counting, tie detection and tie-break
"""

from council_vote.application.ports.ballot_resolver import BallotResolverProtocol
from council_vote.application.ports.vote_tally import VoteTallyProtocol

__all__: list[str] = ["BallotResolverProtocol", "VoteTallyProtocol"]
