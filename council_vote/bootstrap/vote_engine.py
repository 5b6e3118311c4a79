"""Bootstrap wiring for the vote engine services."""

from __future__ import annotations

from council_vote.application.services.ballot_resolver_service import (
    BallotResolverService,
)
from council_vote.application.services.judgment_round_service import (
    JudgmentRoundService,
)
from council_vote.application.services.roster_reconciliation_service import (
    RosterReconciliationService,
)
from council_vote.application.services.vote_tally_service import VoteTallyService
from council_vote.config.vote_config import VoteEngineConfig

_judgment_round_service: JudgmentRoundService | None = None


def get_judgment_round_service() -> JudgmentRoundService:
    """Get judgment round service instance.

    Built on first use from VoteEngineConfig.from_environment().
    """
    global _judgment_round_service
    if _judgment_round_service is None:
        config = VoteEngineConfig.from_environment()
        resolver = BallotResolverService()
        _judgment_round_service = JudgmentRoundService(
            tally_service=VoteTallyService(resolver=resolver),
            reconciliation_service=RosterReconciliationService(config=config),
            resolver=resolver,
        )
    return _judgment_round_service


def set_judgment_round_service(service: JudgmentRoundService) -> None:
    """Set custom judgment round service (testing override)."""
    global _judgment_round_service
    _judgment_round_service = service


def reset_judgment_round_service() -> None:
    """Reset judgment round service singleton."""
    global _judgment_round_service
    _judgment_round_service = None
