"""
Pytest configuration and shared fixtures for council vote tests.

Testing Standards:
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Property-based tests use hypothesis
"""

import pytest

from council_vote.domain.models.voter import Roster, Voter, VoterRole


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from council_vote import __version__

    return __version__


@pytest.fixture
def rapporteur() -> Voter:
    """Rapporteur of the case (no formal council identifier)."""
    return Voter(name="Ana Souza", role=VoterRole.RAPPORTEUR)


@pytest.fixture
def reviewer() -> Voter:
    """Reviewer of the case."""
    return Voter(name="Bruno Lima", role=VoterRole.REVIEWER, voter_id="c-100")


@pytest.fixture
def council() -> tuple[Voter, ...]:
    """Five sitting council members."""
    return tuple(
        Voter(name=f"Member {index}", role=VoterRole.COUNCIL_MEMBER, voter_id=f"c-{index}")
        for index in range(1, 6)
    )


@pytest.fixture
def presiding() -> Voter:
    """Presiding member, who votes only to break a tie."""
    return Voter(name="Clara Reis", role=VoterRole.COUNCIL_MEMBER, voter_id="c-900")


@pytest.fixture
def roster(
    rapporteur: Voter, reviewer: Voter, council: tuple[Voter, ...], presiding: Voter
) -> Roster:
    """Full roster: rapporteur, reviewer, five members and a presiding member."""
    return Roster.create([rapporteur, reviewer, *council], presiding=presiding)
