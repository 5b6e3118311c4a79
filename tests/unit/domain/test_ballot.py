"""Unit tests for Ballot and ResolvedBallot domain models."""

from __future__ import annotations

import pytest

from council_vote.domain.errors.ballot import InvalidBallotError
from council_vote.domain.models.ballot import (
    COUNCIL_POSITIONS,
    RAPPORTEUR_POSITIONS,
    SUBSTANTIVE_POSITIONS,
    Ballot,
    ResolvedBallot,
    VotePosition,
    follow_path,
)


class TestVotePosition:
    """Tests for VotePosition classification."""

    @pytest.mark.parametrize("position", SUBSTANTIVE_POSITIONS)
    def test_substantive(self, position: VotePosition) -> None:
        assert position.is_substantive()
        assert not position.is_non_substantive()

    @pytest.mark.parametrize(
        "position",
        [VotePosition.ABSTAIN, VotePosition.ABSENT, VotePosition.BARRED],
    )
    def test_non_substantive(self, position: VotePosition) -> None:
        assert position.is_non_substantive()
        assert not position.is_substantive()

    def test_follows_is_neither(self) -> None:
        """FOLLOWS is resolved away before counting."""
        assert not VotePosition.FOLLOWS.is_substantive()
        assert not VotePosition.FOLLOWS.is_non_substantive()

    def test_canonical_order(self) -> None:
        assert SUBSTANTIVE_POSITIONS == (
            VotePosition.APPROVED,
            VotePosition.DENIED,
            VotePosition.PARTIAL,
        )

    def test_group_position_sets(self) -> None:
        assert VotePosition.FOLLOWS in RAPPORTEUR_POSITIONS
        assert VotePosition.ABSTAIN not in RAPPORTEUR_POSITIONS
        assert VotePosition.FOLLOWS not in COUNCIL_POSITIONS
        assert VotePosition.BARRED in COUNCIL_POSITIONS


class TestBallot:
    """Tests for Ballot value object."""

    def test_cast_direct_ballot(self) -> None:
        ballot = Ballot.cast(" Ana ", VotePosition.APPROVED)

        assert ballot.voter_name == "Ana"
        assert ballot.follows_voter_name is None
        assert not ballot.is_follows

    def test_following_ballot(self) -> None:
        ballot = Ballot.following("Bruno", " Ana ")

        assert ballot.position == VotePosition.FOLLOWS
        assert ballot.follows_voter_name == "Ana"
        assert ballot.is_follows

    def test_follows_requires_target(self) -> None:
        with pytest.raises(InvalidBallotError) as exc_info:
            Ballot(voter_name="Bruno", position=VotePosition.FOLLOWS)

        assert exc_info.value.voter_name == "Bruno"

    def test_blank_follow_target_rejected(self) -> None:
        with pytest.raises(InvalidBallotError):
            Ballot.following("Bruno", "   ")

    def test_direct_ballot_cannot_name_target(self) -> None:
        with pytest.raises(InvalidBallotError):
            Ballot(voter_name="Bruno", position=VotePosition.DENIED, follows_voter_name="Ana")

    def test_empty_voter_name_rejected(self) -> None:
        with pytest.raises(InvalidBallotError):
            Ballot.cast("", VotePosition.APPROVED)

    def test_unknown_position_rejected(self) -> None:
        with pytest.raises(InvalidBallotError):
            Ballot(voter_name="Ana", position="APPROVED")  # type: ignore[arg-type]

    def test_self_follow_is_a_valid_ballot(self) -> None:
        """Self-reference is caught by the resolver, not the ballot."""
        ballot = Ballot.following("Ana", "Ana")
        assert ballot.follows_voter_name == "Ana"


class TestResolvedBallot:
    """Tests for ResolvedBallot value object."""

    def test_direct_wraps_ballot(self) -> None:
        resolved = ResolvedBallot.direct(Ballot.cast("M1", VotePosition.ABSTAIN))

        assert resolved.position == VotePosition.ABSTAIN
        assert resolved.cast_position == VotePosition.ABSTAIN
        assert resolved.follows_voter_name is None
        assert resolved.terminal_voter_name is None
        assert not resolved.followed
        assert not resolved.is_substantive

    def test_cannot_remain_follows(self) -> None:
        with pytest.raises(InvalidBallotError):
            ResolvedBallot(
                voter_name="Bruno",
                position=VotePosition.FOLLOWS,
                cast_position=VotePosition.FOLLOWS,
            )

    def test_hop_requires_terminal(self) -> None:
        with pytest.raises(InvalidBallotError):
            ResolvedBallot(
                voter_name="Bruno",
                position=VotePosition.DENIED,
                cast_position=VotePosition.FOLLOWS,
                follows_voter_name="Ana",
            )

    def test_to_dict(self) -> None:
        resolved = ResolvedBallot(
            voter_name="Bruno",
            position=VotePosition.DENIED,
            cast_position=VotePosition.FOLLOWS,
            follows_voter_name="Ana",
            terminal_voter_name="Ana",
        )

        assert resolved.followed
        assert resolved.to_dict() == {
            "voter_name": "Bruno",
            "position": "DENIED",
            "cast_position": "FOLLOWS",
            "follows_voter_name": "Ana",
            "terminal_voter_name": "Ana",
        }


class TestFollowPath:
    """Tests for rebuilding a walk from resolved hops."""

    def test_rebuilds_chain(self) -> None:
        resolved = (
            ResolvedBallot.direct(Ballot.cast("Ana", VotePosition.DENIED)),
            ResolvedBallot(
                voter_name="Bruno",
                position=VotePosition.DENIED,
                cast_position=VotePosition.FOLLOWS,
                follows_voter_name="Ana",
                terminal_voter_name="Ana",
            ),
            ResolvedBallot(
                voter_name="Carla",
                position=VotePosition.DENIED,
                cast_position=VotePosition.FOLLOWS,
                follows_voter_name="Bruno",
                terminal_voter_name="Ana",
            ),
        )

        assert follow_path(resolved, "Carla") == ("Bruno", "Ana")
        assert follow_path(resolved, "Ana") == ()

    def test_unknown_voter(self) -> None:
        with pytest.raises(KeyError):
            follow_path((), "Ana")
