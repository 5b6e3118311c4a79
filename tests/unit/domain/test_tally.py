"""Unit tests for the Tally domain model."""

from __future__ import annotations

import pytest

from council_vote.domain.models.ballot import VotePosition
from council_vote.domain.models.tally import Tally


class TestTally:
    """Tests for Tally counting."""

    def test_default_is_empty(self) -> None:
        tally = Tally()
        assert tally.total_substantive == 0
        assert tally.total_non_substantive == 0

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValueError, match="denied"):
            Tally(denied=-1)

    def test_from_positions(self) -> None:
        tally = Tally.from_positions(
            [
                VotePosition.APPROVED,
                VotePosition.APPROVED,
                VotePosition.PARTIAL,
                VotePosition.ABSTAIN,
                VotePosition.BARRED,
            ]
        )

        assert tally == Tally(approved=2, partial=1, abstain=1, barred=1)
        assert tally.total_substantive == 3
        assert tally.total_non_substantive == 2

    def test_from_positions_rejects_follows(self) -> None:
        with pytest.raises(ValueError, match="FOLLOWS"):
            Tally.from_positions([VotePosition.FOLLOWS])

    def test_with_vote_returns_new_tally(self) -> None:
        tally = Tally(approved=3, denied=3)
        folded = tally.with_vote(VotePosition.DENIED)

        assert folded.denied == 4
        assert tally.denied == 3

    def test_count_rejects_follows(self) -> None:
        with pytest.raises(ValueError):
            Tally().count(VotePosition.FOLLOWS)

    def test_ranked_highest_first(self) -> None:
        ranked = Tally(approved=1, denied=5, partial=2).ranked()

        assert ranked == [
            (VotePosition.DENIED, 5),
            (VotePosition.PARTIAL, 2),
            (VotePosition.APPROVED, 1),
        ]

    def test_ranked_ties_keep_canonical_order(self) -> None:
        ranked = Tally(approved=2, denied=2, partial=2).ranked()
        assert [position for position, _ in ranked] == [
            VotePosition.APPROVED,
            VotePosition.DENIED,
            VotePosition.PARTIAL,
        ]

    def test_ranked_ignores_non_substantive(self) -> None:
        """Abstentions never compete for first place."""
        ranked = Tally(approved=1, abstain=9).ranked()
        assert ranked[0] == (VotePosition.APPROVED, 1)
        assert len(ranked) == 3

    def test_to_dict(self) -> None:
        assert Tally(approved=5, denied=1, abstain=1).to_dict() == {
            "approved": 5,
            "denied": 1,
            "partial": 0,
            "abstain": 1,
            "absent": 0,
            "barred": 0,
        }
