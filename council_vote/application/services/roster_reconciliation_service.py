"""Roster reconciliation service implementation.

This module checks submitted ballots against the closed roster of a
judgment round before anything is counted:

- Every ballot comes from an eligible voter of the right group
- No voter casts more than one ballot
- Each position is one the voter's role may cast
- Every eligible voter has voted (reported, not raised)

It also provides the ballot-sheet helpers the collection steps use:
the positions offered to council members and the "mark everyone"
shortcut.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from council_vote.config.vote_config import DEFAULT_VOTE_ENGINE_CONFIG, VoteEngineConfig
from council_vote.domain.errors.ballot import InvalidBallotError
from council_vote.domain.errors.roster import (
    DuplicateBallotError,
    InvalidRosterError,
    UnauthorizedBallotError,
)
from council_vote.domain.models.ballot import (
    COUNCIL_POSITIONS,
    RAPPORTEUR_POSITIONS,
    SUBSTANTIVE_POSITIONS,
    Ballot,
    ResolvedBallot,
    VotePosition,
)
from council_vote.domain.models.reconciliation import BallotReconciliation
from council_vote.domain.models.voter import Roster, Voter

logger = structlog.get_logger(__name__)

RAPPORTEUR_GROUP = "rapporteur/reviewer"
COUNCIL_GROUP = "council member"


class RosterReconciliationService:
    """Validates ballots against the roster of a judgment round."""

    def __init__(self, config: VoteEngineConfig | None = None) -> None:
        """Initialize the roster reconciliation service.

        Args:
            config: Engine limits (defaults to DEFAULT_VOTE_ENGINE_CONFIG).
        """
        self._config = config or DEFAULT_VOTE_ENGINE_CONFIG
        self._log = logger.bind(component="roster_reconciliation")

    def validate_roster(self, roster: Roster) -> None:
        """Check a roster against the configured limits.

        Raises:
            InvalidRosterError: If the roster is empty, too large, or has
                no rapporteur/reviewer while the config requires one.
        """
        if roster.size == 0:
            raise InvalidRosterError("Roster must contain at least one voter")
        if roster.size > self._config.max_roster_size:
            raise InvalidRosterError(
                f"Roster has {roster.size} voters, "
                f"limit is {self._config.max_roster_size}"
            )
        if not roster.rapporteur_group() and not self._config.allow_empty_rapporteur_group:
            raise InvalidRosterError(
                "Roster must contain a rapporteur or reviewer"
            )

    def check_rapporteur_ballots(
        self, roster: Roster, ballots: Sequence[Ballot]
    ) -> BallotReconciliation:
        """Check rapporteur/reviewer ballots against the roster.

        Args:
            roster: Roster of the round.
            ballots: Ballots submitted for the rapporteur/reviewer group.

        Returns:
            BallotReconciliation listing rapporteurs/reviewers without a ballot.

        Raises:
            UnauthorizedBallotError: If a ballot is from outside the group.
            DuplicateBallotError: If a voter has two ballots.
            InvalidBallotError: If a ballot abstains or reports absence.
        """
        return self._check_group(
            roster.rapporteur_group(), ballots, RAPPORTEUR_POSITIONS, RAPPORTEUR_GROUP
        )

    def check_council_ballots(
        self, roster: Roster, ballots: Sequence[Ballot]
    ) -> BallotReconciliation:
        """Check council member ballots against the roster.

        Args:
            roster: Roster of the round.
            ballots: Ballots submitted for the council member group.

        Returns:
            BallotReconciliation listing council members without a ballot.

        Raises:
            UnauthorizedBallotError: If a ballot is from outside the group.
            DuplicateBallotError: If a voter has two ballots.
            InvalidBallotError: If a ballot is FOLLOWS.
        """
        return self._check_group(
            roster.council_members(), ballots, COUNCIL_POSITIONS, COUNCIL_GROUP
        )

    def reconcile(
        self,
        roster: Roster,
        rapporteur_ballots: Sequence[Ballot],
        council_ballots: Sequence[Ballot],
    ) -> BallotReconciliation:
        """Check both ballot groups of a round.

        Returns:
            Combined BallotReconciliation, rapporteurs listed first.
        """
        self.validate_roster(roster)
        result = self.check_rapporteur_ballots(roster, rapporteur_ballots).merge(
            self.check_council_ballots(roster, council_ballots)
        )
        if not result.is_complete:
            self._log.info(
                "ballots_missing",
                missing_count=len(result.missing_voters),
            )
        return result

    def _check_group(
        self,
        eligible: tuple[Voter, ...],
        ballots: Sequence[Ballot],
        allowed_positions: frozenset[VotePosition],
        group: str,
    ) -> BallotReconciliation:
        eligible_names = {voter.name for voter in eligible}
        cast: set[str] = set()
        for ballot in ballots:
            if ballot.voter_name not in eligible_names:
                self._log.warning(
                    "unauthorized_ballot_detected",
                    voter_name=ballot.voter_name,
                    group=group,
                )
                raise UnauthorizedBallotError(ballot.voter_name, group)
            if ballot.voter_name in cast:
                raise DuplicateBallotError(ballot.voter_name)
            if ballot.position not in allowed_positions:
                raise InvalidBallotError(
                    ballot.voter_name,
                    f"{ballot.position.value} is not allowed for a {group}",
                )
            cast.add(ballot.voter_name)

        missing = tuple(voter.name for voter in eligible if voter.name not in cast)
        if missing:
            return BallotReconciliation.incomplete(missing)
        return BallotReconciliation.complete()

    def identify_presiding(
        self, roster: Roster, voter_id: str | None, name: str | None
    ) -> bool:
        """Check whether an (id, name) pair is the roster's presiding voter."""
        if roster.presiding is None:
            return False
        return roster.presiding.matches(voter_id, name)

    def council_position_options(
        self, resolved_rapporteur_ballots: Sequence[ResolvedBallot]
    ) -> tuple[VotePosition, ...]:
        """Get the substantive positions offered to council members.

        Council members vote by siding with one of the positions the
        rapporteurs and reviewers took.

        Args:
            resolved_rapporteur_ballots: Resolved ballots in roster order.

        Returns:
            Distinct positions in first-seen order, or all substantive
            positions when there is no rapporteur ballot.
        """
        options: list[VotePosition] = []
        for ballot in resolved_rapporteur_ballots:
            if ballot.position.is_substantive() and ballot.position not in options:
                options.append(ballot.position)
        return tuple(options) if options else SUBSTANTIVE_POSITIONS

    def mark_all_council(self, roster: Roster, position: VotePosition) -> tuple[Ballot, ...]:
        """Build one ballot per council member, all with the same position.

        Args:
            roster: Roster of the round.
            position: Position for every council member.

        Returns:
            Ballots in roster order.

        Raises:
            InvalidBallotError: If the position is not allowed for council members.
        """
        if position not in COUNCIL_POSITIONS:
            raise InvalidBallotError(
                "*", f"{position.value} is not allowed for a {COUNCIL_GROUP}"
            )
        return tuple(Ballot.cast(voter.name, position) for voter in roster.council_members())
