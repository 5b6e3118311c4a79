"""Roster domain errors.

Errors raised when the roster of eligible voters, or the ballots
checked against it, violate the closed-set rules of a judgment round:
every voter appears once and no ballot comes from outside the roster.
"""

from __future__ import annotations

from council_vote.domain.exceptions import VoteEngineError


class RosterError(VoteEngineError):
    """Base class for roster-related errors."""

    pass


class InvalidRosterError(RosterError):
    """Raised when a roster or voter violates its invariants.

    Attributes:
        message: Descriptive error message.
        voter_name: Voter the problem concerns (if any).
    """

    def __init__(self, message: str, voter_name: str | None = None) -> None:
        """Initialize InvalidRosterError.

        Args:
            message: Descriptive error message.
            voter_name: Voter the problem concerns (if any).
        """
        self.voter_name = voter_name
        super().__init__(message)


class DuplicateVoterError(InvalidRosterError):
    """Raised when the same voter appears twice in a roster.

    Attributes:
        voter_name: The repeated name (or the holder of a repeated id).
        voter_id: The repeated identifier, when the clash is on ids.
    """

    def __init__(self, voter_name: str, voter_id: str | None = None) -> None:
        """Initialize DuplicateVoterError.

        Args:
            voter_name: The repeated name (or the holder of a repeated id).
            voter_id: The repeated identifier, when the clash is on ids.
        """
        self.voter_id = voter_id
        if voter_id is not None:
            message = f"Voter id '{voter_id}' appears more than once (at '{voter_name}')"
        else:
            message = f"Voter '{voter_name}' appears more than once in the roster"
        super().__init__(message, voter_name=voter_name)


class VoterNotPromotableError(InvalidRosterError):
    """Raised when a promotion or demotion does not apply to the voter.

    Only council members can be promoted to reviewer, and only voters
    promoted in this round can be demoted back.
    """

    pass


class UnauthorizedBallotError(RosterError):
    """Raised when a ballot does not belong to the group it was cast in.

    Attributes:
        voter_name: Name on the offending ballot.
        group: The ballot group it was submitted with.
    """

    def __init__(self, voter_name: str, group: str) -> None:
        """Initialize UnauthorizedBallotError.

        Args:
            voter_name: Name on the offending ballot.
            group: The ballot group it was submitted with.
        """
        self.voter_name = voter_name
        self.group = group
        super().__init__(
            f"Ballot from '{voter_name}' is not accepted in the {group} group: "
            "voter is not an eligible member of that group for this round"
        )


class DuplicateBallotError(RosterError):
    """Raised when one voter casts more than one ballot in a round.

    Attributes:
        voter_name: The voter with more than one ballot.
    """

    def __init__(self, voter_name: str) -> None:
        """Initialize DuplicateBallotError.

        Args:
            voter_name: The voter with more than one ballot.
        """
        self.voter_name = voter_name
        super().__init__(
            f"Voter '{voter_name}' cast more than one ballot; "
            "each voter casts exactly one ballot per round"
        )
