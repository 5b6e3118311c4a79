"""Ballot domain errors.

Errors raised while validating or resolving individual ballots. Cycle
and dangling-reference errors are fatal: the ballot set is malformed
and the round cannot proceed until the caller fixes it. The engine
never guesses a position for a broken follow chain.
"""

from __future__ import annotations

from council_vote.domain.exceptions import VoteEngineError


class BallotError(VoteEngineError):
    """Base class for ballot-related errors."""

    pass


class InvalidBallotError(BallotError):
    """Raised when a ballot is malformed or not allowed for its voter.

    Examples:
    - A FOLLOWS ballot without a target name
    - A direct ballot that still names a follow target
    - A council member casting FOLLOWS
    - A rapporteur or reviewer abstaining

    Attributes:
        voter_name: Name of the voter whose ballot is invalid.
        reason: Why the ballot was rejected.
    """

    def __init__(self, voter_name: str, reason: str) -> None:
        """Initialize InvalidBallotError.

        Args:
            voter_name: Name of the voter whose ballot is invalid.
            reason: Why the ballot was rejected.
        """
        self.voter_name = voter_name
        self.reason = reason
        super().__init__(f"Invalid ballot from '{voter_name}': {reason}")


class CycleDetectedError(BallotError):
    """Raised when a follow chain loops back on itself.

    A self-reference is a cycle of length 1 and is reported the same way
    as any longer loop.

    Attributes:
        path: Voter names walked, ending with the repeated name.
    """

    def __init__(self, path: tuple[str, ...]) -> None:
        """Initialize CycleDetectedError.

        Args:
            path: Voter names walked, ending with the repeated name.
        """
        self.path = path
        chain = " -> ".join(path)
        super().__init__(
            f"Follow chain forms a cycle: {chain}. "
            "Every followed vote must end in a concrete position."
        )


class UnknownReferenceError(BallotError):
    """Raised when a FOLLOWS ballot names a voter outside the ballot set.

    Attributes:
        name: The unknown voter name.
        referenced_by: Name of the voter whose ballot holds the reference.
    """

    def __init__(self, name: str, referenced_by: str) -> None:
        """Initialize UnknownReferenceError.

        Args:
            name: The unknown voter name.
            referenced_by: Name of the voter whose ballot holds the reference.
        """
        self.name = name
        self.referenced_by = referenced_by
        super().__init__(
            f"Ballot from '{referenced_by}' follows '{name}', "
            "who has no ballot in this rapporteur/reviewer group"
        )
