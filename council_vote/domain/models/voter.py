"""Voter and roster domain models.

A roster is the closed set of voters eligible in one judgment round:
the rapporteur and reviewers of the case, the council members sitting
in the session, and optionally the presiding member who only votes to
break a tie.

Invariants:
- No voter appears twice (by name or by identifier)
- Council members and the presiding member carry an identifier
- The presiding member is not also a regular voter of the round
- A council member promoted to reviewer can be demoted back, leaving
  no trace of the promotion
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from council_vote.domain.errors.roster import (
    DuplicateVoterError,
    InvalidRosterError,
    VoterNotPromotableError,
)


class VoterRole(Enum):
    """Role a voter holds in a judgment round.

    Roles:
        RAPPORTEUR: Member responsible for presenting the case
        REVIEWER: Member independently reviewing the same case
        COUNCIL_MEMBER: Member of the sitting council
    """

    RAPPORTEUR = "RAPPORTEUR"
    REVIEWER = "REVIEWER"
    COUNCIL_MEMBER = "COUNCIL_MEMBER"

    def is_rapporteur_group(self) -> bool:
        """Check if the role votes in the rapporteur/reviewer group.

        Returns:
            True for RAPPORTEUR and REVIEWER.
        """
        return self in (VoterRole.RAPPORTEUR, VoterRole.REVIEWER)


def normalize_name(name: str) -> str:
    """Normalize a display name for use as a join key."""
    return name.strip()


@dataclass(frozen=True, eq=True)
class Voter:
    """A participant in a judgment round.

    Attributes:
        name: Display name, the join key between roster and ballots.
        role: Role held in this round.
        voter_id: Opaque identifier. Optional for rapporteurs/reviewers
            who are not formal council members in this vote.
    """

    name: str
    role: VoterRole
    voter_id: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate voter invariants."""
        normalized = normalize_name(self.name) if isinstance(self.name, str) else ""
        if not normalized:
            raise InvalidRosterError("Voter name must not be empty")
        object.__setattr__(self, "name", normalized)

        if self.role == VoterRole.COUNCIL_MEMBER and not self.voter_id:
            raise InvalidRosterError(
                f"Council member '{normalized}' must have a voter_id",
                voter_name=normalized,
            )

    def matches(self, voter_id: str | None, name: str | None) -> bool:
        """Check whether an (id, name) pair refers to this voter.

        Identifiers win when both sides have one; otherwise the
        normalized names are compared.

        Args:
            voter_id: Identifier to compare (may be None).
            name: Display name to compare (may be None).

        Returns:
            True if the pair refers to this voter.
        """
        if self.voter_id and voter_id:
            return self.voter_id == voter_id
        if name is None:
            return False
        return self.name == normalize_name(name)


@dataclass(frozen=True, eq=True)
class Roster:
    """Closed, ordered set of voters eligible in one judgment round.

    Attributes:
        voters: Regular voters in presentation order.
        presiding: The session chair, who votes only to break a tie.
        promoted_names: Council members promoted to reviewer this round.
    """

    voters: tuple[Voter, ...]
    presiding: Voter | None = field(default=None)
    promoted_names: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate roster invariants."""
        object.__setattr__(self, "voters", tuple(self.voters))
        object.__setattr__(self, "promoted_names", frozenset(self.promoted_names))
        self._validate_unique_voters()
        self._validate_presiding()
        self._validate_promotions()

    def _validate_unique_voters(self) -> None:
        seen_names: set[str] = set()
        seen_ids: set[str] = set()
        for voter in self.voters:
            if voter.name in seen_names:
                raise DuplicateVoterError(voter.name)
            seen_names.add(voter.name)
            if voter.voter_id is not None:
                if voter.voter_id in seen_ids:
                    raise DuplicateVoterError(voter.name, voter_id=voter.voter_id)
                seen_ids.add(voter.voter_id)

    def _validate_presiding(self) -> None:
        if self.presiding is None:
            return
        if self.presiding.role != VoterRole.COUNCIL_MEMBER:
            raise InvalidRosterError(
                "Presiding voter must be a council member",
                voter_name=self.presiding.name,
            )
        # Names must not clash even when the ids differ.
        shares_name = self.presiding.name in self.names()
        shares_id = self.presiding.voter_id is not None and any(
            voter.voter_id == self.presiding.voter_id for voter in self.voters
        )
        if shares_name or shares_id:
            raise InvalidRosterError(
                f"Presiding voter '{self.presiding.name}' cannot also cast "
                "a regular ballot in the same round",
                voter_name=self.presiding.name,
            )

    def _validate_promotions(self) -> None:
        for name in self.promoted_names:
            voter = self.find(name)
            if voter is None or voter.role != VoterRole.REVIEWER:
                raise InvalidRosterError(
                    f"Promoted voter '{name}' must be a reviewer in this roster",
                    voter_name=name,
                )

    @classmethod
    def create(
        cls,
        voters: list[Voter] | tuple[Voter, ...],
        presiding: Voter | None = None,
    ) -> Roster:
        """Create a roster with no promotions.

        Args:
            voters: Regular voters in presentation order.
            presiding: Optional session chair.

        Returns:
            New validated Roster.

        Raises:
            DuplicateVoterError: If a name or identifier repeats.
            InvalidRosterError: If the presiding voter is invalid.
        """
        return cls(voters=tuple(voters), presiding=presiding)

    @property
    def has_presiding(self) -> bool:
        """Check if a presiding voter is available for tie-breaks."""
        return self.presiding is not None

    @property
    def size(self) -> int:
        """Number of regular voters (the presiding voter is not counted)."""
        return len(self.voters)

    def names(self) -> tuple[str, ...]:
        """Get all regular voter names in roster order."""
        return tuple(voter.name for voter in self.voters)

    def find(self, name: str) -> Voter | None:
        """Find a regular voter by display name.

        Args:
            name: Display name to look up.

        Returns:
            The matching Voter, or None.
        """
        key = normalize_name(name)
        for voter in self.voters:
            if voter.name == key:
                return voter
        return None

    def rapporteur_group(self) -> tuple[Voter, ...]:
        """Get rapporteurs and reviewers in roster order."""
        return tuple(v for v in self.voters if v.role.is_rapporteur_group())

    def council_members(self) -> tuple[Voter, ...]:
        """Get council members in roster order."""
        return tuple(v for v in self.voters if v.role == VoterRole.COUNCIL_MEMBER)

    def is_promoted(self, name: str) -> bool:
        """Check if a voter was promoted to reviewer for this round."""
        return normalize_name(name) in self.promoted_names

    def promote(self, name: str) -> Roster:
        """Promote a council member to reviewer for this round.

        The voter leaves the council-member tally and joins the
        rapporteur/reviewer group, keeping their roster position.

        Args:
            name: Council member to promote.

        Returns:
            New Roster with the promotion applied.

        Raises:
            InvalidRosterError: If the name is not in the roster.
            VoterNotPromotableError: If the voter is not a council member.
        """
        voter = self._require(name)
        if voter.role != VoterRole.COUNCIL_MEMBER:
            raise VoterNotPromotableError(
                f"Only council members can be promoted, '{voter.name}' is {voter.role.value}",
                voter_name=voter.name,
            )
        return self._with_role(voter, VoterRole.REVIEWER, self.promoted_names | {voter.name})

    def demote(self, name: str) -> Roster:
        """Reverse a promotion made with promote().

        Args:
            name: Reviewer to return to the council.

        Returns:
            New Roster equal to the one before the promotion.

        Raises:
            InvalidRosterError: If the name is not in the roster.
            VoterNotPromotableError: If the voter was not promoted.
        """
        voter = self._require(name)
        if voter.name not in self.promoted_names:
            raise VoterNotPromotableError(
                f"'{voter.name}' was not promoted in this round",
                voter_name=voter.name,
            )
        return self._with_role(
            voter, VoterRole.COUNCIL_MEMBER, self.promoted_names - {voter.name}
        )

    def _require(self, name: str) -> Voter:
        voter = self.find(name)
        if voter is None:
            raise InvalidRosterError(
                f"Voter '{name}' is not in the roster", voter_name=name
            )
        return voter

    def _with_role(
        self, target: Voter, role: VoterRole, promoted: frozenset[str]
    ) -> Roster:
        voters = tuple(
            replace(voter, role=role) if voter.name == target.name else voter
            for voter in self.voters
        )
        return Roster(voters=voters, presiding=self.presiding, promoted_names=promoted)
