"""Records — typed, immutable snapshot rows and derived values for the hierarchy engine.

Invariants:
    - Records are frozen: the engine never mutates a snapshot it was given
    - TeamRecord.name is non-empty after stripping (validated at construction)
    - EffectiveMembership is either DirectMembership (has membership_id) or
      InheritedMembership (has origin ids, no usable membership id)
    - ClosureEdge.depth >= 0, depth 0 only for (team, team)

Design Decisions:
    - Tagged variant over a sentinel id: an inherited projection has no
      membership_id attribute at all, so callers cannot pass one to a mutation API
    - MembershipRecord.user is Optional: the snapshot loader outer-joins users and
      the resolver reports a missing user as DanglingMembershipError instead of dropping it
"""

from dataclasses import dataclass, field
from datetime import datetime

from teamboard.core.domain_types import (
    BREADCRUMB_SEPARATOR, DEFAULT_ROLE, MembershipId, TeamId, UserId,
)
from teamboard.core.errors import MalformedHierarchyError


# ─── Snapshot rows ───────────────────────────────────────────────

@dataclass(frozen=True)
class TeamRecord:
    """One row of the teams table."""
    id: TeamId
    name: str
    parent_id: TeamId | None = None
    description: str | None = None
    department: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise MalformedHierarchyError(
                f"Team '{self.id}' has an empty name", [self.id],
            )


@dataclass(frozen=True)
class UserRecord:
    id: UserId
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class MembershipRecord:
    """A direct membership row, with its user denormalized for display."""
    id: MembershipId
    user_id: UserId
    team_id: TeamId
    joined_at: datetime
    user: UserRecord | None
    role: str = DEFAULT_ROLE
    is_active: bool = True
    updated_at: datetime | None = None


# ─── Derived values ──────────────────────────────────────────────

@dataclass(frozen=True)
class ClosureEdge:
    """ancestor -> descendant reachability, depth counted in parent edges."""
    ancestor_id: TeamId
    descendant_id: TeamId
    depth: int


@dataclass(frozen=True)
class DirectMembership:
    """Membership recorded against the viewing team itself — mutable via membership_id."""
    membership_id: MembershipId
    viewing_team_id: TeamId
    user: UserRecord
    role: str
    is_active: bool
    joined_at: datetime
    updated_at: datetime | None

    @property
    def is_direct(self) -> bool:
        return True

    @property
    def depth(self) -> int:
        return 0

    @property
    def origin_team_id(self) -> TeamId:
        return self.viewing_team_id


@dataclass(frozen=True)
class InheritedMembership:
    """Membership visible at an ancestor because a descendant holds it directly.

    Read-only projection: mutations must target origin_membership_id on
    origin_team_id, never this record.
    """
    viewing_team_id: TeamId
    origin_team_id: TeamId
    origin_membership_id: MembershipId
    depth: int
    user: UserRecord
    role: str
    is_active: bool
    joined_at: datetime
    updated_at: datetime | None

    @property
    def is_direct(self) -> bool:
        return False


EffectiveMembership = DirectMembership | InheritedMembership


@dataclass(frozen=True)
class TeamPath:
    """Root-to-team name chain."""
    team_id: TeamId
    names: tuple[str, ...]

    @property
    def depth(self) -> int:
        """0 for a root team."""
        return len(self.names) - 1

    @property
    def breadcrumb(self) -> str:
        # a root's chain has one element, so this is just its name
        return BREADCRUMB_SEPARATOR.join(self.names)


@dataclass
class HierarchyNode:
    """One team in the rendered forest, annotated with path and effective members."""
    team: TeamRecord
    path: TeamPath
    members: list[EffectiveMembership] = field(default_factory=list)
    children: list["HierarchyNode"] = field(default_factory=list)
