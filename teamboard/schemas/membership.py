"""Membership Schemas — direct membership payloads and effective membership views.

Invariants:
    - MemberCreate.role defaults to "member", is_active to true
    - MemberUpdate must change at least one field
    - EffectiveMemberResponse.membership_id is null for inherited projections:
      only direct memberships expose an id usable with /members/{id}
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from teamboard.core.domain_types import DEFAULT_ROLE
from teamboard.core.records import (
    DirectMembership, EffectiveMembership, MembershipRecord,
)
from teamboard.schemas.user import UserResponse


class MemberCreate(BaseModel):
    user_id: UUID
    role: str = Field(DEFAULT_ROLE, min_length=1, max_length=50)
    is_active: bool = True


class MemberUpdate(BaseModel):
    role: str | None = Field(None, min_length=1, max_length=50)
    is_active: bool | None = None

    @model_validator(mode="after")
    def require_change(self):
        if self.role is None and self.is_active is None:
            raise ValueError("provide role and/or is_active")
        return self


class MemberResponse(BaseModel):
    """A direct membership row with its user."""
    id: UUID
    user_id: UUID
    team_id: UUID
    role: str
    is_active: bool
    joined_at: datetime
    updated_at: datetime | None = None
    user: UserResponse

    @classmethod
    def from_record(cls, m: MembershipRecord) -> "MemberResponse":
        return cls(
            id=m.id, user_id=m.user_id, team_id=m.team_id, role=m.role,
            is_active=m.is_active, joined_at=m.joined_at,
            updated_at=m.updated_at, user=UserResponse.from_record(m.user),
        )


class EffectiveMemberResponse(BaseModel):
    """A member as seen from one team: direct, or inherited from a descendant."""
    membership_id: UUID | None
    origin_membership_id: UUID
    user_id: UUID
    team_id: UUID
    origin_team_id: UUID
    role: str
    is_active: bool
    is_direct: bool
    depth: int
    joined_at: datetime
    updated_at: datetime | None = None
    user: UserResponse

    @classmethod
    def from_effective(cls, m: EffectiveMembership) -> "EffectiveMemberResponse":
        if isinstance(m, DirectMembership):
            membership_id = origin_membership_id = m.membership_id
        else:
            membership_id, origin_membership_id = None, m.origin_membership_id
        return cls(
            membership_id=membership_id,
            origin_membership_id=origin_membership_id,
            user_id=m.user.id,
            team_id=m.viewing_team_id,
            origin_team_id=m.origin_team_id,
            role=m.role,
            is_active=m.is_active,
            is_direct=m.is_direct,
            depth=m.depth,
            joined_at=m.joined_at,
            updated_at=m.updated_at,
            user=UserResponse.from_record(m.user),
        )
