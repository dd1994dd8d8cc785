"""Membership Service — direct membership CRUD.

Invariants:
    - Only direct memberships are addressable: ids come from team_members rows,
      inherited projections have no id and therefore cannot be updated or removed
    - (user, team) duplicates rejected as DuplicateMembershipError, even under a race
      (unique constraint is the final arbiter); other integrity failures, such as a
      user deleted concurrently, propagate unchanged
    - A membership whose user row is missing raises DanglingMembershipError on read

Design Decisions:
    - No hierarchy lock: memberships never change the shape of the forest
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.core.errors import (
    DanglingMembershipError, DuplicateMembershipError, ResourceNotFoundError,
)
from teamboard.core.records import MembershipRecord
from teamboard.infrastructure.database import violates_unique
from teamboard.models.team import Team
from teamboard.models.team_member import TeamMember
from teamboard.models.user import User
from teamboard.schemas.membership import MemberCreate, MemberUpdate
from teamboard.services.snapshot import load_memberships, membership_record

logger = logging.getLogger(__name__)


class MembershipService:
    """Direct membership reads and writes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_team(self, team_id: UUID) -> Team:
        team = await self.db.get(Team, team_id)
        if team is None:
            raise ResourceNotFoundError("Team", str(team_id))
        return team

    async def _require_membership(self, membership_id: UUID) -> TeamMember:
        row = await self.db.get(TeamMember, membership_id)
        if row is None:
            raise ResourceNotFoundError("Team member", str(membership_id))
        return row

    async def list_members(self, team_id: UUID) -> list[MembershipRecord]:
        await self._require_team(team_id)
        members = await load_memberships(self.db, team_id)
        for m in members:
            if m.user is None:
                raise DanglingMembershipError(m.id, m.user_id)
        return sorted(members, key=lambda m: (m.user.name, str(m.user_id)))

    async def add_member(self, team_id: UUID, body: MemberCreate) -> MembershipRecord:
        await self._require_team(team_id)
        user = await self.db.get(User, body.user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(body.user_id))

        existing = await self.db.execute(
            select(TeamMember.id)
            .where(TeamMember.team_id == team_id)
            .where(TeamMember.user_id == body.user_id),
        )
        if existing.scalar_one_or_none() is not None:
            raise DuplicateMembershipError(body.user_id, team_id)

        row = TeamMember(
            user_id=body.user_id, team_id=team_id,
            role=body.role, is_active=body.is_active,
        )
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            if violates_unique(e, "uq_team_members_user_team", "team_members"):
                raise DuplicateMembershipError(body.user_id, team_id) from None
            raise
        await self.db.commit()

        logger.info(
            "Member added",
            extra={"membership_id": row.id, "team_id": team_id, "user_id": body.user_id},
        )
        return membership_record(row, user)

    async def update_member(
        self, membership_id: UUID, body: MemberUpdate,
    ) -> MembershipRecord:
        row = await self._require_membership(membership_id)
        if body.role is not None:
            row.role = body.role
        if body.is_active is not None:
            row.is_active = body.is_active
        await self.db.flush()
        user = await self.db.get(User, row.user_id)
        if user is None:
            raise DanglingMembershipError(row.id, row.user_id)
        await self.db.commit()

        logger.info("Member updated", extra={"membership_id": membership_id})
        return membership_record(row, user)

    async def remove_member(self, membership_id: UUID) -> None:
        row = await self._require_membership(membership_id)
        await self.db.delete(row)
        await self.db.commit()
        logger.info(
            "Member removed",
            extra={"membership_id": membership_id, "team_id": row.team_id},
        )
