"""Snapshot Loader — decodes ORM rows into core records.

Invariants:
    - The only place raw rows become TeamRecord / MembershipRecord / UserRecord
    - Memberships are outer-joined to users: a missing user yields user=None and
      is reported by the core as DanglingMembershipError, never filtered here
    - Callers decide the transaction: reads call begin_snapshot_read first,
      writes call inside hierarchy_write_lock

Design Decisions:
    - Whole-table loads: the hierarchy is assumed to fit in memory and the core needs
      every team to compute closures (no per-team queries, no recursive SQL)
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.core.domain_types import MembershipId, TeamId, UserId
from teamboard.core.records import MembershipRecord, TeamRecord, UserRecord
from teamboard.models.team import Team
from teamboard.models.team_member import TeamMember
from teamboard.models.user import User


def team_record(row: Team) -> TeamRecord:
    return TeamRecord(
        id=TeamId(row.id),
        name=row.name,
        parent_id=TeamId(row.parent_id) if row.parent_id is not None else None,
        description=row.description,
        department=row.department,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def user_record(row: User) -> UserRecord:
    return UserRecord(
        id=UserId(row.id), name=row.name, email=row.email,
        created_at=row.created_at, updated_at=row.updated_at,
    )


def membership_record(row: TeamMember, user: User | None) -> MembershipRecord:
    return MembershipRecord(
        id=MembershipId(row.id),
        user_id=UserId(row.user_id),
        team_id=TeamId(row.team_id),
        role=row.role,
        is_active=row.is_active,
        joined_at=row.joined_at,
        updated_at=row.updated_at,
        user=user_record(user) if user is not None else None,
    )


async def load_teams(db: AsyncSession) -> list[TeamRecord]:
    result = await db.execute(select(Team).order_by(Team.name, Team.id))
    return [team_record(row) for row in result.scalars().all()]


async def load_memberships(
    db: AsyncSession, team_id: UUID | None = None,
) -> list[MembershipRecord]:
    """Direct memberships (optionally of one team) with their users."""
    query = (
        select(TeamMember, User)
        .outerjoin(User, User.id == TeamMember.user_id)
        .order_by(TeamMember.id)
    )
    if team_id is not None:
        query = query.where(TeamMember.team_id == team_id)
    result = await db.execute(query)
    return [membership_record(m, u) for m, u in result.all()]
