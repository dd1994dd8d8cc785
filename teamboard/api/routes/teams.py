"""Team Routes — hierarchy render, team CRUD, valid parents, direct members.

Invariants:
    - GET /teams returns the whole annotated forest from one snapshot
    - Hierarchy-changing writes are validated by the core inside the write transaction
    - DELETE uses ?on_children= when given, else settings.team_delete_policy

Design Decisions:
    - Team-scoped member routes live here (/teams/{id}/members); membership-id
      routes live in members.py: only direct membership ids exist in URLs
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.config import get_settings
from teamboard.core.domain_types import DeletePolicy
from teamboard.infrastructure.database import get_db
from teamboard.schemas.hierarchy import HierarchyResponse, HierarchyTeam
from teamboard.schemas.membership import MemberCreate, MemberResponse
from teamboard.schemas.team import (
    TeamCreate, TeamDeleteResponse, TeamResponse, TeamUpdate,
)
from teamboard.services.membership_service import MembershipService
from teamboard.services.team_service import TeamService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


@router.get("", response_model=HierarchyResponse)
async def get_teams_hierarchy(db: AsyncSession = Depends(get_db)):
    """Full team forest with breadcrumbs and effective members."""
    forest = await TeamService(db).get_hierarchy()
    return HierarchyResponse(teams=[HierarchyTeam.from_node(n) for n in forest])


@router.post(
    "", response_model=TeamResponse, status_code=status.HTTP_201_CREATED,
)
async def create_team(body: TeamCreate, db: AsyncSession = Depends(get_db)):
    team, path = await TeamService(db).create_team(body)
    return TeamResponse.from_record(team, path.breadcrumb)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(team_id: UUID, db: AsyncSession = Depends(get_db)):
    team, path = await TeamService(db).get_team(team_id)
    return TeamResponse.from_record(team, path.breadcrumb)


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: UUID, body: TeamUpdate, db: AsyncSession = Depends(get_db),
):
    team, path = await TeamService(db).update_team(team_id, body)
    return TeamResponse.from_record(team, path.breadcrumb)


@router.delete("/{team_id}", response_model=TeamDeleteResponse)
async def delete_team(
    team_id: UUID,
    on_children: DeletePolicy | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Delete a team; children handled per DeletePolicy."""
    policy = on_children or get_settings().team_delete_policy
    plan = await TeamService(db).delete_team(team_id, policy)
    return TeamDeleteResponse(
        message="Team deleted successfully",
        policy=plan.policy,
        deleted_team_ids=list(plan.deleted_team_ids),
        reparented=dict(plan.reparented),
    )


@router.get("/{team_id}/valid-parents", response_model=list[TeamResponse])
async def get_valid_parents(team_id: UUID, db: AsyncSession = Depends(get_db)):
    """Teams that may become the parent of team_id without forming a cycle."""
    candidates = await TeamService(db).get_valid_parents(team_id)
    return [TeamResponse.from_record(t, p.breadcrumb) for t, p in candidates]


@router.get("/{team_id}/members", response_model=list[MemberResponse])
async def list_team_members(team_id: UUID, db: AsyncSession = Depends(get_db)):
    """Direct members only; inherited members appear in GET /teams."""
    members = await MembershipService(db).list_members(team_id)
    return [MemberResponse.from_record(m) for m in members]


@router.post(
    "/{team_id}/members", response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_team_member(
    team_id: UUID, body: MemberCreate, db: AsyncSession = Depends(get_db),
):
    member = await MembershipService(db).add_member(team_id, body)
    return MemberResponse.from_record(member)
