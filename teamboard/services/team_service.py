"""Team Service — hierarchy reads and hierarchy-changing writes around the pure core.

Invariants:
    - Every write that can change the shape of the forest (create with parent,
      parent change, delete) runs: lock -> load snapshot -> core decision -> write -> commit,
      all inside one hierarchy_write_lock block and one transaction
    - Reads of the annotated hierarchy load teams and memberships in one snapshot
    - A storage-level cycle rejection (PostgreSQL trigger) is reported as
      CircularReferenceError without the trigger's name or SQL text

Design Decisions:
    - Core gets plain records, never ORM rows (ADR: impureim sandwich)
    - Bulk UPDATE/DELETE statements for deletion plans: no ORM cascades, no lazy
      loads in async context
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.core.cycle_guard import check_new_team_parent, guard_parent_assignment
from teamboard.core.domain_types import DeletePolicy, TeamId
from teamboard.core.errors import CircularReferenceError
from teamboard.core.hierarchy import compute_hierarchy
from teamboard.core.paths import paths_for
from teamboard.core.records import HierarchyNode, TeamPath, TeamRecord
from teamboard.core.team_deletion import DeletionPlan, plan_team_deletion
from teamboard.core.team_graph import TeamGraph, build_team_graph
from teamboard.core.valid_parents import valid_parents
from teamboard.infrastructure.transactions import begin_snapshot_read, hierarchy_write_lock
from teamboard.models.team import Team
from teamboard.models.team_member import TeamMember
from teamboard.schemas.team import TeamCreate, TeamUpdate
from teamboard.services.snapshot import load_memberships, load_teams, team_record

logger = logging.getLogger(__name__)


def _is_storage_cycle_rejection(exc: DBAPIError) -> bool:
    return "circular reference" in str(exc.orig).lower()


class TeamService:
    """Team reads and hierarchy mutations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ───────────────────────────────────────────────────

    async def _graph(self) -> TeamGraph:
        await begin_snapshot_read(self.db)
        return build_team_graph(await load_teams(self.db))

    async def get_hierarchy(self) -> list[HierarchyNode]:
        await begin_snapshot_read(self.db)
        teams = await load_teams(self.db)
        memberships = await load_memberships(self.db)
        forest = compute_hierarchy(teams, memberships)
        logger.debug(
            "Hierarchy rendered",
            extra={"team_count": len(teams), "member_count": len(memberships)},
        )
        return forest

    async def get_team(self, team_id: UUID) -> tuple[TeamRecord, TeamPath]:
        graph = await self._graph()
        team = graph.team(TeamId(team_id))
        return team, paths_for(graph)[team.id]

    async def get_valid_parents(
        self, team_id: UUID,
    ) -> list[tuple[TeamRecord, TeamPath]]:
        graph = await self._graph()
        paths = paths_for(graph)
        return [
            (t, paths[t.id])
            for t in valid_parents(graph, TeamId(team_id), paths)
        ]

    # ─── Writes ──────────────────────────────────────────────────

    async def create_team(self, body: TeamCreate) -> tuple[TeamRecord, TeamPath]:
        async with hierarchy_write_lock(self.db):
            teams = await load_teams(self.db)
            check_new_team_parent(build_team_graph(teams), body.parent_id)

            row = Team(
                name=body.name,
                description=body.description,
                department=body.department,
                parent_id=body.parent_id,
            )
            self.db.add(row)
            await self.db.flush()
            await self.db.commit()

        created = team_record(row)
        logger.info(
            f"Team created: {created.name}",
            extra={"team_id": created.id, "parent_id": created.parent_id},
        )
        return created, paths_for(build_team_graph(teams + [created]))[created.id]

    async def update_team(
        self, team_id: UUID, body: TeamUpdate,
    ) -> tuple[TeamRecord, TeamPath]:
        async with hierarchy_write_lock(self.db):
            teams = await load_teams(self.db)
            graph = build_team_graph(teams)
            graph.team(TeamId(team_id))

            if body.parent_id_provided:
                try:
                    guard_parent_assignment(graph, TeamId(team_id), body.parent_id)
                except CircularReferenceError:
                    logger.warning(
                        "Reparent rejected: circular reference",
                        extra={"team_id": team_id, "parent_id": body.parent_id},
                    )
                    raise

            row = await self.db.get(Team, team_id)
            if body.name is not None:
                row.name = body.name
            if "description" in body.model_fields_set:
                row.description = body.description
            if "department" in body.model_fields_set:
                row.department = body.department
            if body.parent_id_provided:
                row.parent_id = body.parent_id

            try:
                await self.db.flush()
            except DBAPIError as e:
                if body.parent_id_provided and _is_storage_cycle_rejection(e):
                    raise CircularReferenceError(team_id, body.parent_id) from None
                raise
            await self.db.commit()

        updated = team_record(row)
        logger.info(
            f"Team updated: {updated.name}",
            extra={"team_id": updated.id, "parent_id": updated.parent_id},
        )
        others = [t for t in teams if t.id != updated.id]
        return updated, paths_for(build_team_graph(others + [updated]))[updated.id]

    async def delete_team(
        self, team_id: UUID, policy: DeletePolicy,
    ) -> DeletionPlan:
        async with hierarchy_write_lock(self.db):
            graph = build_team_graph(await load_teams(self.db))
            plan = plan_team_deletion(graph, TeamId(team_id), policy)

            now = datetime.now(timezone.utc)
            for child_id, new_parent_id in plan.reparented.items():
                await self.db.execute(
                    update(Team)
                    .where(Team.id == child_id)
                    .values(parent_id=new_parent_id, updated_at=now),
                )
            await self.db.execute(
                delete(TeamMember).where(TeamMember.team_id.in_(plan.deleted_team_ids)),
            )
            await self.db.execute(
                delete(Team).where(Team.id.in_(plan.deleted_team_ids)),
            )
            await self.db.commit()

        logger.info(
            f"Team deleted ({len(plan.deleted_team_ids)} team(s) removed, "
            f"{len(plan.reparented)} reparented)",
            extra={"team_id": team_id, "policy": policy.value},
        )
        return plan
