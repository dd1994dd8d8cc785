"""Team Deletion Planning — decides what a delete does to the rest of the hierarchy.

Invariants:
    - PURE: produces a DeletionPlan, the shell applies it inside one locked transaction
    - REJECT: a team with children cannot be deleted (TeamHasChildrenError)
    - REPARENT: each direct child takes the deleted team's parent (None -> child becomes root)
    - CASCADE: the team and every descendant are deleted
    - Applying a plan to an acyclic forest leaves an acyclic forest
    - Direct memberships of every deleted team are deleted, never orphaned

Design Decisions:
    - Policy is an explicit argument: the product decision lives in configuration,
      not in the algorithm
"""

from dataclasses import dataclass, field

from teamboard.core.closure import closure_from
from teamboard.core.domain_types import DeletePolicy, TeamId
from teamboard.core.errors import TeamHasChildrenError
from teamboard.core.team_graph import TeamGraph


@dataclass(frozen=True)
class DeletionPlan:
    team_id: TeamId
    policy: DeletePolicy
    deleted_team_ids: tuple[TeamId, ...]
    reparented: dict[TeamId, TeamId | None] = field(default_factory=dict)


def plan_team_deletion(
    graph: TeamGraph, team_id: TeamId, policy: DeletePolicy,
) -> DeletionPlan:
    """Compute the effect of deleting team_id under policy."""
    team = graph.team(team_id)
    children = graph.children_of(team_id)

    if not children:
        return DeletionPlan(team_id, policy, (team_id,))

    if policy == DeletePolicy.REJECT:
        raise TeamHasChildrenError(team_id, len(children))

    if policy == DeletePolicy.REPARENT:
        return DeletionPlan(
            team_id, policy, (team_id,),
            {child: team.parent_id for child in children},
        )

    # CASCADE: deepest first so child rows go before their parents
    subtree = sorted(
        closure_from(graph, team_id), key=lambda e: e.depth, reverse=True,
    )
    return DeletionPlan(
        team_id, policy, tuple(e.descendant_id for e in subtree),
    )
