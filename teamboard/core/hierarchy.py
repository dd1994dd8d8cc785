"""Hierarchy Engine — the three operations the hosting layer calls.

Invariants:
    - Inputs are plain snapshots (teams, memberships); the engine never queries storage
    - compute_hierarchy is idempotent: the same snapshot gives equal output
    - Roots and children ordered by (name, id); members ordered per membership_resolver
    - A cyclic or dangling snapshot raises MalformedHierarchyError, never partial output

Design Decisions:
    - One graph + one closure per call, shared by paths and membership resolution
      (closure computed for the whole forest, not per team)
    - HierarchyNode children built from graph.children_of: same ordering rule everywhere
"""

from collections.abc import Iterable

from teamboard.core.closure import closure_forest
from teamboard.core.cycle_guard import guard_parent_assignment
from teamboard.core.domain_types import TeamId
from teamboard.core.membership_resolver import resolve_memberships
from teamboard.core.paths import paths_for
from teamboard.core.records import HierarchyNode, MembershipRecord, TeamRecord
from teamboard.core.team_graph import build_team_graph
from teamboard.core.valid_parents import valid_parents


def validate_reparent(
    team_id: TeamId,
    proposed_parent_id: TeamId | None,
    current_teams: Iterable[TeamRecord],
) -> None:
    """Accept (return None) or reject (raise CircularReferenceError)."""
    graph = build_team_graph(current_teams)
    guard_parent_assignment(graph, team_id, proposed_parent_id)


def compute_valid_parents(
    team_id: TeamId, current_teams: Iterable[TeamRecord],
) -> list[TeamRecord]:
    graph = build_team_graph(current_teams)
    return valid_parents(graph, team_id)


def compute_hierarchy(
    current_teams: Iterable[TeamRecord],
    direct_memberships: Iterable[MembershipRecord],
) -> list[HierarchyNode]:
    """Annotated forest: every team with breadcrumb, effective members and children."""
    graph = build_team_graph(current_teams)
    paths = paths_for(graph)
    members = resolve_memberships(graph, closure_forest(graph), direct_memberships)

    nodes = {
        team.id: HierarchyNode(team=team, path=paths[team.id], members=members[team.id])
        for team in graph
    }
    for node in nodes.values():
        node.children = [nodes[c] for c in graph.children_of(node.team.id)]
    return [nodes[r] for r in graph.roots]
