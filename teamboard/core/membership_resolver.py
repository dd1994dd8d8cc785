"""Membership Resolver — one effective membership per (team, user), direct over inherited.

Invariants:
    - PURE: no IO; output depends only on (graph, closure edges, memberships)
    - At most one EffectiveMembership per (viewing team, user)
    - Winner order (total): direct first, then smallest depth, then latest joined_at,
      then smallest membership id — two distinct memberships never tie
    - Depth-0 winners are DirectMembership, all others InheritedMembership
    - Per-team list order: active first, direct first, then user name, then user id
    - A membership whose user is missing raises DanglingMembershipError
    - A membership on a team outside the snapshot raises MalformedHierarchyError

Design Decisions:
    - Keeps the running best candidate per group instead of materialising and
      sorting every candidate: memory O(teams x users visible), not O(closure x memberships)
    - joined_at compared via timestamp(): one snapshot is either all-aware or
      all-naive, both map to comparable floats
"""

from collections.abc import Iterable

from teamboard.core.domain_types import TeamId, UserId
from teamboard.core.errors import DanglingMembershipError, MalformedHierarchyError
from teamboard.core.records import (
    ClosureEdge, DirectMembership, EffectiveMembership, InheritedMembership,
    MembershipRecord,
)
from teamboard.core.team_graph import TeamGraph


def _winner_key(membership: MembershipRecord, depth: int) -> tuple:
    """Smaller is better."""
    return (
        depth != 0,
        depth,
        -membership.joined_at.timestamp(),
        str(membership.id),
    )


def _display_key(effective: EffectiveMembership) -> tuple:
    return (
        not effective.is_active,
        not effective.is_direct,
        effective.user.name,
        str(effective.user.id),
    )


def _project(
    membership: MembershipRecord, edge: ClosureEdge,
) -> EffectiveMembership:
    if edge.depth == 0:
        return DirectMembership(
            membership_id=membership.id,
            viewing_team_id=edge.ancestor_id,
            user=membership.user,
            role=membership.role,
            is_active=membership.is_active,
            joined_at=membership.joined_at,
            updated_at=membership.updated_at,
        )
    return InheritedMembership(
        viewing_team_id=edge.ancestor_id,
        origin_team_id=edge.descendant_id,
        origin_membership_id=membership.id,
        depth=edge.depth,
        user=membership.user,
        role=membership.role,
        is_active=membership.is_active,
        joined_at=membership.joined_at,
        updated_at=membership.updated_at,
    )


def _index_memberships(
    graph: TeamGraph, memberships: Iterable[MembershipRecord],
) -> dict[TeamId, list[MembershipRecord]]:
    by_team: dict[TeamId, list[MembershipRecord]] = {}
    for m in memberships:
        if m.user is None:
            raise DanglingMembershipError(m.id, m.user_id)
        if m.team_id not in graph:
            raise MalformedHierarchyError(
                f"Membership '{m.id}' references team '{m.team_id}' "
                "which is not in the snapshot",
                [m.team_id],
            )
        by_team.setdefault(m.team_id, []).append(m)
    return by_team


def resolve_memberships(
    graph: TeamGraph,
    closure_edges: Iterable[ClosureEdge],
    memberships: Iterable[MembershipRecord],
) -> dict[TeamId, list[EffectiveMembership]]:
    """Effective member list for every team in the graph (empty list if none)."""
    by_team = _index_memberships(graph, memberships)

    best: dict[tuple[TeamId, UserId], tuple[tuple, MembershipRecord, ClosureEdge]] = {}
    for edge in closure_edges:
        for m in by_team.get(edge.descendant_id, ()):
            group = (edge.ancestor_id, m.user_id)
            key = _winner_key(m, edge.depth)
            current = best.get(group)
            if current is None or key < current[0]:
                best[group] = (key, m, edge)

    resolved: dict[TeamId, list[EffectiveMembership]] = {t.id: [] for t in graph}
    for (team_id, _user_id), (_key, m, edge) in best.items():
        resolved[team_id].append(_project(m, edge))
    for members in resolved.values():
        members.sort(key=_display_key)
    return resolved
