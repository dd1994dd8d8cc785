"""Cycle Guard — decides whether assigning a parent keeps the hierarchy a forest.

Invariants:
    - PURE: no IO, no side effects; the graph is the pre-write snapshot
    - Rules applied in order:
        1. parent == team            -> reject (self-parenting)
        2. parent is None            -> accept (team becomes a root)
        3. parent in descendants(team) -> reject (would close a cycle)
        4. otherwise                 -> accept
    - Rejection is always CircularReferenceError with a user-safe message
    - Must run inside the same transaction as the parent-pointer write (see
      services/team_service.py); a check against a stale snapshot is a bug

Design Decisions:
    - check_* returns the error (or None) and guard_* raises it, mirroring the
      enforce_* convention: callers that collect problems use check, mutation paths use guard
    - Unknown proposed parent is InvalidParentError, not a cycle: different fix for the user
"""

from teamboard.core.closure import descendants_of
from teamboard.core.domain_types import TeamId
from teamboard.core.errors import CircularReferenceError, InvalidParentError
from teamboard.core.team_graph import TeamGraph


def check_parent_assignment(
    graph: TeamGraph, team_id: TeamId, proposed_parent_id: TeamId | None,
) -> CircularReferenceError | None:
    """Return CircularReferenceError if the assignment would form a cycle, else None."""
    team = graph.team(team_id)

    if proposed_parent_id == team_id:
        return CircularReferenceError(team_id, proposed_parent_id, team.name, team.name)

    if proposed_parent_id is None:
        return None

    if proposed_parent_id not in graph:
        raise InvalidParentError(proposed_parent_id)

    if proposed_parent_id in descendants_of(graph, team_id):
        return CircularReferenceError(
            team_id, proposed_parent_id,
            team.name, graph.team(proposed_parent_id).name,
        )
    return None


def guard_parent_assignment(
    graph: TeamGraph, team_id: TeamId, proposed_parent_id: TeamId | None,
) -> None:
    """Raise CircularReferenceError if the assignment would form a cycle."""
    error = check_parent_assignment(graph, team_id, proposed_parent_id)
    if error is not None:
        raise error


def check_new_team_parent(
    graph: TeamGraph, proposed_parent_id: TeamId | None,
) -> None:
    """A new team has no descendants, so only parent existence can fail."""
    if proposed_parent_id is not None and proposed_parent_id not in graph:
        raise InvalidParentError(proposed_parent_id)
