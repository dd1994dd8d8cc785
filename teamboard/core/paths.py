"""Path Builder — root-to-team breadcrumbs for every team in one top-down pass.

Invariants:
    - A root's path is (root.name,) and its breadcrumb is exactly its name
    - A child's path is its parent's path + (child.name,)
    - O(teams) path extensions for the whole forest — parent chains are never recomputed
    - Teams no root reaches (cycle) raise MalformedHierarchyError; never silently omitted

Design Decisions:
    - Breadth-first from roots: a parent's path always exists before its children are visited
"""

from collections import deque

from teamboard.core.closure import unreachable_teams
from teamboard.core.domain_types import TeamId
from teamboard.core.errors import MalformedHierarchyError
from teamboard.core.records import TeamPath
from teamboard.core.team_graph import TeamGraph


def paths_for(graph: TeamGraph) -> dict[TeamId, TeamPath]:
    """Compute the TeamPath of every team."""
    stranded = unreachable_teams(graph)
    if stranded:
        raise MalformedHierarchyError(
            f"Team hierarchy contains a cycle involving {len(stranded)} team(s)",
            stranded,
        )

    paths: dict[TeamId, TeamPath] = {}
    queue: deque[TeamId] = deque()
    for root_id in graph.roots:
        paths[root_id] = TeamPath(root_id, (graph.team(root_id).name,))
        queue.append(root_id)

    while queue:
        current = queue.popleft()
        chain = paths[current].names
        for child in graph.children_of(current):
            paths[child] = TeamPath(child, chain + (graph.team(child).name,))
            queue.append(child)
    return paths


def path_sort_key(path: TeamPath) -> tuple[tuple[str, ...], str]:
    """Root-first, alphabetic at each level; team id breaks ties between namesakes."""
    return (path.names, str(path.team_id))
