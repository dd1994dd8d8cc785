"""Valid Parent Finder — every team that CycleGuard would accept as a parent.

Invariants:
    - Result == all teams \\ ({team} ∪ descendants(team))
    - Every returned candidate passes check_parent_assignment (cross-component invariant)
    - Ordered by breadcrumb path: root-first, alphabetic at each level

Design Decisions:
    - Same descendants_of() as cycle_guard: the two can only disagree if they stop
      sharing the closure, which the cross-component tests pin down
"""

from teamboard.core.closure import descendants_of
from teamboard.core.domain_types import TeamId
from teamboard.core.paths import path_sort_key, paths_for
from teamboard.core.records import TeamPath, TeamRecord
from teamboard.core.team_graph import TeamGraph


def valid_parents(
    graph: TeamGraph,
    team_id: TeamId,
    paths: dict[TeamId, TeamPath] | None = None,
) -> list[TeamRecord]:
    """Legal parent candidates for team_id, ordered by breadcrumb."""
    excluded = descendants_of(graph, team_id) | {team_id}
    if paths is None:
        paths = paths_for(graph)
    candidates = [t for t in graph if t.id not in excluded]
    return sorted(candidates, key=lambda t: path_sort_key(paths[t.id]))
