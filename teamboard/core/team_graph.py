"""Team Graph — node-indexed view of one team snapshot (id -> parent, children).

Invariants:
    - Pure indexing: building never walks parent chains, so it succeeds and
      terminates even when the snapshot contains a cycle
    - Every parent_id refers to a team in the same snapshot
    - Team ids are unique within a snapshot
    - children_of() and roots are ordered by (name, id): deterministic traversal

Design Decisions:
    - Cycle detection deliberately left to closure/cycle_guard so the guard can
      report a cyclic snapshot explicitly instead of the indexer failing
    - Built per request from the loaded snapshot, never shared across requests
"""

from collections.abc import Iterable, Iterator

from teamboard.core.domain_types import TeamId
from teamboard.core.errors import MalformedHierarchyError, ResourceNotFoundError
from teamboard.core.records import TeamRecord


def _order_key(team: TeamRecord) -> tuple[str, str]:
    return (team.name, str(team.id))


class TeamGraph:
    """Read-only adjacency index over a team snapshot."""

    def __init__(
        self,
        teams: dict[TeamId, TeamRecord],
        children: dict[TeamId, tuple[TeamId, ...]],
        roots: tuple[TeamId, ...],
    ):
        self._teams = teams
        self._children = children
        self._roots = roots

    def __contains__(self, team_id: object) -> bool:
        return team_id in self._teams

    def __len__(self) -> int:
        return len(self._teams)

    def __iter__(self) -> Iterator[TeamRecord]:
        return iter(self._teams.values())

    @property
    def roots(self) -> tuple[TeamId, ...]:
        return self._roots

    def team(self, team_id: TeamId) -> TeamRecord:
        """Return the team or raise ResourceNotFoundError."""
        try:
            return self._teams[team_id]
        except KeyError:
            raise ResourceNotFoundError("Team", str(team_id)) from None

    def parent_of(self, team_id: TeamId) -> TeamId | None:
        return self.team(team_id).parent_id

    def children_of(self, team_id: TeamId) -> tuple[TeamId, ...]:
        return self._children.get(team_id, ())


def build_team_graph(teams: Iterable[TeamRecord]) -> TeamGraph:
    """Index an unordered team collection.

    Raises MalformedHierarchyError on duplicate ids or a parent_id that
    references a team missing from the snapshot.
    """
    by_id: dict[TeamId, TeamRecord] = {}
    for team in teams:
        if team.id in by_id:
            raise MalformedHierarchyError(
                f"Duplicate team id '{team.id}' in snapshot", [team.id],
            )
        by_id[team.id] = team

    dangling = [
        t.id for t in by_id.values()
        if t.parent_id is not None and t.parent_id not in by_id
    ]
    if dangling:
        raise MalformedHierarchyError(
            f"{len(dangling)} team(s) reference a parent that does not exist",
            dangling,
        )

    grouped: dict[TeamId, list[TeamRecord]] = {}
    roots: list[TeamRecord] = []
    for team in by_id.values():
        if team.parent_id is None:
            roots.append(team)
        else:
            grouped.setdefault(team.parent_id, []).append(team)

    children = {
        parent_id: tuple(c.id for c in sorted(kids, key=_order_key))
        for parent_id, kids in grouped.items()
    }
    return TeamGraph(
        by_id, children, tuple(r.id for r in sorted(roots, key=_order_key)),
    )
