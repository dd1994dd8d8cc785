"""Hierarchy Schemas — the annotated team forest returned by GET /teams.

Invariants:
    - Shape mirrors core HierarchyNode: team fields + path + members + children
    - path_text equals the team name for roots (no separator)
    - Built bottom-up with an explicit stack: tree depth is not bounded by the
      interpreter's recursion limit
"""

from pydantic import BaseModel

from teamboard.core.records import HierarchyNode
from teamboard.schemas.membership import EffectiveMemberResponse
from teamboard.schemas.team import TeamResponse


class HierarchyTeam(TeamResponse):
    path: list[str]
    depth: int
    members: list[EffectiveMemberResponse] = []
    children: list["HierarchyTeam"] = []

    @classmethod
    def _from_single(
        cls, node: HierarchyNode, children: list["HierarchyTeam"],
    ) -> "HierarchyTeam":
        team = node.team
        return cls(
            id=team.id, name=team.name, description=team.description,
            department=team.department, parent_id=team.parent_id,
            created_at=team.created_at, updated_at=team.updated_at,
            path_text=node.path.breadcrumb,
            path=list(node.path.names),
            depth=node.path.depth,
            members=[EffectiveMemberResponse.from_effective(m) for m in node.members],
            children=children,
        )

    @classmethod
    def from_node(cls, node: HierarchyNode) -> "HierarchyTeam":
        # pre-order walk; reversed, every child is built before its parent
        order: list[HierarchyNode] = []
        stack = [node]
        while stack:
            current = stack.pop()
            order.append(current)
            stack.extend(current.children)

        built: dict[int, HierarchyTeam] = {}
        for current in reversed(order):
            built[id(current)] = cls._from_single(
                current, [built.pop(id(c)) for c in current.children],
            )
        return built[id(node)]


class HierarchyResponse(BaseModel):
    teams: list[HierarchyTeam] = []
