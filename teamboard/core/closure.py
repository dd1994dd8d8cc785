"""Closure Resolver — transitive ancestor/descendant relation with per-pair depth.

Invariants:
    - Every traversal keeps a visited set keyed by team id: terminates on cyclic input
    - closure_from(g, t) contains exactly one depth-0 edge (t, t)
    - In an acyclic forest each (ancestor, descendant) pair appears once, at its tree distance
    - ancestors_of() is ordered immediate parent -> root

Design Decisions:
    - Iterative BFS/DFS over the adjacency index instead of recursion: no recursion
      limit on deep trees, cycle safety is explicit rather than implied
    - closure_forest() walks each root once carrying the ancestor stack:
      O(sum of depths) for the whole forest. Prefer it over calling closure_from
      per team when closures for many roots are needed
"""

from collections import deque

from teamboard.core.domain_types import TeamId
from teamboard.core.records import ClosureEdge
from teamboard.core.team_graph import TeamGraph


def closure_from(graph: TeamGraph, team_id: TeamId) -> list[ClosureEdge]:
    """All edges rooted at team_id, BFS order, depth = distance in parent edges."""
    graph.team(team_id)
    edges = [ClosureEdge(team_id, team_id, 0)]
    visited = {team_id}
    queue = deque([(team_id, 0)])
    while queue:
        current, depth = queue.popleft()
        for child in graph.children_of(current):
            if child in visited:
                continue
            visited.add(child)
            edges.append(ClosureEdge(team_id, child, depth + 1))
            queue.append((child, depth + 1))
    return edges


def descendants_of(graph: TeamGraph, team_id: TeamId) -> set[TeamId]:
    """Strict descendants (depth > 0) of team_id."""
    return {
        e.descendant_id for e in closure_from(graph, team_id) if e.depth > 0
    }


def ancestors_of(graph: TeamGraph, team_id: TeamId) -> list[TeamId]:
    """Chain from the immediate parent up to the root. Empty for a root.

    On a cyclic snapshot the chain stops before revisiting a team.
    """
    chain: list[TeamId] = []
    visited = {team_id}
    parent = graph.parent_of(team_id)
    while parent is not None and parent not in visited:
        chain.append(parent)
        visited.add(parent)
        parent = graph.parent_of(parent)
    return chain


def unreachable_teams(graph: TeamGraph) -> list[TeamId]:
    """Teams no root reaches — i.e. teams on or below a cycle. Empty for a forest."""
    reached: set[TeamId] = set()
    stack = list(graph.roots)
    while stack:
        current = stack.pop()
        if current in reached:
            continue
        reached.add(current)
        stack.extend(graph.children_of(current))
    return sorted(
        (t.id for t in graph if t.id not in reached), key=str,
    )


def closure_forest(graph: TeamGraph) -> list[ClosureEdge]:
    """Closure edges for every team in the snapshot, including self edges."""
    edges: list[ClosureEdge] = []
    reached: set[TeamId] = set()

    for root in graph.roots:
        # (team, ancestor stack ending at team's parent)
        stack: list[tuple[TeamId, tuple[TeamId, ...]]] = [(root, ())]
        while stack:
            current, ancestors = stack.pop()
            if current in reached:
                continue
            reached.add(current)
            edges.append(ClosureEdge(current, current, 0))
            for distance, ancestor in enumerate(reversed(ancestors), start=1):
                edges.append(ClosureEdge(ancestor, current, distance))
            lineage = ancestors + (current,)
            for child in reversed(graph.children_of(current)):
                stack.append((child, lineage))

    # cyclic leftovers: bounded per-team walks so the function still terminates
    for team_id in unreachable_teams(graph):
        edges.extend(closure_from(graph, team_id))

    return edges
