"""Closure Resolver — ancestor/descendant edges with depth.

Invariants:
    - Self edge at depth 0, one edge per reachable pair at tree distance
    - closure_forest == union of closure_from over every team (acyclic input)
    - Traversals terminate on cyclic snapshots
"""

from uuid import UUID

from teamboard.core.closure import (
    ancestors_of, closure_forest, closure_from, descendants_of, unreachable_teams,
)
from teamboard.core.records import ClosureEdge, TeamRecord
from teamboard.core.team_graph import build_team_graph


def _id(n: int) -> UUID:
    return UUID(int=n)


def _team(n: int, name: str, parent: int | None = None) -> TeamRecord:
    return TeamRecord(id=_id(n), name=name, parent_id=_id(parent) if parent else None)


def _org():
    # Root(1) -> Eng(2) -> Backend(3) -> Payments(4); Root -> Sales(5); Other(6)
    return build_team_graph([
        _team(1, "Root"),
        _team(2, "Eng", 1),
        _team(3, "Backend", 2),
        _team(4, "Payments", 3),
        _team(5, "Sales", 1),
        _team(6, "Other"),
    ])


def test_closure_from_includes_self_and_depths():
    edges = {(e.descendant_id, e.depth) for e in closure_from(_org(), _id(2))}
    assert edges == {(_id(2), 0), (_id(3), 1), (_id(4), 2)}


def test_closure_from_leaf_is_only_self():
    assert closure_from(_org(), _id(4)) == [ClosureEdge(_id(4), _id(4), 0)]


def test_descendants_are_strict():
    assert descendants_of(_org(), _id(1)) == {_id(2), _id(3), _id(4), _id(5)}
    assert descendants_of(_org(), _id(6)) == set()


def test_ancestors_ordered_parent_to_root():
    assert ancestors_of(_org(), _id(4)) == [_id(3), _id(2), _id(1)]
    assert ancestors_of(_org(), _id(1)) == []


def test_closure_forest_matches_per_team_closure():
    graph = _org()
    expected = set()
    for team in graph:
        expected |= set(closure_from(graph, team.id))
    forest = closure_forest(graph)
    assert set(forest) == expected
    assert len(forest) == len(expected)


def test_closure_forest_pair_depth_unique():
    pairs = [(e.ancestor_id, e.descendant_id) for e in closure_forest(_org())]
    assert len(pairs) == len(set(pairs))


def test_unreachable_empty_for_forest():
    assert unreachable_teams(_org()) == []


def test_traversals_terminate_on_cycle():
    # 1 -> 2 -> 3 -> 1, plus a healthy root 4
    graph = build_team_graph([
        _team(1, "A", 3), _team(2, "B", 1), _team(3, "C", 2), _team(4, "Ok"),
    ])
    assert unreachable_teams(graph) == sorted([_id(1), _id(2), _id(3)], key=str)
    assert descendants_of(graph, _id(1)) == {_id(2), _id(3)}
    assert ancestors_of(graph, _id(1)) == [_id(3), _id(2)]
    forest = closure_forest(graph)
    assert ClosureEdge(_id(4), _id(4), 0) in forest
    assert ClosureEdge(_id(1), _id(2), 1) in forest
