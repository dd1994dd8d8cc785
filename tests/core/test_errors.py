"""Error Hierarchy — codes, HTTP statuses and the REST envelope.

Invariants:
    - Every error is a TeamboardError with a stable code and status
    - Circular reference messages are user-safe (no SQL, no trigger names)
    - Integrity errors are CRITICAL and carry the offending ids
"""

from uuid import uuid4

import pytest

from teamboard.core.errors import (
    CircularReferenceError, DanglingMembershipError, DatabaseError,
    DuplicateEmailError, DuplicateMembershipError, ErrorCategory, ErrorSeverity,
    InvalidParentError, MalformedHierarchyError, ResourceNotFoundError,
    TeamboardError, TeamHasChildrenError,
)


@pytest.mark.parametrize("error,code,status", [
    (CircularReferenceError(uuid4(), uuid4()), "CIRCULAR_REFERENCE", 409),
    (InvalidParentError(uuid4()), "INVALID_PARENT", 400),
    (TeamHasChildrenError(uuid4(), 2), "TEAM_HAS_CHILDREN", 409),
    (DuplicateMembershipError(uuid4(), uuid4()), "DUPLICATE_MEMBERSHIP", 409),
    (DuplicateEmailError("a@b.io"), "DUPLICATE_EMAIL", 409),
    (ResourceNotFoundError("Team", "x"), "RESOURCE_NOT_FOUND", 404),
    (MalformedHierarchyError("broken"), "MALFORMED_HIERARCHY", 500),
    (DanglingMembershipError(uuid4(), uuid4()), "DANGLING_MEMBERSHIP", 500),
    (DatabaseError("down", "execute"), "DATABASE_ERROR", 503),
])
def test_error_codes_and_statuses(error, code, status):
    assert isinstance(error, TeamboardError)
    assert error.code == code
    assert error.http_status == status


def test_circular_reference_message_is_user_safe():
    team, parent = uuid4(), uuid4()
    err = CircularReferenceError(team, parent, "Eng", "Backend")
    assert err.message.startswith(
        "Cannot set parent team: this would create a circular reference",
    )
    assert "'Backend' is a descendant of 'Eng'" in err.message
    assert "trigger" not in err.message.lower()
    assert err.team_id == team
    assert err.proposed_parent_id == parent


def test_self_parent_message():
    tid = uuid4()
    err = CircularReferenceError(tid, tid, "Eng", "Eng")
    assert "cannot be its own parent" in err.message


def test_to_response_envelope():
    team, parent = uuid4(), uuid4()
    body = CircularReferenceError(team, parent).to_response()["error"]
    assert body["code"] == "CIRCULAR_REFERENCE"
    assert body["category"] == ErrorCategory.CONFLICT.value
    assert body["severity"] == ErrorSeverity.ERROR.value
    assert body["context"]["team_id"] == str(team)
    assert body["context"]["parent_id"] == str(parent)
    assert "timestamp" in body


def test_malformed_hierarchy_carries_team_ids():
    ids = [uuid4(), uuid4()]
    err = MalformedHierarchyError("cycle", ids)
    assert err.team_ids == ids
    assert err.severity == ErrorSeverity.CRITICAL
    assert err.context.debug_info == {"team_ids": [str(i) for i in ids]}


def test_dangling_membership_carries_ids():
    mid, uid = uuid4(), uuid4()
    err = DanglingMembershipError(mid, uid)
    assert err.membership_id == mid
    assert err.user_id == uid
    assert err.category == ErrorCategory.DATA_INTEGRITY
