"""Service integrity mapping — storage-level failures surfaced as domain errors.

Invariants:
    - A cycle rejected by the PostgreSQL trigger during update_team's flush becomes
      CircularReferenceError, without the trigger/function name or SQL text
    - Other DBAPI errors from that flush propagate unchanged
    - Only the (user, team) unique violation becomes DuplicateMembershipError;
      a foreign-key violation (user deleted concurrently) propagates unchanged
    - Only the email unique violation becomes DuplicateEmailError

Design Decisions:
    - flush is replaced on the session instance: SQLite has neither the trigger
      nor enforced foreign keys, so the driver error is injected at the same seam
"""

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from teamboard.core.errors import (
    CircularReferenceError, DuplicateEmailError, DuplicateMembershipError,
)
from teamboard.infrastructure.database import violates_unique
from teamboard.models.team import Team
from teamboard.models.user import User
from teamboard.schemas.membership import MemberCreate
from teamboard.schemas.team import TeamUpdate
from teamboard.schemas.user import UserCreate
from teamboard.services.membership_service import MembershipService
from teamboard.services.team_service import TeamService
from teamboard.services.user_service import UserService

TRIGGER_MESSAGE = (
    "circular reference in team hierarchy\n"
    "CONTEXT: PL/pgSQL function teams_reject_cycle() line 9 at RAISE"
)
FK_MESSAGE = (
    'insert or update on table "team_members" violates foreign key constraint '
    '"team_members_user_id_fkey"'
)
UNIQUE_MEMBER_MESSAGE = (
    'duplicate key value violates unique constraint "uq_team_members_user_team"'
)


def _failing_flush(error):
    async def _flush(*args, **kwargs):
        raise error
    return _flush


@pytest.fixture
async def two_teams(test_db):
    a, b = Team(name="A"), Team(name="B")
    test_db.add_all([a, b])
    await test_db.commit()
    return a, b


@pytest.fixture
async def team_and_user(test_db):
    team, user = Team(name="Engineering"), User(name="Alice", email="alice@example.com")
    test_db.add_all([team, user])
    await test_db.commit()
    return team, user


# --- Team reparent --------------------------------------------------------------

async def test_trigger_cycle_rejection_becomes_circular_reference(
    test_db, two_teams, monkeypatch,
):
    a, b = two_teams
    monkeypatch.setattr(test_db, "flush", _failing_flush(
        DBAPIError("UPDATE teams SET parent_id=?", {}, Exception(TRIGGER_MESSAGE)),
    ))

    with pytest.raises(CircularReferenceError) as exc:
        await TeamService(test_db).update_team(a.id, TeamUpdate(parent_id=b.id))

    assert exc.value.team_id == a.id
    assert exc.value.proposed_parent_id == b.id
    assert "teams_reject_cycle" not in exc.value.message
    assert "PL/pgSQL" not in exc.value.message
    assert exc.value.__cause__ is None


async def test_other_flush_error_on_reparent_propagates(
    test_db, two_teams, monkeypatch,
):
    a, b = two_teams
    error = DBAPIError("UPDATE teams", {}, Exception("deadlock detected"))
    monkeypatch.setattr(test_db, "flush", _failing_flush(error))

    with pytest.raises(DBAPIError) as exc:
        await TeamService(test_db).update_team(a.id, TeamUpdate(parent_id=b.id))
    assert exc.value is error


# --- Memberships ----------------------------------------------------------------

async def test_unique_violation_on_add_member_is_duplicate(
    test_db, team_and_user, monkeypatch,
):
    team, user = team_and_user
    monkeypatch.setattr(test_db, "flush", _failing_flush(
        IntegrityError("INSERT INTO team_members", {}, Exception(UNIQUE_MEMBER_MESSAGE)),
    ))

    with pytest.raises(DuplicateMembershipError):
        await MembershipService(test_db).add_member(team.id, MemberCreate(user_id=user.id))


async def test_foreign_key_violation_on_add_member_propagates(
    test_db, team_and_user, monkeypatch,
):
    team, user = team_and_user
    error = IntegrityError("INSERT INTO team_members", {}, Exception(FK_MESSAGE))
    monkeypatch.setattr(test_db, "flush", _failing_flush(error))

    with pytest.raises(IntegrityError) as exc:
        await MembershipService(test_db).add_member(team.id, MemberCreate(user_id=user.id))
    assert exc.value is error


# --- Users ----------------------------------------------------------------------

async def test_non_email_integrity_error_on_create_user_propagates(test_db, monkeypatch):
    error = IntegrityError("INSERT INTO users", {}, Exception('null value in column "name"'))
    monkeypatch.setattr(test_db, "flush", _failing_flush(error))

    with pytest.raises(IntegrityError):
        await UserService(test_db).create_user(UserCreate(name="Bob", email="bob@example.com"))


async def test_email_unique_violation_is_duplicate_email(test_db, monkeypatch):
    monkeypatch.setattr(test_db, "flush", _failing_flush(IntegrityError(
        "INSERT INTO users", {},
        Exception('duplicate key value violates unique constraint "uq_users_email"'),
    )))

    with pytest.raises(DuplicateEmailError):
        await UserService(test_db).create_user(UserCreate(name="Bob", email="bob@example.com"))


# --- Constraint matching --------------------------------------------------------

@pytest.mark.parametrize("message,expected", [
    (UNIQUE_MEMBER_MESSAGE, True),
    ("UNIQUE constraint failed: team_members.user_id, team_members.team_id", True),
    ("UNIQUE constraint failed: users.email", False),
    (FK_MESSAGE, False),
    ("FOREIGN KEY constraint failed", False),
])
def test_violates_unique(message, expected):
    error = IntegrityError("INSERT", {}, Exception(message))
    assert violates_unique(error, "uq_team_members_user_team", "team_members") is expected
