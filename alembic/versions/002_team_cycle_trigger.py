"""Storage-level cycle rejection for teams.parent_id (PostgreSQL only).

Revision ID: 002_team_cycle_trigger
Revises: 001_initial
Create Date: 2026-10-18

Second line behind the application CycleGuard: rejects any INSERT/UPDATE whose
new parent_id is the row itself or one of its descendants. The raised message
contains "circular reference"; services/team_service.py maps it to
CircularReferenceError so the function and trigger names never reach users.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002_team_cycle_trigger"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


_FUNCTION = """
CREATE OR REPLACE FUNCTION teams_reject_cycle() RETURNS trigger AS $$
BEGIN
    IF NEW.parent_id IS NULL THEN
        RETURN NEW;
    END IF;
    IF EXISTS (
        WITH RECURSIVE descendants(id) AS (
            SELECT NEW.id
            UNION
            SELECT t.id FROM teams t JOIN descendants d ON t.parent_id = d.id
        )
        SELECT 1 FROM descendants WHERE id = NEW.parent_id
    ) THEN
        RAISE EXCEPTION 'circular reference in team hierarchy'
            USING ERRCODE = 'check_violation';
    END IF;
    RETURN NEW;
END;
$$ LANGUAGE plpgsql;
"""

_TRIGGER = """
CREATE TRIGGER teams_reject_cycle
BEFORE INSERT OR UPDATE OF parent_id ON teams
FOR EACH ROW EXECUTE FUNCTION teams_reject_cycle();
"""


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute(_FUNCTION)
    op.execute(_TRIGGER)


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    op.execute("DROP TRIGGER IF EXISTS teams_reject_cycle ON teams")
    op.execute("DROP FUNCTION IF EXISTS teams_reject_cycle()")
