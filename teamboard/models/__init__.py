"""ORM Models — SQLAlchemy declarative models for users, teams and memberships.

Invariants:
    - All models inherit from Base (db/base.py)
    - teams.parent_id is a self-reference; acyclicity is enforced by the core
      CycleGuard under the hierarchy write lock (and by a PostgreSQL trigger)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from teamboard.models.user import User  # noqa: F401
from teamboard.models.team import Team  # noqa: F401
from teamboard.models.team_member import TeamMember  # noqa: F401
