"""Team ORM — a node of the team forest.

Invariants:
    - parent_id NULL => root team
    - name is non-empty (validated by schemas and by core TeamRecord)
    - Deleting a team is planned by core/team_deletion.py; direct memberships are
      deleted with it by services/team_service.py

Design Decisions:
    - parent_id FK without ON DELETE action: children are handled explicitly by the
      chosen DeletePolicy, never implicitly by the database
    - No ORM relationships: traversal happens in core on an in-memory
      snapshot, not through lazy loads
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from teamboard.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Team(Base):
    __tablename__ = "teams"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id"),
        nullable=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )
