"""Team Schemas — create/update payloads and team responses.

Invariants:
    - TeamCreate.name / TeamUpdate.name: non-empty after strip
    - TeamUpdate distinguishes "parent_id omitted" (unchanged) from "parent_id: null"
      (become a root) via model_fields_set
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from teamboard.core.domain_types import DeletePolicy
from teamboard.core.records import TeamRecord


def _strip_required(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Team name cannot be empty")
    return v


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    department: str | None = Field(None, max_length=255)
    parent_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_required(v)


class TeamUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    department: str | None = Field(None, max_length=255)
    parent_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return _strip_required(v)

    @property
    def parent_id_provided(self) -> bool:
        return "parent_id" in self.model_fields_set


class TeamResponse(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    department: str | None = None
    parent_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    path_text: str | None = None

    @classmethod
    def from_record(
        cls, team: TeamRecord, path_text: str | None = None,
    ) -> "TeamResponse":
        return cls(
            id=team.id, name=team.name, description=team.description,
            department=team.department, parent_id=team.parent_id,
            created_at=team.created_at, updated_at=team.updated_at,
            path_text=path_text,
        )


class TeamDeleteResponse(BaseModel):
    message: str
    policy: DeletePolicy
    deleted_team_ids: list[UUID]
    reparented: dict[UUID, UUID | None] = {}
