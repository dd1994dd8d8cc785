"""User Schemas — user creation and response shapes.

Invariants:
    - UserCreate.name: 1-255 chars after strip
    - UserCreate.email: basic address shape, lower-cased
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from teamboard.core.records import UserRecord

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=320, pattern=EMAIL_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls(
            id=user.id, name=user.name, email=user.email,
            created_at=user.created_at, updated_at=user.updated_at,
        )
