"""User Service — user listing and creation.

Invariants:
    - email unique: concurrent duplicates resolved by the unique constraint
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.core.errors import DuplicateEmailError
from teamboard.core.records import UserRecord
from teamboard.infrastructure.database import violates_unique
from teamboard.models.user import User
from teamboard.schemas.user import UserCreate
from teamboard.services.snapshot import user_record

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self) -> list[UserRecord]:
        result = await self.db.execute(select(User).order_by(User.name, User.id))
        return [user_record(u) for u in result.scalars().all()]

    async def create_user(self, body: UserCreate) -> UserRecord:
        row = User(name=body.name, email=body.email)
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            if violates_unique(e, "uq_users_email", "users"):
                raise DuplicateEmailError(body.email) from None
            raise
        await self.db.commit()
        logger.info("User created", extra={"user_id": row.id})
        return user_record(row)
