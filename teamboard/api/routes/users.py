"""User Routes — list and create users."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.infrastructure.database import get_db
from teamboard.schemas.user import UserCreate, UserResponse
from teamboard.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    return [UserResponse.from_record(u) for u in await UserService(db).list_users()]


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    return UserResponse.from_record(await UserService(db).create_user(body))
