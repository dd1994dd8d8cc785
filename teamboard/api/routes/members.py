"""Member Routes — update/remove a direct membership by its id.

Invariants:
    - Only direct membership ids resolve; inherited projections have no id,
      so they can never be mutated through these routes
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamboard.infrastructure.database import get_db
from teamboard.schemas.membership import MemberResponse, MemberUpdate
from teamboard.services.membership_service import MembershipService

router = APIRouter(prefix="/api/v1/members", tags=["members"])


@router.put("/{membership_id}", response_model=MemberResponse)
async def update_member(
    membership_id: UUID, body: MemberUpdate, db: AsyncSession = Depends(get_db),
):
    member = await MembershipService(db).update_member(membership_id, body)
    return MemberResponse.from_record(member)


@router.delete("/{membership_id}")
async def remove_member(membership_id: UUID, db: AsyncSession = Depends(get_db)):
    await MembershipService(db).remove_member(membership_id)
    return {"message": "Team member removed successfully"}
