from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import Any
import uuid

from app.database import SessionDep
from app.models.family import FamilyMember, FamilyMemberCreate, FamilyMemberRead
from app.models.user import Guardian
from app.api.auth import get_current_guardian
from app.core.exceptions import NotFoundError

router = APIRouter()

async def get_member_for_guardian(
    db: AsyncSession,
    guardian_id: uuid.UUID,
    member_id: uuid.UUID
) -> FamilyMember:
    """Look up an active member; another guardian's member is reported as missing."""
    result = await db.execute(
        select(FamilyMember).where(
            FamilyMember.id == member_id,
            FamilyMember.guardian_id == guardian_id,
            FamilyMember.is_active == True
        )
    )
    member = result.scalar_one_or_none()
    if member is None:
        raise NotFoundError("Family member not found")
    return member

@router.get("")
async def list_family(
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    result = await db.execute(
        select(FamilyMember)
        .where(
            FamilyMember.guardian_id == current_guardian.id,
            FamilyMember.is_active == True
        )
        .order_by(FamilyMember.created_at)
    )
    members = result.scalars().all()
    return {"family": [FamilyMemberRead.model_validate(m) for m in members]}

@router.post("")
async def add_family_member(
    member_data: FamilyMemberCreate,
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    member = FamilyMember(
        guardian_id=current_guardian.id,
        **member_data.model_dump()
    )

    db.add(member)
    await db.commit()
    await db.refresh(member)

    return {
        "message": "Family member added successfully",
        "member": FamilyMemberRead.model_validate(member)
    }

@router.delete("/{member_id}")
async def deactivate_family_member(
    member_id: uuid.UUID,
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, str]:
    member = await get_member_for_guardian(db, current_guardian.id, member_id)

    member.is_active = False
    db.add(member)
    await db.commit()

    return {"message": "Family member deactivated"}
