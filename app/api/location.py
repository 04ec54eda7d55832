from fastapi import APIRouter, Depends, BackgroundTasks, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, desc
from typing import List, Any, Optional, Tuple
import uuid

from app.database import SessionDep
from app.models.family import FamilyMember
from app.models.location import LocationReading, LocationReadingCreate, CurrentLocationResponse
from app.models.user import Guardian
from app.api.auth import get_current_guardian
from app.api.family import get_member_for_guardian
from app.core.exceptions import StorageError
from app.core.geofencing import check_safe_zones

router = APIRouter()

async def get_latest_reading(db: AsyncSession, member_id: uuid.UUID) -> Optional[LocationReading]:
    result = await db.execute(
        select(LocationReading)
        .where(LocationReading.member_id == member_id)
        .order_by(desc(LocationReading.timestamp))
        .limit(1)
    )
    return result.scalar_one_or_none()

@router.post("/update")
async def update_location(
    db: SessionDep,
    request: Request,
    location_data: LocationReadingCreate,
    background_tasks: BackgroundTasks,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    member = await get_member_for_guardian(db, current_guardian.id, location_data.member_id)
    settings = request.app.state.settings

    # Edge-triggered checks compare against where the member was last seen.
    # Not serialized: two concurrent updates for one member can see the same previous reading.
    previous: Optional[Tuple[float, float]] = None
    if settings.GEOFENCE_EDGE_TRIGGERED:
        latest = await get_latest_reading(db, member.id)
        if latest is not None:
            previous = (latest.latitude, latest.longitude)

    reading = LocationReading(**location_data.model_dump())
    db.add(reading)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        raise StorageError("Failed to update location") from e

    # Zone check runs after the response; its outcome is not reported here
    background_tasks.add_task(
        check_safe_zones,
        request.app.state.db,
        guardian_id=current_guardian.id,
        member_id=member.id,
        latitude=location_data.latitude,
        longitude=location_data.longitude,
        previous=previous,
        edge_triggered=settings.GEOFENCE_EDGE_TRIGGERED
    )

    return {"message": "Location updated successfully"}

@router.get("/current")
async def get_current_locations(
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, List[CurrentLocationResponse]]:
    members_result = await db.execute(
        select(FamilyMember)
        .where(
            FamilyMember.guardian_id == current_guardian.id,
            FamilyMember.is_active == True
        )
        .order_by(FamilyMember.created_at)
    )
    members = members_result.scalars().all()

    locations: list[CurrentLocationResponse] = []
    for member in members:
        latest = await get_latest_reading(db, member.id)
        reading = {}
        if latest:
            reading = latest.model_dump(
                include={"latitude", "longitude", "address", "battery_level", "timestamp"}
            )
        locations.append(CurrentLocationResponse(
            member_id=member.id,
            name=member.name,
            relationship=member.relationship,
            **reading
        ))

    return {"locations": locations}
