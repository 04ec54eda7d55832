from fastapi import APIRouter, Depends, Request
from sqlmodel import select
from typing import Any

from app.database import SessionDep
from app.models.safe_zone import SafeZone, SafeZoneCreate, SafeZoneRead
from app.models.user import Guardian
from app.api.auth import get_current_guardian

router = APIRouter()

@router.get("")
async def list_safe_zones(
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    result = await db.execute(
        select(SafeZone)
        .where(SafeZone.guardian_id == current_guardian.id)
        .order_by(SafeZone.created_at)
    )
    zones = result.scalars().all()
    return {"safe_zones": [SafeZoneRead.model_validate(z) for z in zones]}

@router.post("")
async def create_safe_zone(
    zone_data: SafeZoneCreate,
    request: Request,
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    zone = SafeZone(
        guardian_id=current_guardian.id,
        name=zone_data.name,
        latitude=zone_data.latitude,
        longitude=zone_data.longitude,
        radius=zone_data.radius or request.app.state.settings.DEFAULT_SAFE_ZONE_RADIUS
    )

    db.add(zone)
    await db.commit()
    await db.refresh(zone)

    return {
        "message": "Safe zone created successfully",
        "zone": SafeZoneRead.model_validate(zone)
    }
