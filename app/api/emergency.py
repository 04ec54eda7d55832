import logging
import uuid
from fastapi import APIRouter, Depends, Request
from typing import Any

from app.database import SessionDep
from app.models.alert import EmergencyRequest, AlertRead
from app.models.user import Guardian
from app.api.auth import get_current_guardian
from app.core.alerts import alert_recorder

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/emergency/trigger")
async def trigger_emergency_alert(
    db: SessionDep,
    emergency_data: EmergencyRequest,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    alert, actions = await alert_recorder.record_emergency(
        db, current_guardian.id, emergency_data.message
    )

    if emergency_data.location:
        logger.info(
            f"Emergency {alert.id} location: "
            f"{emergency_data.location.latitude}, {emergency_data.location.longitude}"
        )

    return {
        "message": "Emergency alert activated",
        "alert_id": str(alert.id),
        "actions": actions
    }

@router.get("/alerts")
async def get_alerts(
    db: SessionDep,
    request: Request,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, list[AlertRead]]:
    alerts = await alert_recorder.list_alerts(
        db, current_guardian.id, limit=request.app.state.settings.ALERT_LIST_LIMIT
    )
    return {"alerts": alerts}

@router.put("/alerts/{alert_id}/read")
async def mark_alert_read(
    alert_id: uuid.UUID,
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    alert = await alert_recorder.mark_read(db, current_guardian.id, alert_id)
    return {"message": "Alert marked as read", "alert_id": str(alert.id), "is_read": alert.is_read}
