import logging
import uuid
from typing import List, Optional, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, desc

from app.models.alert import Alert, AlertKind, AlertRead
from app.models.family import FamilyMember
from app.core.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

DEFAULT_EMERGENCY_MESSAGE = "Emergency alert triggered"

# Reported back to the caller only; nothing is actually dispatched
EMERGENCY_ACTIONS: List[str] = [
    "Emergency contacts notified",
    "Location shared with emergency services",
    "Family members alerted"
]

class AlertRecorder:
    """Persists emergency and safe-zone alerts for a guardian."""

    async def _save(self, db: AsyncSession, alert: Alert, error: str = "Failed to create alert") -> Alert:
        db.add(alert)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise StorageError(error) from e
        await db.refresh(alert)
        return alert

    async def record_emergency(
        self,
        db: AsyncSession,
        guardian_id: uuid.UUID,
        message: Optional[str] = None
    ) -> Tuple[Alert, List[str]]:
        alert = Alert(
            guardian_id=guardian_id,
            kind=AlertKind.EMERGENCY,
            message=message or DEFAULT_EMERGENCY_MESSAGE
        )
        alert = await self._save(db, alert)
        logger.info(f"EMERGENCY ALERT {alert.id} for guardian {guardian_id}: {alert.message}")
        return alert, list(EMERGENCY_ACTIONS)

    async def record_zone_exit(
        self,
        db: AsyncSession,
        guardian_id: uuid.UUID,
        member_id: uuid.UUID,
        zone_name: str
    ) -> Alert:
        alert = Alert(
            guardian_id=guardian_id,
            member_id=member_id,
            kind=AlertKind.SAFE_ZONE_EXIT,
            message=f"Family member has left {zone_name} safe zone"
        )
        alert = await self._save(db, alert)
        logger.info(f"Safe zone exit: member {member_id} left {zone_name}")
        return alert

    async def list_alerts(
        self,
        db: AsyncSession,
        guardian_id: uuid.UUID,
        limit: int = 50
    ) -> List[AlertRead]:
        result = await db.execute(
            select(Alert, FamilyMember.name)
            .outerjoin(FamilyMember, Alert.member_id == FamilyMember.id)
            .where(Alert.guardian_id == guardian_id)
            .order_by(desc(Alert.created_at))
            .limit(limit)
        )

        return [
            AlertRead(**alert.model_dump(), member_name=member_name)
            for alert, member_name in result.all()
        ]

    async def mark_read(
        self,
        db: AsyncSession,
        guardian_id: uuid.UUID,
        alert_id: uuid.UUID
    ) -> Alert:
        result = await db.execute(
            select(Alert).where(
                Alert.id == alert_id,
                Alert.guardian_id == guardian_id
            )
        )
        alert = result.scalar_one_or_none()
        if alert is None:
            raise NotFoundError("Alert not found")

        alert.is_read = True
        return await self._save(db, alert, error="Failed to update alert")

alert_recorder = AlertRecorder()
