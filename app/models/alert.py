from sqlmodel import SQLModel, Field, Column, DateTime
from datetime import datetime, timezone
from typing import Optional
from enum import Enum
import uuid

from app.models.types import UTCDatetime

class AlertKind(str, Enum):
    EMERGENCY = "emergency"
    SAFE_ZONE_EXIT = "safe_zone_exit"

class AlertBase(SQLModel):
    kind: AlertKind
    message: str

class Alert(AlertBase, table=True):
    """Append-only alert log entry; only ``is_read`` ever changes."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    guardian_id: uuid.UUID = Field(foreign_key="guardian.id", index=True)
    member_id: Optional[uuid.UUID] = Field(default=None, foreign_key="familymember.id")
    is_read: bool = False
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), index=True)
    )

class AlertRead(AlertBase):
    id: uuid.UUID
    guardian_id: uuid.UUID
    member_id: Optional[uuid.UUID]
    member_name: Optional[str] = None
    is_read: bool
    created_at: UTCDatetime

class Coordinates(SQLModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

class EmergencyRequest(SQLModel):
    message: Optional[str] = None
    location: Optional[Coordinates] = None
