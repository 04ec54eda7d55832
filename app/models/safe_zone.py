from sqlmodel import SQLModel, Field, Column, DateTime
from datetime import datetime, timezone
from typing import Optional
import uuid

from app.models.types import UTCDatetime

class SafeZoneBase(SQLModel):
    name: str = Field(min_length=1)
    latitude: float
    longitude: float
    radius: float = 100  # meters

class SafeZone(SafeZoneBase, table=True):

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    guardian_id: uuid.UUID = Field(foreign_key="guardian.id", index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True))
    )

class SafeZoneCreate(SQLModel):
    name: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    radius: Optional[float] = Field(default=None, gt=0)

class SafeZoneRead(SafeZoneBase):
    id: uuid.UUID
    guardian_id: uuid.UUID
    created_at: UTCDatetime
