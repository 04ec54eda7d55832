from sqlmodel import SQLModel, Field, Relationship, Column, DateTime
from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING
import uuid

from app.models.types import UTCDatetime

if TYPE_CHECKING:
    from app.models.family import FamilyMember

class LocationReadingBase(SQLModel):
    latitude: float
    longitude: float
    address: Optional[str] = None
    battery_level: Optional[int] = None  # percent, 0-100

class LocationReading(LocationReadingBase, table=True):
    """Append-only GPS ping; a member's current location is its newest reading."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    member_id: uuid.UUID = Field(foreign_key="familymember.id", index=True)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), index=True)
    )

    # Relationships
    member: Optional["FamilyMember"] = Relationship(back_populates="locations")

class LocationReadingCreate(SQLModel):
    member_id: uuid.UUID
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = None
    battery_level: Optional[int] = Field(default=None, ge=0, le=100)

class CurrentLocationResponse(SQLModel):
    member_id: uuid.UUID
    name: str
    relationship: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    battery_level: Optional[int] = None
    timestamp: Optional[UTCDatetime] = None
