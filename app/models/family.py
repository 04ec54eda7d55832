from sqlmodel import SQLModel, Field, Relationship, Column, DateTime
from datetime import datetime, timezone
from typing import Optional, List, TYPE_CHECKING
import uuid

from app.models.types import UTCDatetime

if TYPE_CHECKING:
    from app.models.user import Guardian
    from app.models.location import LocationReading

class FamilyMemberBase(SQLModel):
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    relationship: Optional[str] = None  # e.g. "mother", "son"
    avatar_url: Optional[str] = None

class FamilyMember(FamilyMemberBase, table=True):

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    guardian_id: uuid.UUID = Field(foreign_key="guardian.id", index=True)
    # Deactivation is soft; members are never deleted
    is_active: bool = True
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True))
    )

    # Relationships
    guardian: Optional["Guardian"] = Relationship(back_populates="family_members")
    locations: List["LocationReading"] = Relationship(back_populates="member")

class FamilyMemberCreate(FamilyMemberBase):
    pass

class FamilyMemberRead(FamilyMemberBase):
    id: uuid.UUID
    guardian_id: uuid.UUID
    is_active: bool
    created_at: UTCDatetime
