from sqlmodel import SQLModel, Field, Relationship, Column, DateTime
from datetime import datetime, timezone
from typing import List, TYPE_CHECKING
import uuid

from app.models.types import UTCDatetime

if TYPE_CHECKING:
    from app.models.family import FamilyMember

class GuardianBase(SQLModel):
    email: str = Field(unique=True, index=True)
    name: str
    role: str = "guardian"

class Guardian(GuardianBase, table=True):

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    password_hash: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True))
    )

    # Relationships
    family_members: List["FamilyMember"] = Relationship(back_populates="guardian")

class GuardianCreate(SQLModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)

class GuardianRead(GuardianBase):
    id: uuid.UUID
    created_at: UTCDatetime

class LoginRequest(SQLModel):
    email: str
    password: str

class TokenResponse(SQLModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    guardian: GuardianRead
