import math
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func

from app.models.family import FamilyMember
from app.models.location import LocationReading
from app.models.types import as_utc

# Illustrative only; these are not derived from any stored data
PREDICTIONS: List[str] = [
    "Dad usually arrives home between 6:30-7:00 PM",
    "Mom's shopping trips typically last 45-60 minutes",
    "Family dinner time prediction: 7:30-8:00 PM",
    "Weekend family outing likely on Saturday afternoon"
]

ALL_SAFE_MESSAGE = "All family members are safe and systems are optimal"

@dataclass
class MemberActivity:
    member_id: uuid.UUID
    name: str
    location_updates: int
    avg_battery: Optional[float]
    last_seen: Optional[datetime]

    @property
    def has_data(self) -> bool:
        return self.location_updates > 0 and self.last_seen is not None

    def hours_since_seen(self, now: datetime) -> float:
        return (now - self.last_seen).total_seconds() / 3600

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def calculate_member_score(activity: MemberActivity, now: datetime) -> int:
    score = 100

    # Deduct points for low battery
    if activity.avg_battery is not None:
        if activity.avg_battery < 20:
            score -= 20
        elif activity.avg_battery < 50:
            score -= 10

    # Deduct points for inactivity
    hours_ago = activity.hours_since_seen(now)
    if hours_ago > 12:
        score -= 30
    elif hours_ago > 6:
        score -= 15

    return score

def calculate_safety_score(activities: Sequence[MemberActivity], now: datetime) -> int:
    """Mean of per-member scores over members that have reported at least once."""
    scored = [calculate_member_score(a, now) for a in activities if a.has_data]
    if not scored:
        return 0
    return _round_half_up(sum(scored) / len(scored))

def generate_recommendations(activities: Sequence[MemberActivity], now: datetime) -> List[str]:
    recommendations = []

    for activity in activities:
        if not activity.has_data:
            continue

        if activity.avg_battery is not None and activity.avg_battery < 30:
            recommendations.append(f"Remind {activity.name} to charge their phone")

        hours_ago = activity.hours_since_seen(now)
        if hours_ago > 8:
            recommendations.append(
                f"Check in with {activity.name} - last location update was "
                f"{_round_half_up(hours_ago)} hours ago"
            )

    if not recommendations:
        recommendations.append(ALL_SAFE_MESSAGE)

    return recommendations

class InsightAggregator:
    """Builds the guardian-facing insights summary from stored location history."""

    async def get_member_activity(
        self,
        db: AsyncSession,
        guardian_id: uuid.UUID
    ) -> List[MemberActivity]:
        result = await db.execute(
            select(
                FamilyMember.id,
                FamilyMember.name,
                func.count(LocationReading.id),
                func.avg(LocationReading.battery_level),
                func.max(LocationReading.timestamp)
            )
            .outerjoin(LocationReading, LocationReading.member_id == FamilyMember.id)
            .where(
                FamilyMember.guardian_id == guardian_id,
                FamilyMember.is_active == True
            )
            .group_by(FamilyMember.id, FamilyMember.name)
            .order_by(FamilyMember.name)
        )

        return [
            MemberActivity(
                member_id=member_id,
                name=name,
                location_updates=count or 0,
                avg_battery=float(avg_battery) if avg_battery is not None else None,
                last_seen=as_utc(last_seen)
            )
            for member_id, name, count, avg_battery, last_seen in result.all()
        ]

    async def get_insights(
        self,
        db: AsyncSession,
        guardian_id: uuid.UUID,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        now = now or datetime.now(timezone.utc)
        activities = await self.get_member_activity(db, guardian_id)

        return {
            "family_activity": [
                {**asdict(a), "member_id": str(a.member_id)} for a in activities
            ],
            "safety_score": calculate_safety_score(activities, now),
            "predictions": list(PREDICTIONS),
            "recommendations": generate_recommendations(activities, now)
        }

insight_aggregator = InsightAggregator()
