import math
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from app.models.safe_zone import SafeZone
from app.core.alerts import alert_recorder
from app.core.exceptions import StorageError

if TYPE_CHECKING:
    from app.database import Database

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371e3

def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate distance between two points using Haversine formula
    Returns distance in meters
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat/2)**2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon/2)**2
    # Clamp so rounding never pushes sqrt(1 - a) into a domain error
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c

def is_within_zone(latitude: float, longitude: float, zone: SafeZone) -> bool:
    return calculate_distance(latitude, longitude, zone.latitude, zone.longitude) <= zone.radius

@dataclass
class ZoneCheck:
    zone: SafeZone
    distance: float
    inside: bool
    violated: bool

def evaluate_safe_zones(
    latitude: float,
    longitude: float,
    zones: Sequence[SafeZone],
    previous: Optional[Tuple[float, float]] = None,
    edge_triggered: bool = False
) -> List[ZoneCheck]:
    """
    Check a position against every zone of a guardian.

    Level-triggered (default): every position outside a zone is a violation,
    so a member who stays outside re-fires on each update.
    Edge-triggered: a violation is reported only when the previous position
    was inside the zone (or there was no previous position).
    """
    checks = []
    for zone in zones:
        distance = calculate_distance(latitude, longitude, zone.latitude, zone.longitude)
        inside = distance <= zone.radius
        violated = not inside
        if violated and edge_triggered and previous is not None:
            violated = is_within_zone(previous[0], previous[1], zone)
        checks.append(ZoneCheck(zone=zone, distance=distance, inside=inside, violated=violated))
    return checks

async def check_safe_zones(
    database: "Database",
    guardian_id: uuid.UUID,
    member_id: uuid.UUID,
    latitude: float,
    longitude: float,
    previous: Optional[Tuple[float, float]] = None,
    edge_triggered: bool = False
) -> int:
    """
    Background job run after a location update.
    Records one zone-exit alert per violated zone; failures are logged, never raised.
    Returns the number of alerts recorded.
    """
    recorded = 0
    try:
        async with database.session() as db:
            result = await db.execute(
                select(SafeZone).where(SafeZone.guardian_id == guardian_id)
            )
            zones = result.scalars().all()

            checks = evaluate_safe_zones(latitude, longitude, zones, previous, edge_triggered)
            # Read zone fields up front; a rollback after a failed insert expires the loaded rows
            violations = [
                (check.zone.name, check.zone.radius, check.distance)
                for check in checks if check.violated
            ]

            for zone_name, radius, distance in violations:
                # One failed insert must not cost the remaining zones their alerts
                try:
                    await alert_recorder.record_zone_exit(db, guardian_id, member_id, zone_name)
                except (StorageError, SQLAlchemyError):
                    logger.exception(f"Failed to record exit from {zone_name} for member {member_id}")
                    continue
                recorded += 1
                logger.info(
                    f"Member {member_id} is {distance:.0f}m from {zone_name} (radius {radius:.0f}m)"
                )
    except Exception:
        logger.exception(f"Safe zone check failed for member {member_id}")

    return recorded
