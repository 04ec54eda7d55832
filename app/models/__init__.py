from app.models.user import Guardian
from app.models.family import FamilyMember
from app.models.location import LocationReading
from app.models.safe_zone import SafeZone
from app.models.alert import Alert, AlertKind

__all__ = [
    "Guardian",
    "FamilyMember",
    "LocationReading",
    "SafeZone",
    "Alert",
    "AlertKind",
]
