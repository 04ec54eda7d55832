from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from pydantic import AfterValidator

def as_utc(value: Any) -> Optional[datetime]:
    """SQLite hands back naive datetimes (or strings from aggregates); treat them as UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value

# Datetime that always serializes with an explicit UTC offset
UTCDatetime = Annotated[datetime, AfterValidator(as_utc)]
