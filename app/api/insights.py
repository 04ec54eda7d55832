from fastapi import APIRouter, Depends
from typing import Any

from app.database import SessionDep
from app.models.user import Guardian
from app.api.auth import get_current_guardian
from app.core.analytics import insight_aggregator

router = APIRouter()

@router.get("")
async def get_insights(
    db: SessionDep,
    current_guardian: Guardian = Depends(get_current_guardian)
) -> dict[str, Any]:
    """Activity summary, safety score and recommendations for the guardian's family."""
    insights = await insight_aggregator.get_insights(db, current_guardian.id)
    return {"insights": insights}
