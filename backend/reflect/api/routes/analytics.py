"""
Mood analytics API
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from reflect.core.auth import get_current_user_required
from reflect.core.database import get_db
from reflect.models.user import User
from reflect.services.analytics_service import DEFAULT_PERIOD, AnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("")
async def get_analytics(
    period: str = Query(DEFAULT_PERIOD, description="7d, 15d or 30d"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user_required)
):
    """Mood timeline and summary for the current user"""
    try:
        data = AnalyticsService(db, current_user.id).get_analytics(period)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "data": data}
