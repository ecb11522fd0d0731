"""
Prometheus metrics endpoint
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reflect.core.database import get_db
from reflect.core.logging_config import LoggingConfig
from reflect.core.metrics import (active_sessions, get_metrics,
                                  get_metrics_content_type)
from reflect.models.user import Session as UserSession
from reflect.utils.datetime_utils import utc_now

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(db: Session = Depends(get_db)):
    """
    Prometheus metrics endpoint

    Refreshes the active session gauge, then returns every metric in
    Prometheus text format. A database failure leaves the gauge at its last
    value.
    """
    try:
        active_sessions.set(
            db.query(UserSession).filter(UserSession.expires_at > utc_now()).count()
        )
    except SQLAlchemyError as e:
        logger.warning(f"Could not count active sessions: {e}")

    return Response(content=get_metrics(), media_type=get_metrics_content_type())
