# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.event_store import check_connection
from app.services.errors import StoreError
from app.utils.timeutil import utcnow

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    """
    Returns:
    - Backend status
    - Database connectivity
    """
    result = {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
    }

    try:
        check_connection(db)
        result["database"] = "ok"
    except StoreError as e:
        result["database"] = f"error: {e.detail}"
        result["status"] = "degraded"

    return result
