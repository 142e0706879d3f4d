# app/routers/bin_events.py
"""
Structured bin events, one row per open/close cycle.
POST /bin-event       — store a cycle summary (opening_number required).
GET  /bin-events      — latest cycles as JSON.
GET  /bin-events/csv  — every cycle as a CSV download.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.bin_event import BinEventCreate, BinEventOut
from app.services import event_store
from app.services.errors import EmptyResultError, StoreError, ValidationError
from app.services.export_service import export_bin_events_csv
from app.utils.params import parse_limit

router = APIRouter()

DATABASE_ERROR = {"error": "Database error"}
CSV_ERROR = {"error": "CSV generation error"}


@router.post("/bin-event", status_code=status.HTTP_201_CREATED, summary="Store a cycle summary")
def create_bin_event(body: Optional[BinEventCreate] = None, db: Session = Depends(get_db)):
    """Only opening_number is required. timestamp defaults to time of receipt (UTC)."""
    body = body or BinEventCreate()
    try:
        event = event_store.insert_bin_event(db, **body.model_dump())
    except ValidationError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={**DATABASE_ERROR, "details": e.detail},
        )
    return {"success": True, "id": event.id, "opening_number": event.opening_number}


@router.get("/bin-events", response_model=list[BinEventOut], summary="List cycles, highest opening first")
def list_bin_events(limit: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return event_store.list_bin_events(db, limit=parse_limit(limit, event_store.DEFAULT_BIN_LIMIT))
    except StoreError:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=DATABASE_ERROR)


@router.get("/bin-events/csv", summary="Download cycles as CSV")
def download_bin_events_csv(db: Session = Depends(get_db)):
    try:
        csv_text = export_bin_events_csv(db)
    except EmptyResultError:
        return PlainTextResponse("No data found", status_code=status.HTTP_404_NOT_FOUND)
    except StoreError:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=CSV_ERROR)
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="structured_events.csv"'},
    )
