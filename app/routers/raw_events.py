# app/routers/raw_events.py
"""
Raw diagnostic events.
POST /raw-event       — store one event from the bin firmware.
GET  /raw-events      — latest events as JSON, optional opening filter.
GET  /raw-events/csv  — every matching event as a CSV download.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.raw_event import RawEventCreate, RawEventOut
from app.services import event_store
from app.services.errors import EmptyResultError, StoreError
from app.services.export_service import export_raw_events_csv
from app.utils.params import parse_limit, parse_optional_int

router = APIRouter()

DATABASE_ERROR = {"error": "Database error"}
CSV_ERROR = {"error": "CSV generation error"}


@router.post("/raw-event", status_code=status.HTTP_201_CREATED, summary="Store a raw event")
def create_raw_event(body: Optional[RawEventCreate] = None, db: Session = Depends(get_db)):
    body = body or RawEventCreate()
    try:
        event = event_store.insert_raw_event(
            db, body.opening_number, body.event_type, body.event_detail, body.raw_value,
        )
    except StoreError:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=DATABASE_ERROR)
    return {"success": True, "id": event.id}


@router.get("/raw-events", response_model=list[RawEventOut], summary="List raw events, newest first")
def list_raw_events(limit: Optional[str] = None, opening_number: Optional[str] = None,
                    db: Session = Depends(get_db)):
    """limit defaults to 1000; an unparseable opening_number means no filter."""
    try:
        return event_store.list_raw_events(
            db,
            limit=parse_limit(limit, event_store.DEFAULT_RAW_LIMIT),
            opening_number=parse_optional_int(opening_number),
        )
    except StoreError:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=DATABASE_ERROR)


@router.get("/raw-events/csv", summary="Download raw events as CSV")
def download_raw_events_csv(opening_number: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        csv_text = export_raw_events_csv(db, parse_optional_int(opening_number))
    except EmptyResultError:
        return PlainTextResponse("No data found", status_code=status.HTTP_404_NOT_FOUND)
    except StoreError:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=CSV_ERROR)
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="raw_events.csv"'},
    )
