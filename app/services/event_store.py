"""
Query layer over raw_events and bin_events.
Every function takes the request's Session explicitly and only ever binds
values as parameters. Driver failures are rolled back and re-raised as StoreError.
"""

import json
from typing import Any, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.bin_event import BinEvent
from app.models.raw_event import RawEvent
from app.services.errors import StoreError, ValidationError
from app.utils.logger import get_logger
from app.utils.timeutil import to_utc, utcnow

logger = get_logger(__name__)

DEFAULT_RAW_LIMIT = 1000
DEFAULT_BIN_LIMIT = 100
EMPTY_RAW_VALUE = "{}"

_BIN_DATETIME_FIELDS = (
    "open_start_time",
    "open_complete_time",
    "close_start_time",
    "close_complete_time",
)


def _raw_value_text(raw_value: Any) -> str:
    if raw_value is None or raw_value == "":
        return EMPTY_RAW_VALUE
    if isinstance(raw_value, str):
        return raw_value
    # Firmware sometimes sends the payload as a JSON object rather than a string
    return json.dumps(raw_value, separators=(",", ":"))


def _save(db: Session, row):
    try:
        db.add(row)
        db.commit()
        db.refresh(row)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Insert into {row.__tablename__} failed: {e}", exc_info=True)
        raise StoreError(str(e)) from e
    return row


def _fetch(db: Session, query, what: str) -> list:
    try:
        return query.all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Query on {what} failed: {e}", exc_info=True)
        raise StoreError(str(e)) from e


def insert_raw_event(db: Session, opening_number: Optional[int], event_type: Optional[str],
                     event_detail: Optional[str], raw_value: Any = None) -> RawEvent:
    """Persist one raw event. Empty or missing raw_value is stored as '{}'."""
    return _save(db, RawEvent(
        opening_number=opening_number,
        event_type=event_type,
        event_detail=event_detail,
        raw_value=_raw_value_text(raw_value),
    ))


def insert_bin_event(db: Session, opening_number: Optional[int] = None, timestamp=None,
                     **metrics) -> BinEvent:
    """
    Persist one structured cycle summary.
    opening_number is checked before the session is touched; timestamp
    defaults to the time of receipt. Datetimes are normalised to UTC.
    """
    if opening_number is None:
        raise ValidationError("opening_number is required")

    for name in _BIN_DATETIME_FIELDS:
        if name in metrics:
            metrics[name] = to_utc(metrics[name])

    event = _save(db, BinEvent(
        opening_number=opening_number,
        timestamp=to_utc(timestamp) or utcnow(),
        **metrics,
    ))
    logger.info(f"Saved opening #{opening_number}, ID: {event.id}")
    return event


def list_raw_events(db: Session, limit: int = DEFAULT_RAW_LIMIT,
                    opening_number: Optional[int] = None) -> List[RawEvent]:
    """Most recent raw events first, optionally for one opening."""
    q = db.query(RawEvent)
    if opening_number is not None:
        q = q.filter(RawEvent.opening_number == opening_number)
    q = q.order_by(RawEvent.timestamp.desc(), RawEvent.id.desc()).limit(limit)
    return _fetch(db, q, "raw_events")


def list_bin_events(db: Session, limit: int = DEFAULT_BIN_LIMIT) -> List[BinEvent]:
    """Highest opening numbers first."""
    q = db.query(BinEvent).order_by(BinEvent.opening_number.desc(), BinEvent.id.desc()).limit(limit)
    return _fetch(db, q, "bin_events")


def list_raw_events_for_export(db: Session, opening_number: Optional[int] = None) -> List[RawEvent]:
    """Every matching raw event, oldest first."""
    q = db.query(RawEvent)
    if opening_number is not None:
        q = q.filter(RawEvent.opening_number == opening_number)
    q = q.order_by(RawEvent.timestamp.asc(), RawEvent.id.asc())
    return _fetch(db, q, "raw_events")


def list_bin_events_for_export(db: Session) -> List[BinEvent]:
    """Every bin event, lowest opening number first."""
    q = db.query(BinEvent).order_by(BinEvent.opening_number.asc(), BinEvent.id.asc())
    return _fetch(db, q, "bin_events")


def check_connection(db: Session) -> None:
    """Round-trip a trivial query. Raises StoreError if the database is unreachable."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreError(str(e)) from e
