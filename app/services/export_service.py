"""
CSV export of the event tables.
Rows are flattened in table column order so the header matches SELECT *.
"""

from typing import Optional

from sqlalchemy.orm import Session

from app.services import event_store
from app.services.errors import EmptyResultError
from app.utils.csv_encoder import to_csv
from app.utils.logger import get_logger

logger = get_logger(__name__)


def row_to_dict(row) -> dict:
    return {col.name: getattr(row, col.name) for col in row.__table__.columns}


def _encode(rows, label: str) -> str:
    if not rows:
        raise EmptyResultError(f"No {label} to export")
    csv_text = to_csv([row_to_dict(r) for r in rows])
    logger.info(f"Exported {label} CSV: {len(rows)} rows")
    return csv_text


def export_raw_events_csv(db: Session, opening_number: Optional[int] = None) -> str:
    rows = event_store.list_raw_events_for_export(db, opening_number)
    return _encode(rows, "raw events")


def export_bin_events_csv(db: Session) -> str:
    rows = event_store.list_bin_events_for_export(db)
    return _encode(rows, "structured events")
