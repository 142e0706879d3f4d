# app/schemas/raw_event.py
from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional


class RawEventCreate(BaseModel):
    opening_number: Optional[int] = None
    event_type: Optional[str] = None
    event_detail: Optional[str] = None
    raw_value: Optional[Any] = None     # string, or a JSON object/array stored as text


class RawEventOut(BaseModel):
    id: int
    timestamp: Optional[datetime]
    opening_number: Optional[int]
    event_type: Optional[str]
    event_detail: Optional[str]
    raw_value: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
