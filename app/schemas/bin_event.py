# app/schemas/bin_event.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional


class BinEventFields(BaseModel):
    """Everything the controller reports about one cycle, all optional."""
    timestamp: Optional[datetime] = None

    open_start_time: Optional[datetime] = None
    open_complete_time: Optional[datetime] = None
    close_start_time: Optional[datetime] = None
    close_complete_time: Optional[datetime] = None

    open_duration_s: Optional[float] = None
    close_duration_s: Optional[float] = None
    total_cycle_s: Optional[float] = None

    start_angle_deg: Optional[int] = None
    max_angle_deg: Optional[int] = None
    end_angle_deg: Optional[int] = None
    avg_speed_deg_s: Optional[float] = None

    lora_packets_received: Optional[int] = None
    lora_packets_missed: Optional[int] = None
    avg_distance_cm: Optional[float] = None
    avg_rssi_dbm: Optional[float] = None
    packet_details: Optional[str] = None

    capacitor_voltage_v: Optional[float] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def blank_timestamp_is_missing(cls, v):
        # "" counts as not supplied
        return None if v == "" else v


class BinEventCreate(BinEventFields):
    # Optional here so a missing value gets our 400, not FastAPI's 422
    opening_number: Optional[int] = None


class BinEventOut(BinEventFields):
    id: int
    created_at: Optional[datetime]
    opening_number: int

    class Config:
        from_attributes = True
