"""
Structured bin event table.
One row per summarised open/close cycle, as reported by the controller
after the lid closes. opening_number is required but not unique.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, Text, func
from app.database import Base
from app.models.raw_event import BigId
from app.utils.timeutil import utcnow


class BinEvent(Base):
    __tablename__ = "bin_events"
    __table_args__ = (
        Index("idx_bin_opening", "opening_number"),
        Index("idx_bin_timestamp", "timestamp"),
    )

    id = Column(BigId, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    opening_number = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True))

    # Cycle phases
    open_start_time = Column(DateTime(timezone=True))
    open_complete_time = Column(DateTime(timezone=True))
    close_start_time = Column(DateTime(timezone=True))
    close_complete_time = Column(DateTime(timezone=True))

    # Durations (seconds)
    open_duration_s = Column(Float)
    close_duration_s = Column(Float)
    total_cycle_s = Column(Float)

    # Lid angle (degrees)
    start_angle_deg = Column(Integer)
    max_angle_deg = Column(Integer)
    end_angle_deg = Column(Integer)
    avg_speed_deg_s = Column(Float)

    # LoRa link
    lora_packets_received = Column(Integer)
    lora_packets_missed = Column(Integer)
    avg_distance_cm = Column(Float)
    avg_rssi_dbm = Column(Float)
    packet_details = Column(Text)

    capacitor_voltage_v = Column(Float)

    def __repr__(self):
        return f"<BinEvent {self.id} opening={self.opening_number}>"
