"""
Raw diagnostic event log table.
Stores every loosely-typed event the bin firmware emits, one row per POST.
"""

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, String, Text, func
from app.database import Base
from app.utils.timeutil import utcnow

# BIGSERIAL on Postgres; SQLite only auto-increments INTEGER PRIMARY KEY
BigId = BigInteger().with_variant(Integer, "sqlite")


class RawEvent(Base):
    __tablename__ = "raw_events"
    __table_args__ = (
        Index("idx_raw_opening", "opening_number"),
        Index("idx_raw_type", "event_type"),
    )

    id = Column(BigId, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    opening_number = Column(Integer)
    event_type = Column(String(50))
    event_detail = Column(String(100))
    raw_value = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    def __repr__(self):
        return f"<RawEvent {self.id} type={self.event_type} opening={self.opening_number}>"
