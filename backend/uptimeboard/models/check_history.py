"""CheckHistoryRecord model - append-only log of check results."""
from sqlalchemy import Column, Integer, BigInteger, Float, String, Index

from ..database import Base


class CheckHistoryRecord(Base):
    """A single check result. Rows are never updated or deleted."""

    __tablename__ = "check_history"
    __table_args__ = (
        Index("ix_check_history_monitor_timestamp", "monitor_id", "timestamp"),
    )

    # Row identity only; (monitor_id, timestamp) is not unique
    id = Column(Integer, primary_key=True, autoincrement=True)
    monitor_id = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=False)  # epoch ms
    status = Column(String, nullable=False)
    latency = Column(Float, nullable=False)
    message = Column(String, nullable=True)
