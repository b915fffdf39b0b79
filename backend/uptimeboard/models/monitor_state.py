"""MonitorStateRecord model - current state of each monitor."""
from sqlalchemy import Column, Integer, BigInteger, Float, String

from ..database import Base


class MonitorStateRecord(Base):
    """One row per monitor, replaced wholesale on every upsert."""

    __tablename__ = "monitors_state"

    monitor_id = Column(String, primary_key=True)
    status = Column(String, nullable=False)  # UP, DOWN, DEGRADED
    last_checked_at = Column(BigInteger, nullable=False)  # epoch ms
    last_latency = Column(Float, nullable=False)
    fail_count = Column(Integer, nullable=False, default=0)
    first_fail_time = Column(BigInteger, nullable=True)  # epoch ms, NULL while UP
    last_error = Column(String, nullable=True)
