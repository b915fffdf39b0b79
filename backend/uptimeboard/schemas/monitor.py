"""Monitor state and history schemas."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Status(str, Enum):
    """Health of a monitor as decided by the check runner."""
    UP = "UP"
    DOWN = "DOWN"
    DEGRADED = "DEGRADED"


class Monitor(BaseModel):
    """A configured target whose health is tracked."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    url: str = ""


class MonitorState(BaseModel):
    """Current state of one monitor (full row, no optional omission)."""
    monitor_id: str
    status: Status
    last_checked_at: int  # epoch ms
    last_latency: float
    fail_count: int = Field(0, ge=0)
    first_fail_time: Optional[int] = None  # epoch ms
    last_error: Optional[str] = None

    class Config:
        from_attributes = True


class CheckHistoryEntry(BaseModel):
    """One immutable check result."""
    monitor_id: str
    timestamp: int  # epoch ms
    status: Status
    latency: float
    message: Optional[str] = None

    class Config:
        from_attributes = True


class AggregatedBucket(BaseModel):
    """Summary of all check results of a monitor inside one time bucket."""
    monitor_id: str
    timestamp: int  # earliest raw timestamp in the bucket
    latency: int  # integer mean of the bucket
    status: Status
    message: None = None


class CheckReport(BaseModel):
    """A raw check result submitted by the external check runner."""
    monitor: Monitor
    status: Status
    latency: float = Field(..., ge=0)
    message: Optional[str] = None
    checked_at: Optional[int] = None  # epoch ms, defaults to now


class CheckOutcome(BaseModel):
    """Result of processing one check report."""
    state: MonitorState
    previous_status: Optional[Status] = None
    changed: bool
    notifications: dict = Field(default_factory=dict)  # channel -> delivered
