"""Pydantic schemas for the stores, services and API."""
from .monitor import (
    Status,
    Monitor,
    MonitorState,
    CheckHistoryEntry,
    AggregatedBucket,
    CheckReport,
    CheckOutcome,
)
from .status import (
    StatusOverview,
    HistoryPage,
)

__all__ = [
    "Status",
    "Monitor",
    "MonitorState",
    "CheckHistoryEntry",
    "AggregatedBucket",
    "CheckReport",
    "CheckOutcome",
    "StatusOverview",
    "HistoryPage",
]
