"""Database models."""
from .monitor_state import MonitorStateRecord
from .check_history import CheckHistoryRecord

__all__ = ["MonitorStateRecord", "CheckHistoryRecord"]
