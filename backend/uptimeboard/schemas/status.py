"""Status overview and paged history schemas for the dashboard."""
from typing import List

from pydantic import BaseModel

from .monitor import CheckHistoryEntry, MonitorState


class StatusOverview(BaseModel):
    """Dashboard overview data."""
    total_monitors: int
    monitors_up: int
    monitors_down: int
    monitors_degraded: int
    monitors: List[MonitorState]


class HistoryPage(BaseModel):
    """Paginated check results, newest first."""
    items: List[CheckHistoryEntry]
    total: int
    page: int
    per_page: int
    total_pages: int
