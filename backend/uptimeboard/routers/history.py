"""Check history API endpoints."""
from typing import List

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_history_store
from ..schemas.monitor import AggregatedBucket, CheckHistoryEntry
from ..schemas.status import HistoryPage
from ..services.history_store import HistoryStore
from ..utils.time_utils import now_ms

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("/recent", response_model=List[CheckHistoryEntry])
async def get_recent_history(
    limit: int = Query(default=60, ge=1, le=1000),
    history_store: HistoryStore = Depends(get_history_store),
):
    """Latest check results of every monitor, oldest first."""
    return await history_store.recent_across_all(limit)


@router.get("/aggregated", response_model=List[AggregatedBucket])
async def get_aggregated_history(
    range_name: str = Query(default="24h", alias="range", pattern="^(24h|7d|14d)$"),
    history_store: HistoryStore = Depends(get_history_store),
):
    """Bucketed history of every monitor for charting."""
    return await history_store.aggregated(range_name)


@router.get("/{monitor_id}", response_model=List[CheckHistoryEntry])
async def get_monitor_history(
    monitor_id: str,
    limit: int = Query(default=50, ge=1, le=1000),
    history_store: HistoryStore = Depends(get_history_store),
):
    """Latest check results of one monitor, oldest first."""
    return await history_store.recent(monitor_id, limit)


@router.get("/{monitor_id}/results", response_model=HistoryPage)
async def get_monitor_results(
    monitor_id: str,
    hours: int = Query(default=24, ge=1, le=8760),  # Max 1 year
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=25, ge=1, le=100),
    history_store: HistoryStore = Depends(get_history_store),
):
    """Get paginated individual check results for a monitor."""
    since_ms = now_ms() - hours * 3600 * 1000
    return await history_store.page(monitor_id, page=page, per_page=per_page, since_ms=since_ms)
