"""Status overview API for dashboard."""
from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_state_store
from ..schemas.monitor import MonitorState, Status
from ..schemas.status import StatusOverview
from ..services.state_store import StateStore

router = APIRouter(prefix="/api/status", tags=["status"])


@router.get("/overview", response_model=StatusOverview)
async def get_status_overview(state_store: StateStore = Depends(get_state_store)):
    """Get the current state of every monitor with per-status counts."""
    states = await state_store.list_all()
    states.sort(key=lambda s: s.monitor_id)

    counts = {status: 0 for status in Status}
    for state in states:
        counts[state.status] += 1

    return StatusOverview(
        total_monitors=len(states),
        monitors_up=counts[Status.UP],
        monitors_down=counts[Status.DOWN],
        monitors_degraded=counts[Status.DEGRADED],
        monitors=states,
    )


@router.get("/monitors/{monitor_id}", response_model=MonitorState)
async def get_monitor_state(monitor_id: str, state_store: StateStore = Depends(get_state_store)):
    """Get the current state of one monitor."""
    state = await state_store.get(monitor_id)
    if not state:
        raise HTTPException(status_code=404, detail="Monitor state not found")
    return state
