"""Check result ingestion endpoint for the external check runner."""
from fastapi import APIRouter, Depends

from ..dependencies import get_monitor_service
from ..schemas.monitor import CheckOutcome, CheckReport
from ..services.monitor_service import MonitorService

router = APIRouter(prefix="/api/checks", tags=["checks"])


@router.post("", response_model=CheckOutcome)
async def report_check(
    report: CheckReport,
    monitor_service: MonitorService = Depends(get_monitor_service),
):
    """Record one check result and notify if the monitor's status changed."""
    return await monitor_service.process_result(
        report.monitor,
        report.status,
        report.latency,
        message=report.message,
        checked_at=report.checked_at,
    )
