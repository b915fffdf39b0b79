"""Monitor service - records check results and detects status changes."""
import logging
from typing import Optional

from ..schemas.monitor import (
    CheckHistoryEntry,
    CheckOutcome,
    Monitor,
    MonitorState,
    Status,
)
from ..utils.time_utils import now_ms
from .history_store import HistoryStore
from .notifier import NotificationService
from .state_store import StateStore

logger = logging.getLogger(__name__)


def next_state(
    previous: Optional[MonitorState],
    monitor_id: str,
    status: Status,
    latency: float,
    message: Optional[str],
    checked_at: int,
) -> MonitorState:
    """Derive the full new state row, including the fail streak.

    An UP result clears the streak and the error. Any other result
    extends the streak, keeping the time of its first failure.
    """
    if status == Status.UP:
        return MonitorState(
            monitor_id=monitor_id,
            status=status,
            last_checked_at=checked_at,
            last_latency=latency,
            fail_count=0,
            first_fail_time=None,
            last_error=None,
        )

    failing = previous is not None and previous.status != Status.UP
    fail_count = previous.fail_count + 1 if failing else 1
    first_fail_time = previous.first_fail_time if failing else None

    return MonitorState(
        monitor_id=monitor_id,
        status=status,
        last_checked_at=checked_at,
        last_latency=latency,
        fail_count=fail_count,
        first_fail_time=first_fail_time if first_fail_time is not None else checked_at,
        last_error=message,
    )


def status_changed(previous: Optional[MonitorState], status: Status) -> bool:
    """A monitor with no stored state counts as previously UP."""
    previous_status = previous.status if previous else Status.UP
    return previous_status != status


class MonitorService:
    """Applies one check result: state upsert, history append, notification."""

    def __init__(
        self,
        state_store: StateStore,
        history_store: HistoryStore,
        notifier: NotificationService,
        history_on_change_only: bool = False,
    ):
        self.state_store = state_store
        self.history_store = history_store
        self.notifier = notifier
        self.history_on_change_only = history_on_change_only

    async def process_result(
        self,
        monitor: Monitor,
        status: Status,
        latency: float,
        message: Optional[str] = None,
        checked_at: Optional[int] = None,
    ) -> CheckOutcome:
        """Record a check result for `monitor`.

        Store errors propagate to the caller. Notification failures are
        logged by the notifier and never raised.
        """
        checked_at = now_ms() if checked_at is None else checked_at

        previous = await self.state_store.get(monitor.id)
        state = next_state(previous, monitor.id, status, latency, message, checked_at)
        changed = status_changed(previous, status)

        await self.state_store.upsert(state)

        if changed or not self.history_on_change_only:
            await self.history_store.append(CheckHistoryEntry(
                monitor_id=monitor.id,
                timestamp=checked_at,
                status=status,
                latency=latency,
                message=message,
            ))

        notifications = {}
        if changed:
            logger.info(
                f"Monitor {monitor.name} changed "
                f"{previous.status.value if previous else 'NEW'} -> {status.value}"
            )
            notifications = await self.notifier.notify(monitor, status, message or "")
        else:
            logger.debug(f"Monitor {monitor.name}: {status.value} (fail_count={state.fail_count})")

        return CheckOutcome(
            state=state,
            previous_status=previous.status if previous else None,
            changed=changed,
            notifications=notifications,
        )
