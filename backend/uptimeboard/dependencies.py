"""Service instances shared by the API routers."""
from .config import settings, get_notification_config
from .database import async_session
from .services import HistoryStore, MonitorService, NotificationService, StateStore

# Global instances
state_store = StateStore(async_session)
history_store = HistoryStore(async_session)
notification_service = NotificationService(get_notification_config())
monitor_service = MonitorService(
    state_store,
    history_store,
    notification_service,
    history_on_change_only=settings.history_on_change_only,
)


def get_state_store() -> StateStore:
    return state_store


def get_history_store() -> HistoryStore:
    return history_store


def get_monitor_service() -> MonitorService:
    return monitor_service
