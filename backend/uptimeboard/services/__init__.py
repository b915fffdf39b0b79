"""Stores, aggregation, notification and check processing services."""
from .state_store import StateStore
from .history_store import HistoryStore
from .notifier import NotificationService
from .monitor_service import MonitorService

__all__ = ["StateStore", "HistoryStore", "NotificationService", "MonitorService"]
