"""Notification dispatcher - formats status changes and fans them out to channels."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union
from zoneinfo import ZoneInfo

import httpx

from ..config import NotificationConfig
from ..schemas.monitor import Monitor, Status
from .channels import Notification, NotificationChannel, ResendEmailChannel, WebhookChannel

STATUS_ICONS = {
    Status.UP.value: "✅",
    Status.DOWN.value: "🔴",
}
WARNING_ICON = "⚠️"


def format_message(
    monitor: Monitor,
    status: str,
    message: str,
    occurred_at: datetime,
    tz: ZoneInfo,
) -> str:
    """Render the status change text shared by every channel.

    The time is shown in `tz` rather than the host's local time so the
    text is the same wherever the dispatcher runs.
    """
    icon = STATUS_ICONS.get(status, WARNING_ICON)
    local_time = occurred_at.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S %Z")
    lines = [
        f"{icon} **Status Change Notification**",
        "",
        f"📌 **Service**: {monitor.name}",
        f"🆔 **ID**: {monitor.id}",
        f"🔗 **URL**: {monitor.url}",
        f"📊 **Status**: {status}",
        f"📝 **Message**: {message}",
        f"⏰ **Time**: {local_time}",
    ]
    return "\n".join(lines)


class NotificationService:
    """Sends a monitor's status change to every configured channel.

    The caller decides that a transition happened; this service does no
    comparison and no deduplication, so each call sends again. Channels
    run concurrently and a failing channel never affects the others or
    the caller.
    """

    def __init__(
        self,
        config: NotificationConfig,
        channels: Optional[List[NotificationChannel]] = None,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.tz = ZoneInfo(config.timezone)
        if channels is None:
            channels = [
                ResendEmailChannel(config, logger=self.logger, transport=transport),
                WebhookChannel(config, logger=self.logger, transport=transport),
            ]
        self.channels = channels

    def build_notification(
        self,
        monitor: Monitor,
        new_status: Union[Status, str],
        message: str,
        occurred_at: Optional[datetime] = None,
    ) -> Notification:
        status = new_status.value if isinstance(new_status, Status) else str(new_status)
        occurred_at = occurred_at or datetime.now(timezone.utc)
        return Notification(
            monitor=monitor,
            status=status,
            message=message,
            text=format_message(monitor, status, message, occurred_at, self.tz),
            occurred_at=occurred_at,
        )

    async def notify(
        self,
        monitor: Monitor,
        new_status: Union[Status, str],
        message: str,
    ) -> Dict[str, bool]:
        """Deliver a status change. Returns delivered-or-not per channel."""
        notification = self.build_notification(monitor, new_status, message or "")
        self.logger.info(
            f"[Notification] Monitor {monitor.name} ({monitor.id}) changed to {notification.status}"
        )

        results = await asyncio.gather(
            *[channel.send(notification) for channel in self.channels],
            return_exceptions=True,
        )

        outcomes = {}
        for channel, result in zip(self.channels, results):
            if isinstance(result, BaseException):
                self.logger.error(
                    f"[Notification] {channel.name} delivery failed for {monitor.id}: {result}"
                )
                outcomes[channel.name] = False
            else:
                outcomes[channel.name] = bool(result)
        return outcomes
