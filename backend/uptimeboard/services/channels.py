"""Notification channels - Resend email and generic webhook delivery."""
import abc
import html
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import BaseModel

from ..config import NotificationConfig
from ..exceptions import ChannelDeliveryError
from ..schemas.monitor import Monitor


RESEND_API_URL = "https://api.resend.com/emails"

# Seconds before an outbound notification request is abandoned
HTTP_TIMEOUT_SECONDS = 10


class Notification(BaseModel):
    """A formatted status change ready for delivery."""
    monitor: Monitor
    status: str
    message: str
    text: str  # fully formatted message body
    occurred_at: datetime  # aware, UTC


class NotificationChannel(abc.ABC):
    """Base class for notification delivery channels.

    `send` returns True when the message was delivered and False when the
    channel is not configured. Delivery failures raise
    ChannelDeliveryError for the dispatcher to log.
    """

    name = "channel"

    def __init__(
        self,
        config: NotificationConfig,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self._transport = transport

    @abc.abstractmethod
    async def send(self, notification: Notification) -> bool:
        """Deliver a notification."""

    async def _post(self, url: str, payload: dict, headers: Optional[dict] = None) -> httpx.Response:
        """POST a JSON payload, raising ChannelDeliveryError on any failure."""
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ChannelDeliveryError(self.name, f"{type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            raise ChannelDeliveryError(
                self.name,
                f"HTTP {response.status_code}: {response.text[:200]}",
            )
        return response


class ResendEmailChannel(NotificationChannel):
    """Sends the notification as an email through the Resend API."""

    name = "email"

    async def send(self, notification: Notification) -> bool:
        config = self.config
        if not (config.email_api_key and config.email_sender and config.email_recipient):
            self.logger.warning(
                "Resend credentials not configured (RESEND_KEY, RESEND_SEND, RESEND_RECEIVE)"
            )
            return False

        body = html.escape(notification.text, quote=False)
        payload = {
            "from": f"Status Change Notification <{config.email_sender}>",
            "to": [config.email_recipient],
            "subject": f"[{notification.status}] Monitor Alert: {notification.monitor.name}",
            "html": f'<pre style="font-family: sans-serif; white-space: pre-wrap;">{body}</pre>',
        }
        await self._post(
            RESEND_API_URL,
            payload,
            headers={"Authorization": f"Bearer {config.email_api_key}"},
        )
        self.logger.info(f"Resend email sent for {notification.monitor.id}")
        return True


class WebhookChannel(NotificationChannel):
    """POSTs a JSON status change to the operator's callback URL."""

    name = "webhook"

    async def send(self, notification: Notification) -> bool:
        url = self.config.callback_url
        if not url:
            return False

        monitor = notification.monitor
        timestamp = notification.occurred_at.astimezone(timezone.utc)
        payload = {
            "monitor_id": monitor.id,
            "monitor_name": monitor.name,
            "status": notification.status,
            "message": notification.message,
            "timestamp": timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "secret": self.config.callback_secret,
        }
        await self._post(url, payload)
        self.logger.info(f"Webhook sent: {notification.status} for {monitor.id}")
        return True
