"""Exceptions raised by the stores and notification channels."""


class UptimeBoardError(Exception):
    """Base for all UptimeBoard errors."""


class StoreError(UptimeBoardError):
    """A read or write against the backing database failed.

    Always raised with the underlying SQLAlchemy error chained as
    ``__cause__``. Nothing in the stores retries; the caller decides.
    """


class ChannelDeliveryError(UptimeBoardError):
    """A notification channel could not deliver its message."""

    def __init__(self, channel: str, reason: str):
        self.channel = channel
        self.reason = reason
        super().__init__(f"{channel}: {reason}")
