"""Epoch-millisecond time helpers."""
import time
from datetime import datetime, timezone


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def from_ms(timestamp_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
