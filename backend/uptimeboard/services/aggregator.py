"""Aggregation of check history into time buckets for charts.

Buckets are aligned to multiples of the bucket width in epoch seconds,
not to local calendar hours or days. A bucket is stamped with its first
sample, averages its latencies and takes the worst status it contains.
Only buckets that hold at least one sample are produced.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ..schemas.monitor import AggregatedBucket, CheckHistoryEntry, Status


@dataclass(frozen=True)
class AggregationRange:
    """Bucket width and lookback window of a chart range."""
    bucket_seconds: int
    window_seconds: int


HISTORY_RANGES: Dict[str, AggregationRange] = {
    "24h": AggregationRange(bucket_seconds=3600, window_seconds=24 * 3600),
    "7d": AggregationRange(bucket_seconds=12 * 3600, window_seconds=7 * 24 * 3600),
    "14d": AggregationRange(bucket_seconds=24 * 3600, window_seconds=14 * 24 * 3600),
}

# Higher wins when merging a bucket
STATUS_PRIORITY = {
    Status.UP: 0,
    Status.DEGRADED: 1,
    Status.DOWN: 2,
}


def resolve_range(range_name: str) -> AggregationRange:
    """Look up the parameters of a chart range, ValueError if unknown."""
    try:
        return HISTORY_RANGES[range_name]
    except KeyError:
        valid = ", ".join(HISTORY_RANGES)
        raise ValueError(f"Unknown history range '{range_name}' (expected one of: {valid})") from None


def window_start(range_name: str, now_ms: int) -> int:
    """Earliest timestamp (epoch ms) included in the range."""
    return now_ms - resolve_range(range_name).window_seconds * 1000


def bucket_index(timestamp_ms: int, bucket_seconds: int) -> int:
    return timestamp_ms // 1000 // bucket_seconds


def escalate_status(statuses: Iterable[Status]) -> Status:
    """Worst status of a group: DOWN > DEGRADED > UP."""
    worst = Status.UP
    for status in statuses:
        if STATUS_PRIORITY[status] > STATUS_PRIORITY[worst]:
            worst = status
    return worst


def aggregate_entries(
    entries: Iterable[CheckHistoryEntry],
    range_name: str,
    now_ms: int,
) -> List[AggregatedBucket]:
    """Group entries by (monitor, bucket) and summarise each group.

    Entries older than the range window are ignored. The result is
    sorted by bucket timestamp, then monitor id.
    """
    params = resolve_range(range_name)
    cutoff = now_ms - params.window_seconds * 1000

    groups: Dict[Tuple[str, int], List[CheckHistoryEntry]] = {}
    for entry in entries:
        if entry.timestamp < cutoff:
            continue
        key = (entry.monitor_id, bucket_index(entry.timestamp, params.bucket_seconds))
        groups.setdefault(key, []).append(entry)

    buckets = []
    for (monitor_id, _), group in groups.items():
        buckets.append(AggregatedBucket(
            monitor_id=monitor_id,
            timestamp=min(e.timestamp for e in group),
            # Truncates like CAST(AVG(latency) AS INTEGER)
            latency=int(sum(e.latency for e in group) / len(group)),
            status=escalate_status(e.status for e in group),
            message=None,
        ))

    buckets.sort(key=lambda b: (b.timestamp, b.monitor_id))
    return buckets
