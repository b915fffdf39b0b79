"""Tests for history aggregation — bucket alignment, escalation, sparsity, ordering."""

from __future__ import annotations

import pytest

from clock import DAY_MS, HOUR_MS, SECOND_MS, T0
from uptimeboard.schemas.monitor import CheckHistoryEntry, Status
from uptimeboard.services.aggregator import (
    HISTORY_RANGES,
    aggregate_entries,
    bucket_index,
    escalate_status,
    resolve_range,
    window_start,
)


def _entry(timestamp: int, status: Status = Status.UP, latency: float = 100, monitor_id: str = "api") -> CheckHistoryEntry:
    return CheckHistoryEntry(
        monitor_id=monitor_id,
        timestamp=timestamp,
        status=status,
        latency=latency,
        message="individual message",
    )


NOW = T0 + 2 * HOUR_MS


# ── Range table ─────────────────────────────────────────────────


class TestRanges:
    @pytest.mark.parametrize(
        ("name", "bucket", "window"),
        [
            ("24h", 3600, 24 * 3600),
            ("7d", 43200, 7 * 24 * 3600),
            ("14d", 86400, 14 * 24 * 3600),
        ],
    )
    def test_parameters(self, name: str, bucket: int, window: int) -> None:
        params = resolve_range(name)
        assert params.bucket_seconds == bucket
        assert params.window_seconds == window

    def test_unknown_range(self) -> None:
        with pytest.raises(ValueError, match="30d"):
            resolve_range("30d")

    def test_window_start(self) -> None:
        assert window_start("7d", NOW) == NOW - 7 * DAY_MS

    def test_only_three_ranges(self) -> None:
        assert set(HISTORY_RANGES) == {"24h", "7d", "14d"}


# ── Escalation ──────────────────────────────────────────────────


class TestEscalation:
    def test_down_beats_up(self) -> None:
        assert escalate_status([Status.UP, Status.DOWN]) is Status.DOWN

    def test_degraded_beats_up(self) -> None:
        assert escalate_status([Status.UP, Status.DEGRADED]) is Status.DEGRADED

    def test_all_up(self) -> None:
        assert escalate_status([Status.UP, Status.UP]) is Status.UP

    def test_down_beats_degraded_regardless_of_order_or_count(self) -> None:
        statuses = [Status.DOWN] + [Status.DEGRADED] * 5
        assert escalate_status(statuses) is Status.DOWN
        assert escalate_status(list(reversed(statuses))) is Status.DOWN

    def test_single_bad_sample_marks_bucket(self) -> None:
        entries = [_entry(T0 + i * SECOND_MS) for i in range(20)]
        entries.append(_entry(T0 + 30 * SECOND_MS, Status.DOWN))
        (bucket,) = aggregate_entries(entries, "24h", NOW)
        assert bucket.status is Status.DOWN


# ── Bucketing ───────────────────────────────────────────────────


class TestBucketing:
    def test_hourly_example(self) -> None:
        entries = [
            _entry(T0, latency=100),
            _entry(T0 + 1000, latency=300),
            _entry(T0 + 3_700_000, latency=80),
        ]
        buckets = aggregate_entries(entries, "24h", NOW)

        assert len(buckets) == 2
        assert buckets[0].timestamp == T0
        assert buckets[0].latency == 200
        assert buckets[1].timestamp == T0 + 3_700_000
        assert buckets[1].latency == 80

    def test_bucket_stamped_with_earliest_sample(self) -> None:
        entries = [_entry(T0 + 50 * SECOND_MS), _entry(T0 + 10 * SECOND_MS), _entry(T0 + 30 * SECOND_MS)]
        (bucket,) = aggregate_entries(entries, "24h", NOW)
        assert bucket.timestamp == T0 + 10 * SECOND_MS

    def test_latency_mean_truncated(self) -> None:
        entries = [_entry(T0, latency=10), _entry(T0 + SECOND_MS, latency=11)]
        (bucket,) = aggregate_entries(entries, "24h", NOW)
        assert bucket.latency == 10
        assert isinstance(bucket.latency, int)

    def test_message_always_none(self) -> None:
        (bucket,) = aggregate_entries([_entry(T0)], "24h", NOW)
        assert bucket.message is None

    def test_epoch_aligned_boundaries(self) -> None:
        # One second on either side of an epoch hour boundary
        boundary = T0 + HOUR_MS
        entries = [_entry(boundary - SECOND_MS), _entry(boundary)]
        buckets = aggregate_entries(entries, "24h", NOW)
        assert [b.timestamp for b in buckets] == [boundary - SECOND_MS, boundary]

    def test_twelve_hour_buckets(self) -> None:
        # T0 is 09:00 UTC, so the 12h bucket [00:00, 12:00) ends 3 hours later
        now = T0 + DAY_MS
        entries = [_entry(T0), _entry(T0 + 2 * HOUR_MS), _entry(T0 + 3 * HOUR_MS)]
        buckets = aggregate_entries(entries, "7d", now)
        assert [b.timestamp for b in buckets] == [T0, T0 + 3 * HOUR_MS]

    def test_daily_buckets(self) -> None:
        now = T0 + 3 * DAY_MS
        # 09:00 and 23:00 share a UTC day, 00:00 next day does not
        entries = [_entry(T0), _entry(T0 + 14 * HOUR_MS), _entry(T0 + 15 * HOUR_MS)]
        buckets = aggregate_entries(entries, "14d", now)
        assert [b.timestamp for b in buckets] == [T0, T0 + 15 * HOUR_MS]

    def test_bucket_index(self) -> None:
        assert bucket_index(T0, 3600) == T0 // 1000 // 3600
        assert bucket_index(T0 + HOUR_MS - 1, 3600) == bucket_index(T0, 3600)


# ── Window and sparsity ─────────────────────────────────────────


class TestWindow:
    def test_entries_before_window_ignored(self) -> None:
        entries = [_entry(NOW - DAY_MS - 1, Status.DOWN), _entry(NOW - DAY_MS)]
        (bucket,) = aggregate_entries(entries, "24h", NOW)
        assert bucket.timestamp == NOW - DAY_MS
        assert bucket.status is Status.UP

    def test_no_entries_no_buckets(self) -> None:
        assert aggregate_entries([], "14d", NOW) == []

    def test_sparse_buckets(self) -> None:
        entries = [_entry(T0), _entry(T0 + 5 * HOUR_MS)]
        buckets = aggregate_entries(entries, "24h", T0 + 6 * HOUR_MS)
        assert len(buckets) == 2

    def test_monitor_without_history_absent(self) -> None:
        entries = [_entry(T0, monitor_id="api"), _entry(NOW - 2 * DAY_MS, monitor_id="old")]
        buckets = aggregate_entries(entries, "24h", NOW)
        assert {b.monitor_id for b in buckets} == {"api"}


# ── Multiple monitors ───────────────────────────────────────────


class TestMonitors:
    def test_monitors_bucketed_separately(self) -> None:
        entries = [
            _entry(T0, Status.DOWN, monitor_id="api"),
            _entry(T0 + SECOND_MS, Status.UP, monitor_id="web"),
        ]
        buckets = aggregate_entries(entries, "24h", NOW)
        statuses = {b.monitor_id: b.status for b in buckets}
        assert statuses == {"api": Status.DOWN, "web": Status.UP}

    def test_output_ascending(self) -> None:
        entries = [
            _entry(T0 + HOUR_MS + 5 * SECOND_MS, monitor_id="web"),
            _entry(T0 + 20 * SECOND_MS, monitor_id="api"),
            _entry(T0 + HOUR_MS, monitor_id="api"),
            _entry(T0 + 10 * SECOND_MS, monitor_id="web"),
        ]
        buckets = aggregate_entries(entries, "24h", NOW)
        timestamps = [b.timestamp for b in buckets]
        assert timestamps == sorted(timestamps)
        assert len(buckets) == 4

    def test_deterministic(self) -> None:
        entries = [_entry(T0 + i * 7 * 60 * SECOND_MS, monitor_id=f"m{i % 3}") for i in range(15)]
        assert aggregate_entries(entries, "24h", NOW) == aggregate_entries(list(reversed(entries)), "24h", NOW)
