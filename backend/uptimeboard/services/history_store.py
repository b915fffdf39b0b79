"""History store - append-only log of check results."""
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import aliased

from ..exceptions import StoreError
from ..models import CheckHistoryRecord
from ..schemas.monitor import AggregatedBucket, CheckHistoryEntry
from ..schemas.status import HistoryPage
from ..utils.time_utils import now_ms
from .aggregator import aggregate_entries, window_start

logger = logging.getLogger(__name__)


class HistoryStore:
    """Appends and queries the check_history table.

    Every read returns entries in ascending chronological order; chart
    consumers rely on it.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def append(self, entry: CheckHistoryEntry) -> None:
        """Insert one entry. Duplicate timestamps are allowed."""
        try:
            async with self._session_factory() as session:
                session.add(CheckHistoryRecord(
                    monitor_id=entry.monitor_id,
                    timestamp=entry.timestamp,
                    status=entry.status.value,
                    latency=entry.latency,
                    message=entry.message,
                ))
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to append history for monitor {entry.monitor_id}") from e

    async def recent(self, monitor_id: str, limit: int = 50) -> List[CheckHistoryEntry]:
        """The `limit` most recent entries of one monitor, oldest first."""
        # Newest first for a bounded scan, reversed before returning
        stmt = (
            select(CheckHistoryRecord)
            .where(CheckHistoryRecord.monitor_id == monitor_id)
            .order_by(CheckHistoryRecord.timestamp.desc(), CheckHistoryRecord.id.desc())
            .limit(limit)
        )
        records = await self._fetch(stmt, f"recent history of monitor {monitor_id}")
        return [CheckHistoryEntry.model_validate(r) for r in reversed(records)]

    async def recent_across_all(self, limit: int = 60) -> List[CheckHistoryEntry]:
        """Up to `limit` newest entries per monitor, merged oldest first.

        The limit applies to each monitor separately; the combined result
        interleaves monitors by timestamp.
        """
        rank = func.row_number().over(
            partition_by=CheckHistoryRecord.monitor_id,
            order_by=(CheckHistoryRecord.timestamp.desc(), CheckHistoryRecord.id.desc()),
        ).label("rn")
        ranked = select(CheckHistoryRecord, rank).subquery()
        entry = aliased(CheckHistoryRecord, ranked)

        stmt = (
            select(entry)
            .where(ranked.c.rn <= limit)
            .order_by(ranked.c.timestamp, ranked.c.id)
        )
        records = await self._fetch(stmt, "recent history across monitors")
        return [CheckHistoryEntry.model_validate(r) for r in records]

    async def since(self, cutoff_ms: int) -> List[CheckHistoryEntry]:
        """All entries with timestamp >= cutoff_ms, oldest first."""
        stmt = (
            select(CheckHistoryRecord)
            .where(CheckHistoryRecord.timestamp >= cutoff_ms)
            .order_by(CheckHistoryRecord.timestamp, CheckHistoryRecord.id)
        )
        records = await self._fetch(stmt, "history window")
        return [CheckHistoryEntry.model_validate(r) for r in records]

    async def page(
        self,
        monitor_id: str,
        page: int = 1,
        per_page: int = 25,
        since_ms: Optional[int] = None,
    ) -> HistoryPage:
        """Paginated check results of one monitor, newest first."""
        conditions = [CheckHistoryRecord.monitor_id == monitor_id]
        if since_ms is not None:
            conditions.append(CheckHistoryRecord.timestamp >= since_ms)

        try:
            async with self._session_factory() as session:
                count_result = await session.execute(
                    select(func.count(CheckHistoryRecord.id)).where(*conditions)
                )
                total = count_result.scalar() or 0

                offset = (page - 1) * per_page
                result = await session.execute(
                    select(CheckHistoryRecord)
                    .where(*conditions)
                    .order_by(CheckHistoryRecord.timestamp.desc(), CheckHistoryRecord.id.desc())
                    .offset(offset)
                    .limit(per_page)
                )
                records = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to page history of monitor {monitor_id}") from e

        total_pages = (total + per_page - 1) // per_page if total > 0 else 1
        return HistoryPage(
            items=[CheckHistoryEntry.model_validate(r) for r in records],
            total=total,
            page=page,
            per_page=per_page,
            total_pages=total_pages,
        )

    async def aggregated(self, range_name: str, now: Optional[int] = None) -> List[AggregatedBucket]:
        """Bucketed history of every monitor for a chart range (24h, 7d, 14d)."""
        now = now_ms() if now is None else now
        entries = await self.since(window_start(range_name, now))
        buckets = aggregate_entries(entries, range_name, now)
        logger.debug(f"Aggregated {len(entries)} entries into {len(buckets)} buckets ({range_name})")
        return buckets

    async def _fetch(self, stmt, what: str) -> list:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read {what}") from e
