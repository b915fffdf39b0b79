"""State store - one current-state row per monitor."""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..exceptions import StoreError
from ..models import MonitorStateRecord
from ..schemas.monitor import MonitorState

logger = logging.getLogger(__name__)


class StateStore:
    """Reads and upserts the monitors_state table.

    Upserts replace every column of the row (last writer wins). There is
    no partial update path, so callers must carry forward any value they
    want to keep and pass ``None`` explicitly to clear one.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    async def get(self, monitor_id: str) -> Optional[MonitorState]:
        """Point lookup, None when the monitor has no state yet."""
        try:
            async with self._session_factory() as session:
                record = await session.get(MonitorStateRecord, monitor_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read state for monitor {monitor_id}") from e

        if record is None:
            return None
        return MonitorState.model_validate(record)

    async def upsert(self, state: MonitorState) -> None:
        """Insert the state, or replace all fields of the existing row."""
        values = {
            "monitor_id": state.monitor_id,
            "status": state.status.value,
            "last_checked_at": state.last_checked_at,
            "last_latency": state.last_latency,
            "fail_count": state.fail_count,
            "first_fail_time": state.first_fail_time,
            "last_error": state.last_error,
        }
        try:
            async with self._session_factory() as session:
                stmt = self._insert_statement(session, values)
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to upsert state for monitor {state.monitor_id}") from e

        logger.debug(f"State upserted for {state.monitor_id}: {state.status.value}")

    async def list_all(self) -> List[MonitorState]:
        """Full unordered snapshot of every monitor state."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(MonitorStateRecord))
                records = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError("Failed to list monitor states") from e

        return [MonitorState.model_validate(r) for r in records]

    def _insert_statement(self, session: AsyncSession, values: dict):
        """Build INSERT ... ON CONFLICT DO UPDATE for the session's dialect."""
        dialect = session.get_bind().dialect.name
        insert = pg_insert if dialect == "postgresql" else sqlite_insert

        stmt = insert(MonitorStateRecord).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[MonitorStateRecord.monitor_id],
            set_={
                column: stmt.excluded[column]
                for column in values
                if column != "monitor_id"
            },
        )
