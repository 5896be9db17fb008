"""Call log repository."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from call_handler.persistence.database import utc_now
from call_handler.persistence.models.call_log import CallLog
from call_handler.persistence.repositories.base import BaseRepository


class PersistenceError(Exception):
    """Raised when a call outcome could not be durably recorded."""


class CallLogRepository(BaseRepository[CallLog]):
    """Repository for CallLog entities."""

    def __init__(self, session: AsyncSession):
        """Initialize call log repository."""
        super().__init__(CallLog, session)

    async def get_by_call_sid(self, call_sid: str) -> CallLog | None:
        """Get call log by JustCall call SID.

        Args:
            call_sid: JustCall call SID

        Returns:
            CallLog entity or None if not found
        """
        stmt = (
            select(CallLog)
            .where(CallLog.call_sid == call_sid)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, record: dict[str, Any]) -> None:
        """Insert a call log, replacing the existing row for the same call SID.

        ``created_at`` of an existing row is kept; every other column is
        overwritten (last write wins).

        Args:
            record: Column values, must include ``call_sid``

        Raises:
            PersistenceError: If the statement or commit fails
        """
        now = utc_now()
        values = {**record, "created_at": now, "updated_at": now}
        update_columns = {key: value for key, value in values.items() if key not in ("call_sid", "created_at")}

        dialect = self.session.get_bind().dialect.name
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        stmt = insert(CallLog).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CallLog.call_sid],
            set_=update_columns,
        )

        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"call_logs upsert failed: {e}") from e
