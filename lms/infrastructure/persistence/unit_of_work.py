"""Unit of work over an AsyncSession: commit on success, roll back on error."""

from __future__ import annotations

import logging
from types import TracebackType

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """Transaction boundary shared by the repositories bound to the same session.

    Repositories only flush; the unit of work commits when the ``async with``
    block exits cleanly and rolls back (then re-raises) otherwise. Cache
    invalidation runs after the block, so it never sees an aborted write.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            await self.session.commit()
            return
        logger.warning(
            "Rolling back transaction after %s: %s", exc_type.__name__, exc
        )
        await self.session.rollback()
