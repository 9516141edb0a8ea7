"""
Database Dependencies for FastAPI Routes

This module provides dependency injection functions for database sessions
and the explicit transaction helper used by multi-statement writes.

Example:
--------
@router.get("/languages")
async def list_languages(db: DBSession):
    result = await db.execute(select(Language))
    return result.scalars().all()

Learning Resources:
- FastAPI Dependencies: https://fastapi.tiangolo.com/tutorial/dependencies/
"""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from app.db.session import get_session


# ================================
# Database Session Dependency
# ================================

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    Each request gets its own session. Changes must be committed
    explicitly (directly or through DBTransaction); anything left
    uncommitted is rolled back when the session closes.

    Yields:
        AsyncSession: Database session for the current request
    """
    async for session in get_session():
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


# ================================
# Testing Helpers
# ================================

def get_db_override(session: AsyncSession) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """
    Create a dependency override that always yields `session`.

    Usage in Tests:
    ---------------
    app.dependency_overrides[get_db] = get_db_override(test_session)
    """
    async def _override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    return _override


# ================================
# Database Transaction Helper
# ================================

class DBTransaction:
    """
    Context manager for all-or-nothing writes.

    Everything executed inside the block commits together on success and
    rolls back together on any exception. The exception propagates.

    The request session usually already has a transaction open (it
    autobegins on the first query, e.g. the ownership lookup), so the
    block joins that transaction and ends it with commit/rollback.

    Usage:
    ------
    async with DBTransaction(db):
        await db.execute(update(PlaylistStory)...)   # shift
        db.add(PlaylistStory(...))                    # write
    # both committed, or neither

    Savepoints:
    -----------
    DBTransaction(db, savepoint=True) wraps the block in a nested
    transaction instead; only the savepoint is rolled back on error and
    the outer transaction stays open.
    """

    def __init__(
        self,
        session: AsyncSession,
        savepoint: bool = False
    ):
        self.session = session
        self.savepoint = savepoint
        self._nested: AsyncSessionTransaction | None = None

    async def __aenter__(self) -> AsyncSession:
        if self.savepoint:
            self._nested = await self.session.begin_nested()
        elif not self.session.in_transaction():
            await self.session.begin()
        return self.session

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self._nested is not None:
            if exc_type is not None:
                await self._nested.rollback()
            else:
                await self._nested.commit()
        elif exc_type is not None:
            await self.session.rollback()
        else:
            await self.session.commit()

        # Return False to propagate exceptions
        return False


__all__ = [
    "get_db",
    "DBSession",
    "get_db_override",
    "DBTransaction",
]
