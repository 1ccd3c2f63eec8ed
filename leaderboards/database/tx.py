# leaderboards/database/tx.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from leaderboards.database.session import Database
from leaderboards.errors import StorageError

T = TypeVar("T")


@asynccontextmanager
async def transactional(session: AsyncSession):
    """
    Safe transactional context for SQLAlchemy 2.x autobegin.

    - If a transaction is already active, use SAVEPOINT (begin_nested)
    - Otherwise, start a new transaction
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield


async def run_in_transaction(db: Database, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """
    Unit of work: fresh session, one transaction, all-or-nothing.
    Commits when `work` returns, rolls back when it raises.
    Database failures (including the commit itself) surface as StorageError.
    """
    try:
        async with db.session() as session:
            async with session.begin():
                return await work(session)
    except SQLAlchemyError as e:
        raise StorageError(f"Transaction rolled back: {e.__class__.__name__}") from e
