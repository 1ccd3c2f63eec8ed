from __future__ import annotations

import pytest_asyncio

from leaderboards.database.session import Database


@pytest_asyncio.fixture
async def db(tmp_path):
    # file-backed so every session/connection sees the same database
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await database.init_models()
    try:
        yield database
    finally:
        await database.close()
