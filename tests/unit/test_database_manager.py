import pytest
from sqlalchemy import inspect

from app.db import async_session
from app.db.async_session import AsyncDatabaseManager


@pytest.mark.asyncio
async def test_manager_creates_tables_and_connects(tmp_path):
    manager = AsyncDatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'fitsphere.db'}")

    await manager.create_tables()

    async with manager.async_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert {"users", "plans"} <= set(tables)
    assert await manager.test_connection() is True

    await manager.close()
    assert manager.async_engine is None


@pytest.mark.asyncio
async def test_session_requires_initialized_manager(tmp_path):
    manager = AsyncDatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'fitsphere.db'}")
    await manager.close()

    with pytest.raises(RuntimeError):
        async for _ in manager.get_async_session():
            pass


@pytest.mark.asyncio
async def test_startup_and_health(monkeypatch, tmp_path):
    manager = AsyncDatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'fitsphere.db'}")
    monkeypatch.setattr(async_session, "_async_db_manager", manager)

    await async_session.startup_async_database()
    health = await async_session.check_async_database_health()
    await async_session.shutdown_async_database()

    assert health["status"] == "healthy"
    assert async_session._async_db_manager is None
