from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from forecastscore.registry.db import Database

DSN = "postgresql://u:p@localhost:5432/testdb"


def _mock_pool(rows: list[dict] | None, description=(("id",),)) -> tuple[MagicMock, MagicMock, MagicMock]:
    """Pool -> connection -> cursor, each usable with ``async with``."""
    cursor = MagicMock()
    cursor.description = description
    cursor.execute = AsyncMock()
    cursor.fetchall = AsyncMock(return_value=rows or [])
    cursor.__aenter__.return_value = cursor
    cursor.__aexit__.return_value = False

    conn = MagicMock()
    conn.cursor.return_value = cursor
    conn.commit = AsyncMock()
    conn.__aenter__.return_value = conn
    conn.__aexit__.return_value = False

    pool = MagicMock()
    pool.connection.return_value = conn
    pool.close = AsyncMock()
    return pool, conn, cursor


class TestDatabaseInit:
    def test_stores_dsn(self) -> None:
        db = Database(DSN)
        assert db._dsn == DSN

    def test_not_connected_by_default(self) -> None:
        assert Database(DSN)._pool is None


class TestDatabaseConnect:
    @pytest.mark.asyncio
    async def test_opens_pool(self) -> None:
        with patch("forecastscore.registry.db.AsyncConnectionPool") as pool_cls:
            pool_cls.return_value.open = AsyncMock()
            db = Database(DSN, min_size=2, max_size=8)
            await db.connect()

        kwargs = pool_cls.call_args.kwargs
        assert pool_cls.call_args.args == (DSN,)
        assert kwargs["min_size"] == 2
        assert kwargs["max_size"] == 8
        assert kwargs["open"] is False
        pool_cls.return_value.open.assert_awaited_once_with(wait=True)

    @pytest.mark.asyncio
    async def test_close_releases_pool(self) -> None:
        db = Database(DSN)
        pool, _, _ = _mock_pool([])
        db._pool = pool
        await db.close()
        pool.close.assert_awaited_once()
        assert db._pool is None


class TestDatabaseExecute:
    @pytest.mark.asyncio
    async def test_execute_returns_dicts(self) -> None:
        db = Database(DSN)
        db._pool, _, cursor = _mock_pool([{"id": 1, "name": "alpha"}, {"id": 2, "name": "beta"}])

        result = await db.execute("SELECT id, name FROM scoring.forecasts")
        assert result == [{"id": 1, "name": "alpha"}, {"id": 2, "name": "beta"}]
        cursor.execute.assert_awaited_once_with("SELECT id, name FROM scoring.forecasts", None)

    @pytest.mark.asyncio
    async def test_execute_no_results(self) -> None:
        db = Database(DSN)
        db._pool, _, cursor = _mock_pool(None, description=None)

        result = await db.execute("DELETE FROM scoring.predictions WHERE id = %s", ("p1",))
        assert result == []
        cursor.fetchall.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_execute_raises_when_not_connected(self) -> None:
        db = Database(DSN)
        with pytest.raises(RuntimeError, match="not connected"):
            await db.execute("SELECT 1")


class TestRunMigrations:
    @pytest.mark.asyncio
    async def test_applies_only_pending_files(self, tmp_path: Path) -> None:
        (tmp_path / "001_first.sql").write_text("CREATE TABLE a (id INT);")
        (tmp_path / "002_second.sql").write_text("CREATE TABLE b (id INT);")

        db = Database(DSN)
        db._pool, conn, cursor = _mock_pool([{"filename": "001_first.sql"}])

        applied = await db.run_migrations(str(tmp_path))

        assert applied == ["002_second.sql"]
        executed = [c.args[0] for c in cursor.execute.await_args_list]
        assert "CREATE TABLE b (id INT);" in executed
        assert "CREATE TABLE a (id INT);" not in executed
        assert conn.commit.await_count == 2

    def test_ships_initial_schema(self) -> None:
        import forecastscore.registry as registry_pkg

        migrations = Path(registry_pkg.__file__).parent / "migrations"
        sql = (migrations / "001_initial_schema.sql").read_text()
        assert "scoring.predictions" in sql
        assert "UNIQUE (forecast_id, user_id)" in sql
