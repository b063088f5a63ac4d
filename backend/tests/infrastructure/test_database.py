"""Database session manager — error translation, engine options, health."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from studyfront.core.errors import DatabaseError
from studyfront.infrastructure import database
from studyfront.infrastructure.database import (
    DatabaseSessionManager, engine_options, get_db, translate_db_error,
)


def test_translate_db_error_messages():
    integrity = IntegrityError("INSERT", {}, Exception("dup"))
    operational = OperationalError("SELECT", {}, Exception("gone"))

    assert translate_db_error(integrity, "commit").message == (
        "Database commit failed: Integrity constraint violated"
    )
    assert "operational" in translate_db_error(operational, "execute").message
    generic = translate_db_error(SQLAlchemyError("boom"), "flush")
    assert generic.message == "Database flush failed: Database operation failed"
    assert generic.http_status == 503


def test_engine_options_skip_pool_sizing_for_sqlite():
    assert engine_options("sqlite+aiosqlite:///:memory:", 20, 10) == {}
    options = engine_options("postgresql+asyncpg://u:p@db/studyfront", 5, 2)
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 2
    assert options["pool_pre_ping"] is True


async def test_health_check_against_sqlite():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    try:
        assert await manager.health_check() is True
    finally:
        await manager.dispose()


async def test_session_translates_and_rolls_back():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    try:
        with pytest.raises(DatabaseError) as exc_info:
            async with manager.session("lookup") as db:
                await db.execute(text("SELECT * FROM missing_table"))
        assert exc_info.value.operation == "lookup"
        assert exc_info.value.code == "DATABASE_ERROR"
    finally:
        await manager.dispose()


async def test_get_db_without_init(monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    with pytest.raises(DatabaseError):
        await anext(get_db())
