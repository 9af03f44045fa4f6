"""Unit tests for DatabaseManager and token cleanup runs."""

from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import text

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.database import DatabaseManager, init_database
from inkpost.infrastructure.persistence.models import UserModel
from inkpost.infrastructure.persistence.repositories import TokenStore
from inkpost.infrastructure.services.token_cleanup import purge_tokens


@pytest_asyncio.fixture
async def file_db(tmp_path, settings):
    """A DatabaseManager backed by a SQLite file in a nested directory."""
    db_settings = settings.model_copy(
        update={
            "environment": "development",
            "database_url": f"sqlite+aiosqlite:///{tmp_path}/nested/inkpost.db",
        }
    )
    db = DatabaseManager(db_settings)
    yield db
    await db.disconnect()


class TestDatabaseManager:
    async def test_init_creates_directory_and_tables(self, file_db, tmp_path):
        await init_database(file_db)

        assert (tmp_path / "nested" / "inkpost.db").exists()
        async with file_db.session() as session:
            tables = await session.execute(
                text("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
            )
            assert set(tables.scalars()) >= {
                "users",
                "refresh_tokens",
                "password_reset_tokens",
                "email_verification_tokens",
            }

    async def test_foreign_keys_enforced(self, file_db):
        await init_database(file_db)

        async with file_db.engine.connect() as conn:
            result = await conn.execute(text("PRAGMA foreign_keys"))
            assert result.scalar() == 1

    async def test_session_rolls_back_on_error(self, file_db):
        await init_database(file_db)

        with pytest.raises(RuntimeError):
            async with file_db.session() as session:
                session.add(UserModel(email="a@example.com", username="a", password_hash="x"))
                await session.flush()
                raise RuntimeError("boom")

        async with file_db.session() as session:
            count = await session.execute(text("SELECT COUNT(*) FROM users"))
            assert count.scalar() == 0

    async def test_check_connection_failure(self, settings, tmp_path):
        db = DatabaseManager(
            settings.model_copy(
                update={"database_url": f"sqlite+aiosqlite:///{tmp_path}/missing/dir/x.db"}
            )
        )

        assert await db.check_connection() is False
        await db.disconnect()


class TestPurgeTokens:
    async def test_purge_commits_in_own_session(self, file_db):
        await init_database(file_db)
        async with file_db.session() as session:
            user = UserModel(email="a@example.com", username="a", password_hash="x")
            session.add(user)
            await session.flush()
            await TokenStore(session).refresh_tokens.create(
                "stale", user.id, utcnow() - timedelta(days=1)
            )
            await session.commit()

        result = await purge_tokens(file_db, file_db.settings)

        assert result.refresh_tokens == 1
        assert (await purge_tokens(file_db, file_db.settings)).total == 0
