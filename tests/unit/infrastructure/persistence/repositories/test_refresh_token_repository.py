"""Unit tests for RefreshTokenRepository."""

from datetime import timedelta

import pytest

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.repositories import RefreshTokenRepository, hash_token


@pytest.fixture
def repo(db_session) -> RefreshTokenRepository:
    return RefreshTokenRepository(db_session)


class TestRefreshTokenRepository:
    async def test_create_stores_hash_only(self, repo, create_user):
        user = await create_user()

        record = await repo.create("raw-token", user.id, utcnow() + timedelta(days=30))

        assert record.token_hash == hash_token("raw-token")
        assert record.token_hash != "raw-token"
        assert len(record.token_hash) == 64

    async def test_get_by_token_loads_user(self, db_session, repo, create_user):
        user = await create_user()
        await repo.create("raw-token", user.id, utcnow() + timedelta(days=30))
        await db_session.commit()
        db_session.expunge_all()

        record = await repo.get_by_token("raw-token")

        assert record is not None
        assert record.user.email == "alice@example.com"
        assert await repo.get_by_token("other-token") is None

    async def test_delete_by_token_scoped_to_owner(self, repo, create_user):
        alice = await create_user()
        bob = await create_user(email="bob@example.com", username="bob")
        await repo.create("alice-token", alice.id, utcnow() + timedelta(days=30))

        assert await repo.delete_by_token("alice-token", user_id=bob.id) == 0
        assert await repo.get_by_token("alice-token") is not None

        assert await repo.delete_by_token("alice-token", user_id=alice.id) == 1
        assert await repo.get_by_token("alice-token") is None

    async def test_delete_by_token_unknown_is_noop(self, repo):
        assert await repo.delete_by_token("never-issued") == 0

    async def test_delete_all_for_user(self, repo, create_user):
        alice = await create_user()
        bob = await create_user(email="bob@example.com", username="bob")
        for token in ("a1", "a2", "a3"):
            await repo.create(token, alice.id, utcnow() + timedelta(days=30))
        await repo.create("b1", bob.id, utcnow() + timedelta(days=30))

        assert await repo.delete_all_for_user(alice.id) == 3
        assert await repo.get_by_token("b1") is not None

    async def test_delete_expired(self, repo, create_user):
        user = await create_user()
        await repo.create("old", user.id, utcnow() - timedelta(minutes=1))
        await repo.create("fresh", user.id, utcnow() + timedelta(days=1))

        assert await repo.delete_expired() == 1
        assert await repo.get_by_token("old") is None
        assert await repo.get_by_token("fresh") is not None

    async def test_delete_by_id(self, repo, create_user):
        user = await create_user()
        record = await repo.create("raw-token", user.id, utcnow() + timedelta(days=1))

        assert await repo.delete_by_id(record.id) is True
        assert await repo.delete_by_id(record.id) is False
