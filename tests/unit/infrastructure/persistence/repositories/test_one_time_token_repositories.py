"""Unit tests for the password reset and email verification repositories."""

from datetime import timedelta

import pytest

from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.persistence.repositories import (
    EmailVerificationRepository,
    PasswordResetRepository,
    hash_token,
)


@pytest.fixture
def resets(db_session) -> PasswordResetRepository:
    return PasswordResetRepository(db_session)


@pytest.fixture
def verifications(db_session) -> EmailVerificationRepository:
    return EmailVerificationRepository(db_session)


class TestPasswordResetRepository:
    async def test_usable_token_found(self, resets):
        await resets.create("Alice@Example.com", "reset-token", utcnow() + timedelta(hours=1))

        record = await resets.get_usable_by_token("reset-token")

        assert record is not None
        assert record.email == "alice@example.com"
        assert record.token_hash == hash_token("reset-token")

    async def test_expired_token_not_usable(self, resets):
        await resets.create("alice@example.com", "reset-token", utcnow() - timedelta(seconds=1))

        assert await resets.get_usable_by_token("reset-token") is None

    async def test_mark_as_used_only_once(self, resets):
        record = await resets.create(
            "alice@example.com", "reset-token", utcnow() + timedelta(hours=1)
        )

        assert await resets.mark_as_used(record.id) is True
        assert await resets.mark_as_used(record.id) is False
        assert await resets.get_usable_by_token("reset-token") is None

    async def test_multiple_tokens_per_email(self, resets):
        await resets.create("alice@example.com", "first", utcnow() + timedelta(hours=1))
        await resets.create("alice@example.com", "second", utcnow() + timedelta(hours=1))

        assert await resets.get_usable_by_token("first") is not None
        assert await resets.get_usable_by_token("second") is not None
        assert await resets.delete_for_email("ALICE@example.com") == 2


class TestEmailVerificationRepository:
    async def test_upsert_creates_row(self, verifications):
        await verifications.upsert("Alice@Example.com", "verify-1", utcnow() + timedelta(hours=24))

        record = await verifications.get_by_email("alice@example.com")

        assert record is not None
        assert record.used is False

    async def test_upsert_replaces_previous_token(self, verifications):
        first = await verifications.upsert(
            "alice@example.com", "verify-1", utcnow() + timedelta(hours=24)
        )
        await verifications.mark_as_used(first.id)

        second = await verifications.upsert(
            "alice@example.com", "verify-2", utcnow() + timedelta(hours=24)
        )

        assert second.id == first.id
        assert second.used is False
        assert await verifications.get_usable_by_token("verify-1") is None
        assert await verifications.get_usable_by_token("verify-2") is not None

    async def test_mark_as_used_only_once(self, verifications):
        record = await verifications.upsert(
            "alice@example.com", "verify-1", utcnow() + timedelta(hours=24)
        )

        assert await verifications.mark_as_used(record.id) is True
        assert await verifications.mark_as_used(record.id) is False

    async def test_delete_for_email(self, verifications):
        await verifications.upsert("alice@example.com", "verify-1", utcnow() + timedelta(hours=1))

        assert await verifications.delete_for_email("alice@example.com") == 1
        assert await verifications.get_by_email("alice@example.com") is None
