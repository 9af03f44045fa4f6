"""Unit tests for PasswordResetService."""

from datetime import timedelta

import pytest

from inkpost.core.timeutil import utcnow
from inkpost.domain.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidTokenError,
    WeakPasswordError,
)

PASSWORD = "Str0ng!Passw0rd"
NEW_PASSWORD = "N3w!Passw0rdX"
RESET_SUBJECT = "Reset your password"


@pytest.fixture
def reset_service(auth_service):
    return auth_service.password_resets


class TestRequestReset:
    async def test_unknown_email_is_silent(self, reset_service, email_provider):
        assert await reset_service.request_reset("nobody@example.com") is None
        assert email_provider.sent == []

    async def test_reset_link_points_at_frontend(self, reset_service, create_user, email_provider):
        await create_user()

        await reset_service.request_reset("Alice@Example.com")

        [message] = email_provider.find("alice@example.com", RESET_SUBJECT)
        assert "http://blog.test/reset-password?token=" in message["text"]
        assert "1 hour" in message["text"]

    async def test_mail_failure_does_not_raise(self, reset_service, create_user, email_provider):
        await create_user()
        email_provider.fail = True

        await reset_service.request_reset("alice@example.com")

    async def test_earlier_tokens_stay_valid(self, reset_service, create_user, email_provider):
        await create_user()
        await reset_service.request_reset("alice@example.com")
        first = email_provider.token_for("alice@example.com", RESET_SUBJECT)
        await reset_service.request_reset("alice@example.com")

        await reset_service.reset_password(first, NEW_PASSWORD)


class TestResetPassword:
    async def test_reset_changes_password_and_revokes_sessions(
        self, auth_service, reset_service, create_user, email_provider
    ):
        await create_user()
        session = await auth_service.login("alice@example.com", PASSWORD)
        await reset_service.request_reset("alice@example.com")
        token = email_provider.token_for("alice@example.com", RESET_SUBJECT)

        user = await reset_service.reset_password(token, NEW_PASSWORD)

        assert user.email == "alice@example.com"
        with pytest.raises(InvalidTokenError):
            await auth_service.refresh(session.refresh_token)
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("alice@example.com", PASSWORD)
        assert await auth_service.login("alice@example.com", NEW_PASSWORD)

    async def test_token_is_single_use(self, reset_service, create_user, email_provider):
        await create_user()
        await reset_service.request_reset("alice@example.com")
        token = email_provider.token_for("alice@example.com", RESET_SUBJECT)
        await reset_service.reset_password(token, NEW_PASSWORD)

        with pytest.raises(InvalidOrExpiredTokenError, match="Invalid or expired reset token"):
            await reset_service.reset_password(token, "An0ther!Passw0rd")

    async def test_unknown_token(self, reset_service):
        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_service.reset_password("0" * 64, NEW_PASSWORD)

    async def test_expired_token(self, reset_service, create_user, token_store, db_session):
        await create_user()
        await token_store.password_resets.create(
            "alice@example.com", "expired-token", utcnow() - timedelta(seconds=1)
        )
        await db_session.commit()

        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_service.reset_password("expired-token", NEW_PASSWORD)

    async def test_weak_password_keeps_token_usable(
        self, reset_service, create_user, email_provider
    ):
        await create_user()
        await reset_service.request_reset("alice@example.com")
        token = email_provider.token_for("alice@example.com", RESET_SUBJECT)

        with pytest.raises(WeakPasswordError):
            await reset_service.reset_password(token, "weak")

        assert await reset_service.reset_password(token, NEW_PASSWORD)

    async def test_token_for_deleted_account(
        self, auth_service, reset_service, create_user, token_store, db_session
    ):
        user = await create_user()
        await token_store.password_resets.create(
            "alice@example.com", "orphan-token", utcnow() + timedelta(hours=1)
        )
        await db_session.commit()
        await auth_service.user_repo.delete(user.id)
        await db_session.commit()

        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_service.reset_password("orphan-token", NEW_PASSWORD)

    async def test_lost_redemption_race_rolls_back_password_change(
        self, auth_service, reset_service, create_user, email_provider, token_store, monkeypatch
    ):
        await create_user()
        session = await auth_service.login("alice@example.com", PASSWORD)
        await reset_service.request_reset("alice@example.com")
        token = email_provider.token_for("alice@example.com", RESET_SUBJECT)

        async def already_used(token_id):
            return False

        monkeypatch.setattr(token_store.password_resets, "mark_as_used", already_used)

        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_service.reset_password(token, NEW_PASSWORD)

        assert await auth_service.login("alice@example.com", PASSWORD)
        assert await auth_service.refresh(session.refresh_token)
        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("alice@example.com", NEW_PASSWORD)
