"""Unit tests for EmailVerificationService."""

from datetime import timedelta

import pytest

from inkpost.core.timeutil import utcnow
from inkpost.domain.exceptions import InvalidOrExpiredTokenError

VERIFY_SUBJECT = "Verify your email address"


@pytest.fixture
def verification_service(auth_service):
    return auth_service.email_verifications


class TestEmailVerificationService:
    async def test_send_builds_frontend_link(
        self, verification_service, create_user, email_provider
    ):
        user = await create_user()

        sent = await verification_service.send_verification_email(user.id, user.email, "Alice")

        [message] = email_provider.find("alice@example.com", VERIFY_SUBJECT)
        assert sent is True
        assert "http://blog.test/verify-email?token=" in message["text"]
        assert "24 hours" in message["text"]
        assert 'href="http://blog.test/verify-email?token=' in message["html"]

    async def test_send_reports_mail_failure(
        self, verification_service, create_user, email_provider
    ):
        user = await create_user()
        email_provider.fail = True

        assert await verification_service.send_verification_email(user.id, user.email, "A") is False

    async def test_verify_marks_user(
        self, verification_service, create_user, email_provider, user_repo
    ):
        user = await create_user()
        await verification_service.send_verification_email(user.id, user.email, "Alice")
        token = email_provider.token_for("alice@example.com", VERIFY_SUBJECT)

        email = await verification_service.verify_email(token)

        assert email == "alice@example.com"
        assert (await user_repo.get_by_email(email)).verified is True

    async def test_expired_token_rejected(
        self, verification_service, create_user, token_store, db_session
    ):
        await create_user()
        await token_store.email_verifications.upsert(
            "alice@example.com", "stale-token", utcnow() - timedelta(minutes=1)
        )
        await db_session.commit()

        with pytest.raises(InvalidOrExpiredTokenError, match="verification token"):
            await verification_service.verify_email("stale-token")

    async def test_lost_redemption_race_leaves_user_unverified(
        self, verification_service, create_user, email_provider, token_store, user_repo, monkeypatch
    ):
        user = await create_user()
        await verification_service.send_verification_email(user.id, user.email, "Alice")
        token = email_provider.token_for("alice@example.com", VERIFY_SUBJECT)

        async def already_used(token_id):
            return False

        monkeypatch.setattr(token_store.email_verifications, "mark_as_used", already_used)

        with pytest.raises(InvalidOrExpiredTokenError):
            await verification_service.verify_email(token)

        assert (await user_repo.get_by_email("alice@example.com")).verified is False
