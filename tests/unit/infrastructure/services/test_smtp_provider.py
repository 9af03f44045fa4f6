"""Unit tests for the SMTP email provider."""

import unittest.mock as mock

import pytest

from inkpost.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings


@pytest.fixture
def smtp_settings() -> SMTPSettings:
    """Fixture for SMTP settings."""
    return SMTPSettings(
        host="smtp.example.com",
        port=587,
        username="test_user",
        password="test_password",
    )


@pytest.fixture
def smtp_provider(smtp_settings: SMTPSettings) -> SMTPProvider:
    """Fixture for SMTP provider."""
    return SMTPProvider(smtp_settings)


async def send(provider: SMTPProvider) -> bool:
    return await provider.send_email(
        to="reader@example.com",
        subject="Test Subject",
        html_body="<p>HTML Body</p>",
        text_body="Text Body",
        from_email="no-reply@inkpost.local",
        from_name="Inkpost",
    )


async def test_smtp_send_email_success(smtp_provider: SMTPProvider) -> None:
    """Test successful email sending with STARTTLS."""
    with mock.patch("aiosmtplib.SMTP", autospec=True) as mock_smtp_class:
        mock_smtp = mock_smtp_class.return_value.__aenter__.return_value

        success = await send(smtp_provider)

        assert success is True
        mock_smtp_class.assert_called_once_with(
            hostname="smtp.example.com",
            port=587,
            use_tls=False,
            timeout=10,
        )
        mock_smtp.starttls.assert_called_once()
        mock_smtp.login.assert_called_once_with("test_user", "test_password")

        sent_message = mock_smtp.send_message.call_args[0][0]
        assert sent_message["Subject"] == "Test Subject"
        assert sent_message["To"] == "reader@example.com"
        assert sent_message["From"] == "Inkpost <no-reply@inkpost.local>"


async def test_smtp_send_email_ssl(smtp_settings: SMTPSettings) -> None:
    """Implicit TLS skips STARTTLS."""
    provider = SMTPProvider(
        smtp_settings.model_copy(update={"port": 465, "use_ssl": True, "use_tls": False})
    )

    with mock.patch("aiosmtplib.SMTP", autospec=True) as mock_smtp_class:
        mock_smtp = mock_smtp_class.return_value.__aenter__.return_value

        assert await send(provider) is True

        assert mock_smtp_class.call_args.kwargs["use_tls"] is True
        mock_smtp.starttls.assert_not_called()


async def test_smtp_send_email_failure_raises(smtp_provider: SMTPProvider) -> None:
    """Transport errors propagate to the caller."""
    with mock.patch("aiosmtplib.SMTP", autospec=True) as mock_smtp_class:
        mock_smtp = mock_smtp_class.return_value.__aenter__.return_value
        mock_smtp.send_message.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(ConnectionRefusedError):
            await send(smtp_provider)


async def test_smtp_check_connection_failure(smtp_provider: SMTPProvider) -> None:
    """Connection test reports failures instead of raising."""
    with mock.patch("aiosmtplib.SMTP", autospec=True) as mock_smtp_class:
        mock_smtp = mock_smtp_class.return_value.__aenter__.return_value
        mock_smtp.login.side_effect = PermissionError("bad credentials")

        ok, error = await smtp_provider.check_connection()

        assert ok is False
        assert "bad credentials" in error
