"""Unit tests for logging configuration."""

import pytest

from inkpost.core.config import Settings
from inkpost.core.logging import (
    configure_logging,
    get_logger,
    redact_secrets,
    rename_message_field,
)


class TestProcessors:
    def test_redact_secrets_masks_credentials(self):
        event = {"event": "login", "password": "hunter2", "refresh_token": "abc", "user_id": "u1"}

        result = redact_secrets(None, "info", event)

        assert result["password"] == "***"
        assert result["refresh_token"] == "***"
        assert result["user_id"] == "u1"

    def test_rename_message_field(self):
        result = rename_message_field(None, "info", {"event": "hello"})

        assert result == {"message": "hello"}


@pytest.mark.parametrize("log_format", ["json", "console"])
def test_configure_logging_emits(capsys, log_format):
    settings = Settings(_env_file=None, environment="testing", log_format=log_format)
    configure_logging(settings)

    get_logger("inkpost.test").info("Something happened", password="secret-value")

    output = capsys.readouterr().out
    assert "Something happened" in output
    assert "secret-value" not in output
