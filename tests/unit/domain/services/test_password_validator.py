"""Unit tests for password strength validation."""

import pytest

from inkpost.domain.services.password_validator import PasswordValidator, default_password_validator


def codes(password: str) -> set[str]:
    return {error.code for error in default_password_validator.validate(password).errors}


class TestPasswordValidator:
    def test_strong_password_is_valid(self):
        result = default_password_validator.validate("Str0ng!Passw0rd")

        assert result.valid is True
        assert result.errors == []

    def test_all_violations_reported_together(self):
        result = default_password_validator.validate("abc")

        assert result.valid is False
        assert {e.code for e in result.errors} == {
            "password_too_short",
            "password_no_uppercase",
            "password_no_digit",
            "password_no_special",
        }
        assert all(e.field == "password" for e in result.errors)
        assert len(result.messages) == 4

    @pytest.mark.parametrize(
        ("password", "code"),
        [
            ("NOLOWER1!", "password_no_lowercase"),
            ("noupper1!", "password_no_uppercase"),
            ("NoDigits!!", "password_no_digit"),
            ("NoSpecial12", "password_no_special"),
        ],
    )
    def test_single_rule_violations(self, password, code):
        assert codes(password) == {code}

    def test_exactly_128_characters_allowed(self):
        password = "Aa1!" * 32

        assert default_password_validator.is_valid(password)

    def test_129_characters_rejected(self):
        password = "Aa1!" * 32 + "x"

        assert codes(password) == {"password_too_long"}

    def test_common_password_rejected(self):
        assert "password_too_common" in codes("Password123")
        assert "password_too_common" in codes("PASSWORD")

    def test_custom_limits(self):
        validator = PasswordValidator(min_length=12, common_passwords=frozenset())

        assert not validator.is_valid("Sh0rt!pass")
        assert validator.is_valid("L0nger!password")
