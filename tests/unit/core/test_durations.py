"""Unit tests for duration string parsing."""

from datetime import timedelta

import pytest

from inkpost.core.durations import parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("24h", timedelta(hours=24)),
            ("30d", timedelta(days=30)),
            ("15m", timedelta(minutes=15)),
            ("45s", timedelta(seconds=45)),
            ("2w", timedelta(weeks=2)),
            ("90", timedelta(seconds=90)),
            (" 1H ", timedelta(hours=1)),
            (3600, timedelta(hours=1)),
        ],
    )
    def test_valid_durations(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "h", "1y", "1.5h", "-5m", "abc"])
    def test_invalid_durations_raise(self, value):
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(value)

    @pytest.mark.parametrize("value", ["0", "0h", 0, -10])
    def test_non_positive_durations_raise(self, value):
        with pytest.raises(ValueError, match="must be positive"):
            parse_duration(value)
