"""
Duration Parsing Unit Tests
"""

from datetime import timedelta

import pytest

from kvdb.common.duration import parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("6 months", timedelta(days=180)),
            ("1 hour", timedelta(hours=1)),
            ("1 HOUR", timedelta(hours=1)),
            ("90d", timedelta(days=90)),
            ("1 day 12 hours", timedelta(days=1, hours=12)),
            ("2 weeks", timedelta(weeks=2)),
            ("1 year", timedelta(days=365)),
            ("30 minutes", timedelta(minutes=30)),
            ("1.5 hours", timedelta(minutes=90)),
            ("500 ms", timedelta(milliseconds=500)),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    def test_empty(self):
        with pytest.raises(ValueError, match="must not be empty"):
            parse_duration("   ")

    def test_unknown_unit(self):
        with pytest.raises(ValueError, match="Unknown time unit"):
            parse_duration("3 fortnights")

    @pytest.mark.parametrize("text", ["months", "6", "six months", "1 day, 2 hours", "1 day extra"])
    def test_malformed(self, text):
        with pytest.raises(ValueError):
            parse_duration(text)

    def test_zero(self):
        with pytest.raises(ValueError, match="must be positive"):
            parse_duration("0 seconds")
