"""Unit tests for UTC day-window helpers."""

from datetime import datetime, timedelta, timezone

from gust_auth_core.utils.datetime_utils import (
    ensure_utc,
    format_rfc3339,
    next_reset,
    start_of_utc_day,
    utc_now,
)


class TestEnsureUtc:
    def test_naive_is_treated_as_utc(self):
        value = ensure_utc(datetime(2026, 10, 17, 8, 30))

        assert value == datetime(2026, 10, 17, 8, 30, tzinfo=timezone.utc)

    def test_aware_is_converted(self):
        plus_two = timezone(timedelta(hours=2))

        value = ensure_utc(datetime(2026, 10, 17, 1, 0, tzinfo=plus_two))

        assert value == datetime(2026, 10, 16, 23, 0, tzinfo=timezone.utc)
        assert value.utcoffset() == timedelta(0)

    def test_none(self):
        assert ensure_utc(None) is None


class TestDayWindow:
    def test_start_of_day(self):
        now = datetime(2026, 10, 17, 23, 59, 59, 999999, tzinfo=timezone.utc)

        assert start_of_utc_day(now) == datetime(2026, 10, 17, tzinfo=timezone.utc)

    def test_start_of_day_uses_utc_not_local_date(self):
        """01:00 at UTC+2 is still the previous UTC day."""
        now = datetime(2026, 10, 17, 1, 0, tzinfo=timezone(timedelta(hours=2)))

        assert start_of_utc_day(now) == datetime(2026, 10, 16, tzinfo=timezone.utc)

    def test_start_of_day_defaults_to_now(self):
        today = start_of_utc_day()

        assert today <= utc_now() < today + timedelta(days=1)

    def test_next_reset(self):
        window = datetime(2026, 10, 17, tzinfo=timezone.utc)

        assert next_reset(window) == datetime(2026, 10, 18, tzinfo=timezone.utc)


def test_format_rfc3339():
    value = datetime(2026, 10, 18, 0, 0, 0, 123456, tzinfo=timezone.utc)

    assert format_rfc3339(value) == "2026-10-18T00:00:00Z"
