"""Tests for the clock abstraction and RFC3339 helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from ecr_secret_operator.core.clock import FixedClock, RealClock, format_time, parse_time


class TestFixedClock:
    """Tests for FixedClock."""

    def test_defaults_to_epoch(self):
        """An unset clock reports the Unix epoch."""
        assert FixedClock().now() == datetime(1970, 1, 1, tzinfo=UTC)

    def test_set_time_parses_rfc3339(self):
        clock = FixedClock()
        clock.set_time("2023-03-01T12:00:01Z")
        assert clock.now() == datetime(2023, 3, 1, 12, 0, 1, tzinfo=UTC)

    def test_advance(self):
        clock = FixedClock(datetime(2023, 1, 1, tzinfo=UTC))
        clock.advance(timedelta(hours=4, seconds=1))
        assert clock.now() == datetime(2023, 1, 1, 4, 0, 1, tzinfo=UTC)


class TestRealClock:
    def test_now_is_utc_aware(self):
        assert RealClock().now().tzinfo is not None


class TestTimeFormatting:
    """Tests for parse_time and format_time."""

    def test_parse_zulu(self):
        assert parse_time("2023-01-01T12:00:00Z") == datetime(2023, 1, 1, 12, tzinfo=UTC)

    def test_parse_offset(self):
        parsed = parse_time("2023-01-01T14:00:00+02:00")
        assert parsed == datetime(2023, 1, 1, 12, tzinfo=UTC)

    def test_parse_lowercase_separators(self):
        assert parse_time("2023-01-01t12:00:00z") == datetime(2023, 1, 1, 12, tzinfo=UTC)

    def test_parse_fractional_seconds(self):
        parsed = parse_time("2023-01-01T12:00:00.123456789Z")
        assert parsed == datetime(2023, 1, 1, 12, 0, 0, 123456, tzinfo=UTC)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "yesterday",
            "2023-13-01T00:00:00Z",
            "2023-03-01T20:00Z",
            "2023-03-01 20:00:00Z",
            "20230301T200000Z",
            "2023-W09-3T20:00:00Z",
            "2023-03-01T20:00:00Z\n",
        ],
    )
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            parse_time(value)

    def test_parse_rejects_naive_timestamp(self):
        """Timestamps without an offset are ambiguous and rejected."""
        with pytest.raises(ValueError, match="not an RFC3339 timestamp"):
            parse_time("2023-01-01T12:00:00")

    def test_format_utc_uses_z_suffix(self):
        assert format_time(datetime(2023, 1, 1, 12, tzinfo=UTC)) == "2023-01-01T12:00:00Z"

    def test_format_drops_microseconds(self):
        value = datetime(2023, 1, 1, 12, 0, 0, 123456, tzinfo=UTC)
        assert format_time(value) == "2023-01-01T12:00:00Z"

    def test_format_keeps_non_utc_offset(self):
        value = datetime(2023, 1, 1, 14, tzinfo=timezone(timedelta(hours=2)))
        assert format_time(value) == "2023-01-01T14:00:00+02:00"

    def test_format_round_trips_through_parse(self):
        value = datetime(2023, 3, 1, 20, 0, 0, tzinfo=UTC)
        assert parse_time(format_time(value)) == value
