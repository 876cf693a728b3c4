"""Tests for timestamp parsing and window selection."""

from datetime import datetime, timedelta, timezone

from risk_overlay.engine import classify_entry
from risk_overlay.models import LogEntry, SubstanceCategory
from risk_overlay.timing import (
    hours_between,
    is_inhaled_route,
    most_recent,
    parse_timestamp,
    select,
)

NOW = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


def _classified(substance: str, hours_ago: float, route: str | None = None):
    return classify_entry(
        LogEntry(substance=substance, taken_at=NOW - timedelta(hours=hours_ago), route=route)
    )


class TestParseTimestamp:
    def test_aware_datetime_converted_to_utc(self):
        ts = datetime(2025, 10, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert parse_timestamp(ts) == datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)

    def test_naive_datetime_read_as_utc(self):
        assert parse_timestamp(datetime(2025, 10, 1, 12, 0)) == NOW

    def test_iso_string_with_z(self):
        assert parse_timestamp("2025-10-01T12:00:00Z") == NOW

    def test_iso_string_with_offset(self):
        assert parse_timestamp("2025-10-01T14:00:00+02:00") == NOW

    def test_epoch_seconds_and_millis(self):
        epoch = NOW.timestamp()
        assert parse_timestamp(epoch) == NOW
        assert parse_timestamp(int(epoch * 1000)) == NOW
        assert parse_timestamp(str(int(epoch))) == NOW

    def test_compact_date_not_read_as_epoch(self):
        assert parse_timestamp("20251001") == datetime(2025, 10, 1, tzinfo=timezone.utc)
        assert parse_timestamp("20251399") is None

    def test_unparsable_values(self):
        for value in ("yesterday", "", "   ", None, True, float("nan"), float("inf"), [], {}):
            assert parse_timestamp(value) is None

    def test_absurd_epoch_is_unparsable(self):
        assert parse_timestamp("9" * 40) is None


class TestRoutes:
    def test_inhaled_routes(self):
        for route in ("smoked", "Vaporized", " vaped ", "inhaled", "geraucht"):
            assert is_inhaled_route(route)

    def test_other_routes(self):
        for route in ("oral", "insufflated", "", None, 3):
            assert not is_inhaled_route(route)


def test_hours_between_negative_for_future():
    assert hours_between(NOW + timedelta(hours=1), NOW) == -1.0


class TestSelect:
    def test_window_bounds_are_inclusive(self):
        entries = [_classified("cocaine", 0), _classified("cocaine", 12)]
        assert len(select(entries, SubstanceCategory.STIMULANT, NOW, 12.0)) == 2

    def test_outside_window_excluded(self):
        entries = [_classified("cocaine", 12.01)]
        assert select(entries, SubstanceCategory.STIMULANT, NOW, 12.0) == []

    def test_future_entries_excluded(self):
        entries = [_classified("cocaine", -0.5)]
        assert select(entries, SubstanceCategory.STIMULANT, NOW, 12.0) == []

    def test_other_categories_ignored(self):
        entries = [_classified("heroin", 1), _classified("cocaine", 1)]
        selected = select(entries, SubstanceCategory.OPIOID, NOW, 12.0)
        assert [item.canonical for item in selected] == ["heroin"]

    def test_unparsable_timestamp_excluded(self):
        entries = [classify_entry(LogEntry(substance="cocaine", taken_at="not a time"))]
        assert select(entries, SubstanceCategory.STIMULANT, NOW, 12.0) == []

    def test_no_window_selects_nothing(self):
        entries = [_classified("lsd", 1)]
        assert select(entries, SubstanceCategory.PSYCHEDELIC, NOW, None) == []


def test_most_recent_picks_latest():
    entries = [_classified("cocaine", 3), _classified("cocaine", 1), _classified("cocaine", 2)]
    latest = most_recent(entries)
    assert latest is not None
    assert latest.taken_at_utc == NOW - timedelta(hours=1)


def test_most_recent_empty():
    assert most_recent([]) is None
