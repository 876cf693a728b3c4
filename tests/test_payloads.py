"""Tests for JSON log record validation."""

import pytest
from pydantic import ValidationError

from risk_overlay.models import LogEntry
from risk_overlay.payloads import LogEntryPayload, load_entries


class TestLogEntryPayload:
    def test_valid_record(self):
        payload = LogEntryPayload(
            substance=" MDMA ",
            taken_at="2025-10-01T11:00:00Z",
            dose_value=80,
            dose_unit="mg",
            route="oral",
        )
        assert payload.to_entry() == LogEntry(
            substance="MDMA",
            taken_at="2025-10-01T11:00:00Z",
            dose_value=80,
            dose_unit="mg",
            route="oral",
        )

    def test_blank_substance_rejected(self):
        with pytest.raises(ValidationError, match="substance must not be empty"):
            LogEntryPayload(substance="   ", taken_at="2025-10-01T11:00:00Z")

    def test_missing_substance_rejected(self):
        with pytest.raises(ValidationError):
            LogEntryPayload.model_validate({"taken_at": "2025-10-01T11:00:00Z"})

    def test_blank_route_becomes_none(self):
        payload = LogEntryPayload(substance="cocaine", taken_at=None, route="  ")
        assert payload.route is None

    def test_free_text_dose_kept(self):
        payload = LogEntryPayload(substance="kratom", taken_at=None, dose_value="a spoonful")
        assert payload.dose_value == "a spoonful"

    def test_unknown_fields_ignored(self):
        payload = LogEntryPayload.model_validate(
            {"substance": "weed", "taken_at": 1, "notes": "hi", "id": "demo-1"}
        )
        assert payload.substance == "weed"


class TestLoadEntries:
    def test_list_of_records(self):
        loaded = load_entries([
            {"substance": "heroin", "taken_at": "2025-10-01T10:00:00Z"},
            {"substance": "diazepam", "taken_at": "2025-10-01T09:00:00Z"},
        ])
        assert [e.substance for e in loaded.entries] == ["heroin", "diazepam"]
        assert loaded.rejected == []

    def test_envelope(self):
        loaded = load_entries({"entries": [{"substance": "mdma", "taken_at": 0}]})
        assert len(loaded.entries) == 1

    def test_invalid_records_skipped_not_fatal(self):
        loaded = load_entries([
            {"substance": "", "taken_at": "2025-10-01T10:00:00Z"},
            "not a record",
            {"substance": 12},
            {"substance": "mdma", "taken_at": "whenever"},
        ])
        assert [e.substance for e in loaded.entries] == ["mdma"]
        assert len(loaded.rejected) == 3
        assert loaded.rejected[1] == "1: not an object"
        assert loaded.rejected[0].startswith("0: substance")

    def test_unparsable_timestamp_kept_for_engine(self):
        loaded = load_entries([{"substance": "mdma", "taken_at": "whenever"}])
        assert loaded.entries[0].taken_at == "whenever"

    def test_wrong_top_level_type(self):
        with pytest.raises(ValueError, match="expected a JSON array"):
            load_entries("heroin")
