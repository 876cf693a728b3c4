"""Input payloads - Pydantic validation for log records loaded from JSON.

Records come from an external activity log, so the structure is validated
here before anything reaches the engine. ``taken_at`` is deliberately kept
as-is: whether a timestamp is usable is the engine's decision, and an
unusable one simply makes the entry non-qualifying.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from risk_overlay.models import LogEntry

logger = logging.getLogger(__name__)


class LogEntryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    substance: str
    taken_at: Any = None
    dose_value: float | str | None = None
    dose_unit: str | None = None
    route: str | None = None

    @field_validator("substance")
    @classmethod
    def substance_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("substance must not be empty")
        return v

    @field_validator("dose_unit", "route")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    def to_entry(self) -> LogEntry:
        return LogEntry(
            substance=self.substance,
            taken_at=self.taken_at,
            dose_value=self.dose_value,
            dose_unit=self.dose_unit,
            route=self.route,
        )


@dataclass(frozen=True)
class LoadedEntries:
    entries: list[LogEntry]
    rejected: list[str]  # "index: reason" per skipped record


def load_entries(records: Any) -> LoadedEntries:
    """Validate raw records into ``LogEntry`` values.

    Accepts a list of records or a ``{"entries": [...]}`` envelope. Invalid
    records are skipped and reported; they never abort the batch.
    """
    if isinstance(records, dict):
        records = records.get("entries", [])
    if not isinstance(records, list):
        raise ValueError("expected a JSON array of log entries or an object with 'entries'")

    entries: list[LogEntry] = []
    rejected: list[str] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            rejected.append(f"{index}: not an object")
            continue
        try:
            payload = LogEntryPayload.model_validate(record)
        except ValidationError as exc:
            reason = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            rejected.append(f"{index}: {reason}")
            logger.warning(
                "Skipping log record %d: %s",
                index,
                reason,
                extra={"risk_record_index": index},
            )
            continue
        entries.append(payload.to_entry())

    return LoadedEntries(entries=entries, rejected=rejected)
