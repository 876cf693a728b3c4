"""Configuration overrides - Pydantic validation for user-supplied tuning files.

An override file may replace lookback windows, stack thresholds and note
texts. Only stackable categories (stimulant, opioid, gabaergic, cannabis,
nicotine) can be tuned; psychedelics and dissociatives stay unscored.

Example:
    {
        "windows_hours": {"gabaergic": 36},
        "thresholds": {"nicotine": {"moderate_at": 4, "high_at": 10, "critical_at": 20}}
    }
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, FiniteFloat, field_validator, model_validator

StackableName = Literal["stimulant", "opioid", "gabaergic", "cannabis", "nicotine"]


class ThresholdOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    moderate_at: FiniteFloat
    high_at: FiniteFloat
    critical_at: FiniteFloat

    @model_validator(mode="after")
    def thresholds_increasing(self) -> "ThresholdOverride":
        if self.moderate_at <= 0:
            raise ValueError("moderate_at must be positive")
        if not (self.moderate_at < self.high_at < self.critical_at):
            raise ValueError("thresholds must be strictly increasing: moderate_at < high_at < critical_at")
        return self


class ConfigOverrides(BaseModel):
    model_config = ConfigDict(extra="forbid")

    windows_hours: dict[StackableName, FiniteFloat] = {}
    thresholds: dict[StackableName, ThresholdOverride] = {}
    disclaimers: list[str] | None = None
    redose_note: str | None = None
    emergency_note: str | None = None

    @field_validator("windows_hours")
    @classmethod
    def windows_positive(cls, v: dict[str, float]) -> dict[str, float]:
        for name, hours in v.items():
            if hours <= 0:
                raise ValueError(f"window for {name} must be positive")
        return v

    @field_validator("redose_note", "emergency_note")
    @classmethod
    def note_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("note text must not be empty")
        return v

    @field_validator("disclaimers")
    @classmethod
    def disclaimers_not_blank(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        cleaned = [item.strip() for item in v]
        if not cleaned or any(not item for item in cleaned):
            raise ValueError("disclaimers must be a non-empty list of non-empty strings")
        return cleaned


def validate_overrides(raw: dict[str, Any]) -> ConfigOverrides:
    """Validate a raw override dict. Raises pydantic.ValidationError."""
    return ConfigOverrides.model_validate(raw)
