"""Engine configuration and process settings.

``EngineConfig`` carries everything the engine treats as tunable: lookback
windows, stack thresholds and the static note texts. ``Settings`` holds the
process-level options the CLI reads from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from risk_overlay.models import SubstanceCategory

if TYPE_CHECKING:
    from risk_overlay.overrides import ConfigOverrides


@dataclass(frozen=True)
class StackThresholds:
    """Scores at which a stack reaches each level above ``low``."""

    moderate_at: float
    high_at: float
    critical_at: float


DEFAULT_WINDOWS_HOURS: dict[SubstanceCategory, float] = {
    SubstanceCategory.STIMULANT: 12.0,
    SubstanceCategory.OPIOID: 12.0,
    # Long-tail agents (phenibut, GHB) need the wider window
    SubstanceCategory.GABAERGIC: 24.0,
    SubstanceCategory.CANNABIS: 12.0,
    SubstanceCategory.NICOTINE: 6.0,
}

DEFAULT_THRESHOLDS: dict[SubstanceCategory, StackThresholds] = {
    SubstanceCategory.STIMULANT: StackThresholds(1, 2, 4),
    SubstanceCategory.OPIOID: StackThresholds(1, 2, 3),
    SubstanceCategory.GABAERGIC: StackThresholds(1, 2, 3),
    SubstanceCategory.CANNABIS: StackThresholds(1, 3, 5),
    SubstanceCategory.NICOTINE: StackThresholds(3, 8, 15),
}

# Stack output order
STACKABLE_CATEGORIES: tuple[SubstanceCategory, ...] = (
    SubstanceCategory.STIMULANT,
    SubstanceCategory.OPIOID,
    SubstanceCategory.GABAERGIC,
    SubstanceCategory.CANNABIS,
    SubstanceCategory.NICOTINE,
)

DEFAULT_DISCLAIMERS: tuple[str, ...] = (
    "This analysis is heuristic and educational only. It is not medical advice "
    "and does not replace assessment by a medical professional.",
    "Individual factors (tolerance, body weight, health conditions, genetics, "
    "other medication) change risks considerably.",
    "Time windows are rough estimates with high uncertainty.",
)

DEFAULT_REDOSE_NOTE = (
    "Do not redose. Taking more now raises the risk disproportionately."
)

DEFAULT_EMERGENCY_NOTE = (
    "Emergency red flags: chest pain, severe difficulty breathing, "
    "unconsciousness or unresponsiveness, blue lips or fingertips (cyanosis). "
    "If any of these occur, call emergency services immediately."
)


@dataclass(frozen=True)
class EngineConfig:
    windows_hours: dict[SubstanceCategory, float] = field(
        default_factory=lambda: dict(DEFAULT_WINDOWS_HOURS)
    )
    thresholds: dict[SubstanceCategory, StackThresholds] = field(
        default_factory=lambda: dict(DEFAULT_THRESHOLDS)
    )
    disclaimers: tuple[str, ...] = DEFAULT_DISCLAIMERS
    redose_note: str = DEFAULT_REDOSE_NOTE
    emergency_note: str = DEFAULT_EMERGENCY_NOTE
    vaporized_bonus: float = 0.5

    def window_for(self, category: SubstanceCategory) -> float | None:
        """Lookback window in hours, or None for categories that are not stacked."""
        return self.windows_hours.get(category)

    @property
    def broadest_window_hours(self) -> float:
        return max(self.windows_hours.values(), default=0.0)

    def with_overrides(self, overrides: ConfigOverrides) -> EngineConfig:
        """Return a copy with validated overrides applied."""
        windows = dict(self.windows_hours)
        for name, hours in overrides.windows_hours.items():
            windows[SubstanceCategory(name)] = float(hours)

        thresholds = dict(self.thresholds)
        for name, item in overrides.thresholds.items():
            thresholds[SubstanceCategory(name)] = StackThresholds(
                moderate_at=item.moderate_at,
                high_at=item.high_at,
                critical_at=item.critical_at,
            )

        changes: dict = {"windows_hours": windows, "thresholds": thresholds}
        if overrides.disclaimers is not None:
            changes["disclaimers"] = tuple(overrides.disclaimers)
        if overrides.redose_note is not None:
            changes["redose_note"] = overrides.redose_note
        if overrides.emergency_note is not None:
            changes["emergency_note"] = overrides.emergency_note
        return replace(self, **changes)


DEFAULT_CONFIG = EngineConfig()


@dataclass(frozen=True)
class Settings:
    log_format: str = "text"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_format=os.environ.get("RISK_OVERLAY_LOG_FORMAT", "text"),
            log_level=os.environ.get("RISK_OVERLAY_LOG_LEVEL", "WARNING").upper(),
        )
