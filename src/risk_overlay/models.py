"""Core data models for the risk overlay."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SubstanceCategory(str, Enum):
    STIMULANT = "stimulant"
    OPIOID = "opioid"
    GABAERGIC = "gabaergic"
    PSYCHEDELIC = "psychedelic"
    DISSOCIATIVE = "dissociative"
    CANNABIS = "cannabis"
    NICOTINE = "nicotine"
    UNKNOWN = "unknown"


class RiskLevel(str, Enum):
    """Ordered severity: low < moderate < high < critical."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_RANK = {
    RiskLevel.LOW: 0,
    RiskLevel.MODERATE: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


@dataclass(frozen=True)
class LogEntry:
    """One logged use, owned by the caller and never modified here.

    ``taken_at`` may be a datetime, an ISO-8601 string or epoch seconds/ms.
    Values that cannot be parsed make the entry non-qualifying.
    """

    substance: str
    taken_at: Any
    dose_value: float | str | None = None
    dose_unit: str | None = None
    route: str | None = None


@dataclass(frozen=True)
class StackEntry:
    category: SubstanceCategory
    level: RiskLevel
    count: int
    score: float
    rationale: str


@dataclass(frozen=True)
class ReboundWindow:
    """Absolute UTC window after the most recent dose in one category."""

    category: SubstanceCategory
    window_start: datetime
    window_end: datetime
    risks: tuple[str, ...]
    rationale: str


@dataclass(frozen=True)
class RiskOverlayResult:
    overall_level: RiskLevel
    warnings: tuple[str, ...] = ()
    stacks: tuple[StackEntry, ...] = ()
    rebound: tuple[ReboundWindow, ...] = ()
    notes: tuple[str, ...] = ()
    sleep_opportunity: ReboundWindow | None = None

    def stack_for(self, category: SubstanceCategory) -> StackEntry | None:
        for stack in self.stacks:
            if stack.category == category:
                return stack
        return None

    def rebound_for(self, category: SubstanceCategory) -> ReboundWindow | None:
        for window in self.rebound:
            if window.category == category:
                return window
        return None


@dataclass(frozen=True)
class ClassifiedEntry:
    """A log entry paired with its resolved category, canonical key and parsed time."""

    entry: LogEntry
    category: SubstanceCategory
    canonical: str
    taken_at_utc: datetime | None = field(default=None)
