"""Pre-built log scenarios for demos and reproducible checks.

Each scenario stores entries as offsets (hours before ``now``) so it can be
materialized against any evaluation time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from risk_overlay.models import LogEntry


@dataclass(frozen=True)
class ScenarioEntry:
    substance: str
    hours_ago: float
    route: str | None = None
    dose_value: float | None = None
    dose_unit: str | None = None


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    entries: tuple[ScenarioEntry, ...]

    def materialize(self, now: datetime) -> list[LogEntry]:
        return [
            LogEntry(
                substance=item.substance,
                taken_at=now - timedelta(hours=item.hours_ago),
                dose_value=item.dose_value,
                dose_unit=item.dose_unit,
                route=item.route,
            )
            for item in self.entries
        ]


SINGLE_STIMULANT = Scenario(
    name="single-stimulant",
    description="One MDMA dose an hour ago.",
    entries=(ScenarioEntry("MDMA", 1.0),),
)

OPIOID_BENZO = Scenario(
    name="opioid-benzo",
    description="Heroin and diazepam within a few hours.",
    entries=(
        ScenarioEntry("Heroin", 2.0),
        ScenarioEntry("Diazepam", 3.0),
    ),
)

SMOKED_COCAINE = Scenario(
    name="smoked-cocaine",
    description="Two smoked cocaine doses in the last two hours.",
    entries=(
        ScenarioEntry("Cocaine", 0.5, route="smoked"),
        ScenarioEntry("Cocaine", 2.0, route="smoked"),
    ),
)

NICOTINE_ONLY = Scenario(
    name="nicotine-only",
    description="Two nicotine entries, below the moderate threshold.",
    entries=(
        ScenarioEntry("Nicotine", 1.0),
        ScenarioEntry("Nicotine", 3.0),
    ),
)

UNRECOGNIZED = Scenario(
    name="unrecognized",
    description="A substance the classifier does not know.",
    entries=(ScenarioEntry("Unobtainium", 1.0),),
)

MIXED_NIGHT = Scenario(
    name="mixed-night",
    description="Phenibut, vaporized a-PVP, 2-MAP-237 and kratom over one day.",
    entries=(
        ScenarioEntry("phenibut", 2.0, route="oral", dose_value=800, dose_unit="mg"),
        ScenarioEntry("a-pvp", 17.0, route="vaporized"),
        ScenarioEntry("2-map-237", 16.5, dose_value=60, dose_unit="mg"),
        ScenarioEntry("kratom", 12.0, route="oral", dose_value=5, dose_unit="g"),
    ),
)

PRESETS: dict[str, Scenario] = {
    s.name: s
    for s in (
        SINGLE_STIMULANT,
        OPIOID_BENZO,
        SMOKED_COCAINE,
        NICOTINE_ONLY,
        UNRECOGNIZED,
        MIXED_NIGHT,
    )
}
