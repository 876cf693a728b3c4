"""Risk overlay engine - classify, select, score, apply rules, aggregate.

The engine is a pure function of ``(entries, now, config)``. It never reads
the wall clock, never mutates its input and never raises on malformed
entries: bad timestamps drop out of every window, unknown substances drop out
of category logic.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from risk_overlay.aggregate import aggregate, build_notes
from risk_overlay.categories import classify, normalize_substance
from risk_overlay.config import DEFAULT_CONFIG, STACKABLE_CATEGORIES, EngineConfig
from risk_overlay.interactions import evaluate_rules, rule_warnings
from risk_overlay.models import (
    ClassifiedEntry,
    LogEntry,
    ReboundWindow,
    RiskOverlayResult,
    StackEntry,
    SubstanceCategory,
)
from risk_overlay.rebound import predict, predict_sleep_opportunity
from risk_overlay.stacking import evaluate_stack
from risk_overlay.timing import as_utc, most_recent, parse_timestamp, select, within_window

logger = logging.getLogger(__name__)

# Categories that never count towards the "several categories active" signal
_NOT_COUNTED_AS_ACTIVE = frozenset({SubstanceCategory.UNKNOWN, SubstanceCategory.NICOTINE})

_REBOUND_CATEGORIES: tuple[SubstanceCategory, ...] = (
    SubstanceCategory.STIMULANT,
    SubstanceCategory.OPIOID,
    SubstanceCategory.GABAERGIC,
)


def classify_entry(entry: LogEntry) -> ClassifiedEntry:
    substance = getattr(entry, "substance", None)
    return ClassifiedEntry(
        entry=entry,
        category=classify(substance),
        canonical=normalize_substance(substance),
        taken_at_utc=parse_timestamp(getattr(entry, "taken_at", None)),
    )


class RiskOverlayEngine:
    """Computes a ``RiskOverlayResult`` from log entries with a fixed configuration."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or DEFAULT_CONFIG

    def compute(self, entries: Iterable[LogEntry], now: datetime) -> RiskOverlayResult:
        now = as_utc(now)
        classified = [classify_entry(entry) for entry in entries]

        unparsable = sum(1 for item in classified if item.taken_at_utc is None)
        if unparsable:
            logger.debug(
                "Excluded %d entries with unparsable timestamps",
                unparsable,
                extra={"risk_excluded_entries": unparsable},
            )

        # 1. Temporal selection per stackable category
        per_category: dict[SubstanceCategory, list[ClassifiedEntry]] = {
            category: select(classified, category, now, self.config.window_for(category))
            for category in STACKABLE_CATEGORIES
        }

        # 2. Stack levels (categories without qualifying entries are omitted)
        stacks: list[StackEntry] = [
            evaluate_stack(per_category[category], category, self.config)
            for category in STACKABLE_CATEGORIES
            if per_category[category]
        ]

        # 3. Cross-category rules
        signals = evaluate_rules(per_category)
        if signals:
            logger.debug(
                "Rules fired: %s",
                [signal.rule_id for signal in signals],
                extra={"risk_rules": [signal.rule_id for signal in signals]},
            )

        # 4. Rebound windows from the most recent qualifying dose
        rebound: list[ReboundWindow] = []
        for category in _REBOUND_CATEGORIES:
            window = predict(category, most_recent(per_category[category]))
            if window is not None:
                rebound.append(window)
        sleep_opportunity = predict_sleep_opportunity(
            most_recent(per_category[SubstanceCategory.STIMULANT])
        )

        # 5. Aggregate
        broad_window = self.config.broadest_window_hours
        recent = [item for item in classified if within_window(item, now, broad_window)]
        active_categories = {
            item.category for item in recent if item.category not in _NOT_COUNTED_AS_ACTIVE
        }
        unknown_substances = {
            item.canonical
            for item in recent
            if item.category == SubstanceCategory.UNKNOWN and item.canonical
        }
        if unknown_substances:
            logger.debug(
                "Unrecognized substances: %s",
                sorted(unknown_substances),
                extra={"risk_unknown_substances": sorted(unknown_substances)},
            )

        overall_level = aggregate(stacks, signals, active_categories)
        notes = build_notes(overall_level, unknown_substances, self.config)

        return RiskOverlayResult(
            overall_level=overall_level,
            warnings=tuple(rule_warnings(signals)),
            stacks=tuple(stacks),
            rebound=tuple(rebound),
            notes=tuple(notes),
            sleep_opportunity=sleep_opportunity,
        )


def compute_risk_overlay(
    entries: Iterable[LogEntry],
    now: datetime,
    config: EngineConfig | None = None,
) -> RiskOverlayResult:
    """Compute the risk overlay for ``entries`` as seen at ``now``."""
    return RiskOverlayEngine(config).compute(entries, now)
