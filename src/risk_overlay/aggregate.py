"""Overall level aggregation and note assembly."""

from __future__ import annotations

from typing import Collection, Sequence

from risk_overlay.config import DEFAULT_CONFIG, EngineConfig
from risk_overlay.interactions import RuleSignal
from risk_overlay.models import RiskLevel, StackEntry, SubstanceCategory


def aggregate(
    stacks: Sequence[StackEntry],
    signals: Sequence[RuleSignal],
    active_categories: Collection[SubstanceCategory] = (),
) -> RiskLevel:
    """Combine stack levels and rule signals into one overall level.

    Priority, highest first:
      critical rule > critical stack > high rule > high stack
      > moderate stack or >=2 active categories > low
    A rule carrying ``moderate`` counts as a moderate signal.
    """
    rule_levels = [signal.level for signal in signals if signal.level is not None]
    stack_levels = [stack.level for stack in stacks]

    if RiskLevel.CRITICAL in rule_levels:
        return RiskLevel.CRITICAL
    if RiskLevel.CRITICAL in stack_levels:
        return RiskLevel.CRITICAL
    if RiskLevel.HIGH in rule_levels:
        return RiskLevel.HIGH
    if RiskLevel.HIGH in stack_levels:
        return RiskLevel.HIGH
    if RiskLevel.MODERATE in stack_levels or RiskLevel.MODERATE in rule_levels:
        return RiskLevel.MODERATE
    if len(set(active_categories)) >= 2:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def format_unknown_note(names: Collection[str]) -> str:
    listed = ", ".join(sorted(set(names)))
    return (
        f"Not assessed (substance not recognized): {listed}. "
        "Unrecognized substances can still interact dangerously."
    )


def build_notes(
    overall_level: RiskLevel,
    unknown_substances: Collection[str] = (),
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[str]:
    """Disclaimers always; unknown-substance note when any; safety notes on high/critical."""
    notes = list(config.disclaimers)
    if unknown_substances:
        notes.append(format_unknown_note(unknown_substances))
    if overall_level >= RiskLevel.HIGH:
        notes.append(config.redose_note)
        notes.append(config.emergency_note)
    return notes
