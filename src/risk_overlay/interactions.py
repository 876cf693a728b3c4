"""Cross-category interaction rules.

Rules run in a fixed order and each fires at most once per computation, so
warning text and ordering are reproducible. A rule may also carry a level
that the aggregator treats as a floor for the overall risk.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from risk_overlay.models import ClassifiedEntry, RiskLevel, SubstanceCategory

RESPIRATORY_DEPRESSION = (
    "CRITICAL - respiratory depression: opioids combined with GABAergic "
    "depressants (benzodiazepines, alcohol, GHB, phenibut, pregabalin) sharply "
    "raise the risk of slowed or stopped breathing. This is one of the most "
    "common causes of death in combined use."
)
STIMULANT_MASKING = (
    "HIGH - sedation masking: stimulants can hide the sedating effect of "
    "opioids. When the stimulant wears off, the full opioid effect can set in "
    "and cause a delayed overdose."
)
STIMULANT_CANNABIS = (
    "Stimulants combined with cannabis can intensify anxiety, paranoia and a "
    "racing heart (tachycardia)."
)
MULTIPLE_OPIOIDS = (
    "CRITICAL - multiple opioids: different opioids taken close together "
    "potentiate each other. Extreme overdose risk."
)
MULTIPLE_GABAERGICS = (
    "CRITICAL - multiple depressants: combining several GABAergic substances "
    "(e.g. benzodiazepines with alcohol, phenibut with GHB) is especially "
    "dangerous."
)
HYDRATION_REMINDER = (
    "With stimulants, drink water regularly, avoid overheating and take breaks."
)


@dataclass(frozen=True)
class RuleSignal:
    """Outcome of one fired rule. ``level`` is None for pure safety reminders."""

    rule_id: str
    warning: str
    level: RiskLevel | None


def _distinct_substances(entries: Sequence[ClassifiedEntry]) -> set[str]:
    return {item.canonical for item in entries}


def evaluate_rules(
    per_category: Mapping[SubstanceCategory, Sequence[ClassifiedEntry]],
) -> list[RuleSignal]:
    """Evaluate all rules against the qualifying entries of each category."""
    stimulants = per_category.get(SubstanceCategory.STIMULANT, ())
    opioids = per_category.get(SubstanceCategory.OPIOID, ())
    gabaergics = per_category.get(SubstanceCategory.GABAERGIC, ())
    cannabis = per_category.get(SubstanceCategory.CANNABIS, ())

    signals: list[RuleSignal] = []

    if opioids and gabaergics:
        signals.append(
            RuleSignal("opioid_gabaergic", RESPIRATORY_DEPRESSION, RiskLevel.CRITICAL)
        )

    if stimulants and opioids:
        signals.append(
            RuleSignal("stimulant_opioid", STIMULANT_MASKING, RiskLevel.HIGH)
        )

    if stimulants and cannabis:
        signals.append(
            RuleSignal("stimulant_cannabis", STIMULANT_CANNABIS, RiskLevel.MODERATE)
        )

    if len(_distinct_substances(opioids)) >= 2:
        signals.append(
            RuleSignal("multiple_opioids", MULTIPLE_OPIOIDS, RiskLevel.CRITICAL)
        )

    if len(_distinct_substances(gabaergics)) >= 2:
        signals.append(
            RuleSignal("multiple_gabaergics", MULTIPLE_GABAERGICS, RiskLevel.CRITICAL)
        )

    if stimulants:
        signals.append(RuleSignal("stimulant_hydration", HYDRATION_REMINDER, None))

    return signals


def rule_warnings(signals: Sequence[RuleSignal]) -> list[str]:
    """Warning texts in rule order, deduplicated."""
    warnings: list[str] = []
    seen: set[str] = set()
    for signal in signals:
        if signal.warning in seen:
            continue
        seen.add(signal.warning)
        warnings.append(signal.warning)
    return warnings
