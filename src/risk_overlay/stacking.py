"""Stack-level evaluation - same-category accumulation within a window.

Scoring and wording are kept apart: ``stack_score`` and ``stack_level`` are
pure arithmetic, ``format_stack_rationale`` only builds the sentence.
"""

from __future__ import annotations

from typing import Sequence

from risk_overlay.categories import category_label
from risk_overlay.config import DEFAULT_CONFIG, EngineConfig, StackThresholds
from risk_overlay.models import ClassifiedEntry, RiskLevel, StackEntry, SubstanceCategory
from risk_overlay.timing import is_inhaled_route


def count_inhaled(entries: Sequence[ClassifiedEntry]) -> int:
    return sum(1 for item in entries if is_inhaled_route(item.entry.route))


def stack_score(
    count: int,
    inhaled_count: int,
    category: SubstanceCategory,
    vaporized_bonus: float = 0.5,
) -> float:
    """Plain count, plus a per-entry bonus for inhaled stimulants (faster, sharper onset)."""
    if category == SubstanceCategory.STIMULANT:
        return count + vaporized_bonus * inhaled_count
    return float(count)


def stack_level(score: float, thresholds: StackThresholds) -> RiskLevel:
    if score >= thresholds.critical_at:
        return RiskLevel.CRITICAL
    if score >= thresholds.high_at:
        return RiskLevel.HIGH
    if score >= thresholds.moderate_at:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def format_stack_rationale(
    category: SubstanceCategory,
    count: int,
    window_hours: float,
    inhaled_count: int,
    vaporized_bonus: float = 0.5,
) -> str:
    label = category_label(category)
    window = f"{window_hours:g}h"
    if count == 0:
        return f"{label}: no use logged in the last {window}."

    uses = "use" if count == 1 else "uses"
    text = f"{label}: {count} {uses} logged in the last {window}."
    if category == SubstanceCategory.STIMULANT and inhaled_count > 0:
        text += (
            f" {inhaled_count} of them smoked/vaporized/inhaled"
            f" (faster onset, weighted {1 + vaporized_bonus:g}x)."
        )
    return text


def evaluate_stack(
    qualifying: Sequence[ClassifiedEntry],
    category: SubstanceCategory,
    config: EngineConfig = DEFAULT_CONFIG,
) -> StackEntry:
    """Score qualifying same-category entries into a ``StackEntry``.

    Categories without thresholds (psychedelic, dissociative, unknown) always
    come back ``low``.
    """
    count = len(qualifying)
    inhaled = count_inhaled(qualifying) if category == SubstanceCategory.STIMULANT else 0
    score = stack_score(count, inhaled, category, config.vaporized_bonus)

    thresholds = config.thresholds.get(category)
    level = stack_level(score, thresholds) if thresholds is not None else RiskLevel.LOW
    window = config.window_for(category) or 0.0

    return StackEntry(
        category=category,
        level=level,
        count=count,
        score=score,
        rationale=format_stack_rationale(
            category, count, window, inhaled, config.vaporized_bonus,
        ),
    )
