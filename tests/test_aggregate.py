"""Tests for overall level aggregation and notes."""

from risk_overlay.aggregate import aggregate, build_notes, format_unknown_note
from risk_overlay.config import (
    DEFAULT_DISCLAIMERS,
    DEFAULT_EMERGENCY_NOTE,
    DEFAULT_REDOSE_NOTE,
    EngineConfig,
)
from risk_overlay.interactions import RuleSignal
from risk_overlay.models import RiskLevel, StackEntry, SubstanceCategory


def _stack(level: RiskLevel, category=SubstanceCategory.STIMULANT) -> StackEntry:
    return StackEntry(category=category, level=level, count=1, score=1.0, rationale="")


def _signal(level: RiskLevel | None) -> RuleSignal:
    return RuleSignal("test", "warning", level)


class TestAggregate:
    def test_nothing_is_low(self):
        assert aggregate([], []) == RiskLevel.LOW

    def test_low_stacks_stay_low(self):
        assert aggregate([_stack(RiskLevel.LOW)], []) == RiskLevel.LOW

    def test_critical_rule_wins(self):
        assert aggregate([_stack(RiskLevel.MODERATE)], [_signal(RiskLevel.CRITICAL)]) == RiskLevel.CRITICAL

    def test_critical_stack_beats_high_rule(self):
        assert aggregate([_stack(RiskLevel.CRITICAL)], [_signal(RiskLevel.HIGH)]) == RiskLevel.CRITICAL

    def test_high_rule_beats_moderate_stack(self):
        assert aggregate([_stack(RiskLevel.MODERATE)], [_signal(RiskLevel.HIGH)]) == RiskLevel.HIGH

    def test_high_stack(self):
        assert aggregate([_stack(RiskLevel.HIGH), _stack(RiskLevel.LOW)], []) == RiskLevel.HIGH

    def test_moderate_stack(self):
        assert aggregate([_stack(RiskLevel.MODERATE)], []) == RiskLevel.MODERATE

    def test_reminder_without_level_does_not_raise_level(self):
        assert aggregate([], [_signal(None)]) == RiskLevel.LOW

    def test_two_active_categories_is_moderate(self):
        active = {SubstanceCategory.PSYCHEDELIC, SubstanceCategory.DISSOCIATIVE}
        assert aggregate([], [], active) == RiskLevel.MODERATE

    def test_one_active_category_is_low(self):
        assert aggregate([], [], {SubstanceCategory.PSYCHEDELIC}) == RiskLevel.LOW

    def test_never_below_any_stack(self):
        for level in RiskLevel:
            assert aggregate([_stack(level)], []) >= level


class TestNotes:
    def test_disclaimers_always_present(self):
        notes = build_notes(RiskLevel.LOW)
        assert notes == list(DEFAULT_DISCLAIMERS)

    def test_high_adds_safety_notes(self):
        notes = build_notes(RiskLevel.HIGH)
        assert notes[-2:] == [DEFAULT_REDOSE_NOTE, DEFAULT_EMERGENCY_NOTE]

    def test_critical_adds_safety_notes(self):
        assert DEFAULT_EMERGENCY_NOTE in build_notes(RiskLevel.CRITICAL)

    def test_moderate_has_no_safety_notes(self):
        assert DEFAULT_REDOSE_NOTE not in build_notes(RiskLevel.MODERATE)

    def test_unknown_substances_listed_sorted(self):
        notes = build_notes(RiskLevel.LOW, {"zeta", "alpha"})
        assert format_unknown_note(["alpha", "zeta"]) in notes
        assert "alpha, zeta" in notes[-1]

    def test_custom_note_text(self):
        config = EngineConfig(disclaimers=("Only this.",), redose_note="Stop.", emergency_note="Call.")
        assert build_notes(RiskLevel.CRITICAL, config=config) == ["Only this.", "Stop.", "Call."]


def test_levels_are_ordered():
    assert RiskLevel.LOW < RiskLevel.MODERATE < RiskLevel.HIGH < RiskLevel.CRITICAL
    assert max([RiskLevel.HIGH, RiskLevel.LOW, RiskLevel.CRITICAL]) == RiskLevel.CRITICAL
