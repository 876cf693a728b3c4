"""Rebound and withdrawal windows after the most recent dose per category.

Only the single most recent qualifying entry drives the window; the route
of that entry decides the stimulant timing. Opioid and GABAergic windows are
deliberately wide because onset depends on substance, dose and history.
"""

from __future__ import annotations

from datetime import timedelta

from risk_overlay.models import ClassifiedEntry, ReboundWindow, SubstanceCategory
from risk_overlay.timing import is_inhaled_route

# (start_h, end_h) after the last dose
STIMULANT_INHALED_HOURS = (1.0, 4.0)
STIMULANT_OTHER_HOURS = (2.0, 10.0)
OPIOID_HOURS = (4.0, 48.0)
GABAERGIC_HOURS = (6.0, 72.0)

# Start offset after the last stimulant dose, then a fixed length
SLEEP_INHALED_START_HOURS = 3.0
SLEEP_OTHER_START_HOURS = 6.0
SLEEP_WINDOW_LENGTH_HOURS = 6.0

STIMULANT_RISKS = (
    "Rebound anxiety and restlessness",
    "Insomnia / trouble sleeping",
    "Mood crash",
    "Craving (urge to redose)",
)
OPIOID_RISKS = (
    "Withdrawal symptoms after regular use",
    "Restlessness, sweating, muscle aches",
    "Gastrointestinal discomfort",
)
GABAERGIC_RISKS = (
    "Rebound anxiety",
    "Insomnia / trouble sleeping",
    "Seizure risk on abrupt cessation after regular use - this is a medical "
    "emergency, not a prediction",
)


def _window(
    category: SubstanceCategory,
    item: ClassifiedEntry,
    hours: tuple[float, float],
    risks: tuple[str, ...],
    rationale: str,
) -> ReboundWindow | None:
    start_h, end_h = hours
    try:
        window_start = item.taken_at_utc + timedelta(hours=start_h)  # type: ignore[operator]
        window_end = item.taken_at_utc + timedelta(hours=end_h)  # type: ignore[operator]
    except OverflowError:
        # Dose logged at the very end of the representable date range
        return None
    return ReboundWindow(
        category=category,
        window_start=window_start,
        window_end=window_end,
        risks=risks,
        rationale=rationale,
    )


def predict(
    category: SubstanceCategory,
    most_recent: ClassifiedEntry | None,
) -> ReboundWindow | None:
    """Rebound window for a category, or None when no model applies."""
    if most_recent is None or most_recent.taken_at_utc is None:
        return None

    if category == SubstanceCategory.STIMULANT:
        inhaled = is_inhaled_route(most_recent.entry.route)
        hours = STIMULANT_INHALED_HOURS if inhaled else STIMULANT_OTHER_HOURS
        rationale = (
            f"Stimulant rebound typically appears {hours[0]:g}-{hours[1]:g}h after the last dose"
            + (" (earlier when smoked, vaporized or inhaled)" if inhaled else "")
            + ". Wide uncertainty."
        )
        return _window(category, most_recent, hours, STIMULANT_RISKS, rationale)

    if category == SubstanceCategory.OPIOID:
        rationale = (
            "Opioid withdrawal depends strongly on the substance, dose and length "
            "of use. Exact timing cannot be estimated reliably; this range is "
            "deliberately wide. With regular use, medical supervision is recommended."
        )
        return _window(category, most_recent, OPIOID_HOURS, OPIOID_RISKS, rationale)

    if category == SubstanceCategory.GABAERGIC:
        rationale = (
            "GABAergic rebound varies widely: phenibut has a half-life of about 5h, "
            "benzodiazepines range from 2h to over 100h. Stopping abruptly after "
            "regular use can be life-threatening; medical supervision is recommended."
        )
        return _window(category, most_recent, GABAERGIC_HOURS, GABAERGIC_RISKS, rationale)

    return None


def predict_sleep_opportunity(most_recent_stimulant: ClassifiedEntry | None) -> ReboundWindow | None:
    """Earliest plausible window for tiredness after stimulant use. Neutral, carries no risks."""
    if most_recent_stimulant is None or most_recent_stimulant.taken_at_utc is None:
        return None

    inhaled = is_inhaled_route(most_recent_stimulant.entry.route)
    start_h = SLEEP_INHALED_START_HOURS if inhaled else SLEEP_OTHER_START_HOURS
    rationale = (
        f"Tiredness may set in from about {start_h:g}h after the last stimulant dose. "
        "This is a rough estimate, not a guarantee of sleep."
    )
    return _window(
        SubstanceCategory.STIMULANT,
        most_recent_stimulant,
        (start_h, start_h + SLEEP_WINDOW_LENGTH_HOURS),
        (),
        rationale,
    )
