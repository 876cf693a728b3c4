"""Timestamp parsing and recency-window selection."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable

from risk_overlay.models import ClassifiedEntry, SubstanceCategory

logger = logging.getLogger(__name__)

# Routes with fast onset (smoked / vaporized / inhaled), incl. German spellings
_INHALED_ROUTES = frozenset({
    "smoked",
    "smoking",
    "vaporized",
    "vaporised",
    "vaped",
    "vaping",
    "inhaled",
    "inhalation",
    "geraucht",
    "verdampft",
    "inhaliert",
})


def as_utc(ts: datetime) -> datetime:
    """Naive datetimes are read as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _from_epoch(epoch: float) -> datetime | None:
    if not math.isfinite(epoch):
        return None
    if abs(epoch) > 1_000_000_000_000:
        epoch /= 1000.0
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime, or None if unparsable."""
    if isinstance(value, datetime):
        try:
            return as_utc(value)
        except (OverflowError, ValueError):
            return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return _from_epoch(float(value))
        except OverflowError:
            return None
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    if raw.isdecimal() and len(raw) == 8:
        # Compact YYYYMMDD date; as epoch seconds it would land in 1970-1973
        try:
            return datetime.strptime(raw, "%Y%m%d").replace(tzinfo=timezone.utc)
        except ValueError:
            return None

    numeric = raw.replace(".", "", 1)
    if numeric.isdecimal():
        try:
            return _from_epoch(float(raw))
        except ValueError:
            return None

    normalized_raw = raw[:-1] + "+00:00" if raw[-1] in "zZ" else raw
    try:
        parsed = datetime.fromisoformat(normalized_raw)
    except ValueError:
        return None
    try:
        return as_utc(parsed)
    except (OverflowError, ValueError):
        return None


def hours_between(taken_at: datetime, now: datetime) -> float:
    """Hours from ``taken_at`` to ``now``; negative when taken_at is in the future."""
    return (now - taken_at).total_seconds() / 3600.0


def is_inhaled_route(route: Any) -> bool:
    if not isinstance(route, str):
        return False
    return route.strip().lower() in _INHALED_ROUTES


def within_window(item: ClassifiedEntry, now: datetime, window_hours: float) -> bool:
    if item.taken_at_utc is None:
        return False
    elapsed = hours_between(item.taken_at_utc, now)
    return 0.0 <= elapsed <= window_hours


def select(
    entries: Iterable[ClassifiedEntry],
    category: SubstanceCategory,
    now: datetime,
    window_hours: float | None,
) -> list[ClassifiedEntry]:
    """Entries of ``category`` whose timestamp falls inside its lookback window.

    A ``None`` window means the category is not stacked, so nothing qualifies.
    """
    if window_hours is None:
        return []
    return [
        item
        for item in entries
        if item.category == category and within_window(item, now, window_hours)
    ]


def most_recent(entries: Iterable[ClassifiedEntry]) -> ClassifiedEntry | None:
    latest: ClassifiedEntry | None = None
    for item in entries:
        if item.taken_at_utc is None:
            continue
        if latest is None or item.taken_at_utc > latest.taken_at_utc:  # type: ignore[operator]
            latest = item
    return latest
