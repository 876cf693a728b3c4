"""CLI interface for the risk overlay engine."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import click
from pydantic import ValidationError

from risk_overlay.categories import category_label, classify, known_substances, normalize_substance
from risk_overlay.config import DEFAULT_CONFIG, EngineConfig, Settings
from risk_overlay.engine import compute_risk_overlay
from risk_overlay.logging import setup_logging
from risk_overlay.models import SubstanceCategory
from risk_overlay.output import result_to_dict, write_json
from risk_overlay.overrides import validate_overrides
from risk_overlay.payloads import load_entries
from risk_overlay.presets import PRESETS
from risk_overlay.timing import parse_timestamp

logger = logging.getLogger(__name__)


def _resolve_now(raw: str | None) -> datetime:
    if raw is None:
        return datetime.now(timezone.utc)
    parsed = parse_timestamp(raw)
    if parsed is None:
        click.echo(f"Error: --now is not a valid timestamp: {raw!r}", err=True)
        sys.exit(1)
    return parsed


def _load_config(config_file: Path | None) -> EngineConfig:
    if config_file is None:
        return DEFAULT_CONFIG
    try:
        with config_file.open(encoding="utf-8") as f:
            raw = json.load(f)
        return DEFAULT_CONFIG.with_overrides(validate_overrides(raw))
    except json.JSONDecodeError as exc:
        click.echo(f"Error: {config_file} is not valid JSON: {exc}", err=True)
    except (UnicodeDecodeError, OSError) as exc:
        click.echo(f"Error: {config_file} is not readable: {exc}", err=True)
    except ValidationError as exc:
        click.echo(f"Error: invalid configuration in {config_file}:\n{exc}", err=True)
    sys.exit(1)


def _emit(payload: dict, output: Path | None) -> None:
    if output:
        write_json(payload, output)
        click.echo(f"Wrote result to {output}")
    else:
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.group()
def main():
    """Poly-substance risk overlay (educational, not medical advice)."""
    settings = Settings.from_env()
    setup_logging(settings.log_format, settings.log_level)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--now", "now_raw", type=str, help="Evaluation time (ISO-8601). Defaults to current UTC time.")
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with window/threshold/note overrides.",
)
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Write the result to a JSON file.")
def assess(input_file: Path, now_raw: str | None, config_file: Path | None, output: Path | None):
    """Assess a JSON log of substance entries."""
    try:
        with input_file.open(encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as exc:
        click.echo(f"Error: {input_file} is not valid JSON: {exc}", err=True)
        sys.exit(1)
    except (UnicodeDecodeError, OSError) as exc:
        click.echo(f"Error: {input_file} is not readable: {exc}", err=True)
        sys.exit(1)

    try:
        loaded = load_entries(records)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    now = _resolve_now(now_raw)
    config = _load_config(config_file)

    if loaded.rejected:
        click.echo(f"Skipped {len(loaded.rejected)} invalid record(s):", err=True)
        for reason in loaded.rejected:
            click.echo(f"  {reason}", err=True)

    logger.info(
        "Assessing %d entries at %s",
        len(loaded.entries),
        now.isoformat(),
        extra={"risk_entry_count": len(loaded.entries)},
    )
    result = compute_risk_overlay(loaded.entries, now, config)
    _emit(result_to_dict(result), output)


@main.command()
@click.argument("scenario", type=click.Choice(list(PRESETS.keys())))
@click.option("--now", "now_raw", type=str, help="Evaluation time (ISO-8601). Defaults to current UTC time.")
def demo(scenario: str, now_raw: str | None):
    """Assess a preset scenario."""
    now = _resolve_now(now_raw)
    entries = PRESETS[scenario].materialize(now)
    result = compute_risk_overlay(entries, now)
    _emit(result_to_dict(result), None)


@main.command("list-scenarios")
def list_scenarios():
    """List available preset scenarios."""
    for name, scenario in PRESETS.items():
        click.echo(f"{name}:")
        click.echo(f"  {scenario.description}")
        for item in scenario.entries:
            route = f", {item.route}" if item.route else ""
            click.echo(f"  - {item.substance} ({item.hours_ago:g}h ago{route})")


@main.command("classify")
@click.argument("names", nargs=-1, required=True)
def classify_command(names: tuple[str, ...]):
    """Show the canonical key and category for substance names."""
    for name in names:
        category = classify(name)
        canonical = normalize_substance(name) or "-"
        click.echo(f"{name}: {canonical} -> {category.value} ({category_label(category)})")


@main.command("list-substances")
@click.option(
    "--category", "category_name",
    type=click.Choice([c.value for c in SubstanceCategory if c != SubstanceCategory.UNKNOWN]),
    help="Only list substances of this category.",
)
def list_substances(category_name: str | None):
    """List substances the classifier knows by name, grouped by category."""
    grouped: dict[SubstanceCategory, list[str]] = {}
    for key in known_substances():
        grouped.setdefault(classify(key), []).append(key)

    for category in SubstanceCategory:
        names = grouped.get(category)
        if not names or (category_name and category.value != category_name):
            continue
        click.echo(f"{category.value} ({category_label(category)}):")
        click.echo(f"  {', '.join(names)}")
