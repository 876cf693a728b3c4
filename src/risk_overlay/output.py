"""Output handlers - JSON-ready conversion and file output.

The engine returns frozen dataclasses with enums and aware datetimes.
result_to_dict() turns them into primitives for the presentation layer:
    {"overall_level", "warnings", "stacks", "rebound", "sleep_opportunity", "notes"}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from risk_overlay.categories import category_label
from risk_overlay.models import ReboundWindow, RiskOverlayResult, StackEntry


def stack_to_dict(stack: StackEntry) -> dict[str, Any]:
    return {
        "category": stack.category.value,
        "label": category_label(stack.category),
        "level": stack.level.value,
        "count": stack.count,
        "score": stack.score,
        "rationale": stack.rationale,
    }


def window_to_dict(window: ReboundWindow) -> dict[str, Any]:
    return {
        "category": window.category.value,
        "window_start": window.window_start.isoformat(),
        "window_end": window.window_end.isoformat(),
        "risks": list(window.risks),
        "rationale": window.rationale,
    }


def result_to_dict(result: RiskOverlayResult) -> dict[str, Any]:
    return {
        "overall_level": result.overall_level.value,
        "warnings": list(result.warnings),
        "stacks": [stack_to_dict(s) for s in result.stacks],
        "rebound": [window_to_dict(w) for w in result.rebound],
        "sleep_opportunity": (
            window_to_dict(result.sleep_opportunity)
            if result.sleep_opportunity is not None
            else None
        ),
        "notes": list(result.notes),
    }


def write_json(payload: Any, output_path: str | Path) -> Path:
    """Write a JSON payload to a file and return its path."""
    path = Path(output_path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return path
