"""Classification of comparison results into passed / changed / failed."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from visreg.errors import ConfigError
from visreg.models.comparison import ComparisonResult, Status, Summary, UrlSummary

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-6


def group_by_key(results: Iterable[ComparisonResult]) -> dict[str, list[ComparisonResult]]:
    grouped: dict[str, list[ComparisonResult]] = {}
    for r in results:
        grouped.setdefault(r.key, []).append(r)
    return grouped


def max_percent_by_key(results: Iterable[ComparisonResult]) -> dict[str, float]:
    """Worst mismatch percent across widths, per key."""
    return {
        key: max(r.mismatch_percent for r in rows)
        for key, rows in group_by_key(results).items()
    }


def classify(max_percent: float, epsilon: float = DEFAULT_EPSILON) -> Status:
    """Anything at or below epsilon is float noise and counts as an exact match.

    Results above the notable threshold are still just "changed"; that
    threshold only affects report styling.
    """
    if max_percent <= epsilon:
        return "passed"
    return "changed"


def summarize(
    results: Iterable[ComparisonResult],
    epsilon: float = DEFAULT_EPSILON,
    failed: Iterable[str] | Mapping[str, str] | None = None,
) -> Summary:
    """Roll results up per key.

    ``failed`` names keys the capture step reported as broken; they are
    classified failed whatever their results say, and count towards the
    total even when no comparison exists for them.
    """
    worst = max_percent_by_key(results)
    failed_keys = set(failed or ())

    summary = Summary()
    for name in sorted(set(worst) | failed_keys):
        if name in failed_keys:
            entry = UrlSummary(name=name, status="failed", diff_percent=0)
            summary.failed += 1
        else:
            status = classify(worst[name], epsilon)
            diff_percent = 0 if status == "passed" else worst[name]
            entry = UrlSummary(name=name, status=status, diff_percent=diff_percent)
            if status == "passed":
                summary.passed += 1
            else:
                summary.changed += 1
        summary.urls.append(entry)

    summary.total = len(summary.urls)
    logger.debug(
        "Summary: %d total, %d passed, %d changed, %d failed",
        summary.total, summary.passed, summary.changed, summary.failed,
    )
    return summary


def load_capture_errors(path: str | Path) -> dict[str, str]:
    """Read the capture step's ``{key: error message}`` document, if any."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Capture error file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise ConfigError(f"Capture error file {path} must map key names to messages")
    if data:
        logger.warning("Capture reported %d failed screenshot(s): %s", len(data), ", ".join(sorted(data)))
    return data
