"""Persistence of the ordered ComparisonResult sequence."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from visreg.errors import VisregError
from visreg.models.comparison import ComparisonResult
from visreg.utils.files import write_atomic

logger = logging.getLogger(__name__)

_results_adapter = TypeAdapter(list[ComparisonResult])


def dump_results(results: list[ComparisonResult]) -> str:
    return json.dumps([r.model_dump(by_alias=True) for r in results], indent=2) + "\n"


def save_results(results: list[ComparisonResult], path: str | Path) -> Path:
    """Overwrite the results document with ``results`` in iteration order."""
    path = write_atomic(path, dump_results(results))
    logger.debug("Saved %d results to %s", len(results), path)
    return path


def load_results(path: str | Path) -> list[ComparisonResult]:
    """Read the results document; a missing file means no results yet."""
    path = Path(path)
    if not path.exists():
        logger.debug("No results document at %s", path)
        return []
    try:
        with open(path) as f:
            data = json.load(f)
        return _results_adapter.validate_python(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise VisregError(f"Results document {path} is malformed: {e}") from e
