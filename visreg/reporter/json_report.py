"""JSON summary output."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from visreg.errors import VisregError
from visreg.models.comparison import Summary
from visreg.utils.files import write_atomic


def dump_summary(summary: Summary) -> str:
    return json.dumps(summary.model_dump(by_alias=True), indent=2) + "\n"


def generate_json_summary(summary: Summary, output_path: Path) -> None:
    """Write the machine-readable summary read by the PR comment bot."""
    write_atomic(output_path, dump_summary(summary))


def load_summary(path: Path) -> Summary:
    """Read a summary document; a missing file yields an empty summary."""
    if not path.exists():
        return Summary()
    try:
        with open(path) as f:
            return Summary.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError) as e:
        raise VisregError(f"Summary document {path} is malformed: {e}") from e
