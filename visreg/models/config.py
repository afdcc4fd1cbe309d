"""Configuration model for the visual regression pipeline."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from visreg.errors import ConfigError


class VisregConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Capture matrix
    widths: list[int] = Field(default_factory=lambda: [375, 1400])
    image_format: str = "png"

    # Diff settings
    threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    alpha: float = Field(default=0.5, ge=0.0, le=1.0)
    include_aa: bool = True

    # Classification / display
    epsilon: float = Field(default=1e-6, ge=0.0)
    notable_threshold: float = Field(default=0.1, ge=0.0)

    # Report retention (0 keeps everything)
    keep_last: int = Field(default=10, ge=0)

    # Layout
    baselines_dir: str = "baselines"
    current_dir: str = "artifacts/current"
    diffs_dir: str = "artifacts/diffs"
    results_path: str = "artifacts/results.json"
    summary_path: str = "artifacts/report/summary.json"
    reports_dir: str = "reports"
    capture_errors_path: str = "artifacts/capture-errors.json"

    # Label used in logs and PR comments
    project: str = ""

    @field_validator("widths")
    @classmethod
    def check_widths(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("at least one viewport width is required")
        for w in v:
            if w <= 0:
                raise ValueError(f"viewport width must be positive, got {w}")
        if len(set(v)) != len(v):
            raise ValueError(f"duplicate viewport widths in {v}")
        return v

    @field_validator("image_format")
    @classmethod
    def check_image_format(cls, v: str) -> str:
        v = v.strip().lower()
        if not v or v.startswith("."):
            raise ValueError("image_format must be a bare extension such as 'png'")
        return v

    @property
    def project_name(self) -> str:
        return self.project or Path.cwd().name

    @classmethod
    def load(cls, path: str | Path) -> "VisregConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)


def build_config(path: str | Path | None = None, overrides: dict[str, Any] | None = None) -> VisregConfig:
    """Build the run configuration once, at process start.

    Values from the JSON file (when it exists) are overlaid with non-None
    ``overrides``. Any validation failure becomes a ConfigError naming the
    offending key.
    """
    data: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        try:
            with open(path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")

    for name, value in (overrides or {}).items():
        if value is not None:
            data[name] = value

    try:
        return VisregConfig(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or "config"
        raise ConfigError(f"Invalid configuration for '{field}': {first['msg']}") from e
