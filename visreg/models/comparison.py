"""Comparison data structures shared by the aggregator, summarizer and reporter."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from visreg.errors import InvalidImageNameError

KEY_SEPARATOR = "__"

Status = Literal["passed", "changed", "failed"]


class ComparisonKey(BaseModel):
    """Identity of one baseline/current/diff triple."""

    model_config = ConfigDict(frozen=True)

    key: str
    width: int

    @classmethod
    def parse(cls, filename: str, extension: str = "png") -> "ComparisonKey":
        """Parse ``<key>__<width>.<extension>``, raising on anything else."""
        suffix = f".{extension}"
        if not filename.lower().endswith(suffix.lower()):
            raise InvalidImageNameError(filename, f"expected a '{suffix}' file")
        stem = filename[: -len(suffix)]
        key, sep, width = stem.rpartition(KEY_SEPARATOR)
        if not sep:
            raise InvalidImageNameError(filename, f"missing '{KEY_SEPARATOR}<width>' suffix")
        if not key:
            raise InvalidImageNameError(filename, "empty key")
        if not (width.isascii() and width.isdigit()):
            raise InvalidImageNameError(filename, f"width '{width}' is not a number")
        if int(width) <= 0:
            raise InvalidImageNameError(filename, "width must be positive")
        return cls(key=key, width=int(width))

    def filename(self, extension: str = "png") -> str:
        return f"{self.key}{KEY_SEPARATOR}{self.width}.{extension}"


class ComparisonResult(BaseModel):
    """Mismatch measurement for one (key, width) pair.

    Serialized with camelCase field names; that layout is what the
    results document consumers read.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    key: str
    width: int
    canvas_width: int
    canvas_height: int
    mismatch_pixel_count: int
    mismatch_percent: float

    @property
    def comparison_key(self) -> ComparisonKey:
        return ComparisonKey(key=self.key, width=self.width)


class UrlSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    status: Status
    diff_percent: float = 0.0


class Summary(BaseModel):
    """Per-key roll-up consumed by the PR comment bot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    passed: int = 0
    changed: int = 0
    failed: int = 0
    urls: list[UrlSummary] = Field(default_factory=list)
