"""Report generation orchestration."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from pathlib import Path

from visreg.comparison.summarizer import summarize
from visreg.models.comparison import ComparisonResult, Summary
from visreg.models.config import VisregConfig
from visreg.utils.files import write_atomic

from .html_report import render_html_report
from .json_report import generate_json_summary

logger = logging.getLogger(__name__)

REPORT_PREFIX = "report-"
LATEST_REPORT = "latest.html"


def report_filename(generated_at: datetime) -> str:
    """Timestamped report name; lexical order equals chronological order."""
    stamp = generated_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    return f"{REPORT_PREFIX}{stamp}.html"


def rotate_reports(reports_dir: Path, keep_last: int) -> list[Path]:
    """Delete all but the newest ``keep_last`` timestamped reports.

    ``keep_last == 0`` keeps everything. Files that cannot be removed are
    logged and left alone. Returns the removed paths.
    """
    if keep_last <= 0 or not reports_dir.is_dir():
        return []

    reports = sorted(
        (p for p in reports_dir.glob(f"{REPORT_PREFIX}*.html") if p.is_file()),
        key=lambda p: p.name,
        reverse=True,
    )
    removed = []
    for old in reports[keep_last:]:
        try:
            old.unlink()
            removed.append(old)
        except OSError as e:
            logger.warning("Could not remove old report %s: %s", old, e)
    if removed:
        logger.debug("Rotated out %d old reports", len(removed))
    return removed


class Reporter:
    """Turns comparison results into the summary and HTML report artifacts."""

    def __init__(self, config: VisregConfig, root: Path | None = None):
        self.config = config
        self.root = root or Path.cwd()
        self.reports_dir = self.root / config.reports_dir
        self.summary_path = self.root / config.summary_path

    def summarize(
        self,
        results: list[ComparisonResult],
        failed: Iterable[str] | Mapping[str, str] | None = None,
    ) -> Summary:
        return summarize(results, epsilon=self.config.epsilon, failed=failed)

    def generate_reports(
        self,
        results: list[ComparisonResult],
        summary: Summary,
        generated_at: datetime | None = None,
    ) -> dict[str, str]:
        """Write the timestamped report, the latest alias and the summary. Returns artifact -> path."""
        generated_at = generated_at or datetime.now(timezone.utc)
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Report output directory: %s", self.reports_dir)

        report_html = render_html_report(results, summary, self.config, self.root, generated_at)

        report_path = self.reports_dir / report_filename(generated_at)
        with open(report_path, "w", encoding="utf-8") as f:
            f.write(report_html)
        logger.info("HTML report: %s", report_path)

        latest_path = write_atomic(self.reports_dir / LATEST_REPORT, report_html)
        logger.info("Also updated: %s", latest_path)

        generate_json_summary(summary, self.summary_path)
        logger.info("Summary: %s", self.summary_path)

        rotate_reports(self.reports_dir, self.config.keep_last)

        return {
            "html": str(report_path),
            "latest": str(latest_path),
            "summary": str(self.summary_path),
        }
