"""Pipeline — ties diffing, summarizing and reporting together."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from visreg.comparison.aggregator import ResultAggregator
from visreg.comparison.results import load_results
from visreg.comparison.summarizer import load_capture_errors
from visreg.models.comparison import ComparisonResult
from visreg.models.config import VisregConfig
from visreg.reporter.reporter import LATEST_REPORT, Reporter

logger = logging.getLogger(__name__)


class Pipeline:
    """Runs the visual regression stages against one project directory."""

    def __init__(self, config: VisregConfig, root: Path | None = None):
        self.config = config
        self.root = root or Path.cwd()
        self.aggregator = ResultAggregator(config, self.root)
        self.reporter = Reporter(config, self.root)

    def run_full(
        self,
        failed: Iterable[str] = (),
        generated_at: datetime | None = None,
    ) -> dict:
        """Diff every pair, then write the reports. Returns a run summary dict."""
        start = time.time()
        logger.info("Starting visual regression run for %s", self.config.project_name)

        logger.info("Stage 1/2: Diffing screenshots...")
        results = self.run_diff()

        logger.info("Stage 2/2: Generating reports...")
        report = self.run_report(results, failed=failed, generated_at=generated_at)

        report["duration"] = round(time.time() - start, 1)
        return report

    def run_diff(self) -> list[ComparisonResult]:
        """Run only the comparison stage."""
        return self.aggregator.run()

    def run_report(
        self,
        results: list[ComparisonResult] | None = None,
        failed: Iterable[str] = (),
        generated_at: datetime | None = None,
    ) -> dict:
        """Run only the reporting stage, from the persisted results by default."""
        if results is None:
            results = load_results(self.root / self.config.results_path)

        capture_errors = load_capture_errors(self.root / self.config.capture_errors_path)
        failed_keys = set(capture_errors) | set(failed)

        summary = self.reporter.summarize(results, failed=failed_keys)
        reports = self.reporter.generate_reports(results, summary, generated_at=generated_at)
        return {
            "project": self.config.project_name,
            "results": results,
            "summary": summary,
            "reports": reports,
        }

    @property
    def latest_report(self) -> Path:
        return self.reporter.reports_dir / LATEST_REPORT
