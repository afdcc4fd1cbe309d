"""Result aggregation — diffs every baseline/current pair and persists the results."""

from __future__ import annotations

import logging
from pathlib import Path

from visreg.imaging.codec import load_image, save_image
from visreg.imaging.differ import diff_images
from visreg.imaging.reconciler import reconcile
from visreg.models.comparison import ComparisonKey, ComparisonResult
from visreg.models.config import VisregConfig

from .image_set import ImageSet
from .results import save_results

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Compares the baseline set against the current set for every configured width."""

    def __init__(self, config: VisregConfig, root: Path | None = None):
        self.config = config
        self.root = root or Path.cwd()
        self.baselines_dir = self.root / config.baselines_dir
        self.current_dir = self.root / config.current_dir
        self.diffs_dir = self.root / config.diffs_dir
        self.results_path = self.root / config.results_path

    def run(self) -> list[ComparisonResult]:
        """Diff all available pairs and overwrite the results document."""
        self.diffs_dir.mkdir(parents=True, exist_ok=True)

        if not self.baselines_dir.is_dir():
            logger.info("No baselines found at %s; writing empty results", self.baselines_dir)
            save_results([], self.results_path)
            return []

        baselines = ImageSet.scan(self.baselines_dir, self.config.image_format)
        current = ImageSet.scan(self.current_dir, self.config.image_format)
        if not current.exists:
            logger.warning("Current screenshot directory %s does not exist", self.current_dir)

        results = self.compare_sets(baselines, current)
        save_results(results, self.results_path)
        logger.info("Compared %d screenshot pairs", len(results))
        return results

    def compare_sets(self, baselines: ImageSet, current: ImageSet) -> list[ComparisonResult]:
        """Keys in lexical order, then widths in configured order."""
        results = []
        for key in baselines.keys():
            for width in self.config.widths:
                ck = ComparisonKey(key=key, width=width)
                baseline_path = baselines.get(ck)
                current_path = current.get(ck)
                if baseline_path is None or current_path is None:
                    logger.debug(
                        "Skipping %s %dpx (baseline=%s, current=%s)",
                        key, width, baseline_path is not None, current_path is not None,
                    )
                    continue
                results.append(self.compare_pair(ck, baseline_path, current_path))
        return results

    def compare_pair(self, ck: ComparisonKey, baseline_path: Path, current_path: Path) -> ComparisonResult:
        """Reconcile, diff and write the diff image for one pair."""
        baseline, current = reconcile(load_image(baseline_path), load_image(current_path))
        outcome = diff_images(
            baseline, current,
            threshold=self.config.threshold,
            alpha=self.config.alpha,
            include_aa=self.config.include_aa,
        )
        save_image(outcome.diff_image, self.diff_path(ck))

        result = ComparisonResult(
            key=ck.key,
            width=ck.width,
            canvas_width=baseline.width,
            canvas_height=baseline.height,
            mismatch_pixel_count=outcome.mismatch_pixels,
            mismatch_percent=outcome.mismatch_percent,
        )
        logger.info("Diff %s %dpx -> %.3f%%", ck.key, ck.width, result.mismatch_percent)
        return result

    def diff_path(self, ck: ComparisonKey) -> Path:
        return self.diffs_dir / ck.filename(self.config.image_format)
