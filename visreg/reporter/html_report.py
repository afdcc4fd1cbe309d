"""HTML report generator — a single self-contained file with inlined screenshots."""

from __future__ import annotations

import base64
import html
import logging
from datetime import datetime
from pathlib import Path

from visreg.comparison.image_set import ImageSet
from visreg.comparison.summarizer import group_by_key
from visreg.models.comparison import ComparisonResult, Summary
from visreg.models.config import VisregConfig

logger = logging.getLogger(__name__)

_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


def _embed_image(path: Path) -> str:
    """Read an image file and return a base64 data URI, or empty string if it is missing."""
    if not path.exists() or path.stat().st_size == 0:
        return ""
    data = base64.b64encode(path.read_bytes()).decode()
    mime = _MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")
    return f"data:{mime};base64,{data}"


def _build_card(label: str, image_path: Path, css_class: str) -> str:
    data_uri = _embed_image(image_path)
    if data_uri:
        body = f'<img src="{data_uri}" alt="{html.escape(label)}" loading="lazy"/>'
    else:
        logger.debug("Image missing for report: %s", image_path)
        body = '<div class="meta">missing</div>'
    return f'''
      <div class="{css_class}">
        <div class="meta">{html.escape(label)}</div>
        {body}
      </div>'''


def _build_row(r: ComparisonResult, config: VisregConfig, image_sets: dict[str, ImageSet]) -> str:
    """Baseline / current / diff side by side for one offending width."""
    ck = r.comparison_key
    css_class = "card bad" if r.mismatch_percent > config.notable_threshold else "card"
    return f'''
    <div class="row">
      {_build_card(f"Baseline — {r.width}px", image_sets["baseline"].path_for(ck), css_class)}
      {_build_card(f"Current — {r.width}px", image_sets["current"].path_for(ck), css_class)}
      {_build_card(f"Diff ({r.mismatch_percent:g}% mismatched) — {r.width}px", image_sets["diff"].path_for(ck), css_class)}
    </div>'''


def render_html_report(
    results: list[ComparisonResult],
    summary: Summary,
    config: VisregConfig,
    root: Path,
    generated_at: datetime,
) -> str:
    """Render the report document.

    Only keys with at least one result above epsilon get a section; within
    a key only the offending widths are shown, narrowest first. Baseline and
    current images are looked up by scanning their directories, so names
    such as ``home__375.PNG`` resolve to the files that were compared.
    """
    sections = []
    grouped = group_by_key(results)
    image_sets: dict[str, ImageSet] = {}
    if any(r.mismatch_percent > config.epsilon for r in results):
        image_sets = {
            "baseline": ImageSet.scan(root / config.baselines_dir, config.image_format),
            "current": ImageSet.scan(root / config.current_dir, config.image_format),
            # diff images are always written under their canonical names
            "diff": ImageSet(root / config.diffs_dir, config.image_format),
        }
    for key in sorted(grouped):
        rows = sorted(
            (r for r in grouped[key] if r.mismatch_percent > config.epsilon),
            key=lambda r: r.width,
        )
        if not rows:
            continue
        section = f'<h2>{html.escape(key)}</h2>'
        section += "".join(_build_row(r, config, image_sets) for r in rows)
        sections.append(section)

    if sections:
        body = "\n".join(sections)
    else:
        body = '<div class="empty">No visual differences detected.</div>'

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Visual Regression Report</title>
<style>
  :root {{ --pass: #22c55e; --fail: #ef4444; --changed: #eab308; --bg: #f8fafc; --card: white; --border: #e2e8f0; --text: #1e293b; --muted: #64748b; }}
  * {{ box-sizing: border-box; }}
  body {{ font: 14px/1.4 system-ui, sans-serif; background: var(--bg); color: var(--text); padding: 24px; margin: 0; }}
  h1 {{ margin: 0 0 12px; }}
  h2 {{ margin: 32px 0 8px; }}
  .summary {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(130px, 1fr)); gap: 0.8rem; margin-bottom: 1.5rem; }}
  .stat {{ background: var(--card); border-radius: 8px; padding: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,0.08); text-align: center; }}
  .stat .value {{ font-size: 1.8rem; font-weight: 700; }}
  .stat .label {{ font-size: 0.8rem; color: var(--muted); }}
  .stat.pass .value {{ color: var(--pass); }}
  .stat.changed .value {{ color: var(--changed); }}
  .stat.fail .value {{ color: var(--fail); }}
  .row {{ display: grid; grid-template-columns: 1fr 1fr 1fr; gap: 12px; align-items: start; margin-bottom: 12px; }}
  .card {{ border: 1px solid #ddd; padding: 8px; border-radius: 8px; background: var(--card); }}
  img {{ max-width: 100%; height: auto; display: block; background: #f9f9f9; }}
  .bad {{ background: #ffefef; border-color: #e88; }}
  .meta {{ font-size: 12px; color: #555; margin-bottom: 6px; }}
  .empty {{ padding: 12px; border: 1px dashed #ccc; border-radius: 8px; color: #555; background: #fafafa; }}
</style>
</head>
<body>
<h1>Visual Regression Report</h1>
<p class="meta">Threshold: {config.notable_threshold} &middot; Generated: {html.escape(generated_at.isoformat())}</p>

<div class="summary">
  <div class="stat"><div class="value">{summary.total}</div><div class="label">Total</div></div>
  <div class="stat pass"><div class="value">{summary.passed}</div><div class="label">Passed</div></div>
  <div class="stat changed"><div class="value">{summary.changed}</div><div class="label">Changed</div></div>
  <div class="stat fail"><div class="value">{summary.failed}</div><div class="label">Failed</div></div>
</div>

{body}
</body>
</html>
'''
