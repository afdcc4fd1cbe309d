"""Markdown body for a pull-request status comment.

Only renders text; posting it is left to the CI job.
"""

from __future__ import annotations

from visreg.models.comparison import Summary

MAX_PASSED_LISTED = 10


def _overall_status(summary: Summary) -> tuple[str, str]:
    if summary.failed > 0:
        return "❌", "Failed"
    if summary.changed > 0:
        return "⚠️", "Changes Detected"
    return "✅", "All Passed"


def render_comment(
    summary: Summary,
    project: str,
    environment_url: str | None = None,
    baseline_url: str | None = None,
    run_url: str | None = None,
) -> str:
    emoji, status = _overall_status(summary)
    lines = [f"## {emoji} Visual Regression Test: {status} ({project.upper()})", ""]

    if environment_url:
        lines.append(f"**Environment:** [{environment_url}]({environment_url})  ")
    if baseline_url:
        lines.append(f"**Baseline:** [{baseline_url}]({baseline_url})")
    if environment_url or baseline_url:
        lines.append("")

    lines += [
        "### Summary",
        "| Status | Count |",
        "|--------|-------|",
        f"| ✅ Passed (No changes) | {summary.passed} |",
        f"| ⚠️ Changed (Visual differences) | {summary.changed} |",
        f"| ❌ Failed (Broken) | {summary.failed} |",
        f"| **Total URLs Tested** | **{summary.total}** |",
        "",
    ]

    failed = [u for u in summary.urls if u.status == "failed"]
    changed = [u for u in summary.urls if u.status == "changed"]
    passed = [u for u in summary.urls if u.status == "passed"]

    if summary.urls:
        lines += ["### Detailed Results", ""]

    if failed:
        lines.append(f"#### ❌ Failed ({len(failed)})")
        lines += [f"- **{u.name}**" for u in failed]
        lines.append("")

    if changed:
        lines.append(f"#### ⚠️ Visual Changes Detected ({len(changed)})")
        lines += [f"- **{u.name}** ({u.diff_percent:.2f}% difference)" for u in changed]
        lines.append("")

    if passed and len(passed) <= MAX_PASSED_LISTED:
        lines += ["<details>", f"<summary>✅ Passed ({len(passed)})</summary>", ""]
        lines += [f"- {u.name}" for u in passed]
        lines += ["", "</details>", ""]

    if run_url:
        lines += ["### Resources", f"- [Download Full Report & Screenshots]({run_url})", ""]

    return "\n".join(lines).rstrip() + "\n"
