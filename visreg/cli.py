"""CLI entry point for visual regression runs."""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from visreg.errors import ConfigError, VisregError
from visreg.models.comparison import Summary
from visreg.models.config import VisregConfig, build_config
from visreg.pipeline import Pipeline
from visreg.reporter.comment import render_comment
from visreg.reporter.json_report import load_summary

console = Console()

DEFAULT_CONFIG = "visreg.json"

_STATUS_STYLE = {"passed": "green", "changed": "yellow", "failed": "red"}


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _parse_widths(value: str | None) -> list[int] | None:
    if not value:
        return None
    try:
        return [int(w) for w in value.split(",") if w.strip()]
    except ValueError as e:
        raise ConfigError(f"Invalid configuration for 'widths': {value!r} is not a comma-separated list of integers") from e


def config_options(f):
    """Options shared by every command that needs a configuration."""
    options = [
        click.option("--config", "-c", "config_path", default=None,
                     help=f"Config file path (default: {DEFAULT_CONFIG} if present)"),
        click.option("--widths", envvar="VISREG_WIDTHS", default=None,
                     help="Comma-separated viewport widths, e.g. 375,1400"),
        click.option("--threshold", envvar="VISREG_THRESHOLD", type=float, default=None,
                     help="Per-pixel colour distance threshold (0-1)"),
        click.option("--alpha", envvar="VISREG_ALPHA", type=float, default=None,
                     help="Blend factor for unchanged pixels in diff images (0-1)"),
        click.option("--epsilon", envvar="VISREG_EPSILON", type=float, default=None,
                     help="Mismatch percent treated as no change"),
        click.option("--notable-threshold", envvar="VISREG_NOTABLE_THRESHOLD", type=float, default=None,
                     help="Mismatch percent highlighted in the report"),
        click.option("--keep-last", envvar="VISREG_KEEP_LAST", type=int, default=None,
                     help="Timestamped reports to keep (0 keeps all)"),
        click.option("--project", envvar="VISREG_PROJECT", default=None,
                     help="Project label for logs and comments"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def load_config(config_path: str | None, **overrides) -> VisregConfig:
    """Build the run configuration from the config file plus CLI/env overrides."""
    if config_path is not None and not Path(config_path).exists():
        raise ConfigError(f"Config file not found: {config_path}")
    overrides["widths"] = _parse_widths(overrides.get("widths"))
    return build_config(config_path or DEFAULT_CONFIG, overrides)


def handle_errors(f):
    """Report unrecoverable errors on the console and exit with status 1."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except VisregError as e:
            console.print(f"[red]{escape(str(e))}[/red]", highlight=False)
            sys.exit(1)
        except OSError as e:
            console.print(f"[red]Filesystem error: {escape(str(e))}[/red]", highlight=False)
            sys.exit(1)
    return wrapper


def _print_summary(summary: Summary) -> None:
    table = Table(title="Results Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Total URLs", str(summary.total))
    table.add_row("Passed", f"[green]{summary.passed}[/green]")
    table.add_row("Changed", f"[yellow]{summary.changed}[/yellow]")
    table.add_row("Failed", f"[red]{summary.failed}[/red]")
    console.print(table)

    if summary.urls:
        details = Table(title="Per URL")
        details.add_column("Name", style="bold")
        details.add_column("Status")
        details.add_column("Diff %", justify="right")
        for u in summary.urls:
            style = _STATUS_STYLE[u.status]
            details.add_row(u.name, f"[{style}]{u.status}[/{style}]", f"{u.diff_percent:.3f}")
        console.print(details)


def _print_reports(reports: dict[str, str]) -> None:
    for name, path in reports.items():
        console.print(f"  {name.upper()}: [blue]{path}[/blue]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Screenshot diffing and reporting for visual regression tests."""
    setup_logging(verbose)


@cli.command()
@config_options
@click.option("--failed", "failed", multiple=True, help="Key reported broken by capture (repeatable)")
@handle_errors
def run(config_path: str | None, failed: tuple[str, ...], **overrides) -> None:
    """Diff current screenshots against baselines and write the reports."""
    cfg = load_config(config_path, **overrides)
    results = Pipeline(cfg).run_full(failed=failed)

    console.print("\n[bold green]Run Complete[/bold green]")
    _print_summary(results["summary"])
    _print_reports(results["reports"])


@cli.command()
@config_options
@handle_errors
def diff(config_path: str | None, **overrides) -> None:
    """Diff current screenshots against baselines and write results.json."""
    cfg = load_config(config_path, **overrides)
    results = Pipeline(cfg).run_diff()
    console.print(f"[green]Diff complete:[/green] {len(results)} pairs compared")


@cli.command()
@config_options
@click.option("--failed", "failed", multiple=True, help="Key reported broken by capture (repeatable)")
@handle_errors
def report(config_path: str | None, failed: tuple[str, ...], **overrides) -> None:
    """Render the HTML report and summary from an existing results.json."""
    cfg = load_config(config_path, **overrides)
    results = Pipeline(cfg).run_report(failed=failed)
    _print_summary(results["summary"])
    _print_reports(results["reports"])


@cli.command()
@click.option("--widths", default=None, help="Comma-separated viewport widths, e.g. 375,1400")
@click.option("--project", default="", help="Project label")
@handle_errors
def init(widths: str | None, project: str) -> None:
    """Create a default configuration file."""
    config_path = Path(DEFAULT_CONFIG)
    if config_path.exists():
        if not click.confirm(f"{DEFAULT_CONFIG} already exists. Overwrite?"):
            return

    cfg = build_config(None, {"widths": _parse_widths(widths), "project": project})
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nPut accepted screenshots in "
                  f"[blue]{cfg.baselines_dir}/[/blue] and fresh captures in [blue]{cfg.current_dir}/[/blue], then run:")
    console.print("  [blue]visreg run[/blue]")


@cli.command("open")
@click.option("--config", "-c", "config_path", default=None, help="Config file path")
@handle_errors
def open_latest(config_path: str | None) -> None:
    """Open the latest HTML report in the default viewer."""
    cfg = load_config(config_path)
    path = Pipeline(cfg).latest_report
    if not path.exists():
        console.print(f"[red]{path} not found. Run 'visreg run' first.[/red]")
        sys.exit(1)
    if click.launch(str(path)) != 0:
        console.print("Failed to open the report automatically. Here is the path:")
        console.print(str(path))


@cli.command()
@click.option("--config", "-c", "config_path", default=None, help="Config file path")
@click.option("--environment-url", envvar="VISREG_ENVIRONMENT_URL", default=None, help="URL of the environment under test")
@click.option("--baseline-url", envvar="VISREG_BASELINE_URL", default=None, help="URL the baselines were captured from")
@click.option("--project", envvar="VISREG_PROJECT", default=None, help="Project label for the comment heading")
@click.option("--run-url", envvar="VISREG_RUN_URL", default=None, help="Link to the CI run artifacts")
@handle_errors
def comment(
    config_path: str | None,
    environment_url: str | None,
    baseline_url: str | None,
    run_url: str | None,
    project: str | None,
) -> None:
    """Print the pull-request comment markdown for the latest summary."""
    cfg = load_config(config_path, project=project)
    summary = load_summary(Path.cwd() / cfg.summary_path)
    click.echo(render_comment(
        summary,
        project=cfg.project_name,
        environment_url=environment_url,
        baseline_url=baseline_url,
        run_url=run_url,
    ), nl=False)


if __name__ == "__main__":
    cli()
