"""
Click-based CLI for the league standings engine.

Usage:
    python -m efc_standings.cli standings
    python -m efc_standings.cli standings --constructors --source-dir data/sheets
    python -m efc_standings.cli progression
    python -m efc_standings.cli calendar
    python -m efc_standings.cli export --out data/exports
"""
import sys
from pathlib import Path

import click
import pandas as pd

from efc_standings.config import cfg
from efc_standings.core.season import calendar_stats, next_race
from efc_standings.export import (
    calendar_frame,
    constructor_standings_frame,
    driver_standings_frame,
    export_snapshot,
    progression_frame,
)
from efc_standings.ingest_sheets.overrides import load_overrides
from efc_standings.ingest_sheets.pipeline import Ingestor, SeasonSnapshot
from efc_standings.ingest_sheets.sheet_client import DirectorySheetSource, GoogleSheetSource
from efc_standings.utils.logger import logger, setup_logger


def _source_options(fn):
    fn = click.option(
        "--source-dir",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        default=None,
        help="Read '<sheet>.csv' exports from this directory instead of Google Sheets.",
    )(fn)
    fn = click.option(
        "--overrides",
        "overrides_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Overrides JSON file (default from config).",
    )(fn)
    return fn


def _load_snapshot(source_dir: Path | None, overrides_path: Path | None) -> SeasonSnapshot:
    source = DirectorySheetSource(source_dir) if source_dir else GoogleSheetSource()
    overrides = load_overrides(overrides_path or cfg.paths.overrides)
    result = Ingestor(source=source, overrides=overrides).load()
    if not result.is_ok:
        logger.error(f"No league data available ({len(result.issues)} issue(s)).")
        sys.exit(1)
    return result.snapshot


def _echo_frame(df: pd.DataFrame) -> None:
    with pd.option_context("display.max_rows", None, "display.max_columns", None, "display.width", 200):
        click.echo(df.to_string(index=False))


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """🏁  League standings engine"""
    cfg.paths.setup()
    setup_logger(log_dir=cfg.paths.logs, level="DEBUG" if verbose else "INFO")


@cli.command()
@click.option("--constructors", is_flag=True, help="Show constructor standings.")
@_source_options
def standings(constructors: bool, source_dir: Path | None, overrides_path: Path | None) -> None:
    """Print driver (or constructor) championship standings."""
    snapshot = _load_snapshot(source_dir, overrides_path)
    click.echo(f"After round {snapshot.completed_rounds}/{snapshot.total_rounds}")
    if constructors:
        _echo_frame(constructor_standings_frame(snapshot))
    else:
        _echo_frame(driver_standings_frame(snapshot))


@cli.command()
@click.option("--constructors", is_flag=True, help="Show constructor progression.")
@_source_options
def progression(constructors: bool, source_dir: Path | None, overrides_path: Path | None) -> None:
    """Print round-by-round points."""
    snapshot = _load_snapshot(source_dir, overrides_path)
    table = snapshot.constructor_progression if constructors else snapshot.driver_progression
    _echo_frame(progression_frame(table))


@cli.command()
@_source_options
def calendar(source_dir: Path | None, overrides_path: Path | None) -> None:
    """Print the season calendar with race status."""
    snapshot = _load_snapshot(source_dir, overrides_path)
    _echo_frame(calendar_frame(snapshot))

    stats = calendar_stats(snapshot.calendar)
    upcoming = next_race(snapshot.calendar)
    click.echo(f"\n{stats.completed}/{stats.total} completed ({stats.progress}%)")
    if upcoming is not None:
        click.echo(f"Next: {upcoming.name} - {upcoming.date}")


@cli.command()
@click.option("--out", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Output directory (default from config).")
@_source_options
def export(out: Path | None, source_dir: Path | None, overrides_path: Path | None) -> None:
    """Write standings, progression and calendar tables as CSV."""
    snapshot = _load_snapshot(source_dir, overrides_path)
    written = export_snapshot(snapshot, out or cfg.paths.exports)
    logger.success(f"✅ Exported {len(written)} tables → {(out or cfg.paths.exports)}")


if __name__ == "__main__":
    cli()
