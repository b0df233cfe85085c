"""
Ingestion pipeline orchestration.

One pass:
  1. Fetch the raw CSV text of every sheet concurrently (a failed sheet is
     just empty text)
  2. Tokenize and adapt each sheet into typed records
  3. Resolve circuits and dates into RaceEvents, then merge overrides
  4. Derive standings and progression
  5. Wrap everything in an immutable SeasonSnapshot

The Ingestor owns the single cached result. A refresh requested while a pass
is already running waits for and returns that pass's result instead of
starting another one.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional

from efc_standings.config import cfg
from efc_standings.core.entity_resolver import TeamResolver
from efc_standings.core.progression import ProgressionTracker
from efc_standings.core.season import build_race_events
from efc_standings.core.standings import compute_constructor_standings, compute_driver_standings
from efc_standings.domain.issues import IngestIssue, IssueKind, IssueLog
from efc_standings.domain.models import (
    Circuit,
    ConstructorStanding,
    Driver,
    DriverStanding,
    DriverStatsRecord,
    MediaInfo,
    ProgressionTable,
    RaceEvent,
    ResultsTable,
    Team,
)
from efc_standings.ingest_sheets import adapters
from efc_standings.ingest_sheets.overrides import Overrides, apply_overrides
from efc_standings.ingest_sheets.sheet_client import GoogleSheetSource, SheetTextSource
from efc_standings.parsing.csv_table import parse_table
from efc_standings.utils.logger import logger
from efc_standings.utils.time_utils import utc_now


@dataclass(frozen=True)
class SeasonSnapshot:
    """Everything one pass produced. Replaced wholesale by the next pass."""

    drivers: list[Driver]
    teams: list[Team]
    circuits: list[Circuit]
    calendar: list[RaceEvent]
    race_results: ResultsTable
    qualifying_results: ResultsTable
    driver_stats: list[DriverStatsRecord]
    media: MediaInfo
    driver_standings: list[DriverStanding]
    constructor_standings: list[ConstructorStanding]
    driver_progression: ProgressionTable
    constructor_progression: ProgressionTable
    driver_position_changes: dict[str, int] = field(default_factory=dict)
    constructor_position_changes: dict[str, int] = field(default_factory=dict)
    issues: list[IngestIssue] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)

    @property
    def completed_rounds(self) -> int:
        return self.race_results.completed_count

    @property
    def total_rounds(self) -> int:
        return self.driver_progression.total_rounds

    def is_empty(self) -> bool:
        return not (
            self.drivers
            or self.teams
            or self.circuits
            or self.calendar
            or not self.race_results.is_empty()
            or not self.qualifying_results.is_empty()
        )


class IngestionStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"


@dataclass(frozen=True)
class IngestionResult:
    """
    Ok(snapshot) or Empty.

    Empty means the pass found no data at all; the caller decides what to
    show instead. The core never substitutes fixture data.
    """

    status: IngestionStatus
    snapshot: Optional[SeasonSnapshot] = None
    issues: list[IngestIssue] = field(default_factory=list)

    @classmethod
    def ok(cls, snapshot: SeasonSnapshot) -> "IngestionResult":
        return cls(IngestionStatus.OK, snapshot, list(snapshot.issues))

    @classmethod
    def empty(cls, issues: Optional[list[IngestIssue]] = None) -> "IngestionResult":
        return cls(IngestionStatus.EMPTY, None, list(issues or []))

    @property
    def is_ok(self) -> bool:
        return self.status is IngestionStatus.OK


def build_snapshot(
    texts: Mapping[str, str],
    overrides: Optional[Overrides] = None,
    issues: Optional[IssueLog] = None,
    day_first: Optional[bool] = None,
) -> SeasonSnapshot:
    """
    Turn raw sheet texts into a SeasonSnapshot. Pure; no I/O.

    Args:
        texts: Logical sheet key (see `SheetConfig.sheet_names`) → raw CSV.
        overrides: Post-ingestion overrides to merge into the calendar.
        issues: Collector for recovered problems (a new one if None).
        day_first: Numeric date convention override.
    """
    issues = issues if issues is not None else IssueLog()

    def rows(key: str) -> list[list[str]]:
        return parse_table(texts.get(key, ""))

    drivers = adapters.adapt_driver_master(rows("driver_master"), issues)
    teams = adapters.adapt_team_master(rows("team_master"), issues)
    circuits = adapters.adapt_circuit_master(rows("circuit_master"), issues)
    calendar_entries = adapters.adapt_race_calendar(rows("race_calendar"))
    race_results = adapters.adapt_race_results(rows("race_results"))
    qualifying = adapters.adapt_qualifying_results(rows("qualifying_results"))
    driver_stats = adapters.adapt_driver_stats(rows("driver_stats"), issues)
    media = adapters.adapt_media(rows("media"))

    team_resolver = TeamResolver(teams)
    for driver in drivers:
        if driver.team_code and not team_resolver.is_known(driver.team_code):
            issues.add(IssueKind.UNRESOLVED_REFERENCE, "TeamMaster", f"team code {driver.team_code!r}")

    events = build_race_events(calendar_entries, circuits, race_results, issues, day_first)
    if overrides is not None:
        events = apply_overrides(events, overrides, day_first)

    driver_standings = compute_driver_standings(drivers, race_results, team_resolver, qualifying)
    constructor_standings = compute_constructor_standings(driver_standings, team_resolver)

    tracker = ProgressionTracker(
        total_rounds=max(max((e.round for e in events), default=0), race_results.completed_count),
        completed_rounds=race_results.completed_count,
    )
    driver_table = tracker.drivers(race_results, driver_standings)
    constructor_table = tracker.constructors(constructor_standings, driver_standings, driver_table)

    return SeasonSnapshot(
        drivers=drivers,
        teams=teams,
        circuits=circuits,
        calendar=events,
        race_results=race_results,
        qualifying_results=qualifying,
        driver_stats=driver_stats,
        media=media,
        driver_standings=driver_standings,
        constructor_standings=constructor_standings,
        driver_progression=driver_table,
        constructor_progression=constructor_table,
        driver_position_changes=tracker.position_changes(driver_table),
        constructor_position_changes=tracker.position_changes(constructor_table),
        issues=issues.as_list(),
    )


class Ingestor:
    """
    Owns the cached season snapshot for one logical session.

    Args:
        source: Raw sheet text source (Google Sheets by default).
        overrides: Optional overrides merged after each pass.
        sheet_names: Logical key → sheet tab name (default from config).
        max_workers: Concurrent sheet fetches.
        day_first: Numeric date convention override.
    """

    def __init__(
        self,
        source: Optional[SheetTextSource] = None,
        overrides: Optional[Overrides] = None,
        sheet_names: Optional[Mapping[str, str]] = None,
        max_workers: Optional[int] = None,
        day_first: Optional[bool] = None,
    ) -> None:
        self.source = source if source is not None else GoogleSheetSource()
        self.overrides = overrides
        self.sheet_names = dict(sheet_names or cfg.sheets.sheet_names())
        self.max_workers = max_workers or cfg.sheets.max_workers
        self.day_first = day_first

        self._lock = threading.Lock()
        self._cache: Optional[IngestionResult] = None
        self._in_flight: Optional[Future] = None

    @property
    def cached(self) -> Optional[IngestionResult]:
        return self._cache

    def load(self) -> IngestionResult:
        """Cached result if there is one, otherwise a fresh pass."""
        cached = self._cache
        if cached is not None:
            return cached
        return self.refresh()

    def invalidate(self) -> None:
        """Drop the cached result; the next `load()` runs a new pass."""
        with self._lock:
            self._cache = None

    def refresh(self) -> IngestionResult:
        """
        Run a full pass and replace the cache.

        If a pass is already in flight, block until it finishes and return its
        result. Never raises.
        """
        with self._lock:
            in_flight = self._in_flight
            if in_flight is None:
                future: Future = Future()
                self._in_flight = future
        if in_flight is not None:
            logger.debug("Refresh requested while a pass is running; joining it")
            return in_flight.result()

        try:
            result = self._run_pass()
        except Exception as e:
            logger.exception(f"Ingestion pass failed: {e}")
            result = IngestionResult.empty()

        with self._lock:
            self._cache = result
            self._in_flight = None
        future.set_result(result)
        return result

    def _fetch_all(self, issues: IssueLog) -> dict[str, str]:
        """Fetch every sheet concurrently; a failed sheet becomes ''."""
        texts: dict[str, str] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {
                key: pool.submit(self.source.fetch_sheet_text, sheet)
                for key, sheet in self.sheet_names.items()
            }
            for key, fut in futures.items():
                sheet = self.sheet_names[key]
                try:
                    text = fut.result() or ""
                except Exception as e:
                    logger.warning(f"Fetch of sheet {sheet} raised: {e}")
                    text = ""
                if not text.strip():
                    issues.add(IssueKind.SOURCE_UNAVAILABLE, sheet, "no data returned")
                texts[key] = text
        return texts

    def _run_pass(self) -> IngestionResult:
        logger.info(f"Starting ingestion pass ({len(self.sheet_names)} sheets)...")
        issues = IssueLog()
        texts = self._fetch_all(issues)
        snapshot = build_snapshot(texts, self.overrides, issues, self.day_first)

        if snapshot.is_empty():
            logger.warning("Ingestion produced no data; reporting empty result.")
            return IngestionResult.empty(snapshot.issues)

        logger.info(
            f"Ingestion complete: {len(snapshot.drivers)} drivers, {len(snapshot.teams)} teams, "
            f"{len(snapshot.calendar)} races, {snapshot.completed_rounds} completed, "
            f"{len(snapshot.issues)} issue(s)"
        )
        return IngestionResult.ok(snapshot)
