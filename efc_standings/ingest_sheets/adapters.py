"""
Sheet-specific adapters: parsed CSV rows → typed records.

Each sheet has its own positional layout, so each adapter owns an explicit
column → field mapping. Rows with too few fields are skipped, and an empty
input (sheet unavailable) gives an empty result rather than an error.

Layouts (0-based columns):
  DriverMaster       header row, 0-12 driver fields
  TeamMaster         header row, 0-15 team fields
  RaceCalendar       row 0 names, row 1 dates, row 2 round labels; data from column 1
  CircuitMaster      header row, 0-7 circuit fields
  RaceResults        row 0 'x' completion markers, row 1 names, row 2 round labels,
                     rows 3+ one driver each; columns 1-10 are rounds 1-10
  QualifyingResults  row 0 names, row 1 round labels, rows 2+ drivers;
                     columns 1-11 are rounds 1-11
  DriverStats        header row, 0-17 stat fields
  Media              header row, row 1 columns 0-2
"""
from typing import Optional

from efc_standings.config import cfg
from efc_standings.core.points import parse_result
from efc_standings.domain.issues import IssueKind, IssueLog
from efc_standings.domain.models import (
    CalendarEntry,
    Circuit,
    Driver,
    DriverResultRow,
    DriverStatsRecord,
    MediaInfo,
    ResultsTable,
    Team,
)
from efc_standings.utils.logger import logger


Row = list[str]

MIN_DRIVER_FIELDS = 6
MIN_TEAM_FIELDS = 3
MIN_CIRCUIT_FIELDS = 3
MIN_STATS_FIELDS = 2
COMPLETION_MARKER = "x"


def _cell(values: Row, index: int, default: str = "") -> str:
    """Positional access that tolerates short rows and blank cells."""
    if index < len(values):
        value = values[index].strip()
        if value:
            return value
    return default


def _number(value: str) -> float:
    """Lenient numeric parse: blanks and junk become 0."""
    if not value or value.strip() == "":
        return 0.0
    try:
        return float(value.strip().rstrip("%"))
    except ValueError:
        return 0.0


def _skip(issues: Optional[IssueLog], sheet: str, line_no: int, values: Row, minimum: int) -> None:
    logger.debug(f"{sheet}: skipping row {line_no} ({len(values)} fields < {minimum})")
    if issues is not None:
        issues.add(IssueKind.MALFORMED_ROW, sheet, f"row {line_no}: {len(values)} fields, need {minimum}")


# ── Master sheets ─────────────────────────────────────────────────────────────

def _driver_from_row(values: Row) -> Driver:
    return Driver(
        username=_cell(values, 0),
        id=_cell(values, 1),
        short_display=_cell(values, 2),
        discord=_cell(values, 3),
        nationality=_cell(values, 4),
        team_code=_cell(values, 5),
        position=_cell(values, 6),
        active=_cell(values, 7),
        photo_url=_cell(values, 8),
        number=_cell(values, 9),
        socials=_cell(values, 10),
        description=_cell(values, 11),
        value=_cell(values, 12),
    )


def adapt_driver_master(rows: list[Row], issues: Optional[IssueLog] = None) -> list[Driver]:
    """DriverMaster rows → Driver records (unique, non-empty usernames)."""
    drivers: list[Driver] = []
    seen: set[str] = set()
    for line_no, values in enumerate(rows[1:], start=2):
        if len(values) < MIN_DRIVER_FIELDS:
            _skip(issues, "DriverMaster", line_no, values, MIN_DRIVER_FIELDS)
            continue
        driver = _driver_from_row(values)
        if not driver.username:
            continue
        if driver.username in seen:
            logger.debug(f"DriverMaster: duplicate username '{driver.username}' ignored")
            continue
        seen.add(driver.username)
        drivers.append(driver)
    return drivers


def _team_from_row(values: Row) -> Team:
    return Team(
        name=_cell(values, 0),
        sponsor=_cell(values, 1),
        id=_cell(values, 2),
        primary_color=_cell(values, 3, cfg.ingest.default_primary_color),
        secondary_color=_cell(values, 4, cfg.ingest.default_secondary_color),
        logo_url=_cell(values, 5),
        car_image_url=_cell(values, 6),
        driver1=_cell(values, 7),
        driver2=_cell(values, 8),
        reserve1=_cell(values, 9),
        reserve2=_cell(values, 10),
        owner=_cell(values, 11),
        principal=_cell(values, 12),
        engineer=_cell(values, 13),
        description=_cell(values, 14),
        active=_cell(values, 15, "y"),
    )


def adapt_team_master(rows: list[Row], issues: Optional[IssueLog] = None) -> list[Team]:
    """TeamMaster rows → Team records (unique, non-empty ids)."""
    teams: list[Team] = []
    seen: set[str] = set()
    for line_no, values in enumerate(rows[1:], start=2):
        if len(values) < MIN_TEAM_FIELDS:
            _skip(issues, "TeamMaster", line_no, values, MIN_TEAM_FIELDS)
            continue
        team = _team_from_row(values)
        if not team.id or team.id in seen:
            continue
        seen.add(team.id)
        teams.append(team)
    return teams


def _circuit_from_row(values: Row) -> Circuit:
    return Circuit(
        race_name=_cell(values, 0),
        id=_cell(values, 1),
        location=_cell(values, 2),
        length=_cell(values, 3),
        lap_record=_cell(values, 4),
        description=_cell(values, 5),
        circuit_name=_cell(values, 6),
        track_image_url=_cell(values, 7),
    )


def adapt_circuit_master(rows: list[Row], issues: Optional[IssueLog] = None) -> list[Circuit]:
    """CircuitMaster rows → Circuit records, in sheet order."""
    circuits: list[Circuit] = []
    for line_no, values in enumerate(rows[1:], start=2):
        if len(values) < MIN_CIRCUIT_FIELDS:
            _skip(issues, "CircuitMaster", line_no, values, MIN_CIRCUIT_FIELDS)
            continue
        circuit = _circuit_from_row(values)
        if circuit.race_name:
            circuits.append(circuit)
    return circuits


def adapt_race_calendar(rows: list[Row]) -> list[CalendarEntry]:
    """
    RaceCalendar's three parallel rows → one entry per named column.

    Column 0 holds row labels and is ignored.
    """
    if len(rows) < 3:
        return []
    names, dates, labels = rows[0], rows[1], rows[2]
    entries: list[CalendarEntry] = []
    for col in range(1, len(names)):
        name = names[col].strip()
        if not name:
            continue
        entries.append(CalendarEntry(
            name=name,
            raw_date=_cell(dates, col),
            round_label=_cell(labels, col, f"Round {col}"),
            column=col,
        ))
    return entries


# ── Result sheets ─────────────────────────────────────────────────────────────

def completed_indices(marker_row: Row) -> list[int]:
    """0-based round indices whose column carries the 'x' marker."""
    return [
        col - 1
        for col in range(1, len(marker_row))
        if marker_row[col].strip().lower() == COMPLETION_MARKER
    ]


def _result_rows(rows: list[Row], first_data_row: int, max_rounds: int) -> list[DriverResultRow]:
    out: list[DriverResultRow] = []
    for values in rows[first_data_row:]:
        driver = _cell(values, 0)
        if not driver:
            continue
        last_round = min(max_rounds, len(values) - 1)
        results = {rnd: parse_result(values[rnd]) for rnd in range(1, last_round + 1)}
        out.append(DriverResultRow(driver=driver, results=results))
    return out


def adapt_race_results(rows: list[Row], max_rounds: Optional[int] = None) -> ResultsTable:
    """RaceResults sheet → completion markers, headers and per-driver cells."""
    if not rows:
        return ResultsTable()
    max_rounds = max_rounds or cfg.ingest.max_race_rounds
    return ResultsTable(
        race_names=rows[1][1:] if len(rows) > 1 else [],
        round_labels=rows[2][1:] if len(rows) > 2 else [],
        rows=_result_rows(rows, 3, max_rounds),
        completed_indices=completed_indices(rows[0]),
    )


def adapt_qualifying_results(rows: list[Row], max_rounds: Optional[int] = None) -> ResultsTable:
    """QualifyingResults sheet → headers and per-driver cells (no markers)."""
    if not rows:
        return ResultsTable()
    max_rounds = max_rounds or cfg.ingest.max_qualifying_rounds
    return ResultsTable(
        race_names=rows[0][1:],
        round_labels=rows[1][1:] if len(rows) > 1 else [],
        rows=_result_rows(rows, 2, max_rounds),
    )


# ── Auxiliary sheets ──────────────────────────────────────────────────────────

def adapt_driver_stats(rows: list[Row], issues: Optional[IssueLog] = None) -> list[DriverStatsRecord]:
    """DriverStats rows → rating/statistics records keyed by driver name."""
    stats: list[DriverStatsRecord] = []
    for line_no, values in enumerate(rows[1:], start=2):
        if len(values) < MIN_STATS_FIELDS:
            _skip(issues, "DriverStats", line_no, values, MIN_STATS_FIELDS)
            continue
        driver = _cell(values, 0)
        if not driver:
            continue
        stats.append(DriverStatsRecord(
            driver=driver,
            races_attended=_number(_cell(values, 1)),
            points=_number(_cell(values, 2)),
            pts_per_race=_number(_cell(values, 3)),
            avg_finish=_number(_cell(values, 4)),
            avg_quali=_number(_cell(values, 5)),
            wins=_number(_cell(values, 6)),
            podiums=_number(_cell(values, 7)),
            poles=_number(_cell(values, 8)),
            driver_rating=_number(_cell(values, 9)),
            consistency_score=_number(_cell(values, 10)),
            performance_score=_number(_cell(values, 11)),
            fastest_laps=_number(_cell(values, 12)),
            highest_finish=_cell(values, 13),
            avg_pos_gain_loss=_number(_cell(values, 14)),
            podium_rate=_number(_cell(values, 15)),
            dnfs=_number(_cell(values, 16)),
            championships=_number(_cell(values, 17)),
        ))
    return stats


def adapt_media(rows: list[Row]) -> MediaInfo:
    if len(rows) < 2:
        return MediaInfo()
    values = rows[1]
    return MediaInfo(
        driver_of_the_day=_cell(values, 0),
        article_link=_cell(values, 1),
        youtube_link=_cell(values, 2),
    )
