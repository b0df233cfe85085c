"""
Championship standings for drivers and constructors.

Points always come from the PointsEngine applied to RaceResults over the
completed rounds (1..completed_count). Ordering is by points, descending,
and ties keep the input order; there is no secondary sort key.

Two position notions coexist:
  - list order (index + 1), used for display rows
  - tie-aware championship position: equal points share a position and the
    next distinct score skips ahead, e.g. 1, 2, 2, 2, 5
"""
from dataclasses import replace
from typing import Optional, Sequence, TypeVar

from efc_standings.config import cfg
from efc_standings.core.entity_resolver import TEAM_FULL_NAMES, TeamResolver, full_team_name
from efc_standings.core.points import points_for_result
from efc_standings.domain.models import (
    ConstructorStanding,
    Driver,
    DriverStanding,
    DriverStatsRecord,
    ResultsTable,
)
from efc_standings.utils.logger import logger


StandingT = TypeVar("StandingT", DriverStanding, ConstructorStanding)


def championship_positions(points: Sequence[int]) -> list[int]:
    """
    Tie-aware positions for a points list already sorted descending.

    Args:
        points: Point totals in standings order.

    Returns:
        Positions aligned with `points`.
    """
    positions: list[int] = []
    current = 0
    previous: Optional[int] = None
    for index, value in enumerate(points, start=1):
        if previous is None or value != previous:
            current = index
            previous = value
        positions.append(current)
    return positions


def rank(rows: Sequence[StandingT]) -> list[StandingT]:
    """Stable sort by points (descending), then fill in gap and position."""
    ordered = sorted(rows, key=lambda r: -r.points)
    if not ordered:
        return []
    leader_points = ordered[0].points
    positions = championship_positions([r.points for r in ordered])
    return [
        replace(row, gap=leader_points - row.points, position=pos)
        for row, pos in zip(ordered, positions)
    ]


def _pole_counts(qualifying: Optional[ResultsTable], completed_count: int) -> dict[str, int]:
    poles: dict[str, int] = {}
    if qualifying is None:
        return poles
    for row in qualifying.rows:
        for rnd, result in row.results.items():
            if rnd <= completed_count and result.position == 1 and not result.dnf_class:
                poles[row.driver] = poles.get(row.driver, 0) + 1
    return poles


def driver_totals(
    drivers: Sequence[Driver],
    race_results: ResultsTable,
    teams: TeamResolver,
    qualifying: Optional[ResultsTable] = None,
) -> list[DriverStanding]:
    """
    Aggregate each driver's season from the parsed results, unsorted.

    Drivers keep DriverMaster order; drivers that only appear in RaceResults
    are appended (without a team) so every scored point is accounted for.
    """
    completed = race_results.completed_count
    poles = _pole_counts(qualifying, completed)
    result_rows = {row.driver: row for row in race_results.rows}

    ordered: list[Driver] = list(drivers)
    known = {d.username for d in drivers}
    for row in race_results.rows:
        if row.driver not in known:
            logger.debug(f"Driver '{row.driver}' has results but no DriverMaster row")
            ordered.append(Driver(username=row.driver))
            known.add(row.driver)

    totals: list[DriverStanding] = []
    for driver in ordered:
        points = wins = podiums = fastest = dnfs = attended = 0
        row = result_rows.get(driver.username)
        if row is not None:
            for rnd, result in row.results.items():
                if rnd > completed or result.is_empty:
                    continue
                attended += 1
                points += points_for_result(result)
                if result.fastest_lap:
                    fastest += 1
                if result.dnf_class:
                    dnfs += 1
                    continue
                if result.position == 1:
                    wins += 1
                if result.position is not None and result.position <= 3:
                    podiums += 1

        totals.append(DriverStanding(
            name=driver.username,
            team_code=driver.team_code,
            team_name=teams.display_name(driver.team_code),
            number=driver.number,
            nationality=driver.nationality,
            photo_url=driver.photo_url,
            points=points,
            wins=wins,
            podiums=podiums,
            poles=poles.get(driver.username, 0),
            fastest_laps=fastest,
            dnfs=dnfs,
            races_attended=attended,
        ))
    return totals


def compute_driver_standings(
    drivers: Sequence[Driver],
    race_results: ResultsTable,
    teams: TeamResolver,
    qualifying: Optional[ResultsTable] = None,
) -> list[DriverStanding]:
    """Ranked driver standings with gaps and championship positions."""
    return rank(driver_totals(drivers, race_results, teams, qualifying))


def compute_constructor_standings(
    driver_standings: Sequence[DriverStanding],
    teams: TeamResolver,
) -> list[ConstructorStanding]:
    """
    Group drivers by team code and rank the teams.

    Drivers without a team code are left out. Teams appear in order of their
    first member in `driver_standings` before ranking.
    """
    grouped: dict[str, dict] = {}
    for driver in driver_standings:
        if not driver.team_code:
            continue
        entry = grouped.setdefault(
            driver.team_code, {"points": 0, "wins": 0, "podiums": 0, "drivers": []}
        )
        entry["points"] += driver.points
        entry["wins"] += driver.wins
        entry["podiums"] += driver.podiums
        entry["drivers"].append(driver.name)

    rows: list[ConstructorStanding] = []
    for code, entry in grouped.items():
        team = teams.team(code)
        name = teams.display_name(code)
        rows.append(ConstructorStanding(
            team_code=code,
            name=name,
            full_name=full_team_name(code if code in TEAM_FULL_NAMES else name),
            primary_color=team.primary_color if team else cfg.ingest.default_primary_color,
            secondary_color=team.secondary_color if team else cfg.ingest.default_secondary_color,
            logo_url=team.logo_url if team else "",
            points=entry["points"],
            wins=entry["wins"],
            podiums=entry["podiums"],
            drivers=entry["drivers"],
        ))
    return rank(rows)


def top_rated_drivers(stats: Sequence[DriverStatsRecord], limit: int = 5) -> list[DriverStatsRecord]:
    """DriverStats rows by rating, highest first (stable on ties)."""
    return sorted(stats, key=lambda s: -s.driver_rating)[:limit]
