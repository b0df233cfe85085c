"""
Round-by-round championship progression.

For every completed round (1..completed_rounds) each driver's result cell is
scored with the PointsEngine and accumulated into a running total. Rounds
after the completed count are "not yet run" and stay None.

Constructor progression sums the per-round points of each team's drivers.
Driver points are attached to a constructor through the reconciliation chain
(display name, substring, team code); points that reconcile to nothing are
dropped for that round. If a constructor still ends up with zero progression
points while its standings total is positive, a repair pass re-derives its
rounds directly from its member drivers.
"""
from typing import Optional, Sequence

from efc_standings.core.entity_resolver import reconcile_constructor
from efc_standings.core.points import points_for_result
from efc_standings.core.standings import championship_positions
from efc_standings.domain.models import (
    ConstructorStanding,
    DriverStanding,
    ProgressionRow,
    ProgressionTable,
    ResultsTable,
)
from efc_standings.utils.logger import logger


def _cumulative(round_points: Sequence[Optional[int]]) -> list[Optional[int]]:
    running = 0
    out: list[Optional[int]] = []
    for value in round_points:
        if value is None:
            out.append(None)
            continue
        running += value
        out.append(running)
    return out


class ProgressionTracker:
    """
    Builds progression tables for one season snapshot.

    Args:
        total_rounds: Number of rounds on the calendar (table width).
        completed_rounds: Number of rounds marked completed.
    """

    def __init__(self, total_rounds: int, completed_rounds: int) -> None:
        self.completed_rounds = max(0, completed_rounds)
        self.total_rounds = max(total_rounds, self.completed_rounds)

    def _row(self, name: str, scored: Sequence[int], fastest: Sequence[bool], repaired: bool = False) -> ProgressionRow:
        round_points: list[Optional[int]] = [
            scored[i] if i < self.completed_rounds else None for i in range(self.total_rounds)
        ]
        return ProgressionRow(
            name=name,
            round_points=round_points,
            cumulative=_cumulative(round_points),
            fastest_laps=list(fastest),
            repaired=repaired,
        )

    # ── Drivers ──────────────────────────────────────────────────────────────

    def drivers(self, race_results: ResultsTable, standings: Sequence[DriverStanding]) -> ProgressionTable:
        """
        Driver progression in standings order.

        Args:
            race_results: Parsed RaceResults sheet.
            standings: Ranked driver standings (defines row order).
        """
        by_driver = {row.driver: row for row in race_results.rows}
        rows: list[ProgressionRow] = []
        for standing in standings:
            result_row = by_driver.get(standing.name)
            scored = [0] * self.total_rounds
            fastest = [False] * self.total_rounds
            if result_row is not None:
                for rnd, result in result_row.results.items():
                    if 1 <= rnd <= self.completed_rounds:
                        scored[rnd - 1] = points_for_result(result)
                        fastest[rnd - 1] = result.fastest_lap
            rows.append(self._row(standing.name, scored, fastest))
        return ProgressionTable(self.total_rounds, self.completed_rounds, rows)

    # ── Constructors ─────────────────────────────────────────────────────────

    def constructors(
        self,
        constructor_standings: Sequence[ConstructorStanding],
        driver_standings: Sequence[DriverStanding],
        driver_table: ProgressionTable,
    ) -> ProgressionTable:
        """Constructor progression in standings order, with the repair pass."""
        per_team: dict[str, list[int]] = {
            c.team_code: [0] * self.total_rounds for c in constructor_standings
        }

        for driver in driver_standings:
            if not driver.team_code:
                continue
            driver_row = driver_table.row_for(driver.name)
            if driver_row is None:
                continue
            target = reconcile_constructor(driver.team_name, driver.team_code, constructor_standings)
            if target is None:
                logger.debug(f"No constructor for {driver.name} ({driver.team_name}); round points dropped")
                continue
            bucket = per_team[target.team_code]
            for i in range(self.completed_rounds):
                bucket[i] += driver_row.round_points[i] or 0

        rows: list[ProgressionRow] = []
        for constructor in constructor_standings:
            scored = per_team[constructor.team_code]
            repaired = False
            if sum(scored[: self.completed_rounds]) == 0 and constructor.points > 0:
                logger.info(
                    f"Constructor {constructor.name} has {constructor.points} points but an empty "
                    f"progression; rebuilding from member drivers"
                )
                scored = self._from_members(constructor, driver_table)
                repaired = True
            rows.append(self._row(constructor.name, scored, [False] * self.total_rounds, repaired))
        return ProgressionTable(self.total_rounds, self.completed_rounds, rows)

    def _from_members(self, constructor: ConstructorStanding, driver_table: ProgressionTable) -> list[int]:
        scored = [0] * self.total_rounds
        for member in constructor.drivers:
            member_row = driver_table.row_for(member)
            if member_row is None:
                continue
            for i in range(self.completed_rounds):
                scored[i] += member_row.round_points[i] or 0
        return scored

    # ── Position changes ─────────────────────────────────────────────────────

    def positions_after(self, table: ProgressionTable, round_number: int) -> dict[str, int]:
        """Tie-aware championship positions using totals after `round_number`."""
        if round_number < 1:
            return {row.name: 1 for row in table.rows}
        totals = [(row.name, row.cumulative[round_number - 1] or 0) for row in table.rows]
        ordered = sorted(totals, key=lambda item: -item[1])
        positions = championship_positions([pts for _, pts in ordered])
        return {name: pos for (name, _), pos in zip(ordered, positions)}

    def position_changes(self, table: ProgressionTable) -> dict[str, int]:
        """
        Places gained (+) or lost (-) between the last two completed rounds.

        Every entity gets 0 when fewer than two rounds are completed.
        """
        if self.completed_rounds < 2:
            return {row.name: 0 for row in table.rows}
        before = self.positions_after(table, self.completed_rounds - 1)
        after = self.positions_after(table, self.completed_rounds)
        return {name: before.get(name, pos) - pos for name, pos in after.items()}
