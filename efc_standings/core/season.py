"""
Season calendar: RaceEvents with status, circuit and winners.

An event's round is its RaceCalendar column, so a blank column keeps later
events aligned with the result columns. Status comes only from that round
relative to the number of completed rounds: earlier rounds are completed,
the round right after them is next, the rest are upcoming. At most one
event is ever 'next'.
"""
from typing import Optional, Sequence

from efc_standings.core.date_normalizer import is_normalized, normalize_date, parse_display_date
from efc_standings.core.entity_resolver import match_circuit, placeholder_circuit
from efc_standings.domain.issues import IssueKind, IssueLog
from efc_standings.domain.models import (
    CalendarEntry,
    CalendarStats,
    Circuit,
    RaceEvent,
    RaceStatus,
    ResultsTable,
)
from efc_standings.utils.logger import logger


def status_for(index: int, completed_count: int) -> RaceStatus:
    """Status of the event at 0-based `index`."""
    if index < completed_count:
        return RaceStatus.COMPLETED
    if index == completed_count:
        return RaceStatus.NEXT
    return RaceStatus.UPCOMING


def round_winners(race_results: ResultsTable) -> dict[int, str]:
    """Round → first driver (sheet order) classified P1 in a completed round."""
    winners: dict[int, str] = {}
    for row in race_results.rows:
        for rnd, result in row.results.items():
            if rnd > race_results.completed_count or rnd in winners:
                continue
            if result.position == 1 and not result.dnf_class:
                winners[rnd] = row.driver
    return winners


def fastest_lap_holders(race_results: ResultsTable) -> dict[int, str]:
    """Round → first driver (sheet order) flagged with the fastest lap."""
    holders: dict[int, str] = {}
    for row in race_results.rows:
        for rnd, result in row.results.items():
            if rnd <= race_results.completed_count and result.fastest_lap and rnd not in holders:
                holders[rnd] = row.driver
    return holders


def build_race_events(
    calendar: Sequence[CalendarEntry],
    circuits: Sequence[Circuit],
    race_results: ResultsTable,
    issues: Optional[IssueLog] = None,
    day_first: Optional[bool] = None,
) -> list[RaceEvent]:
    """
    Join the calendar with circuits and results.

    Args:
        calendar: RaceCalendar entries in column order.
        circuits: CircuitMaster rows in sheet order.
        race_results: Parsed RaceResults (completion markers and winners).
        issues: Optional collector for unresolved names and bad dates.
        day_first: Numeric date convention override.

    Returns:
        One RaceEvent per calendar entry.
    """
    completed = race_results.completed_count
    winners = round_winners(race_results)
    fastest = fastest_lap_holders(race_results)

    events: list[RaceEvent] = []
    for entry in calendar:
        rnd = entry.column
        circuit, matched_by = match_circuit(entry.name, circuits)
        if circuit is None:
            logger.debug(f"No circuit for '{entry.name}'; using placeholder")
            if issues is not None:
                issues.add(IssueKind.UNRESOLVED_REFERENCE, "CircuitMaster", entry.name)
            circuit = placeholder_circuit(entry.name)
        elif matched_by != "exact":
            logger.debug(f"'{entry.name}' matched circuit '{circuit.race_name}' by {matched_by}")

        display = normalize_date(entry.raw_date, day_first)
        if not is_normalized(display) and issues is not None:
            issues.add(IssueKind.UNPARSEABLE_DATE, "RaceCalendar", f"{entry.name}: {entry.raw_date!r}")

        status = status_for(rnd - 1, completed)
        events.append(RaceEvent(
            round=rnd,
            round_label=entry.round_label,
            name=entry.name,
            raw_date=entry.raw_date,
            date=display,
            status=status,
            circuit=circuit,
            winner=winners.get(rnd) if status is RaceStatus.COMPLETED else None,
            fastest_lap=fastest.get(rnd) if status is RaceStatus.COMPLETED else None,
            date_value=parse_display_date(display),
        ))
    return events


def next_race(events: Sequence[RaceEvent]) -> Optional[RaceEvent]:
    """The 'next' event, else the first upcoming one, else the last event."""
    if not events:
        return None
    for wanted in (RaceStatus.NEXT, RaceStatus.UPCOMING):
        found = next((e for e in events if e.status is wanted), None)
        if found is not None:
            return found
    return events[-1]


def previous_race(events: Sequence[RaceEvent]) -> Optional[RaceEvent]:
    completed = [e for e in events if e.status is RaceStatus.COMPLETED]
    return completed[-1] if completed else None


def calendar_stats(events: Sequence[RaceEvent]) -> CalendarStats:
    total = len(events)
    completed = sum(1 for e in events if e.status is RaceStatus.COMPLETED)
    upcoming = sum(1 for e in events if e.status is RaceStatus.UPCOMING)
    progress = round(completed / total * 100) if total else 0
    return CalendarStats(completed=completed, upcoming=upcoming, total=total, progress=progress)
