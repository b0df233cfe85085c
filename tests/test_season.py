"""
Unit tests for race events, calendar helpers and countdowns.
"""
from datetime import datetime, timezone

from efc_standings.core.season import build_race_events, calendar_stats, next_race, previous_race, status_for
from efc_standings.domain.issues import IssueKind
from efc_standings.domain.models import Circuit, RaceEvent, RaceStatus
from efc_standings.ingest_sheets.adapters import adapt_race_calendar, adapt_race_results
from efc_standings.utils.time_utils import seconds_until


def _event(rnd: int, status: RaceStatus, date: str = "TBD") -> RaceEvent:
    return RaceEvent(
        round=rnd,
        round_label=f"Round {rnd}",
        name=f"Race {rnd}",
        raw_date=date,
        date=date,
        status=status,
        circuit=Circuit(race_name=f"Race {rnd}"),
    )


class TestStatus:
    def test_status_from_position(self):
        assert [status_for(i, 2) for i in range(4)] == [
            RaceStatus.COMPLETED, RaceStatus.COMPLETED, RaceStatus.NEXT, RaceStatus.UPCOMING,
        ]

    def test_season_finished_has_no_next(self):
        assert RaceStatus.NEXT not in [status_for(i, 3) for i in range(3)]


class TestBuildRaceEvents:
    def test_statuses_and_dates(self, snapshot):
        events = snapshot.calendar
        assert [e.status for e in events] == [
            RaceStatus.COMPLETED, RaceStatus.COMPLETED, RaceStatus.NEXT, RaceStatus.UPCOMING,
        ]
        assert [e.date for e in events] == ["March 30, 2024", "April 13, 2024", "May 30, 2024", "TBD"]
        assert sum(1 for e in events if e.status is RaceStatus.NEXT) == 1

    def test_date_value_reparsed_from_display(self, snapshot):
        assert snapshot.calendar[0].date_value == datetime(2024, 3, 30)
        assert snapshot.calendar[3].date_value is None

    def test_circuits_resolved(self, snapshot):
        germany, japan, brazil, atlantis = snapshot.calendar
        assert germany.circuit.circuit_name == "Hockenheimring"
        assert japan.circuit.location == "Suzuka"
        assert brazil.circuit.circuit_name == "Interlagos"
        assert atlantis.circuit.placeholder
        assert atlantis.circuit.circuit_name == "Atlantis Circuit"
        assert atlantis.circuit.location == "TBA"

    def test_winners_only_for_completed_rounds(self, snapshot):
        germany, japan, brazil, _ = snapshot.calendar
        assert (germany.winner, germany.fastest_lap) == ("Alice", "Alice")
        assert (japan.winner, japan.fastest_lap) == ("Bob", "Carol")
        assert brazil.winner is None

    def test_blank_calendar_column_keeps_rounds_aligned(self):
        calendar = adapt_race_calendar([
            ["", "Germany Grand Prix", "", "Japan Grand Prix"],
            ["", "3/30/2024", "", "4/13/2024"],
            ["", "Round 1", "Round 2", "Round 3"],
        ])
        race_results = adapt_race_results([
            ["", "x", "x", ""],
            ["", "Germany Grand Prix", "Sprint", "Japan Grand Prix"],
            ["", "Round 1", "Round 2", "Round 3"],
            ["Alice", "P1", "P2", ""],
            ["Bob", "P2", "P1", ""],
        ])
        germany, japan = build_race_events(calendar, [], race_results)

        assert (germany.round, germany.winner) == (1, "Alice")
        assert japan.round == 3
        assert japan.round_label == "Round 3"
        assert japan.status is RaceStatus.NEXT
        assert japan.winner is None

    def test_unresolved_circuit_recorded(self, snapshot):
        unresolved = [i for i in snapshot.issues if i.kind is IssueKind.UNRESOLVED_REFERENCE]
        assert any(i.detail == "Atlantis Grand Prix" for i in unresolved)


class TestCalendarHelpers:
    def test_next_race(self):
        events = [_event(1, RaceStatus.COMPLETED), _event(2, RaceStatus.NEXT), _event(3, RaceStatus.UPCOMING)]
        assert next_race(events).round == 2

    def test_next_race_falls_back_to_last(self):
        events = [_event(1, RaceStatus.COMPLETED), _event(2, RaceStatus.COMPLETED)]
        assert next_race(events).round == 2
        assert next_race([]) is None

    def test_previous_race(self):
        events = [_event(1, RaceStatus.COMPLETED), _event(2, RaceStatus.COMPLETED), _event(3, RaceStatus.NEXT)]
        assert previous_race(events).round == 2
        assert previous_race([_event(1, RaceStatus.NEXT)]) is None

    def test_calendar_stats(self, snapshot):
        stats = calendar_stats(snapshot.calendar)
        assert (stats.completed, stats.upcoming, stats.total, stats.progress) == (2, 1, 4, 50)

    def test_calendar_stats_empty(self):
        assert calendar_stats([]).progress == 0


class TestSecondsUntil:
    def test_countdown_to_midnight_utc(self):
        event = _event(1, RaceStatus.NEXT, date="March 30, 2024")
        now = datetime(2024, 3, 29, 12, 0, tzinfo=timezone.utc)
        assert seconds_until(event, now) == 12 * 3600

    def test_naive_now_treated_as_utc(self):
        event = _event(1, RaceStatus.NEXT, date="March 30, 2024")
        assert seconds_until(event, datetime(2024, 3, 30, 1, 0)) == -3600

    def test_tbd_has_no_countdown(self):
        assert seconds_until(_event(1, RaceStatus.NEXT)) is None
