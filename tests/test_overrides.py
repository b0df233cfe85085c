"""
Tests for loading and merging manual overrides.
"""
import json

from efc_standings.ingest_sheets.overrides import Overrides, apply_overrides, load_overrides


class TestLoadOverrides:
    def test_missing_file(self, tmp_path):
        assert load_overrides(tmp_path / "nope.json").is_empty()
        assert load_overrides(None).is_empty()

    def test_valid_file(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({
            "race_dates": {"Atlantis Grand Prix": "7/14/2024"},
            "circuits": {"Hockenheimring": {"lap_record": "1:12.000"}},
        }))
        overrides = load_overrides(path)
        assert overrides.race_dates == {"Atlantis Grand Prix": "7/14/2024"}
        assert overrides.circuits["Hockenheimring"].lap_record == "1:12.000"
        assert overrides.circuits["Hockenheimring"].location is None

    def test_invalid_json_ignored(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("{not json")
        assert load_overrides(path).is_empty()

    def test_wrong_shape_ignored(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"race_dates": ["not", "a", "map"]}))
        assert load_overrides(path).is_empty()


class TestApplyOverrides:
    def test_no_overrides_returns_same_events(self, snapshot):
        assert apply_overrides(snapshot.calendar, Overrides()) == snapshot.calendar

    def test_date_override_is_renormalized(self, snapshot):
        overrides = Overrides(race_dates={"Atlantis Grand Prix": "7/14/2024"})
        events = apply_overrides(snapshot.calendar, overrides)
        atlantis = events[3]
        assert atlantis.raw_date == "7/14/2024"
        assert atlantis.date == "July 14, 2024"
        assert atlantis.date_value is not None
        assert events[0] == snapshot.calendar[0]

    def test_date_override_matches_exact_name_only(self, snapshot):
        overrides = Overrides(race_dates={"atlantis grand prix": "7/14/2024"})
        assert apply_overrides(snapshot.calendar, overrides)[3].date == "TBD"

    def test_circuit_override_by_name_sets_only_given_fields(self, snapshot):
        overrides = Overrides.model_validate({"circuits": {"Hockenheimring": {"lap_record": "1:12.000"}}})
        germany = apply_overrides(snapshot.calendar, overrides)[0]
        assert germany.circuit.lap_record == "1:12.000"
        assert germany.circuit.location == "Hockenheim"

    def test_source_events_untouched(self, snapshot):
        overrides = Overrides.model_validate({"circuits": {"C2": {"location": "Mie"}}})
        apply_overrides(snapshot.calendar, overrides)
        assert snapshot.calendar[1].circuit.location == "Suzuka"
