"""
Unit tests for circuit matching, team names and constructor reconciliation.
"""
from efc_standings.core.entity_resolver import (
    NO_TEAM,
    CountryKeywordMatcher,
    ExactNameMatcher,
    FirstWordMatcher,
    TeamResolver,
    full_team_name,
    match_circuit,
    placeholder_circuit,
    reconcile_constructor,
    resolve_circuit,
)
from efc_standings.domain.models import Circuit, ConstructorStanding, Team


CIRCUITS = [
    Circuit(race_name="Germany Grand Prix", id="C1", location="Hockenheim"),
    Circuit(race_name="Japanese Grand Prix", id="C2", location="Suzuka"),
    Circuit(race_name="Brazil GP", id="C3", location="Sao Paulo"),
    Circuit(race_name="Brazil Sprint", id="C4", location="Sao Paulo"),
]


class TestCircuitMatchers:
    def test_exact_is_case_insensitive(self):
        assert ExactNameMatcher().try_match("germany GRAND prix", CIRCUITS).id == "C1"

    def test_first_word(self):
        assert FirstWordMatcher().try_match("Sao Paulo Brazil Grand Prix", CIRCUITS).id == "C3"

    def test_first_word_takes_first_in_sheet_order(self):
        """Both Brazil rows qualify; the earlier one wins."""
        assert FirstWordMatcher().try_match("Brazil Grand Prix", CIRCUITS).id == "C3"

    def test_country_keyword(self):
        assert CountryKeywordMatcher().try_match("Japan Grand Prix", CIRCUITS).id == "C2"

    def test_country_keyword_needs_keyword_in_target(self):
        assert CountryKeywordMatcher().try_match("Suzuka Night Race", CIRCUITS) is None


class TestMatchCircuit:
    def test_reports_matching_strategy(self):
        assert match_circuit("Germany Grand Prix", CIRCUITS)[1] == "exact"
        assert match_circuit("Japan Grand Prix", CIRCUITS)[1] == "country_keyword"

    def test_no_match(self):
        assert match_circuit("Atlantis Grand Prix", CIRCUITS) == (None, None)
        assert match_circuit("", CIRCUITS) == (None, None)

    def test_placeholder_for_unknown_race(self):
        circuit = resolve_circuit("Atlantis Grand Prix", CIRCUITS)
        assert circuit.placeholder is True
        assert circuit.location == "TBA"
        assert circuit.circuit_name == "Atlantis Circuit"

    def test_placeholder_without_grand_prix_suffix(self):
        assert placeholder_circuit("Night Race").circuit_name == "Night Race Circuit"


class TestTeamResolver:
    def _resolver(self) -> TeamResolver:
        return TeamResolver([
            Team(id="MCL", name="McLaren Racing"),
            Team(id="MCL", name="Duplicate"),
            Team(id="FER", name=""),
        ])

    def test_team_master_name_first(self):
        assert self._resolver().display_name("MCL") == "McLaren Racing"

    def test_blank_team_master_name_falls_back_to_code(self):
        assert self._resolver().display_name("FER") == "FER"

    def test_abbreviation_dictionary(self):
        assert self._resolver().display_name("RBR") == "Red Bull"

    def test_unknown_code_displayed_literally(self):
        resolver = self._resolver()
        assert resolver.display_name("XYZ") == "XYZ"
        assert not resolver.is_known("XYZ")

    def test_no_team(self):
        assert self._resolver().display_name("") == NO_TEAM
        assert self._resolver().team("") is None


class TestFullTeamName:
    def test_by_code(self):
        assert full_team_name("MER") == "Mercedes-AMG Petronas"

    def test_by_partial_name(self):
        assert full_team_name("Ferrari") == "Scuderia Ferrari"

    def test_passthrough_and_blank(self):
        assert full_team_name("Atlantis Motorsport") == "Atlantis Motorsport"
        assert full_team_name("") == "Unknown Team"


class TestReconcileConstructor:
    CONSTRUCTORS = [
        ConstructorStanding(team_code="MCL", name="McLaren Racing"),
        ConstructorStanding(team_code="FER", name="Ferrari"),
    ]

    def test_exact_name(self):
        assert reconcile_constructor("Ferrari", "", self.CONSTRUCTORS).team_code == "FER"

    def test_substring_either_way(self):
        assert reconcile_constructor("McLaren", "", self.CONSTRUCTORS).team_code == "MCL"
        assert reconcile_constructor("Scuderia Ferrari", "", self.CONSTRUCTORS).team_code == "FER"

    def test_team_code_last(self):
        assert reconcile_constructor("Renamed Team", "FER", self.CONSTRUCTORS).team_code == "FER"

    def test_nothing_matches(self):
        assert reconcile_constructor("Haas", "HAA", self.CONSTRUCTORS) is None
