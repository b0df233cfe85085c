"""
Unit tests for the points engine.
"""
import pytest

from efc_standings.core.points import POINTS_TABLE, parse_result, points, points_for_result


class TestParseResult:
    def test_position_and_fastest_lap(self):
        result = parse_result("P1 (Fastest Lap)")
        assert result.position == 1
        assert result.fastest_lap is True
        assert result.dnf_class is None

    def test_short_fastest_lap_marker(self):
        result = parse_result("P12 FL")
        assert result.position == 12
        assert result.fastest_lap is True

    def test_flag_word_is_not_fastest_lap(self):
        assert parse_result("P5 (FLAG)").fastest_lap is False
        assert points("P5 (FLAG)") == 10

    def test_lowercase_position(self):
        assert parse_result("p3").position == 3

    @pytest.mark.parametrize("text,expected", [("DNF", "DNF"), ("dns", "DNS"), ("P14 DSQ", "DSQ"), ("P5DNF", "DNF")])
    def test_non_finish_class(self, text, expected):
        assert parse_result(text).dnf_class == expected

    def test_blank_and_none(self):
        assert parse_result("").is_empty
        assert parse_result(None).position is None


class TestPoints:
    @pytest.mark.parametrize("k,expected", list(zip(range(1, 11), [25, 18, 15, 12, 10, 8, 6, 4, 2, 1])))
    def test_scoring_positions(self, k, expected):
        assert points(f"P{k}") == expected

    @pytest.mark.parametrize("k", [11, 15, 20, 25])
    def test_non_scoring_positions(self, k):
        assert points(f"P{k}") == 0

    def test_table_covers_top_twenty(self):
        assert sorted(POINTS_TABLE) == list(range(1, 21))

    def test_fastest_lap_bonus(self):
        assert points("P1 (Fastest Lap)") == points("P1") + 1

    def test_fastest_lap_on_non_scoring_finish(self):
        assert points("P12 FL") == 1

    def test_non_finish_scores_nothing(self):
        assert points("DNF") == 0
        assert points("P3 DSQ") == 0
        assert points("P5DNF") == 0

    def test_fastest_lap_on_dnf_still_counts(self):
        assert points_for_result(parse_result("DNF (Fastest Lap)")) == 1

    def test_unparseable_text(self):
        assert points("") == 0
        assert points("did not attend") == 0
