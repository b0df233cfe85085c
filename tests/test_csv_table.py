"""
Unit tests for the CSV tokenizer.
"""
import pytest

from efc_standings.parsing.csv_table import parse_line, parse_table, serialize_line


class TestParseLine:
    def test_plain_fields(self):
        assert parse_line("a,b,c") == ["a", "b", "c"]

    def test_trailing_comma_gives_trailing_empty_field(self):
        assert parse_line("a,b,") == ["a", "b", ""]

    @pytest.mark.parametrize("line", ["", ",", "a,,b", ",,,,", "x,y,z,,,"])
    def test_field_count_is_commas_plus_one(self, line):
        assert len(parse_line(line)) == line.count(",") + 1

    def test_quoted_comma_stays_in_field(self):
        assert parse_line('"Fast, flowing",Hockenheimring') == ["Fast, flowing", "Hockenheimring"]

    def test_doubled_quote_is_literal(self):
        assert parse_line('"He said ""box box""",x') == ['He said "box box"', "x"]

    def test_gviz_style_all_quoted(self):
        assert parse_line('"Alice","P1 (Fastest Lap)",""') == ["Alice", "P1 (Fastest Lap)", ""]

    def test_unterminated_quote_does_not_raise(self):
        """The rest of the line stays inside the open field."""
        assert parse_line('a,"unterminated, still quoted') == ["a", "unterminated, still quoted"]


class TestParseTable:
    def test_empty_text(self):
        assert parse_table("") == []

    def test_blank_lines_dropped(self):
        rows = parse_table("a,b\n\n   \nc,d\n")
        assert rows == [["a", "b"], ["c", "d"]]

    def test_crlf_line_endings(self):
        assert parse_table("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]


class TestSerializeLine:
    def test_quotes_only_when_needed(self):
        assert serialize_line(["plain", "with,comma", 'with "quote"']) == (
            'plain,"with,comma","with ""quote"""'
        )

    def test_parse_inverts_serialize(self):
        fields = ["Alice", "P1 (Fastest Lap)", "", 'a "b", c', ","]
        assert parse_line(serialize_line(fields)) == fields
