"""Tests for header field resolution."""

import pytest

from portfolio_ingest.core.exceptions import FieldNotFoundError
from portfolio_ingest.ingestion.fields import resolve_field, strip_line_end


class TestResolveField:
    def test_finds_position(self):
        assert resolve_field("Date,Open,High,Low,Close", "Low") == 3

    def test_first_column(self):
        assert resolve_field("Date,Open,Close", "Date") == 0

    def test_last_column(self):
        assert resolve_field("Date,Open,Close", "Close") == 2

    def test_case_insensitive(self):
        assert resolve_field("Date,Adj. Close", "adj. close") == 1
        assert resolve_field("DATE,Open", "date") == 0

    def test_multiword_label(self, quandl_csv):
        header = quandl_csv([]).splitlines()[0]
        assert resolve_field(header, "Adj. Close") == 11

    def test_first_match_wins(self):
        assert resolve_field("close,Open,Close", "Close") == 0

    def test_missing_field_raises(self):
        with pytest.raises(FieldNotFoundError) as exc_info:
            resolve_field("Date,Open,Close", "Volume")
        assert exc_info.value.context == {"field": "Volume", "header": "Date,Open,Close"}

    def test_prefix_is_not_a_match(self):
        with pytest.raises(FieldNotFoundError):
            resolve_field("Date,Lo,Close", "Low")
        with pytest.raises(FieldNotFoundError):
            resolve_field("Date,Lowest,Close", "Low")

    def test_line_terminator_ignored(self):
        assert resolve_field("Date,Adj. Close\n", "Adj. Close") == 1
        assert resolve_field("Date,Adj. Close\r\n", "Adj. Close") == 1

    def test_surrounding_whitespace_ignored(self):
        assert resolve_field("Date, Low ,Close", "Low") == 1

    def test_single_token_match(self):
        assert resolve_field("Date", "date") == 0

    def test_single_token_mismatch(self):
        with pytest.raises(FieldNotFoundError):
            resolve_field("Date", "Close")

    def test_empty_header(self):
        with pytest.raises(FieldNotFoundError):
            resolve_field("", "Close")

    def test_other_delimiter(self):
        assert resolve_field("Date;Open;Close", "Close", delimiter=";") == 2

    def test_wrong_delimiter_does_not_split(self):
        with pytest.raises(FieldNotFoundError):
            resolve_field("Date;Open;Close", "Close")


class TestStripLineEnd:
    @pytest.mark.parametrize(
        "line,expected",
        [
            ("a,b\n", "a,b"),
            ("a,b\r\n", "a,b"),
            ("a,b", "a,b"),
            ("a,b \n", "a,b "),
        ],
    )
    def test_strips_only_terminators(self, line, expected):
        assert strip_line_end(line) == expected
