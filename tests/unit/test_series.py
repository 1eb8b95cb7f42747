"""Tests for numeric parsing and series extraction."""

import pytest

from portfolio_ingest.core.config import IngestConfig
from portfolio_ingest.core.exceptions import (
    ColumnOutOfRangeError,
    FieldNotFoundError,
    NumericParseError,
)
from portfolio_ingest.ingestion.cursor import RowCursor
from portfolio_ingest.ingestion.dates import parse_date
from portfolio_ingest.ingestion.series import SeriesExtractor, parse_price
from portfolio_ingest.ingestion.sync import synchronize

BAD_THIRD_ROW = (
    "date,Adj. Close\n"
    "2018-01-01,100.0\n"
    "2018-01-02,101.5\n"
    "2018-01-03,bad\n"
)


class TestParsePrice:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("100.0", 100.0),
            ("101.5", 101.5),
            (" 99.25 ", 99.25),
            ("42", 42.0),
            ("+3.5", 3.5),
            ("-1.25", -1.25),
            (".5", 0.5),
            ("5.", 5.0),
            ("1e3", 1000.0),
            ("2.5E-2", 0.025),
        ],
    )
    def test_valid_numbers(self, text, expected):
        assert parse_price(text) == expected

    @pytest.mark.parametrize("text", ["0", "0.0", "-0", "0e0", " 0.000 "])
    def test_zero_is_a_value_not_a_failure(self, text):
        assert parse_price(text) == 0.0

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "bad", "12abc", "abc12", "1.2.3", "nan", "inf", "-Infinity", "1_000", "0x10", "e5", "."],
    )
    def test_invalid_numbers(self, text):
        with pytest.raises(NumericParseError) as exc_info:
            parse_price(text)
        assert exc_info.value.context["text"] == text

    def test_overflow_rejected(self):
        with pytest.raises(NumericParseError, match="out of range"):
            parse_price("1e999")


class TestSeriesExtractor:
    def test_reads_value_column(self, sample_text):
        series = SeriesExtractor().extract(RowCursor.from_text(sample_text, source="JPM.csv"))
        assert series.values == [100.0, 101.5, 99.25]
        assert series.source == "JPM.csv"
        assert series.field == "Adj. Close"
        assert series.start is None

    def test_stops_before_bad_row(self):
        cursor = RowCursor.from_text(BAD_THIRD_ROW)
        series = SeriesExtractor().extract(cursor, max_rows=2)
        assert series.values == [100.0, 101.5]

    def test_bad_row_aborts(self):
        cursor = RowCursor.from_text(BAD_THIRD_ROW, source="BAD.csv")
        with pytest.raises(NumericParseError) as exc_info:
            SeriesExtractor().extract(cursor)
        ctx = exc_info.value.context
        assert ctx["text"] == "bad"
        assert ctx["line"] == 4
        assert ctx["field"] == "Adj. Close"
        assert ctx["source"] == "BAD.csv"

    def test_length_matches_data_rows(self, quandl_csv):
        rows = [(f"2018-01-{d:02d}", 100.0 + d) for d in range(1, 21)]
        series = SeriesExtractor().extract(RowCursor.from_text(quandl_csv(rows)))
        assert len(series) == 20
        assert series.values == [value for _, value in rows]

    def test_file_order_preserved(self):
        text = "date,Adj. Close\n2018-01-03,3\n2018-01-01,1\n2018-01-03,3\n"
        series = SeriesExtractor().extract(RowCursor.from_text(text))
        assert series.values == [3.0, 1.0, 3.0]

    def test_zero_price_kept(self):
        text = "date,Adj. Close\n2018-01-01,0.0\n2018-01-02,0\n"
        series = SeriesExtractor().extract(RowCursor.from_text(text))
        assert series.values == [0.0, 0.0]

    def test_idempotent_from_fresh_cursor(self, quandl_csv):
        text = quandl_csv([("2018-01-02", 104.47), ("2018-01-03", 104.58)])
        extractor = SeriesExtractor()
        first = extractor.extract(RowCursor.from_text(text, source="JPM.csv"))
        second = extractor.extract(RowCursor.from_text(text, source="JPM.csv"))
        assert first == second

    def test_missing_value_field(self):
        cursor = RowCursor.from_text("date,Close\n2018-01-01,1\n")
        with pytest.raises(FieldNotFoundError):
            SeriesExtractor().extract(cursor)

    def test_short_row(self):
        cursor = RowCursor.from_text("date,Adj. Close\n2018-01-01\n")
        with pytest.raises(ColumnOutOfRangeError):
            SeriesExtractor().extract(cursor)

    def test_custom_config(self):
        config = IngestConfig(value_field="Close", delimiter=";")
        cursor = RowCursor.from_text("Date;Close\n2018-01-01;5.5\n")
        series = SeriesExtractor(config).extract(cursor)
        assert series.field == "Close"
        assert series.values == [5.5]

    def test_max_rows_zero(self, sample_text):
        series = SeriesExtractor().extract(RowCursor.from_text(sample_text), max_rows=0)
        assert series.values == []

    def test_negative_max_rows_rejected(self, sample_text):
        with pytest.raises(ValueError, match="max_rows"):
            SeriesExtractor().extract(RowCursor.from_text(sample_text), max_rows=-1)

    def test_continues_from_synchronized_position(self, sample_text):
        cursor = RowCursor.from_text(sample_text)
        synchronize(cursor, parse_date("2018-01-02"))
        series = SeriesExtractor().extract(cursor)
        assert series.values == [101.5, 99.25]

    def test_exhausted_cursor_gives_empty_series(self, sample_text):
        cursor = RowCursor.from_text(sample_text)
        list(cursor)
        assert SeriesExtractor().extract(cursor).values == []
