"""Price-series ingestion: field lookup, dates, row cursors, and extraction."""

from portfolio_ingest.ingestion.aligner import MultiFileAligner
from portfolio_ingest.ingestion.cursor import RowCursor
from portfolio_ingest.ingestion.dates import (
    date_to_instant,
    format_date,
    instant_to_date,
    parse_date,
)
from portfolio_ingest.ingestion.fields import resolve_field
from portfolio_ingest.ingestion.rows import extract_column
from portfolio_ingest.ingestion.series import SeriesExtractor, parse_price
from portfolio_ingest.ingestion.sources import open_source, source_filename
from portfolio_ingest.ingestion.sync import synchronize

__all__ = [
    "MultiFileAligner",
    "RowCursor",
    "SeriesExtractor",
    "date_to_instant",
    "extract_column",
    "format_date",
    "instant_to_date",
    "open_source",
    "parse_date",
    "parse_price",
    "resolve_field",
    "source_filename",
    "synchronize",
]
