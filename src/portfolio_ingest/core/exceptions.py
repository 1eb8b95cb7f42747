"""Custom exception hierarchy for portfolio-ingest."""

from typing import Any


class PortfolioIngestError(Exception):
    """Base exception for all portfolio-ingest errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(PortfolioIngestError):
    """Invalid or missing configuration.

    Raised by load_config() during startup, and by the aligner when the
    requested date range is inverted. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value
    """


class IngestionError(PortfolioIngestError):
    """Failed to read a price series out of a source.

    Policy: raise immediately. The current extraction is aborted and no
    partial series is returned.

    Context keys:
        source: str — the source being read, when known
    """


class FieldNotFoundError(IngestionError):
    """A required column name is absent from a header line.

    Context keys:
        field: str — the requested field name
        header: str — the header text that was searched
    """


class ColumnOutOfRangeError(IngestionError):
    """A row has fewer delimited segments than the column index requires.

    Context keys:
        index: int — the zero-based column that was requested
        row: str — the offending row
        segments: int — how many segments the row actually has
    """


class InvalidDateFormatError(IngestionError):
    """Text is not a YYYY-MM-DD date, or names a day that does not exist.

    Context keys:
        text: str — the offending text
    """


class DateParseError(InvalidDateFormatError):
    """A row's date column could not be parsed during synchronization.

    Context keys:
        text: str — the offending date text
        line: int — 1-based line number within the source
        row: str — the full row
    """


class NumericParseError(IngestionError):
    """Value-column text does not parse as a decimal number.

    Context keys:
        text: str — the offending text
        field: str — the value column name
        line: int — 1-based line number within the source
    """


class SourceUnavailableError(IngestionError):
    """A source could not be opened for reading.

    Policy: fatal for the whole run. Sources after it are not read.

    Context keys:
        source: str — the path that failed to open
        reason: str — the underlying OS error message
    """


class EmptySourceError(IngestionError):
    """A source has no header line at all.

    Context keys:
        source: str — the empty source
    """
