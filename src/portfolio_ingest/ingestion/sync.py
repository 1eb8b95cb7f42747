"""Skip leading rows of a source until a begin date is reached."""

from __future__ import annotations

import logging

from portfolio_ingest.core.exceptions import (
    DateParseError,
    IngestionError,
    InvalidDateFormatError,
)
from portfolio_ingest.core.models import Instant
from portfolio_ingest.ingestion.cursor import RowCursor
from portfolio_ingest.ingestion.dates import format_date, parse_date
from portfolio_ingest.ingestion.fields import resolve_field
from portfolio_ingest.ingestion.rows import extract_column

logger = logging.getLogger(__name__)


def synchronize(
    cursor: RowCursor,
    begin: Instant,
    date_field: str = "date",
    delimiter: str = ",",
) -> Instant | None:
    """Advance ``cursor`` to the first row dated on or after ``begin``.

    Rows dated before ``begin`` are consumed. The first row that qualifies
    is left unconsumed, so the caller's next read returns it.

    This is a linear scan: on out-of-order input it stops at the first
    row encountered that satisfies the test.

    Returns
    -------
    Instant | None
        The qualifying row's date, or None if the source ran out first.
        None is a normal outcome, not an error.

    Raises
    ------
    FieldNotFoundError
        If the header has no ``date_field`` column.
    DateParseError
        If any row examined has an unparseable date.
    ColumnOutOfRangeError
        If a row is too short to contain the date column.
    """
    index = resolve_field(cursor.header, date_field, delimiter)

    while True:
        row = cursor.peek()
        if row is None:
            break

        try:
            text = extract_column(row, index, delimiter)
        except IngestionError as e:
            e.context.setdefault("source", cursor.source)
            e.context.setdefault("line", cursor.line_number)
            raise

        try:
            instant = parse_date(text)
        except InvalidDateFormatError as e:
            raise DateParseError(
                f"Failed to parse date {text!r} on line {cursor.line_number} "
                f"of {cursor.source}",
                context={
                    "text": text,
                    "line": cursor.line_number,
                    "row": row,
                    "source": cursor.source,
                },
            ) from e

        if instant >= begin:
            logger.debug(
                "Synchronized %s to %s at line %d",
                cursor.source,
                format_date(instant),
                cursor.line_number,
            )
            return instant

        cursor.advance()

    logger.debug("No row on or after %s in %s", format_date(begin), cursor.source)
    return None
