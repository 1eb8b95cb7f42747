"""Price-series extraction from one source."""

from __future__ import annotations

import logging
import math
import re
from datetime import date

from portfolio_ingest.core.config import IngestConfig
from portfolio_ingest.core.exceptions import IngestionError, NumericParseError
from portfolio_ingest.core.models import PriceSeries
from portfolio_ingest.ingestion.cursor import RowCursor
from portfolio_ingest.ingestion.fields import resolve_field
from portfolio_ingest.ingestion.rows import extract_column

logger = logging.getLogger(__name__)

# Plain decimal literal: no nan/inf, no hex, no digit-group underscores.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_price(text: str) -> float:
    """Convert value-column text into a float.

    Surrounding whitespace is ignored. A literal zero is a valid price;
    only text that is not entirely a decimal number is an error.

    Raises
    ------
    NumericParseError
        If the text is empty, only partly numeric, or not finite.
    """
    candidate = text.strip()
    if not _DECIMAL_RE.fullmatch(candidate):
        raise NumericParseError(
            f"Failed to parse number: {text!r}",
            context={"text": text},
        )
    value = float(candidate)
    if not math.isfinite(value):
        raise NumericParseError(
            f"Number out of range: {text!r}",
            context={"text": text},
        )
    return value


class SeriesExtractor:
    """Reads the configured value column of a source into a PriceSeries.

    The value column is located once per source from the cursor's header.
    Every remaining row is then converted in file order; the first row
    that fails aborts the whole extraction.

    Parameters
    ----------
    config : IngestConfig | None
        Value field name and delimiter. Defaults to ``IngestConfig()``,
        i.e. the ``"Adj. Close"`` column of a comma-delimited file.
    """

    def __init__(self, config: IngestConfig | None = None) -> None:
        self._config = config or IngestConfig()

    def extract(
        self,
        cursor: RowCursor,
        max_rows: int | None = None,
        start: date | None = None,
    ) -> PriceSeries:
        """Read values from the cursor's current position to the end.

        Parameters
        ----------
        cursor : RowCursor
            Source to read. Reading begins at whatever row is next, so a
            cursor that was synchronized first yields only the rows from
            the begin date on.
        max_rows : int | None
            Stop after this many data rows. None reads everything.
        start : date | None
            Recorded on the series as its start date.
        """
        if max_rows is not None and max_rows < 0:
            raise ValueError(f"max_rows must be >= 0, got {max_rows}")

        field = self._config.value_field
        delimiter = self._config.delimiter
        index = resolve_field(cursor.header, field, delimiter)

        values: list[float] = []
        while max_rows is None or len(values) < max_rows:
            row = cursor.advance()
            if row is None:
                break
            try:
                values.append(parse_price(extract_column(row, index, delimiter)))
            except IngestionError as e:
                e.context.setdefault("source", cursor.source)
                e.context.setdefault("line", cursor.line_number)
                e.context.setdefault("field", field)
                raise

        logger.debug("Extracted %d %r values from %s", len(values), field, cursor.source)
        return PriceSeries(source=cursor.source, field=field, start=start, values=values)
