"""Load one price series per source, in order."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from portfolio_ingest.core.config import IngestConfig
from portfolio_ingest.core.exceptions import ConfigError
from portfolio_ingest.core.models import Instant, PriceSeries
from portfolio_ingest.ingestion.dates import format_date, instant_to_date
from portfolio_ingest.ingestion.series import SeriesExtractor
from portfolio_ingest.ingestion.sources import open_source
from portfolio_ingest.ingestion.sync import synchronize

logger = logging.getLogger(__name__)


class MultiFileAligner:
    """Runs a SeriesExtractor over every source of a collection.

    Sources are opened, read to the end, and closed one at a time, in the
    order given. The first failure of any kind aborts the run: nothing is
    returned for sources that were already read.

    Series are not reconciled with each other. With ``align=True`` each
    source is only skipped forward to the begin date; lengths and calendars
    may still differ across sources.
    """

    def __init__(self, config: IngestConfig | None = None) -> None:
        self._config = config or IngestConfig()
        self._extractor = SeriesExtractor(self._config)

    def load(
        self,
        sources: Iterable[str | os.PathLike[str]],
        begin: Instant | None = None,
        end: Instant | None = None,
        align: bool = True,
        max_rows: int | None = None,
    ) -> list[PriceSeries]:
        """Extract one series per source.

        Parameters
        ----------
        sources : Iterable[str | PathLike]
            Source paths, in the order the result should follow.
        begin : Instant | None
            Synchronization date. Only used when ``align`` is true.
        end : Instant | None
            End of the requested range. Checked against ``begin`` but
            otherwise unused.
        align : bool
            Skip each source's rows dated before ``begin``. A source with
            no row on or after ``begin`` yields an empty series.
        max_rows : int | None
            Per-source cap on data rows read.

        Raises
        ------
        ConfigError
            If ``begin`` is after ``end``.
        SourceUnavailableError
            If any source cannot be opened.
        IngestionError
            Any parse failure in any source.
        """
        if begin is not None and end is not None and begin > end:
            raise ConfigError(
                f"Begin date {format_date(begin)} is after end date {format_date(end)}",
                context={"field": "begin", "value": format_date(begin)},
            )

        sync_to = begin if align else None
        results = [self._load_one(source, sync_to, max_rows) for source in sources]
        logger.debug("Loaded %d series", len(results))
        return results

    def _load_one(
        self,
        source: str | os.PathLike[str],
        begin: Instant | None,
        max_rows: int | None,
    ) -> PriceSeries:
        with open_source(source, encoding=self._config.encoding) as cursor:
            start = None
            if begin is not None:
                found = synchronize(
                    cursor,
                    begin,
                    date_field=self._config.date_field,
                    delimiter=self._config.delimiter,
                )
                if found is not None:
                    start = instant_to_date(found)
            # With no qualifying row the cursor is exhausted and this yields
            # an empty series, after still checking the value column exists.
            return self._extractor.extract(cursor, max_rows=max_rows, start=start)
