"""Opening sources on disk, and the file naming used for stored downloads."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from portfolio_ingest.core.exceptions import SourceUnavailableError
from portfolio_ingest.core.models import Instant, Ticker
from portfolio_ingest.ingestion.cursor import RowCursor
from portfolio_ingest.ingestion.dates import format_date

logger = logging.getLogger(__name__)


@contextmanager
def open_source(
    path: str | os.PathLike[str],
    encoding: str = "utf-8-sig",
) -> Iterator[RowCursor]:
    """Open a source file and yield a cursor positioned after its header.

    The file is closed when the block exits, whether normally or by an
    exception.

    Raises
    ------
    SourceUnavailableError
        If the file cannot be opened.
    EmptySourceError
        If the file has no header line.
    """
    name = os.fspath(path)
    try:
        # newline="" keeps "\r\n" intact; row parsing strips it.
        f = open(name, encoding=encoding, newline="")
    except OSError as e:
        raise SourceUnavailableError(
            f"Failed to open file: {name}",
            context={"source": name, "reason": e.strerror or str(e)},
        ) from e

    with f:
        logger.debug("Opened source %s", name)
        yield RowCursor(f, source=name)


def source_filename(
    dbroot: str | os.PathLike[str],
    ticker: Ticker,
    begin: Instant | None = None,
    end: Instant | None = None,
) -> Path:
    """Path where a downloaded series for ``ticker`` is stored.

    Stored downloads are named ``<TICKER>.<begin>.<end>.csv``, e.g.
    ``data/JPM.2018-01-01.2018-04-01.csv``. The date range only appears in
    the name when both ends are given.
    """
    name = ticker.strip().upper()
    if begin is not None and end is not None:
        name = f"{name}.{format_date(begin)}.{format_date(end)}"
    return Path(dbroot) / f"{name}.csv"
