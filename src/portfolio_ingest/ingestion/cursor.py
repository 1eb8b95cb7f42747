"""Peekable row cursor over a delimited source.

The cursor reads the header line once, up front, and then hands out data
rows one at a time. ``peek()`` looks at the next row without consuming it,
so a caller can decide whether to accept a row before taking it. This is
what lets the synchronizer stop *on* the first qualifying row without
seeking backwards in the underlying file.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Iterator

from portfolio_ingest.core.exceptions import EmptySourceError, IngestionError
from portfolio_ingest.ingestion.fields import strip_line_end

logger = logging.getLogger(__name__)


class RowCursor:
    """One-row look-ahead reader over the lines of a single source.

    Parameters
    ----------
    lines : Iterable[str]
        The raw lines of the source, terminators included or not. An open
        text file works, as does a list of strings.
    source : str
        Name used in error context (normally the file path).

    Raises
    ------
    EmptySourceError
        If the source does not even have a header line.
    """

    def __init__(self, lines: Iterable[str], source: str = "<stream>") -> None:
        self.source = source
        self._lines = iter(lines)
        self._line_number = 0
        self._pending: str | None = None

        header = self._read_line()
        if header is None:
            raise EmptySourceError(
                f"File is empty: {source}",
                context={"source": source},
            )
        # A byte-order mark survives decoding when the encoding is plain utf-8.
        self.header = strip_line_end(header).removeprefix("\ufeff")

    @classmethod
    def from_text(cls, text: str, source: str = "<text>") -> RowCursor:
        """Build a cursor over an in-memory block of text."""
        return cls(io.StringIO(text, newline=""), source=source)

    @property
    def line_number(self) -> int:
        """1-based line number of the row last returned by peek() or advance()."""
        return self._line_number

    def peek(self) -> str | None:
        """Return the next data row without consuming it, or None at the end."""
        if self._pending is None:
            self._pending = self._next_row()
        return self._pending

    def advance(self) -> str | None:
        """Consume and return the next data row, or None at the end."""
        row = self.peek()
        self._pending = None
        return row

    def __iter__(self) -> Iterator[str]:
        while True:
            row = self.advance()
            if row is None:
                return
            yield row

    def _next_row(self) -> str | None:
        # Blank lines (e.g. a stray trailing newline) are not records.
        while True:
            line = self._read_line()
            if line is None:
                return None
            if line.strip():
                return strip_line_end(line)
            logger.debug("Skipping blank line %d in %s", self._line_number, self.source)

    def _read_line(self) -> str | None:
        try:
            line = next(self._lines)
        except StopIteration:
            return None
        except UnicodeDecodeError as e:
            raise IngestionError(
                f"Could not decode {self.source}: {e}",
                context={"source": self.source},
            ) from e
        self._line_number += 1
        return line
