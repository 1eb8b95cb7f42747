"""Single-column extraction from a delimited row."""

from __future__ import annotations

from portfolio_ingest.core.exceptions import ColumnOutOfRangeError
from portfolio_ingest.ingestion.fields import strip_line_end


def extract_column(row: str, index: int, delimiter: str = ",") -> str:
    """Return the raw text of column ``index`` in ``row``.

    The line terminator is dropped; any other whitespace inside the column
    is kept as-is for the caller to deal with.

    Raises
    ------
    ColumnOutOfRangeError
        If the row has fewer than ``index + 1`` segments.
    """
    line = strip_line_end(row)
    segments = line.split(delimiter)
    if index < 0 or index >= len(segments):
        raise ColumnOutOfRangeError(
            f"Column {index} out of range for row with {len(segments)} "
            f"segment(s): {line}",
            context={"index": index, "row": line, "segments": len(segments)},
        )
    return segments[index]
