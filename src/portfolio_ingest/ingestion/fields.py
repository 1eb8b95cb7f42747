"""Header field resolution: name -> zero-based column position."""

from __future__ import annotations

from portfolio_ingest.core.exceptions import FieldNotFoundError
from portfolio_ingest.core.models import FieldIndex


def strip_line_end(line: str) -> str:
    """Drop a trailing ``\\n`` or ``\\r\\n`` (or lone ``\\r``) from a line."""
    return line.rstrip("\r\n")


def resolve_field(header: str, field: str, delimiter: str = ",") -> FieldIndex:
    """Return the position of ``field`` within a delimited header line.

    Tokens are compared case-insensitively and with surrounding whitespace
    ignored. The first matching token wins.

        >>> resolve_field("Date,Open,High,Low,Close", "Low")
        3

    Raises
    ------
    FieldNotFoundError
        If no token of the header matches ``field``.
    """
    line = strip_line_end(header)
    wanted = field.strip().casefold()

    for index, token in enumerate(line.split(delimiter)):
        if token.strip().casefold() == wanted:
            return index

    raise FieldNotFoundError(
        f"Field ({field}) not found in header: {line}",
        context={"field": field, "header": line},
    )
