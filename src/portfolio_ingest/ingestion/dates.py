"""Fixed-format calendar dates <-> integral Instants.

Instants are seconds since the Unix epoch at UTC midnight of the calendar
day, so two Instants are equal exactly when their dates are equal, no matter
which source produced them. The local timezone is never consulted.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

from portfolio_ingest.core.exceptions import InvalidDateFormatError
from portfolio_ingest.core.models import Instant

DATE_FORMAT = "%Y-%m-%d"

_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SECONDS_PER_DAY = 86_400


def date_to_instant(d: date) -> Instant:
    """Convert a calendar date to its Instant."""
    return Instant((d - _EPOCH.date()).days * _SECONDS_PER_DAY)


def instant_to_date(instant: Instant) -> date:
    """Convert an Instant back to its calendar date."""
    return (_EPOCH + timedelta(seconds=instant)).date()


def parse_date(text: str) -> Instant:
    """Parse ``YYYY-MM-DD`` text into an Instant.

    The whole text must match; no surrounding whitespace or trailing time
    component is accepted. Dates that do not exist on the calendar
    (``2018-02-30``, month 13) are rejected rather than rolled over.

    Raises
    ------
    InvalidDateFormatError
        If the text has the wrong shape or names a nonexistent day.
    """
    m = _DATE_RE.fullmatch(text)
    if m is None:
        raise InvalidDateFormatError(
            f"Error parsing date: {text!r} (expected YYYY-MM-DD)",
            context={"text": text},
        )
    year, month, day = (int(g) for g in m.groups())
    try:
        d = date(year, month, day)
    except ValueError as e:
        raise InvalidDateFormatError(
            f"Error parsing date: {text!r} ({e})",
            context={"text": text},
        ) from e
    return date_to_instant(d)


def format_date(instant: Instant) -> str:
    """Render an Instant as ``YYYY-MM-DD``."""
    return instant_to_date(instant).strftime(DATE_FORMAT)
