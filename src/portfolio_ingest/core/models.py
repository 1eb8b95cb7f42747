"""Pydantic data models — the system's type contracts."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from enum import StrEnum
from typing import NewType

from pydantic import BaseModel, ConfigDict, field_validator

# --- Type Aliases ---

Instant = NewType("Instant", int)
"""Seconds since 1970-01-01T00:00:00 UTC, always at midnight of a calendar day."""

FieldIndex = int
Ticker = str

# --- Enumerations ---


class TCostModel(StrEnum):
    """Ways of charging transaction costs."""

    PER_TRADE = "per_trade"
    PER_SHARE = "per_share"


class OptimizationModel(StrEnum):
    """Portfolio models a run may request."""

    MEAN_VARIANCE = "meanvar"


# --- Series Models ---


class PriceSeries(BaseModel):
    """Ordered price values read from a single source, in file order.

    ``start`` is the date of the first row read when the source was
    synchronized to a begin date, and None otherwise (or when no row
    qualified).
    """

    model_config = ConfigDict(frozen=True)

    source: str
    field: str
    start: date | None = None
    values: list[float]

    @field_validator("source")
    @classmethod
    def source_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("source must not be empty")
        return v

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:  # type: ignore[override]
        return iter(self.values)

    @property
    def first(self) -> float | None:
        return self.values[0] if self.values else None

    @property
    def last(self) -> float | None:
        return self.values[-1] if self.values else None
