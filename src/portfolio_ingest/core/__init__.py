"""portfolio_ingest.core — Foundation types, config, and exceptions."""

from portfolio_ingest.core.config import (
    AppConfig,
    IngestConfig,
    OptimizerConfig,
    load_config,
)
from portfolio_ingest.core.exceptions import (
    ColumnOutOfRangeError,
    ConfigError,
    DateParseError,
    EmptySourceError,
    FieldNotFoundError,
    IngestionError,
    InvalidDateFormatError,
    NumericParseError,
    PortfolioIngestError,
    SourceUnavailableError,
)
from portfolio_ingest.core.models import (
    FieldIndex,
    Instant,
    OptimizationModel,
    PriceSeries,
    TCostModel,
    Ticker,
)

__all__ = [
    # Type aliases
    "FieldIndex",
    "Instant",
    "Ticker",
    # Enums
    "OptimizationModel",
    "TCostModel",
    # Series models
    "PriceSeries",
    # Config
    "AppConfig",
    "IngestConfig",
    "OptimizerConfig",
    "load_config",
    # Exceptions
    "PortfolioIngestError",
    "ConfigError",
    "IngestionError",
    "FieldNotFoundError",
    "ColumnOutOfRangeError",
    "InvalidDateFormatError",
    "DateParseError",
    "NumericParseError",
    "SourceUnavailableError",
    "EmptySourceError",
]
