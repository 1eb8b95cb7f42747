"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from portfolio_ingest.core.exceptions import ConfigError
from portfolio_ingest.core.models import OptimizationModel, TCostModel


class IngestConfig(BaseModel):
    """How source files are read."""

    model_config = ConfigDict(frozen=True)

    delimiter: str = ","
    value_field: str = "Adj. Close"
    date_field: str = "date"
    encoding: str = "utf-8-sig"

    @field_validator("delimiter")
    @classmethod
    def delimiter_single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be exactly one character")
        if v in "\r\n\"'":
            raise ValueError("delimiter must not be a line break or quote character")
        return v

    @field_validator("value_field", "date_field")
    @classmethod
    def field_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("field names must not be blank")
        return v


class OptimizerConfig(BaseModel):
    """Optimization settings accepted by a run.

    Recorded and validated only; no optimization is performed.
    """

    model_config = ConfigDict(frozen=True)

    initial_capital: float = 0.0
    variance: float = 0.10
    mean_return: float = 0.05
    tcost_model: TCostModel = TCostModel.PER_TRADE
    tcost: float = 10.0
    models: list[OptimizationModel] = [OptimizationModel.MEAN_VARIANCE]

    @field_validator("initial_capital", "tcost")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @field_validator("models")
    @classmethod
    def models_not_empty(cls, v: list[OptimizationModel]) -> list[OptimizationModel]:
        if not v:
            raise ValueError("at least one model is required")
        return v


class AppConfig(BaseModel):
    """Root configuration for portfolio-ingest."""

    model_config = ConfigDict(frozen=True)

    ingest: IngestConfig = IngestConfig()
    optimizer: OptimizerConfig = OptimizerConfig()


ENV_PREFIX = "PORTFOLIO_INGEST_"
CONFIG_PATH_ENV = f"{ENV_PREFIX}CONFIG"
DEFAULT_CONFIG_FILE = Path("portfolio-ingest.yml")


def load_config(config_path: str | None = None) -> AppConfig:
    """Load configuration from environment + YAML file + defaults.

    Environment variables win over the YAML file, which wins over the
    built-in defaults. Nested keys use a double underscore:
        PORTFOLIO_INGEST_OPTIMIZER__VARIANCE=0.04  ->  optimizer.variance = 0.04

    Values are left as strings; pydantic coerces the numeric ones.
    """
    path = _resolve_config_path(config_path)
    settings = _load_yaml(path) if path is not None else {}
    settings = _merge_env_vars(settings, ENV_PREFIX)
    try:
        return AppConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigError(
            str(e),
            context={"source": str(path) if path is not None else "environment"},
        ) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Pick the YAML file: explicit path, then $PORTFOLIO_INGEST_CONFIG, then ./portfolio-ingest.yml."""
    candidate = explicit or os.environ.get(CONFIG_PATH_ENV)
    if candidate:
        path = Path(candidate)
        if not path.is_file():
            raise ConfigError(
                f"Config file not found: {candidate}",
                context={"path": candidate},
            )
        return path
    return DEFAULT_CONFIG_FILE if DEFAULT_CONFIG_FILE.is_file() else None


def _load_yaml(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(
            f"Failed to parse YAML config {path}: {e}",
            context={"path": str(path)},
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"YAML config must be a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay ``<prefix>SECTION__KEY`` variables onto a copy of ``base``."""
    result = {k: dict(v) if isinstance(v, dict) else v for k, v in base.items()}
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        parts = key[len(prefix) :].lower().split("__")
        # The config-path variable is not a setting
        if parts == ["config"]:
            continue
        target = result
        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]
        target[parts[-1]] = value
    return result
