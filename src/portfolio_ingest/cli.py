"""Click-based CLI for portfolio-ingest.

Thin wrapper around library modules. This is the one place that decides a
run has failed: library code raises, and the commands here report the
error and exit with status 1.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from portfolio_ingest.core import (
    ConfigError,
    FieldNotFoundError,
    OptimizerConfig,
    PortfolioIngestError,
    TCostModel,
)

console = Console(stderr=True)
logger = logging.getLogger(__name__)

_TCOST_MODELS = {"pt": TCostModel.PER_TRADE, "ps": TCostModel.PER_SHARE}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from portfolio_ingest.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _fail(exc: PortfolioIngestError, ctx: click.Context) -> None:
    """Report a library error and end the run."""
    console.print(f"[red]Error: {escape(str(exc))}[/red]")
    if ctx.obj.get("verbose") and exc.context:
        for key, value in exc.context.items():
            console.print(f"  {key}: {escape(str(value))}")
    raise SystemExit(1)


def _gather_inputs(
    begin: str | None,
    end: str | None,
    paths: tuple[str, ...],
) -> tuple[str, str, tuple[str, ...]]:
    """Fill in whatever was not given on the command line from stdin.

    Stdin holds, whitespace-separated: a begin date, an end date, then
    the source paths.
    """
    if begin is None or end is None or not paths:
        tokens = iter(click.get_text_stream("stdin").read().split())
        if begin is None:
            begin = next(tokens, None)
        if end is None:
            end = next(tokens, None)
        if not paths:
            paths = tuple(tokens)

    if begin is None or end is None:
        raise click.UsageError("A begin and an end date (YYYY-MM-DD) are required.")
    if not paths:
        raise click.UsageError("No source files given.")
    return begin, end, paths


def _resolve_sources(
    paths: tuple[str, ...],
    data_dir: str | None,
    begin,
    end,
) -> list[str]:
    """Map PATHS to source files, treating them as tickers under data_dir."""
    if data_dir is None:
        return list(paths)

    from portfolio_ingest.ingestion import source_filename

    return [str(source_filename(data_dir, ticker, begin, end)) for ticker in paths]


def _resolve_optimizer(base: OptimizerConfig, overrides: dict) -> OptimizerConfig:
    """Merge CLI overrides onto configured optimizer settings."""
    given = {k: v for k, v in overrides.items() if v is not None}

    def _defaulted(name: str) -> bool:
        return name not in given and name not in base.model_fields_set

    if _defaulted("models"):
        logger.warning(
            "No models specified, using default of %s",
            ", ".join(m.value for m in base.models),
        )
    if _defaulted("tcost_model"):
        logger.warning(
            "No transaction cost model specified, using default of %.2f %s",
            base.tcost,
            base.tcost_model.value,
        )
    if _defaulted("variance"):
        logger.warning("Variance not specified. Using default value %.4f", base.variance)
    if _defaulted("mean_return"):
        logger.warning("Mean return not specified. Using default value %.4f", base.mean_return)

    try:
        return OptimizerConfig.model_validate({**base.model_dump(), **given})
    except ValidationError as e:
        raise ConfigError(str(e), context={"source": "cli"}) from e


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="PORTFOLIO_INGEST_CONFIG",
    default=None,
    help="Path to portfolio-ingest.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="portfolio-ingest")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """Portfolio Ingest: aligned price series from per-instrument CSV files."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = console
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("paths", nargs=-1)
@click.option("--begin", "-b", default=None, help="Begin date (YYYY-MM-DD). Read from stdin if omitted.")
@click.option("--end", "-e", default=None, help="End date (YYYY-MM-DD). Read from stdin if omitted.")
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(file_okay=False),
    default=None,
    help="Treat PATHS as tickers stored in this directory as TICKER.BEGIN.END.csv.",
)
@click.option(
    "--align/--no-align",
    default=True,
    help="Skip each source's rows dated before the begin date.",
)
@click.option(
    "--max-rows",
    type=click.IntRange(min=0),
    default=None,
    help="Read at most this many data rows per source.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option("--capital", type=float, default=None, help="Initial capital.")
@click.option(
    "--tcost-model",
    type=click.Choice(["pt", "ps"], case_sensitive=False),
    default=None,
    help="Transaction cost model: 'pt' per trade, 'ps' per share.",
)
@click.option("--tcost", type=float, default=None, help="Transaction cost amount.")
@click.option(
    "--model",
    "-m",
    "models",
    type=click.Choice(["meanvar"], case_sensitive=False),
    multiple=True,
    help="Optimization model (repeatable).",
)
@click.option("--variance", type=float, default=None, help="Maximum portfolio variance (decimal).")
@click.option("--return", "mean_return", type=float, default=None, help="Minimum mean return (decimal).")
@click.pass_context
def load(
    ctx: click.Context,
    paths: tuple[str, ...],
    begin: str | None,
    end: str | None,
    data_dir: str | None,
    align: bool,
    max_rows: int | None,
    output_format: str,
    capital: float | None,
    tcost_model: str | None,
    tcost: float | None,
    models: tuple[str, ...],
    variance: float | None,
    mean_return: float | None,
) -> None:
    """Load one price series per source file.

    The begin date, end date, and source paths may also be supplied on
    stdin, in that order, separated by whitespace.
    """
    from portfolio_ingest.ingestion import MultiFileAligner, parse_date

    begin_text, end_text, paths = _gather_inputs(begin, end, paths)

    try:
        config = _load_config(ctx)
        begin_at = parse_date(begin_text)
        end_at = parse_date(end_text)
        optimizer = _resolve_optimizer(
            config.optimizer,
            {
                "initial_capital": capital,
                "tcost_model": _TCOST_MODELS[tcost_model.lower()] if tcost_model else None,
                "tcost": tcost,
                "models": [m.lower() for m in models] or None,
                "variance": variance,
                "mean_return": mean_return,
            },
        )
        sources = _resolve_sources(paths, data_dir, begin_at, end_at)
        aligner = MultiFileAligner(config.ingest)
        series = aligner.load(
            sources,
            begin=begin_at,
            end=end_at,
            align=align,
            max_rows=max_rows,
        )
    except PortfolioIngestError as exc:
        _fail(exc, ctx)

    if output_format == "json":
        _output_series_json(series, begin_text, end_text, optimizer)
    else:
        _output_series_table(series, begin_text, end_text, optimizer)


def _output_series_table(series, begin: str, end: str, optimizer: OptimizerConfig) -> None:
    """Render loaded series as a Rich table."""
    table = Table(title=f"Price Series: {begin} → {end}")
    table.add_column("Source", style="bold")
    table.add_column("Rows", justify="right")
    table.add_column("Start")
    table.add_column("First", justify="right")
    table.add_column("Last", justify="right")

    for s in series:
        table.add_row(
            Path(s.source).name,
            str(len(s)),
            str(s.start) if s.start else "",
            f"{s.first:.4f}" if s.first is not None else "",
            f"{s.last:.4f}" if s.last is not None else "",
        )

    console.print(table)
    console.print(
        f"  Models: {', '.join(m.value for m in optimizer.models)}  |  "
        f"Variance: {optimizer.variance:.4f}  |  "
        f"Mean return: {optimizer.mean_return:.4f}  |  "
        f"Costs: {optimizer.tcost:.2f} {optimizer.tcost_model.value}"
    )


def _output_series_json(series, begin: str, end: str, optimizer: OptimizerConfig) -> None:
    """Write loaded series as JSON to stdout."""
    output = {
        "begin": begin,
        "end": end,
        "optimizer": optimizer.model_dump(mode="json"),
        "series": [s.model_dump(mode="json") for s in series],
    }
    click.echo(json.dumps(output, indent=2, default=str))


# ---------------------------------------------------------------------------
# sync
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--begin", "-b", required=True, help="Synchronization date (YYYY-MM-DD).")
@click.pass_context
def sync(ctx: click.Context, paths: tuple[str, ...], begin: str) -> None:
    """Show where each source would start for a given begin date."""
    from portfolio_ingest.ingestion import format_date, open_source, parse_date, synchronize

    table = Table(title=f"Synchronized to {begin}")
    table.add_column("Source", style="bold")
    table.add_column("First date")
    table.add_column("Line", justify="right")

    try:
        config = _load_config(ctx)
        begin_at = parse_date(begin)
        for path in paths:
            with open_source(path, encoding=config.ingest.encoding) as cursor:
                found = synchronize(
                    cursor,
                    begin_at,
                    date_field=config.ingest.date_field,
                    delimiter=config.ingest.delimiter,
                )
                if found is None:
                    table.add_row(Path(path).name, "[yellow]not found[/yellow]", "")
                else:
                    table.add_row(Path(path).name, format_date(found), str(cursor.line_number))
    except PortfolioIngestError as exc:
        _fail(exc, ctx)

    console.print(table)


# ---------------------------------------------------------------------------
# fields
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path")
@click.pass_context
def fields(ctx: click.Context, path: str) -> None:
    """List the header fields of a source file."""
    from portfolio_ingest.ingestion import open_source, resolve_field

    try:
        config = _load_config(ctx)
        with open_source(path, encoding=config.ingest.encoding) as cursor:
            header = cursor.header
    except PortfolioIngestError as exc:
        _fail(exc, ctx)

    delimiter = config.ingest.delimiter
    roles: dict[int, str] = {}
    for role, name in (("date", config.ingest.date_field), ("value", config.ingest.value_field)):
        try:
            roles[resolve_field(header, name, delimiter)] = role
        except FieldNotFoundError:
            console.print(f"[yellow]No {role} column ({escape(repr(name))}) in header.[/yellow]")

    table = Table(title=Path(path).name)
    table.add_column("Index", justify="right")
    table.add_column("Field", style="bold")
    table.add_column("Role")
    for index, token in enumerate(header.split(delimiter)):
        table.add_row(str(index), escape(token), roles.get(index, ""))

    console.print(table)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
