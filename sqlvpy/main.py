from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import psycopg
import typer
from pydantic import ValidationError

from sqlvpy.config import Settings, get_settings
from sqlvpy.domain.models import SMALLINT_MAX, SMALLINT_MIN
from sqlvpy.orchestrator import CrossCheckError, RunConfig, available_variants, run_benchmark
from sqlvpy.populate import populate as populate_records
from sqlvpy.reporter import print_results
from sqlvpy.utils.logging import configure_logging, get_logger

app = typer.Typer(help="sqlvpy: SQL vs. Python dual-predicate filtering benchmark.")
log = get_logger("sqlvpy")


def _bootstrap() -> Settings:
    """Load settings and configure logging; invalid configuration is fatal."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        log.error(f"Invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return settings


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = _bootstrap()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} "
        f"table={settings.db_table} | pool=({settings.db_pool_min_size},{settings.db_pool_max_size}) | "
        f"records={settings.num_records} candidates={settings.benchmark_candidates} "
        f"seed={settings.rng_seed}"
    )


@app.command()
def variants() -> None:
    """
    List available query variants.
    """
    typer.echo("\n".join(available_variants()))


@app.command()
def populate(
    records: Optional[int] = typer.Option(
        None,
        "--records",
        "-n",
        min=0,
        help="Number of records to insert (default: NUM_RECORDS).",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="RNG seed (default: RNG_SEED)."),
) -> None:
    """
    Truncate the table, then insert synthetic records one at a time.
    """
    settings = _bootstrap()
    total = records if records is not None else settings.num_records
    try:
        inserted = populate_records(total, truncate=True, seed=seed)
    except psycopg.Error as exc:
        log.error(f"Population failed: {exc}", extra={"error_type": type(exc).__name__})
        raise typer.Exit(code=1) from exc
    typer.echo(f"Inserted {inserted} records into {settings.db_table}.")


@app.command()
def bench(
    records: Optional[List[int]] = typer.Option(
        None,
        "--records",
        "-r",
        min=0,
        help="Record count to benchmark; repeat for several (default: BENCHMARK_RECORD_COUNTS).",
    ),
    variant: Optional[List[str]] = typer.Option(
        None,
        "--variant",
        "-v",
        help="Variant to run; repeat for several (default: all). See `variants`.",
    ),
    candidate: Optional[List[int]] = typer.Option(
        None,
        "--candidate",
        "-c",
        min=SMALLINT_MIN,
        max=SMALLINT_MAX,
        help="Candidate value for rstate/rtype; repeat for several (default: BENCHMARK_CANDIDATES).",
    ),
    runs: Optional[int] = typer.Option(None, "--runs", min=1, help="Measured runs per variant."),
    warmup: bool = typer.Option(False, "--warmup", help="Run each variant once before measuring."),
    skip_populate: bool = typer.Option(
        False, "--skip-populate", help="Benchmark the table as it is, without repopulating."
    ),
    no_persist: bool = typer.Option(False, "--no-persist", help="Do not write results JSON."),
    results_dir: Path = typer.Option(Path("results"), "--results-dir", help="Where to write results."),
    seed: Optional[int] = typer.Option(None, "--seed", help="RNG seed for population."),
) -> None:
    """
    Populate, run the query variants, cross-check row counts and report timings.
    """
    settings = _bootstrap()
    config = RunConfig(
        variant_names=variant or None,
        record_counts=records or None,
        candidates=candidate or None,
        runs=runs or settings.benchmark_runs,
        warmup=warmup,
        skip_populate=skip_populate,
        persist=not no_persist,
        results_dir=results_dir,
        seed=seed,
    )
    try:
        results = run_benchmark(config)
    except (psycopg.Error, ValidationError, CrossCheckError) as exc:
        log.error(f"Benchmark failed: {exc}", extra={"error_type": type(exc).__name__})
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    print_results(results)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
