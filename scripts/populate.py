"""
Standalone population script: truncate the record table and refill it with
`NUM_RECORDS` synthetic records through the library call.

    NUM_RECORDS=5000 python scripts/populate.py
"""

from __future__ import annotations

import sys

import psycopg
import typer
from pydantic import ValidationError

from sqlvpy.config import get_settings
from sqlvpy.populate import populate
from sqlvpy.utils.logging import configure_logging, get_logger

log = get_logger("sqlvpy.scripts.populate")


def main() -> None:
    """
    Populate the table with NUM_RECORDS records, truncating it first.
    """
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        log.error(f"Invalid configuration: {exc}")
        raise typer.Exit(code=1) from exc
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        populate(settings.num_records, truncate=True)
    except psycopg.Error as exc:
        log.error(f"Population failed: {exc}", extra={"error_type": type(exc).__name__})
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    try:
        typer.run(main)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
